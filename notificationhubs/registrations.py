"""Registration descriptions for every supported push platform.

A registration subscribes one device handle to a notification hub. Native
registrations carry only the platform handle; template registrations also
carry a body template (and, for some platforms, delivery headers) rendered by
the service for each recipient.

Call ``validate()`` before sending a registration to the service. Validation
raises an ``InvalidDataContractError`` subclass on the first failed rule.
"""
import copy
import json
import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple
from urllib.parse import urlparse

from . import config
from .errors import (
    InvalidDataContractError,
    InvalidUrlError,
    LimitExceededError,
    MalformedPayloadError,
    MissingRequiredFieldError,
    ADM_REGISTRATION_ID_INVALID,
    APNS_EXPIRY_HEADER_DESERIALIZATION_ERROR,
    APNS_HEADER_DESERIALIZATION_ERROR,
    BAIDU_REGISTRATION_INVALID_ID,
    CANNOT_SPECIFY_EXPIRATION_TIME,
    CHANNEL_URI_NULL_OR_EMPTY,
    DEVICE_TOKEN_HEXADECIMAL_DIGIT_ERROR,
    DEVICE_TOKEN_IS_EMPTY,
    EMPTY_EXPIRY_VALUE,
    EMPTY_PRIORITY_VALUE,
    EXPIRY_DESERIALIZATION_ERROR,
    FCM_REGISTRATION_ID_INVALID,
    INVALID_PAYLOAD_FORMAT,
    INVALID_XML_BODY_TEMPLATE,
    MISSING_MPNS_HEADER,
    MISSING_WNS_HEADER,
    MPNS_HEADER_NULL_OR_EMPTY,
    PRIORITY_DESERIALIZATION_ERROR,
    TEMPLATE_NAME_LENGTH_EXCEEDS_LIMIT,
    WNS_HEADER_NULL_OR_EMPTY,
)
from .expressions import ExpressionEvaluator
from .headers import ApnsHeaderCollection, HeaderCollection, MpnsHeaderCollection, WnsHeaderCollection
from .logging_config import HubLogger
from .payloads import (
    TemplateExpression,
    is_json_object_payload,
    is_xml_payload,
    validate_json_template,
    validate_xml_template,
)
from .tags import TagValidator, join_tags, normalize_tags

logger = HubLogger("registrations")

TEMPLATE_REGISTRATION_TYPE = "template"
TEMPLATE_MAX_LENGTH = 200

# WNS
WNS_TYPE_HEADER = "X-WNS-Type"
WNS_RAW = "wns/raw"
WNS_BADGE = "wns/badge"
WNS_TILE = "wns/tile"
WNS_TOAST = "wns/toast"

# MPNS
MPNS_TYPE_HEADER = "X-WindowsPhone-Target"
MPNS_NOTIFICATION_CLASS_HEADER = "X-NotificationClass"
MPNS_TILE = "token"
MPNS_TOAST = "toast"
MPNS_TILE_CLASS = "1"
MPNS_TOAST_CLASS = "2"

# APNS
APNS_HEADER_PREFIX = "apns-"
APNS_EXPIRY_HEADER = "apns-expiration"
APNS_PRIORITY_HEADER = "apns-priority"

_HEX_PATTERN = re.compile(r'^[a-fA-F0-9]+$')
_BYTE_PATTERN = re.compile(r'^\s*\+?\d+\s*$')
_INT_PATTERN = re.compile(r'^\s*[+-]?\d+\s*$')
_DATETIME_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y",
    "%a, %d %b %Y %H:%M:%S GMT",
)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _is_byte(value: str) -> bool:
    return bool(_BYTE_PATTERN.match(value)) and 0 <= int(value) <= 255


def _is_int32(value: str) -> bool:
    return bool(_INT_PATTERN.match(value)) and -2**31 <= int(value) < 2**31


def _is_datetime(value: str) -> bool:
    text = value.strip()
    try:
        datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
        return True
    except ValueError:
        pass
    for fmt in _DATETIME_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


def _is_absolute_uri(value: Optional[str]) -> bool:
    if _is_blank(value):
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


def _require_body_template(body_template: Optional[str]) -> str:
    if _is_blank(body_template):
        raise ValueError("body_template is required")
    return body_template


def check_template_name(template_name: Optional[str]) -> None:
    """Raise LimitExceededError if a template name is over the limit."""
    if template_name is not None and len(template_name) > TEMPLATE_MAX_LENGTH:
        raise LimitExceededError(
            TEMPLATE_NAME_LENGTH_EXCEEDS_LIMIT,
            f"Template name length exceeds the limit of {TEMPLATE_MAX_LENGTH} characters",
            {"limit": TEMPLATE_MAX_LENGTH, "length": len(template_name)},
        )


def validate_header_values(
    headers: Optional[HeaderCollection],
    required_header: str,
    missing_code: str,
    empty_code: str,
) -> None:
    """Check a required header is present and every value is a valid template value."""
    if headers is None or _is_blank(headers.get(required_header)):
        raise MissingRequiredFieldError(
            missing_code,
            f"The {required_header} header is missing",
            {"header": required_header},
        )

    for name, value in headers.items():
        if _is_blank(value):
            raise MissingRequiredFieldError(
                empty_code,
                f"The value of the {name} header is null or empty",
                {"header": name},
            )
        ExpressionEvaluator.validate(value)


class RegistrationDescription:
    """Base class for all registrations.

    Attributes:
        registration_id: Server-assigned or pre-reserved identifier
        etag: Version token; required for updates, ``"*"`` matches any
        expiration_time: Set by the service; must be None on client input
        push_variables: Values substituted into template expressions
        notification_hub_path: Hub the registration belongs to, or empty
    """

    platform = ""
    registration_type = ""
    element_name = "RegistrationDescription"

    # (wire element name, attribute name) for platform specific fields
    wire_fields: Tuple[Tuple[str, str], ...] = ()

    def __init__(
        self,
        tags: Optional[Iterable[str]] = None,
        notification_hub_path: str = "",
        registration_id: Optional[str] = None,
    ):
        self.notification_hub_path = notification_hub_path
        self.registration_id = registration_id
        self.etag: Optional[str] = None
        self.expiration_time: Optional[datetime] = None
        self.push_variables: Optional[Dict[str, str]] = None
        self._tags: Set[str] = set()
        self._invalid_tags = False
        if tags is not None:
            self.tags = tags

    @property
    def tags(self) -> Set[str]:
        return self._tags

    @tags.setter
    def tags(self, value: Optional[Iterable[str]]) -> None:
        self._tags = normalize_tags(value)

    @property
    def tags_string(self) -> Optional[str]:
        return join_tags(self._tags)

    @tags_string.setter
    def tags_string(self, value: Optional[str]) -> None:
        self.set_tags_string(value, validate=True)

    @property
    def invalid_tags(self) -> bool:
        """True when the last validated tag string was discarded."""
        return self._invalid_tags

    def set_tags_string(self, value: Optional[str], validate: bool = False) -> None:
        """Replace the tag set from its serialized form.

        With ``validate=True`` an invalid string, or any tag over the maximum
        length, empties the tag set and sets ``invalid_tags`` instead of
        raising.
        """
        tags = normalize_tags(tag for tag in value.split(",") if tag) if value else set()
        self._invalid_tags = False

        if validate:
            self._invalid_tags = bool(value) and not TagValidator.validate_tags(value)
            if not self._invalid_tags:
                self._invalid_tags = any(len(tag) > TagValidator.MAX_TAG_LENGTH for tag in tags)

        if self._invalid_tags:
            logger.warning(
                "Discarding invalid tags",
                registration_id=self.registration_id,
                tag_count=TagValidator.tag_count(value),
            )
            self._tags = set()
        else:
            self._tags = tags

    @property
    def property_bag_string(self) -> Optional[str]:
        if self.push_variables:
            return json.dumps(self.push_variables)
        return None

    @property_bag_string.setter
    def property_bag_string(self, value: Optional[str]) -> None:
        if not value:
            return
        self.push_variables = json.loads(value)

    @property
    def formatted_etag(self) -> str:
        return f'W/"{self.etag}"'

    @property
    def pns_handle(self) -> Optional[str]:
        raise NotImplementedError

    @staticmethod
    def validate_tags(tags: str) -> bool:
        return TagValidator.validate_tags(tags)

    @staticmethod
    def tag_count(tags: str) -> int:
        return TagValidator.tag_count(tags)

    def validate(
        self,
        api_version: str = config.API_VERSION,
        check_expiration_time: bool = True,
    ) -> None:
        """Validate the registration before it is sent to the service.

        Args:
            api_version: Management API version the request will use
            check_expiration_time: Reject a client-supplied expiration time

        Raises:
            InvalidDataContractError: On the first failed rule
            ValueError: If ``api_version`` is not a supported version
        """
        config.ensure_supported_api_version(api_version)
        if check_expiration_time and self.expiration_time is not None:
            raise InvalidDataContractError(
                CANNOT_SPECIFY_EXPIRATION_TIME,
                "The expiration time is set by the service and cannot be specified",
            )
        self.on_validate(api_version)

    def on_validate(self, api_version: str) -> None:
        pass

    def clone(self) -> "RegistrationDescription":
        """Copy the registration for modification; the expiration time is not copied."""
        duplicate = copy.deepcopy(self)
        duplicate.expiration_time = None
        return duplicate

    def serialize(self) -> str:
        from .serialization import serialize_registration

        self.validate(check_expiration_time=False)
        return serialize_registration(self)

    @staticmethod
    def deserialize(text: str) -> "RegistrationDescription":
        from .serialization import deserialize_registration

        return deserialize_registration(text)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(registration_id={self.registration_id!r}, "
                f"pns_handle={self.pns_handle!r}, tags={self.tags_string!r})")


class _ChannelUriRegistration(RegistrationDescription):
    """Registration addressed by a channel URI (WNS and MPNS)."""

    secondary_tile_name: Optional[str] = None
    wire_fields = (("ChannelUri", "channel_uri"), ("SecondaryTileName", "secondary_tile_name"))

    def __init__(self, channel_uri: str, tags: Optional[Iterable[str]] = None, **kwargs):
        super().__init__(tags, **kwargs)
        if _is_blank(channel_uri):
            raise ValueError("channel_uri is required")
        self.channel_uri = channel_uri

    @property
    def pns_handle(self) -> Optional[str]:
        return self.channel_uri

    def is_mock_channel(self) -> bool:
        return "cloudapp.net" in (urlparse(self.channel_uri or "").hostname or "")

    def on_validate(self, api_version: str) -> None:
        if not _is_absolute_uri(self.channel_uri):
            raise InvalidUrlError(
                CHANNEL_URI_NULL_OR_EMPTY,
                "The channel URI must be a non-empty absolute URI",
                {"channel_uri": self.channel_uri},
            )


class _XmlOrJsonTemplateMixin:
    """Body validation shared by WNS and MPNS templates."""

    body_template: str
    template_expressions: Tuple[TemplateExpression, ...] = ()

    def is_xml_payload(self) -> bool:
        return is_xml_payload(self.body_template)

    def is_json_object_payload(self) -> bool:
        return is_json_object_payload(self.body_template)

    def _validate_body(self) -> None:
        if self.is_xml_payload():
            error = MalformedPayloadError(
                INVALID_XML_BODY_TEMPLATE, "The body template is not well-formed XML")
            self.template_expressions = tuple(validate_xml_template(self.body_template, error))
        elif self.is_json_object_payload():
            validate_json_template(self.body_template)
        else:
            raise MalformedPayloadError(
                INVALID_PAYLOAD_FORMAT,
                "The body template must be an XML document or a JSON object",
            )


class WindowsRegistrationDescription(_ChannelUriRegistration):
    """Native Windows Notification Service (WNS) registration."""

    platform = "windows"
    registration_type = "windows"
    element_name = "WindowsRegistrationDescription"


class WindowsTemplateRegistrationDescription(_XmlOrJsonTemplateMixin, WindowsRegistrationDescription):
    """WNS template registration with an XML or JSON body and WNS headers."""

    registration_type = TEMPLATE_REGISTRATION_TYPE
    element_name = "WindowsTemplateRegistrationDescription"
    template_name: Optional[str] = None
    wire_fields = _ChannelUriRegistration.wire_fields + (
        ("BodyTemplate", "body_template"),
        ("WnsHeaders", "wns_headers"),
        ("TemplateName", "template_name"),
    )

    def __init__(
        self,
        channel_uri: str,
        body_template: str,
        wns_headers: Optional[Dict[str, str]] = None,
        tags: Optional[Iterable[str]] = None,
        template_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(channel_uri, tags, **kwargs)
        self.body_template = _require_body_template(body_template)
        self.wns_headers: Optional[WnsHeaderCollection] = WnsHeaderCollection(wns_headers)
        self.template_name = template_name

    def on_validate(self, api_version: str) -> None:
        super().on_validate(api_version)
        validate_header_values(
            self.wns_headers, WNS_TYPE_HEADER, MISSING_WNS_HEADER, WNS_HEADER_NULL_OR_EMPTY)
        self._validate_body()
        check_template_name(self.template_name)


class MpnsRegistrationDescription(_ChannelUriRegistration):
    """Native Microsoft Push Notification Service (Windows Phone) registration."""

    platform = "windowsphone"
    registration_type = "windowsphone"
    element_name = "MpnsRegistrationDescription"


class MpnsTemplateRegistrationDescription(_XmlOrJsonTemplateMixin, MpnsRegistrationDescription):
    """MPNS template registration with an XML or JSON body and MPNS headers."""

    registration_type = TEMPLATE_REGISTRATION_TYPE
    element_name = "MpnsTemplateRegistrationDescription"
    template_name: Optional[str] = None
    wire_fields = _ChannelUriRegistration.wire_fields + (
        ("BodyTemplate", "body_template"),
        ("MpnsHeaders", "mpns_headers"),
        ("TemplateName", "template_name"),
    )

    def __init__(
        self,
        channel_uri: str,
        body_template: str,
        mpns_headers: Optional[Dict[str, str]] = None,
        tags: Optional[Iterable[str]] = None,
        template_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(channel_uri, tags, **kwargs)
        self.body_template = _require_body_template(body_template)
        self.mpns_headers: Optional[MpnsHeaderCollection] = MpnsHeaderCollection(mpns_headers)
        self.template_name = template_name

    def on_validate(self, api_version: str) -> None:
        super().on_validate(api_version)
        validate_header_values(
            self.mpns_headers, MPNS_NOTIFICATION_CLASS_HEADER,
            MISSING_MPNS_HEADER, MPNS_HEADER_NULL_OR_EMPTY)
        self._validate_body()
        check_template_name(self.template_name)


class AppleRegistrationDescription(RegistrationDescription):
    """Native Apple Push Notification service registration."""

    platform = "apple"
    registration_type = "apple"
    element_name = "AppleRegistrationDescription"
    wire_fields = (("DeviceToken", "device_token"),)

    def __init__(self, device_token: str, tags: Optional[Iterable[str]] = None, **kwargs):
        super().__init__(tags, **kwargs)
        if _is_blank(device_token):
            raise ValueError("device_token is required")
        self.device_token = device_token

    @property
    def pns_handle(self) -> Optional[str]:
        return self.device_token.upper() if self.device_token else self.device_token

    def device_token_bytes(self) -> bytes:
        """Decode the hexadecimal device token.

        Raises:
            InvalidDataContractError: If the token is blank or not hexadecimal
        """
        self._validate_device_token()
        return bytes.fromhex(self.device_token)

    def _validate_device_token(self) -> None:
        if _is_blank(self.device_token):
            raise MissingRequiredFieldError(
                DEVICE_TOKEN_IS_EMPTY, "The device token is empty")
        if not _HEX_PATTERN.match(self.device_token) or len(self.device_token) % 2 != 0:
            raise MalformedPayloadError(
                DEVICE_TOKEN_HEXADECIMAL_DIGIT_ERROR,
                "The device token must be an even number of hexadecimal digits",
            )

    def on_validate(self, api_version: str) -> None:
        self._validate_device_token()


class AppleTemplateRegistrationDescription(AppleRegistrationDescription):
    """APNs template registration with a JSON body, expiry, priority and APNs headers."""

    registration_type = TEMPLATE_REGISTRATION_TYPE
    element_name = "AppleTemplateRegistrationDescription"
    template_name: Optional[str] = None
    expiry: Optional[str] = None
    priority: Optional[str] = None
    wire_fields = AppleRegistrationDescription.wire_fields + (
        ("BodyTemplate", "body_template"),
        ("Expiry", "expiry"),
        ("TemplateName", "template_name"),
        ("Priority", "priority"),
        ("ApnsHeaders", "apns_headers"),
    )

    def __init__(
        self,
        device_token: str,
        body_template: str,
        apns_headers: Optional[Dict[str, str]] = None,
        tags: Optional[Iterable[str]] = None,
        expiry: Optional[str] = None,
        priority: Optional[str] = None,
        template_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(device_token, tags, **kwargs)
        self.body_template = _require_body_template(body_template)
        self.apns_headers: Optional[ApnsHeaderCollection] = ApnsHeaderCollection(apns_headers)
        self.expiry = expiry
        self.priority = priority
        self.template_name = template_name

    def on_validate(self, api_version: str) -> None:
        super().on_validate(api_version)

        if self.expiry is not None:
            if self.expiry == "":
                raise MalformedPayloadError(EMPTY_EXPIRY_VALUE, "The expiry value is empty")
            if ExpressionEvaluator.validate(self.expiry).is_literal:
                if not _is_datetime(self.expiry) and self.expiry != "0":
                    raise MalformedPayloadError(
                        EXPIRY_DESERIALIZATION_ERROR,
                        "The expiry must be a date and time, '0' or an expression",
                        {"expiry": self.expiry},
                    )

        if self.priority is not None:
            if self.priority == "":
                raise MalformedPayloadError(EMPTY_PRIORITY_VALUE, "The priority value is empty")
            if ExpressionEvaluator.validate(self.priority).is_literal and not _is_byte(self.priority):
                raise MalformedPayloadError(
                    PRIORITY_DESERIALIZATION_ERROR,
                    "The priority must be a number between 0 and 255 or an expression",
                    {"priority": self.priority},
                )

        if self.apns_headers is not None:
            self._validate_apns_headers()

        validate_json_template(self.body_template)
        check_template_name(self.template_name)

    def _validate_apns_headers(self) -> None:
        headers = self.apns_headers
        priority = headers.get(APNS_PRIORITY_HEADER)
        if priority is not None and ExpressionEvaluator.validate(priority).is_literal:
            if not _is_byte(priority):
                raise MalformedPayloadError(
                    PRIORITY_DESERIALIZATION_ERROR,
                    f"The {APNS_PRIORITY_HEADER} header must be a number between 0 and 255",
                    {"header": APNS_PRIORITY_HEADER},
                )

        expiration = headers.get(APNS_EXPIRY_HEADER)
        if expiration is not None and ExpressionEvaluator.validate(expiration).is_literal:
            if not _is_int32(expiration):
                raise MalformedPayloadError(
                    APNS_EXPIRY_HEADER_DESERIALIZATION_ERROR,
                    f"The {APNS_EXPIRY_HEADER} header must be an integer",
                    {"header": APNS_EXPIRY_HEADER},
                )

        for name, value in headers.items():
            if not name.lower().startswith(APNS_HEADER_PREFIX):
                raise MalformedPayloadError(
                    APNS_HEADER_DESERIALIZATION_ERROR,
                    f"The header {name} is not an APNs header; "
                    f"header names must start with '{APNS_HEADER_PREFIX}'",
                    {"header": name},
                )
            ExpressionEvaluator.validate(value)


class _JsonTemplateMixin:
    """JSON body and template name validation shared by ADM, FCM and Baidu."""

    body_template: str
    template_name: Optional[str] = None

    def _validate_template(self) -> None:
        validate_json_template(self.body_template)
        check_template_name(self.template_name)


class AdmRegistrationDescription(RegistrationDescription):
    """Native Amazon Device Messaging registration."""

    platform = "adm"
    registration_type = "adm"
    element_name = "AdmRegistrationDescription"
    wire_fields = (("AdmRegistrationId", "adm_registration_id"),)

    def __init__(self, adm_registration_id: str, tags: Optional[Iterable[str]] = None, **kwargs):
        super().__init__(tags, **kwargs)
        if _is_blank(adm_registration_id):
            raise ValueError("adm_registration_id is required")
        self.adm_registration_id = adm_registration_id

    @property
    def pns_handle(self) -> Optional[str]:
        return self.adm_registration_id

    def on_validate(self, api_version: str) -> None:
        if _is_blank(self.adm_registration_id):
            raise MissingRequiredFieldError(
                ADM_REGISTRATION_ID_INVALID, "The ADM registration id is empty")


class AdmTemplateRegistrationDescription(_JsonTemplateMixin, AdmRegistrationDescription):
    registration_type = TEMPLATE_REGISTRATION_TYPE
    element_name = "AdmTemplateRegistrationDescription"
    wire_fields = AdmRegistrationDescription.wire_fields + (
        ("BodyTemplate", "body_template"),
        ("TemplateName", "template_name"),
    )

    def __init__(
        self,
        adm_registration_id: str,
        body_template: str,
        tags: Optional[Iterable[str]] = None,
        template_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(adm_registration_id, tags, **kwargs)
        self.body_template = _require_body_template(body_template)
        self.template_name = template_name

    def on_validate(self, api_version: str) -> None:
        super().on_validate(api_version)
        self._validate_template()


class FcmRegistrationDescription(RegistrationDescription):
    """Native Firebase Cloud Messaging registration."""

    platform = "gcm"
    registration_type = "gcm"
    element_name = "FcmRegistrationDescription"
    wire_fields = (("FcmRegistrationId", "fcm_registration_id"),)

    def __init__(self, fcm_registration_id: str, tags: Optional[Iterable[str]] = None, **kwargs):
        super().__init__(tags, **kwargs)
        if _is_blank(fcm_registration_id):
            raise ValueError("fcm_registration_id is required")
        self.fcm_registration_id = fcm_registration_id

    @property
    def pns_handle(self) -> Optional[str]:
        return self.fcm_registration_id

    def on_validate(self, api_version: str) -> None:
        if _is_blank(self.fcm_registration_id):
            raise MissingRequiredFieldError(
                FCM_REGISTRATION_ID_INVALID, "The FCM registration id is empty")


class FcmTemplateRegistrationDescription(_JsonTemplateMixin, FcmRegistrationDescription):
    registration_type = TEMPLATE_REGISTRATION_TYPE
    element_name = "FcmTemplateRegistrationDescription"
    wire_fields = FcmRegistrationDescription.wire_fields + (
        ("BodyTemplate", "body_template"),
        ("TemplateName", "template_name"),
    )

    def __init__(
        self,
        fcm_registration_id: str,
        body_template: str,
        tags: Optional[Iterable[str]] = None,
        template_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(fcm_registration_id, tags, **kwargs)
        self.body_template = _require_body_template(body_template)
        self.template_name = template_name

    def on_validate(self, api_version: str) -> None:
        super().on_validate(api_version)
        self._validate_template()


class BaiduRegistrationDescription(RegistrationDescription):
    """Native Baidu cloud push registration."""

    platform = "baidu"
    registration_type = "baidu"
    element_name = "BaiduRegistrationDescription"
    wire_fields = (("BaiduUserId", "baidu_user_id"), ("BaiduChannelId", "baidu_channel_id"))

    def __init__(
        self,
        baidu_user_id: Optional[str],
        baidu_channel_id: str,
        tags: Optional[Iterable[str]] = None,
        **kwargs,
    ):
        super().__init__(tags, **kwargs)
        self.baidu_user_id = baidu_user_id
        self.baidu_channel_id = baidu_channel_id

    @property
    def pns_handle(self) -> Optional[str]:
        return f"{self.baidu_user_id}-{self.baidu_channel_id}"

    def on_validate(self, api_version: str) -> None:
        if _is_blank(self.baidu_channel_id):
            raise MissingRequiredFieldError(
                BAIDU_REGISTRATION_INVALID_ID, "The Baidu channel id is empty")


class BaiduTemplateRegistrationDescription(_JsonTemplateMixin, BaiduRegistrationDescription):
    registration_type = TEMPLATE_REGISTRATION_TYPE
    element_name = "BaiduTemplateRegistrationDescription"
    message_type: Optional[int] = None
    wire_fields = BaiduRegistrationDescription.wire_fields + (
        ("BodyTemplate", "body_template"),
        ("TemplateName", "template_name"),
        ("MessageType", "message_type"),
    )

    def __init__(
        self,
        baidu_user_id: Optional[str],
        baidu_channel_id: str,
        body_template: str,
        tags: Optional[Iterable[str]] = None,
        template_name: Optional[str] = None,
        message_type: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(baidu_user_id, baidu_channel_id, tags, **kwargs)
        self.body_template = _require_body_template(body_template)
        self.template_name = template_name
        self.message_type = message_type

    def on_validate(self, api_version: str) -> None:
        super().on_validate(api_version)
        self._validate_template()


REGISTRATION_TYPES: List[type] = [
    WindowsRegistrationDescription,
    WindowsTemplateRegistrationDescription,
    MpnsRegistrationDescription,
    MpnsTemplateRegistrationDescription,
    AppleRegistrationDescription,
    AppleTemplateRegistrationDescription,
    AdmRegistrationDescription,
    AdmTemplateRegistrationDescription,
    FcmRegistrationDescription,
    FcmTemplateRegistrationDescription,
    BaiduRegistrationDescription,
    BaiduTemplateRegistrationDescription,
]
