"""Hub-level credentials used by the service to reach each push network.

Each credential keeps typed fields. ``to_properties`` and ``from_properties``
convert to and from the flat name/value property bag used on the wire; property
names are matched case-insensitively and unknown names are kept in
``extra_properties`` so that validation can reject them.
"""
import base64
from datetime import datetime
from typing import Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import urlparse

from . import config
from .certificates import ensure_certificate_usable, load_certificate
from .errors import (
    CredentialUnusableError,
    DisallowedExtraFieldError,
    InvalidUrlError,
    MissingRequiredFieldError,
    MutuallyExclusiveFieldError,
    APNS_ENDPOINT_NOT_SPECIFIED,
    APNS_PROPERTIES_NOT_SPECIFIED,
    APNS_PROVIDE_ONLY_ONE_CREDENTIAL_TYPE,
    GCM_ENDPOINT_NOT_SPECIFIED,
    GCM_REQUIRED_PROPERTIES,
    GOOGLE_API_KEY_NOT_SPECIFIED,
    INVALID_ADM_AUTH_TOKEN_URL,
    INVALID_ADM_SEND_URL_TEMPLATE,
    INVALID_GCM_ENDPOINT,
    ONLY_N_PROPERTIES_REQUIRED,
    REQUIRED_PROPERTIES_NOT_SPECIFIED,
    REQUIRED_PROPERTY_NOT_SPECIFIED,
)
from .logging_config import HubLogger

logger = HubLogger("credentials")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _is_absolute_url(value: Optional[str]) -> bool:
    if not value:
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


def _is_allowed_url(value: Optional[str], allowed) -> bool:
    return _is_absolute_url(value) and value.lower() in {url.lower() for url in allowed}


class PnsCredential:
    """Base class for push network credentials.

    Subclasses declare ``wire_fields`` as (property name, attribute name)
    pairs and implement ``on_validate``.
    """

    app_platform = ""
    wire_fields: Tuple[Tuple[str, str], ...] = ()

    def __init__(self):
        self.extra_properties: Dict[str, str] = {}

    def to_properties(self) -> Dict[str, str]:
        """Return the property bag holding every set field."""
        properties = {
            name: getattr(self, attribute)
            for name, attribute in self.wire_fields
            if getattr(self, attribute) is not None
        }
        properties.update(self.extra_properties)
        return properties

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "PnsCredential":
        """Build a credential from a wire property bag."""
        credential = cls.__new__(cls)
        PnsCredential.__init__(credential)
        for _, attribute in cls.wire_fields:
            setattr(credential, attribute, None)

        by_name = {name.lower(): attribute for name, attribute in cls.wire_fields}
        for name, value in properties.items():
            attribute = by_name.get(name.lower())
            if attribute:
                setattr(credential, attribute, value)
            else:
                credential.extra_properties[name] = value
        return credential

    def validate(self, allow_local_mock_pns: bool = config.ALLOW_LOCAL_MOCK_PNS) -> None:
        """Validate the credential before it is attached to a hub.

        Args:
            allow_local_mock_pns: Accept localhost mock push service URLs

        Raises:
            InvalidDataContractError: On the first failed rule
        """
        self.on_validate(allow_local_mock_pns)

    def on_validate(self, allow_local_mock_pns: bool) -> None:
        pass

    def _identity(self) -> tuple:
        return tuple(self.to_properties().items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._identity()))

    @staticmethod
    def is_equal(first: Optional["PnsCredential"], second: Optional["PnsCredential"]) -> bool:
        """Compare two credentials where either may be None."""
        if first is None or second is None:
            return first is second
        return first == second

    def __repr__(self) -> str:
        return f"{type(self).__name__}(platform={self.app_platform!r})"


class AdmCredential(PnsCredential):
    """Amazon Device Messaging client credentials."""

    app_platform = "adm"

    PROD_AUTH_TOKEN_URL = "https://api.amazon.com/auth/O2/token"
    PROD_SEND_URL_TEMPLATE = "https://api.amazon.com/messaging/registrations/{0}/messages"
    MOCK_AUTH_TOKEN_URL = "http://localhost:8450/adm/token"
    MOCK_SEND_URL_TEMPLATE = "http://localhost:8450/adm/send/{0}/messages"
    MOCK_INT_AUTH_TOKEN_URL = "http://pushtestservice4.cloudapp.net/adm/token"
    MOCK_INT_SEND_URL_TEMPLATE = "http://pushtestservice4.cloudapp.net/adm/send/{0}/messages"
    REQUIRED_PROPERTIES = "ClientId, ClientSecret"

    wire_fields = (
        ("ClientId", "client_id"),
        ("ClientSecret", "client_secret"),
        ("AuthTokenUrl", "_auth_token_url"),
        ("SendUrlTemplate", "_send_url_template"),
    )

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        auth_token_url: Optional[str] = None,
        send_url_template: Optional[str] = None,
    ):
        super().__init__()
        self.client_id = client_id
        self.client_secret = client_secret
        self._auth_token_url = auth_token_url
        self._send_url_template = send_url_template

    @property
    def auth_token_url(self) -> str:
        return self._auth_token_url if self._auth_token_url is not None else self.PROD_AUTH_TOKEN_URL

    @auth_token_url.setter
    def auth_token_url(self, value: Optional[str]) -> None:
        self._auth_token_url = value

    @property
    def send_url_template(self) -> str:
        if self._send_url_template is not None:
            return self._send_url_template
        return self.PROD_SEND_URL_TEMPLATE

    @send_url_template.setter
    def send_url_template(self, value: Optional[str]) -> None:
        self._send_url_template = value

    def _identity(self) -> tuple:
        return (self.client_id, self.client_secret)

    def on_validate(self, allow_local_mock_pns: bool) -> None:
        if not self.client_id and not self.client_secret:
            raise MissingRequiredFieldError(
                REQUIRED_PROPERTIES_NOT_SPECIFIED,
                f"Required properties not specified: {self.REQUIRED_PROPERTIES}",
                {"properties": self.REQUIRED_PROPERTIES},
            )
        for name, value in (("ClientId", self.client_id), ("ClientSecret", self.client_secret)):
            if not value:
                raise MissingRequiredFieldError(
                    REQUIRED_PROPERTY_NOT_SPECIFIED,
                    f"Required property not specified: {name}",
                    {"property": name},
                )

        properties = self.to_properties()
        if len(properties) > 2 and self.extra_properties:
            raise DisallowedExtraFieldError(
                ONLY_N_PROPERTIES_REQUIRED,
                f"Only 2 properties are required: {self.REQUIRED_PROPERTIES}",
                {"extra": sorted(self.extra_properties)},
            )

        auth_urls = [self.PROD_AUTH_TOKEN_URL, self.MOCK_INT_AUTH_TOKEN_URL]
        send_templates = [self.PROD_SEND_URL_TEMPLATE, self.MOCK_INT_SEND_URL_TEMPLATE]
        if allow_local_mock_pns:
            auth_urls.append(self.MOCK_AUTH_TOKEN_URL)
            send_templates.append(self.MOCK_SEND_URL_TEMPLATE)

        if not _is_allowed_url(self.auth_token_url, auth_urls):
            raise InvalidUrlError(
                INVALID_ADM_AUTH_TOKEN_URL,
                "The ADM auth token URL is not a supported endpoint",
                {"url": self.auth_token_url},
            )

        send_error = InvalidUrlError(
            INVALID_ADM_SEND_URL_TEMPLATE,
            "The ADM send URL template is not a supported endpoint",
            {"url": self.send_url_template},
        )
        template = self.send_url_template
        if _is_blank(template):
            raise send_error
        try:
            send_url = template.format("AdmRegistrationId")
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as err:
            raise send_error from err
        if not _is_absolute_url(send_url) or template.lower() not in {t.lower() for t in send_templates}:
            raise send_error


class ApnsCredential(PnsCredential):
    """Apple Push Notification service credentials.

    Either a certificate (base64 PKCS#12 plus optional password) or a token
    (with key id, app id and app name) authenticates the hub, never both.
    """

    app_platform = "apple"
    APNS_GATEWAY_ENDPOINT = "gateway.push.apple.com"

    wire_fields = (
        ("ApnsCertificate", "apns_certificate"),
        ("CertificateKey", "certificate_key"),
        ("Endpoint", "endpoint"),
        ("Thumbprint", "thumbprint"),
        ("Token", "token"),
        ("KeyId", "key_id"),
        ("AppName", "app_name"),
        ("AppId", "app_id"),
    )

    def __init__(
        self,
        apns_certificate: Optional[str] = None,
        certificate_key: Optional[str] = None,
        token: Optional[str] = None,
        key_id: Optional[str] = None,
        app_id: Optional[str] = None,
        app_name: Optional[str] = None,
        endpoint: Optional[str] = APNS_GATEWAY_ENDPOINT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__()
        self.apns_certificate = apns_certificate
        self.certificate_key = certificate_key
        self.endpoint = endpoint
        self.thumbprint: Optional[str] = None
        self.token = token
        self.key_id = key_id
        self.app_name = app_name
        self.app_id = app_id
        self.clock = clock

    @classmethod
    def from_bytes(cls, certificate_buffer: bytes, certificate_key: Optional[str] = None,
                   **kwargs) -> "ApnsCredential":
        """Create a certificate credential from raw PFX bytes."""
        if not isinstance(certificate_buffer, (bytes, bytearray)):
            raise ValueError("certificate_buffer must be bytes")
        encoded = base64.b64encode(bytes(certificate_buffer)).decode("ascii")
        return cls(apns_certificate=encoded, certificate_key=certificate_key, **kwargs)

    @classmethod
    def from_file(cls, certificate_path: str, certificate_key: Optional[str] = None,
                  **kwargs) -> "ApnsCredential":
        """Create a certificate credential from a PFX file on disk."""
        with open(certificate_path, "rb") as handle:
            return cls.from_bytes(handle.read(), certificate_key, **kwargs)

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "ApnsCredential":
        credential = super().from_properties(properties)
        credential.clock = None
        return credential

    def _identity(self) -> tuple:
        return (self.endpoint, self.certificate_key, self.apns_certificate,
                self.token, self.key_id, self.app_name, self.app_id)

    def on_validate(self, allow_local_mock_pns: bool) -> None:
        if _is_blank(self.endpoint):
            raise MissingRequiredFieldError(
                APNS_ENDPOINT_NOT_SPECIFIED, "The APNs endpoint is not specified")

        has_token = not _is_blank(self.token)
        has_certificate = not _is_blank(self.apns_certificate)
        if has_token and has_certificate:
            raise MutuallyExclusiveFieldError(
                APNS_PROVIDE_ONLY_ONE_CREDENTIAL_TYPE,
                "Provide either a token or a certificate, not both",
            )
        if not has_token and not has_certificate:
            raise MutuallyExclusiveFieldError(
                APNS_PROPERTIES_NOT_SPECIFIED,
                "Either a token or a certificate must be specified",
            )

        if has_token:
            for name, value in (("KeyId", self.key_id), ("AppId", self.app_id),
                                ("AppName", self.app_name)):
                if _is_blank(value):
                    raise MissingRequiredFieldError(
                        REQUIRED_PROPERTY_NOT_SPECIFIED,
                        f"Required property not specified: {name}",
                        {"property": name},
                    )
            return

        try:
            key, certificate = load_certificate(self.apns_certificate, self.certificate_key)
            ensure_certificate_usable(key, certificate, self.clock() if self.clock else None)
        except CredentialUnusableError as err:
            logger.warning("Rejected APNs certificate", reason=err.message)
            raise


class GcmCredential(PnsCredential):
    """Google Cloud Messaging API key credential."""

    app_platform = "gcm"
    PROD_ENDPOINT = "https://android.googleapis.com/gcm/send"
    MOCK_ENDPOINT = "http://localhost:8450/gcm/send"
    ALLOWED_ENDPOINTS = (
        PROD_ENDPOINT,
        "http://pushtestservice.cloudapp.net/gcm/send",
        "http://pushtestservice4.cloudapp.net/gcm/send",
        "http://pushperfnotificationserver.cloudapp.net/gcm/send",
        "http://pushstressnotificationserver.cloudapp.net/gcm/send",
        "http://pushnotificationserver.cloudapp.net/gcm/send",
    )

    wire_fields = (("GoogleApiKey", "google_api_key"), ("GcmEndpoint", "_gcm_endpoint"))

    def __init__(self, google_api_key: Optional[str] = None, gcm_endpoint: Optional[str] = None):
        super().__init__()
        self.google_api_key = google_api_key
        self._gcm_endpoint = gcm_endpoint

    @property
    def gcm_endpoint(self) -> str:
        return self._gcm_endpoint if self._gcm_endpoint is not None else self.PROD_ENDPOINT

    @gcm_endpoint.setter
    def gcm_endpoint(self, value: Optional[str]) -> None:
        self._gcm_endpoint = value

    def _identity(self) -> tuple:
        return (self.google_api_key,)

    def on_validate(self, allow_local_mock_pns: bool) -> None:
        properties = self.to_properties()
        if len(properties) > 2:
            raise DisallowedExtraFieldError(
                GCM_REQUIRED_PROPERTIES,
                "Only GoogleApiKey and GcmEndpoint may be specified",
            )
        if _is_blank(self.google_api_key):
            raise MissingRequiredFieldError(
                GOOGLE_API_KEY_NOT_SPECIFIED, "The Google API key is not specified")
        if len(properties) == 2 and not self._gcm_endpoint:
            raise MissingRequiredFieldError(
                GCM_ENDPOINT_NOT_SPECIFIED, "The GCM endpoint is not specified")

        allowed = list(self.ALLOWED_ENDPOINTS)
        if allow_local_mock_pns:
            allowed.append(self.MOCK_ENDPOINT)
        if not _is_allowed_url(self.gcm_endpoint, allowed):
            raise InvalidUrlError(
                INVALID_GCM_ENDPOINT,
                "The GCM endpoint is not a supported endpoint",
                {"url": self.gcm_endpoint},
            )


class BaiduCredential(PnsCredential):
    """Baidu cloud push credential."""

    app_platform = "baidu"
    PROD_ENDPOINT = "https://channel.api.duapp.com/rest/2.0/channel/channel"

    wire_fields = (
        ("BaiduApiKey", "baidu_api_key"),
        ("BaiduSecretKey", "baidu_secret_key"),
        ("BaiduEndPoint", "baidu_endpoint"),
    )

    def __init__(
        self,
        baidu_api_key: Optional[str] = None,
        baidu_secret_key: Optional[str] = None,
        baidu_endpoint: Optional[str] = None,
    ):
        super().__init__()
        self.baidu_api_key = baidu_api_key
        self.baidu_secret_key = baidu_secret_key
        self.baidu_endpoint = baidu_endpoint

    def _identity(self) -> tuple:
        return (self.baidu_api_key,)


CREDENTIAL_TYPES: Dict[str, type] = {
    "AdmCredential": AdmCredential,
    "ApnsCredential": ApnsCredential,
    "GcmCredential": GcmCredential,
    "BaiduCredential": BaiduCredential,
}

__all__ = [
    "AdmCredential",
    "ApnsCredential",
    "BaiduCredential",
    "CREDENTIAL_TYPES",
    "GcmCredential",
    "PnsCredential",
]
