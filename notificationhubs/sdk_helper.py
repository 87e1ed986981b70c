"""Validation entry point for registrations sent to the service.

Template registrations for WNS and MPNS may omit the notification type
headers; they are inferred from the shape of the XML body. Inference works on
a copy so the caller's registration is never modified.
"""
from typing import Optional, TypeVar

from . import config
from .errors import (
    MalformedPayloadError,
    NOT_SUPPORTED_XML_FORMAT,
    NOT_SUPPORTED_XML_FORMAT_FOR_MPNS,
)
from .headers import HeaderCollection, MpnsHeaderCollection, WnsHeaderCollection
from .logging_config import HubLogger
from .payloads import (
    MpnsTemplateBodyType,
    WindowsTemplateBodyType,
    detect_mpns_template_type,
    detect_windows_template_type,
    parse_xml,
)
from .registrations import (
    MPNS_NOTIFICATION_CLASS_HEADER,
    MPNS_TILE,
    MPNS_TILE_CLASS,
    MPNS_TOAST,
    MPNS_TOAST_CLASS,
    MPNS_TYPE_HEADER,
    TEMPLATE_MAX_LENGTH,
    WNS_BADGE,
    WNS_RAW,
    WNS_TILE,
    WNS_TOAST,
    WNS_TYPE_HEADER,
    MpnsTemplateRegistrationDescription,
    RegistrationDescription,
    WindowsTemplateRegistrationDescription,
)

logger = HubLogger("sdk_helper")

__all__ = [
    "TEMPLATE_MAX_LENGTH",
    "infer_mpns_headers",
    "infer_template_headers",
    "infer_wns_headers",
    "is_raw_mpns_class",
    "validate_registration",
]

R = TypeVar("R", bound=RegistrationDescription)

_RAW_MPNS_CLASSES = (range(3, 11), range(13, 21), range(23, 32))

_WNS_TYPES = {
    WindowsTemplateBodyType.TOAST: WNS_TOAST,
    WindowsTemplateBodyType.TILE: WNS_TILE,
    WindowsTemplateBodyType.BADGE: WNS_BADGE,
}

_MPNS_TYPES = {
    MpnsTemplateBodyType.TOAST: (MPNS_TOAST, MPNS_TOAST_CLASS),
    MpnsTemplateBodyType.TILE: (MPNS_TILE, MPNS_TILE_CLASS),
}


def _add_if_absent(headers: HeaderCollection, key: str, value: str) -> bool:
    if key in headers:
        return False
    headers.add(key, value)
    return True

    # Unlike clone(), the expiration time is kept so validation still sees it
def _copy(registration: R) -> R:
    # Inference must not hide a caller-supplied expiration time from validation
    prepared = registration.clone()
    prepared.expiration_time = registration.expiration_time
    return prepared


def is_raw_mpns_class(notification_class: Optional[str]) -> bool:
    """Return True if an MPNS notification class denotes a raw notification.

    Non-numeric classes (such as template expressions) are not raw.
    """
    try:
        value = int((notification_class or "").strip())
    except ValueError:
        return False
    return any(value in band for band in _RAW_MPNS_CLASSES)


def infer_wns_headers(
    registration: WindowsTemplateRegistrationDescription,
) -> WindowsTemplateRegistrationDescription:
    """Return a copy of a WNS template registration with ``X-WNS-Type`` inferred.

    JSON bodies are left alone. When the registration already declares a raw
    notification, the body only has to be well-formed XML. Otherwise the root
    element decides the type, written only if the header is absent.

    Raises:
        MalformedPayloadError: If an XML body is not a recognised WNS payload
    """
    prepared = _copy(registration)
    if prepared.is_json_object_payload() or not prepared.is_xml_payload():
        return prepared

    if prepared.wns_headers is None:
        prepared.wns_headers = WnsHeaderCollection()

    error = MalformedPayloadError(
        NOT_SUPPORTED_XML_FORMAT,
        "The body template is not a supported WNS XML payload",
    )
    declared = prepared.wns_headers.get(WNS_TYPE_HEADER)
    if declared is not None and declared.lower() == WNS_RAW:
        parse_xml(prepared.body_template, error)
        return prepared

    body_type = detect_windows_template_type(prepared.body_template, error)
    wns_type = _WNS_TYPES.get(body_type)
    if wns_type and _add_if_absent(prepared.wns_headers, WNS_TYPE_HEADER, wns_type):
        logger.info("Inferred WNS type header", registration_id=prepared.registration_id,
                    wns_type=wns_type)
    return prepared


def infer_mpns_headers(
    registration: MpnsTemplateRegistrationDescription,
) -> MpnsTemplateRegistrationDescription:
    """Return a copy of an MPNS template registration with type headers inferred.

    Registrations declaring a raw notification class, and JSON bodies, are
    returned unchanged. For XML bodies the target and class headers are added
    when absent.

    Raises:
        MalformedPayloadError: If an XML body is not a recognised MPNS payload
    """
    prepared = _copy(registration)
    if prepared.is_json_object_payload():
        return prepared

    if prepared.mpns_headers is not None and is_raw_mpns_class(
            prepared.mpns_headers.get(MPNS_NOTIFICATION_CLASS_HEADER)):
        return prepared

    if not prepared.is_xml_payload():
        return prepared

    if prepared.mpns_headers is None:
        prepared.mpns_headers = MpnsHeaderCollection()

    body_type = detect_mpns_template_type(
        prepared.body_template,
        MalformedPayloadError(
            NOT_SUPPORTED_XML_FORMAT_FOR_MPNS,
            "The body template is not a supported MPNS XML payload",
        ),
    )
    if body_type in _MPNS_TYPES:
        target, notification_class = _MPNS_TYPES[body_type]
        added_target = _add_if_absent(prepared.mpns_headers, MPNS_TYPE_HEADER, target)
        added_class = _add_if_absent(
            prepared.mpns_headers, MPNS_NOTIFICATION_CLASS_HEADER, notification_class)
        if added_target or added_class:
            logger.info("Inferred MPNS type headers", registration_id=prepared.registration_id,
                        target=target, notification_class=notification_class)
    return prepared


def infer_template_headers(registration: R) -> R:
    """Infer platform type headers where the platform needs them.

    Registrations other than WNS and MPNS templates are returned as is.
    """
    if isinstance(registration, WindowsTemplateRegistrationDescription):
        return infer_wns_headers(registration)
    if isinstance(registration, MpnsTemplateRegistrationDescription):
        return infer_mpns_headers(registration)
    return registration


def validate_registration(registration: R, api_version: str = config.API_VERSION) -> R:
    """Prepare and validate a registration before it is sent to the service.

    Args:
        registration: Registration built by the caller
        api_version: Management API version the request will use

    Returns:
        The registration to send; a copy with inferred headers for WNS and
        MPNS templates, otherwise the registration passed in

    Raises:
        InvalidDataContractError: If the registration fails validation
    """
    prepared = infer_template_headers(registration)
    prepared.validate(api_version, check_expiration_time=True)
    return prepared
