"""Exception types raised by the Notification Hubs SDK.

Every local validation failure is an ``InvalidDataContractError`` carrying a
stable reason ``code``; subclasses group the failures by kind so callers can
catch a whole category (for example every credential problem) at once.
"""
from typing import Any, Dict, Optional


# Reason codes
CANNOT_SPECIFY_EXPIRATION_TIME = "CannotSpecifyExpirationTime"
CHANNEL_URI_NULL_OR_EMPTY = "ChannelUriNullOrEmpty"
DEVICE_TOKEN_IS_EMPTY = "DeviceTokenIsEmpty"
DEVICE_TOKEN_HEXADECIMAL_DIGIT_ERROR = "DeviceTokenHexaDecimalDigitError"
ADM_REGISTRATION_ID_INVALID = "AdmRegistrationIdInvalid"
FCM_REGISTRATION_ID_INVALID = "FcmRegistrationIdInvalid"
BAIDU_REGISTRATION_INVALID_ID = "BaiduRegistrationInvalidId"

MISSING_WNS_HEADER = "MissingWnsHeader"
WNS_HEADER_NULL_OR_EMPTY = "WnsHeaderNullOrEmpty"
MISSING_MPNS_HEADER = "MissingMpnsHeader"
MPNS_HEADER_NULL_OR_EMPTY = "MpnsHeaderNullOrEmpty"
INVALID_PAYLOAD_FORMAT = "InvalidPayLoadFormat"
FAILED_TO_DESERIALIZE_BODY_TEMPLATE = "FailedToDeserializeBodyTemplate"
NOT_SUPPORTED_XML_FORMAT = "NotSupportedXMLFormatAsBodyTemplate"
NOT_SUPPORTED_XML_FORMAT_FOR_MPNS = "NotSupportedXMLFormatAsBodyTemplateForMpns"
INVALID_XML_BODY_TEMPLATE = "InvalidXmlBodyTemplate"
UNSUPPORTED_EXPRESSION = "UnsupportedExpression"
TEMPLATE_NAME_LENGTH_EXCEEDS_LIMIT = "TemplateNameLengthExceedsLimit"

EMPTY_EXPIRY_VALUE = "EmptyExpiryValue"
EXPIRY_DESERIALIZATION_ERROR = "ExpiryDeserializationError"
EMPTY_PRIORITY_VALUE = "EmptyPriorityValue"
PRIORITY_DESERIALIZATION_ERROR = "PriorityDeserializationError"
APNS_EXPIRY_HEADER_DESERIALIZATION_ERROR = "ApnsExpiryHeaderDeserializationError"
APNS_HEADER_DESERIALIZATION_ERROR = "ApnsHeaderDeserializationError"

REQUIRED_PROPERTIES_NOT_SPECIFIED = "RequiredPropertiesNotSpecified"
REQUIRED_PROPERTY_NOT_SPECIFIED = "RequiredPropertyNotSpecified"
ONLY_N_PROPERTIES_REQUIRED = "OnlyNPropertiesRequired"
INVALID_ADM_AUTH_TOKEN_URL = "InvalidAdmAuthTokenUrl"
INVALID_ADM_SEND_URL_TEMPLATE = "InvalidAdmSendUrlTemplate"
APNS_ENDPOINT_NOT_SPECIFIED = "ApnsEndpointNotSpecified"
APNS_PROPERTIES_NOT_SPECIFIED = "ApnsPropertiesNotSpecified"
APNS_PROVIDE_ONLY_ONE_CREDENTIAL_TYPE = "ApnsProvideOnlyOneCredentialType"
APNS_CERTIFICATE_NOT_USABLE = "ApnsCertificateNotUsable"
GCM_REQUIRED_PROPERTIES = "GcmRequiredProperties"
GOOGLE_API_KEY_NOT_SPECIFIED = "GoogleApiKeyNotSpecified"
GCM_ENDPOINT_NOT_SPECIFIED = "GcmEndpointNotSpecified"
INVALID_GCM_ENDPOINT = "InvalidGcmEndpoint"


class NotificationHubError(Exception):
    """Base exception for all Notification Hubs SDK errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize the error.

        Args:
            message: Human-readable error message
            context: Additional structured details for debugging
        """
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context or {}


class ConfigurationError(NotificationHubError, ValueError):
    """Raised when a connection string or setting cannot be parsed."""


class NotificationHubRequestError(NotificationHubError):
    """Raised when the remote service answers with a non-success status."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message, {"status_code": status_code, "body": body})
        self.status_code = status_code
        self.body = body


class InvalidDataContractError(NotificationHubError, ValueError):
    """Raised when an entity fails local validation.

    Attributes:
        code: Stable reason key identifying the failed rule
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.code = code

    def __str__(self) -> str:
        return f"{self.message} ({self.code})"


class MissingRequiredFieldError(InvalidDataContractError):
    """A mandatory property or header is absent or blank."""


class MutuallyExclusiveFieldError(InvalidDataContractError):
    """Both or neither of an either/or pair of properties is set."""


class DisallowedExtraFieldError(InvalidDataContractError):
    """A property outside the allowed set is present."""


class InvalidUrlError(InvalidDataContractError):
    """A URL is malformed or not on the allow-list."""


class MalformedPayloadError(InvalidDataContractError):
    """A body template or handle is not in a recognised format."""


class UnsupportedExpressionError(InvalidDataContractError):
    """A template expression is malformed or cannot be located in the body."""


class LimitExceededError(InvalidDataContractError):
    """A value exceeds a fixed maximum length."""


class CredentialUnusableError(InvalidDataContractError):
    """A certificate cannot be decoded or is outside its validity window."""
