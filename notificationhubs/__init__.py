"""Client SDK for Azure Notification Hubs registrations and credentials.

The client module is not eagerly imported so that validation-only users do
not load httpx. Import NotificationHubClient from notificationhubs.client.
"""
from .credentials import AdmCredential, ApnsCredential, BaiduCredential, GcmCredential, PnsCredential
from .errors import (
    ConfigurationError,
    CredentialUnusableError,
    DisallowedExtraFieldError,
    InvalidDataContractError,
    InvalidUrlError,
    LimitExceededError,
    MalformedPayloadError,
    MissingRequiredFieldError,
    MutuallyExclusiveFieldError,
    NotificationHubError,
    NotificationHubRequestError,
    UnsupportedExpressionError,
)
from .expressions import ExpressionEvaluator, ExpressionType
from .headers import ApnsHeaderCollection, MpnsHeaderCollection, WnsHeaderCollection
from .registrations import (
    AdmRegistrationDescription,
    AdmTemplateRegistrationDescription,
    AppleRegistrationDescription,
    AppleTemplateRegistrationDescription,
    BaiduRegistrationDescription,
    BaiduTemplateRegistrationDescription,
    FcmRegistrationDescription,
    FcmTemplateRegistrationDescription,
    MpnsRegistrationDescription,
    MpnsTemplateRegistrationDescription,
    RegistrationDescription,
    WindowsRegistrationDescription,
    WindowsTemplateRegistrationDescription,
)
from .sdk_helper import validate_registration
from .tags import TagValidator

__all__ = [
    "AdmCredential",
    "AdmRegistrationDescription",
    "AdmTemplateRegistrationDescription",
    "ApnsCredential",
    "ApnsHeaderCollection",
    "AppleRegistrationDescription",
    "AppleTemplateRegistrationDescription",
    "BaiduCredential",
    "BaiduRegistrationDescription",
    "BaiduTemplateRegistrationDescription",
    "ConfigurationError",
    "CredentialUnusableError",
    "DisallowedExtraFieldError",
    "ExpressionEvaluator",
    "ExpressionType",
    "FcmRegistrationDescription",
    "FcmTemplateRegistrationDescription",
    "GcmCredential",
    "InvalidDataContractError",
    "InvalidUrlError",
    "LimitExceededError",
    "MalformedPayloadError",
    "MissingRequiredFieldError",
    "MpnsHeaderCollection",
    "MpnsRegistrationDescription",
    "MpnsTemplateRegistrationDescription",
    "MutuallyExclusiveFieldError",
    "NotificationHubError",
    "NotificationHubRequestError",
    "PnsCredential",
    "RegistrationDescription",
    "TagValidator",
    "UnsupportedExpressionError",
    "WindowsRegistrationDescription",
    "WindowsTemplateRegistrationDescription",
    "WnsHeaderCollection",
    "validate_registration",
]
