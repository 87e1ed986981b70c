"""Settings and connection string handling for the Notification Hubs SDK.

Defaults can be overridden through environment variables so that test and
staging deployments can point at mock push services without code changes.
"""
import os
from typing import Dict, Optional
from urllib.parse import urlparse

from .errors import ConfigurationError

SUPPORTED_API_VERSIONS = (
    "2012-03", "2012-08", "2013-04", "2013-07", "2013-08", "2013-10",
    "2014-01", "2014-05", "2014-08", "2014-09", "2015-01", "2015-04",
    "2015-08", "2016-03", "2016-07", "2017-04",
)

API_VERSION = os.environ.get('NOTIFICATION_HUBS_API_VERSION', '2017-04')
ALLOW_LOCAL_MOCK_PNS = os.environ.get(
    'NOTIFICATION_HUBS_ALLOW_LOCAL_MOCK_PNS', 'false').lower() in ('1', 'true', 'yes')
LOG_LEVEL = os.environ.get('NOTIFICATION_HUBS_LOG_LEVEL', 'INFO').upper()
REQUEST_TIMEOUT = float(os.environ.get('NOTIFICATION_HUBS_REQUEST_TIMEOUT', '10.0'))

ENDPOINT_KEY = "Endpoint"
SHARED_ACCESS_KEY_NAME_KEY = "SharedAccessKeyName"
SHARED_ACCESS_KEY_KEY = "SharedAccessKey"


class ConnectionSettings:
    """Parsed Notification Hubs connection string."""

    def __init__(self, endpoint: str, shared_access_key_name: str, shared_access_key: str):
        self.endpoint = endpoint
        self.shared_access_key_name = shared_access_key_name
        self.shared_access_key = shared_access_key

    @property
    def base_url(self) -> str:
        """HTTPS base URL of the namespace (the endpoint uses the sb scheme)."""
        parsed = urlparse(self.endpoint)
        return f"https://{parsed.netloc}/"

    def to_connection_string(self) -> str:
        return (
            f"{ENDPOINT_KEY}={self.endpoint};"
            f"{SHARED_ACCESS_KEY_NAME_KEY}={self.shared_access_key_name};"
            f"{SHARED_ACCESS_KEY_KEY}={self.shared_access_key}"
        )


def _split_pairs(connection_string: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for part in connection_string.split(';'):
        if not part.strip():
            continue
        key, sep, value = part.partition('=')
        if not sep or not key.strip():
            raise ConfigurationError(
                f"Malformed connection string segment: {key.strip()!r}")
        pairs[key.strip().lower()] = value.strip()
    return pairs


def parse_connection_string(connection_string: Optional[str]) -> ConnectionSettings:
    """Parse a ``Key=Value;Key=Value`` connection string.

    Args:
        connection_string: Connection string copied from the portal

    Returns:
        ConnectionSettings with the endpoint and shared access key pair

    Raises:
        ConfigurationError: If the string is empty, a segment is malformed,
            the endpoint is not an absolute URI or a key is missing
    """
    if not connection_string or not connection_string.strip():
        raise ConfigurationError("Connection string is empty")

    pairs = _split_pairs(connection_string)

    endpoint = pairs.get(ENDPOINT_KEY.lower())
    if not endpoint:
        raise ConfigurationError(f"Connection string is missing {ENDPOINT_KEY}")
    parsed = urlparse(endpoint)
    if not parsed.scheme or not parsed.netloc:
        raise ConfigurationError(
            f"{ENDPOINT_KEY} must be an absolute URI", {"endpoint": endpoint})

    for required in (SHARED_ACCESS_KEY_NAME_KEY, SHARED_ACCESS_KEY_KEY):
        if not pairs.get(required.lower()):
            raise ConfigurationError(f"Connection string is missing {required}")

    return ConnectionSettings(
        endpoint,
        pairs[SHARED_ACCESS_KEY_NAME_KEY.lower()],
        pairs[SHARED_ACCESS_KEY_KEY.lower()],
    )


def ensure_supported_api_version(api_version: str) -> str:
    """Return ``api_version`` unchanged, or raise ValueError if unknown."""
    if api_version not in SUPPORTED_API_VERSIONS:
        raise ValueError(f"Unsupported api-version: {api_version}")
    return api_version
