"""HTTP client for registration management and sends.

Every registration written to the service is validated locally first; a
registration that fails validation never reaches the network.
"""
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from . import config
from .auth import SharedAccessSignatureTokenProvider
from .errors import NotificationHubRequestError
from .logging_config import HubLogger
from .registrations import RegistrationDescription
from .sdk_helper import validate_registration
from .serialization import deserialize_registration, deserialize_registrations

logger = HubLogger("client")

ATOM_ENTRY_CONTENT_TYPE = "application/atom+xml;type=entry;charset=utf-8"
FORMAT_HEADER = "ServiceBusNotification-Format"
TAGS_HEADER = "ServiceBusNotification-Tags"

NOTIFICATION_CONTENT_TYPES = {
    "apple": "application/json;charset=utf-8",
    "gcm": "application/json;charset=utf-8",
    "adm": "application/json;charset=utf-8",
    "baidu": "application/json;charset=utf-8",
    "template": "application/json;charset=utf-8",
    "windows": "application/xml;charset=utf-8",
    "windowsphone": "application/xml;charset=utf-8",
}


class NotificationHubClient:
    """Client for one notification hub.

    Args:
        connection_string: Namespace connection string with a shared access key
        hub_path: Name of the notification hub
        api_version: Management API version sent with every request
    """

    def __init__(
        self,
        connection_string: str,
        hub_path: str,
        api_version: str = config.API_VERSION,
    ):
        if not hub_path:
            raise ValueError("hub_path is required")
        config.ensure_supported_api_version(api_version)
        self.settings = config.parse_connection_string(connection_string)
        self.hub_path = hub_path
        self.api_version = api_version
        self.token_provider = SharedAccessSignatureTokenProvider(
            self.settings.shared_access_key_name, self.settings.shared_access_key)

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url}{self.hub_path}/{path}?api-version={self.api_version}"

    def _headers(self, url: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Authorization": self.token_provider.sign(url)}
        headers.update(extra or {})
        return headers

    def _check(self, response, method: str, path: str):
        if 200 <= response.status_code < 300:
            return response
        logger.error("Notification hub request failed", method=method, path=path,
                     status_code=response.status_code)
        raise NotificationHubRequestError(
            f"{method} {path} failed with HTTP {response.status_code}",
            response.status_code,
            response.text,
        )

    def _prepare(self, registration: RegistrationDescription) -> RegistrationDescription:
        if registration.notification_hub_path and registration.notification_hub_path != self.hub_path:
            raise ValueError(
                f"Registration belongs to hub {registration.notification_hub_path!r}, "
                f"not {self.hub_path!r}")
        # clone() drops the expiration time assigned by the service
        outgoing = registration.clone()
        outgoing.notification_hub_path = self.hub_path
        return validate_registration(outgoing, self.api_version)

    def _send_registration(
        self,
        method: str,
        path: str,
        registration: RegistrationDescription,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> RegistrationDescription:
        prepared = self._prepare(registration)
        url = self._url(path)
        headers = self._headers(url, {"Content-Type": ATOM_ENTRY_CONTENT_TYPE})
        headers.update(extra_headers or {})
        body = prepared.serialize()

        logger.info("Sending registration request", method=method, path=path)
        with httpx.Client(timeout=config.REQUEST_TIMEOUT) as client:
            if method == "POST":
                response = client.post(url, headers=headers, content=body)
            else:
                response = client.put(url, headers=headers, content=body)
        self._check(response, method, path)
        return deserialize_registration(response.text)

    def create_registration(self, registration: RegistrationDescription) -> RegistrationDescription:
        """Create a registration; the service assigns its id.

        Returns:
            The registration as stored by the service
        """
        if registration.registration_id:
            raise ValueError("registration_id must be empty when creating a registration")
        return self._send_registration("POST", "registrations/", registration)

    def create_or_update_registration(
        self, registration: RegistrationDescription
    ) -> RegistrationDescription:
        """Create or replace the registration with the given id."""
        if not registration.registration_id:
            raise ValueError("registration_id is required")
        path = f"registrations/{quote(registration.registration_id, safe='')}"
        return self._send_registration("PUT", path, registration)

    def update_registration(self, registration: RegistrationDescription) -> RegistrationDescription:
        """Replace an existing registration if its etag still matches."""
        if not registration.registration_id:
            raise ValueError("registration_id is required")
        if not registration.etag:
            raise ValueError("etag is required to update a registration")
        path = f"registrations/{quote(registration.registration_id, safe='')}"
        return self._send_registration(
            "PUT", path, registration, {"If-Match": f'"{registration.etag}"'})

    def get_registration(self, registration_id: str) -> RegistrationDescription:
        if not registration_id:
            raise ValueError("registration_id is required")
        path = f"registrations/{quote(registration_id, safe='')}"
        url = self._url(path)

        logger.info("Sending registration request", method="GET", path=path)
        with httpx.Client(timeout=config.REQUEST_TIMEOUT) as client:
            response = client.get(url, headers=self._headers(url))
        self._check(response, "GET", path)
        return deserialize_registration(response.text)

    def get_registrations_by_tag(self, tag: str) -> List[RegistrationDescription]:
        """List the registrations carrying a single tag."""
        if not tag:
            raise ValueError("tag is required")
        path = f"tags/{quote(tag, safe='')}/registrations"
        url = self._url(path)

        logger.info("Sending registration request", method="GET", path=path)
        with httpx.Client(timeout=config.REQUEST_TIMEOUT) as client:
            response = client.get(url, headers=self._headers(url))
        self._check(response, "GET", path)
        return deserialize_registrations(response.text)

    def delete_registration(self, registration_id: str, etag: str = "*") -> None:
        """Delete a registration; ``etag="*"`` deletes any version."""
        if not registration_id:
            raise ValueError("registration_id is required")
        path = f"registrations/{quote(registration_id, safe='')}"
        url = self._url(path)
        if_match = "*" if not etag or not etag.strip() or etag == "*" else f'"{etag}"'

        logger.info("Sending registration request", method="DELETE", path=path)
        with httpx.Client(timeout=config.REQUEST_TIMEOUT) as client:
            response = client.delete(url, headers=self._headers(url, {"If-Match": if_match}))
        self._check(response, "DELETE", path)

    def send_notification(
        self,
        notification_format: str,
        body: str,
        tag_expression: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[str]:
        """Send a notification to every registration matching a tag expression.

        The tag expression is passed to the service unmodified.

        Args:
            notification_format: Platform format, e.g. ``"apple"`` or ``"template"``
            body: Notification payload
            tag_expression: Boolean tag expression, or None to broadcast
            headers: Additional platform headers

        Returns:
            The tracking id assigned by the service, if any
        """
        if notification_format not in NOTIFICATION_CONTENT_TYPES:
            raise ValueError(f"Unsupported notification format: {notification_format}")

        path = "messages/"
        url = self._url(path)
        request_headers = self._headers(url, {
            "Content-Type": NOTIFICATION_CONTENT_TYPES[notification_format],
            FORMAT_HEADER: notification_format,
        })
        if tag_expression:
            request_headers[TAGS_HEADER] = tag_expression
        request_headers.update(headers or {})

        logger.info("Sending notification", format=notification_format,
                    tagged=bool(tag_expression))
        with httpx.Client(timeout=config.REQUEST_TIMEOUT) as client:
            response = client.post(url, headers=request_headers, content=body)
        self._check(response, "POST", path)
        return response.headers.get("TrackingId")
