"""Tests for NotificationHubClient."""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from notificationhubs.client import NotificationHubClient
from notificationhubs.errors import MissingRequiredFieldError, NotificationHubRequestError
from notificationhubs.registrations import (
    AppleRegistrationDescription,
    WindowsTemplateRegistrationDescription,
)
from notificationhubs.serialization import serialize_registration

DEVICE_TOKEN = "0a1b2c3d" * 8
CHANNEL_URI = "https://db5.notify.windows.com/?token=AgYAAAB"
TOAST = '<toast><visual><binding template="ToastText01"><text id="1">Hi</text></binding></visual></toast>'
BASE = "https://contoso.servicebus.windows.net/hub/"


def _stored(registration_id="reg-1", expiration_time=None):
    registration = AppleRegistrationDescription(DEVICE_TOKEN, tags=["news"])
    registration.registration_id = registration_id
    registration.etag = "1"
    registration.expiration_time = expiration_time
    return serialize_registration(registration)


def _response(status_code=200, text="", headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.headers = headers or {}
    return response


@pytest.fixture
def client(connection_string):
    return NotificationHubClient(connection_string, "hub")


class TestConstruction:
    """Tests for NotificationHubClient construction."""

    def test_hub_path_required(self, connection_string):
        with pytest.raises(ValueError):
            NotificationHubClient(connection_string, "")

    def test_unsupported_api_version(self, connection_string):
        with pytest.raises(ValueError):
            NotificationHubClient(connection_string, "hub", api_version="2000-01")


class TestCreateRegistration:
    """Tests for create_registration()."""

    def test_posts_atom_entry(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(201, _stored())

        created = client.create_registration(AppleRegistrationDescription(DEVICE_TOKEN, tags=["news"]))

        assert created.registration_id == "reg-1"
        url = mock_httpx.post.call_args[0][0]
        headers = mock_httpx.post.call_args[1]["headers"]
        assert url == BASE + "registrations/?api-version=2017-04"
        assert headers["Content-Type"] == "application/atom+xml;type=entry;charset=utf-8"
        assert headers["Authorization"].startswith("SharedAccessSignature ")
        assert "<DeviceToken>" in mock_httpx.post.call_args[1]["content"]

    def test_sends_inferred_headers(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(201, _stored())
        registration = WindowsTemplateRegistrationDescription(CHANNEL_URI, TOAST)

        client.create_registration(registration)

        body = mock_httpx.post.call_args[1]["content"]
        assert "<Value>wns/toast</Value>" in body
        assert "X-WNS-Type" not in registration.wns_headers

    def test_invalid_registration_never_sent(self, client, mock_httpx):
        registration = WindowsTemplateRegistrationDescription(CHANNEL_URI, '{"a": "b"}')
        with pytest.raises(MissingRequiredFieldError):
            client.create_registration(registration)
        mock_httpx.post.assert_not_called()

    def test_other_hub_rejected(self, client, mock_httpx):
        registration = AppleRegistrationDescription(DEVICE_TOKEN, notification_hub_path="other")
        with pytest.raises(ValueError, match="other"):
            client.create_registration(registration)
        mock_httpx.post.assert_not_called()

    def test_same_hub_accepted(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(201, _stored())
        client.create_registration(AppleRegistrationDescription(DEVICE_TOKEN, notification_hub_path="hub"))

    def test_registration_id_must_be_empty(self, client, mock_httpx):
        with pytest.raises(ValueError):
            client.create_registration(AppleRegistrationDescription(DEVICE_TOKEN, registration_id="x"))

    def test_error_status(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(401, "Unauthorized")
        with pytest.raises(NotificationHubRequestError) as exc_info:
            client.create_registration(AppleRegistrationDescription(DEVICE_TOKEN))
        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "Unauthorized"


class TestUpdateRegistration:
    """Tests for update_registration() and create_or_update_registration()."""

    def test_update_sends_if_match(self, client, mock_httpx):
        mock_httpx.put.return_value = _response(200, _stored())
        registration = AppleRegistrationDescription(DEVICE_TOKEN, registration_id="reg-1")
        registration.etag = "7"

        client.update_registration(registration)

        url = mock_httpx.put.call_args[0][0]
        assert url == BASE + "registrations/reg-1?api-version=2017-04"
        assert mock_httpx.put.call_args[1]["headers"]["If-Match"] == '"7"'

    def test_update_fetched_registration(self, client, mock_httpx):
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
        mock_httpx.get.return_value = _response(200, _stored(expiration_time=expires))
        mock_httpx.put.return_value = _response(200, _stored(expiration_time=expires))
        fetched = client.get_registration("reg-1")
        assert fetched.expiration_time == expires

        fetched.tags = ["news", "sports"]
        client.update_registration(fetched)

        body = mock_httpx.put.call_args[1]["content"]
        assert "<ExpirationTime>" not in body
        assert fetched.expiration_time == expires

    def test_foreign_hub_path_not_sent(self, client, mock_httpx):
        mock_httpx.put.return_value = _response(200, _stored())
        registration = AppleRegistrationDescription(DEVICE_TOKEN, registration_id="reg-1")
        client.create_or_update_registration(registration)
        assert registration.notification_hub_path == ""

    def test_update_requires_etag(self, client, mock_httpx):
        with pytest.raises(ValueError, match="etag"):
            client.update_registration(AppleRegistrationDescription(DEVICE_TOKEN, registration_id="reg-1"))

    def test_create_or_update(self, client, mock_httpx):
        mock_httpx.put.return_value = _response(200, _stored())
        client.create_or_update_registration(
            AppleRegistrationDescription(DEVICE_TOKEN, registration_id="reg-1"))
        assert "If-Match" not in mock_httpx.put.call_args[1]["headers"]

    def test_create_or_update_requires_id(self, client, mock_httpx):
        with pytest.raises(ValueError):
            client.create_or_update_registration(AppleRegistrationDescription(DEVICE_TOKEN))


class TestGetAndDelete:
    """Tests for get_registration(), get_registrations_by_tag() and delete_registration()."""

    def test_get(self, client, mock_httpx):
        mock_httpx.get.return_value = _response(200, _stored("reg-9"))
        registration = client.get_registration("reg-9")
        assert registration.registration_id == "reg-9"
        assert registration.etag == "1"
        assert mock_httpx.get.call_args[0][0] == BASE + "registrations/reg-9?api-version=2017-04"

    def test_get_not_found(self, client, mock_httpx):
        mock_httpx.get.return_value = _response(404)
        with pytest.raises(NotificationHubRequestError) as exc_info:
            client.get_registration("missing")
        assert exc_info.value.status_code == 404

    def test_get_by_tag(self, client, mock_httpx):
        entry = _stored().split("?>", 1)[1]
        feed = f'<feed xmlns="http://www.w3.org/2005/Atom">{entry}</feed>'
        mock_httpx.get.return_value = _response(200, feed)
        registrations = client.get_registrations_by_tag("news")
        assert [r.registration_id for r in registrations] == ["reg-1"]
        assert mock_httpx.get.call_args[0][0] == BASE + "tags/news/registrations?api-version=2017-04"

    def test_delete_any_version(self, client, mock_httpx):
        mock_httpx.delete.return_value = _response(200)
        client.delete_registration("reg-1")
        assert mock_httpx.delete.call_args[1]["headers"]["If-Match"] == "*"

    def test_delete_specific_version(self, client, mock_httpx):
        mock_httpx.delete.return_value = _response(200)
        client.delete_registration("reg-1", etag="4")
        assert mock_httpx.delete.call_args[1]["headers"]["If-Match"] == '"4"'

    def test_delete_blank_etag_matches_any(self, client, mock_httpx):
        mock_httpx.delete.return_value = _response(200)
        client.delete_registration("reg-1", etag=" ")
        assert mock_httpx.delete.call_args[1]["headers"]["If-Match"] == "*"


class TestSendNotification:
    """Tests for send_notification()."""

    def test_tag_expression_passed_through(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(201, headers={"TrackingId": "t-1"})

        tracking_id = client.send_notification(
            "apple", '{"aps": {"alert": "hi"}}', tag_expression="(a && b) || !c")

        assert tracking_id == "t-1"
        headers = mock_httpx.post.call_args[1]["headers"]
        assert headers["ServiceBusNotification-Tags"] == "(a && b) || !c"
        assert headers["ServiceBusNotification-Format"] == "apple"
        assert mock_httpx.post.call_args[0][0] == BASE + "messages/?api-version=2017-04"

    def test_broadcast_has_no_tags_header(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(201)
        client.send_notification("template", '{"message": "hi"}')
        assert "ServiceBusNotification-Tags" not in mock_httpx.post.call_args[1]["headers"]

    def test_extra_headers(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(201)
        client.send_notification("windows", TOAST, headers={"X-WNS-Type": "wns/toast"})
        assert mock_httpx.post.call_args[1]["headers"]["X-WNS-Type"] == "wns/toast"

    def test_unknown_format(self, client, mock_httpx):
        with pytest.raises(ValueError):
            client.send_notification("pigeon", "{}")

    def test_error_status(self, client, mock_httpx):
        mock_httpx.post.return_value = _response(403, "Forbidden")
        with pytest.raises(NotificationHubRequestError):
            client.send_notification("apple", "{}")
