"""Tests for push network credential validation."""
import base64
from datetime import datetime, timedelta, timezone

import pytest

from notificationhubs import errors
from notificationhubs.conftest import NOT_AFTER, NOT_BEFORE, make_pfx
from notificationhubs.credentials import (
    AdmCredential,
    ApnsCredential,
    BaiduCredential,
    GcmCredential,
    PnsCredential,
)
from notificationhubs.errors import (
    CredentialUnusableError,
    DisallowedExtraFieldError,
    InvalidUrlError,
    MissingRequiredFieldError,
    MutuallyExclusiveFieldError,
)

IN_WINDOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


class TestAdmCredential:
    """Tests for AdmCredential validation."""

    def test_valid_defaults(self):
        AdmCredential("client", "secret").validate(allow_local_mock_pns=False)

    def test_both_required_missing(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            AdmCredential().validate()
        assert exc_info.value.code == errors.REQUIRED_PROPERTIES_NOT_SPECIFIED
        assert "ClientId, ClientSecret" in exc_info.value.message

    def test_client_id_missing(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            AdmCredential(client_secret="secret").validate()
        assert exc_info.value.code == errors.REQUIRED_PROPERTY_NOT_SPECIFIED
        assert exc_info.value.context["property"] == "ClientId"

    def test_client_secret_missing(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            AdmCredential(client_id="client").validate()
        assert exc_info.value.context["property"] == "ClientSecret"

    def test_prod_auth_url_always_allowed(self):
        credential = AdmCredential("client", "secret", auth_token_url="https://api.amazon.com/auth/O2/token")
        credential.validate(allow_local_mock_pns=False)
        credential.validate(allow_local_mock_pns=True)

    def test_auth_url_compared_case_insensitively(self):
        AdmCredential("client", "secret", auth_token_url="HTTPS://API.AMAZON.COM/auth/O2/token").validate()

    def test_integration_auth_url_allowed(self):
        AdmCredential("client", "secret",
                      auth_token_url="http://pushtestservice4.cloudapp.net/adm/token").validate()

    def test_mock_auth_url_needs_flag(self):
        credential = AdmCredential("client", "secret", auth_token_url="http://localhost:8450/adm/token")
        credential.validate(allow_local_mock_pns=True)
        with pytest.raises(InvalidUrlError) as exc_info:
            credential.validate(allow_local_mock_pns=False)
        assert exc_info.value.code == errors.INVALID_ADM_AUTH_TOKEN_URL

    def test_unknown_auth_url(self):
        with pytest.raises(InvalidUrlError):
            AdmCredential("client", "secret", auth_token_url="https://evil.example.com/token").validate()

    def test_relative_auth_url(self):
        with pytest.raises(InvalidUrlError):
            AdmCredential("client", "secret", auth_token_url="/auth/O2/token").validate()

    def test_mock_send_template_needs_flag(self):
        credential = AdmCredential("client", "secret",
                                   send_url_template="http://localhost:8450/adm/send/{0}/messages")
        credential.validate(allow_local_mock_pns=True)
        with pytest.raises(InvalidUrlError) as exc_info:
            credential.validate(allow_local_mock_pns=False)
        assert exc_info.value.code == errors.INVALID_ADM_SEND_URL_TEMPLATE

    def test_send_template_format_error(self):
        credential = AdmCredential("client", "secret",
                                   send_url_template="https://api.amazon.com/messaging/{1}/messages")
        with pytest.raises(InvalidUrlError) as exc_info:
            credential.validate()
        assert exc_info.value.code == errors.INVALID_ADM_SEND_URL_TEMPLATE

    def test_send_template_unbalanced_brace(self):
        with pytest.raises(InvalidUrlError):
            AdmCredential("client", "secret", send_url_template="https://api.amazon.com/{0").validate()

    @pytest.mark.parametrize("template", [
        "https://api.amazon.com/messaging/{0.nope}/messages",
        "https://api.amazon.com/messaging/{0[id]}/messages",
    ])
    def test_send_template_bad_field_access(self, template):
        with pytest.raises(InvalidUrlError) as exc_info:
            AdmCredential("client", "secret", send_url_template=template).validate()
        assert exc_info.value.code == errors.INVALID_ADM_SEND_URL_TEMPLATE

    def test_extra_property_rejected(self):
        credential = AdmCredential.from_properties(
            {"ClientId": "client", "ClientSecret": "secret", "Region": "eu"})
        with pytest.raises(DisallowedExtraFieldError) as exc_info:
            credential.validate()
        assert exc_info.value.code == errors.ONLY_N_PROPERTIES_REQUIRED

    def test_allowed_optional_properties(self):
        credential = AdmCredential.from_properties({
            "clientid": "client",
            "ClientSecret": "secret",
            "AuthTokenUrl": "https://api.amazon.com/auth/O2/token",
            "SendUrlTemplate": "https://api.amazon.com/messaging/registrations/{0}/messages",
        })
        credential.validate()
        assert credential.client_id == "client"

    def test_equality_over_secrets_only(self):
        first = AdmCredential("client", "secret")
        second = AdmCredential("client", "secret",
                               auth_token_url="http://pushtestservice4.cloudapp.net/adm/token")
        assert first == second
        assert hash(first) == hash(second)
        assert first != AdmCredential("client", "other")

    def test_to_properties(self):
        credential = AdmCredential("client", "secret")
        assert credential.to_properties() == {"ClientId": "client", "ClientSecret": "secret"}
        assert credential.auth_token_url == AdmCredential.PROD_AUTH_TOKEN_URL


class TestApnsCredential:
    """Tests for ApnsCredential validation."""

    def test_default_endpoint(self):
        assert ApnsCredential().endpoint == "gateway.push.apple.com"

    def test_endpoint_required(self):
        credential = ApnsCredential(token="t", key_id="k", app_id="a", app_name="n", endpoint=" ")
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            credential.validate()
        assert exc_info.value.code == errors.APNS_ENDPOINT_NOT_SPECIFIED

    def test_token_and_certificate(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(), token="t",
                                    key_id="k", app_id="a", app_name="n")
        with pytest.raises(MutuallyExclusiveFieldError) as exc_info:
            credential.validate()
        assert exc_info.value.code == errors.APNS_PROVIDE_ONLY_ONE_CREDENTIAL_TYPE

    def test_neither_token_nor_certificate(self):
        with pytest.raises(MutuallyExclusiveFieldError) as exc_info:
            ApnsCredential().validate()
        assert exc_info.value.code == errors.APNS_PROPERTIES_NOT_SPECIFIED

    def test_token_auth_valid(self):
        ApnsCredential(token="t", key_id="k", app_id="a", app_name="n").validate()

    @pytest.mark.parametrize("missing", ["key_id", "app_id", "app_name"])
    def test_token_auth_fields_required(self, missing):
        fields = {"token": "t", "key_id": "k", "app_id": "a", "app_name": "n"}
        fields[missing] = ""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            ApnsCredential(**fields).validate()
        assert exc_info.value.code == errors.REQUIRED_PROPERTY_NOT_SPECIFIED

    def test_certificate_valid(self, pfx_factory):
        ApnsCredential(apns_certificate=pfx_factory(), clock=lambda: IN_WINDOW).validate()

    def test_naive_clock_treated_as_utc(self, pfx_factory):
        naive = IN_WINDOW.replace(tzinfo=None)
        ApnsCredential(apns_certificate=pfx_factory(), clock=lambda: naive).validate()

    def test_password_protected_certificate(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(password="p@ss"),
                                    certificate_key="p@ss", clock=lambda: IN_WINDOW)
        credential.validate()

    def test_wrong_password(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(password="p@ss"),
                                    certificate_key="wrong", clock=lambda: IN_WINDOW)
        with pytest.raises(CredentialUnusableError) as exc_info:
            credential.validate()
        assert exc_info.value.code == errors.APNS_CERTIFICATE_NOT_USABLE

    def test_not_base64(self):
        with pytest.raises(CredentialUnusableError):
            ApnsCredential(apns_certificate="not base64!").validate()

    def test_not_pkcs12(self):
        garbage = base64.b64encode(b"not a certificate").decode("ascii")
        with pytest.raises(CredentialUnusableError):
            ApnsCredential(apns_certificate=garbage).validate()

    def test_certificate_without_key(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(include_key=False),
                                    clock=lambda: IN_WINDOW)
        with pytest.raises(CredentialUnusableError, match="private key"):
            credential.validate()

    def test_expired_at_not_after(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(), clock=lambda: NOT_AFTER)
        with pytest.raises(CredentialUnusableError, match="expired"):
            credential.validate()

    def test_valid_just_before_not_after(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(),
                                    clock=lambda: NOT_AFTER - timedelta(seconds=1))
        credential.validate()

    def test_expired_just_after_not_after(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(),
                                    clock=lambda: NOT_AFTER + timedelta(seconds=1))
        with pytest.raises(CredentialUnusableError):
            credential.validate()

    def test_not_yet_valid(self, pfx_factory):
        credential = ApnsCredential(apns_certificate=pfx_factory(),
                                    clock=lambda: NOT_BEFORE - timedelta(seconds=1))
        with pytest.raises(CredentialUnusableError, match="not yet valid"):
            credential.validate()

    def test_from_bytes(self):
        data = make_pfx()
        credential = ApnsCredential.from_bytes(data, "key")
        assert base64.b64decode(credential.apns_certificate) == data
        assert credential.certificate_key == "key"

    def test_from_bytes_rejects_text(self):
        with pytest.raises(ValueError):
            ApnsCredential.from_bytes("not bytes")

    def test_from_file(self, tmp_path):
        data = make_pfx()
        path = tmp_path / "apns.p12"
        path.write_bytes(data)
        credential = ApnsCredential.from_file(str(path))
        assert base64.b64decode(credential.apns_certificate) == data

    def test_equality(self):
        first = ApnsCredential(token="t", key_id="k", app_id="a", app_name="n")
        second = ApnsCredential(token="t", key_id="k", app_id="a", app_name="n")
        assert first == second
        assert first != ApnsCredential(token="t", key_id="k", app_id="a", app_name="n",
                                       endpoint="api.sandbox.push.apple.com")

    def test_from_properties_round_trip(self):
        credential = ApnsCredential(token="t", key_id="k", app_id="a", app_name="n")
        restored = ApnsCredential.from_properties(credential.to_properties())
        assert restored == credential
        assert restored.extra_properties == {}


class TestGcmCredential:
    """Tests for GcmCredential validation."""

    def test_valid(self):
        GcmCredential("api-key").validate()

    def test_api_key_required(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            GcmCredential().validate()
        assert exc_info.value.code == errors.GOOGLE_API_KEY_NOT_SPECIFIED

    def test_too_many_properties(self):
        credential = GcmCredential.from_properties({"GoogleApiKey": "k", "GcmEndpoint": "x", "Other": "y"})
        with pytest.raises(DisallowedExtraFieldError) as exc_info:
            credential.validate()
        assert exc_info.value.code == errors.GCM_REQUIRED_PROPERTIES

    def test_empty_endpoint(self):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            GcmCredential("k", gcm_endpoint="").validate()
        assert exc_info.value.code == errors.GCM_ENDPOINT_NOT_SPECIFIED

    def test_integration_endpoint(self):
        GcmCredential("k", gcm_endpoint="http://pushtestservice.cloudapp.net/gcm/send").validate()

    def test_mock_endpoint_needs_flag(self):
        credential = GcmCredential("k", gcm_endpoint="http://localhost:8450/gcm/send")
        credential.validate(allow_local_mock_pns=True)
        with pytest.raises(InvalidUrlError) as exc_info:
            credential.validate(allow_local_mock_pns=False)
        assert exc_info.value.code == errors.INVALID_GCM_ENDPOINT

    def test_equality_over_api_key(self):
        assert GcmCredential("k") == GcmCredential(
            "k", gcm_endpoint="http://pushtestservice.cloudapp.net/gcm/send")


class TestBaiduCredential:
    """Tests for BaiduCredential."""

    def test_no_local_rules(self):
        BaiduCredential().validate()

    def test_equality_over_api_key(self):
        assert BaiduCredential("key", "secret") == BaiduCredential("key", "other")


class TestIsEqual:
    """Tests for PnsCredential.is_equal()."""

    def test_both_none(self):
        assert PnsCredential.is_equal(None, None) is True

    def test_one_none(self):
        assert PnsCredential.is_equal(AdmCredential("a", "b"), None) is False
        assert PnsCredential.is_equal(None, AdmCredential("a", "b")) is False

    def test_equal(self):
        assert PnsCredential.is_equal(AdmCredential("a", "b"), AdmCredential("a", "b")) is True

    def test_different_types(self):
        assert PnsCredential.is_equal(GcmCredential("a"), BaiduCredential("a")) is False
