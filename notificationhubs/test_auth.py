"""Tests for shared access signature tokens."""
import base64
import hashlib
import hmac
import urllib.parse

import pytest

from notificationhubs.auth import SharedAccessSignatureTokenProvider

URL = "https://Contoso.servicebus.windows.net/hub/messages/?api-version=2017-04"


def _parse(token):
    scheme, _, fields = token.partition(" ")
    return scheme, dict(part.split("=", 1) for part in fields.split("&"))


class TestSharedAccessSignatureTokenProvider:
    """Tests for SharedAccessSignatureTokenProvider.sign()."""

    def test_token_fields(self):
        provider = SharedAccessSignatureTokenProvider("policy", "key", ttl=60, clock=lambda: 1000)
        scheme, fields = _parse(provider.sign(URL))
        assert scheme == "SharedAccessSignature"
        assert fields["se"] == "1060"
        assert fields["skn"] == "policy"
        assert fields["sr"] == urllib.parse.quote(
            "https://contoso.servicebus.windows.net/hub/messages/", safe="")

    def test_signature(self):
        provider = SharedAccessSignatureTokenProvider("policy", "key", ttl=60, clock=lambda: 1000)
        _, fields = _parse(provider.sign(URL))
        to_sign = f"{fields['sr']}\n1060".encode("utf-8")
        expected = base64.b64encode(hmac.new(b"key", to_sign, hashlib.sha256).digest()).decode("ascii")
        assert urllib.parse.unquote(fields["sig"]) == expected

    def test_query_string_not_signed(self):
        provider = SharedAccessSignatureTokenProvider("policy", "key", clock=lambda: 1000)
        assert provider.sign(URL) == provider.sign(URL.split("?")[0])

    def test_missing_key(self):
        with pytest.raises(ValueError):
            SharedAccessSignatureTokenProvider("policy", "")

    def test_non_positive_ttl(self):
        with pytest.raises(ValueError):
            SharedAccessSignatureTokenProvider("policy", "key", ttl=0)
