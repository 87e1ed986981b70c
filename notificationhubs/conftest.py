"""Shared pytest fixtures for the Notification Hubs SDK tests."""
import base64
from datetime import datetime, timezone

import pytest
from unittest.mock import MagicMock, patch
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

NOT_BEFORE = datetime(2024, 1, 1, tzinfo=timezone.utc)
NOT_AFTER = datetime(2030, 1, 1, tzinfo=timezone.utc)

CONNECTION_STRING = (
    "Endpoint=sb://contoso.servicebus.windows.net/;"
    "SharedAccessKeyName=DefaultFullSharedAccessSignature;"
    "SharedAccessKey=c2VjcmV0LWtleQ=="
)


def make_pfx(
    not_before: datetime = NOT_BEFORE,
    not_after: datetime = NOT_AFTER,
    password: str = None,
    include_key: bool = True,
) -> bytes:
    """Build a self-signed PKCS#12 bundle for certificate credential tests."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "notificationhubs-test")])
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    encryption = (
        serialization.BestAvailableEncryption(password.encode("utf-8"))
        if password else serialization.NoEncryption()
    )
    return pkcs12.serialize_key_and_certificates(
        b"apns", key if include_key else None, certificate, None, encryption)


@pytest.fixture
def pfx_factory():
    """Return a function building base64 PKCS#12 bundles."""
    def factory(**kwargs) -> str:
        return base64.b64encode(make_pfx(**kwargs)).decode("ascii")
    return factory


@pytest.fixture
def connection_string():
    return CONNECTION_STRING


@pytest.fixture
def mock_httpx():
    """Mock httpx Client used by NotificationHubClient."""
    with patch("httpx.Client") as mock_cls:
        mock_client = MagicMock()
        mock_cls.return_value.__enter__ = MagicMock(
            return_value=mock_client)
        mock_cls.return_value.__exit__ = MagicMock(return_value=False)
        yield mock_client
