"""PKCS#12 certificate loading for APNs certificate credentials."""
import base64
import binascii
from datetime import datetime, timezone
from typing import Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.hazmat.primitives.serialization import pkcs12

from .errors import CredentialUnusableError, APNS_CERTIFICATE_NOT_USABLE


def _unusable(message: str, **context) -> CredentialUnusableError:
    return CredentialUnusableError(
        APNS_CERTIFICATE_NOT_USABLE, f"The APNs certificate is not usable: {message}", context)


def load_certificate(
    base64_pfx: str, password: Optional[str] = None
) -> Tuple[Optional[PrivateKeyTypes], x509.Certificate]:
    """Decode a base64 PKCS#12 bundle.

    Args:
        base64_pfx: Base64 encoded PFX/P12 file contents
        password: Password protecting the bundle, if any

    Returns:
        Tuple of (private_key, certificate); the key is None when absent

    Raises:
        CredentialUnusableError: If the data cannot be decoded or holds no
            certificate
    """
    try:
        data = base64.b64decode(base64_pfx, validate=True)
    except (binascii.Error, ValueError) as err:
        raise _unusable(str(err)) from err

    secret = password.encode("utf-8") if password else None
    try:
        key, certificate, _ = pkcs12.load_key_and_certificates(data, secret)
    except (ValueError, TypeError) as err:
        raise _unusable(str(err)) from err

    if certificate is None:
        raise _unusable("the bundle does not contain a certificate")
    return key, certificate


def ensure_certificate_usable(
    key: Optional[PrivateKeyTypes],
    certificate: x509.Certificate,
    now: Optional[datetime] = None,
) -> None:
    """Check a certificate has a private key and is inside its validity window.

    A certificate is already expired at the instant of its ``not after`` bound.
    A naive ``now`` is taken to be UTC.

    Raises:
        CredentialUnusableError: If the key is missing or the certificate is
            expired or not yet valid
    """
    if key is None:
        raise _unusable("the certificate has no private key")

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    not_after = certificate.not_valid_after_utc
    not_before = certificate.not_valid_before_utc
    if now >= not_after:
        raise _unusable("the certificate has expired", not_after=not_after.isoformat())
    if now < not_before:
        raise _unusable("the certificate is not yet valid", not_before=not_before.isoformat())
