"""Shared access signature tokens for the Notification Hubs REST API."""
import base64
import hashlib
import hmac
import time
import urllib.parse
from typing import Callable, Optional

DEFAULT_TOKEN_TTL = 3600


class SharedAccessSignatureTokenProvider:
    """Signs request URLs with a shared access key.

    Args:
        key_name: Name of the shared access policy
        key: Shared access key value
        ttl: Token lifetime in seconds
        clock: Returns the current Unix time; defaults to ``time.time``
    """

    def __init__(
        self,
        key_name: str,
        key: str,
        ttl: int = DEFAULT_TOKEN_TTL,
        clock: Optional[Callable[[], float]] = None,
    ):
        if not key_name or not key:
            raise ValueError("key_name and key are required")
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.key_name = key_name
        self.key = key
        self.ttl = ttl
        self.clock = clock or time.time

    def _sign_string(self, to_sign: str) -> str:
        digest = hmac.new(self.key.encode('utf-8'), to_sign.encode('utf-8'), hashlib.sha256).digest()
        return base64.b64encode(digest).decode('ascii')

    def sign(self, url: str) -> str:
        """Return the Authorization header value for a request URL.

        The token covers the lower-cased URL without its query string.
        """
        target = urllib.parse.urlsplit(url)._replace(query="", fragment="").geturl()
        encoded_uri = urllib.parse.quote(target.lower(), safe='')
        expiry = str(int(round(self.clock() + self.ttl)))
        signature = urllib.parse.quote(self._sign_string(f"{encoded_uri}\n{expiry}"), safe='')
        return (f"SharedAccessSignature sr={encoded_uri}&sig={signature}"
                f"&se={expiry}&skn={self.key_name}")
