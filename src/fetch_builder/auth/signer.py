"""
Signers authenticate a materialized request by mutating its headers.
"""
import base64
import binascii
import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Callable, Dict, Iterable, Optional

import httpx

from ..config import HMAC_SIGNED_HEADER_PREFIX
from ..console import mask_value
from ..errors import SigningError

logger = logging.getLogger("fetch_builder.auth")
LOG_PREFIX = f"[AUTH:{__file__}]"


def basic_auth_value(username: str, password: str) -> str:
    """Return the Authorization value for HTTP Basic auth."""
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


class SignerProvider(ABC):
    """Signer interface.

    sign() runs after method, URL, headers and body are set on the request
    and may add or overwrite headers. Raising fails the materialization.
    """

    @abstractmethod
    def sign(self, request: httpx.Request) -> None:
        """Sign request in place."""
        ...


class NoopSigner(SignerProvider):
    """Leaves requests untouched."""

    def sign(self, request: httpx.Request) -> None:
        return None


class HeaderSigner(SignerProvider):
    """Sets a fixed set of headers, overwriting existing values."""

    def __init__(self, headers: Dict[str, str]):
        self._headers = dict(headers)

    def sign(self, request: httpx.Request) -> None:
        for key, value in self._headers.items():
            request.headers[key] = value


class BasicAuthSigner(SignerProvider):
    """HTTP Basic auth signer."""

    def __init__(self, username: str, password: str):
        self._value = basic_auth_value(username, password)

    def sign(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = self._value
        logger.debug(f"{LOG_PREFIX} BasicAuthSigner.sign: Authorization={mask_value(self._value)}")


class BearerSigner(SignerProvider):
    """Bearer token signer.

    The per-request callback wins over the static token. Having neither
    fails the request.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        get_token_for_request: Optional[Callable[[httpx.Request], Optional[str]]] = None,
    ):
        self._token = token
        self._get_token_for_request = get_token_for_request

    def sign(self, request: httpx.Request) -> None:
        token = None
        if self._get_token_for_request:
            token = self._get_token_for_request(request)
        if not token:
            token = self._token
        if not token:
            raise SigningError("no bearer token available for request")
        request.headers["Authorization"] = f"Bearer {token}"
        logger.debug(f"{LOG_PREFIX} BearerSigner.sign: token={mask_value(token)}")


class HmacSha256Signer(SignerProvider):
    """Shared key HMAC-SHA256 signer.

    Sets x-ms-date, x-ms-content-sha256 and an Authorization header of the
    form ``HMAC-SHA256 SignedHeaders=x-ms-date;host;x-ms-content-sha256&Signature=<sig>``
    where the signature covers::

        METHOD\\npath?query\\n<date>;<host>;<content hash>

    access_key is the base64 encoded shared secret.
    """

    def __init__(self, access_key: str, clock: Optional[Callable[[], datetime]] = None):
        self._access_key = access_key
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _secret(self) -> bytes:
        try:
            return base64.b64decode(self._access_key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SigningError("access key is not valid base64") from e

    def sign(self, request: httpx.Request) -> None:
        secret = self._secret()
        if not isinstance(request.stream, Iterable):
            raise SigningError("cannot hash an async request body for signing")
        content = request.read()

        content_hash = base64.b64encode(hashlib.sha256(content).digest()).decode("ascii")
        date = format_datetime(self._clock().astimezone(timezone.utc), usegmt=True)
        host = request.headers.get("Host") or request.url.netloc.decode("ascii")
        path_and_query = request.url.raw_path.decode("ascii")

        string_to_sign = f"{request.method}\n{path_and_query}\n{date};{host};{content_hash}"
        digest = hmac.new(secret, string_to_sign.encode("utf-8"), hashlib.sha256).digest()
        signature = base64.b64encode(digest).decode("ascii")

        request.headers["x-ms-date"] = date
        request.headers["x-ms-content-sha256"] = content_hash
        request.headers["Authorization"] = HMAC_SIGNED_HEADER_PREFIX + signature
        logger.debug(
            f"{LOG_PREFIX} HmacSha256Signer.sign: host={host}, path={path_and_query}, "
            f"signature={mask_value(signature)}"
        )
