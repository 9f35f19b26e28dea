"""
Configuration for fetch_builder.
"""
import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel

from .query import _adapter_for
from .types import AsyncDoer, Doer

logger = logging.getLogger("fetch_builder.config")

CONTENT_TYPE_HEADER = "Content-Type"
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
HMAC_SIGNED_HEADER_PREFIX = (
    "HMAC-SHA256 SignedHeaders=x-ms-date;host;x-ms-content-sha256&Signature="
)

DEFAULT_METHOD = "GET"
DEBUG_ENV_VAR = "FETCH_BUILDER_DEBUG"


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


@dataclass
class BuilderConfig:
    """Builder configuration.

    base_url may be empty, in which case every request needs an absolute path.
    timeout and verify only affect doers created by create_doer().
    """

    base_url: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Union[TimeoutConfig, float, None] = None
    verify: Optional[bool] = None
    debug: bool = False


DEFAULT_TIMEOUT = TimeoutConfig()


def _is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


def _is_debug_enabled_by_env() -> bool:
    """Check FETCH_BUILDER_DEBUG for a truthy value."""
    return os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes", "on")


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return DEFAULT_TIMEOUT
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


def validate_config(config: BuilderConfig) -> None:
    """Validate builder configuration."""
    if not config.base_url:
        return

    try:
        parsed = urlparse(config.base_url)
    except ValueError as e:
        raise ValueError(f"Invalid base_url: {config.base_url}") from e
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid base_url: {config.base_url}")


def _to_httpx_timeout(timeout: TimeoutConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=timeout.connect,
        read=timeout.read,
        write=timeout.write,
        pool=timeout.connect,
    )


def _resolve_verify(verify: Optional[bool]) -> bool:
    if verify is not None:
        return verify
    # NODE_TLS_REJECT_UNAUTHORIZED=0 or SSL_CERT_VERIFY=0 will disable SSL verification
    return not _is_ssl_verify_disabled_by_env()


def create_doer(config: Optional[BuilderConfig] = None) -> httpx.Client:
    """Create an httpx.Client honouring the timeout and verify settings."""
    config = config or BuilderConfig()
    timeout = normalize_timeout(config.timeout)
    verify = _resolve_verify(config.verify)
    logger.debug(f"create_doer: timeout={timeout}, verify={verify}")
    return httpx.Client(timeout=_to_httpx_timeout(timeout), verify=verify)


def create_async_doer(config: Optional[BuilderConfig] = None) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient honouring the timeout and verify settings."""
    config = config or BuilderConfig()
    timeout = normalize_timeout(config.timeout)
    verify = _resolve_verify(config.verify)
    logger.debug(f"create_async_doer: timeout={timeout}, verify={verify}")
    return httpx.AsyncClient(timeout=_to_httpx_timeout(timeout), verify=verify)


# Process-wide default doers, created on first use
_default_doer: Optional[Doer] = None
_default_async_doer: Optional[AsyncDoer] = None


def get_default_doer() -> Doer:
    """Return the process-wide default doer, creating it on first use."""
    global _default_doer
    if _default_doer is None:
        _default_doer = create_doer()
    return _default_doer


def get_default_async_doer() -> AsyncDoer:
    """Return the process-wide default async doer, creating it on first use."""
    global _default_async_doer
    if _default_async_doer is None:
        _default_async_doer = create_async_doer()
    return _default_async_doer


def set_default_doer(doer: Optional[Doer]) -> None:
    """Replace the process-wide default doer. None drops it so the next use recreates it."""
    global _default_doer
    _default_doer = doer


def set_default_async_doer(doer: Optional[AsyncDoer]) -> None:
    """Replace the process-wide default async doer."""
    global _default_async_doer
    _default_async_doer = doer


def close_default_doers() -> None:
    """Close the sync default doer and forget both defaults.

    The async default is only dropped; close it with ``await client.aclose()``
    from inside its event loop when it matters.
    """
    global _default_doer, _default_async_doer
    if isinstance(_default_doer, httpx.Client):
        _default_doer.close()
    _default_doer = None
    _default_async_doer = None


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _adapter_for(type(value)).dump_python(value, mode="json", by_alias=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class DefaultSerializer:
    """Default JSON serializer."""

    def serialize(self, data: Any) -> str:
        """Serialize data to JSON string."""
        return json.dumps(data, default=_json_default, allow_nan=False)

    def deserialize(self, text: str) -> Any:
        """Deserialize JSON string to data."""
        return json.loads(text)


default_serializer = DefaultSerializer()
