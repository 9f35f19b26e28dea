"""
Response decoders turn a response body into a caller supplied target.

The target is a type or annotation understood by pydantic: a BaseModel
subclass, a dataclass, ``dict``, ``list[int]``, ``typing.Any`` and so on.
"""
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

import httpx
from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from ..errors import DecodeError

logger = logging.getLogger("fetch_builder.decoders")


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def type_adapter(target: Any) -> TypeAdapter:
    """Return a (cached when hashable) TypeAdapter for target."""
    try:
        return _cached_adapter(target)
    except TypeError:
        # unhashable annotations cannot be cached
        return TypeAdapter(target)


def read_body(response: httpx.Response) -> bytes:
    """Read the whole response body, raising DecodeError when the stream fails."""
    try:
        return response.read()
    except (httpx.HTTPError, httpx.StreamError) as e:
        raise DecodeError(f"cannot read response body: {e}", response=response) from e


class ResponseDecoder(ABC):
    """Response decoder interface."""

    @abstractmethod
    def decode(self, response: httpx.Response, target: Any) -> Any:
        """Decode response into target and return the decoded value."""
        ...


class JSONDecoder(ResponseDecoder):
    """Decodes JSON response bodies."""

    def decode(self, response: httpx.Response, target: Any) -> Any:
        content = read_body(response)
        try:
            adapter = type_adapter(target)
            value = adapter.validate_json(content)
        except ValidationError as e:
            raise DecodeError(
                f"cannot decode JSON response into {target!r}: {e}", response=response
            ) from e
        except PydanticSchemaGenerationError as e:
            raise DecodeError(f"unsupported decode target {target!r}", response=response) from e
        logger.debug(f"JSONDecoder.decode: {len(content)} bytes into {target!r}")
        return value


class TextDecoder(ResponseDecoder):
    """Decodes the body as text using the response charset."""

    def decode(self, response: httpx.Response, target: Any = str) -> Any:
        read_body(response)
        try:
            text = response.text
        except (UnicodeDecodeError, LookupError) as e:
            raise DecodeError(f"cannot decode text response: {e}", response=response) from e
        try:
            return type_adapter(target).validate_python(text)
        except ValidationError as e:
            raise DecodeError(
                f"cannot decode text response into {target!r}: {e}", response=response
            ) from e
        except PydanticSchemaGenerationError as e:
            raise DecodeError(f"unsupported decode target {target!r}", response=response) from e
