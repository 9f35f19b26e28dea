"""
Body providers produce the content type and content of a request body.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..config import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE, default_serializer
from ..errors import BodyEncodingError, QueryEncodingError
from ..query import encode_query, encode_values
from ..types import RequestContent, Serializer

logger = logging.getLogger("fetch_builder.body")


class BodyProvider(ABC):
    """Body provider interface."""

    @abstractmethod
    def content_type(self) -> str:
        """Content-Type of the body. Empty string leaves the header alone."""
        ...

    @abstractmethod
    def body(self) -> RequestContent:
        """Request content. Raises BodyEncodingError on failure."""
        ...


class RawBodyProvider(BodyProvider):
    """Passes the wrapped content through untouched.

    Streams are exhausted by the first request built from them, so a builder
    holding a stream body should be materialized only once.
    """

    def __init__(self, content: RequestContent):
        self._content = content

    def content_type(self) -> str:
        return ""

    def body(self) -> RequestContent:
        return self._content


class JSONBodyProvider(BodyProvider):
    """Encodes the payload as JSON."""

    def __init__(self, payload: Any, serializer: Optional[Serializer] = None):
        self._payload = payload
        self._serializer = serializer or default_serializer

    def content_type(self) -> str:
        return JSON_CONTENT_TYPE

    def body(self) -> bytes:
        try:
            text = self._serializer.serialize(self._payload)
        except (TypeError, ValueError) as e:
            raise BodyEncodingError(f"cannot encode JSON body: {e}") from e
        logger.debug(f"JSONBodyProvider.body: encoded {len(text)} chars")
        return text.encode("utf-8")


class FormBodyProvider(BodyProvider):
    """Encodes the payload as application/x-www-form-urlencoded.

    Uses the same encoding rules as query sources (see fetch_builder.query).
    """

    def __init__(self, payload: Any):
        self._payload = payload

    def content_type(self) -> str:
        return FORM_CONTENT_TYPE

    def body(self) -> bytes:
        try:
            pairs = encode_values(self._payload)
        except QueryEncodingError as e:
            raise BodyEncodingError(f"cannot encode form body: {e.message}") from e
        return encode_query(pairs).encode("ascii")
