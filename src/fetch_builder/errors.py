"""
Exceptions raised by fetch_builder.

    FetchBuilderError
    ├── BuildError              request could not be materialized
    │   ├── InvalidURLError
    │   ├── QueryEncodingError
    │   ├── BodyEncodingError
    │   └── SigningError
    ├── EncodingError
    │   └── DecodeError         response body could not be decoded
    └── TransportError          the doer failed to perform the request
"""
from typing import Optional

import httpx


class FetchBuilderError(Exception):
    """Base class for fetch_builder errors."""

    code = "FETCH_BUILDER_ERROR"

    def __init__(self, message: str, response: Optional[httpx.Response] = None) -> None:
        super().__init__(message)
        self.message = message
        self.response = response


class BuildError(FetchBuilderError):
    """Error raised when a request cannot be materialized."""

    code = "BUILD_ERROR"


class EncodingError(FetchBuilderError):
    """Error raised when a query, body or response cannot be (de)serialized."""

    code = "ENCODING_ERROR"


class InvalidURLError(BuildError, ValueError):
    """The builder URL cannot be parsed into an absolute URL."""

    code = "INVALID_URL"


class QueryEncodingError(BuildError, EncodingError):
    """A query source could not be encoded into key/value pairs."""

    code = "QUERY_ENCODING_ERROR"


class BodyEncodingError(BuildError, EncodingError):
    """A body provider failed to produce the request content."""

    code = "BODY_ENCODING_ERROR"


class SigningError(BuildError):
    """The signer rejected or failed to sign the request."""

    code = "SIGNING_ERROR"


class DecodeError(EncodingError):
    """The response body could not be decoded into the target."""

    code = "DECODE_ERROR"


class TransportError(FetchBuilderError):
    """The doer failed to perform the request.

    ``response`` is whatever the doer managed to produce, usually None.
    """

    code = "TRANSPORT_ERROR"
