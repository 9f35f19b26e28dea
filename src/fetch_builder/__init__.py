"""
Fluent HTTP request builder for Python.

Accumulates method, URL, headers, query sources, a body and decoding/signing
strategies on a builder, then materializes and sends one httpx request.
"""
from .types import (
    HttpMethod,
    RequestContent,
    Doer,
    AsyncDoer,
    Serializer,
    FetchResult,
)
from .errors import (
    FetchBuilderError,
    BuildError,
    EncodingError,
    InvalidURLError,
    QueryEncodingError,
    BodyEncodingError,
    SigningError,
    DecodeError,
    TransportError,
)
from .config import (
    BuilderConfig,
    TimeoutConfig,
    DefaultSerializer,
    JSON_CONTENT_TYPE,
    FORM_CONTENT_TYPE,
    create_doer,
    create_async_doer,
    get_default_doer,
    get_default_async_doer,
    set_default_doer,
    set_default_async_doer,
    close_default_doers,
)
from .query import encode_values, encode_query
from .body.providers import (
    BodyProvider,
    RawBodyProvider,
    JSONBodyProvider,
    FormBodyProvider,
)
from .decoders.response_decoder import ResponseDecoder, JSONDecoder, TextDecoder
from .auth.signer import (
    SignerProvider,
    NoopSigner,
    HeaderSigner,
    BasicAuthSigner,
    BearerSigner,
    HmacSha256Signer,
)
from .core.client import FetchBuilder
from .factory import new, create_builder

__all__ = [
    # Types
    "HttpMethod",
    "RequestContent",
    "Doer",
    "AsyncDoer",
    "Serializer",
    "FetchResult",
    # Errors
    "FetchBuilderError",
    "BuildError",
    "EncodingError",
    "InvalidURLError",
    "QueryEncodingError",
    "BodyEncodingError",
    "SigningError",
    "DecodeError",
    "TransportError",
    # Config
    "BuilderConfig",
    "TimeoutConfig",
    "DefaultSerializer",
    "JSON_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
    "create_doer",
    "create_async_doer",
    "get_default_doer",
    "get_default_async_doer",
    "set_default_doer",
    "set_default_async_doer",
    "close_default_doers",
    # Query
    "encode_values",
    "encode_query",
    # Body
    "BodyProvider",
    "RawBodyProvider",
    "JSONBodyProvider",
    "FormBodyProvider",
    # Decoders
    "ResponseDecoder",
    "JSONDecoder",
    "TextDecoder",
    # Signers
    "SignerProvider",
    "NoopSigner",
    "HeaderSigner",
    "BasicAuthSigner",
    "BearerSigner",
    "HmacSha256Signer",
    # Builder
    "FetchBuilder",
    "new",
    "create_builder",
]

__version__ = "0.1.0"
