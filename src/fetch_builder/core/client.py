"""
Fluent HTTP request builder and sender.

    result = (
        fetch_builder.new()
        .base("https://api.example.com/v1/")
        .get("repos/octo/issues")
        .query(IssueParams(state="open"))
        .set_header("Accept", "application/json")
        .receive(success=List[Issue], failure=ApiError)
    )

Configuration methods mutate the builder and return it. Use new() to
derive an independent child from a shared base builder.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from ..auth.signer import NoopSigner, SignerProvider, basic_auth_value
from ..body.providers import (
    BodyProvider,
    FormBodyProvider,
    JSONBodyProvider,
    RawBodyProvider,
)
from ..config import (
    CONTENT_TYPE_HEADER,
    DEFAULT_METHOD,
    _is_debug_enabled_by_env,
    get_default_async_doer,
    get_default_doer,
)
from ..console import mask_headers, print_request, print_response
from ..decoders.response_decoder import JSONDecoder, ResponseDecoder
from ..errors import (
    BodyEncodingError,
    DecodeError,
    FetchBuilderError,
    SigningError,
    TransportError,
)
from ..types import AsyncDoer, Doer, FetchResult, HttpMethod, RequestContent
from .request_builder import (
    HeaderMap,
    canonical_header_key,
    copy_headers,
    finalize_url,
    header_items,
    resolve_path,
)

logger = logging.getLogger("fetch_builder.client")


def _is_empty_query(source: Any) -> bool:
    return source is None or (isinstance(source, Mapping) and not source)


def _select_target(
    response: httpx.Response, success: Any, failure: Any
) -> Tuple[Optional[str], Any]:
    """Pick the FetchResult field and target to decode into, if any."""
    if response.status_code == 204:
        return None, None
    if response.headers.get("Content-Length", "").strip() == "0":
        return None, None
    if 200 <= response.status_code <= 299:
        return ("success", success) if success is not None else (None, None)
    return ("failure", failure) if failure is not None else (None, None)


def _drain_and_close(response: httpx.Response) -> None:
    """Read what is left of the body and close the response."""
    if response.is_closed:
        return
    try:
        response.read()
    except (httpx.HTTPError, httpx.StreamError) as e:
        logger.debug(f"_drain_and_close: discarding unread body failed: {e!r}")
    finally:
        response.close()


async def _adrain_and_close(response: httpx.Response) -> None:
    if response.is_closed:
        return
    try:
        await response.aread()
    except (httpx.HTTPError, httpx.StreamError) as e:
        logger.debug(f"_adrain_and_close: discarding unread body failed: {e!r}")
    finally:
        await response.aclose()


class FetchBuilder:
    """HTTP request builder and sender."""

    def __init__(
        self,
        doer: Optional[Doer] = None,
        async_doer: Optional[AsyncDoer] = None,
    ):
        # None means the process-wide default doer
        self._doer = doer
        self._async_doer = async_doer
        self._method: str = DEFAULT_METHOD
        self._raw_url: str = ""
        self._header: HeaderMap = {}
        self._query_sources: List[Any] = []
        self._body_provider: Optional[BodyProvider] = None
        self._response_decoder: ResponseDecoder = JSONDecoder()
        self._signer: SignerProvider = NoopSigner()
        self._debug: bool = _is_debug_enabled_by_env()

    def new(self) -> "FetchBuilder":
        """Derive a child builder.

        Headers and query sources are copied. Doers, body provider, decoder
        and signer are shared with the parent.
        """
        child = FetchBuilder(doer=self._doer, async_doer=self._async_doer)
        child._method = self._method
        child._raw_url = self._raw_url
        child._header = copy_headers(self._header)
        child._query_sources = list(self._query_sources)
        child._body_provider = self._body_provider
        child._response_decoder = self._response_decoder
        child._signer = self._signer
        child._debug = self._debug
        return child

    def __copy__(self) -> "FetchBuilder":
        return self.new()

    def __repr__(self) -> str:
        return f"FetchBuilder(method={self._method!r}, url={self._raw_url!r})"

    # Inspection

    @property
    def method(self) -> str:
        return self._method

    @property
    def raw_url(self) -> str:
        return self._raw_url

    @property
    def headers(self) -> httpx.Headers:
        """Snapshot of the configured headers."""
        return httpx.Headers(header_items(self._header))

    @property
    def query_sources(self) -> Tuple[Any, ...]:
        return tuple(self._query_sources)

    @property
    def current_doer(self) -> Doer:
        return self._doer if self._doer is not None else get_default_doer()

    @property
    def current_async_doer(self) -> AsyncDoer:
        return self._async_doer if self._async_doer is not None else get_default_async_doer()

    # Doers

    def doer(self, doer: Optional[Doer]) -> "FetchBuilder":
        """Set the doer used to send requests. None restores the default."""
        self._doer = doer
        return self

    def async_doer(self, doer: Optional[AsyncDoer]) -> "FetchBuilder":
        """Set the doer used by the async methods. None restores the default."""
        self._async_doer = doer
        return self

    def debug(self, enabled: bool = True) -> "FetchBuilder":
        """Print requests and responses to the console while sending."""
        self._debug = enabled
        return self

    # Method and URL

    def _method_path(self, method: HttpMethod, path: str) -> "FetchBuilder":
        self._method = method
        return self.path(path)

    def head(self, path: str = "") -> "FetchBuilder":
        return self._method_path("HEAD", path)

    def get(self, path: str = "") -> "FetchBuilder":
        return self._method_path("GET", path)

    def post(self, path: str = "") -> "FetchBuilder":
        return self._method_path("POST", path)

    def put(self, path: str = "") -> "FetchBuilder":
        return self._method_path("PUT", path)

    def patch(self, path: str = "") -> "FetchBuilder":
        return self._method_path("PATCH", path)

    def delete(self, path: str = "") -> "FetchBuilder":
        return self._method_path("DELETE", path)

    def options(self, path: str = "") -> "FetchBuilder":
        return self._method_path("OPTIONS", path)

    def trace(self, path: str = "") -> "FetchBuilder":
        return self._method_path("TRACE", path)

    def connect(self, path: str = "") -> "FetchBuilder":
        return self._method_path("CONNECT", path)

    def base(self, raw_url: str) -> "FetchBuilder":
        """Replace the URL outright. It is resolved at request time."""
        self._raw_url = raw_url
        return self

    def path(self, path: str) -> "FetchBuilder":
        """Resolve path against the current URL.

        If either URL fails to parse the current URL is left unmodified.
        """
        self._raw_url = resolve_path(self._raw_url, path)
        return self

    # Headers

    def add_header(self, key: str, value: str) -> "FetchBuilder":
        """Append value to the values of the canonicalized key."""
        self._header.setdefault(canonical_header_key(key), []).append(value)
        return self

    def set_header(self, key: str, value: str) -> "FetchBuilder":
        """Replace the values of the canonicalized key with value."""
        self._header[canonical_header_key(key)] = [value]
        return self

    def basic_auth(self, username: str, password: str) -> "FetchBuilder":
        """Set the Authorization header for HTTP Basic auth."""
        return self.set_header("Authorization", basic_auth_value(username, password))

    # Query

    def query(self, source: Any) -> "FetchBuilder":
        """Append a query source: a pydantic model, dataclass or mapping.

        Sources are encoded when the request is built, see fetch_builder.query.
        """
        if not _is_empty_query(source):
            self._query_sources.append(source)
        return self

    # Body

    def body_provider(self, provider: Optional[BodyProvider]) -> "FetchBuilder":
        """Set the body provider and its Content-Type header."""
        if provider is None:
            return self

        self._body_provider = provider

        content_type = provider.content_type()
        if content_type:
            self.set_header(CONTENT_TYPE_HEADER, content_type)

        return self

    def body(self, content: Optional[RequestContent]) -> "FetchBuilder":
        """Send content as is. No Content-Type header is set."""
        if content is None or (isinstance(content, (str, bytes)) and not content):
            return self
        return self.body_provider(RawBodyProvider(content))

    def body_json(self, payload: Any) -> "FetchBuilder":
        """Send payload JSON encoded."""
        if payload is None:
            return self
        return self.body_provider(JSONBodyProvider(payload))

    def body_form(self, payload: Any) -> "FetchBuilder":
        """Send payload form url encoded."""
        if payload is None:
            return self
        return self.body_provider(FormBodyProvider(payload))

    # Strategies

    def response_decoder(self, decoder: Optional[ResponseDecoder]) -> "FetchBuilder":
        if decoder is None:
            return self
        self._response_decoder = decoder
        return self

    def signer(self, signer: Optional[SignerProvider]) -> "FetchBuilder":
        if signer is None:
            return self
        self._signer = signer
        return self

    # Materialize

    def request(self, extensions: Optional[Dict[str, Any]] = None) -> httpx.Request:
        """Build a new httpx.Request from the builder state.

        extensions are handed to the doer untouched.
        """
        url = finalize_url(self._raw_url, self._query_sources)

        content = None
        if self._body_provider is not None:
            content = self._body_provider.body()

        try:
            request = httpx.Request(
                self._method,
                url,
                headers=header_items(self._header),
                content=content,
                extensions=extensions,
            )
        except TypeError as e:
            raise BodyEncodingError(f"unsupported body content: {e}") from e

        try:
            self._signer.sign(request)
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"{type(self._signer).__name__} failed: {e}") from e

        logger.debug(
            f"FetchBuilder.request: method={request.method}, url={request.url}, "
            f"headers={mask_headers(request.headers)}"
        )
        return request

    # Send

    def receive_success(
        self, success: Any, extensions: Optional[Dict[str, Any]] = None
    ) -> FetchResult:
        """Send the request, decoding 2xx bodies into success."""
        return self.receive(success, None, extensions)

    def receive(
        self,
        success: Any = None,
        failure: Any = None,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> FetchResult:
        """Build and send the request.

        2xx bodies are decoded into success, any other into failure. A None
        target skips decoding for its branch.
        """
        request = self.request(extensions)
        return self.do(request, success, failure)

    def _send_failed(self, request: httpx.Request, error: Exception) -> TransportError:
        logger.debug(f"FetchBuilder: {request.method} {request.url} failed: {error!r}")
        return TransportError(
            f"{request.method} {request.url} failed: {error}",
            response=getattr(error, "response", None),
        )

    def do(self, request: httpx.Request, success: Any = None, failure: Any = None) -> FetchResult:
        """Send request and decode the response.

        The response body is drained and closed before returning, whether or
        not decoding happened or succeeded.
        """
        if self._debug:
            print_request(request)

        try:
            response = self.current_doer.send(request)
        except FetchBuilderError:
            raise
        except Exception as e:
            raise self._send_failed(request, e) from e

        logger.debug(f"FetchBuilder.do: {request.method} {request.url} -> {response.status_code}")
        result = FetchResult(response=response)
        try:
            branch, target = _select_target(response, success, failure)
            if branch is not None:
                setattr(result, branch, self._response_decoder.decode(response, target))
        finally:
            _drain_and_close(response)
            if self._debug:
                print_response(response)
        return result

    async def receive_success_async(
        self, success: Any, extensions: Optional[Dict[str, Any]] = None
    ) -> FetchResult:
        return await self.receive_async(success, None, extensions)

    async def receive_async(
        self,
        success: Any = None,
        failure: Any = None,
        extensions: Optional[Dict[str, Any]] = None,
    ) -> FetchResult:
        """Async form of receive(), sending through the async doer."""
        request = self.request(extensions)
        return await self.do_async(request, success, failure)

    async def do_async(
        self, request: httpx.Request, success: Any = None, failure: Any = None
    ) -> FetchResult:
        """Async form of do()."""
        if self._debug:
            print_request(request)

        try:
            response = await self.current_async_doer.send(request)
        except FetchBuilderError:
            raise
        except Exception as e:
            raise self._send_failed(request, e) from e

        logger.debug(f"FetchBuilder.do_async: {request.method} {request.url} -> {response.status_code}")
        result = FetchResult(response=response)
        try:
            branch, target = _select_target(response, success, failure)
            if branch is not None:
                try:
                    await response.aread()
                except (httpx.HTTPError, httpx.StreamError) as e:
                    raise DecodeError(f"cannot read response body: {e}", response=response) from e
                setattr(result, branch, self._response_decoder.decode(response, target))
        finally:
            await _adrain_and_close(response)
            if self._debug:
                print_response(response)
        return result
