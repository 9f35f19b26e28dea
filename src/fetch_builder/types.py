"""
Type definitions for fetch_builder.
"""
from dataclasses import dataclass
from typing import (
    IO,
    Any,
    AsyncIterable,
    Iterable,
    Literal,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

import httpx


# HTTP methods
HttpMethod = Literal[
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "TRACE",
    "CONNECT",
]

# Anything httpx.Request(content=...) accepts
RequestContent = Union[str, bytes, IO[bytes], Iterable[bytes], AsyncIterable[bytes]]


@runtime_checkable
class Doer(Protocol):
    """Executes http requests. Implemented by httpx.Client."""

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send request and return the response."""
        ...


@runtime_checkable
class AsyncDoer(Protocol):
    """Executes http requests asynchronously. Implemented by httpx.AsyncClient."""

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send request and return the response."""
        ...


class Serializer(Protocol):
    """Serializer protocol for custom JSON handling."""

    def serialize(self, data: Any) -> str:
        """Serialize data to string."""
        ...

    def deserialize(self, text: str) -> Any:
        """Deserialize string to data."""
        ...


@dataclass
class FetchResult:
    """Outcome of an executed request.

    ``success`` holds the decoded body of a 2xx response and ``failure`` the
    decoded body of any other status, when a target was supplied for that
    branch. Both stay None when decoding was skipped.
    """

    response: httpx.Response
    success: Optional[Any] = None
    failure: Optional[Any] = None

    @property
    def status(self) -> int:
        return self.response.status_code

    @property
    def ok(self) -> bool:
        return 200 <= self.response.status_code <= 299
