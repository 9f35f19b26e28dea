"""
URL and header utilities for fetch_builder.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import SplitResult, parse_qsl, urljoin, urlsplit, urlunsplit

import httpx

from ..errors import InvalidURLError
from ..query import encode_query, encode_values

logger = logging.getLogger("fetch_builder.request_builder")

HeaderMap = Dict[str, List[str]]

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)


def canonical_header_key(key: str) -> str:
    """Canonical MIME header key: first letter and letters after '-' upper cased.

    "content-type" -> "Content-Type". Keys with characters outside the
    token set (spaces, colons, ...) are returned unchanged.
    """
    if not key or any(ch not in _TOKEN_CHARS for ch in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


def parse_reference(raw_url: str) -> Optional[SplitResult]:
    """Parse raw_url as a URL reference. Returns None when it is malformed."""
    if _CONTROL_CHARS.search(raw_url) or _BAD_ESCAPE.search(raw_url):
        return None
    # a leading colon means an empty scheme
    if raw_url.startswith(":"):
        return None
    try:
        parts = urlsplit(raw_url)
        httpx.URL(raw_url)
    except (ValueError, httpx.InvalidURL):
        return None
    return parts


def resolve_path(raw_url: str, path: str) -> str:
    """Resolve path against raw_url.

    Absolute paths replace raw_url, relative ones are merged per RFC 3986.
    When either side fails to parse raw_url is returned unchanged.
    """
    if parse_reference(raw_url) is None or parse_reference(path) is None:
        logger.debug(f"resolve_path: ignoring unparsable reference base={raw_url!r} path={path!r}")
        return raw_url
    if not path:
        # an empty reference keeps the base query but not its fragment
        return raw_url.split("#", 1)[0]
    return urljoin(raw_url, path)


def finalize_url(raw_url: str, query_sources: Iterable[Any] = ()) -> str:
    """Build the absolute request URL.

    Pairs already in the URL query come first, followed by the pairs of each
    query source in order. Repeated keys keep every value. The merged query is
    re-encoded sorted by key.
    """
    parts = parse_reference(raw_url)
    if parts is None:
        raise InvalidURLError(f"cannot parse URL {raw_url!r}")
    if not parts.scheme or not parts.netloc:
        raise InvalidURLError(f"URL {raw_url!r} is not absolute")

    pairs: List[Tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)
    for source in query_sources:
        pairs.extend(encode_values(source))

    url = urlunsplit(parts._replace(query=encode_query(pairs)))
    logger.debug(f"finalize_url: {raw_url} -> {url}")
    return url


def header_items(header: HeaderMap) -> List[Tuple[str, str]]:
    """Flatten the header map into (key, value) pairs."""
    return [(key, value) for key, values in header.items() for value in values]


def copy_headers(header: HeaderMap) -> HeaderMap:
    """Copy the header map, value lists included."""
    return {key: list(values) for key, values in header.items()}
