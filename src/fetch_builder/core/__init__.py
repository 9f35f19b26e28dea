"""
Core builder for fetch_builder.
"""
from .client import FetchBuilder
from .request_builder import (
    canonical_header_key,
    finalize_url,
    parse_reference,
    resolve_path,
)

__all__ = [
    "FetchBuilder",
    "canonical_header_key",
    "finalize_url",
    "parse_reference",
    "resolve_path",
]
