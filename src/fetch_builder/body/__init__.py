"""
Request body providers.
"""
from .providers import (
    BodyProvider,
    RawBodyProvider,
    JSONBodyProvider,
    FormBodyProvider,
)

__all__ = [
    "BodyProvider",
    "RawBodyProvider",
    "JSONBodyProvider",
    "FormBodyProvider",
]
