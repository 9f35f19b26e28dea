"""
Encoding of query sources and form payloads into URL key/value pairs.

A query source is a pydantic model, a dataclass instance or a mapping.
Pydantic field aliases play the role of struct tags:

    class ListParams(BaseModel):
        page_size: Optional[int] = Field(default=None, alias="per_page")
        state: Optional[str] = None

    encode_values(ListParams(per_page=50))  # [("per_page", "50")]

Value rules:
- None values are omitted
- booleans become "true" / "false"
- lists, tuples and sets repeat the key once per item
- nested mappings and models are flattened as parent[child]
"""
import dataclasses
import logging
from functools import lru_cache
from typing import Any, Iterable, List, Mapping, Tuple
from urllib.parse import quote_plus, urlencode

from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter
from pydantic_core import PydanticSerializationError

from .errors import QueryEncodingError

logger = logging.getLogger("fetch_builder.query")

QueryPairs = List[Tuple[str, str]]


@lru_cache(maxsize=128)
def _adapter_for(tp: type) -> TypeAdapter:
    return TypeAdapter(tp)


def _dump(source: Any) -> Mapping[str, Any]:
    """Turn a query source into a plain mapping."""
    if isinstance(source, BaseModel):
        return source.model_dump(mode="json", by_alias=True, exclude_none=True)
    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        return _adapter_for(type(source)).dump_python(
            source, mode="json", by_alias=True, exclude_none=True
        )
    if isinstance(source, Mapping):
        return source
    raise QueryEncodingError(
        f"query source must be a mapping, dataclass or pydantic model, got {type(source).__name__}"
    )


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _flatten(key: str, value: Any, pairs: QueryPairs) -> None:
    if value is None:
        return
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        for item in items:
            _flatten(key, item, pairs)
    else:
        pairs.append((key, _format_scalar(value)))


def encode_values(source: Any) -> QueryPairs:
    """Encode a query source into ordered key/value pairs."""
    if source is None:
        return []
    try:
        data = _dump(source)
        pairs: QueryPairs = []
        for key, value in data.items():
            _flatten(str(key), value, pairs)
    except QueryEncodingError:
        raise
    except (PydanticSerializationError, PydanticSchemaGenerationError, TypeError, UnicodeDecodeError) as e:
        raise QueryEncodingError(f"cannot encode {type(source).__name__}: {e}") from e

    logger.debug(f"encode_values: {type(source).__name__} -> {len(pairs)} pairs")
    return pairs


def sort_pairs(pairs: Iterable[Tuple[str, str]]) -> QueryPairs:
    """Sort pairs by key. Values of the same key keep their relative order."""
    return sorted(pairs, key=lambda pair: pair[0])


def encode_query(pairs: Iterable[Tuple[str, str]]) -> str:
    """Encode pairs in canonical form: sorted by key, quote_plus escaping."""
    return urlencode(sort_pairs(pairs), quote_via=quote_plus)
