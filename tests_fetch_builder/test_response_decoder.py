"""
Tests for decoders/response_decoder.py
Logic testing: Equivalence partitioning, Error Path coverage
"""
from dataclasses import dataclass
from typing import Any, Dict, List

import httpx
import pytest
from pydantic import BaseModel

from fetch_builder.decoders import JSONDecoder, ResponseDecoder, TextDecoder
from fetch_builder.decoders.response_decoder import type_adapter
from fetch_builder.errors import DecodeError, EncodingError


class Item(BaseModel):
    id: int
    name: str


@dataclass
class Point:
    x: int
    y: int


class ResetStream(httpx.SyncByteStream):
    """Stream that fails part way through the body."""

    def __iter__(self):
        yield b'{"id": '
        raise httpx.ReadError("connection reset by peer")


class TestJSONDecoder:
    """Tests for JSONDecoder."""

    @pytest.fixture
    def decoder(self):
        return JSONDecoder()

    # Partition: dict target
    def test_decode_dict(self, decoder):
        response = httpx.Response(200, json={"a": 1})
        assert decoder.decode(response, Dict[str, int]) == {"a": 1}

    # Partition: pydantic model target
    def test_decode_model(self, decoder):
        response = httpx.Response(200, json={"id": 1, "name": "widget"})
        assert decoder.decode(response, Item) == Item(id=1, name="widget")

    # Partition: list of models
    def test_decode_model_list(self, decoder):
        response = httpx.Response(200, json=[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])
        items = decoder.decode(response, List[Item])
        assert [item.id for item in items] == [1, 2]

    # Partition: dataclass target
    def test_decode_dataclass(self, decoder):
        response = httpx.Response(200, json={"x": 1, "y": 2})
        assert decoder.decode(response, Point) == Point(1, 2)

    # Partition: Any keeps raw JSON
    def test_decode_any(self, decoder):
        response = httpx.Response(200, json=[1, "two", None])
        assert decoder.decode(response, Any) == [1, "two", None]

    # Path: unread streaming response is read
    def test_decode_streaming_response(self, decoder, streaming_response):
        response = streaming_response(200, {"id": 3, "name": "c"})
        assert decoder.decode(response, Item).id == 3

    # Error Path: invalid JSON
    def test_invalid_json(self, decoder):
        response = httpx.Response(200, content=b"not json")
        with pytest.raises(DecodeError, match="cannot decode JSON response") as exc_info:
            decoder.decode(response, Dict[str, Any])
        assert exc_info.value.response is response
        assert isinstance(exc_info.value, EncodingError)

    # Error Path: shape mismatch
    def test_shape_mismatch(self, decoder):
        response = httpx.Response(200, json={"id": "not-an-int", "name": "x"})
        with pytest.raises(DecodeError):
            decoder.decode(response, Item)


    # Error Path: body read fails
    def test_read_error(self, decoder):
        response = httpx.Response(200, stream=ResetStream())
        with pytest.raises(DecodeError, match="cannot read response body") as exc_info:
            decoder.decode(response, Item)
        assert exc_info.value.response is response
        assert isinstance(exc_info.value.__cause__, httpx.ReadError)


class TestTextDecoder:
    """Tests for TextDecoder."""

    def test_decode_text(self):
        response = httpx.Response(200, text="hello")
        assert TextDecoder().decode(response, str) == "hello"

    def test_decode_default_target(self):
        response = httpx.Response(200, text="plain")
        assert TextDecoder().decode(response) == "plain"

    # Path: text coerced into target type
    def test_decode_into_int(self):
        response = httpx.Response(200, text="42")
        assert TextDecoder().decode(response, int) == 42

    # Error Path: text does not fit target
    def test_decode_mismatch(self):
        response = httpx.Response(200, text="forty-two")
        with pytest.raises(DecodeError, match="cannot decode text response"):
            TextDecoder().decode(response, int)


    # Error Path: body read fails
    def test_read_error(self):
        response = httpx.Response(200, stream=ResetStream())
        with pytest.raises(DecodeError, match="cannot read response body"):
            TextDecoder().decode(response, str)


class TestTypeAdapterCache:
    """Tests for type_adapter helper."""

    def test_hashable_targets_cached(self):
        assert type_adapter(Item) is type_adapter(Item)

    def test_decoders_implement_interface(self):
        assert isinstance(JSONDecoder(), ResponseDecoder)
        assert isinstance(TextDecoder(), ResponseDecoder)
