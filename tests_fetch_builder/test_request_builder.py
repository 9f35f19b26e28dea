"""
Tests for core/request_builder.py
Logic testing: Decision/Branch, Boundary Value, Path coverage
"""
import pytest
from pydantic import BaseModel, Field

from fetch_builder.core.request_builder import (
    canonical_header_key,
    copy_headers,
    finalize_url,
    header_items,
    parse_reference,
    resolve_path,
)
from fetch_builder.errors import InvalidURLError, QueryEncodingError


class TestCanonicalHeaderKey:
    """Tests for canonical_header_key function."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("content-type", "Content-Type"),
            ("CONTENT-TYPE", "Content-Type"),
            ("x-ms-date", "X-Ms-Date"),
            ("accept", "Accept"),
            ("Authorization", "Authorization"),
            ("x_custom", "X_custom"),
        ],
    )
    def test_canonicalizes(self, key, expected):
        assert canonical_header_key(key) == expected

    # Boundary: invalid token characters are kept verbatim
    def test_invalid_key_unchanged(self):
        assert canonical_header_key("bad key") == "bad key"

    # Boundary: empty key
    def test_empty_key(self):
        assert canonical_header_key("") == ""


class TestParseReference:
    """Tests for parse_reference function."""

    @pytest.mark.parametrize(
        "raw",
        ["http://zeisss.com/", "http://zeisss.com", "/123", "/123/", "123", "", "?x=1", "a%20b"],
    )
    def test_valid_references(self, raw):
        assert parse_reference(raw) is not None

    @pytest.mark.parametrize(
        "raw",
        [
            "http://example.com/\x7f",
            "http://exa mple.com/\n",
            "/path%zz",
            "/path%",
            ":missing-scheme",
            "http://[::1/broken",
            "http://example.com:notaport/",
        ],
    )
    def test_malformed_references(self, raw):
        assert parse_reference(raw) is None


class TestResolvePath:
    """Tests for resolve_path function."""

    # Path: relative path replaces last segment
    def test_relative_path_merges(self):
        assert resolve_path("http://example.com/api", "items") == "http://example.com/items"

    # Path: relative path appended to base ending with slash
    def test_relative_path_appends_to_directory(self):
        assert resolve_path("http://example.com/api/", "items") == "http://example.com/api/items"

    # Path: root relative path replaces the base path
    def test_root_relative_path(self):
        assert resolve_path("http://example.com/api/v1/", "/health") == "http://example.com/health"

    # Decision: absolute path replaces base entirely
    def test_absolute_path_replaces_base(self):
        assert resolve_path("http://example.com/api/", "https://other.org/x") == "https://other.org/x"

    # Path: dot segments are resolved
    def test_dot_segments(self):
        assert resolve_path("http://example.com/a/b/c", "../d") == "http://example.com/a/d"

    # Path: query on the path is kept
    def test_path_with_query(self):
        assert resolve_path("http://example.com/api", "items?x=1") == "http://example.com/items?x=1"

    # Boundary: empty base
    def test_empty_base(self):
        assert resolve_path("", "http://zeisss.com/") == "http://zeisss.com/"

    # Error Path: malformed path leaves URL untouched
    def test_malformed_path_is_ignored(self):
        assert resolve_path("http://example.com/api/", "%zz") == "http://example.com/api/"

    # Error Path: malformed base leaves URL untouched
    def test_malformed_base_is_ignored(self):
        assert resolve_path("http://example.com/%zz", "items") == "http://example.com/%zz"

    # Boundary: empty path drops the fragment, keeps the query
    def test_empty_path_drops_fragment(self):
        assert resolve_path("http://example.com/api?x=1#top", "") == "http://example.com/api?x=1"

    def test_empty_path_without_fragment(self):
        assert resolve_path("http://example.com/api/", "") == "http://example.com/api/"


class TestFinalizeUrl:
    """Tests for finalize_url function."""

    # Path: no query sources keeps URL
    def test_no_sources(self):
        assert finalize_url("https://api.example.com/items") == "https://api.example.com/items"

    # Path: existing query re-encoded in key order
    def test_existing_query_sorted(self):
        url = finalize_url("https://api.example.com/items?b=2&a=1")
        assert url == "https://api.example.com/items?a=1&b=2"

    # Path: values of repeated keys are all kept
    def test_union_of_values(self):
        url = finalize_url("http://example.com/items?x=1", [{"x": ["2"]}, {"x": "3", "a": "z"}])
        assert url == "http://example.com/items?a=z&x=1&x=2&x=3"

    # Path: pydantic model source with alias
    def test_model_source(self):
        class Params(BaseModel):
            page_size: int = Field(alias="per_page")

        url = finalize_url("http://example.com/items", [Params(per_page=50)])
        assert url == "http://example.com/items?per_page=50"

    # Path: fragment is preserved
    def test_fragment_preserved(self):
        url = finalize_url("http://example.com/items#top", [{"q": "a b"}])
        assert url == "http://example.com/items?q=a+b#top"

    # Boundary: blank values kept
    def test_blank_values_kept(self):
        assert finalize_url("http://example.com/?flag") == "http://example.com/?flag="

    # Determinism: same input produces same output
    def test_deterministic(self):
        sources = [{"b": ["2", "1"], "a": "x"}, {"b": "0"}]
        first = finalize_url("http://example.com/", sources)
        second = finalize_url("http://example.com/", sources)
        assert first == second == "http://example.com/?a=x&b=2&b=1&b=0"

    # Error Path: relative URL cannot be requested
    def test_relative_url_rejected(self):
        with pytest.raises(InvalidURLError, match="not absolute"):
            finalize_url("/items")

    # Error Path: malformed URL
    def test_malformed_url_rejected(self):
        with pytest.raises(InvalidURLError, match="cannot parse"):
            finalize_url("http://example.com/%zz")

    # Error Path: unsupported query source
    def test_bad_source(self):
        with pytest.raises(QueryEncodingError):
            finalize_url("http://example.com/", [42])


class TestHeaderHelpers:
    """Tests for header_items and copy_headers."""

    def test_header_items_flattens(self):
        items = header_items({"Accept": ["a", "b"], "X-One": ["1"]})
        assert items == [("Accept", "a"), ("Accept", "b"), ("X-One", "1")]

    def test_copy_headers_is_deep(self):
        original = {"Accept": ["a"]}
        copied = copy_headers(original)
        copied["Accept"].append("b")
        assert original == {"Accept": ["a"]}
