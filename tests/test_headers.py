"""Tests for smallwork.http.headers: immutable, case-insensitive Headers."""

import pytest

from smallwork.http.headers import Headers


class TestHeaders:
    def test_getitem(self) -> None:
        h = Headers({"Content-Type": "text/html"})
        assert h["Content-Type"] == "text/html"

    def test_case_insensitive(self) -> None:
        h = Headers({"Content-Type": "text/html"})
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_names_stored_as_given(self) -> None:
        h = Headers({"X-Api-Key": "secret"})
        assert h.raw == (("X-Api-Key", "secret"),)

    def test_missing_key_raises(self) -> None:
        h = Headers({"Accept": "*/*"})
        with pytest.raises(KeyError):
            h["X-Missing"]

    def test_contains(self) -> None:
        h = Headers({"Accept": "*/*"})
        assert "accept" in h
        assert "Accept" in h
        assert "x-missing" not in h

    def test_contains_rejects_non_str(self) -> None:
        h = Headers({"Accept": "*/*"})
        assert 42 not in h  # type: ignore[operator]

    def test_len_deduplicates(self) -> None:
        h = Headers([("Cookie", "a=1"), ("cookie", "b=2")])
        assert len(h) == 1

    def test_iter_yields_unique_lowercase_keys(self) -> None:
        h = Headers([("Accept", "*/*"), ("Content-Type", "text/html"), ("ACCEPT", "text/xml")])
        assert list(h) == ["accept", "content-type"]

    def test_get_with_default(self) -> None:
        h = Headers({"Accept": "*/*"})
        assert h.get("accept") == "*/*"
        assert h.get("x-missing") is None
        assert h.get("x-missing", "fallback") == "fallback"

    def test_get_list(self) -> None:
        h = Headers([("Cookie", "a=1"), ("cookie", "b=2"), ("Accept", "*/*")])
        assert h.get_list("COOKIE") == ["a=1", "b=2"]
        assert h.get_list("x-missing") == []

    def test_first_value_wins(self) -> None:
        h = Headers([("X-Forwarded-For", "1.1.1.1"), ("x-forwarded-for", "2.2.2.2")])
        assert h["x-forwarded-for"] == "1.1.1.1"

    def test_immutable(self) -> None:
        h = Headers({"Accept": "*/*"})
        with pytest.raises(TypeError):
            h["Accept"] = "text/html"  # type: ignore[index]
