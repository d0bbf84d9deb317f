"""
Unit tests for the header list.
"""

import dataclasses

import pytest

from fileserver.http.headers import Header, HeaderList


class TestHeaderList:
    """Tests for HeaderList."""

    def test_prepend_puts_newest_first(self):
        """Iteration runs from the most recently prepended header."""
        headers = HeaderList()
        headers.prepend("A", "1")
        headers.prepend("B", "2")
        headers.prepend("C", "3")

        assert [h.name for h in headers] == ["C", "B", "A"]

    def test_duplicates_are_kept(self):
        """Same-named headers coexist in list order."""
        headers = HeaderList()
        headers.prepend("Accept", "text/html")
        headers.prepend("Accept", "text/plain")

        assert len(headers) == 2
        assert headers.get_all("accept") == ["text/plain", "text/html"]

    def test_iteration_is_restartable(self):
        """Each iteration starts again from the head."""
        headers = HeaderList().prepend("A", "1").prepend("B", "2")

        first = list(headers)
        second = list(headers)

        assert first == second == [Header("B", "2"), Header("A", "1")]

    def test_get_is_case_insensitive(self):
        """get() ignores name case and returns the head-most match."""
        headers = HeaderList()
        headers.prepend("Host", "old")
        headers.prepend("HOST", "new")

        assert headers.get("host") == "new"
        assert headers.get("X-Missing") is None
        assert headers.get("X-Missing", "fallback") == "fallback"

    def test_clear_is_idempotent(self):
        """clear() empties the list and can run twice."""
        headers = HeaderList().prepend("A", "1")

        headers.clear()
        headers.clear()

        assert len(headers) == 0
        assert list(headers) == []

    def test_empty_list(self):
        """A fresh list is empty and falsy."""
        headers = HeaderList()
        assert len(headers) == 0
        assert not headers


class TestHeader:
    """Tests for the Header value type."""

    def test_to_line(self):
        assert Header("Content-Type", "text/html").to_line() == "Content-Type: text/html"

    def test_header_is_immutable(self):
        header = Header("A", "1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            header.value = "2"
