"""
Unit tests for HTTP request parsing.
"""

import dataclasses

import pytest

from fileserver.http.headers import HeaderList
from fileserver.http.request import (
    HTTPParseError,
    MalformedRequestLine,
    MissingVersionToken,
    RequestParser,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser."""

    def test_parse_simple_get(self, sample_get_request):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(sample_get_request)

        assert request.method == "GET"
        assert request.path == "/page.html"
        assert request.version == "HTTP/1.1"
        assert request.is_get
        assert request.host == "localhost:8080"
        assert request.user_agent == "pytest"
        assert request.body == b""

    def test_parse_post_with_body(self, sample_post_request):
        """Test parsing POST request with body."""
        request = RequestParser().parse(sample_post_request)

        assert request.method == "POST"
        assert not request.is_get
        assert request.body == b"name=John&email=john%40example.com"

    def test_version_has_no_carriage_return(self):
        """The CR before LF never leaks into the version token."""
        request = parse_request(b"GET / HTTP/1.0\r\n\r\n")
        assert request.version == "HTTP/1.0"

    def test_headers_are_last_first(self):
        """Headers come out in reverse order of arrival."""
        request = parse_request(
            b"GET / HTTP/1.1\r\n"
            b"Host: localhost\r\n"
            b"User-Agent: pytest\r\n"
            b"Accept: */*\r\n"
            b"\r\n"
        )
        assert [h.name for h in request.headers] == ["Accept", "User-Agent", "Host"]

    def test_header_split_on_first_colon(self):
        """Colons after the first belong to the value."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: example.com:8080\r\n\r\n")
        assert request.headers.get("Host") == "example.com:8080"

    def test_header_value_whitespace(self):
        """Exactly one leading space is removed from a value."""
        request = parse_request(
            b"GET / HTTP/1.1\r\n"
            b"X-None:value\r\n"
            b"X-Two:  value\r\n"
            b"\r\n"
        )
        assert request.headers.get("X-None") == "value"
        assert request.headers.get("X-Two") == " value"

    def test_line_without_colon_is_skipped(self):
        """A header line without a colon is ignored."""
        request = parse_request(
            b"GET / HTTP/1.1\r\n"
            b"garbage line\r\n"
            b"Host: localhost\r\n"
            b"\r\n"
        )
        assert len(request.headers) == 1
        assert request.host == "localhost"

    def test_duplicate_headers_kept(self):
        """Repeated headers are all retained."""
        request = parse_request(
            b"GET / HTTP/1.1\r\n"
            b"Accept: text/html\r\n"
            b"Accept: text/plain\r\n"
            b"\r\n"
        )
        assert request.headers.get_all("Accept") == ["text/plain", "text/html"]

    def test_bare_lf_line_endings(self):
        """LF-only requests parse the same way."""
        request = parse_request(b"GET /a HTTP/1.0\nHost: x\n\nbody")

        assert request.path == "/a"
        assert request.version == "HTTP/1.0"
        assert request.host == "x"
        assert request.body == b"body"

    def test_body_copied_verbatim(self):
        """Everything after the blank line is the body, CRLFs included."""
        request = parse_request(b"POST /f HTTP/1.1\r\n\r\nline1\r\nline2")
        assert request.body == b"line1\r\nline2"

    def test_body_truncated(self):
        """Bodies longer than max_body_size are cut silently."""
        parser = RequestParser(max_body_size=4)
        request = parser.parse(b"POST / HTTP/1.1\r\n\r\nabcdefgh")
        assert request.body == b"abcd"

    def test_no_blank_line(self):
        """Input ending inside the headers yields an empty body."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: x\r\n")

        assert request.host == "x"
        assert request.body == b""

    def test_request_line_only(self):
        """A lone request line without a terminator is accepted."""
        request = parse_request(b"GET /x HTTP/1.1")

        assert request.path == "/x"
        assert len(request.headers) == 0

    def test_repeated_spaces_collapse(self):
        """Runs of spaces separate tokens like a single space."""
        request = parse_request(b"GET   /   HTTP/1.1\r\n\r\n")
        assert (request.method, request.path, request.version) == ("GET", "/", "HTTP/1.1")

    def test_method_kept_verbatim(self):
        """Unknown methods still parse."""
        request = parse_request(b"BREW /pot HTTP/1.1\r\n\r\n")
        assert request.method == "BREW"
        assert not request.is_get

    def test_client_address_carried(self):
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n", ("10.0.0.1", 5000))
        assert request.client_address == ("10.0.0.1", 5000)

    def test_request_is_immutable(self):
        """Parsed requests cannot be modified."""
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.path = "/other"

    def test_fields_frozen_headers_shared(self):
        """Fields cannot be rebound; headers is the parsed HeaderList."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: a\r\n\r\n")

        with pytest.raises(dataclasses.FrozenInstanceError):
            request.headers = HeaderList()

        assert isinstance(request.headers, HeaderList)
        assert request.host == "a"


class TestRequestLineErrors:
    """Tests for request line rejection."""

    def test_missing_version(self):
        """Two tokens means the version is missing."""
        with pytest.raises(MissingVersionToken):
            parse_request(b"GET /\r\n\r\n")

    @pytest.mark.parametrize("data", [
        b"",
        b"\r\n\r\n",
        b"GET\r\n\r\n",
        b"GET / HTTP/1.1 extra\r\n\r\n",
        b"GET index.html HTTP/1.1\r\n\r\n",
    ])
    def test_malformed_request_line(self, data):
        """Anything other than three tokens with a slash path is rejected."""
        with pytest.raises(MalformedRequestLine):
            parse_request(data)

    def test_path_too_long(self):
        """Paths beyond max_path_length are rejected."""
        parser = RequestParser(max_path_length=10)
        with pytest.raises(MalformedRequestLine):
            parser.parse(b"GET /" + b"a" * 20 + b" HTTP/1.1\r\n\r\n")

    def test_errors_share_base_class(self):
        """Both parse errors are HTTPParseError and ValueError."""
        assert issubclass(MalformedRequestLine, HTTPParseError)
        assert issubclass(MissingVersionToken, HTTPParseError)
        assert issubclass(HTTPParseError, ValueError)
