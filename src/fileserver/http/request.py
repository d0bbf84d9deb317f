"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes read from a client socket into an HTTPRequest.

=============================================================================
WHAT WE PARSE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      HTTP REQUEST STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /docs/index.html HTTP/1.0\r\n        ← request line            │
    │   Host: localhost:8080\r\n                 ← header                  │
    │   User-Agent: curl/8.0\r\n                 ← header                  │
    │   \r\n                                     ← end of headers          │
    │   ...                                      ← body (rare for GET)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PARSING RULES
=============================================================================

1. Lines are split on "\n". A "\r" before it is a line-ending artifact
   and is stripped from tokens; it is never treated as a delimiter.

2. The request line must hold exactly three space-separated tokens:
   METHOD PATH VERSION. The path must start with "/".
      - two tokens        → MissingVersionToken
      - any other count   → MalformedRequestLine

3. Header lines run until an empty line (or a line that is just "\r").
   Each is split on the FIRST colon:
      "Host: example.com:8080\r"  →  ("Host", "example.com:8080")
   One leading space and the trailing "\r" are removed from the value.
   A line without a colon is skipped, not rejected.

4. Whatever follows the blank line is the body, copied verbatim and
   silently cut at max_body_size.

5. Headers are PREPENDED as they are read, so the resulting list is
   last-header-first. Nothing downstream depends on header precedence.

Parsing is lenient everywhere except the request line: without a well
formed request line there is nothing sensible to answer, and the server
closes the connection without writing a response.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .headers import HeaderList


logger = logging.getLogger(__name__)

# ISO-8859-1 maps every byte to exactly one code point, so decoding never
# fails and never changes token lengths.
HEADER_ENCODING = "iso-8859-1"

DEFAULT_MAX_BODY_SIZE = 8 * 1024
DEFAULT_MAX_PATH_LENGTH = 2048


class HTTPParseError(ValueError):
    """
    Base class for request parse failures.

    Parse failures are fatal for the connection: the server logs them and
    closes the socket without sending any response bytes.
    """


class MalformedRequestLine(HTTPParseError):
    """The first line is not ``METHOD PATH VERSION``."""


class MissingVersionToken(HTTPParseError):
    """The request line carries a method and a path but no version."""


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once per connection by RequestParser and not modified afterwards.
    Only the fields are frozen: ``headers`` is the parser's HeaderList and
    nothing downstream calls prepend() or clear() on it.

    Attributes:
        method:         Request method token, verbatim ("GET", "POST", ...)
        path:           Request target, always starting with "/"
        version:        Version token, verbatim ("HTTP/1.0", "HTTP/1.1")
        headers:        HeaderList, last-received header first
        body:           Raw body bytes (possibly truncated, usually empty)
        client_address: (ip, port) of the peer, for logging
    """

    method: str
    path: str
    version: str
    headers: HeaderList = field(default_factory=HeaderList)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)

    @property
    def is_get(self) -> bool:
        return self.method == "GET"

    @property
    def host(self) -> str:
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

        Raw bytes
            │
            ▼
        ┌────────────────────────────────────────────────────────────┐
        │ 1. Request line  ── bad? → MalformedRequestLine /          │
        │                            MissingVersionToken             │
        │ 2. Header lines  ── no colon? → skipped                    │
        │ 3. Body          ── too long? → truncated                  │
        └────────────────────────────────────────────────────────────┘
            │
            ▼
        HTTPRequest

    The parser keeps no per-request state, so one instance can be shared.
    """

    def __init__(
        self,
        max_body_size: int = DEFAULT_MAX_BODY_SIZE,
        max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    ):
        """
        Args:
            max_body_size: Body bytes kept; the rest is dropped silently.
            max_path_length: Longest accepted request path, in characters.
        """
        self.max_body_size = max_body_size
        self.max_path_length = max_path_length

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data.

        Args:
            data: Bytes from a single socket read.
            client_address: Peer (ip, port), carried into the request.

        Returns:
            The parsed HTTPRequest.

        Raises:
            MalformedRequestLine: Empty input or a bad request line.
            MissingVersionToken: Request line without a version token.
        """
        data = bytes(data)
        if not data:
            raise MalformedRequestLine("Empty request")

        # ─────────────────────────────────────────────────────────────────
        # REQUEST LINE
        # ─────────────────────────────────────────────────────────────────
        line, position = _next_line(data, 0)
        method, path, version = self._parse_request_line(
            line.decode(HEADER_ENCODING)
        )

        # ─────────────────────────────────────────────────────────────────
        # HEADERS
        # ─────────────────────────────────────────────────────────────────
        headers, position = self._parse_headers(data, position)

        # ─────────────────────────────────────────────────────────────────
        # BODY
        # ─────────────────────────────────────────────────────────────────
        remaining = len(data) - position
        if remaining > self.max_body_size:
            logger.debug(
                f"Request body truncated from {remaining} to {self.max_body_size} bytes"
            )
        body = data[position:position + self.max_body_size]

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> Tuple[str, str, str]:
        """
        Split ``METHOD SP PATH SP VERSION`` into its three tokens.

        Runs of spaces count as one separator.
        """
        if line.endswith("\r"):
            line = line[:-1]

        tokens = [token for token in line.split(" ") if token]

        if len(tokens) == 2:
            raise MissingVersionToken(f"Request line has no version token: {line!r}")
        if len(tokens) != 3:
            raise MalformedRequestLine(f"Invalid request line: {line!r}")

        method, path, version = tokens

        if not path.startswith("/"):
            raise MalformedRequestLine(f"Request path must start with '/': {path!r}")
        if len(path) > self.max_path_length:
            raise MalformedRequestLine(
                f"Request path longer than {self.max_path_length} characters"
            )

        return method, path, version

    def _parse_headers(self, data: bytes, position: int) -> Tuple[HeaderList, int]:
        """
        Read header lines starting at ``position``.

        Returns:
            (headers, offset of the first body byte)
        """
        headers = HeaderList()

        while position < len(data):
            line, position = _next_line(data, position)
            if line in (b"", b"\r"):
                break  # End of header section

            name, colon, value = line.decode(HEADER_ENCODING).partition(":")
            if not colon:
                continue  # Lenient: ignore lines that are not "name: value"

            if value.startswith(" "):
                value = value[1:]
            if value.endswith("\r"):
                value = value[:-1]

            headers.prepend(name, value)

        return headers, position


def _next_line(data: bytes, start: int) -> Tuple[bytes, int]:
    """
    Return the line beginning at ``start`` (without its "\\n") and the
    offset just past it. The final line may have no terminator.
    """
    end = data.find(b"\n", start)
    if end == -1:
        return data[start:], len(data)
    return data[start:end], end + 1


def parse_request(
    data: bytes,
    client_address: Tuple[str, int] = ("", 0),
    max_body_size: int = DEFAULT_MAX_BODY_SIZE,
    max_path_length: Optional[int] = None,
) -> HTTPRequest:
    """
    Convenience function to parse a request with a throwaway parser.

    Use RequestParser directly when parsing many requests with the same
    limits.
    """
    parser = RequestParser(
        max_body_size=max_body_size,
        max_path_length=max_path_length or DEFAULT_MAX_PATH_LENGTH,
    )
    return parser.parse(data, client_address)
