"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds responses from resolved outcomes and serializes them to the wire.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTP/1.0 200 OK\r\n                ← status line                   │
    │   ────┬─── ─┬─ ─┬                                                    │
    │   version  code message   (version echoes the request's token)      │
    │                                                                      │
    │   Content-Type: text/html\r\n        ← headers, list order           │
    │   Content-Length: 1234\r\n                                           │
    │   \r\n                               ← end of headers                │
    │   <!DOCTYPE HTML>...                 ← body (raw bytes, may be       │
    │                                        binary)                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
STATUS MAPPING
=============================================================================

    method != GET                 → 405  "405 Method Not Allowed"
    FileContent                   → 200  file bytes
    DirectoryIndex                → 200  index file bytes
    DirectoryListing              → 200  generated HTML
    NotFound                      → 404  "404 Not Found"

=============================================================================
HEADER INVARIANT
=============================================================================

Every response carries exactly one Content-Length and exactly one
Content-Type. The builder prepends Content-Length first and Content-Type
second, so on the wire Content-Type comes first.

No Date or Server header is added: the same request against the same
files must produce byte-identical output.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Union

from .headers import HeaderList
from .mime_types import DEFAULT_MIME_TYPE
from .outcomes import NotFound, ResolvedOutcome
from .request import HTTPRequest
from .status_codes import HTTPStatus


CRLF = b"\r\n"

# Status line and header bytes. Header values here are always ASCII.
HEAD_ENCODING = "iso-8859-1"

DEFAULT_VERSION = "HTTP/1.0"


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Use ResponseBuilder (or build_response) rather than filling the
    fields by hand; the builder maintains the Content-Length and
    Content-Type invariant.
    """

    version: str = DEFAULT_VERSION
    status: HTTPStatus = HTTPStatus.OK
    headers: HeaderList = field(default_factory=HeaderList)
    body: bytes = b""

    @property
    def status_code(self) -> int:
        return int(self.status)

    @property
    def status_message(self) -> str:
        return self.status.phrase

    @property
    def status_line(self) -> str:
        """``VERSION CODE MESSAGE``, e.g. ``HTTP/1.1 404 Not Found``."""
        return f"{self.version} {self.status_code} {self.status_message}"

    def _head_chunks(self) -> List[bytes]:
        chunks = [self.status_line.encode(HEAD_ENCODING) + CRLF]
        for header in self.headers:
            chunks.append(header.to_line().encode(HEAD_ENCODING) + CRLF)
        chunks.append(CRLF)
        return chunks

    @property
    def wire_length(self) -> int:
        """Exact number of bytes to_bytes() will produce."""
        return sum(len(chunk) for chunk in self._head_chunks()) + len(self.body)

    def to_bytes(self) -> bytes:
        """
        Serialize to wire format.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            VERSION SP CODE SP MESSAGE\r\n
            Name: Value\r\n               (one per header, list order)
            \r\n
            <body bytes>

        The output buffer is sized from the head and body lengths before
        anything is written, so nothing is ever cut short.
        =====================================================================
        """
        chunks = self._head_chunks()
        chunks.append(self.body)

        buffer = bytearray(sum(len(chunk) for chunk in chunks))
        offset = 0
        for chunk in chunks:
            buffer[offset:offset + len(chunk)] = chunk
            offset += len(chunk)

        return bytes(buffer)


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder("HTTP/1.1")
            .status(HTTPStatus.OK)
            .content_type("text/html")
            .body(b"<h1>hi</h1>")
            .build())

    build() is the only place Content-Length and Content-Type are set.
    """

    def __init__(self, version: str = DEFAULT_VERSION):
        self._version = version
        self._status = HTTPStatus.OK
        self._content_type = DEFAULT_MIME_TYPE
        self._body = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        self._content_type = content_type
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = bytes(body)
        return self

    def build(self) -> HTTPResponse:
        headers = HeaderList()
        headers.prepend("Content-Length", str(len(self._body)))
        headers.prepend("Content-Type", self._content_type)
        return HTTPResponse(
            version=self._version,
            status=self._status,
            headers=headers,
            body=self._body,
        )


# =============================================================================
# FIXED-BODY RESPONSES
# =============================================================================

def error_response(status: HTTPStatus, version: str = DEFAULT_VERSION) -> HTTPResponse:
    """A text/plain response whose body is ``"<code> <message>"``."""
    return (ResponseBuilder(version)
        .status(status)
        .content_type(DEFAULT_MIME_TYPE)
        .body(f"{int(status)} {status.phrase}")
        .build())


def not_found(version: str = DEFAULT_VERSION) -> HTTPResponse:
    """404 with body ``404 Not Found``."""
    return error_response(HTTPStatus.NOT_FOUND, version)


def method_not_allowed(version: str = DEFAULT_VERSION) -> HTTPResponse:
    """405 with body ``405 Method Not Allowed``."""
    return error_response(HTTPStatus.METHOD_NOT_ALLOWED, version)


def internal_error(version: str = DEFAULT_VERSION) -> HTTPResponse:
    """500 with body ``500 Internal Server Error``."""
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, version)


# =============================================================================
# OUTCOME → RESPONSE
# =============================================================================

def build_response(outcome: ResolvedOutcome, request: HTTPRequest) -> HTTPResponse:
    """
    Map a resolved outcome to a response for ``request``.

    The method check comes first: a non-GET request gets 405 whatever the
    outcome says. The response version is the request's version token,
    echoed verbatim.
    """
    if not request.is_get:
        return method_not_allowed(request.version)

    if isinstance(outcome, NotFound):
        return not_found(request.version)

    return (ResponseBuilder(request.version)
        .status(HTTPStatus.OK)
        .content_type(outcome.content_type)
        .body(outcome.content)
        .build())


def serialize(response: HTTPResponse) -> bytes:
    """Serialize a response. Same as ``response.to_bytes()``."""
    return response.to_bytes()
