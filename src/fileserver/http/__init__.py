"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between raw request bytes and raw response bytes:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADERS (headers.py)                                                │
    │   HeaderList: ordered, duplicate-preserving, prepend insertion      │
    ├─────────────────────────────────────────────────────────────────────┤
    │ REQUEST (request.py)                                                │
    │   bytes → HTTPRequest, or MalformedRequestLine / MissingVersionToken│
    ├─────────────────────────────────────────────────────────────────────┤
    │ OUTCOMES (outcomes.py)                                              │
    │   FileContent | DirectoryIndex | DirectoryListing | NotFound        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE (response.py)                                              │
    │   outcome + request → HTTPResponse → bytes                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES / MIME TYPES (status_codes.py, mime_types.py)          │
    └─────────────────────────────────────────────────────────────────────┘

Nothing in this package touches sockets or the filesystem.

=============================================================================
"""

from .headers import Header, HeaderList
from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    MalformedRequestLine,
    MissingVersionToken,
    parse_request,
)
from .outcomes import (
    FileContent,
    DirectoryIndex,
    DirectoryListing,
    NotFound,
    ResolvedOutcome,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    build_response,
    error_response,
    serialize,
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
)
from .status_codes import HTTPStatus
from .mime_types import get_content_type

__all__ = [
    # Headers
    "Header",
    "HeaderList",

    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "MalformedRequestLine",
    "MissingVersionToken",
    "parse_request",

    # Resolved outcomes
    "FileContent",
    "DirectoryIndex",
    "DirectoryListing",
    "NotFound",
    "ResolvedOutcome",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "build_response",
    "error_response",
    "serialize",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Status codes and content types
    "HTTPStatus",
    "get_content_type",
]
