"""
Resolved outcomes: what a request path turned out to name on disk.

The filesystem resolver produces exactly one of these per request and the
response builder turns it into a status, a body and a Content-Type:

    FileContent       → 200, file bytes,    type by extension
    DirectoryIndex    → 200, index bytes,   text/html
    DirectoryListing  → 200, listing HTML,  text/html
    NotFound          → 404
"""

from dataclasses import dataclass
from typing import Union

from .mime_types import DEFAULT_MIME_TYPE, DIRECTORY_TYPE


@dataclass(frozen=True)
class FileContent:
    """A regular file's bytes."""

    content: bytes
    content_type: str = DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class DirectoryIndex:
    """The bytes of a directory's index file (index.html / index.php)."""

    content: bytes
    index_name: str = "index.html"

    @property
    def content_type(self) -> str:
        return DIRECTORY_TYPE


@dataclass(frozen=True)
class DirectoryListing:
    """A generated HTML page listing a directory's entries."""

    content: bytes

    @property
    def content_type(self) -> str:
        return DIRECTORY_TYPE


@dataclass(frozen=True)
class NotFound:
    """Nothing servable at the path (missing, unreadable or unlistable)."""

    reason: str = ""

    @property
    def content(self) -> bytes:
        return b""

    @property
    def content_type(self) -> str:
        return DEFAULT_MIME_TYPE


ResolvedOutcome = Union[FileContent, DirectoryIndex, DirectoryListing, NotFound]
