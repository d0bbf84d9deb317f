"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Maps request paths onto the served root and serves what is found there.

=============================================================================
RESOLUTION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     PATH → OUTCOME                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   target = served_root + request path                               │
    │                                                                      │
    │   regular file?  ──yes──► FileContent (type by extension)           │
    │        │                                                             │
    │        no                                                            │
    │        ▼                                                             │
    │   directory?     ──yes──► append "/" if missing, then                │
    │        │                    index.html / index.php? → DirectoryIndex │
    │        │                    otherwise               → DirectoryListing│
    │        no                                                            │
    │        ▼                                                             │
    │   NotFound                                                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The request path is percent-decoded and its query string dropped before it
is joined to the root, so the links in generated listings resolve back to
the entries they name.

=============================================================================
FAILURE POLICY
=============================================================================

Filesystem trouble never turns into a 500:

    stat fails / neither file nor dir          → NotFound
    file cannot be opened or read              → NotFound
    directory cannot be opened or enumerated   → FilesystemUnavailable,
                                                 caught here → NotFound
    target's real path is outside the root     → NotFound (+ warning)

Each probe (stat, open, scandir) is a separate call; nothing assumes the
file is still there between the stat and the open.

Large files and listings are cut at max_content_size without error.

=============================================================================
"""

import logging
import os
import stat
from enum import Enum
from typing import List, Optional, Sequence
from urllib.parse import unquote

from ..http.mime_types import get_content_type
from ..http.outcomes import (
    DirectoryIndex,
    DirectoryListing,
    FileContent,
    NotFound,
    ResolvedOutcome,
)
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, build_response, method_not_allowed
from .listing import DirectoryEntry, render_directory_listing


logger = logging.getLogger(__name__)

DEFAULT_INDEX_FILES = ("index.html", "index.php")
DEFAULT_MAX_CONTENT_SIZE = 10 * 1024 * 1024


class FilesystemUnavailable(Exception):
    """A directory that exists could not be opened or fully enumerated."""


class PathKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    MISSING = "missing"


class FilesystemResolver:
    """
    Resolves request paths against a served root directory.

    Holds only read-only configuration, so one instance can serve every
    connection.

    Usage:
        resolver = FilesystemResolver("/var/www")
        outcome = resolver.resolve(request)
    """

    def __init__(
        self,
        served_root: str,
        index_files: Sequence[str] = DEFAULT_INDEX_FILES,
        max_content_size: int = DEFAULT_MAX_CONTENT_SIZE,
    ):
        """
        Args:
            served_root: Directory whose contents are served. Assumed to
                         exist; the caller validates it.
            index_files: Index file names, in order of preference.
            max_content_size: Cap on bytes served for one file or listing.
        """
        # Strip trailing slashes so root + "/path" never doubles up.
        # "/" becomes "", which still joins correctly.
        self.served_root = served_root.rstrip("/")
        self.index_files = tuple(index_files)
        self.max_content_size = max_content_size
        self._real_root = os.path.realpath(served_root)

    def resolve(self, request: HTTPRequest) -> ResolvedOutcome:
        """
        Classify ``request.path`` and load what it names.

        Returns:
            FileContent, DirectoryIndex, DirectoryListing or NotFound.
        """
        target = self.served_root + _filesystem_path(request.path)

        # ─────────────────────────────────────────────────────────────────
        # CONTAINMENT
        # ─────────────────────────────────────────────────────────────────
        if not self._is_within_root(target):
            logger.warning(f"Path escapes served root: {request.path!r}")
            return NotFound("outside served root")

        kind = _path_kind(target)

        # ─────────────────────────────────────────────────────────────────
        # REGULAR FILE
        # ─────────────────────────────────────────────────────────────────
        if kind is PathKind.FILE:
            content = self._read_file(target)
            if content is None:
                return NotFound("unreadable file")
            return FileContent(content, get_content_type(target))

        # ─────────────────────────────────────────────────────────────────
        # DIRECTORY: INDEX FILE OR LISTING
        # ─────────────────────────────────────────────────────────────────
        if kind is PathKind.DIRECTORY:
            if not target.endswith("/"):
                target += "/"

            try:
                entries = self._list_directory(target)
            except FilesystemUnavailable as e:
                logger.warning(str(e))
                return NotFound("directory unavailable")

            index_name = self._find_index(entries)
            if index_name is not None:
                content = self._read_file(target + index_name)
                if content is None:
                    return NotFound("unreadable index file")
                return DirectoryIndex(content, index_name)

            listing = render_directory_listing(_filesystem_path(request.path), entries)
            return DirectoryListing(self._cap(listing, target))

        return NotFound("no such file or directory")

    def _is_within_root(self, target: str) -> bool:
        try:
            real_target = os.path.realpath(target)
            return os.path.commonpath([real_target, self._real_root]) == self._real_root
        except ValueError:
            # Embedded NUL, or paths on different drives
            return False

    def _find_index(self, entries: List[DirectoryEntry]) -> Optional[str]:
        file_names = {entry.name for entry in entries if not entry.is_dir}
        for candidate in self.index_files:
            if candidate in file_names:
                return candidate
        return None

    def _list_directory(self, path: str) -> List[DirectoryEntry]:
        """
        Enumerate ``path`` in filesystem order.

        os.scandir never yields "." or "..".

        Raises:
            FilesystemUnavailable: The directory could not be opened, or
                                   enumeration failed part way.
        """
        try:
            with os.scandir(path) as iterator:
                return [DirectoryEntry(entry.name, entry.is_dir()) for entry in iterator]
        except OSError as e:
            raise FilesystemUnavailable(f"Cannot list directory {path}: {e}") from e

    def _read_file(self, path: str) -> Optional[bytes]:
        """Read up to max_content_size bytes, or None if the read fails."""
        try:
            with open(path, "rb") as f:
                content = f.read(self.max_content_size + 1)
        except OSError as e:
            logger.warning(f"Cannot read file {path}: {e}")
            return None
        return self._cap(content, path)

    def _cap(self, content: bytes, path: str) -> bytes:
        if len(content) > self.max_content_size:
            logger.debug(f"Content for {path} truncated to {self.max_content_size} bytes")
            return content[:self.max_content_size]
        return content


def _filesystem_path(request_path: str) -> str:
    """Drop the query string and percent-decode what is left."""
    return unquote(request_path.partition("?")[0], errors="surrogateescape")


def _path_kind(path: str) -> PathKind:
    try:
        mode = os.stat(path).st_mode
    except (OSError, ValueError):
        # ValueError: embedded NUL byte from a decoded "%00"
        return PathKind.MISSING

    if stat.S_ISREG(mode):
        return PathKind.FILE
    if stat.S_ISDIR(mode):
        return PathKind.DIRECTORY
    return PathKind.MISSING


def resolve(request: HTTPRequest, served_root: str) -> ResolvedOutcome:
    """Resolve ``request`` against ``served_root`` with default settings."""
    return FilesystemResolver(served_root).resolve(request)


class StaticFileHandler:
    """
    Request handler serving a directory tree.

        handler = StaticFileHandler("/var/www")
        response = handler.handle(request)

    Non-GET requests are answered with 405 before the filesystem is
    touched.
    """

    def __init__(
        self,
        root_dir: str,
        index_files: Sequence[str] = DEFAULT_INDEX_FILES,
        max_content_size: int = DEFAULT_MAX_CONTENT_SIZE,
    ):
        if not os.path.isdir(root_dir):
            raise ValueError(f"Served root is not a directory: {root_dir}")

        self.root_dir = root_dir
        self.resolver = FilesystemResolver(
            root_dir,
            index_files=index_files,
            max_content_size=max_content_size,
        )

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        if not request.is_get:
            return method_not_allowed(request.version)

        outcome = self.resolver.resolve(request)
        return build_response(outcome, request)
