"""
Request handlers.

    StaticFileHandler   - serves files, index pages and directory listings
    FilesystemResolver  - maps a request path to a ResolvedOutcome
"""

from .listing import DirectoryEntry, render_directory_listing
from .static import (
    FilesystemResolver,
    FilesystemUnavailable,
    StaticFileHandler,
    resolve,
)

__all__ = [
    "DirectoryEntry",
    "FilesystemResolver",
    "FilesystemUnavailable",
    "StaticFileHandler",
    "render_directory_listing",
    "resolve",
]
