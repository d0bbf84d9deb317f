"""
=============================================================================
CONTENT TYPE DETECTION
=============================================================================

Maps a served file's extension to the Content-Type header value.

The table is deliberately tiny. Anything not listed is served as
text/plain, which is what browsers fall back to displaying inline:

    ┌────────────────────────────────────────────────────────────────────┐
    │   .html   → text/html                                              │
    │   .css    → text/css                                               │
    │   (other) → text/plain                                             │
    │                                                                     │
    │   directory index / listing → text/html  (see DIRECTORY_TYPE)      │
    └────────────────────────────────────────────────────────────────────┘

Detection is purely extension based: file contents are never sniffed.

=============================================================================
"""

import os


MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
}

# Fallback for unknown extensions and for files without one.
DEFAULT_MIME_TYPE = "text/plain"

# Bodies derived from a directory (index file or generated listing) are
# always HTML, whatever the index file's extension is.
DIRECTORY_TYPE = "text/html"


def get_content_type(path: str) -> str:
    """
    Get the Content-Type for a file path.

    Examples:
        >>> get_content_type("/docs/page.html")
        'text/html'

        >>> get_content_type("style.CSS")
        'text/css'

        >>> get_content_type("notes.md")
        'text/plain'
    """
    _, extension = os.path.splitext(path)
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)
