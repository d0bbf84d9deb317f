"""
Directory listing page generation.

Produces the HTML served for a directory that has no index file:

    <!DOCTYPE HTML>
    <html>
    <head>
    <meta http-equiv="Content-Type" content="text/html; charset=utf-8">
    <title>Directory listing for /docs/</title>
    </head>
    <body>
    <h1>Directory listing for /docs/</h1>
    <hr>
    <ul>
    <li><a href="/docs/guide.html">guide.html</a></li>
    <li><a href="/docs/images/">images/</a></li>
    </ul>
    <hr>
    </body>
    </html>

Rows appear in the order the entries were enumerated, which is whatever
order the filesystem returns. No sorting is applied.
"""

import html
from typing import Iterable, NamedTuple
from urllib.parse import quote


class DirectoryEntry(NamedTuple):
    """One directory entry as seen by the listing."""

    name: str
    is_dir: bool

    @property
    def display_name(self) -> str:
        # Trailing slash marks sub-directories
        return self.name + "/" if self.is_dir else self.name


_HEAD = (
    "<!DOCTYPE HTML>\n"
    "<html>\n"
    "<head>\n"
    '<meta http-equiv="Content-Type" content="text/html; charset=utf-8">\n'
    "<title>Directory listing for {path}</title>\n"
    "</head>\n"
    "<body>\n"
    "<h1>Directory listing for {path}</h1>\n"
    "<hr>\n"
    "<ul>\n"
)

_ROW = '<li><a href="{href}">{name}</a></li>\n'

_TAIL = (
    "</ul>\n"
    "<hr>\n"
    "</body>\n"
    "</html>\n"
)


def render_directory_listing(url_path: str, entries: Iterable[DirectoryEntry]) -> bytes:
    """
    Render the listing page for ``url_path``.

    Args:
        url_path: The request path of the directory, used for the title,
                  the heading and as the base of every link.
        entries: Directory entries, already excluding "." and "..".

    Returns:
        UTF-8 encoded HTML. Undecodable file names are passed through
        byte-for-byte.
    """
    base = url_path if url_path.endswith("/") else url_path + "/"
    title = html.escape(url_path, quote=False)

    parts = [_HEAD.format(path=title)]
    for entry in entries:
        href = quote(base + entry.display_name, errors="surrogateescape")
        parts.append(_ROW.format(
            href=html.escape(href),
            name=html.escape(entry.display_name, quote=False),
        ))
    parts.append(_TAIL)

    return "".join(parts).encode("utf-8", errors="surrogateescape")
