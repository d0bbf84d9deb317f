"""
=============================================================================
HTTP HEADER LIST
=============================================================================

Ordered storage for HTTP header fields, shared by requests and responses.

=============================================================================
WHY NOT A DICT?
=============================================================================

A dict keyed by header name loses two things this server relies on:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      HEADER LIST SEMANTICS                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. DUPLICATES ARE KEPT                                             │
    │      Accept: text/html                                               │
    │      Accept: text/plain      ← both entries survive                  │
    │                                                                      │
    │   2. PREPEND ORDER                                                   │
    │      prepend("A", "1")       list: A                                 │
    │      prepend("B", "2")       list: B, A                              │
    │      prepend("C", "3")       list: C, B, A                           │
    │                                                                      │
    │      Iteration always runs head → tail, i.e. most recent first.     │
    │      Serialization emits headers in exactly that order.              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Entries are stored oldest-first in a plain list so that prepend is an
O(1) append; iteration walks the list backwards.

=============================================================================
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class Header:
    """A single header field. Immutable once created."""

    name: str
    value: str

    def to_line(self) -> str:
        """Render as ``Name: Value`` (no line terminator)."""
        return f"{self.name}: {self.value}"


class HeaderList:
    """
    Ordered, duplicate-preserving list of headers with prepend insertion.

    Example:
        headers = HeaderList()
        headers.prepend("Content-Length", "5")
        headers.prepend("Content-Type", "text/plain")

        [h.name for h in headers]
        # ["Content-Type", "Content-Length"]
    """

    def __init__(self) -> None:
        # Oldest entry first; the head of the list is the last element.
        self._entries: List[Header] = []

    def prepend(self, name: str, value: str) -> "HeaderList":
        """
        Insert a header as the new head of the list.

        Returns self so calls can be chained.
        """
        self._entries.append(Header(name, value))
        return self

    def __iter__(self) -> Iterator[Header]:
        # A fresh generator per call, so iteration is restartable.
        return reversed(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{h.name}={h.value!r}" for h in self)
        return f"HeaderList([{pairs}])"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Return the value of the first header named ``name`` (case-insensitive).

        "First" follows list order, so the most recently inserted entry wins.
        """
        wanted = name.lower()
        for header in self:
            if header.name.lower() == wanted:
                return header.value
        return default

    def get_all(self, name: str) -> List[str]:
        """Return every value stored under ``name``, in list order."""
        wanted = name.lower()
        return [h.value for h in self if h.name.lower() == wanted]

    def clear(self) -> None:
        """Drop every entry. Safe to call more than once."""
        self._entries.clear()
