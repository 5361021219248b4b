"""Server-driven pagination cursor."""

from __future__ import annotations

import dataclasses
import enum

from pywwsvc._constants import CURSOR_CLOSED, CURSOR_CREATE, DEFAULT_PAGE_SIZE


class CursorState(enum.Enum):
    """Where a cursor is in its ``CREATE -> token* -> CLOSED`` lifecycle."""

    CREATED = "created"
    OPEN = "open"
    CLOSED = "closed"


@dataclasses.dataclass
class Cursor:
    """Pagination cursor, identified by a cursor id.

    A new cursor carries the id ``"CREATE"``, asking the server to start
    paginating. Every response to a cursored request carries the next id in
    ``WWSVC-CURSOR``; ``"CLOSED"`` means there are no more results.

    ``page_size`` is fixed for the cursor's lifetime and sent as the
    max-lines hint with every cursored request.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    cursor_id: str = CURSOR_CREATE

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @property
    def state(self) -> CursorState:
        if self.cursor_id == CURSOR_CREATE:
            return CursorState.CREATED
        if self.cursor_id == CURSOR_CLOSED:
            return CursorState.CLOSED
        return CursorState.OPEN

    def is_closed(self) -> bool:
        """Whether the server reported that no more results are available."""
        return self.cursor_id == CURSOR_CLOSED

    def advance(self, cursor_id: str) -> None:
        """Replace the id with the one the server returned."""
        self.cursor_id = cursor_id
