from __future__ import annotations

import pytest

from pywwsvc.cursor import Cursor, CursorState


def test_new_cursor_is_created_and_not_closed() -> None:
    cursor = Cursor(page_size=50)

    assert cursor.cursor_id == "CREATE"
    assert cursor.state is CursorState.CREATED
    assert not cursor.is_closed()
    assert cursor.page_size == 50


@pytest.mark.parametrize("token", ["tok1", "0815ABCD", "closed", "CREATE"])
def test_non_sentinel_ids_never_close_the_cursor(token: str) -> None:
    cursor = Cursor(page_size=10)
    cursor.advance(token)

    assert cursor.cursor_id == token
    assert not cursor.is_closed()


def test_advancing_to_closed_sentinel_closes_cursor() -> None:
    cursor = Cursor(page_size=10)
    cursor.advance("tok1")
    assert cursor.state is CursorState.OPEN

    cursor.advance("CLOSED")

    assert cursor.is_closed()
    assert cursor.state is CursorState.CLOSED
    assert cursor.page_size == 10


def test_cursor_rejects_non_positive_page_size() -> None:
    with pytest.raises(ValueError):
        Cursor(page_size=0)
