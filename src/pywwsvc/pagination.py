"""Cursor-based pagination over WEBSERVICES list functions."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Generic, TypeVar

from pywwsvc._api._envelope import Parameters
from pywwsvc.exceptions import WwsvcError
from pywwsvc.models.responses import ListResponse
from pywwsvc.models.results import ComResult

if TYPE_CHECKING:
    from pywwsvc.client import WebwareClient

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class CursorPage(Generic[T]):
    """One page together with the response's ``COMRESULT``.

    ``items`` is ``None`` when the page ended the pagination without data,
    which lets callers tell "no more data" from "server reported an error
    and closed the cursor" by looking at ``com_result``.
    """

    items: list[T] | None
    com_result: ComResult | None


class CursoredResponse(Generic[T]):
    """Fetches pages of a list function through the client's cursor.

    The cursor is created lazily on the first fetch. Once finished, the
    paginator never contacts the server again.

    Usage::

        pages = client.cursored_request(Article, "PUT", "ARTIKEL.GET", 1, params, page_size=100)
        async for batch in pages:
            ...

    Parameters
    ----------
    stop_on_empty_page : bool
        Treat an empty list as the end of data (default). When ``False``
        an empty page is returned as ``[]`` and pagination continues until
        the server closes the cursor. A missing list always ends it.
    """

    def __init__(
        self,
        client: WebwareClient,
        item_type: type[T],
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        *,
        page_size: int,
        headers: Mapping[str, str] | None = None,
        container_key: str | None = None,
        item_key: str | None = None,
        stop_on_empty_page: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._client = client
        self._item_type = item_type
        self._method = method
        self._function = function
        self._version = version
        self._parameters = dict(parameters or {})
        self._page_size = page_size
        self._headers = dict(headers or {})
        self._container_key = container_key
        self._item_key = item_key
        self._stop_on_empty_page = stop_on_empty_page
        self._finished = False

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def page_size(self) -> int:
        return self._page_size

    async def _finish(self) -> None:
        self._finished = True
        await self._client.close_cursor()

    async def _fetch(self) -> ListResponse[T] | None:
        if self._finished:
            return None

        # a closed cursor would send the next call uncursored
        if await self._client.cursor_closed():
            await self._client.create_cursor(self._page_size)

        try:
            response = await self._client.request_list(
                self._item_type,
                self._method,
                self._function,
                self._version,
                self._parameters,
                self._headers,
                container_key=self._container_key,
                item_key=self._item_key,
            )
        except WwsvcError:
            if await self._client.cursor_closed():
                _logger.debug("Cursor closed by the server with a failed response (%s)", self._function)
                await self._finish()
            raise

        if await self._client.cursor_closed():
            _logger.debug("Cursor closed by the server (%s, com_result=%s)", self._function, response.com_result)
            await self._finish()

        if response.items is None:
            _logger.warning("No list received for %s, closing cursor (com_result=%s)", self._function, response.com_result)
            await self._finish()
        elif not response.items and self._stop_on_empty_page:
            _logger.warning("Empty list received for %s, closing cursor (com_result=%s)", self._function, response.com_result)
            await self._finish()

        return response

    async def next_with_comresult(self) -> CursorPage[T] | None:
        """Fetch the next page together with its ``COMRESULT``.

        Returns ``None`` once finished, without any network call.
        """
        response = await self._fetch()
        if response is None:
            return None
        items = response.items
        if not items and (items is None or self._finished):
            return CursorPage(items=None, com_result=response.com_result)
        return CursorPage(items=list(items), com_result=response.com_result)

    async def next(self) -> list[T] | None:
        """Fetch the next page; ``None`` means there is no more data."""
        page = await self.next_with_comresult()
        if page is None:
            return None
        return page.items

    async def collect_all(self) -> list[T]:
        """Drain all remaining pages into one list."""
        all_items: list[T] = []
        while (batch := await self.next()) is not None:
            all_items.extend(batch)
        return all_items

    def __aiter__(self) -> CursoredResponse[T]:
        return self

    async def __anext__(self) -> list[T]:
        batch = await self.next()
        if batch is None:
            raise StopAsyncIteration
        return batch
