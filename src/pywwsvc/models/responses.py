"""Generic list responses.

WEBSERVICES list functions answer with::

    {"COMRESULT": {...}, "<BASE>LISTE": {"<BASE>": [ ... ]}}

where ``BASE`` is the function name without its verb (``ARTIKEL`` for
``ARTIKEL.GET``). A few functions deviate (``ADRESSLISTE``/``ADRESSE``),
hence the optional key overrides.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import Field

from pywwsvc.models._base import WwsvcBaseModel
from pywwsvc.models.results import ComResult

T = TypeVar("T")


def list_field_names(
    function: str,
    *,
    container_key: str | None = None,
    item_key: str | None = None,
) -> tuple[str, str]:
    """Return ``(container_key, item_key)`` for *function*.

    >>> list_field_names("ARTIKEL.GET")
    ('ARTIKELLISTE', 'ARTIKEL')
    """
    base = function.split(".", 1)[0].strip().upper()
    return container_key or f"{base}LISTE", item_key or base


class ListResponse(WwsvcBaseModel, Generic[T]):
    """A decoded list response.

    ``items`` is ``None`` when the container or the list is missing from the
    payload, which is distinct from an empty list. ``raw`` keeps the full
    payload for fields this model does not cover.
    """

    com_result: ComResult | None = Field(default=None, alias="COMRESULT")
    items: list[T] | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        function: str,
        *,
        container_key: str | None = None,
        item_key: str | None = None,
    ) -> ListResponse[T]:
        """Validate *payload* as the list response of *function*."""
        container_name, item_name = list_field_names(function, container_key=container_key, item_key=item_key)
        container = payload.get(container_name)
        items = container.get(item_name) if isinstance(container, Mapping) else None
        return cls.model_validate(
            {
                "COMRESULT": payload.get("COMRESULT"),
                "items": items,
                "raw": dict(payload),
            }
        )
