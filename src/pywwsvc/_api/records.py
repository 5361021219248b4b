"""Typed record calls (``<FUNCTION>.GET`` with a ``FELDER`` list)."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from pywwsvc._constants import FIELDS_PARAMETER
from pywwsvc.models.record import WwsvcRecord


@dataclasses.dataclass(frozen=True)
class RecordCall:
    """Everything needed to request the list behind a record type."""

    method: str
    function: str
    version: int
    parameters: dict[str, str]
    container_key: str | None = None
    item_key: str | None = None


def build_record_call(record_type: type[WwsvcRecord], parameters: Mapping[str, Any] | None = None) -> RecordCall:
    """Describe the GET call for *record_type*.

    ``FELDER`` always lists the record's field aliases, replacing any
    caller-supplied value, so the response matches the record shape.
    """
    params = {str(k): str(v) for k, v in (parameters or {}).items()}
    params[FIELDS_PARAMETER] = record_type.wwsvc_fields()
    return RecordCall(
        method=record_type.wwsvc_method,
        function=record_type.wwsvc_get_function(),
        version=record_type.wwsvc_version,
        parameters=params,
        container_key=record_type.wwsvc_container_key,
        item_key=record_type.wwsvc_item_key,
    )
