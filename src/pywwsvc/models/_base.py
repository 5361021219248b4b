"""Base model for WEBSERVICES payloads.

The server uses upper-case JSON keys (``COMRESULT``, ``PASSID``,
``FUNCTIONNAME``); :class:`WwsvcBaseModel` maps them to snake_case
attributes via an upper-casing alias generator. Explicit ``alias=`` values
(e.g. ``"ART_1_25"`` on record fields) take precedence.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def to_upper(name: str) -> str:
    """Alias generator: ``service_pass`` -> ``SERVICE_PASS``."""
    return name.upper()


class WwsvcBaseModel(BaseModel):
    """Base for WEBSERVICES request and response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_upper,
    )


def to_upper_compact(name: str) -> str:
    """Alias generator for keys without separators: ``pass_id`` -> ``PASSID``."""
    return name.replace("_", "").upper()
