"""Base for typed records returned by ``<FUNCTION>.GET`` calls."""

from __future__ import annotations

from typing import ClassVar

from pywwsvc._constants import DEFAULT_RECORD_METHOD
from pywwsvc.models._base import WwsvcBaseModel


class WwsvcRecord(WwsvcBaseModel):
    """A record type bound to a WEBSERVICES list function.

    Subclasses declare the function and map server field names with
    ``alias``::

        class Article(WwsvcRecord):
            wwsvc_function: ClassVar[str] = "ARTIKEL"

            article_number: str = Field(alias="ART_1_25")

    The aliases double as the ``FELDER`` parameter, so the server only
    returns the fields the record declares.
    """

    wwsvc_function: ClassVar[str] = ""
    wwsvc_version: ClassVar[int] = 1
    wwsvc_method: ClassVar[str] = DEFAULT_RECORD_METHOD
    wwsvc_container_key: ClassVar[str | None] = None
    wwsvc_item_key: ClassVar[str | None] = None

    @classmethod
    def wwsvc_get_function(cls) -> str:
        if not cls.wwsvc_function:
            raise TypeError(f"{cls.__name__} does not declare wwsvc_function")
        return f"{cls.wwsvc_function}.GET"

    @classmethod
    def wwsvc_fields(cls) -> str:
        return ",".join(info.alias or name.upper() for name, info in cls.model_fields.items())
