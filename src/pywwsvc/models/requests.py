"""Request body models for ``EXECJSON``."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pywwsvc._constants import EXECUTE_MODE_SYNCHRON
from pywwsvc.models._base import WwsvcBaseModel


class ServiceFunctionParameter(WwsvcBaseModel):
    """One ``PNAME``/``PCONTENT`` pair."""

    name: str = Field(alias="PNAME")
    content: str = Field(alias="PCONTENT")


class ServiceFunction(WwsvcBaseModel):
    """The function to execute."""

    function_name: str = Field(alias="FUNCTIONNAME")
    parameters: list[ServiceFunctionParameter] = Field(default_factory=list, alias="PARAMETER")
    revision: int


class ServicePassInfo(WwsvcBaseModel):
    """Authentication block; must agree with the signature headers."""

    service_pass: str = Field(alias="SERVICEPASS")
    app_hash: str = Field(alias="APPHASH")
    timestamp: str
    request_id: int = Field(alias="REQUESTID")
    execute_mode: str = EXECUTE_MODE_SYNCHRON


class ExecJsonRequest(WwsvcBaseModel):
    """Body of an ``EXECJSON`` request."""

    function: ServiceFunction = Field(alias="WWSVC_FUNCTION")
    pass_info: ServicePassInfo = Field(alias="WWSVC_PASSINFO")

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the server's upper-case keys."""
        return self.model_dump(by_alias=True)
