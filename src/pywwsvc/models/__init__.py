"""Pydantic models for WEBSERVICES payloads."""

from pywwsvc.models._base import WwsvcBaseModel
from pywwsvc.models.credentials import Credentials
from pywwsvc.models.record import WwsvcRecord
from pywwsvc.models.requests import (
    ExecJsonRequest,
    ServiceFunction,
    ServiceFunctionParameter,
    ServicePassInfo,
)
from pywwsvc.models.responses import ListResponse, list_field_names
from pywwsvc.models.results import ComResult, RegisterResponse, ServicePass

__all__ = [
    "ComResult",
    "Credentials",
    "ExecJsonRequest",
    "ListResponse",
    "RegisterResponse",
    "ServiceFunction",
    "ServiceFunctionParameter",
    "ServicePass",
    "ServicePassInfo",
    "WwsvcBaseModel",
    "WwsvcRecord",
    "list_field_names",
]
