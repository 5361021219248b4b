"""Status envelope and REGISTER response models."""

from __future__ import annotations

from pydantic import ConfigDict

from pywwsvc.models._base import WwsvcBaseModel, to_upper, to_upper_compact


class ComResult(WwsvcBaseModel):
    """``COMRESULT`` block carried by every WEBSERVICES response.

    Parameters
    ----------
    status : int
        HTTP-like status code reported by the server.
    code : str
        Status text matching ``status``.
    info, info2, info3 : str
        Human readable messages.
    errno : str or None
        Server error number, if the call failed.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_upper,
        coerce_numbers_to_str=True,
    )

    status: int
    code: str = ""
    info: str = ""
    info2: str | None = None
    info3: str | None = None
    errno: str | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300 and not self.errno


class ServicePass(WwsvcBaseModel):
    """``SERVICEPASS`` block of a REGISTER response."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_upper_compact,
        coerce_numbers_to_str=True,
    )

    pass_id: str
    app_id: str


class RegisterResponse(WwsvcBaseModel):
    """Response of ``WWSERVICE/REGISTER``."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_upper_compact,
    )

    com_result: ComResult | None = None
    service_pass: ServicePass
