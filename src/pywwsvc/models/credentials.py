"""Service pass credentials."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Credentials issued by REGISTER.

    Parameters
    ----------
    service_pass : str
        The ``PASSID`` sent as ``SERVICEPASS`` with every request.
    app_id : str
        The ``APPID`` bound into every request hash.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    service_pass: str = Field(min_length=1, repr=False)
    app_id: str = Field(min_length=1, repr=False)
