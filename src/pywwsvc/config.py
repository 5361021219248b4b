"""Client configuration for pywwsvc."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pywwsvc._constants import DEFAULT_RESULT_MAX_LINES, DEFAULT_TIMEOUT, USER_AGENT
from pywwsvc.exceptions import WwsvcConfigError
from pywwsvc.models.credentials import Credentials


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class WwsvcConfig:
    """Client configuration.

    Parameters
    ----------
    webware_url : str
        URL of the WEBWARE instance without the service path,
        e.g. ``"https://webware.example.com:8080"``.
    vendor_hash : str
        Vendor hash of the application.
    app_hash : str
        Application hash of the application.
    secret : str
        Application secret assigned by the WEBWARE instance.
    revision : int
        Revision of the application.
    credentials : Credentials or None
        Pre-provisioned service pass. When set, ``register()`` does not
        contact the server.
    result_max_lines : int
        Default for ``WWSVC-ACCEPT-RESULT-MAX-LINES``.
    allow_insecure : bool
        Accept invalid TLS certificates. Test/dev setups only.
    timeout : float
        Total timeout per HTTP exchange in seconds.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    webware_url: str
    vendor_hash: str
    app_hash: str
    secret: str
    revision: int
    credentials: Credentials | None = None
    result_max_lines: int = DEFAULT_RESULT_MAX_LINES
    allow_insecure: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = USER_AGENT

    @classmethod
    def from_env(cls, **overrides: Any) -> WwsvcConfig:
        """Create configuration from ``WWSVC_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        WwsvcConfigError
            If a required value is missing or a numeric value does not parse.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "WWSVC_WEBWARE_URL": "webware_url",
            "WWSVC_VENDOR_HASH": "vendor_hash",
            "WWSVC_APP_HASH": "app_hash",
            "WWSVC_APP_SECRET": "secret",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            revision_env = env.get("WWSVC_REVISION")
            if revision_env is not None and "revision" not in overrides:
                config_kwargs["revision"] = int(revision_env)

            max_lines_env = env.get("WWSVC_RESULT_MAX_LINES")
            if max_lines_env is not None and "result_max_lines" not in overrides:
                config_kwargs["result_max_lines"] = int(max_lines_env)

            timeout_env = env.get("WWSVC_TIMEOUT")
            if timeout_env is not None and "timeout" not in overrides:
                config_kwargs["timeout"] = float(timeout_env)
        except ValueError as exc:
            raise WwsvcConfigError(f"Invalid numeric WWSVC_* value: {exc}") from exc

        if "allow_insecure" not in overrides:
            config_kwargs["allow_insecure"] = _env_bool(env.get("WWSVC_ALLOW_INSECURE"), False)

        # The service pass is only usable as a pair
        service_pass = env.get("WWSVC_SERVICE_PASS")
        app_id = env.get("WWSVC_APP_ID")
        if service_pass and app_id and "credentials" not in overrides:
            config_kwargs["credentials"] = Credentials(service_pass=service_pass, app_id=app_id)

        config_kwargs.update(overrides)

        missing = [
            name for name in ("webware_url", "vendor_hash", "app_hash", "secret", "revision") if name not in config_kwargs
        ]
        if missing:
            raise WwsvcConfigError(f"Missing configuration values: {', '.join(missing)}")

        return cls(**config_kwargs)
