"""Client configuration for pyvpnaccount."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyvpnaccount._constants import CLOSE_TO_EXPIRY_SECONDS, DAEMON_URL, REMINDER_INTERVAL_SECONDS
from pyvpnaccount.exceptions import VpnConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise VpnConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class AccountConfig:
    """Account coordinator and daemon client configuration.

    Parameters
    ----------
    daemon_url : str
        Base URL of the daemon's local management endpoint.
    request_timeout : float
        Total timeout in seconds for a single daemon RPC.
    locale : str
        Fallback locale used when the delegate does not report one.
    locale_dir : str or None
        Directory holding compiled gettext catalogs. ``None`` uses the
        system default search path.
    reminder_interval : float
        Upper bound in seconds between two "account expires soon"
        reminders. Defaults to 12 hours.
    close_to_expiry_threshold : float
        Seconds before expiry during which the "account expires soon"
        reminder may show. Defaults to 3 days.
    api_trace_enabled : bool
        Enable transport-level request/response tracing callback.
    """

    daemon_url: str = DAEMON_URL
    request_timeout: float = 10.0
    locale: str = "en"
    locale_dir: str | None = None
    reminder_interval: float = REMINDER_INTERVAL_SECONDS
    close_to_expiry_threshold: float = CLOSE_TO_EXPIRY_SECONDS
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise VpnConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.reminder_interval <= 0:
            raise VpnConfigError(f"reminder_interval must be positive, got {self.reminder_interval}")
        if self.close_to_expiry_threshold <= 0:
            raise VpnConfigError(
                f"close_to_expiry_threshold must be positive, got {self.close_to_expiry_threshold}"
            )
        if not self.daemon_url.startswith(("http://", "https://")):
            raise VpnConfigError(f"daemon_url must be an http(s) URL, got {self.daemon_url!r}")

    @classmethod
    def from_env(cls, **overrides: Any) -> AccountConfig:
        """Create configuration from ``VPN_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        VpnConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "VPN_DAEMON_URL": "daemon_url",
            "VPN_LOCALE": "locale",
            "VPN_LOCALE_DIR": "locale_dir",
        }
        _ENV_FLOAT_MAP = {
            "VPN_REQUEST_TIMEOUT": "request_timeout",
            "VPN_REMINDER_INTERVAL": "reminder_interval",
            "VPN_CLOSE_TO_EXPIRY_THRESHOLD": "close_to_expiry_threshold",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(env.get("VPN_API_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
