"""JSON-over-HTTP transport to the daemon's management endpoint."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from pyvpnaccount._constants import (
    DEVICE_NOT_FOUND_CODES,
    INVALID_ACCOUNT_CODES,
    INVALID_VOUCHER_CODES,
    RPC_OK_CODE,
    TOO_MANY_DEVICES_CODES,
    USER_AGENT,
    VOUCHER_USED_CODES,
)
from pyvpnaccount._redact import redact_for_log
from pyvpnaccount.config import AccountConfig
from pyvpnaccount.exceptions import (
    DeviceNotFoundError,
    InvalidAccountError,
    InvalidVoucherError,
    TooManyDevicesError,
    VoucherUsedError,
    VpnApiError,
    VpnTransportError,
)

_logger = logging.getLogger(__name__)

TraceCallback = Callable[[str, Mapping[str, Any], Mapping[str, Any]], None]


class Transport(Protocol):
    """What :class:`~pyvpnaccount.daemon.DaemonClient` needs to issue one RPC.

    :class:`JsonTransport` is the aiohttp implementation.
    """

    @property
    def is_connected(self) -> bool: ...

    async def call(self, method: str, params: Mapping[str, Any] | None = None) -> Any: ...


def raise_for_code(*, endpoint: str, code: str, message: str) -> None:
    """Map a daemon error code onto the exception hierarchy."""
    text = f"{endpoint} failed: code={code} message={message}"
    if code in INVALID_ACCOUNT_CODES:
        raise InvalidAccountError(text, code=code, endpoint=endpoint)
    if code in VOUCHER_USED_CODES:
        raise VoucherUsedError(text, code=code, endpoint=endpoint)
    if code in INVALID_VOUCHER_CODES:
        raise InvalidVoucherError(text, code=code, endpoint=endpoint)
    if code in DEVICE_NOT_FOUND_CODES:
        raise DeviceNotFoundError(text, code=code, endpoint=endpoint)
    if code in TOO_MANY_DEVICES_CODES:
        raise TooManyDevicesError(text, code=code, endpoint=endpoint)
    raise VpnApiError(text, code=code, endpoint=endpoint)


class JsonTransport:
    """POSTs ``{"params": ...}`` to ``/rpc/<method>`` and unwraps ``{"code", "message", "data"}``."""

    def __init__(
        self,
        config: AccountConfig,
        http_session: aiohttp.ClientSession,
        *,
        on_trace: TraceCallback | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._on_trace = on_trace if config.api_trace_enabled else None
        self._connected = True

    @property
    def is_connected(self) -> bool:
        """False once a request failed below the RPC layer, until one succeeds again."""
        return self._connected and not self._http.closed

    async def call(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        endpoint = f"/rpc/{method}"
        url = f"{self._config.daemon_url.rstrip('/')}{endpoint}"
        payload: dict[str, Any] = {"params": dict(params or {})}
        headers = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("POST %s params=%s", url, redact_for_log(payload["params"]))

        try:
            async with self._http.post(url, data=json.dumps(payload), headers=headers, timeout=timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise VpnTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except VpnTransportError:
            self._connected = False
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            self._connected = False
            raise VpnTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            self._connected = False
            raise VpnTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict) or "code" not in body:
            self._connected = False
            raise VpnTransportError(
                f"Missing 'code' field from {endpoint}",
                endpoint=endpoint,
            )

        self._connected = True
        if self._on_trace is not None:
            try:
                self._on_trace(
                    endpoint,
                    redact_for_log(payload),
                    redact_for_log(body, is_reply=True),
                )
            except Exception:
                _logger.debug("on_trace callback failed", exc_info=True)

        code = str(body.get("code", ""))
        if code != RPC_OK_CODE:
            raise_for_code(endpoint=endpoint, code=code, message=str(body.get("message", "")))
        return body.get("data")
