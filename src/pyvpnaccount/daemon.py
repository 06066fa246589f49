"""Backing-service contract and the default HTTP daemon client."""

from __future__ import annotations

from typing import Any, Protocol

import aiohttp
from pydantic import TypeAdapter

from pyvpnaccount._transport import JsonTransport, TraceCallback, Transport
from pyvpnaccount.config import AccountConfig
from pyvpnaccount.exceptions import VpnApiError, VpnError
from pyvpnaccount.models.account import AccountData, VoucherResponse
from pyvpnaccount.models.device import Device, DeviceRemoval, DeviceState, LoggedOutState

_DEVICE_STATE_ADAPTER: TypeAdapter[DeviceState] = TypeAdapter(DeviceState)


class DaemonRpc(Protocol):
    """Everything the account coordinator needs from the daemon.

    All calls may raise :class:`~pyvpnaccount.exceptions.VpnError`
    subclasses.
    """

    @property
    def is_connected(self) -> bool: ...

    async def get_account_data(self, account_token: str) -> AccountData: ...

    async def create_new_account(self) -> str: ...

    async def login_account(self, account_token: str) -> None: ...

    async def logout_account(self) -> None: ...

    async def get_www_auth_token(self) -> str: ...

    async def submit_voucher(self, voucher_code: str) -> VoucherResponse: ...

    async def update_device(self) -> None: ...

    async def get_device(self) -> DeviceState: ...

    async def list_devices(self, account_token: str) -> list[Device]: ...

    async def remove_device(self, device_removal: DeviceRemoval) -> None: ...

    async def get_account_history(self) -> str | None: ...

    async def clear_account_history(self) -> None: ...


def _require_str(endpoint: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise VpnApiError(f"{endpoint} returned no value", code="invalid_reply", endpoint=endpoint)
    return value


class DaemonClient:
    """Async client for the daemon's JSON management endpoint.

    Usage::

        async with DaemonClient(config) as daemon:
            account = Account(delegate, daemon, channel)
    """

    def __init__(
        self,
        config: AccountConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_trace: TraceCallback | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._on_trace = on_trace

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DaemonClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = JsonTransport(self._config, self._http_session, on_trace=self._on_trace)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and self._transport.is_connected

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise VpnError("Client not initialized. Use 'async with DaemonClient(...) as daemon:'")
        return self._transport

    async def _call(self, method: str, **params: Any) -> Any:
        return await self._require_transport().call(method, params)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def get_account_data(self, account_token: str) -> AccountData:
        data = await self._call("get_account_data", account_token=account_token)
        return AccountData.model_validate(data)

    async def create_new_account(self) -> str:
        return _require_str("/rpc/create_new_account", await self._call("create_new_account"))

    async def login_account(self, account_token: str) -> None:
        await self._call("login_account", account_token=account_token)

    async def logout_account(self) -> None:
        await self._call("logout_account")

    async def get_www_auth_token(self) -> str:
        return _require_str("/rpc/get_www_auth_token", await self._call("get_www_auth_token"))

    async def submit_voucher(self, voucher_code: str) -> VoucherResponse:
        data = await self._call("submit_voucher", code=voucher_code)
        return VoucherResponse.model_validate(data)

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def update_device(self) -> None:
        await self._call("update_device")

    async def get_device(self) -> DeviceState:
        data = await self._call("get_device")
        if not data:
            return LoggedOutState()
        return _DEVICE_STATE_ADAPTER.validate_python(data)

    async def list_devices(self, account_token: str) -> list[Device]:
        data = await self._call("list_devices", account_token=account_token)
        items = data if isinstance(data, list) else []
        return [Device.model_validate(item) for item in items]

    async def remove_device(self, device_removal: DeviceRemoval) -> None:
        await self._call(
            "remove_device",
            account_token=device_removal.account_token,
            device_id=device_removal.device_id,
        )

    # ------------------------------------------------------------------
    # Account history
    # ------------------------------------------------------------------

    async def get_account_history(self) -> str | None:
        data = await self._call("get_account_history")
        return data if isinstance(data, str) and data else None

    async def clear_account_history(self) -> None:
        await self._call("clear_account_history")
