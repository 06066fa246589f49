"""Account and device lifecycle coordinator."""

from __future__ import annotations

import asyncio
import gettext
import logging
from collections.abc import Callable, Coroutine
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from pyvpnaccount._i18n import translation_for
from pyvpnaccount.cache import AccountDataCache
from pyvpnaccount.config import AccountConfig
from pyvpnaccount.daemon import DaemonRpc
from pyvpnaccount.exceptions import InvalidAccountError, VpnLocalizedError
from pyvpnaccount.models.account import AccountData, VoucherResponse
from pyvpnaccount.models.device import Device, DeviceEvent, DeviceRemoval, DeviceState, LoggedInState
from pyvpnaccount.models.notification import SystemNotification
from pyvpnaccount.models.tunnel import TunnelState
from pyvpnaccount.notifications import AccountExpiredNotificationProvider, CloseToAccountExpiryNotificationProvider
from pyvpnaccount.scheduler import Scheduler, Timer

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AccountDelegate(Protocol):
    """Capabilities the host process lends to the coordinator."""

    def notify(self, notification: SystemNotification) -> None: ...

    def get_tunnel_state(self) -> TunnelState: ...

    def get_locale(self) -> str: ...

    def is_performing_post_upgrade_check(self) -> bool: ...

    def perform_post_upgrade_check(self) -> None: ...

    def set_tray_context_menu(self) -> None: ...


class AccountEventChannel(Protocol):
    """Outbound events towards the presentation layer."""

    def notify_account(self, account_data: AccountData | None) -> None: ...

    def notify_device(self, device_event: DeviceEvent) -> None: ...

    def notify_account_history(self, account_history: str | None) -> None: ...


class Account:
    """Owns the device state, account data and account history of the process.

    Device state only ever changes through :meth:`handle_device_event`;
    commands such as :meth:`login` ask the daemon to act and the daemon
    confirms with a later device event.

    Usage::

        async with DaemonClient(config) as daemon:
            account = Account(delegate, daemon, channel, config=config)
            daemon_events.subscribe(account.handle_device_event)
    """

    def __init__(
        self,
        delegate: AccountDelegate,
        daemon: DaemonRpc,
        channel: AccountEventChannel,
        *,
        config: AccountConfig | None = None,
        scheduler: Timer | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._delegate = delegate
        self._daemon = daemon
        self._channel = channel
        self._config = config or AccountConfig()
        self._expiry_scheduler: Timer = scheduler or Scheduler()
        self._clock = clock
        self._cache = AccountDataCache(daemon.get_account_data, self)
        self._account_data: AccountData | None = None
        self._account_history: str | None = None
        self._device_state: DeviceState | None = None
        self._background_tasks: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def account_data(self) -> AccountData | None:
        return self._account_data

    @property
    def account_history(self) -> str | None:
        return self._account_history

    @property
    def device_state(self) -> DeviceState | None:
        return self._device_state

    def is_logged_in(self) -> bool:
        return isinstance(self._device_state, LoggedInState)

    def current_account_token(self) -> str | None:
        if isinstance(self._device_state, LoggedInState):
            return self._device_state.account_and_device.account_token
        return None

    # ------------------------------------------------------------------
    # Inbound events
    # ------------------------------------------------------------------

    def handle_device_event(self, device_event: DeviceEvent) -> None:
        """Apply an authoritative device-state change pushed by the daemon."""
        device_state = device_event.device_state
        self._device_state = device_state

        if self._delegate.is_performing_post_upgrade_check():
            self._delegate.perform_post_upgrade_check()

        if isinstance(device_state, LoggedInState):
            account_token = device_state.account_and_device.account_token
            if self._cache.current_account != account_token:
                self._set_account_data(None)
            self._track(self._cache.fetch(account_token))
        else:
            self._cache.invalidate()
            self._set_account_data(None)

        self._spawn(self._update_account_history())
        self._delegate.set_tray_context_menu()

        self._channel.notify_device(device_event)

    def on_account_data(self, account_data: AccountData) -> None:
        """Receive fresh account data from the cache."""
        self._set_account_data(account_data)
        self._handle_account_expiry()

    def update_account_data(self) -> None:
        """Refresh account data if the daemon is reachable and an account is logged in."""
        account_token = self.current_account_token()
        if self._daemon.is_connected and account_token is not None:
            self._track(self._cache.fetch(account_token))

    def detect_stale_account_expiry(self, tunnel_state: TunnelState) -> None:
        has_expired = self._account_data is None or self._account_data.has_expired(self._clock())

        # The daemon cannot connect with an expired account, so the expiry we hold is stale.
        if tunnel_state.is_connected and has_expired:
            _logger.info("Detected a stale account expiry")
            self._cache.invalidate()
            self.update_account_data()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_new_account(self) -> str:
        try:
            return await self._daemon.create_new_account()
        except Exception as exc:
            _logger.error("Failed to create account: %s", exc)
            raise

    async def login(self, account_token: str) -> None:
        """Ask the daemon to log in; the new device state arrives as an event."""
        try:
            await self._daemon.login_account(account_token)
        except InvalidAccountError as exc:
            _logger.error("Failed to login: %s", exc)
            raise VpnLocalizedError(self._translation().gettext("Invalid account number")) from exc
        except Exception as exc:
            _logger.error("Failed to login: %s", exc)
            raise

    async def logout(self) -> None:
        try:
            await self._daemon.logout_account()
            self._expiry_scheduler.cancel()
        except Exception as exc:
            _logger.info("Failed to logout: %s", exc)
            raise

    async def get_www_auth_token(self) -> str:
        return await self._daemon.get_www_auth_token()

    async def submit_voucher(self, voucher_code: str) -> VoucherResponse:
        account_token = self.current_account_token()
        response = await self._daemon.submit_voucher(voucher_code)

        # Skip the update if a device event moved to another account meanwhile.
        if account_token is not None and account_token == self.current_account_token():
            self._cache.handle_voucher_response(account_token, response)

        return response

    async def get_device_state(self) -> DeviceState:
        try:
            await self._daemon.update_device()
        except Exception as exc:
            _logger.warning("Failed to update device info: %s", exc)
        return await self._daemon.get_device()

    async def list_devices(self, account_token: str) -> list[Device]:
        return await self._daemon.list_devices(account_token)

    async def remove_device(self, device_removal: DeviceRemoval) -> None:
        await self._daemon.remove_device(device_removal)

    async def clear_account_history(self) -> None:
        await self._daemon.clear_account_history()
        await self._update_account_history()

    def set_account_history(self, account_history: str | None) -> None:
        self._account_history = account_history
        self._channel.notify_account_history(account_history)

    async def wait_idle(self) -> None:
        """Wait until every background history refresh and account data fetch has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Expiry notifications
    # ------------------------------------------------------------------

    def _handle_account_expiry(self) -> None:
        """Notify about an expired or soon expiring account, and schedule the next reminder.

        Runs on every account data delivery and whenever the reminder
        schedule fires. An expired notification cancels the reminder
        cadence. A reminder is only emitted (and the next one scheduled)
        when no reminder is already scheduled.
        """
        account_data = self._account_data
        if account_data is None:
            return

        now = self._clock()
        locale = self._locale()
        expired_notification = AccountExpiredNotificationProvider(
            account_expiry=account_data.expiry,
            tunnel_state=self._delegate.get_tunnel_state(),
            now=now,
            translation=self._translation(),
        )
        close_to_expiry_notification = CloseToAccountExpiryNotificationProvider(
            account_expiry=account_data.expiry,
            locale=locale,
            now=now,
            threshold=timedelta(seconds=self._config.close_to_expiry_threshold),
            localedir=self._config.locale_dir,
        )

        if expired_notification.may_display():
            self._expiry_scheduler.cancel()
            self._delegate.notify(expired_notification.get_system_notification())
        elif not self._expiry_scheduler.is_running and close_to_expiry_notification.may_display():
            self._delegate.notify(close_to_expiry_notification.get_system_notification())

            remaining = (account_data.expiry - now).total_seconds()
            delay = min(self._config.reminder_interval, remaining)
            self._expiry_scheduler.schedule(self._handle_account_expiry, delay)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_account_data(self, account_data: AccountData | None) -> None:
        if account_data is None and self._account_data is None:
            return
        self._account_data = account_data
        self._channel.notify_account(account_data)

    async def _update_account_history(self) -> None:
        try:
            account_history = await self._daemon.get_account_history()
        except Exception as exc:
            _logger.error("Failed to fetch the account history: %s", exc)
            return
        self.set_account_history(account_history)

    def _locale(self) -> str:
        return self._delegate.get_locale() or self._config.locale

    def _translation(self) -> gettext.NullTranslations:
        return translation_for(self._locale(), self._config.locale_dir)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        self._track(asyncio.get_running_loop().create_task(coro))

    def _track(self, task: asyncio.Task[Any]) -> None:
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
