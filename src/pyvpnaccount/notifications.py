"""Notification content providers for account expiry.

Each provider is a pure decision object built from a snapshot of the
account expiry and the surrounding state: it answers whether it may be
displayed right now and produces the payload to display.
"""

from __future__ import annotations

import gettext
from datetime import UTC, datetime, timedelta
from typing import Protocol

from pyvpnaccount._constants import CLOSE_TO_EXPIRY_SECONDS
from pyvpnaccount._i18n import format_remaining_time, translation_for
from pyvpnaccount.models.notification import NotificationCategory, NotificationSeverity, SystemNotification
from pyvpnaccount.models.tunnel import TunnelState


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SystemNotificationProvider(Protocol):
    def may_display(self) -> bool: ...

    def get_system_notification(self) -> SystemNotification: ...


class AccountExpiredNotificationProvider:
    """Shown once the account has run out of time.

    Suppressed while the tunnel is connected: the daemon could not have
    connected with an expired account, so the cached expiry is stale.
    """

    def __init__(
        self,
        *,
        account_expiry: datetime,
        tunnel_state: TunnelState,
        now: datetime | None = None,
        translation: gettext.NullTranslations | None = None,
    ) -> None:
        self._account_expiry = account_expiry
        self._tunnel_state = tunnel_state
        self._now = now if now is not None else _utcnow()
        self._translation = translation or gettext.NullTranslations()

    def may_display(self) -> bool:
        return self._account_expiry <= self._now and not self._tunnel_state.is_connected

    def get_system_notification(self) -> SystemNotification:
        return SystemNotification(
            message=self._translation.gettext("Your account is out of time. Add more time to keep using the VPN."),
            severity=NotificationSeverity.HIGH,
            critical=True,
            category=NotificationCategory.ACCOUNT_EXPIRED,
        )


class CloseToAccountExpiryNotificationProvider:
    """Shown while the account expires within ``threshold`` but has not expired yet."""

    def __init__(
        self,
        *,
        account_expiry: datetime,
        locale: str,
        now: datetime | None = None,
        threshold: timedelta = timedelta(seconds=CLOSE_TO_EXPIRY_SECONDS),
        localedir: str | None = None,
    ) -> None:
        self._account_expiry = account_expiry
        self._now = now if now is not None else _utcnow()
        self._threshold = threshold
        self._translation = translation_for(locale, localedir)

    @property
    def remaining(self) -> timedelta:
        return self._account_expiry - self._now

    def may_display(self) -> bool:
        remaining = self.remaining
        return timedelta(0) < remaining <= self._threshold

    def get_system_notification(self) -> SystemNotification:
        duration = format_remaining_time(self.remaining.total_seconds(), self._translation)
        return SystemNotification(
            message=self._translation.gettext("Account credit expires in %(duration)s") % {"duration": duration},
            severity=NotificationSeverity.MEDIUM,
            critical=False,
            category=NotificationCategory.ACCOUNT_EXPIRES_SOON,
        )
