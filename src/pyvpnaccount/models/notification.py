"""Notification payload handed to the presentation layer."""

from __future__ import annotations

from enum import StrEnum

from pyvpnaccount.models._base import VpnBaseModel


class NotificationSeverity(StrEnum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationCategory(StrEnum):
    ACCOUNT_EXPIRED = "account_expired"
    ACCOUNT_EXPIRES_SOON = "account_expires_soon"


class SystemNotification(VpnBaseModel):
    """A notification ready to be displayed.

    Parameters
    ----------
    message : str
        Already-translated text.
    severity : NotificationSeverity
        How prominently the presentation layer should show it.
    critical : bool
        Whether the notification should stay until dismissed.
    category : NotificationCategory
        What the notification is about; lets the presentation layer
        replace an older notification of the same kind.
    """

    message: str
    severity: NotificationSeverity
    critical: bool = False
    category: NotificationCategory
