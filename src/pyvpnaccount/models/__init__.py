"""Data models for daemon payloads."""

from pyvpnaccount.models._base import Timestamp, VpnBaseModel, parse_timestamp
from pyvpnaccount.models.account import AccountData, VoucherResponse
from pyvpnaccount.models.device import (
    AccountAndDevice,
    Device,
    DeviceEvent,
    DeviceRemoval,
    DeviceState,
    LoggedInState,
    LoggedOutState,
    RevokedState,
)
from pyvpnaccount.models.notification import NotificationCategory, NotificationSeverity, SystemNotification
from pyvpnaccount.models.tunnel import TunnelState, TunnelStateKind

__all__ = [
    "AccountAndDevice",
    "AccountData",
    "Device",
    "DeviceEvent",
    "DeviceRemoval",
    "DeviceState",
    "LoggedInState",
    "LoggedOutState",
    "NotificationCategory",
    "NotificationSeverity",
    "RevokedState",
    "SystemNotification",
    "Timestamp",
    "TunnelState",
    "TunnelStateKind",
    "VoucherResponse",
    "VpnBaseModel",
    "parse_timestamp",
]
