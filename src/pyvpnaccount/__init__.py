"""pyvpnaccount - Account and device lifecycle coordination for a VPN client."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvpnaccount")
except PackageNotFoundError:
    __version__ = "0+local"
from pyvpnaccount.account import Account, AccountDelegate, AccountEventChannel
from pyvpnaccount.cache import AccountDataCache, AccountDataFetcher, AccountDataObserver
from pyvpnaccount.config import AccountConfig
from pyvpnaccount.daemon import DaemonClient, DaemonRpc
from pyvpnaccount.exceptions import (
    DeviceNotFoundError,
    InvalidAccountError,
    InvalidVoucherError,
    TooManyDevicesError,
    VoucherUsedError,
    VpnApiError,
    VpnConfigError,
    VpnError,
    VpnLocalizedError,
    VpnTransportError,
)
from pyvpnaccount.models import (
    AccountAndDevice,
    AccountData,
    Device,
    DeviceEvent,
    DeviceRemoval,
    DeviceState,
    LoggedInState,
    LoggedOutState,
    NotificationCategory,
    NotificationSeverity,
    RevokedState,
    SystemNotification,
    TunnelState,
    TunnelStateKind,
    VoucherResponse,
)
from pyvpnaccount.notifications import AccountExpiredNotificationProvider, CloseToAccountExpiryNotificationProvider
from pyvpnaccount.scheduler import Scheduler

__all__ = [
    "__version__",
    "Account",
    "AccountAndDevice",
    "AccountConfig",
    "AccountData",
    "AccountDataCache",
    "AccountDataFetcher",
    "AccountDataObserver",
    "AccountDelegate",
    "AccountEventChannel",
    "AccountExpiredNotificationProvider",
    "CloseToAccountExpiryNotificationProvider",
    "DaemonClient",
    "DaemonRpc",
    "Device",
    "DeviceEvent",
    "DeviceNotFoundError",
    "DeviceRemoval",
    "DeviceState",
    "InvalidAccountError",
    "InvalidVoucherError",
    "LoggedInState",
    "LoggedOutState",
    "NotificationCategory",
    "NotificationSeverity",
    "RevokedState",
    "Scheduler",
    "SystemNotification",
    "TooManyDevicesError",
    "TunnelState",
    "TunnelStateKind",
    "VoucherResponse",
    "VoucherUsedError",
    "VpnApiError",
    "VpnConfigError",
    "VpnError",
    "VpnLocalizedError",
    "VpnTransportError",
]
