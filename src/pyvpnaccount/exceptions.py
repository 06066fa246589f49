"""Custom exception hierarchy for pyvpnaccount."""

from __future__ import annotations


class VpnError(Exception):
    """Base exception for all pyvpnaccount errors."""


class VpnConfigError(VpnError):
    """Invalid or missing configuration."""


class VpnTransportError(VpnError):
    """Daemon unreachable or replied with something that is not an RPC reply."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class VpnApiError(VpnError):
    """Daemon returned a non-OK code (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class InvalidAccountError(VpnApiError):
    """The account number does not exist or is malformed."""


class InvalidVoucherError(VpnApiError):
    """The voucher code was rejected."""


class VoucherUsedError(InvalidVoucherError):
    """The voucher code has already been redeemed."""


class DeviceNotFoundError(VpnApiError):
    """The device to remove is not registered on the account."""


class TooManyDevicesError(VpnApiError):
    """Login refused because the account already has the maximum number of devices.

    Callers are expected to list the account's devices and remove one
    before retrying the login.
    """


class VpnLocalizedError(VpnError):
    """Error whose message is already translated and safe to show to the user."""
