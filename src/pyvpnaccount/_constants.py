"""Internal constants shared across the library."""

DAEMON_URL = "http://127.0.0.1:7890"
USER_AGENT = "pyvpnaccount"
GETTEXT_DOMAIN = "pyvpnaccount"

#: Upper bound on the delay between two "account expires soon" reminders.
REMINDER_INTERVAL_SECONDS: float = 12 * 3600
#: How long before expiry the "account expires soon" reminder starts showing.
CLOSE_TO_EXPIRY_SECONDS: float = 3 * 24 * 3600

RPC_OK_CODE = "ok"
INVALID_ACCOUNT_CODES: frozenset[str] = frozenset({"INVALID_ACCOUNT", "ACCOUNT_NOT_FOUND"})
INVALID_VOUCHER_CODES: frozenset[str] = frozenset({"INVALID_VOUCHER"})
VOUCHER_USED_CODES: frozenset[str] = frozenset({"VOUCHER_USED"})
DEVICE_NOT_FOUND_CODES: frozenset[str] = frozenset({"DEVICE_NOT_FOUND"})
TOO_MANY_DEVICES_CODES: frozenset[str] = frozenset({"TOO_MANY_DEVICES"})
