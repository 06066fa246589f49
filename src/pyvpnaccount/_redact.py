"""Helpers for safe debug logging.

Account numbers are bearer credentials: anyone holding one can log in.
This module redacts them (and auth tokens) before anything reaches the
logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "account_token",
        "accounttoken",
        "account_number",
        "token",
        "www_auth_token",
        "voucher",
        "code",
        "authorization",
        "cookie",
    }
)

# Status field of an RPC reply; a voucher code everywhere else.
_REPLY_STATUS_KEY = "code"


def mask_account_token(token: str | None) -> str:
    """Return *token* with all but its last four characters masked."""
    if not token:
        return "<none>"
    if len(token) <= 4:
        return "*" * len(token)
    return f"{'*' * (len(token) - 4)}{token[-4:]}"


def _redact_entry(key: str, value: Any, *, max_string: int, keep_status: bool) -> Any:
    lowered = key.lower()
    if keep_status and lowered == _REPLY_STATUS_KEY:
        return value
    if lowered in _SENSITIVE_VALUE_KEYS:
        return "<redacted>"
    return redact_for_log(value, max_string=max_string)


def redact_for_log(value: Any, *, max_string: int = 512, is_reply: bool = False) -> Any:
    """Return a copy of a decoded JSON payload that is safe for debug logs.

    With ``is_reply=True`` the top-level ``code`` key is kept, since in
    daemon replies it holds the status code rather than a voucher.
    """
    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value
    if isinstance(value, Mapping):
        return {
            str(key): _redact_entry(str(key), item, max_string=max_string, keep_status=is_reply)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value
