"""Account data and voucher models."""

from __future__ import annotations

from datetime import datetime

from pyvpnaccount.models._base import Timestamp, VpnBaseModel


class AccountData(VpnBaseModel):
    """Account metadata as reported by the daemon.

    Only meaningful while the device is logged in.
    """

    expiry: Timestamp

    def has_expired(self, now: datetime) -> bool:
        return self.expiry <= now


class VoucherResponse(VpnBaseModel):
    """Result of a successful voucher submission."""

    new_expiry: Timestamp
    seconds_added: int = 0
