"""Device and device-state models.

The device state is a tagged union discriminated on ``type``; exactly one
of :class:`LoggedOutState`, :class:`LoggedInState` or
:class:`RevokedState` is active at any time.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from pyvpnaccount.models._base import Timestamp, VpnBaseModel


class Device(VpnBaseModel):
    """A device registered on an account."""

    id: str
    name: str = ""
    created: Timestamp | None = None


class AccountAndDevice(VpnBaseModel):
    account_token: str
    device: Device | None = None


class LoggedOutState(VpnBaseModel):
    type: Literal["logged_out"] = "logged_out"


class LoggedInState(VpnBaseModel):
    type: Literal["logged_in"] = "logged_in"
    account_and_device: AccountAndDevice


class RevokedState(VpnBaseModel):
    """The device was removed from the account by someone else."""

    type: Literal["revoked"] = "revoked"


DeviceState = Annotated[
    LoggedOutState | LoggedInState | RevokedState,
    Field(discriminator="type"),
]


class DeviceEvent(VpnBaseModel):
    """Authoritative device-state change pushed by the daemon."""

    device_state: DeviceState


class DeviceRemoval(VpnBaseModel):
    account_token: str
    device_id: str
