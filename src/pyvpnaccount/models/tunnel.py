"""Tunnel state as reported by the daemon."""

from __future__ import annotations

from enum import StrEnum

from pyvpnaccount.models._base import VpnBaseModel


class TunnelStateKind(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"
    ERROR = "error"


class TunnelState(VpnBaseModel):
    state: TunnelStateKind = TunnelStateKind.DISCONNECTED

    @property
    def is_connected(self) -> bool:
        return self.state == TunnelStateKind.CONNECTED
