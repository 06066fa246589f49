from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
from fakes import ACCOUNT_A, ACCOUNT_B, NOW, FakeChannel, FakeDaemon, FakeDelegate, logged_in, logged_out, revoked

from pyvpnaccount.account import Account
from pyvpnaccount.exceptions import VpnTransportError
from pyvpnaccount.models import AccountData, DeviceEvent, TunnelState, TunnelStateKind


def _spy_fetch(monkeypatch: pytest.MonkeyPatch, account: Account) -> list[str]:
    cache = account._cache  # noqa: SLF001
    original = cache.fetch
    fetched: list[str] = []

    def _fetch(account_token: str) -> asyncio.Task[None]:
        fetched.append(account_token)
        return original(account_token)

    monkeypatch.setattr(cache, "fetch", _fetch)
    return fetched


def _spy_invalidate(monkeypatch: pytest.MonkeyPatch, account: Account, log: list[str]) -> None:
    cache = account._cache  # noqa: SLF001
    original = cache.invalidate

    def _invalidate() -> None:
        log.append("invalidate")
        original()

    monkeypatch.setattr(cache, "invalidate", _invalidate)


@pytest.mark.asyncio
async def test_device_state_follows_last_delivered_event(account: Account) -> None:
    events = [logged_in(ACCOUNT_A), revoked(), logged_out(), logged_in(ACCOUNT_B), logged_in(ACCOUNT_A)]

    for event in events:
        account.handle_device_event(event)
        assert account.device_state == event.device_state

    assert account.is_logged_in()
    assert account.current_account_token() == ACCOUNT_A
    await account.wait_idle()


@pytest.mark.asyncio
async def test_logged_out_state_has_no_account_token(account: Account) -> None:
    assert account.device_state is None
    assert not account.is_logged_in()
    assert account.current_account_token() is None

    account.handle_device_event(revoked())

    assert not account.is_logged_in()
    assert account.current_account_token() is None
    await account.wait_idle()


@pytest.mark.asyncio
async def test_logged_in_event_fetches_account_data_once(
    monkeypatch: pytest.MonkeyPatch,
    account: Account,
    daemon: FakeDaemon,
    channel: FakeChannel,
) -> None:
    fetched = _spy_fetch(monkeypatch, account)

    account.handle_device_event(logged_in(ACCOUNT_A))
    await account.wait_idle()

    assert fetched == [ACCOUNT_A]
    assert daemon.calls["get_account_data"] == 1
    assert account.account_data is not None
    assert account.account_data.expiry == daemon.expiry
    assert channel.account_updates == [account.account_data]


@pytest.mark.asyncio
@pytest.mark.parametrize("event", [logged_out(), revoked()], ids=["logged_out", "revoked"])
async def test_logout_and_revocation_invalidate_before_history_refresh(
    monkeypatch: pytest.MonkeyPatch,
    account: Account,
    daemon: FakeDaemon,
    event: DeviceEvent,
) -> None:
    _spy_invalidate(monkeypatch, account, daemon.log)

    account.handle_device_event(event)
    await account.wait_idle()

    assert daemon.log.count("invalidate") == 1
    assert daemon.log.index("invalidate") < daemon.log.index("get_account_history")
    assert "get_account_data" not in daemon.log


@pytest.mark.asyncio
async def test_duplicate_logged_in_event_is_idempotent(
    account: Account,
    daemon: FakeDaemon,
    channel: FakeChannel,
) -> None:
    daemon.fetch_gate = asyncio.Event()

    account.handle_device_event(logged_in(ACCOUNT_A))
    await asyncio.sleep(0)
    account.handle_device_event(logged_in(ACCOUNT_A))
    daemon.fetch_gate.set()
    await account.wait_idle()

    assert daemon.calls["get_account_data"] == 1
    assert len(channel.account_updates) == 1
    assert len(channel.device_events) == 2
    assert account.current_account_token() == ACCOUNT_A


@pytest.mark.asyncio
async def test_fetch_overtaken_by_logout_is_dropped(
    account: Account,
    daemon: FakeDaemon,
    channel: FakeChannel,
) -> None:
    daemon.fetch_gate = asyncio.Event()

    account.handle_device_event(logged_in(ACCOUNT_A))
    await asyncio.sleep(0)
    account.handle_device_event(logged_out())
    daemon.fetch_gate.set()
    await account.wait_idle()

    assert daemon.calls["get_account_data"] == 1
    assert account.account_data is None
    assert channel.account_updates == []


@pytest.mark.asyncio
async def test_logout_clears_account_data_snapshot(account: Account, channel: FakeChannel) -> None:
    account.handle_device_event(logged_in(ACCOUNT_A))
    await account.wait_idle()
    assert account.account_data is not None

    account.handle_device_event(logged_out())
    await account.wait_idle()

    assert account.account_data is None
    assert channel.account_updates[-1] is None


@pytest.mark.asyncio
async def test_switching_account_clears_previous_account_data(
    account: Account,
    daemon: FakeDaemon,
    channel: FakeChannel,
) -> None:
    account.handle_device_event(logged_in(ACCOUNT_A))
    await account.wait_idle()

    daemon.fetch_gate = asyncio.Event()
    account.handle_device_event(logged_in(ACCOUNT_B))
    await asyncio.sleep(0)

    assert account.account_data is None
    daemon.fetch_gate.set()
    await account.wait_idle()
    assert account.account_data is not None
    assert daemon.calls["get_account_data"] == 2


@pytest.mark.asyncio
async def test_device_event_side_effects(
    account: Account,
    daemon: FakeDaemon,
    delegate: FakeDelegate,
    channel: FakeChannel,
) -> None:
    delegate.post_upgrade_check_pending = True
    event = logged_in(ACCOUNT_A)

    account.handle_device_event(event)
    await account.wait_idle()

    assert delegate.post_upgrade_checks == 1
    assert delegate.tray_refreshes == 1
    assert channel.device_events == [event]
    assert channel.history_updates == [daemon.account_history]
    assert account.account_history == ACCOUNT_A


@pytest.mark.asyncio
async def test_post_upgrade_check_skipped_when_not_pending(account: Account, delegate: FakeDelegate) -> None:
    account.handle_device_event(logged_out())
    await account.wait_idle()

    assert delegate.post_upgrade_checks == 0


@pytest.mark.asyncio
async def test_history_refresh_failure_keeps_previous_value(
    caplog: pytest.LogCaptureFixture,
    account: Account,
    daemon: FakeDaemon,
    channel: FakeChannel,
) -> None:
    account.handle_device_event(logged_in(ACCOUNT_A))
    await account.wait_idle()

    daemon.errors["get_account_history"] = VpnTransportError("daemon unreachable")
    account.handle_device_event(logged_out())
    await account.wait_idle()

    assert account.account_history == ACCOUNT_A
    assert channel.history_updates == [ACCOUNT_A]
    assert "Failed to fetch the account history" in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("connected", "event", "expected_fetches"),
    [
        (True, logged_in(ACCOUNT_A), 2),
        (False, logged_in(ACCOUNT_A), 1),
        (True, logged_out(), 0),
        (True, None, 0),
    ],
    ids=["connected-logged-in", "disconnected", "logged-out", "no-device-state"],
)
async def test_update_account_data_requires_connection_and_login(
    account: Account,
    daemon: FakeDaemon,
    connected: bool,
    event: DeviceEvent | None,
    expected_fetches: int,
) -> None:
    daemon.is_connected = connected
    if event is not None:
        account.handle_device_event(event)
        await account.wait_idle()

    account.update_account_data()
    await account.wait_idle()

    assert daemon.calls.get("get_account_data", 0) == expected_fetches


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("tunnel", "expiry_offset", "expect_invalidate"),
    [
        (TunnelStateKind.CONNECTED, None, True),
        (TunnelStateKind.CONNECTED, timedelta(hours=-1), True),
        (TunnelStateKind.CONNECTED, timedelta(0), True),
        (TunnelStateKind.CONNECTED, timedelta(hours=1), False),
        (TunnelStateKind.DISCONNECTED, None, False),
        (TunnelStateKind.DISCONNECTED, timedelta(hours=-1), False),
        (TunnelStateKind.CONNECTING, timedelta(hours=-1), False),
        (TunnelStateKind.ERROR, None, False),
    ],
)
async def test_detect_stale_account_expiry(
    monkeypatch: pytest.MonkeyPatch,
    account: Account,
    tunnel: TunnelStateKind,
    expiry_offset: timedelta | None,
    expect_invalidate: bool,
) -> None:
    if expiry_offset is not None:
        account.on_account_data(AccountData(expiry=NOW + expiry_offset))
    log: list[str] = []
    _spy_invalidate(monkeypatch, account, log)

    account.detect_stale_account_expiry(TunnelState(state=tunnel))

    assert log == (["invalidate"] if expect_invalidate else [])


@pytest.mark.asyncio
async def test_stale_expiry_detection_refetches_account_data(
    account: Account,
    daemon: FakeDaemon,
    channel: FakeChannel,
) -> None:
    daemon.expiry = NOW - timedelta(days=1)
    account.handle_device_event(logged_in(ACCOUNT_A))
    await account.wait_idle()

    daemon.expiry = NOW + timedelta(days=30)
    account.detect_stale_account_expiry(TunnelState(state=TunnelStateKind.CONNECTED))
    await account.wait_idle()

    assert daemon.calls["get_account_data"] == 2
    assert account.account_data is not None
    assert account.account_data.expiry == NOW + timedelta(days=30)
    assert channel.account_updates[-1] == account.account_data
