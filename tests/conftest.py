from __future__ import annotations

import pytest
from fakes import FakeChannel, FakeClock, FakeDaemon, FakeDelegate, FakeScheduler

from pyvpnaccount.account import Account
from pyvpnaccount.config import AccountConfig


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest.fixture
def delegate() -> FakeDelegate:
    return FakeDelegate()


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def account(
    delegate: FakeDelegate,
    daemon: FakeDaemon,
    channel: FakeChannel,
    scheduler: FakeScheduler,
    clock: FakeClock,
) -> Account:
    return Account(delegate, daemon, channel, config=AccountConfig(), scheduler=scheduler, clock=clock)
