"""Deduplicating account data cache.

The cache is composed from two capabilities: an :class:`AccountDataFetcher`
that talks to the daemon, and an :class:`AccountDataObserver` that receives
every fresh value. At most one fetch per account is in flight at a time,
and completions that were overtaken by an :meth:`AccountDataCache.invalidate`
are dropped instead of delivered.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pyvpnaccount._redact import mask_account_token
from pyvpnaccount.models.account import AccountData, VoucherResponse

_logger = logging.getLogger(__name__)


class AccountDataFetcher(Protocol):
    async def __call__(self, account_token: str) -> AccountData: ...


class AccountDataObserver(Protocol):
    def on_account_data(self, account_data: AccountData) -> None: ...


class AccountDataCache:
    """Caches account data for the current account.

    Every :meth:`invalidate` (and every switch to another account) bumps a
    generation counter. A fetch remembers the generation it started in and
    its result is only stored and delivered if the generation is unchanged
    when it completes.
    """

    def __init__(self, fetcher: AccountDataFetcher, observer: AccountDataObserver) -> None:
        self._fetcher = fetcher
        self._observer = observer
        self._current_account: str | None = None
        self._value: AccountData | None = None
        self._generation = 0
        self._fetch_task: asyncio.Task[None] | None = None

    @property
    def value(self) -> AccountData | None:
        return self._value

    @property
    def current_account(self) -> str | None:
        return self._current_account

    @property
    def is_fetching(self) -> bool:
        return self._fetch_task is not None and not self._fetch_task.done()

    def fetch(self, account_token: str) -> asyncio.Task[None]:
        """Start fetching data for *account_token*, or join the fetch in flight.

        Returns the task performing the fetch so callers may await it.
        """
        if self._current_account != account_token:
            self.invalidate()
            self._current_account = account_token

        if self._fetch_task is not None and not self._fetch_task.done():
            return self._fetch_task

        task = asyncio.get_running_loop().create_task(
            self._perform_fetch(account_token, self._generation),
            name=f"account-data-fetch-{mask_account_token(account_token)}",
        )
        self._fetch_task = task
        return task

    def invalidate(self) -> None:
        """Drop the cached value and fence any fetch in flight."""
        self._generation += 1
        self._value = None
        self._current_account = None
        task = self._fetch_task
        self._fetch_task = None
        if task is not None and not task.done():
            task.cancel()

    def handle_voucher_response(self, account_token: str, response: VoucherResponse) -> None:
        """Apply the expiry from a redeemed voucher without a fetch round-trip.

        The caller passes the account the voucher was redeemed for. The
        response is applied even if nothing is cached for that account yet
        (first fetch still running, last fetch failed, or the cache was
        just invalidated); it is only ignored when the cache belongs to a
        different account.
        """
        if self._current_account is not None and account_token != self._current_account:
            return

        # A fetch that started before the voucher was redeemed would report
        # the old expiry.
        self._generation += 1
        task = self._fetch_task
        self._fetch_task = None
        if task is not None and not task.done():
            task.cancel()

        self._current_account = account_token
        if self._value is None:
            account_data = AccountData(expiry=response.new_expiry)
        else:
            account_data = self._value.model_copy(update={"expiry": response.new_expiry})
        self._set_value(account_data)

    async def _perform_fetch(self, account_token: str, generation: int) -> None:
        try:
            account_data = await self._fetcher(account_token)
        except Exception as exc:
            _logger.warning(
                "Failed to fetch account data for %s: %s",
                mask_account_token(account_token),
                exc,
            )
            return
        finally:
            if self._generation == generation and self._fetch_task is asyncio.current_task():
                self._fetch_task = None

        if self._generation != generation:
            _logger.debug("Dropping account data fetched before the cache was invalidated")
            return

        self._set_value(account_data)

    def _set_value(self, account_data: AccountData) -> None:
        self._value = account_data
        self._observer.on_account_data(account_data)
