"""Per-query fetch orchestration: drives one adapter page by page and accumulates records."""

import logging
from enum import Enum

from chainview.adapters.base import ChainAdapter
from chainview.adapters.registry import AdapterRegistry, get_adapter
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.exceptions import ChainViewError, InvalidAddressError
from chainview.report.csv_writer import AwakenCsvWriter
from chainview.services.filters import SortOrder, TransactionFilters, apply_filters, sort_transactions

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class TransactionSession:
    """State machine ``idle -> loading -> success | error`` for one chain/address query.

    Only one request is in flight at a time: ``load_more`` while loading is a
    no-op. A new ``fetch`` supersedes any earlier one; a response that resolves
    after it was superseded is dropped instead of overwriting fresher state.
    A failed page keeps none of its records.
    """

    def __init__(self, registry: AdapterRegistry, page_size: int = 100) -> None:
        self._registry = registry
        self._page_size = page_size
        self._generation = 0
        self._clear()

    def _clear(self) -> None:
        self._records: list[CanonicalTransaction] = []
        self._state = SessionState.IDLE
        self._error: str | None = None
        self._failure: ChainViewError | None = None
        self._cursor: str | None = None
        self._has_more = False
        self._total_count: int | None = None
        self._chain_id = ""
        self._address = ""

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state == SessionState.LOADING

    @property
    def records(self) -> list[CanonicalTransaction]:
        return list(self._records)

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def cursor(self) -> str | None:
        return self._cursor

    @property
    def total_count(self) -> int | None:
        return self._total_count

    @property
    def chain_id(self) -> str:
        return self._chain_id

    @property
    def address(self) -> str:
        return self._address

    def _fail(self, exc: ChainViewError) -> None:
        self._state = SessionState.ERROR
        self._error = str(exc)
        self._failure = exc

    async def fetch(self, chain_id: str, address: str) -> None:
        """Start a new query. Unknown chains and invalid addresses fail without a network call."""
        self._generation += 1
        generation = self._generation
        self._clear()
        self._chain_id, self._address = chain_id, address

        try:
            adapter = get_adapter(self._registry, chain_id)
            if not adapter.validate_address(address):
                raise InvalidAddressError(f"Invalid address format for {adapter.info.name}")
        except ChainViewError as exc:
            self._fail(exc)
            return

        await self._load_page(adapter, generation, FetchOptions(limit=self._page_size), append=False)

    async def load_more(self) -> None:
        if not self._has_more or self.loading or not self._cursor:
            return
        adapter = get_adapter(self._registry, self._chain_id)
        options = FetchOptions(cursor=self._cursor, limit=self._page_size)
        await self._load_page(adapter, self._generation, options, append=True)

    async def _load_page(self, adapter: ChainAdapter, generation: int, options: FetchOptions, append: bool) -> None:
        self._state = SessionState.LOADING
        self._error = None
        self._failure = None
        try:
            result: FetchResult = await adapter.fetch_transactions(self._address, options)
        except ChainViewError as exc:
            if generation == self._generation:
                logger.warning("Fetch failed for %s on %s: %s", self._address, self._chain_id, exc)
                self._fail(exc)
            return
        except Exception as exc:
            if generation == self._generation:
                logger.exception("Unexpected error fetching %s on %s", self._address, self._chain_id)
                self._fail(ChainViewError(f"Failed to fetch transactions: {exc}"))
            return

        if generation != self._generation:
            logger.debug("Discarding stale page for %s on %s", self._address, adapter.info.id)
            return

        self._records = self._records + result.records if append else list(result.records)
        self._has_more = result.has_more
        self._cursor = result.next_cursor
        if not append or result.total_count is not None:
            self._total_count = result.total_count
        self._state = SessionState.SUCCESS
        logger.info(
            "%s %s: %d records loaded (%d total, more=%s)",
            self._chain_id, self._address, len(result.records), len(self._records), self._has_more,
        )

    async def fetch_all(self, chain_id: str, address: str, max_pages: int = 20) -> list[CanonicalTransaction]:
        """Fetch then keep loading pages until exhausted or ``max_pages`` pages were read.

        Raises the failure instead of leaving it in ``error``.
        """
        await self.fetch(chain_id, address)
        pages = 1
        while self._state == SessionState.SUCCESS and self._has_more and pages < max_pages:
            await self.load_more()
            pages += 1

        if self._state == SessionState.ERROR:
            raise self._failure or ChainViewError(self._error or "Failed to fetch transactions")
        if self._has_more:
            logger.warning("%s %s: stopped after %d pages with more available", chain_id, address, pages)
        return self.records

    def reset(self) -> None:
        self._generation += 1
        self._clear()

    def view(
        self,
        filters: TransactionFilters | None = None,
        sort_key: str = "date",
        order: SortOrder | str = SortOrder.DESC,
    ) -> list[CanonicalTransaction]:
        filtered = apply_filters(self._records, filters or TransactionFilters())
        return sort_transactions(filtered, sort_key, order)

    def export_csv(
        self,
        filters: TransactionFilters | None = None,
        sort_key: str = "date",
        order: SortOrder | str = SortOrder.DESC,
    ) -> str:
        return AwakenCsvWriter().write_to_string(self.view(filters, sort_key, order))
