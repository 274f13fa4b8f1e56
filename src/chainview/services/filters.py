"""Pure filter and sort over an accumulated record list. Inputs are never mutated."""

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from chainview.adapters.utils.units import to_decimal
from chainview.domain.models.transaction import CanonicalTransaction
from chainview.domain.timestamps import to_utc_datetime


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class DirectionFilter(str, Enum):
    ALL = "all"
    IN = "in"
    OUT = "out"


class TransactionFilters(BaseModel):
    start: datetime | None = None  # inclusive, UTC
    end: datetime | None = None  # inclusive, UTC
    direction: DirectionFilter = DirectionFilter.ALL
    type: str = ""
    asset: str = ""
    search: str = ""

    @field_validator("start", "end", mode="before")
    @classmethod
    def _utc(cls, value: Any) -> datetime | None:
        if value is None or value == "":
            return None
        return to_utc_datetime(value)


def _matches(tx: CanonicalTransaction, filters: TransactionFilters, search: str) -> bool:
    if filters.start is not None and tx.timestamp < filters.start:
        return False
    if filters.end is not None and tx.timestamp > filters.end:
        return False
    if filters.direction != DirectionFilter.ALL and tx.direction.value != filters.direction.value:
        return False
    if filters.type and tx.type != filters.type:
        return False
    if filters.asset and tx.asset.lower() != filters.asset.lower():
        return False
    if search:
        haystacks = (tx.hash, tx.counterparty, tx.notes, tx.asset)
        if not any(search in field.lower() for field in haystacks):
            return False
    return True


def apply_filters(records: Iterable[CanonicalTransaction], filters: TransactionFilters) -> list[CanonicalTransaction]:
    search = filters.search.lower()
    return [tx for tx in records if _matches(tx, filters, search)]


def _numeric(value: str) -> Decimal:
    return to_decimal(value) or Decimal(0)


SORT_KEYS: dict[str, Callable[[CanonicalTransaction], Any]] = {
    "date": lambda tx: tx.timestamp,
    "amount": lambda tx: _numeric(tx.amount),
    "fee": lambda tx: _numeric(tx.fee),
    "type": lambda tx: tx.type,
    "asset": lambda tx: tx.asset,
}


def sort_transactions(
    records: Sequence[CanonicalTransaction], sort_key: str, order: SortOrder | str = SortOrder.DESC
) -> list[CanonicalTransaction]:
    """Stable sort into a new list. An unknown key keeps the input order."""
    key = SORT_KEYS.get(sort_key)
    if key is None:
        return list(records)
    return sorted(records, key=key, reverse=SortOrder(order) == SortOrder.DESC)


def unique_types(records: Iterable[CanonicalTransaction]) -> list[str]:
    return sorted({tx.type for tx in records})


def unique_assets(records: Iterable[CanonicalTransaction]) -> list[str]:
    return sorted({tx.asset for tx in records})
