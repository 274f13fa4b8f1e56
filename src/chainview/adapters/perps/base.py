"""Building blocks shared by the perpetuals venues.

A venue exposes two event streams, fills and funding payments, and returns its
complete history in one call. The helpers here turn venue numbers into records,
page backwards through time-windowed streams and refuse to emit a result set
that fails the perps checks.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeVar

from chainview.adapters.utils.records import dedup_by_hash, sort_newest_first
from chainview.adapters.utils.units import format_decimal, truncate_decimals
from chainview.domain.enums import Direction, PerpsTag
from chainview.domain.models.chain import ChainInfo, PerpsVenueConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchResult
from chainview.exceptions import DataIntegrityError

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")
BoundT = TypeVar("BoundT")

SETTLEMENT_TAGS = (PerpsTag.CLOSE_POSITION, PerpsTag.FUNDING_PAYMENT)


def venue_info(config: PerpsVenueConfig) -> ChainInfo:
    return ChainInfo(
        id=config.id,
        name=config.name,
        symbol=config.settlement_token,
        explorer_url=config.explorer_url,
        address_pattern=config.address_pattern,
        address_placeholder=config.address_placeholder,
        is_perps=True,
    )


def base_hash(record_hash: str) -> str:
    """On-chain hash behind a composite ``<hash>-<suffix>`` record hash."""
    return record_hash.split("-", 1)[0]


def perps_direction(tag: PerpsTag, pnl: Decimal) -> Direction:
    if tag == PerpsTag.OPEN_POSITION:
        return Direction.OUT
    return Direction.IN if pnl >= 0 else Direction.OUT


def build_perps_record(
    config: PerpsVenueConfig,
    *,
    address: str,
    record_hash: str,
    timestamp: datetime | int | str,
    asset: str,
    amount: Decimal | int,
    fee: Decimal | int,
    pnl: Decimal | int,
    tag: PerpsTag,
    notes: str,
    explorer_url: str = "",
    block: str = "",
    raw: dict[str, Any] | None = None,
) -> CanonicalTransaction:
    """Assemble a perps record. Numbers are truncated to 8 places; opens always carry zero P&L."""
    amount, fee, pnl = Decimal(amount), Decimal(fee), Decimal(pnl)
    pnl = Decimal(0) if tag == PerpsTag.OPEN_POSITION else truncate_decimals(pnl)

    return CanonicalTransaction(
        chain_id=config.id,
        address=address,
        timestamp=timestamp,
        hash=record_hash,
        type=tag.value,
        direction=perps_direction(tag, pnl),
        counterparty=config.name,
        asset=asset,
        amount=format_decimal(abs(amount)),
        fee=format_decimal(abs(fee)),
        fee_asset=config.settlement_token,
        block=block,
        explorer_url=explorer_url,
        notes=notes,
        tag=tag,
        pnl=format_decimal(pnl),
        payment_token=config.settlement_token if tag in SETTLEMENT_TAGS else None,
        raw_details=raw,
    )


def validate_perps_records(records: list[CanonicalTransaction]) -> list[str]:
    """Return human-readable issues; an empty list means the set is safe to export."""
    issues: list[str] = []
    first_seen: dict[str, int] = {}

    for row, record in enumerate(records):
        if not record.asset.strip():
            issues.append(f"Row {row}: asset is required")
        if not record.hash.strip():
            issues.append(f"Row {row}: transaction hash is required")
        if record.tag is None:
            issues.append(f"Row {row}: perps record has no tag")
        elif record.tag in SETTLEMENT_TAGS and not record.payment_token:
            issues.append(f"Row {row}: payment token is required for {record.tag.value}")
        elif record.tag == PerpsTag.OPEN_POSITION and Decimal(record.pnl or "0") != 0:
            issues.append(f"Row {row}: P&L must be 0 for open_position, got {record.pnl}")

        if record.hash in first_seen:
            issues.append(f"Row {row}: duplicate transaction hash (first seen at row {first_seen[record.hash]})")
        else:
            first_seen[record.hash] = row

    return issues


def finalize_perps(venue: str, *streams: Iterable[CanonicalTransaction]) -> FetchResult:
    """Merge venue streams into the single complete page perps adapters return."""
    merged: list[CanonicalTransaction] = []
    for stream in streams:
        merged.extend(stream)

    unique = dedup_by_hash(merged)
    if len(unique) != len(merged):
        logger.info("%s: dropped %d duplicate records", venue, len(merged) - len(unique))

    issues = validate_perps_records(unique)
    if issues:
        raise DataIntegrityError(f"{venue} returned records that failed validation: " + "; ".join(issues[:10]))

    records = sort_newest_first(unique)
    return FetchResult(records=records, next_cursor=None, has_more=False, total_count=len(records))


async def paginate_backwards(
    fetch_page: Callable[[BoundT | None], Awaitable[list[ItemT]]],
    next_bound: Callable[[list[ItemT]], BoundT],
    page_size: int,
    max_pages: int,
    source: str,
) -> list[ItemT]:
    """Walk a newest-first stream backwards in time.

    ``fetch_page`` receives the exclusive upper bound for the page (None for the
    newest page); ``next_bound`` derives the next one from the page just read,
    typically the oldest timestamp minus one millisecond. Stops on a short page
    or after ``max_pages`` pages.
    """
    items: list[ItemT] = []
    bound: BoundT | None = None

    for _ in range(max_pages):
        page = await fetch_page(bound)
        if not page:
            return items
        items.extend(page)
        if len(page) < page_size:
            return items
        bound = next_bound(page)

    logger.warning("%s: stopped after %d pages, older history was not fetched", source, max_pages)
    return items
