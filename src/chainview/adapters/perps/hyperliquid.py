"""Hyperliquid perps history: fills and funding, paged backwards by ``endTime``."""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from chainview.adapters.base import require_valid_address, tx_url
from chainview.adapters.perps.base import (
    base_hash,
    build_perps_record,
    finalize_perps,
    paginate_backwards,
    venue_info,
)
from chainview.adapters.utils.units import to_decimal
from chainview.domain.enums import PerpsTag
from chainview.domain.models.chain import EVM_ADDRESS_PATTERN, ChainInfo, PerpsVenueConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.exceptions import DataIntegrityError
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.perps.hyperliquid_client import HYPERLIQUID_PAGE_SIZE, HyperliquidClient
from chainview.infra.perps.models import HyperliquidFill, HyperliquidFunding

logger = logging.getLogger(__name__)

MAX_PAGES = 50

HYPERLIQUID_CONFIG = PerpsVenueConfig(
    id="hyperliquid",
    name="Hyperliquid",
    explorer_url="https://app.hyperliquid.xyz/explorer",
    address_pattern=EVM_ADDRESS_PATTERN,
    settlement_token="USDC",
    address_placeholder="0x...",
)


def classify_fill(fill: HyperliquidFill) -> PerpsTag:
    """``dir`` is "Open Long", "Close Short", ...; flips and spot fills fall back to ``closedPnl``."""
    direction = fill.dir or ""
    if direction.startswith("Open"):
        return PerpsTag.OPEN_POSITION
    if direction.startswith("Close"):
        return PerpsTag.CLOSE_POSITION

    pnl = to_decimal(fill.closed_pnl)
    if pnl is None:
        raise DataIntegrityError(
            f"Hyperliquid fill {fill.tid}: direction {direction!r} is not open/close and closedPnl is missing; "
            "cannot classify without guessing"
        )
    return PerpsTag.CLOSE_POSITION if pnl != 0 else PerpsTag.OPEN_POSITION


@dataclass(frozen=True)
class HyperliquidAdapter:
    config: PerpsVenueConfig
    info: ChainInfo
    client: HyperliquidClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.config.explorer_url, base_hash(tx_hash))

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        now_ms = int(time.time() * 1000)

        async def fills_page(end_time: int | None):
            return await self.client.get_fills(address, now_ms if end_time is None else end_time)

        async def funding_page(end_time: int | None):
            return await self.client.get_funding(address, now_ms if end_time is None else end_time)

        def before_oldest(page) -> int:
            return min(item.time for item, _ in page) - 1

        fills, funding = await asyncio.gather(
            paginate_backwards(fills_page, before_oldest, HYPERLIQUID_PAGE_SIZE, MAX_PAGES, "Hyperliquid fills"),
            paginate_backwards(funding_page, before_oldest, HYPERLIQUID_PAGE_SIZE, MAX_PAGES, "Hyperliquid funding"),
        )
        logger.info("Hyperliquid: %d fills, %d funding entries for %s", len(fills), len(funding), address)

        return finalize_perps(
            self.config.name,
            (self._from_fill(fill, raw, address) for fill, raw in fills),
            (self._from_funding(entry, raw, address) for entry, raw in funding),
        )

    def _from_fill(self, fill: HyperliquidFill, raw: dict, address: str) -> CanonicalTransaction:
        tag = classify_fill(fill)
        record_hash = f"{fill.hash}-{fill.tid}" if fill.hash else f"fill-{fill.tid}"
        return build_perps_record(
            self.config,
            address=address,
            record_hash=record_hash,
            timestamp=fill.time,
            asset=fill.coin,
            amount=to_decimal(fill.sz) or 0,
            fee=to_decimal(fill.fee) or 0,
            pnl=to_decimal(fill.closed_pnl) or 0,
            tag=tag,
            notes=f"{fill.dir or fill.side} @ {fill.px}",
            explorer_url=self.get_explorer_url(fill.hash) if fill.hash else "",
            raw=raw,
        )

    def _from_funding(self, entry: HyperliquidFunding, raw: dict, address: str) -> CanonicalTransaction:
        usdc = to_decimal(entry.delta.usdc) or 0
        coin = entry.delta.coin
        # Funding entries share a zero hash, so coin and time make them unique
        record_hash = f"{entry.hash}-funding-{coin}-{entry.time}" if entry.hash else f"funding-{coin}-{entry.time}"
        return build_perps_record(
            self.config,
            address=address,
            record_hash=record_hash,
            timestamp=entry.time,
            asset=self.config.settlement_token,
            amount=abs(usdc),
            fee=0,
            pnl=usdc,
            tag=PerpsTag.FUNDING_PAYMENT,
            notes=f"Funding: {coin} rate={entry.delta.funding_rate} size={entry.delta.szi}",
            raw=raw,
        )


def make_hyperliquid_adapter(http_client: RateLimitedClient, retries: int = 3) -> HyperliquidAdapter:
    client = HyperliquidClient(http_client, retries=retries)
    return HyperliquidAdapter(config=HYPERLIQUID_CONFIG, info=venue_info(HYPERLIQUID_CONFIG), client=client)
