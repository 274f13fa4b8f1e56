"""dYdX v4 perps history from the public indexer."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta

from chainview.adapters.base import require_valid_address, tx_url
from chainview.adapters.perps.base import base_hash, build_perps_record, finalize_perps, paginate_backwards, venue_info
from chainview.adapters.utils.units import to_decimal
from chainview.domain.enums import PerpsTag
from chainview.domain.models.chain import ChainInfo, PerpsVenueConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.domain.timestamps import to_utc_datetime
from chainview.exceptions import DataIntegrityError
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.perps.dydx_client import DYDX_PAGE_SIZE, DydxIndexerClient
from chainview.infra.perps.models import DydxFill, DydxFundingPayment

logger = logging.getLogger(__name__)

MAX_PAGES = 100

DYDX_CONFIG = PerpsVenueConfig(
    id="dydx-v4",
    name="dYdX v4",
    explorer_url="https://www.mintscan.io/dydx",
    address_pattern=r"^dydx1[a-z0-9]{38,}$",
    settlement_token="USDC",
    address_placeholder="dydx1...",
)


def one_ms_before(iso_time: str) -> str:
    moment = to_utc_datetime(iso_time) - timedelta(milliseconds=1)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def market_asset(market: str) -> str:
    """``BTC-USD`` -> ``BTC``."""
    return market.split("-", 1)[0]


def classify_fill(fill: DydxFill) -> PerpsTag:
    if fill.market_type != "PERPETUAL":
        raise DataIntegrityError(
            f"dYdX fill {fill.id}: unexpected marketType {fill.market_type!r}; only perpetual trades are supported"
        )
    pnl = to_decimal(fill.realized_pnl)
    if pnl is None:
        raise DataIntegrityError(
            f"dYdX fill {fill.id}: realizedPnl is missing; cannot tell an open from a close without it"
        )
    return PerpsTag.CLOSE_POSITION if pnl != 0 else PerpsTag.OPEN_POSITION


@dataclass(frozen=True)
class DydxAdapter:
    config: PerpsVenueConfig
    info: ChainInfo
    client: DydxIndexerClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.config.explorer_url, base_hash(tx_hash))

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)

        async def fills_page(before: str | None):
            return await self.client.get_fills(address, before)

        async def funding_page(before: str | None):
            return await self.client.get_funding(address, before)

        def before_oldest_fill(page) -> str:
            oldest = min(page, key=lambda item: to_utc_datetime(item[0].created_at))
            return one_ms_before(oldest[0].created_at)

        def before_oldest_payment(page) -> str:
            oldest = min(page, key=lambda item: to_utc_datetime(item[0].effective_at))
            return one_ms_before(oldest[0].effective_at)

        fills, funding = await asyncio.gather(
            paginate_backwards(fills_page, before_oldest_fill, DYDX_PAGE_SIZE, MAX_PAGES, "dYdX fills"),
            paginate_backwards(funding_page, before_oldest_payment, DYDX_PAGE_SIZE, MAX_PAGES, "dYdX funding"),
        )
        logger.info("dYdX: %d fills, %d funding payments for %s", len(fills), len(funding), address)

        return finalize_perps(
            self.config.name,
            [self._from_fill(fill, raw, address) for fill, raw in fills],
            [self._from_funding(payment, raw, address) for payment, raw in funding],
        )

    def _from_fill(self, fill: DydxFill, raw: dict, address: str) -> CanonicalTransaction:
        tag = classify_fill(fill)
        if fill.transaction_hash:
            record_hash = f"{fill.transaction_hash}-{fill.id}"
            explorer_url = self.get_explorer_url(fill.transaction_hash)
        else:
            record_hash, explorer_url = f"dydx-fill-{fill.id}", ""

        return build_perps_record(
            self.config,
            address=address,
            record_hash=record_hash,
            timestamp=fill.created_at,
            asset=market_asset(fill.market),
            amount=to_decimal(fill.size) or 0,
            fee=to_decimal(fill.fee) or 0,
            pnl=to_decimal(fill.realized_pnl) or 0,
            tag=tag,
            notes=f"{fill.side} {fill.market} @ {fill.price} ({fill.type}/{fill.liquidity})",
            explorer_url=explorer_url,
            block=fill.created_at_height,
            raw=raw,
        )

    def _from_funding(self, payment: DydxFundingPayment, raw: dict, address: str) -> CanonicalTransaction:
        amount = to_decimal(payment.payment) or 0
        return build_perps_record(
            self.config,
            address=address,
            record_hash=f"dydx-funding-{payment.market}-{payment.effective_at_height}",
            timestamp=payment.effective_at,
            asset=self.config.settlement_token,
            amount=abs(amount),
            fee=0,
            pnl=amount,
            tag=PerpsTag.FUNDING_PAYMENT,
            notes=f"Funding: {market_asset(payment.market)} rate={payment.rate} size={payment.position_size}",
            block=payment.effective_at_height,
            raw=raw,
        )


def make_dydx_adapter(http_client: RateLimitedClient, retries: int = 3) -> DydxAdapter:
    client = DydxIndexerClient(http_client, retries=retries)
    return DydxAdapter(config=DYDX_CONFIG, info=venue_info(DYDX_CONFIG), client=client)
