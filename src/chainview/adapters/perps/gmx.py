"""GMX synthetics on Arbitrum, read from the Subsquid trade-action index."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from chainview.adapters.base import require_valid_address, tx_url
from chainview.adapters.perps.base import base_hash, build_perps_record, finalize_perps, venue_info
from chainview.adapters.utils.units import to_decimal
from chainview.domain.enums import PerpsTag
from chainview.domain.models.chain import EVM_ADDRESS_PATTERN, ChainInfo, PerpsVenueConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.exceptions import DataIntegrityError
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.perps.gmx_client import GMX_PAGE_SIZE, GmxSubsquidClient
from chainview.infra.perps.models import GmxTradeAction

logger = logging.getLogger(__name__)

MAX_PAGES = 50
USD_SCALE = Decimal(10) ** 30

GMX_CONFIG = PerpsVenueConfig(
    id="gmx",
    name="GMX (Arbitrum)",
    explorer_url="https://arbiscan.io",
    address_pattern=EVM_ADDRESS_PATTERN,
    settlement_token="USD",
    address_placeholder="0x...",
)

MARKET_SYMBOLS = {
    "0x70d95587d40a2caf56bd97485ab3eec10bee6336": "ETH",
    "0x47c031236e19d024b42f8ae6780e44a573170703": "BTC",
    "0x09400d9db990d5ed3f35d7be61dfaeb900af03c9": "SOL",
    "0xc25cef6061cf5de5eb761b50e4743c1f5d7e5407": "ARB",
    "0x7f1fa204bb700853d36994da19f830b6ad18455c": "DOGE",
    "0x0ccb4faa6f1f1b30911619f1184082ab4e25813c": "LTC",
}


def market_symbol(market_address: str) -> str:
    return MARKET_SYMBOLS.get(market_address.lower(), market_address[:10])


def usd(value: str | None) -> Decimal | None:
    """GMX USD amounts are fixed-point with 30 decimals."""
    raw = to_decimal(value)
    return None if raw is None else raw / USD_SCALE


def classify_action(action: GmxTradeAction) -> tuple[PerpsTag, Decimal]:
    """Return the tag and realized P&L (base P&L plus price impact) of a trade action."""
    base_pnl = usd(action.base_pnl_usd)
    pnl = (base_pnl or Decimal(0)) + (usd(action.price_impact_usd) or Decimal(0))

    if "Increase" in action.event_name:
        return PerpsTag.OPEN_POSITION, pnl
    if "Decrease" in action.event_name:
        return PerpsTag.CLOSE_POSITION, pnl
    if base_pnl is None:
        raise DataIntegrityError(
            f"GMX trade action {action.id}: event {action.event_name!r} has no increase/decrease signal "
            "and no basePnlUsd; cannot classify without guessing"
        )
    return (PerpsTag.CLOSE_POSITION if pnl != 0 else PerpsTag.OPEN_POSITION), pnl


@dataclass(frozen=True)
class GmxAdapter:
    config: PerpsVenueConfig
    info: ChainInfo
    client: GmxSubsquidClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.config.explorer_url, base_hash(tx_hash))

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)

        actions = []
        skip = 0
        for _ in range(MAX_PAGES):
            page = await self.client.get_trade_actions(address, skip, GMX_PAGE_SIZE)
            actions.extend(page)
            if len(page) < GMX_PAGE_SIZE:
                break
            skip += GMX_PAGE_SIZE
        else:
            logger.warning("GMX: stopped after %d pages, older history was not fetched", MAX_PAGES)

        logger.info("GMX: %d trade actions for %s", len(actions), address)
        return finalize_perps(self.config.name, [self._from_action(a, raw, address) for a, raw in actions])

    def _from_action(self, action: GmxTradeAction, raw: dict, address: str) -> CanonicalTransaction:
        tag, pnl = classify_action(action)
        symbol = market_symbol(action.market_address)
        record_hash = f"{action.transaction.hash}-{action.id}"
        return build_perps_record(
            self.config,
            address=address,
            record_hash=record_hash,
            timestamp=action.transaction.timestamp,
            asset=symbol,
            amount=usd(action.size_delta_usd) or 0,
            fee=0,
            pnl=pnl,
            tag=tag,
            notes=f"{action.event_name} {symbol}",
            explorer_url=self.get_explorer_url(record_hash),
            block=str(action.transaction.block_number),
            raw=raw,
        )


def make_gmx_adapter(http_client: RateLimitedClient, retries: int = 3) -> GmxAdapter:
    client = GmxSubsquidClient(http_client, retries=retries)
    return GmxAdapter(config=GMX_CONFIG, info=venue_info(GMX_CONFIG), client=client)
