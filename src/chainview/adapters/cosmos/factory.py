"""Config-driven Cosmos SDK adapters over the LCD tx-search endpoint."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from chainview.adapters.base import int_cursor, page_limit, require_valid_address, tx_url
from chainview.adapters.cosmos.denoms import denom_decimals, format_denom
from chainview.adapters.cosmos.messages import parse_message
from chainview.adapters.utils.records import merge_streams
from chainview.adapters.utils.units import format_base_units
from chainview.domain.enums import TxStatus
from chainview.domain.models.chain import ChainInfo, CosmosChainConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.infra.blockchain.cosmos.lcd_client import RECIPIENT_EVENT, SENDER_EVENT, CosmosLcdClient
from chainview.infra.blockchain.cosmos.models import CosmosMessage, TxResponse
from chainview.infra.http.relay_client import RelayClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


@dataclass(frozen=True)
class CosmosAdapter:
    config: CosmosChainConfig
    info: ChainInfo
    lcd: CosmosLcdClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.config.explorer_url, tx_hash)

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        limit = page_limit(options, DEFAULT_LIMIT)
        offset = int_cursor(options, 0)

        # An event query matches one role only, so sent and received txs are separate streams
        sent, received = await asyncio.gather(
            self.lcd.search_txs(SENDER_EVENT, address, limit, offset),
            self.lcd.search_txs(RECIPIENT_EVENT, address, limit, offset),
        )
        unique = merge_streams(
            (self._normalize(tx, raw, address) for tx, raw in sent),
            (self._normalize(tx, raw, address) for tx, raw in received),
        )
        has_more = len(unique) >= limit
        logger.info(
            "%s: %d sent + %d received -> %d unique txs for %s (more=%s)",
            self.config.name, len(sent), len(received), len(unique), address, has_more,
        )
        return FetchResult(
            records=unique[:limit],
            next_cursor=str(offset + limit) if has_more else None,
            has_more=has_more,
        )

    def _normalize(self, tx: TxResponse, raw: dict[str, Any], address: str) -> CanonicalTransaction:
        messages = tx.tx.body.messages
        first = messages[0] if messages else CosmosMessage()
        parsed = parse_message(first, address, self.config, tx.tx_events())

        fee_coins = tx.tx.auth_info.fee.amount
        fee, fee_asset = "0", self.config.symbol
        if fee_coins:
            fee_coin = fee_coins[0]
            fee = format_base_units(fee_coin.amount, denom_decimals(fee_coin.denom, self.config))
            fee_asset = format_denom(fee_coin.denom, self.config)

        return CanonicalTransaction(
            chain_id=self.config.id,
            address=address,
            timestamp=tx.timestamp,
            hash=tx.txhash,
            type=parsed.type,
            direction=parsed.direction,
            counterparty=parsed.counterparty,
            asset=parsed.asset,
            amount=parsed.amount,
            fee=fee,
            fee_asset=fee_asset,
            status=TxStatus.SUCCESS if tx.code == 0 else TxStatus.FAILED,
            block=tx.height,
            explorer_url=self.get_explorer_url(tx.txhash),
            notes=tx.tx.body.memo,
            raw_details=raw,
        )


def make_cosmos_adapter(config: CosmosChainConfig, relay: RelayClient) -> CosmosAdapter:
    info = ChainInfo(
        id=config.id,
        name=config.name,
        symbol=config.symbol,
        explorer_url=config.explorer_url,
        # Prefix and length only, no bech32 checksum
        address_pattern=rf"^{config.address_prefix}1[a-z0-9]{{38}}$",
        address_placeholder=config.address_placeholder,
    )
    lcd = CosmosLcdClient(config.lcd_endpoints, relay, source=config.name)
    return CosmosAdapter(config=config, info=info, lcd=lcd)


def cosmos_lcd_hosts() -> set[str]:
    """Hostnames of every configured LCD endpoint, for the relay allow-list."""
    return {
        urlsplit(endpoint).hostname or ""
        for config in COSMOS_CHAIN_CONFIGS
        for endpoint in config.lcd_endpoints
    } - {""}


COSMOS_CHAIN_CONFIGS: tuple[CosmosChainConfig, ...] = (
    CosmosChainConfig(
        id="osmosis",
        name="Osmosis",
        symbol="OSMO",
        explorer_url="https://www.mintscan.io/osmosis",
        address_prefix="osmo",
        address_placeholder="osmo1clpqr4nrk4khgkxj78fcwwh6dl3uw4ep88n0y4",
        lcd_endpoints=(
            "https://lcd.osmosis.zone",
            "https://rest.osmosis.goldenratiostaking.net",
            "https://rest.lavenderfive.com:443/osmosis",
            "https://rest-osmosis.ecostake.com",
            "https://osmosis-api.polkachu.com",
        ),
        decimals=6,
        denom="uosmo",
    ),
    CosmosChainConfig(
        id="cosmos",
        name="Cosmos Hub",
        symbol="ATOM",
        explorer_url="https://www.mintscan.io/cosmos",
        address_prefix="cosmos",
        address_placeholder="cosmos1clpqr4nrk4khgkxj78fcwwh6dl3uw4epasmvnj",
        lcd_endpoints=(
            "https://lcd-cosmoshub.keplr.app",
            "https://cosmos-lcd.quickapi.com",
            "https://rest.cosmos.directory/cosmoshub",
            "https://cosmos-rest.publicnode.com",
        ),
        decimals=6,
        denom="uatom",
    ),
    CosmosChainConfig(
        id="celestia",
        name="Celestia",
        symbol="TIA",
        explorer_url="https://www.mintscan.io/celestia",
        address_prefix="celestia",
        address_placeholder="celestia1clpqr4nrk4khgkxj78fcwwh6dl3uw4ep5xmdtf",
        lcd_endpoints=(
            "https://celestia-lcd.publicnode.com",
            "https://rest.cosmos.directory/celestia",
            "https://celestia-api.polkachu.com",
        ),
        decimals=6,
        denom="utia",
    ),
    CosmosChainConfig(
        id="dydx",
        name="dYdX Chain",
        symbol="DYDX",
        explorer_url="https://www.mintscan.io/dydx",
        address_prefix="dydx",
        address_placeholder="dydx1clpqr4nrk4khgkxj78fcwwh6dl3uw4epx5m8t2",
        lcd_endpoints=(
            "https://dydx-lcd.publicnode.com",
            "https://rest.cosmos.directory/dydx",
            "https://dydx-api.polkachu.com",
        ),
        decimals=18,
        denom="adydx",
    ),
    CosmosChainConfig(
        id="sei",
        name="Sei",
        symbol="SEI",
        explorer_url="https://www.mintscan.io/sei",
        address_prefix="sei",
        address_placeholder="sei1clpqr4nrk4khgkxj78fcwwh6dl3uw4ep88n0y4",
        lcd_endpoints=(
            "https://sei-lcd.publicnode.com",
            "https://rest.cosmos.directory/sei",
            "https://sei-api.polkachu.com",
        ),
        decimals=6,
        denom="usei",
    ),
    CosmosChainConfig(
        id="injective",
        name="Injective",
        symbol="INJ",
        explorer_url="https://www.mintscan.io/injective",
        address_prefix="inj",
        address_placeholder="inj1clpqr4nrk4khgkxj78fcwwh6dl3uw4ep88n0y4",
        lcd_endpoints=(
            "https://injective-lcd.publicnode.com",
            "https://rest.cosmos.directory/injective",
            "https://injective-api.polkachu.com",
        ),
        decimals=18,
        denom="inj",
    ),
    CosmosChainConfig(
        id="neutron",
        name="Neutron",
        symbol="NTRN",
        explorer_url="https://www.mintscan.io/neutron",
        address_prefix="neutron",
        address_placeholder="neutron1clpqr4nrk4khgkxj78fcwwh6dl3uw4ep88n0y4",
        lcd_endpoints=(
            "https://neutron-lcd.publicnode.com",
            "https://rest.cosmos.directory/neutron",
            "https://neutron-api.polkachu.com",
        ),
        decimals=6,
        denom="untrn",
    ),
    CosmosChainConfig(
        id="noble",
        name="Noble",
        symbol="USDC",
        explorer_url="https://www.mintscan.io/noble",
        address_prefix="noble",
        address_placeholder="noble1clpqr4nrk4khgkxj78fcwwh6dl3uw4ep88n0y4",
        lcd_endpoints=(
            "https://noble-lcd.publicnode.com",
            "https://rest.cosmos.directory/noble",
            "https://noble-api.polkachu.com",
        ),
        decimals=6,
        denom="uusdc",
    ),
)
