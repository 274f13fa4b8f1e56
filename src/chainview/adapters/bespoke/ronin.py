"""Ronin: EVM-compatible L1 with its own explorer API and ``ronin:`` address form."""

import logging
from dataclasses import dataclass, field

from chainview.adapters.base import int_cursor, page_limit, require_valid_address, tx_url
from chainview.adapters.evm.methods import classify_input
from chainview.adapters.utils.direction import resolve_direction
from chainview.adapters.utils.units import format_base_units, gas_fee_wei
from chainview.domain.enums import Direction, TxStatus
from chainview.domain.models.chain import ChainInfo
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.infra.blockchain.ronin.explorer_client import RoninExplorerClient
from chainview.infra.blockchain.ronin.models import RoninTx
from chainview.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
RON_DECIMALS = 18

RONIN_INFO = ChainInfo(
    id="ronin",
    name="Ronin",
    symbol="RON",
    explorer_url="https://app.roninchain.com",
    address_pattern=r"^(ronin:|0x)?[a-fA-F0-9]{40}$",
    address_placeholder="ronin:1a2b3c4d5e6f7890abcdef1234567890abcdef12",
)


def to_hex_address(address: str) -> str:
    """``ronin:abc...`` and bare hex both become ``0xabc...``."""
    if address.startswith("ronin:"):
        return "0x" + address[len("ronin:"):]
    if not address.startswith("0x"):
        return "0x" + address
    return address


@dataclass(frozen=True)
class RoninAdapter:
    info: ChainInfo
    client: RoninExplorerClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.info.explorer_url, tx_hash)

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        hex_address = to_hex_address(address)
        offset = int_cursor(options, 0)
        limit = page_limit(options, DEFAULT_LIMIT)

        txs, total = await self.client.get_transactions(hex_address, offset, limit)
        records = [self._normalize(tx, raw, address, hex_address.lower()) for tx, raw in txs]

        has_more = offset + len(txs) < total
        logger.info("Ronin: %d txs for %s at offset %d of %d (more=%s)", len(records), address, offset, total, has_more)
        return FetchResult(
            records=records,
            next_cursor=str(offset + len(txs)) if has_more else None,
            has_more=has_more,
            total_count=total,
        )

    def _normalize(self, tx: RoninTx, raw: dict, address: str, hex_address: str) -> CanonicalTransaction:
        sender = tx.from_.lower()
        recipient = (tx.to or "").lower()
        direction = resolve_direction(sender, recipient, hex_address)
        fee_wei = gas_fee_wei(tx.gas_used or tx.gas, tx.gas_price)

        return CanonicalTransaction(
            chain_id=self.info.id,
            address=address,
            timestamp=tx.block_time,
            hash=tx.hash,
            type=classify_input(tx.input),
            direction=direction,
            counterparty=sender if direction == Direction.IN else recipient,
            asset=self.info.symbol,
            amount=format_base_units(tx.value, RON_DECIMALS),
            fee=format_base_units(fee_wei, RON_DECIMALS),
            fee_asset=self.info.symbol,
            status=TxStatus.SUCCESS if tx.status == 1 else TxStatus.FAILED,
            block="" if tx.block_number is None else str(tx.block_number),
            explorer_url=self.get_explorer_url(tx.hash),
            raw_details=raw,
        )


def make_ronin_adapter(http_client: RateLimitedClient, retries: int = 3) -> RoninAdapter:
    return RoninAdapter(info=RONIN_INFO, client=RoninExplorerClient(http_client, retries=retries))
