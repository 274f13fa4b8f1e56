"""Bittensor transfers from Taostats, keyed by coldkey."""

import logging
from dataclasses import dataclass, field

from chainview.adapters.base import int_cursor, page_limit, require_valid_address
from chainview.adapters.utils.direction import resolve_direction
from chainview.adapters.utils.units import format_base_units
from chainview.domain.enums import Direction
from chainview.domain.models.chain import ChainInfo
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.infra.blockchain.bittensor.models import TaostatsTransfer
from chainview.infra.blockchain.bittensor.taostats_client import TaostatsClient
from chainview.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
TAO_DECIMALS = 9

BITTENSOR_INFO = ChainInfo(
    id="bittensor",
    name="Bittensor",
    symbol="TAO",
    explorer_url="https://taostats.io",
    address_pattern=r"^5[a-zA-Z0-9]{47}$",
    address_placeholder="5FFApaS75bv5pJHfAp2FVLBj9ZaXuFDjEypsaBNc1wCfe52v",
)


@dataclass(frozen=True)
class BittensorAdapter:
    info: ChainInfo
    client: TaostatsClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        # Taostats links extrinsics by id ("<block>-<index>"), not by hash
        return f"{self.info.explorer_url}/extrinsic/{tx_hash}"

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        page = int_cursor(options, 1)
        limit = page_limit(options, DEFAULT_LIMIT)

        transfers, page_data = await self.client.get_transfers(address, page, limit)
        records = [self._normalize(transfer, raw, address) for transfer, raw in transfers]

        has_more = page_data.pagination.next_page is not None
        logger.info("Bittensor: %d transfers for %s on page %d (more=%s)", len(records), address, page, has_more)
        return FetchResult(
            records=records,
            next_cursor=str(page + 1) if has_more else None,
            has_more=has_more,
            total_count=page_data.pagination.total_items,
        )

    def _normalize(self, transfer: TaostatsTransfer, raw: dict, address: str) -> CanonicalTransaction:
        sender = transfer.from_.ss58 if transfer.from_ else ""
        recipient = transfer.to.ss58 if transfer.to else ""
        direction = resolve_direction(sender, recipient, address)
        record_hash = transfer.transaction_hash or transfer.extrinsic_id or transfer.id or ""

        return CanonicalTransaction(
            chain_id=self.info.id,
            address=address,
            timestamp=transfer.timestamp,
            hash=record_hash,
            type="transfer",
            direction=direction,
            counterparty=sender if direction == Direction.IN else recipient,
            asset=self.info.symbol,
            amount=format_base_units(transfer.amount, TAO_DECIMALS),
            fee=format_base_units(transfer.fee, TAO_DECIMALS),
            fee_asset=self.info.symbol,
            block="" if transfer.block_number is None else str(transfer.block_number),
            explorer_url=self.get_explorer_url(transfer.extrinsic_id) if transfer.extrinsic_id else "",
            raw_details=raw,
        )


def make_bittensor_adapter(http_client: RateLimitedClient, api_key: str = "", retries: int = 3) -> BittensorAdapter:
    return BittensorAdapter(info=BITTENSOR_INFO, client=TaostatsClient(http_client, api_key=api_key, retries=retries))
