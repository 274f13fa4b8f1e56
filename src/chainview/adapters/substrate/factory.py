"""Config-driven Substrate adapters over Subscan's transfer search."""

import logging
from dataclasses import dataclass, field
from typing import Any

from chainview.adapters.base import int_cursor, page_limit, require_valid_address, tx_url
from chainview.adapters.utils.direction import resolve_direction
from chainview.adapters.utils.units import format_base_units, format_decimal, to_decimal
from chainview.domain.enums import Direction, TxStatus
from chainview.domain.models.chain import SS58_ADDRESS_PATTERN, ChainInfo, SubstrateChainConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.infra.blockchain.substrate.models import SubscanTransfer
from chainview.infra.blockchain.substrate.subscan_client import SubscanClient
from chainview.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


@dataclass(frozen=True)
class SubstrateAdapter:
    config: SubstrateChainConfig
    info: ChainInfo
    subscan: SubscanClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.config.explorer_url, tx_hash, path="extrinsic")

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        page = int_cursor(options, 0)
        limit = page_limit(options, DEFAULT_LIMIT)
        transfers, count = await self.subscan.get_transfers(address, page=page, row=limit)

        records = []
        seen: set[str] = set()
        for transfer, raw in transfers:
            # A batch extrinsic can emit several transfers under one hash, possibly across pages
            if transfer.event_idx is not None:
                record_hash = f"{transfer.hash}-{transfer.event_idx}"
            elif transfer.hash in seen:
                record_hash = f"{transfer.hash}-{len(records)}"
            else:
                record_hash = transfer.hash
            seen.add(record_hash)
            records.append(self._normalize(transfer, raw, address, record_hash))

        has_more = (page + 1) * limit < count
        logger.info("%s: %d transfers for %s on page %d of %d total (more=%s)",
                    self.config.name, len(records), address, page, count, has_more)
        return FetchResult(
            records=records,
            next_cursor=str(page + 1) if has_more else None,
            has_more=has_more,
            total_count=count,
        )

    def _normalize(
        self, transfer: SubscanTransfer, raw: dict[str, Any], address: str, record_hash: str
    ) -> CanonicalTransaction:
        sender = transfer.from_.lower()
        recipient = transfer.to.lower()
        direction = resolve_direction(sender, recipient, address)

        return CanonicalTransaction(
            chain_id=self.config.id,
            address=address,
            timestamp=transfer.block_timestamp,
            hash=record_hash,
            type="transfer",
            direction=direction,
            counterparty=transfer.from_ if direction == Direction.IN else transfer.to,
            asset=transfer.asset_symbol or self.config.symbol,
            amount=self._amount(transfer),
            fee=format_base_units(transfer.fee, self.config.decimals),
            fee_asset=self.config.symbol,
            status=TxStatus.SUCCESS if transfer.success else TxStatus.FAILED,
            block=str(transfer.block_num),
            explorer_url=self.get_explorer_url(transfer.hash),
            notes=transfer.module or "",
            raw_details=raw,
        )

    def _amount(self, transfer: SubscanTransfer) -> str:
        if transfer.amount_v2:
            return format_base_units(transfer.amount_v2, self.config.decimals)
        # Subscan's plain ``amount`` is sometimes already decimal-adjusted
        if "." in transfer.amount:
            value = to_decimal(transfer.amount)
            return format_decimal(value) if value is not None and value > 0 else "0"
        return format_base_units(transfer.amount, self.config.decimals)


def make_substrate_adapter(
    config: SubstrateChainConfig, http_client: RateLimitedClient, retries: int = 3
) -> SubstrateAdapter:
    info = ChainInfo(
        id=config.id,
        name=config.name,
        symbol=config.symbol,
        explorer_url=config.explorer_url,
        address_pattern=SS58_ADDRESS_PATTERN,
        address_placeholder=config.address_placeholder,
    )
    client = SubscanClient(config.subscan_base, http_client, source=config.name, retries=retries)
    return SubstrateAdapter(config=config, info=info, subscan=client)


SUBSTRATE_CHAIN_CONFIGS: tuple[SubstrateChainConfig, ...] = (
    SubstrateChainConfig(
        id="polkadot",
        name="Polkadot",
        symbol="DOT",
        explorer_url="https://polkadot.subscan.io",
        subscan_base="https://polkadot.api.subscan.io",
        address_placeholder="16ZL8yLyXv3V3L3z9ofR1ovFLziyXaN1DPq4yffMAZ9czzBD",
        decimals=10,
    ),
    SubstrateChainConfig(
        id="kusama",
        name="Kusama",
        symbol="KSM",
        explorer_url="https://kusama.subscan.io",
        subscan_base="https://kusama.api.subscan.io",
        address_placeholder="HNZata7iMYWmk5RvZRTiAsSDhV8366zq2YGb3tLH5Upf74F",
        decimals=12,
    ),
    SubstrateChainConfig(
        id="astar",
        name="Astar",
        symbol="ASTR",
        explorer_url="https://astar.subscan.io",
        subscan_base="https://astar.api.subscan.io",
        address_placeholder="ZfEuzYHyfo5TZfAFEpXtaVuY2xrmRC4vRqWBnhF1vFsKsTp",
        decimals=18,
    ),
    SubstrateChainConfig(
        id="acala",
        name="Acala",
        symbol="ACA",
        explorer_url="https://acala.subscan.io",
        subscan_base="https://acala.api.subscan.io",
        address_placeholder="23M5ttkmR6KcoUwA7NqBjLuMJFWCvobsD9Zy95MgaAECEhit",
        decimals=12,
    ),
)
