"""Variational protocol on Arbitrum: the wallet's Arbiscan history narrowed to Variational contracts."""

import logging
from dataclasses import dataclass, field

from chainview.adapters.base import int_cursor, page_limit, require_valid_address, tx_url
from chainview.adapters.utils.direction import resolve_direction
from chainview.adapters.utils.units import format_base_units, gas_fee_wei
from chainview.domain.enums import Direction, PerpsTag, TxStatus
from chainview.domain.models.chain import EVM_ADDRESS_PATTERN, ChainInfo
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.infra.blockchain.evm.etherscan_client import CHAIN_IDS, ETHERSCAN_V2_URL, EtherscanClient
from chainview.infra.blockchain.evm.models import EtherscanTx
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.relay_client import RelayClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100

VARIATIONAL_INFO = ChainInfo(
    id="variational",
    name="Variational (Arbitrum)",
    symbol="ETH",
    explorer_url="https://arbiscan.io",
    address_pattern=EVM_ADDRESS_PATTERN,
    address_placeholder="0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0",
)

CONTRACT_NAMES = {
    "0x74bbbb0e7f0bad6938509dd4b556a39a4db1f2cd": "Variational OLP Vault",
    "0x0f820b9afc270d658a9fd7d16b1bdc45b70f074c": "Variational Settlement Pool",
}

SELECTOR_TYPES = {
    "0xa9059cbb": "token_transfer",
    "0x23b872dd": "token_transfer_from",
    "0x095ea7b3": "approve",
    "0xd0e30db0": "deposit",
    "0x2e1a7d4d": "withdraw",
    "0x3ccfd60b": "withdraw_all",
    "0x6a761202": "execute",
    "0xb6b55f25": "deposit_amount",
    "0xe8eda9df": "deposit_collateral",
    "0x69328dec": "withdraw_collateral",
}

TYPE_TAGS = {
    "open_position": PerpsTag.OPEN_POSITION,
    "deposit": PerpsTag.OPEN_POSITION,
    "deposit_collateral": PerpsTag.OPEN_POSITION,
    "close_position": PerpsTag.CLOSE_POSITION,
    "withdraw": PerpsTag.CLOSE_POSITION,
    "withdraw_collateral": PerpsTag.CLOSE_POSITION,
    "claim": PerpsTag.FUNDING_PAYMENT,
    "settlement": PerpsTag.FUNDING_PAYMENT,
}

OUTFLOW_TYPES = {"deposit", "deposit_collateral"}
INFLOW_TYPES = {"withdraw", "withdraw_collateral"}


def classify_variational(selector: str, function_name: str) -> str:
    if not selector or selector == "0x":
        return "transfer"
    if selector.lower() in SELECTOR_TYPES:
        return SELECTOR_TYPES[selector.lower()]

    name = function_name.lower()
    if "deposit" in name:
        return "deposit"
    if "withdraw" in name:
        return "withdraw"
    if "open" in name and "position" in name:
        return "open_position"
    if "close" in name and "position" in name:
        return "close_position"
    if "liquidate" in name:
        return "liquidation"
    if "settle" in name:
        return "settlement"
    if "claim" in name:
        return "claim"
    if "swap" in name:
        return "swap"
    return "contract"


def touches_variational(tx: EtherscanTx) -> bool:
    return tx.from_.lower() in CONTRACT_NAMES or (tx.to or "").lower() in CONTRACT_NAMES


@dataclass(frozen=True)
class VariationalAdapter:
    info: ChainInfo
    arbiscan: EtherscanClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.info.explorer_url, tx_hash)

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        page = int_cursor(options, 1)
        limit = page_limit(options, DEFAULT_LIMIT)

        txs = await self.arbiscan.get_transactions(address, page=page, offset=limit)
        records = [self._normalize(tx, raw, address) for tx, raw in txs if touches_variational(tx)]

        # Paging follows the unfiltered Arbiscan list, so a page may hold no Variational txs yet more may follow
        has_more = len(txs) == limit
        logger.info("Variational: %d of %d Arbiscan txs for %s on page %d (more=%s)",
                    len(records), len(txs), address, page, has_more)
        return FetchResult(records=records, next_cursor=str(page + 1) if has_more else None, has_more=has_more)

    def _normalize(self, tx: EtherscanTx, raw: dict, address: str) -> CanonicalTransaction:
        sender = tx.from_.lower()
        recipient = (tx.to or "").lower()
        tx_type = classify_variational(tx.method_id or tx.input[:10], tx.function_name)

        direction = resolve_direction(sender, recipient, address)
        if direction != Direction.SELF:
            if tx_type in OUTFLOW_TYPES:
                direction = Direction.OUT
            elif tx_type in INFLOW_TYPES:
                direction = Direction.IN

        counterparty = CONTRACT_NAMES.get(recipient) or (sender if direction == Direction.IN else recipient)
        tag = TYPE_TAGS.get(tx_type)

        return CanonicalTransaction(
            chain_id=self.info.id,
            address=address,
            timestamp=tx.time_stamp,
            hash=tx.hash,
            type=tx_type,
            direction=direction,
            counterparty=counterparty,
            asset=self.info.symbol,
            amount=format_base_units(tx.value, 18),
            fee=format_base_units(gas_fee_wei(tx.gas_used, tx.gas_price), 18),
            fee_asset=self.info.symbol,
            status=TxStatus.SUCCESS if tx.is_error == "0" else TxStatus.FAILED,
            block=tx.block_number,
            explorer_url=self.get_explorer_url(tx.hash),
            notes=tx.function_name,
            tag=tag,
            payment_token=self.info.symbol if tag in (PerpsTag.CLOSE_POSITION, PerpsTag.FUNDING_PAYMENT) else None,
            raw_details=raw,
        )


def make_variational_adapter(
    http_client: RateLimitedClient, relay: RelayClient, api_key: str = "", retries: int = 3
) -> VariationalAdapter:
    arbiscan = EtherscanClient(
        ETHERSCAN_V2_URL,
        http_client,
        api_key=api_key,
        source="Arbiscan",
        chain_id=CHAIN_IDS["arbitrum"],
        retries=retries,
        relay=relay,
    )
    return VariationalAdapter(info=VARIATIONAL_INFO, arbiscan=arbiscan)
