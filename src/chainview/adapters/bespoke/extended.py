"""Extended exchange on Starknet: account txs from Voyager, StarkScan as fallback."""

import logging
from dataclasses import dataclass, field

from chainview.adapters.base import int_cursor, page_limit, require_valid_address, tx_url
from chainview.adapters.utils.units import format_base_units
from chainview.domain.enums import Direction, PerpsTag, TxStatus
from chainview.domain.models.chain import ChainInfo
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.exceptions import ExternalServiceError
from chainview.infra.blockchain.starknet.indexer_client import StarkscanClient, VoyagerClient
from chainview.infra.blockchain.starknet.models import StarkscanTx, VoyagerTx
from chainview.infra.http.relay_client import RelayClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
FEE_DECIMALS = 18
FEE_ASSET = "ETH"

EXTENDED_INFO = ChainInfo(
    id="extended",
    name="Extended (Starknet)",
    symbol="USDC",
    explorer_url="https://voyager.online",
    address_pattern=r"^0x[a-fA-F0-9]{1,64}$",
    address_placeholder="0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7",
)

# Checked in order against the lowercased entry-point selector
SELECTOR_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("transfer",), "transfer"),
    (("approve",), "approve"),
    (("swap",), "swap"),
    (("deposit",), "deposit"),
    (("withdraw",), "withdraw"),
    (("open_position", "create_order"), "open_position"),
    (("close_position", "cancel_order"), "close_position"),
    (("liquidate",), "liquidation"),
    (("settle", "funding"), "funding_payment"),
)

TX_KIND_TYPES = {"deploy": "deploy", "declare": "declare"}

TYPE_TAGS = {
    "open_position": PerpsTag.OPEN_POSITION,
    "deposit": PerpsTag.OPEN_POSITION,
    "close_position": PerpsTag.CLOSE_POSITION,
    "withdraw": PerpsTag.CLOSE_POSITION,
    "funding_payment": PerpsTag.FUNDING_PAYMENT,
    "liquidation": PerpsTag.FUNDING_PAYMENT,
}


def classify_starknet(tx_kind: str | None, selector: str | None) -> str:
    lowered = (selector or "").lower()
    for keywords, tx_type in SELECTOR_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return tx_type
    return TX_KIND_TYPES.get((tx_kind or "").lower(), "contract")


def starknet_status(status: str) -> TxStatus:
    if status in ("ACCEPTED_ON_L2", "ACCEPTED_ON_L1"):
        return TxStatus.SUCCESS
    if status == "PENDING":
        return TxStatus.PENDING
    return TxStatus.FAILED


@dataclass(frozen=True)
class ExtendedAdapter:
    info: ChainInfo
    voyager: VoyagerClient = field(repr=False)
    starkscan: StarkscanClient = field(repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.info.explorer_url, tx_hash)

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        page = int_cursor(options, 1)
        limit = page_limit(options, DEFAULT_LIMIT)

        try:
            txs = await self.voyager.get_txns(address, page, limit)
            records = [self._from_voyager(tx, raw, address) for tx, raw in txs]
        except ExternalServiceError as exc:
            logger.warning("Voyager failed for %s (%s), trying StarkScan", address, exc)
            try:
                txs = await self.starkscan.get_transactions(address, page, limit)
            except ExternalServiceError as fallback_exc:
                raise ExternalServiceError(
                    f"Starknet indexers unavailable: Voyager ({exc}); StarkScan ({fallback_exc})",
                    status_code=fallback_exc.status_code,
                ) from fallback_exc
            records = [self._from_starkscan(tx, raw, address) for tx, raw in txs]

        has_more = len(records) >= limit
        logger.info("Extended: %d txs for %s on page %d (more=%s)", len(records), address, page, has_more)
        return FetchResult(records=records, next_cursor=str(page + 1) if has_more else None, has_more=has_more)

    def _record(self, tx_type: str, **fields) -> CanonicalTransaction:
        tag = TYPE_TAGS.get(tx_type)
        settles = tag in (PerpsTag.CLOSE_POSITION, PerpsTag.FUNDING_PAYMENT)
        return CanonicalTransaction(
            chain_id=self.info.id,
            type=tx_type,
            asset=self.info.symbol,
            amount="0",
            fee_asset=FEE_ASSET,
            tag=tag,
            payment_token=self.info.symbol if settles else None,
            **fields,
        )

    def _from_voyager(self, tx: VoyagerTx, raw: dict, address: str) -> CanonicalTransaction:
        contract = tx.contract_address or ""
        # Calldata is not decoded, so only the account's own invokes are attributable
        direction = Direction.OUT if contract.lower() == address.lower() else Direction.UNKNOWN
        return self._record(
            classify_starknet(tx.type, tx.entry_point_selector),
            address=address,
            timestamp=tx.timestamp,
            hash=tx.hash,
            direction=direction,
            counterparty=contract,
            fee=format_base_units(tx.actual_fee, FEE_DECIMALS),
            status=starknet_status(tx.status),
            block="" if tx.block_number is None else str(tx.block_number),
            explorer_url=self.get_explorer_url(tx.hash),
            raw_details=raw,
        )

    def _from_starkscan(self, tx: StarkscanTx, raw: dict, address: str) -> CanonicalTransaction:
        if "ACCEPTED" in tx.transaction_status:
            status = TxStatus.SUCCESS
        else:
            status = starknet_status(tx.transaction_status)
        return self._record(
            "contract",
            address=address,
            timestamp=tx.timestamp,
            hash=tx.transaction_hash,
            direction=Direction.UNKNOWN,
            counterparty=tx.contract_address or "",
            fee=format_base_units(tx.actual_fee, FEE_DECIMALS),
            status=status,
            block="" if tx.block_number is None else str(tx.block_number),
            explorer_url=self.get_explorer_url(tx.transaction_hash),
            raw_details=raw,
        )


def make_extended_adapter(relay: RelayClient) -> ExtendedAdapter:
    return ExtendedAdapter(info=EXTENDED_INFO, voyager=VoyagerClient(relay), starkscan=StarkscanClient(relay))
