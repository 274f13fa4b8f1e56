"""Config-driven EVM adapters over Blockscout v2 or Etherscan-style explorers."""

import logging
from dataclasses import dataclass, field

from chainview.adapters.base import int_cursor, page_limit, require_valid_address, tx_url
from chainview.adapters.evm.methods import classify_blockscout, classify_etherscan
from chainview.adapters.utils.direction import resolve_direction
from chainview.adapters.utils.units import format_base_units, gas_fee_wei
from chainview.domain.enums import Direction, ExplorerApiType, TxStatus
from chainview.domain.models.chain import EVM_ADDRESS_PATTERN, ChainInfo, EvmChainConfig
from chainview.domain.models.transaction import CanonicalTransaction, FetchOptions, FetchResult
from chainview.infra.blockchain.evm.blockscout_client import BlockscoutClient, encode_page_params
from chainview.infra.blockchain.evm.etherscan_client import EtherscanClient
from chainview.infra.blockchain.evm.models import BlockscoutTx, EtherscanTx
from chainview.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


def _blockscout_status(status: str | None) -> TxStatus:
    if status is None:
        return TxStatus.PENDING
    return TxStatus.SUCCESS if status == "ok" else TxStatus.FAILED


@dataclass(frozen=True)
class EvmAdapter:
    config: EvmChainConfig
    info: ChainInfo
    blockscout: BlockscoutClient | None = field(default=None, repr=False)
    etherscan: EtherscanClient | None = field(default=None, repr=False)

    def validate_address(self, address: str) -> bool:
        return self.info.matches(address)

    def get_explorer_url(self, tx_hash: str) -> str:
        return tx_url(self.config.explorer_url, tx_hash)

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult:
        require_valid_address(self.info, address)
        if self.config.api_type == ExplorerApiType.BLOCKSCOUT:
            return await self._fetch_blockscout(address, options)
        return await self._fetch_etherscan(address, options)

    async def _fetch_blockscout(self, address: str, options: FetchOptions | None) -> FetchResult:
        assert self.blockscout is not None
        cursor = options.cursor if options else None
        page, raw_items = await self.blockscout.get_transactions(address, cursor)

        records = [
            self._from_blockscout(tx, raw, address)
            for tx, raw in zip(page.items, raw_items)
        ]
        next_cursor = encode_page_params(page.next_page_params) if page.next_page_params else None
        logger.info("%s: %d txs for %s (more=%s)", self.config.name, len(records), address, next_cursor is not None)
        return FetchResult(records=records, next_cursor=next_cursor, has_more=next_cursor is not None)

    async def _fetch_etherscan(self, address: str, options: FetchOptions | None) -> FetchResult:
        assert self.etherscan is not None
        page = int_cursor(options, 1)
        limit = page_limit(options, DEFAULT_LIMIT)
        txs = await self.etherscan.get_transactions(address, page=page, offset=limit)

        records = [self._from_etherscan(tx, raw, address) for tx, raw in txs]
        # The API reports no total; a full page is taken to mean another may follow
        has_more = len(txs) == limit
        logger.info("%s: %d txs for %s on page %d (more=%s)", self.config.name, len(records), address, page, has_more)
        return FetchResult(records=records, next_cursor=str(page + 1) if has_more else None, has_more=has_more)

    def _from_blockscout(self, tx: BlockscoutTx, raw: dict, address: str) -> CanonicalTransaction:
        sender = tx.from_.hash.lower() if tx.from_ else ""
        recipient = tx.to.hash.lower() if tx.to else ""
        direction = resolve_direction(sender, recipient, address)
        if tx.fee is not None:
            fee_wei = tx.fee.value
        else:
            fee_wei = gas_fee_wei(tx.gas_used, tx.gas_price)

        return CanonicalTransaction(
            chain_id=self.config.id,
            address=address,
            timestamp=tx.timestamp,
            hash=tx.hash,
            type=classify_blockscout(tx),
            direction=direction,
            counterparty=sender if direction == Direction.IN else recipient,
            asset=self.config.symbol,
            amount=format_base_units(tx.value, self.config.decimals),
            fee=format_base_units(fee_wei, self.config.decimals),
            fee_asset=self.config.symbol,
            status=_blockscout_status(tx.status),
            block="" if tx.block_number is None else str(tx.block_number),
            explorer_url=self.get_explorer_url(tx.hash),
            notes=tx.method or "",
            raw_details=raw,
        )

    def _from_etherscan(self, tx: EtherscanTx, raw: dict, address: str) -> CanonicalTransaction:
        sender = tx.from_.lower()
        recipient = (tx.to or "").lower()
        direction = resolve_direction(sender, recipient, address)
        fee_wei = gas_fee_wei(tx.gas_used, tx.gas_price)

        return CanonicalTransaction(
            chain_id=self.config.id,
            address=address,
            timestamp=tx.time_stamp,
            hash=tx.hash,
            type=classify_etherscan(tx),
            direction=direction,
            counterparty=sender if direction == Direction.IN else recipient,
            asset=self.config.symbol,
            amount=format_base_units(tx.value, self.config.decimals),
            fee=format_base_units(fee_wei, self.config.decimals),
            fee_asset=self.config.symbol,
            status=TxStatus.SUCCESS if tx.is_error == "0" else TxStatus.FAILED,
            block=tx.block_number,
            explorer_url=self.get_explorer_url(tx.hash),
            notes=tx.function_name,
            raw_details=raw,
        )


def make_evm_adapter(config: EvmChainConfig, http_client: RateLimitedClient, retries: int = 3) -> EvmAdapter:
    info = ChainInfo(
        id=config.id,
        name=config.name,
        symbol=config.symbol,
        explorer_url=config.explorer_url,
        address_pattern=EVM_ADDRESS_PATTERN,
        address_placeholder=config.address_placeholder,
    )
    if config.api_type == ExplorerApiType.BLOCKSCOUT:
        client = BlockscoutClient(config.api_base, http_client, source=config.name, retries=retries)
        return EvmAdapter(config=config, info=info, blockscout=client)
    client = EtherscanClient(config.api_base, http_client, api_key=config.api_key, source=config.name, retries=retries)
    return EvmAdapter(config=config, info=info, etherscan=client)


EVM_CHAIN_CONFIGS: tuple[EvmChainConfig, ...] = (
    EvmChainConfig(
        id="ethereum",
        name="Ethereum",
        symbol="ETH",
        explorer_url="https://etherscan.io",
        api_base="https://eth.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045",
    ),
    EvmChainConfig(
        id="arbitrum",
        name="Arbitrum",
        symbol="ETH",
        explorer_url="https://arbiscan.io",
        api_base="https://arbitrum.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x912CE59144191C1204E64559FE8253a0e49E6548",
    ),
    EvmChainConfig(
        id="optimism",
        name="Optimism",
        symbol="ETH",
        explorer_url="https://optimistic.etherscan.io",
        api_base="https://optimism.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x4200000000000000000000000000000000000042",
    ),
    EvmChainConfig(
        id="base",
        name="Base",
        symbol="ETH",
        explorer_url="https://basescan.org",
        api_base="https://base.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    ),
    EvmChainConfig(
        id="polygon",
        name="Polygon PoS",
        symbol="POL",
        explorer_url="https://polygonscan.com",
        api_base="https://polygon.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
    ),
    EvmChainConfig(
        id="zksync",
        name="zkSync Era",
        symbol="ETH",
        explorer_url="https://explorer.zksync.io",
        api_base="https://zksync.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x5A7d6b2F92C77FAD6CCaBd7EE0624E64907Eaf3E",
    ),
    EvmChainConfig(
        id="immutable",
        name="Immutable zkEVM",
        symbol="IMX",
        explorer_url="https://explorer.immutable.com",
        api_base="https://explorer.immutable.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x52A6c53869Ce09a731CD772f245b97A4401d3348",
    ),
    EvmChainConfig(
        id="oasys",
        name="Oasys",
        symbol="OAS",
        explorer_url="https://explorer.oasys.games",
        api_base="https://explorer.oasys.games/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0x5200000000000000000000000000000000000001",
    ),
    EvmChainConfig(
        id="beam",
        name="Beam",
        symbol="BEAM",
        explorer_url="https://subnets.avax.network/beam",
        api_base="https://api.routescan.io/v2/network/mainnet/evm/4337/etherscan/api",
        api_type=ExplorerApiType.ETHERSCAN,
        address_placeholder="0x76BF5E7d2Bcb06b1444C0a2742780051D8D0E304",
    ),
    EvmChainConfig(
        id="moonbeam",
        name="Moonbeam",
        symbol="GLMR",
        explorer_url="https://moonscan.io",
        api_base="https://moonbeam.blockscout.com/api/v2",
        api_type=ExplorerApiType.BLOCKSCOUT,
        address_placeholder="0xAcc15dC74880C9944775448304B263D191c6077F",
    ),
)
