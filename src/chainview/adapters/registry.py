"""The one place every adapter is wired together.

Adding a chain means adding its config (factory families) or its module
(bespoke adapters) and one entry here; no other adapter changes.
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from urllib.parse import urlsplit

from chainview.adapters.base import ChainAdapter
from chainview.adapters.bespoke.bittensor import make_bittensor_adapter
from chainview.adapters.bespoke.extended import make_extended_adapter
from chainview.adapters.bespoke.ronin import make_ronin_adapter
from chainview.adapters.bespoke.variational import make_variational_adapter
from chainview.adapters.cosmos.factory import COSMOS_CHAIN_CONFIGS, cosmos_lcd_hosts, make_cosmos_adapter
from chainview.adapters.evm.factory import EVM_CHAIN_CONFIGS, make_evm_adapter
from chainview.adapters.perps.dydx import make_dydx_adapter
from chainview.adapters.perps.gmx import make_gmx_adapter
from chainview.adapters.perps.hyperliquid import make_hyperliquid_adapter
from chainview.adapters.substrate.factory import SUBSTRATE_CHAIN_CONFIGS, make_substrate_adapter
from chainview.config import Settings
from chainview.domain.enums import ExplorerApiType
from chainview.exceptions import UnknownChainError
from chainview.infra.blockchain.evm.etherscan_client import ETHERSCAN_V2_URL
from chainview.infra.blockchain.starknet.indexer_client import STARKSCAN_API_URL, VOYAGER_API_URL
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.relay_client import RelayClient

logger = logging.getLogger(__name__)

AdapterRegistry = Mapping[str, ChainAdapter]


def _register(adapters: Iterable[ChainAdapter]) -> AdapterRegistry:
    registry: dict[str, ChainAdapter] = {}
    for adapter in adapters:
        chain_id = adapter.info.id
        if chain_id in registry:
            raise ValueError(f"Duplicate chain id in adapter registry: {chain_id}")
        registry[chain_id] = adapter
    return MappingProxyType(registry)


def build_registry(http_client: RateLimitedClient, relay: RelayClient, settings: Settings) -> AdapterRegistry:
    retries = settings.rate_limit_retries

    def evm(config):
        if config.api_type == ExplorerApiType.ETHERSCAN and not config.api_key and settings.etherscan_api_key:
            config = config.model_copy(update={"api_key": settings.etherscan_api_key})
        return make_evm_adapter(config, http_client, retries=retries)

    adapters: list[ChainAdapter] = [evm(config) for config in EVM_CHAIN_CONFIGS]
    adapters += [make_cosmos_adapter(config, relay) for config in COSMOS_CHAIN_CONFIGS]
    adapters += [make_substrate_adapter(config, http_client, retries=retries) for config in SUBSTRATE_CHAIN_CONFIGS]
    adapters += [
        make_ronin_adapter(http_client, retries=retries),
        make_bittensor_adapter(http_client, api_key=settings.taostats_api_key, retries=retries),
        make_variational_adapter(
            http_client,
            relay,
            api_key=settings.arbiscan_api_key or settings.etherscan_api_key,
            retries=retries,
        ),
        make_extended_adapter(relay),
        make_hyperliquid_adapter(http_client, retries=retries),
        make_dydx_adapter(http_client, retries=retries),
        make_gmx_adapter(http_client, retries=retries),
    ]

    registry = _register(adapters)
    logger.info("Registered %d chain adapters", len(registry))
    return registry


def get_adapter(registry: AdapterRegistry, chain_id: str) -> ChainAdapter:
    try:
        return registry[chain_id]
    except KeyError:
        raise UnknownChainError(f"Unknown chain: {chain_id}") from None


def relay_allowed_hosts(extra_hosts: Iterable[str] = ()) -> frozenset[str]:
    """Hostnames the relay may forward to: every relayed upstream plus configured extras."""
    relayed = [VOYAGER_API_URL, STARKSCAN_API_URL, ETHERSCAN_V2_URL]
    hosts = cosmos_lcd_hosts() | {urlsplit(url).hostname or "" for url in relayed}
    hosts |= {host.strip().lower() for host in extra_hosts if host.strip()}
    return frozenset(hosts - {""})
