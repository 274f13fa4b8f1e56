"""Static chain metadata and per-family factory configs."""

import re

from pydantic import BaseModel

from chainview.domain.enums import ExplorerApiType

EVM_ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
SS58_ADDRESS_PATTERN = r"^[1-9A-HJ-NP-Za-km-z]{47,48}$"


class ChainInfo(BaseModel):
    id: str
    name: str
    symbol: str
    explorer_url: str
    address_pattern: str
    address_placeholder: str = ""
    is_perps: bool = False

    model_config = {"frozen": True}

    def matches(self, address: str) -> bool:
        return re.fullmatch(self.address_pattern, address) is not None


class EvmChainConfig(BaseModel):
    id: str
    name: str
    symbol: str
    explorer_url: str
    api_base: str
    api_type: ExplorerApiType
    decimals: int = 18
    api_key: str = ""
    address_placeholder: str = ""

    model_config = {"frozen": True}


class CosmosChainConfig(BaseModel):
    id: str
    name: str
    symbol: str
    explorer_url: str
    address_prefix: str
    lcd_endpoints: tuple[str, ...]
    decimals: int
    denom: str
    address_placeholder: str = ""

    model_config = {"frozen": True}


class SubstrateChainConfig(BaseModel):
    id: str
    name: str
    symbol: str
    explorer_url: str
    subscan_base: str
    decimals: int
    address_placeholder: str = ""

    model_config = {"frozen": True}


class PerpsVenueConfig(BaseModel):
    id: str
    name: str
    explorer_url: str
    address_pattern: str
    settlement_token: str
    address_placeholder: str = ""

    model_config = {"frozen": True}
