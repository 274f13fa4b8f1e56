from enum import Enum


class ExplorerApiType(str, Enum):
    """Wire dialect of an EVM block explorer."""

    BLOCKSCOUT = "blockscout"
    ETHERSCAN = "etherscan"
