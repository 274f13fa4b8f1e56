"""Adapter contract plus the free helpers concrete adapters compose.

Adapters do not share a base class: each one is any object satisfying
``ChainAdapter``. New chains are new modules registered in
``chainview.adapters.registry``; nothing else changes.
"""

from typing import Protocol, runtime_checkable

from chainview.domain.models.chain import ChainInfo
from chainview.domain.models.transaction import FetchOptions, FetchResult
from chainview.exceptions import InvalidAddressError


@runtime_checkable
class ChainAdapter(Protocol):
    info: ChainInfo

    def validate_address(self, address: str) -> bool: ...

    async def fetch_transactions(self, address: str, options: FetchOptions | None = None) -> FetchResult: ...

    def get_explorer_url(self, tx_hash: str) -> str: ...


def tx_url(explorer_url: str, tx_hash: str, path: str = "tx") -> str:
    return f"{explorer_url.rstrip('/')}/{path}/{tx_hash}"


def require_valid_address(info: ChainInfo, address: str) -> None:
    if not info.matches(address):
        raise InvalidAddressError(f"Invalid address format for {info.name}")


def page_limit(options: FetchOptions | None, default: int) -> int:
    if options is None or not options.limit or options.limit <= 0:
        return default
    return options.limit


def int_cursor(options: FetchOptions | None, default: int) -> int:
    """Numeric page/offset cursors. A cursor that is not an integer restarts from ``default``."""
    if options is None or not options.cursor:
        return default
    try:
        return int(options.cursor)
    except ValueError:
        return default
