"""Blockscout v2 REST client (address transaction listing)."""

import logging
from typing import Any
from urllib.parse import urlencode

from chainview.infra.blockchain.evm.models import BlockscoutPageParams, BlockscoutTxPage
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying

logger = logging.getLogger(__name__)


def encode_page_params(params: BlockscoutPageParams) -> str:
    """Serialize Blockscout's continuation tuple into the opaque cursor string."""
    return urlencode(
        {"block_number": params.block_number, "index": params.index, "items_count": params.items_count}
    )


class BlockscoutClient:
    def __init__(self, api_base: str, http_client: RateLimitedClient, source: str = "Blockscout", retries: int = 3) -> None:
        self._api_base = api_base.rstrip("/")
        self._http = http_client
        self._source = source
        self._retries = retries

    async def get_transactions(self, address: str, cursor: str | None = None) -> tuple[BlockscoutTxPage, list[dict[str, Any]]]:
        """Fetch one page. Returns the parsed page plus the raw item dicts (same order)."""
        url = f"{self._api_base}/addresses/{address}/transactions"
        if cursor:
            url = f"{url}?{cursor}"

        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.get(url)
                data = decode_json(resp, self._source)

        page = parse_payload(BlockscoutTxPage, data, self._source)
        raw_items = (data.get("items") or []) if isinstance(data, dict) else []
        logger.debug("%s returned %d txs for %s", self._source, len(page.items), address)
        return page, raw_items
