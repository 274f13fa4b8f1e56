"""Ronin explorer v2 API (address transaction listing, offset paging)."""

import logging
from typing import Any

from chainview.infra.blockchain.ronin.models import RoninTx, RoninTxPage
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying

logger = logging.getLogger(__name__)

RONIN_API_URL = "https://api.roninchain.com"


class RoninExplorerClient:
    def __init__(self, http_client: RateLimitedClient, api_base: str = RONIN_API_URL, retries: int = 3) -> None:
        self._http = http_client
        self._api_base = api_base.rstrip("/")
        self._retries = retries

    async def get_transactions(
        self, address: str, offset: int, limit: int
    ) -> tuple[list[tuple[RoninTx, dict[str, Any]]], int]:
        """One page of txs starting at ``offset`` plus the reported total."""
        url = f"{self._api_base}/ronin/explorer/v2/txs"
        params = {"address": address, "limit": limit, "from": offset}

        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.get(url, params=params, headers={"Accept": "application/json"})
                data = decode_json(resp, "Ronin")

        page = parse_payload(RoninTxPage, data, "Ronin")
        raw = ((data.get("result") or {}).get("items") or []) if isinstance(data, dict) else []
        return list(zip(page.result.items, raw)), page.result.paging.total
