"""Taostats transfer API for Bittensor coldkeys."""

import logging
from typing import Any

from chainview.infra.blockchain.bittensor.models import TaostatsTransfer, TaostatsTransferPage
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying

logger = logging.getLogger(__name__)

TAOSTATS_API_URL = "https://api.taostats.io"


class TaostatsClient:
    def __init__(
        self, http_client: RateLimitedClient, api_key: str = "", api_base: str = TAOSTATS_API_URL, retries: int = 3
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self._retries = retries

    async def get_transfers(
        self, coldkey: str, page: int, limit: int
    ) -> tuple[list[tuple[TaostatsTransfer, dict[str, Any]]], TaostatsTransferPage]:
        url = f"{self._api_base}/api/transfer/v1"
        params = {"coldkey": coldkey, "limit": limit, "page": page}
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = self._api_key

        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.get(url, params=params, headers=headers)
                data = decode_json(resp, "Taostats")

        page_data = parse_payload(TaostatsTransferPage, data, "Taostats")
        raw = (data.get("data") or []) if isinstance(data, dict) else []
        return list(zip(page_data.data, raw)), page_data
