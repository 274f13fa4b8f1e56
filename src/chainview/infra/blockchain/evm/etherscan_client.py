"""Etherscan-style account API client (Etherscan v2, Routescan and other clones)."""

import logging
from typing import Any

from chainview.exceptions import RateLimitError, UpstreamError
from chainview.infra.blockchain.evm.models import EtherscanEnvelope, EtherscanTx
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.relay_client import RelayClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying

logger = logging.getLogger(__name__)

# Etherscan v2 uses a single base URL + chainid param
ETHERSCAN_V2_URL = "https://api.etherscan.io/v2/api"

CHAIN_IDS: dict[str, int] = {
    "ethereum": 1,
    "arbitrum": 42161,
    "optimism": 10,
    "polygon": 137,
    "base": 8453,
}

NO_TRANSACTIONS = "No transactions found"


class EtherscanClient:
    def __init__(
        self,
        api_base: str,
        http_client: RateLimitedClient,
        api_key: str = "",
        source: str = "Etherscan",
        chain_id: int | None = None,
        retries: int = 3,
        relay: RelayClient | None = None,
    ) -> None:
        self._api_base = api_base
        self._http = http_client
        self._api_key = api_key
        self._source = source
        self._chain_id = chain_id
        self._retries = retries
        self._relay = relay

    async def _call(self, params: dict[str, Any]) -> list[dict]:
        params = dict(params)
        if self._api_key:
            params["apikey"] = self._api_key
        if self._chain_id is not None:
            params["chainid"] = self._chain_id

        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                if self._relay is not None:
                    resp = await self._relay.get(self._api_base, params=params)
                else:
                    resp = await self._http.get(self._api_base, params=params)
                return self._unwrap(decode_json(resp, self._source))
        return []

    def _unwrap(self, data: Any) -> list[dict]:
        envelope = parse_payload(EtherscanEnvelope, data, self._source)
        result = envelope.result

        # "No transactions found" is valid empty result
        if envelope.message == NO_TRANSACTIONS or (envelope.status == "0" and result == []):
            return []

        if envelope.status != "1":
            error_msg = result if isinstance(result, str) and result else envelope.message
            if "rate limit" in (error_msg or "").lower():
                raise RateLimitError(f"{self._source} API rate limit exceeded. Please try again later.")
            raise UpstreamError(f"{self._source} API error: {error_msg or 'unknown error'}")

        if not isinstance(result, list):
            return []
        return result

    async def get_transactions(
        self, address: str, page: int = 1, offset: int = 100, sort: str = "desc"
    ) -> list[tuple[EtherscanTx, dict]]:
        """Fetch one page of normal transactions as (parsed, raw) pairs."""
        raw_txs = await self._call({
            "module": "account",
            "action": "txlist",
            "address": address,
            "page": page,
            "offset": offset,
            "sort": sort,
        })
        logger.debug("%s page %d returned %d txs for %s", self._source, page, len(raw_txs), address)
        return [(parse_payload(EtherscanTx, raw, self._source), raw) for raw in raw_txs]
