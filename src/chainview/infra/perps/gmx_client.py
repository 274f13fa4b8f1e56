"""GMX synthetics (Arbitrum) Subsquid GraphQL: trade actions by account."""

import logging
from typing import Any

from chainview.exceptions import UpstreamError
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying
from chainview.infra.perps.models import GmxGraphQLResponse, GmxTradeAction

logger = logging.getLogger(__name__)

GMX_SUBSQUID_URL = "https://gmx.squids.live/gmx-synthetics-arbitrum/graphql"
GMX_PAGE_SIZE = 1000

TRADE_ACTIONS_QUERY = """
query GetTradeActions($account: String!, $skip: Int!, $limit: Int!) {
  tradeActions(
    where: { account_eq: $account }
    orderBy: transaction_timestamp_DESC
    limit: $limit
    offset: $skip
  ) {
    id
    eventName
    account
    marketAddress
    collateralTokenAddress
    sizeDeltaUsd
    basePnlUsd
    priceImpactUsd
    transaction {
      hash
      timestamp
      blockNumber
    }
  }
}
"""


class GmxSubsquidClient:
    def __init__(self, http_client: RateLimitedClient, url: str = GMX_SUBSQUID_URL, retries: int = 3) -> None:
        self._http = http_client
        self._url = url
        self._retries = retries

    async def get_trade_actions(
        self, account: str, skip: int, limit: int = GMX_PAGE_SIZE
    ) -> list[tuple[GmxTradeAction, dict[str, Any]]]:
        body = {"query": TRADE_ACTIONS_QUERY, "variables": {"account": account.lower(), "skip": skip, "limit": limit}}

        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.post(self._url, json=body)
                data = decode_json(resp, "GMX Subsquid")

        result = parse_payload(GmxGraphQLResponse, data, "GMX Subsquid")
        if result.errors:
            message = result.errors[0].get("message", "unknown error")
            raise UpstreamError(f"GMX Subsquid query failed: {message}")
        if result.data is None:
            return []
        raw = (data.get("data") or {}).get("tradeActions") or []
        return list(zip(result.data.trade_actions, raw))
