"""dYdX v4 indexer: fills and funding payments of subaccount 0."""

import logging
from typing import Any

from chainview.exceptions import ExternalServiceError
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying
from chainview.infra.perps.models import DydxFill, DydxFillsPage, DydxFundingPage, DydxFundingPayment

logger = logging.getLogger(__name__)

DYDX_INDEXER_URL = "https://indexer.dydx.trade/v4"
DYDX_PAGE_SIZE = 100


class DydxIndexerClient:
    def __init__(self, http_client: RateLimitedClient, base_url: str = DYDX_INDEXER_URL, retries: int = 3) -> None:
        self._http = http_client
        self._base = base_url.rstrip("/")
        self._retries = retries

    def _params(self, address: str, bound_key: str, bound: str | None) -> dict[str, str]:
        params = {"address": address, "subaccountNumber": "0", "limit": str(DYDX_PAGE_SIZE)}
        if bound:
            params[bound_key] = bound
        return params

    async def _get_json(self, url: str, params: dict[str, str], source: str) -> Any:
        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.get(url, params=params)
                data = decode_json(resp, source)
        return data

    async def get_fills(self, address: str, created_before_or_at: str | None = None) -> list[tuple[DydxFill, dict[str, Any]]]:
        params = self._params(address, "createdBeforeOrAt", created_before_or_at)
        data = await self._get_json(f"{self._base}/fills", params, "dYdX Indexer (fills)")
        page = parse_payload(DydxFillsPage, data, "dYdX Indexer (fills)")
        return list(zip(page.fills, data.get("fills") or []))

    async def get_funding(
        self, address: str, effective_before_or_at: str | None = None
    ) -> list[tuple[DydxFundingPayment, dict[str, Any]]]:
        """Funding history; the older ``fundingPayments`` route is tried when ``historicalFunding`` fails."""
        params = self._params(address, "effectiveBeforeOrAt", effective_before_or_at)
        source = "dYdX Indexer (funding)"
        try:
            data = await self._get_json(f"{self._base}/historicalFunding/{address}", params, source)
        except ExternalServiceError as exc:
            logger.info("%s: historicalFunding unavailable (%s), falling back to fundingPayments", source, exc)
            data = await self._get_json(f"{self._base}/fundingPayments", params, source)
        page = parse_payload(DydxFundingPage, data, source)
        return list(zip(page.funding_payments, data.get("fundingPayments") or []))
