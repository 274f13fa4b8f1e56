"""Hyperliquid ``/info`` endpoint: time-windowed fills and funding history."""

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from chainview.exceptions import UpstreamError
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json
from chainview.infra.http.retry import rate_limit_retrying
from chainview.infra.perps.models import HyperliquidFill, HyperliquidFunding

logger = logging.getLogger(__name__)

HYPERLIQUID_INFO_URL = "https://api.hyperliquid.xyz/info"
HYPERLIQUID_PAGE_SIZE = 2000

_fills = TypeAdapter(list[HyperliquidFill])
_funding = TypeAdapter(list[HyperliquidFunding])


class HyperliquidClient:
    def __init__(self, http_client: RateLimitedClient, url: str = HYPERLIQUID_INFO_URL, retries: int = 3) -> None:
        self._http = http_client
        self._url = url
        self._retries = retries

    async def _info(self, body: dict[str, Any], source: str) -> Any:
        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.post(self._url, json=body)
                data = decode_json(resp, source)
        if not isinstance(data, list):
            raise UpstreamError(f"{source} API returned an unexpected payload")
        return data

    async def get_fills(self, user: str, end_time: int) -> list[tuple[HyperliquidFill, dict[str, Any]]]:
        """Fills with ``time <= end_time`` (unix millis), newest first, at most one page."""
        body = {"type": "userFillsByTime", "user": user, "startTime": 0, "endTime": end_time, "aggregateByTime": False}
        data = await self._info(body, "Hyperliquid (fills)")
        try:
            fills = _fills.validate_python(data)
        except ValidationError as exc:
            raise UpstreamError(f"Hyperliquid (fills) API returned a malformed payload: {exc.error_count()} field error(s)") from exc
        return list(zip(fills, data))

    async def get_funding(self, user: str, end_time: int) -> list[tuple[HyperliquidFunding, dict[str, Any]]]:
        body = {"type": "userFunding", "user": user, "startTime": 0, "endTime": end_time}
        data = await self._info(body, "Hyperliquid (funding)")
        try:
            entries = _funding.validate_python(data)
        except ValidationError as exc:
            raise UpstreamError(f"Hyperliquid (funding) API returned a malformed payload: {exc.error_count()} field error(s)") from exc
        return list(zip(entries, data))
