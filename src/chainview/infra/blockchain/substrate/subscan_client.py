"""Subscan v2 transfer-search client. Application errors arrive as HTTP 200 with a non-zero ``code``."""

import logging
from typing import Any

from chainview.exceptions import RateLimitError, UpstreamError
from chainview.infra.blockchain.substrate.models import SubscanEnvelope, SubscanTransfer
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.responses import decode_json, parse_payload
from chainview.infra.http.retry import rate_limit_retrying

logger = logging.getLogger(__name__)

SUBSCAN_RATE_LIMIT_CODE = 20008


class SubscanClient:
    def __init__(
        self, subscan_base: str, http_client: RateLimitedClient, source: str = "Subscan", retries: int = 3
    ) -> None:
        self._base = subscan_base.rstrip("/")
        self._http = http_client
        self._source = f"{source} Subscan"
        self._retries = retries

    async def get_transfers(
        self, address: str, page: int, row: int
    ) -> tuple[list[tuple[SubscanTransfer, dict[str, Any]]], int]:
        """One page of balance transfers (``page`` is zero-based) and the total transfer count."""
        url = f"{self._base}/api/v2/scan/transfers"
        body = {"address": address, "row": row, "page": page}

        async for attempt in rate_limit_retrying(self._retries):
            with attempt:
                resp = await self._http.post(url, json=body)
                data = decode_json(resp, self._source)
                envelope = parse_payload(SubscanEnvelope, data, self._source)
                if envelope.code == SUBSCAN_RATE_LIMIT_CODE:
                    raise RateLimitError(f"{self._source} API rate limit exceeded. Please try again later.")

        if envelope.code != 0:
            raise UpstreamError(envelope.message or f"{self._source} API error (code {envelope.code})")

        payload = envelope.data
        transfers = (payload.transfers or []) if payload else []
        raw = ((data.get("data") or {}).get("transfers") or [])
        logger.debug("%s returned %d transfers for %s (page %d)", self._source, len(transfers), address, page)
        return list(zip(transfers, raw)), payload.count if payload else 0
