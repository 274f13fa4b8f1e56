"""Cosmos LCD tx-search client with ordered endpoint failover, routed through the CORS relay."""

import logging
from typing import Any

from chainview.exceptions import ChainViewError, ExternalServiceError, UpstreamError
from chainview.infra.blockchain.cosmos.models import TxResponse, TxSearchPage
from chainview.infra.http.relay_client import RelayClient
from chainview.infra.http.responses import decode_json, parse_payload

logger = logging.getLogger(__name__)

SENDER_EVENT = "message.sender"
RECIPIENT_EVENT = "transfer.recipient"


class CosmosLcdClient:
    def __init__(self, endpoints: tuple[str, ...], relay: RelayClient, source: str = "Cosmos") -> None:
        if not endpoints:
            raise ValueError(f"{source}: at least one LCD endpoint is required")
        self._endpoints = endpoints
        self._relay = relay
        self._source = source

    async def search_txs(
        self, event_key: str, address: str, limit: int, offset: int
    ) -> list[tuple[TxResponse, dict[str, Any]]]:
        """Query txs matching ``<event_key>='<address>'``, newest first.

        Endpoints are tried in configured order; the first successful answer wins.
        Each endpoint is attempted once.
        """
        params = {
            "events": f"{event_key}='{address}'",
            "pagination.limit": str(limit),
            "pagination.offset": str(offset),
            "order_by": "ORDER_BY_DESC",
        }
        last_error: ChainViewError | None = None

        for base_url in self._endpoints:
            url = f"{base_url.rstrip('/')}/cosmos/tx/v1beta1/txs"
            try:
                resp = await self._relay.get(url, params=params)
                data = decode_json(resp, f"{self._source} LCD")
                return self._unwrap(data)
            except ChainViewError as exc:
                last_error = exc
                logger.warning("%s LCD endpoint %s failed: %s", self._source, base_url, exc)

        raise ExternalServiceError(f"All {self._source} LCD endpoints failed: {last_error}") from last_error

    def _unwrap(self, data: Any) -> list[tuple[TxResponse, dict[str, Any]]]:
        # LCD error bodies look like {"code": 3, "message": "...", "details": []}
        if isinstance(data, dict) and data.get("code") and "tx_responses" not in data:
            raise UpstreamError(f"{self._source} LCD error: {data.get('message') or data['code']}")

        page = parse_payload(TxSearchPage, data, f"{self._source} LCD")
        raw = data.get("tx_responses") or []
        return list(zip(page.tx_responses, raw))
