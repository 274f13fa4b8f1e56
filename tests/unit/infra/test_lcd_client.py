from unittest.mock import AsyncMock

import httpx
import pytest

from chainview.exceptions import ExternalServiceError
from chainview.infra.blockchain.cosmos.lcd_client import SENDER_EVENT, CosmosLcdClient

ADDR = "osmo1" + "q" * 38
ENDPOINTS = ("https://lcd-a.example.com", "https://lcd-b.example.com")


def _response(status: int = 200, json=None) -> httpx.Response:
    request = httpx.Request("GET", "https://lcd.example.com")
    if json is None:
        return httpx.Response(status, text="bad gateway", request=request)
    return httpx.Response(status, json=json, request=request)


def _tx(txhash: str) -> dict:
    return {"txhash": txhash, "height": "10", "timestamp": "2024-01-01T00:00:00Z", "code": 0}


class TestCosmosLcdClient:
    def test_requires_endpoints(self):
        with pytest.raises(ValueError):
            CosmosLcdClient((), AsyncMock())

    async def test_query_params(self):
        relay = AsyncMock()
        relay.get.return_value = _response(json={"tx_responses": [_tx("H1")]})
        client = CosmosLcdClient(ENDPOINTS, relay, source="Osmosis")

        txs = await client.search_txs(SENDER_EVENT, ADDR, 50, 100)

        assert [tx.txhash for tx, _ in txs] == ["H1"]
        url = relay.get.call_args.args[0]
        params = relay.get.call_args.kwargs["params"]
        assert url == "https://lcd-a.example.com/cosmos/tx/v1beta1/txs"
        assert params["events"] == f"message.sender='{ADDR}'"
        assert params["pagination.limit"] == "50"
        assert params["pagination.offset"] == "100"
        assert params["order_by"] == "ORDER_BY_DESC"

    async def test_fails_over_to_next_endpoint(self):
        relay = AsyncMock()
        relay.get.side_effect = [_response(502), _response(json={"tx_responses": [_tx("H2")]})]
        client = CosmosLcdClient(ENDPOINTS, relay, source="Osmosis")

        txs = await client.search_txs(SENDER_EVENT, ADDR, 50, 0)

        assert [tx.txhash for tx, _ in txs] == ["H2"]
        assert relay.get.call_args.args[0].startswith("https://lcd-b.example.com")

    async def test_lcd_error_body_triggers_failover(self):
        relay = AsyncMock()
        relay.get.side_effect = [
            _response(json={"code": 3, "message": "query failed", "details": []}),
            _response(json={"tx_responses": []}),
        ]
        client = CosmosLcdClient(ENDPOINTS, relay)
        assert await client.search_txs(SENDER_EVENT, ADDR, 50, 0) == []
        assert relay.get.await_count == 2

    async def test_all_endpoints_fail(self):
        relay = AsyncMock()
        relay.get.return_value = _response(503)
        client = CosmosLcdClient(ENDPOINTS, relay, source="Osmosis")

        with pytest.raises(ExternalServiceError, match="All Osmosis LCD endpoints failed"):
            await client.search_txs(SENDER_EVENT, ADDR, 50, 0)
        # One attempt per endpoint, no retries within an endpoint
        assert relay.get.await_count == 2
