from unittest.mock import AsyncMock

import httpx
import pytest

from chainview.adapters.bespoke.bittensor import BITTENSOR_INFO, make_bittensor_adapter
from chainview.domain.enums import Direction

ADDR = BITTENSOR_INFO.address_placeholder
OTHER = "5" + "G" * 47


def _page(transfers: list[dict], next_page: int | None) -> httpx.Response:
    return httpx.Response(
        200,
        json={"pagination": {"current_page": 1, "total_items": 7, "next_page": next_page}, "data": transfers},
        request=httpx.Request("GET", "https://api.taostats.io"),
    )


TRANSFER = {
    "id": "transfer-1",
    "transaction_hash": "0xt1",
    "extrinsic_id": "4000000-0005",
    "block_number": 4000000,
    "timestamp": "2024-01-01T00:00:00Z",
    "from": {"ss58": OTHER, "hex": "0x00"},
    "to": {"ss58": ADDR, "hex": "0x01"},
    "amount": "1500000000",
    "fee": "125000",
}


@pytest.fixture()
def mock_http():
    return AsyncMock()


class TestBittensorAdapter:
    async def test_normalizes_transfer(self, mock_http):
        mock_http.get.return_value = _page([TRANSFER], next_page=2)
        adapter = make_bittensor_adapter(mock_http, api_key="tao-key", retries=1)

        result = await adapter.fetch_transactions(ADDR)

        tx = result.records[0]
        assert tx.hash == "0xt1"
        assert tx.direction == Direction.IN
        assert tx.amount == "1.5"
        assert tx.fee == "0.000125"
        assert tx.asset == "TAO"
        assert tx.explorer_url == "https://taostats.io/extrinsic/4000000-0005"
        assert result.has_more is True
        assert result.next_cursor == "2"
        assert result.total_count == 7

        call = mock_http.get.call_args
        assert call.kwargs["headers"]["Authorization"] == "tao-key"
        assert call.kwargs["params"] == {"coldkey": ADDR, "limit": 100, "page": 1}

    async def test_last_page(self, mock_http):
        mock_http.get.return_value = _page([], next_page=None)
        adapter = make_bittensor_adapter(mock_http, retries=1)

        result = await adapter.fetch_transactions(ADDR)

        assert result.has_more is False
        assert "Authorization" not in mock_http.get.call_args.kwargs["headers"]

    def test_address_format(self, mock_http):
        adapter = make_bittensor_adapter(mock_http)
        assert adapter.validate_address(ADDR)
        assert not adapter.validate_address("1" + "G" * 47)
