from unittest.mock import AsyncMock

import httpx
import pytest

from chainview.adapters.perps.hyperliquid import make_hyperliquid_adapter
from chainview.domain.enums import Direction, PerpsTag
from chainview.exceptions import DataIntegrityError

ADDR = "0x" + "d" * 40

OPEN_FILL = {
    "coin": "BTC", "px": "42000.0", "sz": "0.1", "side": "B", "time": 1700000000000,
    "dir": "Open Long", "closedPnl": "0.0", "fee": "1.5", "feeToken": "USDC", "tid": 1, "oid": 9, "hash": "0xopen",
}
CLOSE_FILL = {
    "coin": "BTC", "px": "43000.0", "sz": "0.1", "side": "A", "time": 1700000100000,
    "dir": "Close Long", "closedPnl": "125.5", "fee": "1.6", "feeToken": "USDC", "tid": 2, "oid": 10, "hash": "0xclose",
}
FUNDING = {
    "time": 1700000200000,
    "hash": "0x0000000000000000000000000000000000000000000000000000000000000000",
    "delta": {"type": "funding", "coin": "BTC", "usdc": "-0.75", "szi": "0.1", "fundingRate": "0.0001"},
}


def _http(fills: list[dict], funding: list[dict]) -> AsyncMock:
    async def fake_post(url, json=None, headers=None):
        data = fills if json["type"] == "userFillsByTime" else funding
        return httpx.Response(200, json=data, request=httpx.Request("POST", url))

    http = AsyncMock()
    http.post.side_effect = fake_post
    return http


class TestHyperliquidAdapter:
    async def test_fills_and_funding(self):
        adapter = make_hyperliquid_adapter(_http([CLOSE_FILL, OPEN_FILL], [FUNDING]), retries=1)

        result = await adapter.fetch_transactions(ADDR)

        funding, close, opened = result.records
        assert result.has_more is False
        assert result.total_count == 3

        assert opened.tag == PerpsTag.OPEN_POSITION
        assert opened.pnl == "0"
        assert opened.hash == "0xopen-1"
        assert opened.amount == "0.1"
        assert opened.payment_token is None

        assert close.tag == PerpsTag.CLOSE_POSITION
        assert close.pnl == "125.5"
        assert close.direction == Direction.IN
        assert close.payment_token == "USDC"
        assert close.explorer_url == "https://app.hyperliquid.xyz/explorer/tx/0xclose"

        assert funding.tag == PerpsTag.FUNDING_PAYMENT
        assert funding.pnl == "-0.75"
        assert funding.amount == "0.75"
        assert funding.direction == Direction.OUT
        assert funding.hash.endswith("-funding-BTC-1700000200000")

    async def test_request_bodies(self):
        http = _http([], [])
        adapter = make_hyperliquid_adapter(http, retries=1)

        await adapter.fetch_transactions(ADDR)

        bodies = [call.kwargs["json"] for call in http.post.call_args_list]
        assert {body["type"] for body in bodies} == {"userFillsByTime", "userFunding"}
        assert all(body["user"] == ADDR for body in bodies)

    async def test_unclassifiable_fill_raises(self):
        flip = dict(OPEN_FILL, dir="Long > Short", tid=3)
        del flip["closedPnl"]
        adapter = make_hyperliquid_adapter(_http([flip], []), retries=1)

        with pytest.raises(DataIntegrityError):
            await adapter.fetch_transactions(ADDR)

    async def test_flip_with_pnl_is_close(self):
        flip = dict(OPEN_FILL, dir="Long > Short", closedPnl="-3", tid=4)
        adapter = make_hyperliquid_adapter(_http([flip], []), retries=1)

        record = (await adapter.fetch_transactions(ADDR)).records[0]

        assert record.tag == PerpsTag.CLOSE_POSITION
        assert record.direction == Direction.OUT
