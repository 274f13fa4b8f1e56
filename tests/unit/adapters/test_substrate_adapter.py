from unittest.mock import AsyncMock

import httpx
import pytest

from chainview.adapters.substrate.factory import SUBSTRATE_CHAIN_CONFIGS, make_substrate_adapter
from chainview.domain.enums import Direction, TxStatus
from chainview.domain.models.transaction import FetchOptions
from chainview.exceptions import UpstreamError

POLKADOT = next(c for c in SUBSTRATE_CHAIN_CONFIGS if c.id == "polkadot")
ADDR = POLKADOT.address_placeholder
OTHER = "1" + "B" * 46


def _response(data: dict) -> httpx.Response:
    return httpx.Response(200, json=data, request=httpx.Request("POST", POLKADOT.subscan_base))


def _transfer(tx_hash: str, **overrides) -> dict:
    transfer = {
        "hash": tx_hash,
        "block_num": 20000000,
        "block_timestamp": 1700000000,
        "from": OTHER,
        "to": ADDR,
        "amount": "12.5",
        "fee": "160000000",
        "success": True,
        "asset_symbol": "DOT",
        "module": "balances",
        "event_idx": 3,
    }
    transfer.update(overrides)
    return transfer


def _page(transfers: list[dict], count: int) -> httpx.Response:
    return _response({"code": 0, "message": "Success", "data": {"count": count, "transfers": transfers}})


@pytest.fixture()
def mock_http():
    return AsyncMock()


class TestSubstrateAdapter:
    async def test_normalizes_transfer(self, mock_http):
        mock_http.post.return_value = _page([_transfer("0xaa")], 1)
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        result = await adapter.fetch_transactions(ADDR)

        tx = result.records[0]
        assert tx.direction == Direction.IN
        assert tx.counterparty == OTHER
        assert tx.amount == "12.5"
        assert tx.fee == "0.016"
        assert tx.fee_asset == "DOT"
        assert tx.status == TxStatus.SUCCESS
        assert tx.notes == "balances"
        assert tx.explorer_url == "https://polkadot.subscan.io/extrinsic/0xaa"
        assert result.total_count == 1
        assert result.has_more is False

    async def test_amount_v2_is_base_units(self, mock_http):
        mock_http.post.return_value = _page([_transfer("0xaa", amount="1", amount_v2="25000000000")], 1)
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        tx = (await adapter.fetch_transactions(ADDR)).records[0]

        assert tx.amount == "2.5"

    async def test_duplicate_hash_in_batch_gets_composite(self, mock_http):
        mock_http.post.return_value = _page([
            _transfer("0xbatch", event_idx=1),
            _transfer("0xbatch", event_idx=2),
        ], 2)
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        records = (await adapter.fetch_transactions(ADDR)).records

        assert [r.hash for r in records] == ["0xbatch-1", "0xbatch-2"]
        assert records[1].explorer_url.endswith("/extrinsic/0xbatch")

    async def test_batch_split_across_pages_keeps_distinct_ids(self, mock_http):
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        mock_http.post.return_value = _page([_transfer("0xbatch", event_idx=4)], 2)
        first = await adapter.fetch_transactions(ADDR, FetchOptions(limit=1))
        mock_http.post.return_value = _page([_transfer("0xbatch", event_idx=5)], 2)
        second = await adapter.fetch_transactions(ADDR, FetchOptions(cursor=first.next_cursor, limit=1))

        assert first.records[0].hash == "0xbatch-4"
        assert second.records[0].hash == "0xbatch-5"

    async def test_missing_event_idx_uses_bare_hash_then_position(self, mock_http):
        mock_http.post.return_value = _page([
            _transfer("0xbatch", event_idx=None),
            _transfer("0xbatch", event_idx=None),
        ], 2)
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        records = (await adapter.fetch_transactions(ADDR)).records

        assert [r.hash for r in records] == ["0xbatch", "0xbatch-1"]

    async def test_paging_from_total_count(self, mock_http):
        mock_http.post.return_value = _page([_transfer(f"0x{i}") for i in range(10)], 25)
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        first = await adapter.fetch_transactions(ADDR, FetchOptions(limit=10))
        assert first.has_more is True
        assert first.next_cursor == "1"

        last = await adapter.fetch_transactions(ADDR, FetchOptions(cursor="2", limit=10))
        assert last.has_more is False
        assert mock_http.post.call_args.kwargs["json"]["page"] == 2

    async def test_failed_extrinsic(self, mock_http):
        mock_http.post.return_value = _page([_transfer("0xaa", success=False, **{"from": ADDR, "to": OTHER})], 1)
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        tx = (await adapter.fetch_transactions(ADDR)).records[0]

        assert tx.status == TxStatus.FAILED
        assert tx.direction == Direction.OUT

    async def test_subscan_error_code_raises(self, mock_http):
        mock_http.post.return_value = _response({"code": 400, "message": "Invalid Account Address", "data": None})
        adapter = make_substrate_adapter(POLKADOT, mock_http, retries=1)

        with pytest.raises(UpstreamError, match="Invalid Account Address"):
            await adapter.fetch_transactions(ADDR)


def test_placeholders_validate():
    for config in SUBSTRATE_CHAIN_CONFIGS:
        adapter = make_substrate_adapter(config, AsyncMock())
        assert adapter.validate_address(config.address_placeholder), config.id
