from unittest.mock import AsyncMock

import httpx
import pytest

from chainview.adapters.bespoke.extended import EXTENDED_INFO, classify_starknet, make_extended_adapter
from chainview.domain.enums import Direction, PerpsTag, TxStatus
from chainview.exceptions import ExternalServiceError

ADDR = EXTENDED_INFO.address_placeholder


def _json(url: str, data: dict, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=data, request=httpx.Request("GET", url))


VOYAGER_TX = {
    "hash": "0xv1",
    "block_number": 900000,
    "timestamp": 1700000000,
    "type": "INVOKE",
    "status": "ACCEPTED_ON_L2",
    "contract_address": ADDR,
    "entry_point_selector": "withdraw",
    "actual_fee": "1000000000000000",
}
STARKSCAN_TX = {
    "transaction_hash": "0xs1",
    "timestamp": 1700000000,
    "block_number": 900001,
    "transaction_status": "ACCEPTED_ON_L1",
    "contract_address": ADDR,
    "actual_fee": "0",
}


def _relay(voyager_status: int = 200, starkscan_status: int = 200) -> AsyncMock:
    async def fake_get(url, params=None):
        if "voyager" in url:
            return _json(url, {"items": [VOYAGER_TX]}, voyager_status)
        return _json(url, {"data": [STARKSCAN_TX]}, starkscan_status)

    relay = AsyncMock()
    relay.get.side_effect = fake_get
    return relay


class TestExtendedAdapter:
    async def test_voyager_records(self):
        adapter = make_extended_adapter(_relay())

        result = await adapter.fetch_transactions(ADDR)

        tx = result.records[0]
        assert tx.type == "withdraw"
        assert tx.tag == PerpsTag.CLOSE_POSITION
        assert tx.payment_token == "USDC"
        assert tx.direction == Direction.OUT
        assert tx.fee == "0.001"
        assert tx.fee_asset == "ETH"
        assert tx.status == TxStatus.SUCCESS
        assert result.has_more is False

    async def test_falls_back_to_starkscan(self):
        adapter = make_extended_adapter(_relay(voyager_status=503))

        result = await adapter.fetch_transactions(ADDR)

        tx = result.records[0]
        assert tx.hash == "0xs1"
        assert tx.type == "contract"
        assert tx.direction == Direction.UNKNOWN
        assert tx.status == TxStatus.SUCCESS

    async def test_both_indexers_down(self):
        adapter = make_extended_adapter(_relay(voyager_status=503, starkscan_status=500))

        with pytest.raises(ExternalServiceError, match="Starknet indexers unavailable"):
            await adapter.fetch_transactions(ADDR)


@pytest.mark.parametrize(
    "kind,selector,expected",
    [
        ("INVOKE", "transfer", "transfer"),
        ("INVOKE", "create_order", "open_position"),
        ("INVOKE", "settle_funding", "funding_payment"),
        ("DEPLOY_ACCOUNT", None, "contract"),
        ("DECLARE", None, "declare"),
    ],
)
def test_classify_starknet(kind, selector, expected):
    assert classify_starknet(kind, selector) == expected
