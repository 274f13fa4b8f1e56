from datetime import UTC, datetime

import pytest

from chainview.domain.enums import Direction
from chainview.domain.models.transaction import CanonicalTransaction


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def make_tx():
    """Factory for canonical records with sensible defaults."""

    def _make(**overrides) -> CanonicalTransaction:
        fields = {
            "chain_id": "ethereum",
            "address": "0x" + "a" * 40,
            "timestamp": datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
            "hash": "0x" + "1" * 64,
            "type": "transfer",
            "direction": Direction.IN,
            "counterparty": "0x" + "b" * 40,
            "asset": "ETH",
            "amount": "1",
            "fee": "0.001",
            "fee_asset": "ETH",
        }
        fields.update(overrides)
        return CanonicalTransaction(**fields)

    return _make
