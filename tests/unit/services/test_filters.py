from datetime import UTC, datetime

import pytest

from chainview.domain.enums import Direction
from chainview.services.filters import (
    DirectionFilter,
    SortOrder,
    TransactionFilters,
    apply_filters,
    sort_transactions,
    unique_assets,
    unique_types,
)


@pytest.fixture()
def records(make_tx):
    return [
        make_tx(hash="0xaa", timestamp=datetime(2024, 1, 1, tzinfo=UTC), direction=Direction.IN,
                type="transfer", asset="ETH", amount="9", fee="0.1", counterparty="0xalice"),
        make_tx(hash="0xbb", timestamp=datetime(2024, 2, 1, tzinfo=UTC), direction=Direction.OUT,
                type="swap", asset="USDC", amount="10", fee="0.02", notes="Uniswap router"),
        make_tx(hash="0xcc", timestamp=datetime(2024, 3, 1, tzinfo=UTC), direction=Direction.SELF,
                type="transfer", asset="eth", amount="0.5", fee="0.3"),
        make_tx(hash="0xdd", timestamp=datetime(2024, 3, 1, tzinfo=UTC), direction=Direction.UNKNOWN,
                type="contract", asset="ETH", amount="9", fee="0"),
    ]


def _hashes(records):
    return [r.hash for r in records]


class TestApplyFilters:
    def test_no_filters_keeps_everything(self, records):
        assert _hashes(apply_filters(records, TransactionFilters())) == ["0xaa", "0xbb", "0xcc", "0xdd"]

    def test_direction(self, records):
        assert _hashes(apply_filters(records, TransactionFilters(direction="in"))) == ["0xaa"]
        assert _hashes(apply_filters(records, TransactionFilters(direction=DirectionFilter.OUT))) == ["0xbb"]

    def test_date_range_inclusive(self, records):
        filters = TransactionFilters(start="2024-02-01T00:00:00Z", end=datetime(2024, 3, 1, tzinfo=UTC))
        assert _hashes(apply_filters(records, filters)) == ["0xbb", "0xcc", "0xdd"]

    def test_type_exact(self, records):
        assert _hashes(apply_filters(records, TransactionFilters(type="transfer"))) == ["0xaa", "0xcc"]

    def test_asset_case_insensitive(self, records):
        assert _hashes(apply_filters(records, TransactionFilters(asset="Eth"))) == ["0xaa", "0xcc", "0xdd"]

    def test_search_matches_hash_counterparty_notes(self, records):
        assert _hashes(apply_filters(records, TransactionFilters(search="ALICE"))) == ["0xaa"]
        assert _hashes(apply_filters(records, TransactionFilters(search="uniswap"))) == ["0xbb"]
        assert _hashes(apply_filters(records, TransactionFilters(search="0xdd"))) == ["0xdd"]

    def test_combined(self, records):
        filters = TransactionFilters(type="transfer", start="2024-02-01")
        assert _hashes(apply_filters(records, filters)) == ["0xcc"]

    def test_idempotent(self, records):
        filters = TransactionFilters(asset="eth", direction="in")
        once = apply_filters(records, filters)
        assert apply_filters(once, filters) == once

    def test_input_untouched(self, records):
        before = list(records)
        apply_filters(records, TransactionFilters(type="swap"))
        assert records == before


class TestSort:
    def test_date_desc_default(self, records):
        assert _hashes(sort_transactions(records, "date")) == ["0xcc", "0xdd", "0xbb", "0xaa"]

    def test_date_asc(self, records):
        assert _hashes(sort_transactions(records, "date", SortOrder.ASC)) == ["0xaa", "0xbb", "0xcc", "0xdd"]

    def test_amount_is_numeric(self, records):
        assert _hashes(sort_transactions(records, "amount", "asc")) == ["0xcc", "0xaa", "0xdd", "0xbb"]

    def test_stable_for_equal_keys(self, records):
        # 0xaa and 0xdd share amount 9 and keep their relative order in both directions
        assert _hashes(sort_transactions(records, "amount", "desc")) == ["0xbb", "0xaa", "0xdd", "0xcc"]

    def test_fee(self, records):
        assert _hashes(sort_transactions(records, "fee", "desc")) == ["0xcc", "0xaa", "0xbb", "0xdd"]

    def test_unknown_key_keeps_order(self, records):
        result = sort_transactions(records, "colour")
        assert result == records
        assert result is not records

    def test_idempotent(self, records):
        once = sort_transactions(records, "type", "asc")
        assert sort_transactions(once, "type", "asc") == once


def test_unique_values(records):
    assert unique_types(records) == ["contract", "swap", "transfer"]
    assert unique_assets(records) == ["ETH", "USDC", "eth"]
