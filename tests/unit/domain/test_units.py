from decimal import Decimal

import pytest

from chainview.adapters.utils.units import (
    format_base_units,
    format_decimal,
    gas_fee_wei,
    to_decimal,
    truncate_decimals,
)


class TestFormatBaseUnits:
    def test_one_ether(self):
        assert format_base_units("1000000000000000000", 18) == "1"

    def test_fraction_trailing_zeros_stripped(self):
        assert format_base_units("1500000000000000000", 18) == "1.5"

    def test_truncates_to_eight_places(self):
        # 0.123456789 ETH is truncated, not rounded
        assert format_base_units("123456789000000000", 18) == "0.12345678"

    def test_dust_below_display_precision(self):
        assert format_base_units("1", 18) == "0"

    def test_six_decimals(self):
        assert format_base_units(2_500_000, 6) == "2.5"

    def test_zero_decimals(self):
        assert format_base_units("42", 0) == "42"

    def test_large_value_keeps_precision(self):
        assert format_base_units("123456789012345678901234567890", 18) == "123456789012.3456789"

    @pytest.mark.parametrize("raw", [None, "", "abc", "-5", "1.5", True])
    def test_malformed_yields_zero(self, raw):
        assert format_base_units(raw, 18) == "0"

    @pytest.mark.parametrize("decimals", [0, 6, 9, 10, 12, 18])
    def test_whole_units_recovered(self, decimals):
        assert format_base_units(str(7 * 10**decimals), decimals) == "7"


class TestDecimals:
    def test_to_decimal(self):
        assert to_decimal("1.25") == Decimal("1.25")
        assert to_decimal(3) == Decimal(3)

    def test_to_decimal_rejects_garbage(self):
        assert to_decimal(None) is None
        assert to_decimal("n/a") is None
        assert to_decimal("NaN") is None

    def test_truncate_toward_zero(self):
        assert truncate_decimals(Decimal("-1.123456789")) == Decimal("-1.12345678")

    def test_format_decimal(self):
        assert format_decimal(Decimal("12.50000000")) == "12.5"
        assert format_decimal(Decimal("1E-9")) == "0"
        assert format_decimal(Decimal("-0.5")) == "-0.5"


class TestGasFee:
    def test_product(self):
        assert gas_fee_wei("21000", "1000000000") == 21_000_000_000_000

    def test_missing(self):
        assert gas_fee_wei(None, "5") == 0
        assert gas_fee_wei("bad", "5") == 0
