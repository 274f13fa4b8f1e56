from datetime import UTC, datetime, timedelta, timezone

import pytest

from chainview.domain.timestamps import to_unix_millis, to_utc_datetime

EXPECTED = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)


class TestToUtcDatetime:
    def test_unix_seconds(self):
        assert to_utc_datetime(1700000000) == EXPECTED

    def test_unix_millis(self):
        assert to_utc_datetime(1700000000000) == EXPECTED

    def test_numeric_string(self):
        assert to_utc_datetime("1700000000") == EXPECTED

    def test_iso_with_z(self):
        assert to_utc_datetime("2023-11-14T22:13:20Z") == EXPECTED

    def test_iso_with_offset(self):
        assert to_utc_datetime("2023-11-15T00:13:20+02:00") == EXPECTED

    def test_naive_datetime_taken_as_utc(self):
        assert to_utc_datetime(datetime(2023, 11, 14, 22, 13, 20)) == EXPECTED

    def test_aware_datetime_converted(self):
        local = datetime(2023, 11, 14, 17, 13, 20, tzinfo=timezone(timedelta(hours=-5)))
        result = to_utc_datetime(local)
        assert result == EXPECTED
        assert result.tzinfo == UTC

    @pytest.mark.parametrize("value", ["", "   ", True, None])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            to_utc_datetime(value)


def test_to_unix_millis():
    assert to_unix_millis(EXPECTED + timedelta(milliseconds=250)) == 1700000000250
