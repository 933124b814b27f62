"""
한국 서머타임 테이블 테스트
"""
from datetime import datetime, timedelta, timezone

import pytest

from afterschool_saju.services.dst_kr import (
    get_korea_dst_offset_minutes,
    is_korea_dst,
    list_korea_dst_periods,
)

KST = timezone(timedelta(hours=9))


class TestKoreaDst:
    @pytest.mark.parametrize("at", [
        datetime(1948, 7, 1, 12, 0, tzinfo=KST),
        datetime(1960, 6, 1, 0, 0, tzinfo=KST),
        datetime(1987, 8, 15, 9, 30, tzinfo=KST),
        datetime(1988, 7, 1, 10, 0, tzinfo=KST),
    ])
    def test_inside_period(self, at):
        assert is_korea_dst(at)
        assert get_korea_dst_offset_minutes(at) == -60

    @pytest.mark.parametrize("at", [
        datetime(1950, 7, 1, tzinfo=KST),
        datetime(1988, 12, 1, tzinfo=KST),
        datetime(1995, 6, 15, 14, 30, tzinfo=KST),
        datetime(2024, 7, 1, tzinfo=KST),
    ])
    def test_outside_period(self, at):
        assert not is_korea_dst(at)
        assert get_korea_dst_offset_minutes(at) == 0

    def test_start_inclusive_end_exclusive(self):
        assert is_korea_dst(datetime(1988, 5, 8, 0, 0, tzinfo=KST))
        assert not is_korea_dst(datetime(1988, 5, 7, 23, 59, tzinfo=KST))
        assert not is_korea_dst(datetime(1988, 10, 9, 0, 0, tzinfo=KST))
        assert is_korea_dst(datetime(1988, 10, 8, 23, 59, tzinfo=KST))

    def test_utc_input_is_compared_as_instant(self):
        # 1988-05-08 00:00 KST == 1988-05-07 15:00 UTC
        assert is_korea_dst(datetime(1988, 5, 7, 15, 0, tzinfo=timezone.utc))
        assert not is_korea_dst(datetime(1988, 5, 7, 14, 59, tzinfo=timezone.utc))

    def test_list_periods(self):
        periods = list_korea_dst_periods()
        assert len(periods) == 9
        assert [p.label for p in periods][:2] == ["1948", "1955"]
        periods.clear()
        assert len(list_korea_dst_periods()) == 9
