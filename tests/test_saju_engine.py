"""
사주 계산 엔진 테스트
"""
import json
from datetime import date, datetime, timedelta, timezone

import pytest

from afterschool_saju.services.saju_engine import (
    MAX_SUPPORTED_YEAR,
    MIN_SUPPORTED_YEAR,
    BirthTime,
    SajuInput,
    SajuResult,
    calculate_saju,
    get_solar_correction_minutes,
)


def _ganji(pillar):
    return pillar.ganji if pillar else None


class TestConcreteCases:
    def test_day_epoch_with_default_longitude(self):
        """
        1984-02-02 시간 모름, 127.0도
        -32분 보정으로 1984-02-01 23:28 → 일주 인덱스 59 (계해)
        입춘 전이므로 태양년 1983 (계해년), 대한 구간 (축월)
        """
        result = calculate_saju(SajuInput(birth_date=date(1984, 2, 2)))

        assert result.meta.day_index == 59
        assert _ganji(result.pillars.day) == "계해"
        assert result.meta.solar_year == 1983
        assert _ganji(result.pillars.year) == "계해"
        assert result.meta.solar_term == "대한"
        assert result.meta.solar_term_index == 23
        assert result.meta.month_index == 11
        assert _ganji(result.pillars.month) == "을축"
        assert result.pillars.hour is None

        assert result.elements == {"목": 1, "화": 0, "토": 1, "금": 0, "수": 4}
        assert result.ten_gods.year == "비견"
        assert result.ten_gods.month == "식신"
        assert result.ten_gods.hour is None

        assert result.meta.solar_correction_minutes == -32
        assert result.meta.kst_timestamp == "1984-02-01T15:00:00.000Z"
        assert result.meta.corrected_timestamp == "1984-02-01T14:28:00.000Z"
        assert result.meta.dst_adjusted is False
        assert result.meta.time_known is False
        assert result.meta.longitude == 127.0

    def test_day_epoch_without_correction(self):
        """경도 135도 (보정 0분) → 1984-02-02 = 갑자일"""
        result = calculate_saju(SajuInput(birth_date=date(1984, 2, 2), longitude=135.0))
        assert result.meta.day_index == 0
        assert result.pillars.day.stem == "갑"
        assert result.pillars.day.branch == "자"

    def test_1995_06_15_14_30(self):
        result = calculate_saju(SajuInput(
            birth_date=date(1995, 6, 15),
            time=BirthTime(hour=14, minute=30),
        ))

        assert result.meta.solar_year == 1995
        assert result.meta.solar_term == "망종"
        assert result.meta.solar_term_index == 8
        assert result.meta.month_index == 4
        assert result.meta.day_index == 11

        assert _ganji(result.pillars.year) == "을해"
        assert _ganji(result.pillars.month) == "임오"
        assert _ganji(result.pillars.day) == "을해"
        assert _ganji(result.pillars.hour) == "계미"
        assert result.pillars.hour.branch == "미"

        assert result.elements == {"목": 2, "화": 1, "토": 1, "금": 0, "수": 4}
        assert result.ten_gods.year == "비견"
        assert result.ten_gods.month == "편인"
        assert result.ten_gods.hour == "정인"

        assert result.meta.kst_timestamp == "1995-06-15T05:30:00.000Z"
        assert result.meta.corrected_timestamp == "1995-06-15T04:58:00.000Z"
        assert result.meta.time_known is True

    def test_january_before_ipchun_is_chuk_month(self):
        """1996-01-10: 입춘 전 → 을해년, 소한 이후 → 기축월"""
        result = calculate_saju(SajuInput(birth_date=date(1996, 1, 10), time=BirthTime(12)))
        assert result.meta.solar_year == 1995
        assert result.meta.solar_term == "소한"
        assert _ganji(result.pillars.year) == "을해"
        assert _ganji(result.pillars.month) == "기축"


class TestCorrections:
    def test_solar_correction_minutes(self):
        assert get_solar_correction_minutes(127.0) == -32
        assert get_solar_correction_minutes(135.0) == 0
        assert get_solar_correction_minutes(126.5) == -34

    def test_whole_correction_is_int(self):
        """정수로 떨어지는 보정값은 int로 저장된다 (-32, not -32.0)"""
        assert isinstance(get_solar_correction_minutes(127.0), int)
        assert isinstance(get_solar_correction_minutes(135.0), int)
        assert get_solar_correction_minutes(126.98) == pytest.approx(-32.08)
        assert isinstance(get_solar_correction_minutes(126.98), float)

        result = calculate_saju(SajuInput(birth_date=date(1995, 6, 15)))
        assert '"solarCorrectionMinutes": -32,' in json.dumps(result.to_dict())

    def test_dst_shifts_hour_pillar(self):
        """1988 서머타임: 10:00 → 09:00 → (태양시) 08:28 → 진시"""
        result = calculate_saju(SajuInput(birth_date=date(1988, 7, 1), time=BirthTime(10, 0)))
        assert result.meta.dst_adjusted is True
        assert result.meta.kst_timestamp == "1988-07-01T00:00:00.000Z"
        assert result.meta.corrected_timestamp == "1988-06-30T23:28:00.000Z"
        assert result.pillars.hour.branch == "진"

    def test_no_dst_outside_period(self):
        result = calculate_saju(SajuInput(birth_date=date(1989, 7, 1), time=BirthTime(10, 0)))
        assert result.meta.dst_adjusted is False
        assert result.pillars.hour.branch == "사"

    def test_aware_datetime_uses_utc_date(self):
        from_date = calculate_saju(SajuInput(birth_date=date(1995, 6, 15), time=BirthTime(14, 30)))
        from_utc = calculate_saju(SajuInput(
            birth_date=datetime(1995, 6, 15, 0, 0, tzinfo=timezone.utc),
            time=BirthTime(14, 30),
        ))
        # KST 자정은 UTC로 전날
        from_kst = calculate_saju(SajuInput(
            birth_date=datetime(1995, 6, 15, 0, 0, tzinfo=timezone(timedelta(hours=9))),
            time=BirthTime(14, 30),
        ))
        assert from_utc == from_date
        assert from_kst.meta.day_index == (from_date.meta.day_index - 1) % 60


class TestSolarYearBoundary:
    def test_one_minute_before_ipchun(self):
        """1988 입춘 12:24 KST, 경도 135 (보정 없음)"""
        result = calculate_saju(SajuInput(
            birth_date=date(1988, 2, 4), time=BirthTime(12, 23), longitude=135.0,
        ))
        assert result.meta.solar_year == 1987
        assert _ganji(result.pillars.year) == "정묘"
        assert result.meta.solar_term == "대한"

    def test_exactly_at_ipchun(self):
        result = calculate_saju(SajuInput(
            birth_date=date(1988, 2, 4), time=BirthTime(12, 24), longitude=135.0,
        ))
        assert result.meta.solar_year == 1988
        assert _ganji(result.pillars.year) == "무진"
        assert result.meta.solar_term == "입춘"
        assert result.meta.solar_term_index == 0
        assert _ganji(result.pillars.month) == "갑인"

    def test_boundary_uses_corrected_time(self):
        """기본 경도: 12:56 입력 → 12:24 보정 → 입춘 당일"""
        before = calculate_saju(SajuInput(birth_date=date(1988, 2, 4), time=BirthTime(12, 55)))
        after = calculate_saju(SajuInput(birth_date=date(1988, 2, 4), time=BirthTime(12, 56)))
        assert before.meta.solar_year == 1987
        assert after.meta.solar_year == 1988


class TestProperties:
    CASES = [
        SajuInput(birth_date=date(1984, 2, 2)),
        SajuInput(birth_date=date(1995, 6, 15), time=BirthTime(14, 30)),
        SajuInput(birth_date=date(1959, 8, 1), time=BirthTime(23, 40), longitude=129.0),
        SajuInput(birth_date=date(2001, 12, 31), time=BirthTime(0, 10), longitude=126.5),
        SajuInput(birth_date=date(2012, 2, 29)),
    ]

    def test_deterministic(self):
        for case in self.CASES:
            first = calculate_saju(case)
            second = calculate_saju(case)
            assert first == second
            assert json.dumps(first.to_dict(), ensure_ascii=False) == \
                json.dumps(second.to_dict(), ensure_ascii=False)

    @pytest.mark.parametrize("case", CASES)
    def test_invariants(self, case):
        result = calculate_saju(case)

        expected_total = 8 if result.meta.time_known else 6
        assert sum(result.elements.values()) == expected_total
        assert all(v >= 0 for v in result.elements.values())
        assert list(result.elements) == ["목", "화", "토", "금", "수"]

        assert (result.pillars.hour is None) == (result.ten_gods.hour is None)
        assert result.meta.time_known == (result.pillars.hour is not None)

        assert 0 <= result.meta.solar_term_index <= 23
        assert result.meta.month_index == result.meta.solar_term_index // 2
        assert 0 <= result.meta.day_index < 60

    def test_year_pillar_repeats_every_60_years(self):
        a = calculate_saju(SajuInput(birth_date=date(1990, 3, 10), time=BirthTime(8)))
        b = calculate_saju(SajuInput(birth_date=date(2050, 3, 10), time=BirthTime(8)))
        assert a.pillars.year == b.pillars.year
        assert _ganji(a.pillars.year) == "경오"

    def test_day_pillar_repeats_every_60_days(self):
        a = calculate_saju(SajuInput(birth_date=date(2003, 5, 1)))
        b = calculate_saju(SajuInput(birth_date=date(2003, 5, 1) + timedelta(days=60)))
        c = calculate_saju(SajuInput(birth_date=date(2003, 5, 2)))
        assert a.pillars.day == b.pillars.day
        assert c.meta.day_index == (a.meta.day_index + 1) % 60


class TestSerialization:
    def test_stored_document_shape(self):
        result = calculate_saju(SajuInput(birth_date=date(1995, 6, 15), time=BirthTime(14, 30)))
        doc = result.to_dict()

        assert set(doc) == {"pillars", "elements", "tenGods", "meta"}
        assert doc["pillars"]["hour"] == {"stem": "계", "branch": "미"}
        assert doc["tenGods"] == {"year": "비견", "month": "편인", "hour": "정인"}
        assert doc["meta"]["solarTermIndex"] == 8
        assert doc["meta"]["dstAdjusted"] is False

    def test_restore_from_stored_json(self):
        result = calculate_saju(SajuInput(birth_date=date(1984, 2, 2)))
        stored = json.loads(json.dumps(result.to_dict(), ensure_ascii=False))
        assert stored["pillars"]["hour"] is None
        assert SajuResult.from_dict(stored) == result


class TestSupportedRange:
    """지원 연도 범위 양 끝에서도 예외 없이 계산"""

    @pytest.mark.parametrize("birth_date", [
        date(MIN_SUPPORTED_YEAR, 1, 1),
        date(MAX_SUPPORTED_YEAR, 12, 31),
    ])
    def test_range_edges(self, birth_date):
        result = calculate_saju(SajuInput(birth_date=birth_date, time=BirthTime(23, 59)))
        assert result.pillars.hour is not None
        assert 0 <= result.meta.solar_term_index <= 23
