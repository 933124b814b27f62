"""
한국 서머타임(일광절약시간) 보정 테이블
- 1948, 1955~1960, 1987~1988 시행 기간
- 기간 내 시각은 시계가 1시간 빨랐으므로 -60분 보정
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List

KST = timezone(timedelta(hours=9))

DST_OFFSET_MINUTES = -60


@dataclass(frozen=True)
class KoreaDstPeriod:
    """서머타임 기간 [start, end)"""
    label: str
    start: datetime
    end: datetime

    def contains(self, at: datetime) -> bool:
        return self.start <= at < self.end


def _period(label: str, start: tuple, end: tuple) -> KoreaDstPeriod:
    return KoreaDstPeriod(label, datetime(*start, tzinfo=KST), datetime(*end, tzinfo=KST))


KOREA_DST_PERIODS = (
    _period("1948", (1948, 6, 1), (1948, 9, 13)),
    _period("1955", (1955, 5, 5), (1955, 9, 9)),
    _period("1956", (1956, 5, 20), (1956, 9, 30)),
    _period("1957", (1957, 5, 19), (1957, 9, 29)),
    _period("1958", (1958, 5, 4), (1958, 9, 21)),
    _period("1959", (1959, 5, 3), (1959, 9, 20)),
    _period("1960", (1960, 5, 15), (1960, 9, 18)),
    _period("1987", (1987, 5, 10), (1987, 10, 11)),
    _period("1988", (1988, 5, 8), (1988, 10, 9)),
)


def is_korea_dst(at: datetime) -> bool:
    """`at` (aware datetime)이 서머타임 기간인지"""
    return any(period.contains(at) for period in KOREA_DST_PERIODS)


def get_korea_dst_offset_minutes(at: datetime) -> int:
    return DST_OFFSET_MINUTES if is_korea_dst(at) else 0


def list_korea_dst_periods() -> List[KoreaDstPeriod]:
    return list(KOREA_DST_PERIODS)
