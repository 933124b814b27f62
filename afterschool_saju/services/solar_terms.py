"""
24절기 데이터 및 절입 시각 판정
- 월주 계산의 핵심: 어느 절기 구간인지 판단
- 입춘 기준 태양년 판정용 입춘 시각 제공
- 정밀 데이터가 없는 연도는 고정 날짜 근사 (하루 이내 오차)
"""
import copy
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple

import ephem

logger = logging.getLogger(__name__)

KST = timezone(timedelta(hours=9))


class SolarTermError(Exception):
    """절기 시각 계산 오류"""
    pass


@dataclass
class SolarTermEntry:
    """절기 이름 + 절입 시각 (KST aware datetime)"""
    name: str
    at: datetime


# 24절기 (입춘부터, 태양년 순서)
TERM_ORDER = (
    "입춘", "우수", "경칩", "춘분", "청명", "곡우",
    "입하", "소만", "망종", "하지", "소서", "대서",
    "입추", "처서", "백로", "추분", "한로", "상강",
    "입동", "소설", "대설", "동지", "소한", "대한",
)

# 근사 절입일 (양력 월, 일). 1월 절기(소한/대한)는 다음 해에 속한다.
APPROXIMATE_DATES: Dict[str, Tuple[int, int]] = {
    "입춘": (2, 4), "우수": (2, 19), "경칩": (3, 6), "춘분": (3, 21),
    "청명": (4, 5), "곡우": (4, 20), "입하": (5, 6), "소만": (5, 21),
    "망종": (6, 6), "하지": (6, 21), "소서": (7, 7), "대서": (7, 23),
    "입추": (8, 8), "처서": (8, 23), "백로": (9, 8), "추분": (9, 23),
    "한로": (10, 8), "상강": (10, 23), "입동": (11, 7), "소설": (11, 22),
    "대설": (12, 7), "동지": (12, 22), "소한": (1, 5), "대한": (1, 20),
}

# 입춘 = 태양 황경 315도, 이후 15도 간격
IPCHUN_LONGITUDE = 315.0
TERM_STEP_DEGREES = 15.0

# 정밀 절기 시각 (KST 기준)
# 형식: (년, 월, 일, 시, 분), TERM_ORDER 순서
SOLAR_TERMS_PRECISE: Dict[int, List[Tuple[int, int, int, int, int]]] = {
    1984: [
        (1984, 2, 4, 10, 40),   # 입춘
        (1984, 2, 19, 6, 49),
        (1984, 3, 5, 22, 28),
        (1984, 3, 20, 23, 23),
        (1984, 4, 4, 15, 3),
        (1984, 4, 20, 9, 40),
        (1984, 5, 5, 8, 52),
        (1984, 5, 21, 1, 17),
        (1984, 6, 5, 19, 33),
        (1984, 6, 21, 12, 50),
        (1984, 7, 7, 6, 13),
        (1984, 7, 23, 0, 32),
        (1984, 8, 7, 18, 50),
        (1984, 8, 23, 10, 16),
        (1984, 9, 7, 22, 8),
        (1984, 9, 23, 7, 15),
        (1984, 10, 8, 13, 32),
        (1984, 10, 23, 16, 48),
        (1984, 11, 7, 16, 5),
        (1984, 11, 22, 13, 21),
        (1984, 12, 7, 8, 40),
        (1984, 12, 22, 2, 10),
        (1985, 1, 5, 20, 25),   # 소한 (다음해 1월이지만 1984년 데이터에 포함)
        (1985, 1, 20, 14, 52),  # 대한
    ],
    1988: [
        (1988, 2, 4, 12, 24),
        (1988, 2, 19, 8, 30),
        (1988, 3, 5, 0, 4),
        (1988, 3, 20, 18, 44),
        (1988, 4, 4, 10, 21),
        (1988, 4, 20, 4, 52),
        (1988, 5, 5, 4, 7),
        (1988, 5, 20, 20, 38),
        (1988, 6, 5, 14, 58),
        (1988, 6, 21, 8, 26),
        (1988, 7, 7, 1, 52),
        (1988, 7, 22, 20, 12),
        (1988, 8, 7, 14, 33),
        (1988, 8, 23, 5, 54),
        (1988, 9, 7, 17, 51),
        (1988, 9, 22, 22, 18),
        (1988, 10, 8, 4, 36),
        (1988, 10, 23, 7, 54),
        (1988, 11, 7, 7, 12),
        (1988, 11, 22, 4, 36),
        (1988, 12, 6, 23, 50),
        (1988, 12, 21, 17, 25),
        (1989, 1, 5, 11, 36),
        (1989, 1, 20, 6, 3),
    ],
    1995: [
        (1995, 2, 4, 12, 10),
        (1995, 2, 19, 8, 9),
        (1995, 3, 5, 23, 43),
        (1995, 3, 20, 17, 33),
        (1995, 4, 4, 10, 59),
        (1995, 4, 20, 4, 24),
        (1995, 5, 5, 3, 24),
        (1995, 5, 20, 19, 49),
        (1995, 6, 5, 14, 5),
        (1995, 6, 21, 7, 24),
        (1995, 7, 7, 0, 44),
        (1995, 7, 22, 19, 5),
        (1995, 8, 7, 13, 22),
        (1995, 8, 23, 4, 45),
        (1995, 9, 7, 16, 29),
        (1995, 9, 22, 20, 57),
        (1995, 10, 8, 3, 10),
        (1995, 10, 23, 6, 30),
        (1995, 11, 7, 5, 48),
        (1995, 11, 22, 3, 12),
        (1995, 12, 6, 22, 33),
        (1995, 12, 21, 16, 13),
        (1996, 1, 5, 10, 10),
        (1996, 1, 20, 4, 40),
    ],
}

_EXACT_TERMS: Dict[int, List[SolarTermEntry]] = {
    year: [
        SolarTermEntry(name, datetime(*parts, tzinfo=KST))
        for name, parts in zip(TERM_ORDER, rows)
    ]
    for year, rows in SOLAR_TERMS_PRECISE.items()
}

_SENTINEL_AT = datetime(1970, 1, 1, 0, 0, tzinfo=KST)


def _build_approximate_solar_terms(year: int) -> List[SolarTermEntry]:
    """근사 절기 (고정 양력 날짜 00:00 KST)"""
    entries = []
    for name in TERM_ORDER:
        month, day = APPROXIMATE_DATES[name]
        term_year = year + 1 if month == 1 else year
        entries.append(SolarTermEntry(name, datetime(term_year, month, day, tzinfo=KST)))
    return entries


def has_exact_solar_terms(year: int) -> bool:
    """정밀 절기 데이터 보유 여부"""
    return year in _EXACT_TERMS


def get_solar_terms_for_year(year: int) -> List[SolarTermEntry]:
    """
    태양년 기준 24절기 (입춘 ~ 다음해 대한)

    정밀 데이터가 있으면 복사본을, 없으면 근사값을 반환한다.
    """
    entries = _EXACT_TERMS.get(year)
    if entries:
        return copy.deepcopy(entries)
    return _build_approximate_solar_terms(year)


def get_solar_term(year: int, name: str) -> SolarTermEntry:
    """이름으로 절기 조회 (없는 이름이면 1970-01-01 sentinel)"""
    for term in get_solar_terms_for_year(year):
        if term.name == name:
            return term
    logger.warning(f"[SolarTerms] 알 수 없는 절기: {name} ({year})")
    return SolarTermEntry(name, _SENTINEL_AT)


def get_solar_term_index(year: int, at: datetime) -> Tuple[int, SolarTermEntry]:
    """
    `at` 시점에 진행 중인 절기 (마지막으로 지난 절기)

    첫 절기 이전이면 0을 반환한다. 연도 보정은 호출자 책임.

    Returns:
        (절기인덱스 0~23, 절기)
    """
    terms = get_solar_terms_for_year(year)
    index = 0
    for i, term in enumerate(terms):
        if at >= term.at:
            index = i
        else:
            break
    return index, terms[index]


def list_solar_terms() -> List[str]:
    return list(TERM_ORDER)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ephem 기반 절입 시각 계산 (저장 테이블과 독립, `precise=true` 조회용)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _sun_longitude(when: ephem.Date) -> float:
    """태양 시황경 (도, 당일 춘분점 기준)"""
    sun = ephem.Sun()
    sun.compute(when)
    equatorial = ephem.Equatorial(sun.ra, sun.dec, epoch=when)
    ecliptic = ephem.Ecliptic(equatorial, epoch=when)
    return math.degrees(ecliptic.lon) % 360.0


def _angle_diff(longitude: float, target: float) -> float:
    """(-180, 180] 범위의 황경 차"""
    return (longitude - target + 180.0) % 360.0 - 180.0


def _find_term_moment(target: float, guess: datetime, window_days: float = 4.0) -> datetime:
    """근사일 ±window_days 안에서 이분탐색으로 절입 시각 탐색"""
    guess_utc = guess.astimezone(timezone.utc).replace(tzinfo=None)
    lo = float(ephem.Date(guess_utc - timedelta(days=window_days)))
    hi = float(ephem.Date(guess_utc + timedelta(days=window_days)))

    if _angle_diff(_sun_longitude(ephem.Date(lo)), target) >= 0 or \
            _angle_diff(_sun_longitude(ephem.Date(hi)), target) < 0:
        raise SolarTermError(f"절입 구간 탐색 실패: {target}도 ({guess.date()})")

    # 1분 이하 정밀도까지
    while hi - lo > 1.0 / (24 * 60 * 4):
        mid = (lo + hi) / 2
        if _angle_diff(_sun_longitude(ephem.Date(mid)), target) < 0:
            lo = mid
        else:
            hi = mid

    moment = ephem.Date(hi).datetime().replace(tzinfo=timezone.utc)
    moment = moment + timedelta(seconds=30)
    return moment.replace(second=0, microsecond=0).astimezone(KST)


def compute_solar_terms(year: int) -> List[SolarTermEntry]:
    """
    ephem으로 태양년 24절기 절입 시각 계산 (KST, 분 단위 반올림)

    Raises:
        SolarTermError: 근사일 주변에서 절입 시각을 찾지 못한 경우
    """
    entries = []
    for i, approx in enumerate(_build_approximate_solar_terms(year)):
        target = (IPCHUN_LONGITUDE + TERM_STEP_DEGREES * i) % 360.0
        entries.append(SolarTermEntry(approx.name, _find_term_moment(target, approx.at)))
    logger.info(f"[SolarTerms] ephem 절기 계산 완료: {year}")
    return entries
