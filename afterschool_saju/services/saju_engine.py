"""
사주 계산 엔진
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
출생일(+시각, 경도) → 연/월/일/시주, 오행 집계, 십성

계산 순서:
1. 입력 날짜/시각을 KST 벽시계 시각으로 해석
2. 서머타임 보정
3. 태양시 보정: (경도 - 135) * 4 분
4. 입춘 기준 태양년 판정
5. 절기 인덱스 → 월 인덱스 (절기 2개 = 1개월)
6. 연주(1984 갑자 기준) / 월주(오서둔) / 일주(1984-02-02 기준) / 시주
7. 오행 집계 + 일간 기준 십성
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from afterschool_saju.services.dst_kr import get_korea_dst_offset_minutes
from afterschool_saju.services.ganji import (
    CHEONGAN,
    JIJI,
    ELEMENT_ORDER,
    calc_year_indices,
    calc_month_indices,
    calc_hour_indices,
    get_stem_branch,
    get_ten_god,
    tally_elements,
)
from afterschool_saju.services.solar_terms import get_solar_term, get_solar_term_index

logger = logging.getLogger(__name__)

KST_OFFSET_MINUTES = 540
KST = timezone(timedelta(minutes=KST_OFFSET_MINUTES))

DEFAULT_LONGITUDE = 127.0
STANDARD_MERIDIAN = 135.0  # KST 기준 자오선

BASE_DAY = date(1984, 2, 2)  # 일주 60갑자 인덱스 0

# 지원 연도 범위 (근사 절기 테이블이 다음해 1월까지 만든다)
MIN_SUPPORTED_YEAR = 1900
MAX_SUPPORTED_YEAR = 2100


# ============ 입력 / 결과 타입 ============

@dataclass
class BirthTime:
    hour: int
    minute: int = 0


@dataclass
class SajuInput:
    """
    사주 입력

    - birth_date: 양력 생일 (aware datetime은 UTC로 바꾼 뒤 연/월/일만 사용)
    - time: 출생 시각 (None = 시간 모름, 시주 없음)
    - longitude: 출생지 경도 (None = 127.0)
    """
    birth_date: Union[date, datetime]
    time: Optional[BirthTime] = None
    longitude: Optional[float] = None


@dataclass
class Pillar:
    stem: str
    branch: str

    @property
    def ganji(self) -> str:
        return f"{self.stem}{self.branch}"

    def to_dict(self) -> Dict[str, str]:
        return {"stem": self.stem, "branch": self.branch}


@dataclass
class SajuPillars:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Optional[Pillar] = None

    def present(self):
        """시주 포함 여부에 따라 3개 또는 4개 기둥"""
        pillars = [self.year, self.month, self.day]
        if self.hour is not None:
            pillars.append(self.hour)
        return pillars


@dataclass
class TenGods:
    year: str
    month: str
    hour: Optional[str] = None


@dataclass
class SajuMeta:
    solar_year: int
    solar_term: str
    solar_term_index: int
    month_index: int
    day_index: int
    time_known: bool
    kst_timestamp: str
    corrected_timestamp: str
    longitude: float
    solar_correction_minutes: Union[int, float]
    dst_adjusted: bool


@dataclass
class SajuResult:
    pillars: SajuPillars
    elements: Dict[str, int]
    ten_gods: TenGods
    meta: SajuMeta

    def to_dict(self) -> Dict[str, Any]:
        """저장용 JSON 문서 (camelCase)"""
        p = self.pillars
        m = self.meta
        return {
            "pillars": {
                "year": p.year.to_dict(),
                "month": p.month.to_dict(),
                "day": p.day.to_dict(),
                "hour": p.hour.to_dict() if p.hour else None,
            },
            "elements": {element: self.elements[element] for element in ELEMENT_ORDER},
            "tenGods": {
                "year": self.ten_gods.year,
                "month": self.ten_gods.month,
                "hour": self.ten_gods.hour,
            },
            "meta": {
                "solarYear": m.solar_year,
                "solarTerm": m.solar_term,
                "solarTermIndex": m.solar_term_index,
                "monthIndex": m.month_index,
                "dayIndex": m.day_index,
                "timeKnown": m.time_known,
                "kstTimestamp": m.kst_timestamp,
                "correctedTimestamp": m.corrected_timestamp,
                "longitude": m.longitude,
                "solarCorrectionMinutes": m.solar_correction_minutes,
                "dstAdjusted": m.dst_adjusted,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SajuResult":
        """저장된 JSON 문서 → SajuResult"""
        pillars = data["pillars"]
        hour = pillars.get("hour")
        ten_gods = data["tenGods"]
        meta = data["meta"]
        return cls(
            pillars=SajuPillars(
                year=Pillar(**pillars["year"]),
                month=Pillar(**pillars["month"]),
                day=Pillar(**pillars["day"]),
                hour=Pillar(**hour) if hour else None,
            ),
            elements={element: int(data["elements"].get(element, 0)) for element in ELEMENT_ORDER},
            ten_gods=TenGods(
                year=ten_gods["year"],
                month=ten_gods["month"],
                hour=ten_gods.get("hour"),
            ),
            meta=SajuMeta(
                solar_year=meta["solarYear"],
                solar_term=meta["solarTerm"],
                solar_term_index=meta["solarTermIndex"],
                month_index=meta["monthIndex"],
                day_index=meta["dayIndex"],
                time_known=meta["timeKnown"],
                kst_timestamp=meta["kstTimestamp"],
                corrected_timestamp=meta["correctedTimestamp"],
                longitude=meta["longitude"],
                solar_correction_minutes=meta["solarCorrectionMinutes"],
                dst_adjusted=meta["dstAdjusted"],
            ),
        )


# ============ 시각 보정 ============

def _to_iso_utc(at: datetime) -> str:
    return at.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_birth_timestamp(saju_input: SajuInput) -> datetime:
    """입력 날짜(UTC 기준 연/월/일) + 시각을 KST 벽시계 시각으로"""
    birth_date = saju_input.birth_date
    if isinstance(birth_date, datetime) and birth_date.tzinfo is not None:
        birth_date = birth_date.astimezone(timezone.utc)
    time = saju_input.time
    hour = time.hour if time else 0
    minute = time.minute if time else 0
    return datetime(birth_date.year, birth_date.month, birth_date.day, tzinfo=KST) + \
        timedelta(hours=hour, minutes=minute)


def get_solar_correction_minutes(longitude: float) -> Union[int, float]:
    """태양시 보정 (분). 127.0도 → -32분 (정수로 떨어지면 int)"""
    minutes = (longitude - STANDARD_MERIDIAN) * 4
    if float(minutes).is_integer():
        return int(minutes)
    return minutes


def resolve_solar_year(corrected: datetime) -> int:
    """입춘 이전이면 전년도"""
    ipchun = get_solar_term(corrected.year, "입춘").at
    return corrected.year if corrected >= ipchun else corrected.year - 1


def get_day_index(corrected: datetime) -> int:
    """보정 시각의 KST 날짜 기준 60갑자 일 인덱스"""
    diff_days = (corrected.astimezone(KST).date() - BASE_DAY).days
    return diff_days % 60


# ============ 계산 ============

def calculate_saju(saju_input: SajuInput) -> SajuResult:
    """
    사주 계산 (순수 함수)

    출생 연도가 MIN_SUPPORTED_YEAR ~ MAX_SUPPORTED_YEAR 범위이면 예외 없이 계산된다.
    범위 밖 날짜는 절기 테이블이나 시각 보정이 datetime 한계를 넘을 수 있으므로
    호출자(API 스키마)가 막는다.
    """
    longitude = saju_input.longitude if saju_input.longitude is not None else DEFAULT_LONGITUDE

    raw = normalize_birth_timestamp(saju_input)
    dst_offset_minutes = get_korea_dst_offset_minutes(raw)
    dst_adjusted = raw + timedelta(minutes=dst_offset_minutes)

    solar_correction_minutes = get_solar_correction_minutes(longitude)
    corrected = dst_adjusted + timedelta(minutes=solar_correction_minutes)

    solar_year = resolve_solar_year(corrected)
    solar_term_index, solar_term = get_solar_term_index(solar_year, corrected)
    month_index = solar_term_index // 2

    year_stem, year_branch = calc_year_indices(solar_year)
    month_stem, month_branch = calc_month_indices(year_stem, month_index)
    day_index = get_day_index(corrected)
    day_stem, day_branch = get_stem_branch(day_index)

    time_known = saju_input.time is not None
    hour_pillar = None
    hour_stem = None
    if time_known:
        hour_stem, hour_branch = calc_hour_indices(day_stem, corrected.astimezone(KST).hour)
        hour_pillar = Pillar(CHEONGAN[hour_stem], JIJI[hour_branch])

    pillars = SajuPillars(
        year=Pillar(CHEONGAN[year_stem], JIJI[year_branch]),
        month=Pillar(CHEONGAN[month_stem], JIJI[month_branch]),
        day=Pillar(CHEONGAN[day_stem], JIJI[day_branch]),
        hour=hour_pillar,
    )

    elements = tally_elements((p.stem, p.branch) for p in pillars.present())
    ten_gods = TenGods(
        year=get_ten_god(day_stem, year_stem),
        month=get_ten_god(day_stem, month_stem),
        hour=get_ten_god(day_stem, hour_stem) if hour_stem is not None else None,
    )

    logger.debug(
        f"[Saju] {raw.date()} | solar_year={solar_year} | term={solar_term.name} | "
        f"day={pillars.day.ganji} | dst={dst_offset_minutes} | correction={solar_correction_minutes}"
    )

    return SajuResult(
        pillars=pillars,
        elements=elements,
        ten_gods=ten_gods,
        meta=SajuMeta(
            solar_year=solar_year,
            solar_term=solar_term.name,
            solar_term_index=solar_term_index,
            month_index=month_index,
            day_index=day_index,
            time_known=time_known,
            kst_timestamp=_to_iso_utc(dst_adjusted),
            corrected_timestamp=_to_iso_utc(corrected),
            longitude=longitude,
            solar_correction_minutes=solar_correction_minutes,
            dst_adjusted=dst_offset_minutes != 0,
        ),
    )
