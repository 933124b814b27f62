"""
/saju 엔드포인트

- 사주 계산 (서머타임 + 태양시 보정)
- 24절기 조회 (정밀 테이블 / 근사 / ephem)
- 서머타임 기간, 시간대 옵션
"""
from fastapi import APIRouter, HTTPException, Path, Query
from typing import List
import logging

from afterschool_saju.config import get_settings
from afterschool_saju.models.schemas import (
    CalculateRequest,
    CalculateResponse,
    DstPeriodOut,
    ErrorResponse,
    HourOption,
    SolarTermsResponse,
)
from afterschool_saju.services.cache import cache_service
from afterschool_saju.services.dst_kr import list_korea_dst_periods
from afterschool_saju.services.ganji import DAY_MASTER_DESC, get_element, get_hour_options
from afterschool_saju.services.interpretation import generate_saju_interpretation
from afterschool_saju.services.saju_engine import (
    MAX_SUPPORTED_YEAR,
    MIN_SUPPORTED_YEAR,
    BirthTime,
    SajuInput,
    calculate_saju,
)
from afterschool_saju.services.solar_terms import (
    SolarTermError,
    compute_solar_terms,
    get_solar_terms_for_year,
    has_exact_solar_terms,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/saju")


def _birth_info(request: CalculateRequest) -> str:
    d = request.birth_date
    info = f"{d.year}년 {d.month}월 {d.day}일"
    if request.birth_hour is not None:
        info += f" {request.birth_hour}시"
        if request.birth_minute > 0:
            info += f" {request.birth_minute}분"
    return info


@router.post(
    "/calculate",
    response_model=CalculateResponse,
    responses={
        500: {"model": ErrorResponse}
    },
    summary="사주 계산",
    description="""
생년월일(+시각, 경도)을 입력받아 사주 원국을 계산합니다.

- 한국 서머타임 기간이면 -60분 보정
- 태양시 보정: (경도 - 135) × 4분 (기본 127.0도 → -32분)
- 시각을 모르면 시주/시주 십성 없음
    """
)
async def calculate(request: CalculateRequest):
    longitude = request.longitude if request.longitude is not None else get_settings().default_longitude
    birth_date = request.birth_date.isoformat()
    subject = request.subject_type.value

    cached = cache_service.get_saju(birth_date, request.birth_hour, request.birth_minute, longitude, subject)
    if cached:
        return CalculateResponse(**cached)

    try:
        time = None
        if request.birth_hour is not None:
            time = BirthTime(hour=request.birth_hour, minute=request.birth_minute)

        result = calculate_saju(SajuInput(birth_date=request.birth_date, time=time, longitude=longitude))
        day_master = result.pillars.day.stem

        response_data = {
            "success": True,
            "birth_info": _birth_info(request),
            "result": result.to_dict(),
            "day_master": day_master,
            "day_master_element": get_element(day_master),
            "day_master_description": DAY_MASTER_DESC[day_master],
            "interpretation": generate_saju_interpretation(result, request.subject_type),
        }
    except Exception as e:
        logger.error(f"Unexpected error: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=500,
            detail={
                "error_code": "INTERNAL_ERROR",
                "message": "사주 계산에 실패했습니다.",
                "detail": str(e)
            }
        )

    cache_service.set_saju(birth_date, request.birth_hour, request.birth_minute, longitude, subject, response_data)
    logger.info(f"Saju calculated: {birth_date} | solar_year={result.meta.solar_year} | term={result.meta.solar_term}")

    return CalculateResponse(**response_data)


@router.get(
    "/solar-terms/{year}",
    response_model=SolarTermsResponse,
    responses={500: {"model": ErrorResponse}},
    summary="24절기 절입 시각",
    description="태양년(입춘~다음해 대한) 기준 24절기. `precise=true`면 ephem 천문 계산."
)
async def get_solar_terms(
    year: int = Path(..., ge=MIN_SUPPORTED_YEAR, le=MAX_SUPPORTED_YEAR),
    precise: bool = Query(False, description="ephem 천문 계산 사용")
):
    if precise:
        cached = cache_service.get_solar_terms(year)
        if cached is not None:
            return {"year": year, "source": "ephem", "terms": cached}
        try:
            entries = compute_solar_terms(year)
        except SolarTermError as e:
            logger.error(f"Solar term error: {e}")
            raise HTTPException(
                status_code=500,
                detail={
                    "error_code": "SOLAR_TERM_ERROR",
                    "message": "절기 계산에 실패했습니다.",
                    "detail": str(e)
                }
            )
        terms = [{"name": t.name, "at": t.at.isoformat()} for t in entries]
        cache_service.set_solar_terms(year, terms)
        return {"year": year, "source": "ephem", "terms": terms}

    source = "exact_table" if has_exact_solar_terms(year) else "approximate"
    terms = [{"name": t.name, "at": t.at.isoformat()} for t in get_solar_terms_for_year(year)]
    return {"year": year, "source": source, "terms": terms}


@router.get(
    "/dst-periods",
    response_model=List[DstPeriodOut],
    summary="한국 서머타임 시행 기간"
)
async def get_dst_periods():
    return [
        {"label": p.label, "start": p.start.isoformat(), "end": p.end.isoformat()}
        for p in list_korea_dst_periods()
    ]


@router.get(
    "/hour-options",
    response_model=List[HourOption],
    summary="시간대 선택 옵션",
    description="출생 시간 입력을 위한 시간대(2시간 단위) 선택 옵션 목록"
)
async def hour_options():
    return get_hour_options()


@router.get(
    "/cache-stats",
    summary="캐시 통계"
)
async def get_cache_stats():
    return cache_service.get_stats()
