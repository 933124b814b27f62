"""
Pydantic 스키마 정의
API 요청/응답 모델
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Union
from datetime import date

from afterschool_saju.services.interpretation import SubjectType
from afterschool_saju.services.saju_engine import MAX_SUPPORTED_YEAR, MIN_SUPPORTED_YEAR


# ============ /saju/calculate 요청/응답 ============

class CalculateRequest(BaseModel):
    """사주 계산 요청"""
    birth_date: date = Field(..., description="출생일 (양력, YYYY-MM-DD)")
    birth_hour: Optional[int] = Field(None, ge=0, le=23, description="출생 시 (0-23시, 모르면 생략)")
    birth_minute: int = Field(0, ge=0, le=59, description="출생 분 (0-59)")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="출생지 경도 (기본: 서울 127.0)")
    subject_type: SubjectType = Field(SubjectType.STUDENT, description="분석 대상 (STUDENT/TEACHER)")

    @field_validator("birth_date")
    @classmethod
    def validate_birth_year(cls, v: date) -> date:
        if not MIN_SUPPORTED_YEAR <= v.year <= MAX_SUPPORTED_YEAR:
            raise ValueError(
                f"지원 범위 밖의 출생 연도: {v.year} ({MIN_SUPPORTED_YEAR}~{MAX_SUPPORTED_YEAR})"
            )
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "birth_date": "1995-06-15",
                "birth_hour": 14,
                "birth_minute": 30,
                "longitude": 127.0,
                "subject_type": "STUDENT"
            }
        }


class PillarOut(BaseModel):
    """사주 기둥"""
    stem: str = Field(..., description="천간 (갑을병정무기경신임계)")
    branch: str = Field(..., description="지지 (자축인묘진사오미신유술해)")


class PillarsOut(BaseModel):
    year: PillarOut
    month: PillarOut
    day: PillarOut
    hour: Optional[PillarOut] = Field(None, description="시주 (시간 미입력시 None)")


class TenGodsOut(BaseModel):
    year: str
    month: str
    hour: Optional[str] = None


class SajuMetaOut(BaseModel):
    solarYear: int
    solarTerm: str
    solarTermIndex: int = Field(..., ge=0, le=23)
    monthIndex: int = Field(..., ge=0, le=11)
    dayIndex: int = Field(..., ge=0, le=59)
    timeKnown: bool
    kstTimestamp: str
    correctedTimestamp: str
    longitude: float
    solarCorrectionMinutes: Union[int, float]
    dstAdjusted: bool


class SajuResultOut(BaseModel):
    """저장용 사주 결과 문서"""
    pillars: PillarsOut
    elements: Dict[str, int] = Field(..., description="오행 집계 (목화토금수)")
    tenGods: TenGodsOut
    meta: SajuMetaOut


class CalculateResponse(BaseModel):
    """사주 계산 응답"""
    success: bool = True
    birth_info: str = Field(..., description="입력된 생년월일 (예: 1995년 6월 15일 14시 30분)")
    result: SajuResultOut
    day_master: str = Field(..., description="일간 (나를 나타내는 글자)")
    day_master_element: str = Field(..., description="일간 오행")
    day_master_description: str = Field(..., description="일간 설명")
    interpretation: str = Field(..., description="기본 해석문")


# ============ 절기 / 서머타임 ============

class SolarTermOut(BaseModel):
    name: str
    at: str = Field(..., description="절입 시각 (ISO-8601, KST)")


class SolarTermsResponse(BaseModel):
    year: int
    source: str = Field(..., description="exact_table | approximate | ephem")
    terms: List[SolarTermOut]


class DstPeriodOut(BaseModel):
    label: str
    start: str
    end: str


class HourOption(BaseModel):
    """시간대 선택 옵션"""
    index: int = Field(..., description="지지 인덱스 (0-11)")
    ji: str = Field(..., description="지지 한글 (자~해)")
    ji_hanja: str = Field(..., description="지지 한자 (子~亥)")
    range_start: str = Field(..., description="시작 시간 (HH:MM)")
    range_end: str = Field(..., description="종료 시간 (HH:MM)")
    label: str = Field(..., description="표시 라벨")


# ============ 에러 응답 ============

class ErrorResponse(BaseModel):
    """에러 응답"""
    success: bool = False
    error_code: str
    message: str
    detail: Optional[str] = None
