# services package
from afterschool_saju.services.saju_engine import (
    BirthTime,
    SajuInput,
    SajuResult,
    calculate_saju,
)
from afterschool_saju.services.solar_terms import (
    SolarTermEntry,
    SolarTermError,
    get_solar_term,
    get_solar_term_index,
    get_solar_terms_for_year,
    list_solar_terms,
)
from afterschool_saju.services.dst_kr import get_korea_dst_offset_minutes
from afterschool_saju.services.interpretation import SubjectType, generate_saju_interpretation
