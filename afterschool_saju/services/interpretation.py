"""
사주 기본 해석문 생성
- 계산 결과(기둥, 오행, 십성)를 템플릿 문장으로 조립
- LLM 해석과 별도로 저장되는 결정적(deterministic) 해석
"""
from enum import Enum
from typing import Dict, Tuple

from afterschool_saju.services.ganji import ELEMENT_ORDER
from afterschool_saju.services.saju_engine import SajuResult


class SubjectType(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"


SUBJECT_NOUN = {
    SubjectType.STUDENT: "학생",
    SubjectType.TEACHER: "선생님",
}


def describe_element_balance(elements: Dict[str, int]) -> Tuple[str, str]:
    """가장 강한 오행, 가장 약한 오행 (동률이면 목화토금수 순서 우선)"""
    ranked = sorted(ELEMENT_ORDER, key=lambda element: -elements.get(element, 0))
    return ranked[0], ranked[-1]


def generate_saju_interpretation(
    result: SajuResult,
    subject: SubjectType = SubjectType.STUDENT
) -> str:
    pillars = result.pillars
    ten_gods = result.ten_gods
    meta = result.meta
    strongest, weakest = describe_element_balance(result.elements)

    hour_text = "시주가 포함된" if meta.time_known else "시주가 없는"
    if meta.time_known:
        ten_god_highlights = f"연주의 {ten_gods.year}, 월주의 {ten_gods.month}, 시주의 {ten_gods.hour}"
    else:
        ten_god_highlights = f"연주의 {ten_gods.year}, 월주의 {ten_gods.month}"

    paragraph1 = [
        f"이 {SUBJECT_NOUN[subject]}의 사주는 {pillars.year.ganji}년, {pillars.month.ganji}월, {pillars.day.ganji}일로 구성됩니다.",
        f"이번 분석은 KST 기준에 태양시 보정을 적용했으며 {hour_text} 사주입니다.",
        f"입춘 기준으로 태양년을 판단했고 현재 기준 절기는 {meta.solar_term}입니다.",
        "전체 구조는 안정적이며 기본 흐름이 명확하게 드러납니다.",
    ]

    paragraph2 = [
        f"오행 균형에서는 {strongest} 기운이 가장 두드러지고 {weakest} 기운이 상대적으로 약합니다.",
        "강한 기운은 재능과 추진력을 만들고 약한 기운은 보완이 필요한 학습 포인트로 볼 수 있습니다.",
        f"십성 관점에서는 {ten_god_highlights} 특징이 중심을 이루며 학습 태도와 관계 방식에 영향을 줍니다.",
        "성향적으로는 목표가 분명할 때 집중력이 살아나는 타입으로 해석됩니다.",
    ]

    paragraph3 = [
        "대운은 장기적인 환경 변화의 흐름으로, 고등 학년으로 갈수록 책임감이 커지는 흐름을 보입니다.",
        "세운은 단기적인 리듬으로, 학기마다 집중 포인트가 바뀌는 패턴을 고려하는 것이 좋습니다.",
        "학습 코칭에서는 강한 기운을 살릴 수 있도록 리더십이나 발표 역할을 맡기는 것이 유리합니다.",
        "약한 기운은 루틴화된 과제나 체크리스트로 보완하면 성취가 높아집니다.",
        "전반적으로 성실함과 성장 잠재력을 함께 지닌 구조로 해석됩니다.",
    ]

    return "\n\n".join(" ".join(paragraph) for paragraph in (paragraph1, paragraph2, paragraph3))
