"""
60갑자 / 오행 / 십성 계산 모듈
- 천간(10개) × 지지(12개) = 60갑자
- 오서둔(월간) / 일간 기준 시간 천간
- 오행 집계, 십성 판정
"""
from typing import Dict, List, Optional, Tuple

# 천간 (10개)
CHEONGAN = ("갑", "을", "병", "정", "무", "기", "경", "신", "임", "계")

# 지지 (12개)
JIJI = ("자", "축", "인", "묘", "진", "사", "오", "미", "신", "유", "술", "해")

JIJI_HANJA = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")

# 오행 순서: i가 i+1을 생하고 i+2를 극한다
ELEMENT_ORDER = ("목", "화", "토", "금", "수")

# 천간 인덱스 → 오행 (두 개씩)
STEM_ELEMENT = ("목", "목", "화", "화", "토", "토", "금", "금", "수", "수")

# 지지 → 오행 (불규칙)
BRANCH_ELEMENT = {
    "자": "수", "축": "토", "인": "목", "묘": "목",
    "진": "토", "사": "화", "오": "화", "미": "토",
    "신": "금", "유": "금", "술": "토", "해": "수",
}

YEAR_BASE = 1984  # 갑자년
MONTH_BRANCH_START_INDEX = 2  # 인월

# 연간 → 인월 천간 시작점 (갑/기년 병인월, 을/경년 무인월, ...)
MONTH_STEM_START_BY_YEAR_STEM = (2, 4, 6, 8, 0, 2, 4, 6, 8, 0)

# 일간 → 자시 천간 시작점 (갑/기일 갑자시, 을/경일 병자시, ...)
HOUR_STEM_START_BY_DAY_STEM = (0, 2, 4, 6, 8, 0, 2, 4, 6, 8)

TEN_GODS = ("비견", "겁재", "식신", "상관", "편재", "정재", "편관", "정관", "편인", "정인")

# 일간 설명
DAY_MASTER_DESC = {
    "갑": "큰 나무(甲木) - 곧고 뻗어나가는 성장의 기운",
    "을": "작은 나무(乙木) - 유연하고 적응력 있는 기운",
    "병": "태양(丙火) - 밝고 뜨거운 열정의 기운",
    "정": "촛불(丁火) - 따뜻하고 은은한 빛의 기운",
    "무": "큰 산(戊土) - 안정적이고 묵직한 기운",
    "기": "논밭(己土) - 포용하고 키워내는 기운",
    "경": "바위/쇠(庚金) - 강하고 결단력 있는 기운",
    "신": "보석(辛金) - 섬세하고 빛나는 기운",
    "임": "큰 물(壬水) - 넓고 깊은 지혜의 기운",
    "계": "이슬/비(癸水) - 촉촉하고 스며드는 기운",
}

# 시간대 옵션 (지지 인덱스 순)
HOUR_RANGES = (
    ("23:00", "00:59"),  # 자
    ("01:00", "02:59"),  # 축
    ("03:00", "04:59"),  # 인
    ("05:00", "06:59"),  # 묘
    ("07:00", "08:59"),  # 진
    ("09:00", "10:59"),  # 사
    ("11:00", "12:59"),  # 오
    ("13:00", "14:59"),  # 미
    ("15:00", "16:59"),  # 신
    ("17:00", "18:59"),  # 유
    ("19:00", "20:59"),  # 술
    ("21:00", "22:59"),  # 해
)


def get_sixty_ganji_list() -> List[str]:
    """60갑자 표준 순서 (갑자부터 1칸씩 증가)"""
    return [f"{CHEONGAN[i % 10]}{JIJI[i % 12]}" for i in range(60)]

SIXTY_GANJI = get_sixty_ganji_list()


def get_stem_branch(index: int) -> Tuple[int, int]:
    """60갑자 오프셋 → (천간인덱스, 지지인덱스)"""
    return index % 10, index % 12


# ===== 기둥 계산 =====

def calc_year_indices(solar_year: int) -> Tuple[int, int]:
    """
    연주 계산 (입춘 보정된 태양년 기준)

    1984년 = 갑자년 기준
    """
    return get_stem_branch(solar_year - YEAR_BASE)


def calc_month_indices(year_stem_index: int, month_index: int) -> Tuple[int, int]:
    """
    월주 계산 (오서둔)

    Args:
        year_stem_index: 연간 인덱스 (0=갑, 1=을, ...)
        month_index: 절기 월 인덱스 (0=인월, 1=묘월, ..., 11=축월)

    Returns:
        (천간인덱스, 지지인덱스)
    """
    branch_index = (MONTH_BRANCH_START_INDEX + month_index) % 12
    stem_start = MONTH_STEM_START_BY_YEAR_STEM[year_stem_index]
    stem_index = (stem_start + month_index) % 10
    return stem_index, branch_index


def calc_hour_branch_index(hour: int) -> int:
    """시 → 지지 인덱스 (23:00~00:59 = 자시)"""
    return ((hour + 1) % 24) // 2


def calc_hour_indices(day_stem_index: int, hour: int) -> Tuple[int, int]:
    """
    시주 계산

    시간 천간 = 일간 기준 자시 천간 + 지지 인덱스
    """
    branch_index = calc_hour_branch_index(hour)
    stem_start = HOUR_STEM_START_BY_DAY_STEM[day_stem_index]
    stem_index = (stem_start + branch_index) % 10
    return stem_index, branch_index


# ===== 오행 =====

def get_element(gan_or_ji: str, is_gan: bool = True) -> Optional[str]:
    """천간/지지의 오행 반환"""
    if is_gan:
        if gan_or_ji in CHEONGAN:
            return STEM_ELEMENT[CHEONGAN.index(gan_or_ji)]
        return None
    return BRANCH_ELEMENT.get(gan_or_ji)


def empty_element_balance() -> Dict[str, int]:
    return {element: 0 for element in ELEMENT_ORDER}


def tally_elements(pillars) -> Dict[str, int]:
    """
    오행 집계

    각 기둥은 천간 오행 1 + 지지 오행 1을 더한다.
    `pillars`는 (천간, 지지) 쌍의 iterable.
    """
    balance = empty_element_balance()
    for stem, branch in pillars:
        stem_element = get_element(stem)
        if stem_element:
            balance[stem_element] += 1
        branch_element = get_element(branch, is_gan=False)
        if branch_element:
            balance[branch_element] += 1
    return balance


def get_element_relation(day_element: str, other_element: str) -> Dict[str, bool]:
    """일간 오행 기준 상대 오행과의 생극 관계"""
    size = len(ELEMENT_ORDER)
    day_idx = ELEMENT_ORDER.index(day_element)
    other_idx = ELEMENT_ORDER.index(other_element)
    return {
        "generates": (day_idx + 1) % size == other_idx,
        "generated_by": (day_idx - 1) % size == other_idx,
        "controls": (day_idx + 2) % size == other_idx,
        "controlled_by": (day_idx - 2) % size == other_idx,
    }


# ===== 십성 =====

def get_ten_god(day_stem_index: int, target_stem_index: int) -> str:
    """
    일간 대비 십성

    같은 음양(인덱스 홀짝 일치) 여부와 오행 생극 관계로 판정한다.
    """
    day_element = STEM_ELEMENT[day_stem_index]
    target_element = STEM_ELEMENT[target_stem_index]
    same_polarity = day_stem_index % 2 == target_stem_index % 2
    relation = get_element_relation(day_element, target_element)

    if day_element == target_element:
        return "비견" if same_polarity else "겁재"
    if relation["generates"]:
        return "식신" if same_polarity else "상관"
    if relation["generated_by"]:
        return "정인" if same_polarity else "편인"
    if relation["controls"]:
        return "정재" if same_polarity else "편재"
    if relation["controlled_by"]:
        return "정관" if same_polarity else "편관"
    return "비견"


def get_hour_options() -> List[dict]:
    """시간대 선택 옵션"""
    options = []
    for index, (start, end) in enumerate(HOUR_RANGES):
        options.append({
            "index": index,
            "ji": JIJI[index],
            "ji_hanja": JIJI_HANJA[index],
            "range_start": start,
            "range_end": end,
            "label": f"{JIJI_HANJA[index]}시 ({JIJI[index]}시) - {start}~{end}",
        })
    return options
