"""
합격 확률 계산
편차치(deviation score) 기준으로 계산하며, 시험일까지 남은 일수가 줄어들수록
추정 범위가 좁아집니다.
현재 편차치 = 목표 편차치이면 합격 확률 80% 를 기준으로 합니다.
"""

from datetime import date, datetime
from typing import Dict, Optional

from config import get_timezone
from models.profile import Profile
from utils.helpers import clamp, round_half_up

DEFAULT_DEVIATION = 50
BASE_PROBABILITY = 80
MAX_PROBABILITY = 99

# (남은 일수 하한, 변동폭) - 큰 값부터 검사
DEVIATION_RANGES = [
    (365, 20),  # 1년 이상
    (180, 15),  # 반년 이상
    (90, 10),   # 3개월 이상
    (30, 5),    # 1개월 이상
]

# 이 일수 이하이면 단일값으로 표시
SINGLE_VALUE_DAYS = 30


def default_exam_date(today: date) -> date:
    """기본 시험일: 다음 해 2월 1일"""
    return date(today.year + 1, 2, 1)


def get_deviation_range(days_until_exam: int) -> int:
    for min_days, deviation_range in DEVIATION_RANGES:
        if days_until_exam >= min_days:
            return deviation_range
    return 0  # 1개월 이내: 변동 없음


def calculate_base_probability(current_deviation: float, target_deviation: float) -> float:
    if current_deviation == target_deviation:
        return BASE_PROBABILITY

    if current_deviation > target_deviation:
        # 목표 초과분만큼 올림 (최대 99%)
        excess = current_deviation - target_deviation
        return min(MAX_PROBABILITY, BASE_PROBABILITY + excess * 1.5)

    # 편차치 1 부족할 때마다 2% 감점 (최대 -60)
    gap = target_deviation - current_deviation
    penalty = min(60, gap * 2)
    return max(0, BASE_PROBABILITY - penalty)


def calculate_pass_probability(profile: Profile, today: Optional[date] = None) -> Dict:
    """합격 확률 계산

    Returns:
        probability, min_probability, max_probability, days_until_exam
    """
    if today is None:
        today = datetime.now(get_timezone()).date()

    current_deviation = profile.current_deviation or DEFAULT_DEVIATION
    target_deviation = profile.target_deviation or current_deviation

    exam_date = profile.exam_date or default_exam_date(today)
    days_until_exam = max(0, (exam_date - today).days)

    base_probability = calculate_base_probability(current_deviation, target_deviation)
    deviation_range = get_deviation_range(days_until_exam)

    min_probability = clamp(base_probability - deviation_range, 0, MAX_PROBABILITY)
    max_probability = clamp(base_probability + deviation_range, 0, MAX_PROBABILITY)

    return {
        "probability": round_half_up(base_probability),
        "min_probability": round_half_up(min_probability),
        "max_probability": round_half_up(max_probability),
        "days_until_exam": days_until_exam,
    }


def get_probability_display(probability: int, min_probability: int,
                            max_probability: int, days_until_exam: int) -> Dict:
    """합격 확률 표시 형식

    남은 일수가 30일 이하이면 단일값, 그 외에는 범위로 표시합니다.
    """
    if days_until_exam <= SINGLE_VALUE_DAYS:
        return {"display": f"{probability}%", "is_range": False}

    return {"display": f"{min_probability}-{max_probability}%", "is_range": True}
