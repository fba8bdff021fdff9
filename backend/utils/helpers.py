"""
유틸리티 헬퍼 함수
"""

import math


def round_half_up(value: float) -> int:
    """0.5 는 항상 올림 (파이썬 round() 의 짝수 반올림 대신)"""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def format_minutes(minutes: int) -> str:
    """분을 "1시간 30분" 형식으로 표시"""
    hours, mins = divmod(int(minutes), 60)
    if hours > 0 and mins > 0:
        return f"{hours}시간 {mins}분"
    if hours > 0:
        return f"{hours}시간"
    return f"{mins}분"
