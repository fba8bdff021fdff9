"""
공부 시간 집계
모든 범위는 [start, end) 반열린 구간이므로 경계의 기록이 두 번 집계되지 않습니다.
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

from models.profile import Profile
from models.reference_book import ReferenceBook
from models.study_log import StudyLog
from utils.date_utils import (
    ensure_aware,
    get_day_range,
    get_month_range,
    get_week_range,
    is_in_period,
)
from utils.helpers import format_minutes, round_half_up

DEFAULT_WEEKDAY_TARGET = 60
DEFAULT_WEEKEND_TARGET = 120
# 프로필이 없을 때의 기본값 (60분 x 7일, 60분 x 30일)
DEFAULT_WEEK_TARGET = 420
DEFAULT_MONTH_TARGET = 1800

PERIODS = ("day", "week", "month")

PAST_DAYS = 30
PAST_WEEKS = 12
PAST_MONTHS = 12


def sum_minutes_in_range(logs: List[StudyLog], start: datetime, end: datetime) -> int:
    """[start, end) 범위에 시작한 기록의 공부 시간 합계"""
    start, end = ensure_aware(start), ensure_aware(end)
    return sum(
        log.study_minutes for log in logs
        if start <= ensure_aware(log.started_at) < end
    )


def sum_minutes_since(logs: List[StudyLog], period_start: datetime) -> int:
    return sum(log.study_minutes for log in logs if is_in_period(log.started_at, period_start))


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def get_daily_target_for_date(day: Union[date, datetime], profile: Optional[Profile]) -> int:
    """해당 날짜의 목표 시간 (당일 지정값 > 평일/주말 기본값)"""
    if profile is None:
        return DEFAULT_WEEKDAY_TARGET

    day = _as_date(day)
    if day.weekday() >= 5:  # 토, 일
        default_target = profile.weekend_target_minutes
        if default_target is None:
            default_target = DEFAULT_WEEKEND_TARGET
    else:
        default_target = profile.weekday_target_minutes
        if default_target is None:
            default_target = DEFAULT_WEEKDAY_TARGET

    if profile.today_target_date == day and profile.today_target_minutes:
        return profile.today_target_minutes

    return default_target


def _sum_daily_targets(first_day: date, end_day: date, profile: Profile) -> int:
    total = 0
    cursor = first_day
    while cursor < end_day:
        total += get_daily_target_for_date(cursor, profile)
        cursor += timedelta(days=1)
    return total


def get_week_target(week_start: Union[date, datetime], profile: Optional[Profile]) -> int:
    """주간 목표 (해당 주의 지정값이 없으면 일별 목표의 합계)"""
    if profile is None:
        return DEFAULT_WEEK_TARGET

    week_start = _as_date(week_start)
    if profile.week_target_date == week_start and profile.week_target_minutes:
        return profile.week_target_minutes

    return _sum_daily_targets(week_start, week_start + timedelta(days=7), profile)


def get_month_target(month_start: Union[date, datetime], profile: Optional[Profile]) -> int:
    """월간 목표 (해당 월의 지정값이 없으면 일별 목표의 합계)"""
    if profile is None:
        return DEFAULT_MONTH_TARGET

    month_start = _as_date(month_start)
    if profile.month_target_date == month_start and profile.month_target_minutes:
        return profile.month_target_minutes

    if month_start.month == 12:
        month_end = date(month_start.year + 1, 1, 1)
    else:
        month_end = date(month_start.year, month_start.month + 1, 1)
    return _sum_daily_targets(month_start, month_end, profile)


def calculate_progress(actual: int, target: int) -> int:
    """달성률 (%) - 최대 100"""
    return min(100, round_half_up(actual / max(1, target) * 100))


def get_period_range(period: str, offset: int = 0, now: Optional[datetime] = None, tz=None):
    if period == "day":
        return get_day_range(offset, now, tz)
    if period == "week":
        return get_week_range(offset, now, tz)
    if period == "month":
        return get_month_range(offset, now, tz)
    raise ValueError(f"알 수 없는 기간: {period}")


def get_period_target(period: str, start: datetime, profile: Optional[Profile]) -> int:
    if period == "day":
        return get_daily_target_for_date(start, profile)
    if period == "week":
        return get_week_target(start, profile)
    return get_month_target(start, profile)


def build_period_stats(logs: List[StudyLog], period: str, offset: int = 0,
                       profile: Optional[Profile] = None,
                       now: Optional[datetime] = None, tz=None) -> Dict:
    """offset 만큼 이전의 일/주/월 단위 실적과 목표"""
    start, end = get_period_range(period, offset, now, tz)
    actual = sum_minutes_in_range(logs, start, end)
    target = get_period_target(period, start, profile)

    return {
        "period": period,
        "offset": offset,
        "start": start,
        "end": end,
        "actual": actual,
        "target": target,
        "progress": calculate_progress(actual, target),
    }


def build_summary(logs: List[StudyLog], now: Optional[datetime] = None, tz=None) -> Dict:
    """오늘 / 이번 주 / 이번 달 / 누적 공부 시간"""
    today_minutes = sum_minutes_in_range(logs, *get_day_range(0, now, tz))
    week_minutes = sum_minutes_in_range(logs, *get_week_range(0, now, tz))
    month_minutes = sum_minutes_in_range(logs, *get_month_range(0, now, tz))
    total_minutes = sum(log.study_minutes for log in logs)

    return {
        "today_minutes": today_minutes,
        "this_week_minutes": week_minutes,
        "this_month_minutes": month_minutes,
        "total_minutes": total_minutes,
        "log_count": len(logs),
    }


def build_share_text(summary: Dict) -> str:
    return (
        f"오늘 공부: {format_minutes(summary['today_minutes'])} / "
        f"이번 달: {format_minutes(summary['this_month_minutes'])} / "
        f"누적: {format_minutes(summary['total_minutes'])}"
    )


def build_past_goals(logs: List[StudyLog], profile: Optional[Profile],
                     now: Optional[datetime] = None, tz=None) -> Dict:
    """지난 30일, 12주, 12개월의 목표 달성 기록"""
    if profile is None:
        return {"days": [], "weeks": [], "months": []}

    return {
        "days": [build_period_stats(logs, "day", i, profile, now, tz)
                 for i in range(1, PAST_DAYS + 1)],
        "weeks": [build_period_stats(logs, "week", i, profile, now, tz)
                  for i in range(1, PAST_WEEKS + 1)],
        "months": [build_period_stats(logs, "month", i, profile, now, tz)
                   for i in range(1, PAST_MONTHS + 1)],
    }


def build_reference_book_breakdown(logs: List[StudyLog], books: List[ReferenceBook],
                                   start: Optional[datetime] = None,
                                   end: Optional[datetime] = None) -> List[Dict]:
    """참고서별 공부 시간 (참고서가 없는 기록은 subject 기준)

    books 에는 삭제된 참고서도 포함해야 과거 기록이 집계됩니다.
    """
    books_by_id = {book.id: book for book in books}
    totals: Dict[str, Dict] = {}

    for log in logs:
        started_at = ensure_aware(log.started_at)
        if start is not None and started_at < ensure_aware(start):
            continue
        if end is not None and started_at >= ensure_aware(end):
            continue

        if log.reference_book_id:
            book = books_by_id.get(log.reference_book_id)
            if book is None:
                continue
            key, name = book.id, book.name
        elif log.subject:
            key, name = f"subject_{log.subject}", log.subject
        else:
            continue

        entry = totals.setdefault(key, {"key": key, "name": name, "minutes": 0})
        entry["minutes"] += log.study_minutes

    total_minutes = sum(entry["minutes"] for entry in totals.values())
    breakdown = []
    for entry in totals.values():
        if entry["minutes"] <= 0:
            continue
        entry["percentage"] = round_half_up(entry["minutes"] / total_minutes * 100)
        breakdown.append(entry)

    return sorted(breakdown, key=lambda x: x["minutes"], reverse=True)
