"""
날짜 판정 유틸리티
하루의 경계를 자정이 아닌 03:00 으로 관리합니다. (03:00 ~ 다음날 03:00)

모든 함수는 현재 시각(now)과 시간대(tz)를 인자로 받을 수 있으며,
생략하면 설정된 시간대의 현재 시각을 사용합니다.
naive datetime 은 설정된 시간대의 현지 시각으로 해석합니다.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple, Union

import config
from config import get_timezone


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Supabase 타임스탬프 문자열을 datetime 으로 변환"""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def ensure_aware(value: Union[str, datetime], tz=None) -> datetime:
    """시간대 정보가 있는 datetime 반환 (naive 는 현지 시각으로 간주)"""
    value = parse_timestamp(value)
    if value.tzinfo is None:
        return (tz or get_timezone()).localize(value)
    return value


def _local_now(now: Optional[datetime] = None, tz=None) -> datetime:
    """현지 시각을 naive datetime 으로 반환"""
    tz = tz or get_timezone()
    if now is None:
        return datetime.now(tz).replace(tzinfo=None)
    if now.tzinfo is None:
        return now
    return now.astimezone(tz).replace(tzinfo=None)


def _localize(naive: datetime, tz=None) -> datetime:
    return (tz or get_timezone()).localize(naive)


def _today_start_local(now: Optional[datetime] = None, tz=None) -> datetime:
    local = _local_now(now, tz)
    start = local.replace(hour=config.DAY_BOUNDARY_HOUR, minute=0, second=0, microsecond=0)

    # 03:00 이전 (자정 ~ 02:59) 이면 전날의 03:00
    if local.hour < config.DAY_BOUNDARY_HOUR:
        start -= timedelta(days=1)
    return start


def get_study_day(value: Union[str, datetime], tz=None) -> str:
    """주어진 시각이 속하는 "공부일" (YYYY-MM-DD)

    예: 1월 26일 02:00 → 1월 25일의 기록으로 취급
    """
    local = _local_now(ensure_aware(value, tz), tz)
    if local.hour < config.DAY_BOUNDARY_HOUR:
        local -= timedelta(days=1)
    return local.date().isoformat()


def study_date_to_timestamp(study_date: date, tz=None) -> datetime:
    """수동 입력 날짜를 그 날 12:00 으로 변환 (해당 공부일에 확실히 포함되도록)"""
    return _localize(datetime.combine(study_date, time(12, 0)), tz)


def get_today_date(now: Optional[datetime] = None, tz=None) -> date:
    """현재 "공부일"의 달력 날짜"""
    return _today_start_local(now, tz).date()


def get_today_start(now: Optional[datetime] = None, tz=None) -> datetime:
    """오늘의 시작 시각 (가장 최근의 03:00)"""
    return _localize(_today_start_local(now, tz), tz)


def get_week_start(offset: int = 0, now: Optional[datetime] = None, tz=None) -> datetime:
    """offset 주 전의 월요일 00:00

    Args:
        offset: 0 = 이번 주, 1 = 지난주, 2 = 2주 전 ...
    """
    today_start = _today_start_local(now, tz)
    days_to_monday = today_start.weekday()  # 월요일 = 0, 일요일 = 6

    week_start = today_start - timedelta(days=days_to_monday + offset * 7)
    week_start = week_start.replace(hour=0, minute=0, second=0, microsecond=0)
    return _localize(week_start, tz)


def get_month_start(offset: int = 0, now: Optional[datetime] = None, tz=None) -> datetime:
    """offset 개월 전의 1일 00:00

    Args:
        offset: 0 = 이번 달, 1 = 지난달 ... (음수면 이후 달)
    """
    today_start = _today_start_local(now, tz)
    month_index = today_start.year * 12 + (today_start.month - 1) - offset
    year, month = divmod(month_index, 12)
    return _localize(datetime(year, month + 1, 1), tz)


def is_in_period(value: Union[str, datetime], period_start: datetime) -> bool:
    """value 가 period_start 이후인지 판정 (하한만 검사)"""
    return ensure_aware(value) >= ensure_aware(period_start)


def get_day_range(offset: int = 0, now: Optional[datetime] = None, tz=None) -> Tuple[datetime, datetime]:
    """offset 일 전 공부일의 [시작, 끝) 범위"""
    start = _today_start_local(now, tz) - timedelta(days=offset)
    end = start + timedelta(days=1)
    return _localize(start, tz), _localize(end, tz)


def get_week_range(offset: int = 0, now: Optional[datetime] = None, tz=None) -> Tuple[datetime, datetime]:
    """offset 주 전의 [월요일 00:00, 다음 월요일 00:00) 범위"""
    start = get_week_start(offset, now, tz)
    end = start.replace(tzinfo=None) + timedelta(days=7)
    return start, _localize(end, tz)


def get_month_range(offset: int = 0, now: Optional[datetime] = None, tz=None) -> Tuple[datetime, datetime]:
    """offset 개월 전의 [1일 00:00, 다음 달 1일 00:00) 범위"""
    return get_month_start(offset, now, tz), get_month_start(offset - 1, now, tz)
