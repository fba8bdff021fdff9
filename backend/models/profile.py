"""
사용자 프로필 (목표 설정) 데이터 모델
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DATE_FIELDS = ("exam_date", "today_target_date", "week_target_date", "month_target_date")


def _date_only(value):
    """시간 부분을 버리고 날짜만 사용 (시간대에 따른 날짜 밀림 방지)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return value.split("T")[0] or None
    return value


class Profile(BaseModel):
    """프로필 모델 (profiles 테이블)"""
    user_id: str
    school_name: Optional[str] = None
    current_deviation: Optional[float] = None
    target_deviation: Optional[float] = None
    exam_date: Optional[date] = None

    weekday_target_minutes: Optional[int] = None
    weekend_target_minutes: Optional[int] = None
    today_target_minutes: Optional[int] = None
    today_target_date: Optional[date] = None
    week_target_minutes: Optional[int] = None
    week_target_date: Optional[date] = None
    month_target_minutes: Optional[int] = None
    month_target_date: Optional[date] = None

    avatar_url: Optional[str] = None
    onboarding_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _strip_time(cls, value):
        return _date_only(value)


class ProfileUpdate(BaseModel):
    """설정 변경 요청 모델"""
    school_name: Optional[str] = None
    current_deviation: Optional[float] = Field(None, gt=0, le=100)
    target_deviation: Optional[float] = Field(None, gt=0, le=100)
    exam_date: Optional[date] = None

    weekday_target_minutes: Optional[int] = Field(None, ge=1, le=1440)
    weekend_target_minutes: Optional[int] = Field(None, ge=1, le=1440)
    today_target_minutes: Optional[int] = Field(None, ge=1, le=1440)
    today_target_date: Optional[date] = None
    week_target_minutes: Optional[int] = Field(None, ge=1)
    week_target_date: Optional[date] = None
    month_target_minutes: Optional[int] = Field(None, ge=1)
    month_target_date: Optional[date] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _strip_time(cls, value):
        return _date_only(value)
