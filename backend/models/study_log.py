"""
공부 기록 데이터 모델
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class StudyLog(BaseModel):
    """공부 기록 모델 (study_logs 테이블)"""
    id: str
    user_id: str
    subject: str = ""
    reference_book_id: Optional[str] = None
    study_minutes: int = Field(ge=1)  # 1분 미만은 저장하지 않음
    started_at: datetime
    created_at: Optional[datetime] = None


class StudyLogCreate(BaseModel):
    """공부 기록 생성 요청 모델

    수동 입력은 study_date (날짜만) 를, 타이머 기록은 started_at 을 사용합니다.
    """
    user_id: str
    reference_book_id: Optional[str] = None
    subject: Optional[str] = None
    study_minutes: int = Field(ge=1)
    started_at: Optional[datetime] = None
    study_date: Optional[date] = None

    @model_validator(mode="after")
    def _require_time(self):
        if self.started_at is None and self.study_date is None:
            raise ValueError("started_at 또는 study_date 중 하나는 필요합니다.")
        return self


class StudyLogUpdate(BaseModel):
    """공부 기록 수정 요청 모델"""
    reference_book_id: Optional[str] = None
    subject: Optional[str] = None
    study_minutes: Optional[int] = Field(None, ge=1)
    study_date: Optional[date] = None

    @field_validator("study_minutes")
    @classmethod
    def _reject_null_minutes(cls, value):
        # 생략은 허용, 명시적인 null 은 거부
        if value is None:
            raise ValueError("study_minutes는 1 이상의 정수여야 합니다.")
        return value
