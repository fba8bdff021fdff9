"""
참고서 데이터 모델
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReferenceBook(BaseModel):
    """참고서 모델 (reference_books 테이블)

    deleted_at 이 설정되면 선택 목록에서는 숨기지만 기존 기록은 유지합니다.
    """
    id: str
    user_id: str
    name: str
    image_url: Optional[str] = None
    type: str = "book"
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class ReferenceBookCreate(BaseModel):
    """참고서 등록 요청 모델"""
    user_id: str
    name: str = Field(min_length=1, max_length=100)
    image_url: Optional[str] = None
    type: str = "book"
