"""
참고서 관련 API 라우트
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from models.reference_book import ReferenceBook, ReferenceBookCreate
from models.database import (
    get_reference_books,
    get_reference_book,
    create_reference_book,
    soft_delete_reference_book,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/reference-books/{user_id}", response_model=List[ReferenceBook])
async def list_reference_books(user_id: str, include_deleted: bool = False):
    """참고서 목록 (삭제된 참고서는 include_deleted 일 때만)"""
    try:
        return get_reference_books(user_id, include_deleted)
    except Exception as e:
        logger.exception("참고서 목록 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/reference-books", response_model=ReferenceBook, status_code=201)
async def add_reference_book(payload: ReferenceBookCreate):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="참고서 이름을 입력해주세요.")

    try:
        return create_reference_book(payload.model_dump())
    except Exception as e:
        logger.exception("참고서 등록 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/reference-books/{book_id}", response_model=ReferenceBook)
async def delete_reference_book(book_id: str):
    """참고서 삭제 (기존 공부 기록은 유지)"""
    book = get_reference_book(book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="참고서를 찾을 수 없습니다.")
    if book.is_deleted:
        return book

    try:
        return soft_delete_reference_book(book_id)
    except Exception as e:
        logger.exception("참고서 삭제 실패")
        raise HTTPException(status_code=500, detail=str(e))
