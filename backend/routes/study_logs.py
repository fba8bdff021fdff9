"""
공부 기록 관련 API 라우트
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from models.study_log import StudyLog, StudyLogCreate, StudyLogUpdate
from models.database import (
    get_user_study_logs,
    get_study_log,
    get_reference_book,
    save_study_log,
    update_study_log,
    delete_study_log,
    resolve_subject,
)
from utils.date_utils import ensure_aware, study_date_to_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_book(book_id: Optional[str], user_id: str):
    if not book_id:
        return None
    book = get_reference_book(book_id)
    if book is None or book.user_id != user_id:
        raise HTTPException(status_code=404, detail="참고서를 찾을 수 없습니다.")
    return book


@router.get("/study-logs/{user_id}", response_model=List[StudyLog])
async def get_study_logs(
    user_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    limit: int = 100
):
    """사용자의 공부 기록 목록 조회"""
    try:
        start = ensure_aware(start_date) if start_date else None
        end = ensure_aware(end_date) if end_date else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        logs = get_user_study_logs(user_id, start, end)
        return logs[:limit]
    except Exception as e:
        logger.exception("공부 기록 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/study-logs", response_model=StudyLog, status_code=201)
async def create_study_log(payload: StudyLogCreate):
    """공부 기록 수동 입력"""
    book = _find_book(payload.reference_book_id, payload.user_id)
    if book is not None and book.is_deleted:
        raise HTTPException(status_code=400, detail="삭제된 참고서에는 기록할 수 없습니다.")

    if payload.study_date is not None:
        started_at = study_date_to_timestamp(payload.study_date)
    else:
        started_at = ensure_aware(payload.started_at)

    try:
        return save_study_log({
            "user_id": payload.user_id,
            "subject": resolve_subject(book, payload.subject),
            "reference_book_id": book.id if book else None,
            "study_minutes": payload.study_minutes,
            "started_at": started_at,
        })
    except Exception as e:
        logger.exception("공부 기록 저장 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/study-logs/{log_id}", response_model=StudyLog)
async def edit_study_log(log_id: str, payload: StudyLogUpdate):
    """공부 기록 수정"""
    existing = get_study_log(log_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="공부 기록을 찾을 수 없습니다.")

    changes = payload.model_dump(exclude_unset=True)

    if "reference_book_id" in changes or "subject" in changes:
        book = _find_book(changes.get("reference_book_id", existing.reference_book_id), existing.user_id)
        # 이미 연결된 참고서는 삭제된 뒤에도 유지 가능
        if book is not None and book.is_deleted and book.id != existing.reference_book_id:
            raise HTTPException(status_code=400, detail="삭제된 참고서에는 기록할 수 없습니다.")
        changes["reference_book_id"] = book.id if book else None
        changes["subject"] = resolve_subject(book, changes.get("subject", existing.subject))

    study_date = changes.pop("study_date", None)
    if study_date is not None:
        changes["started_at"] = study_date_to_timestamp(study_date)

    if not changes:
        return existing

    try:
        return update_study_log(log_id, changes)
    except Exception as e:
        logger.exception("공부 기록 수정 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/study-logs/{log_id}", status_code=204)
async def remove_study_log(log_id: str):
    """공부 기록 삭제"""
    if get_study_log(log_id) is None:
        raise HTTPException(status_code=404, detail="공부 기록을 찾을 수 없습니다.")

    try:
        delete_study_log(log_id)
    except Exception as e:
        logger.exception("공부 기록 삭제 실패")
        raise HTTPException(status_code=500, detail=str(e))
