"""
통계 관련 API 라우트
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from models.database import get_user_study_logs, get_profile, get_reference_books
from utils.aggregation import (
    PERIODS,
    build_past_goals,
    build_period_stats,
    build_reference_book_breakdown,
    build_share_text,
    build_summary,
    get_period_range,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_period(period: str):
    if period not in PERIODS:
        raise HTTPException(
            status_code=400,
            detail="period는 'day', 'week', 'month' 중 하나여야 합니다."
        )


@router.get("/stats/{user_id}/summary")
async def get_user_summary(user_id: str):
    """오늘 / 이번 주 / 이번 달 / 누적 공부 시간"""
    try:
        logs = get_user_study_logs(user_id)
        summary = build_summary(logs)
        summary["share_text"] = build_share_text(summary)
        return summary
    except Exception as e:
        logger.exception("통계 요약 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/{user_id}/goals")
async def get_past_goals(user_id: str):
    """지난 30일 / 12주 / 12개월의 목표 달성률"""
    try:
        logs = get_user_study_logs(user_id)
        profile = get_profile(user_id)
        return build_past_goals(logs, profile)
    except Exception as e:
        logger.exception("목표 달성 기록 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/{user_id}/reference-books")
async def get_reference_book_stats(
    user_id: str,
    period: Optional[str] = None,
    offset: int = 0
):
    """참고서별 공부 시간 (period 를 생략하면 전체 기간)"""
    start = end = None
    if period is not None:
        _check_period(period)
        start, end = get_period_range(period, offset)

    try:
        logs = get_user_study_logs(user_id)
        books = get_reference_books(user_id, include_deleted=True)
        return {
            "start": start,
            "end": end,
            "books": build_reference_book_breakdown(logs, books, start, end),
        }
    except Exception as e:
        logger.exception("참고서별 통계 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/{user_id}/{period}/{offset}")
async def get_period_stats(user_id: str, period: str, offset: int):
    """offset 만큼 이전의 일/주/월 공부 시간과 목표 달성률

    Args:
        period: 'day', 'week', 'month' 중 하나
        offset: 0 = 현재, 1 = 이전 ...
    """
    _check_period(period)

    try:
        logs = get_user_study_logs(user_id)
        profile = get_profile(user_id)
        return build_period_stats(logs, period, offset, profile)
    except Exception as e:
        logger.exception("기간 통계 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))
