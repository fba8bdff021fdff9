"""
합격 확률 관련 API 라우트
"""

import logging

from fastapi import APIRouter, HTTPException

from models.database import get_profile, get_user_study_logs, get_latest_study_log
from utils.probability import calculate_pass_probability, get_probability_display
from utils.probability_explanation import (
    HISTORY_PERIODS,
    build_probability_history,
    calculate_probability_drop_without_study,
    calculate_required_daily_study,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _load_profile(user_id: str):
    profile = get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="프로필을 찾을 수 없습니다.")
    return profile


@router.get("/probability/{user_id}")
async def get_pass_probability(user_id: str):
    """합격 확률과 표시 형식"""
    profile = _load_profile(user_id)

    result = calculate_pass_probability(profile)
    result.update(get_probability_display(
        result["probability"],
        result["min_probability"],
        result["max_probability"],
        result["days_until_exam"],
    ))
    return result


@router.get("/probability/{user_id}/simulation")
async def get_probability_simulation(user_id: str):
    """공부하지 않았을 때의 확률 변화와 필요한 하루 공부 시간"""
    profile = _load_profile(user_id)

    try:
        logs = get_user_study_logs(user_id)
        latest = get_latest_study_log(user_id)
        return {
            "required_daily_study": calculate_required_daily_study(profile, logs),
            "drop_without_study": calculate_probability_drop_without_study(profile, logs, latest),
        }
    except Exception as e:
        logger.exception("확률 시뮬레이션 실패")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/probability/{user_id}/history")
async def get_probability_history(user_id: str, days: int = 30):
    """최근 days 일의 합격 확률 추이"""
    if days not in HISTORY_PERIODS:
        raise HTTPException(
            status_code=400,
            detail=f"days는 {', '.join(str(d) for d in HISTORY_PERIODS)} 중 하나여야 합니다."
        )

    profile = _load_profile(user_id)

    try:
        logs = get_user_study_logs(user_id)
        return {
            "days": days,
            "history": build_probability_history(profile, logs, days),
        }
    except Exception as e:
        logger.exception("확률 추이 조회 실패")
        raise HTTPException(status_code=500, detail=str(e))
