"""
프로필 (목표 설정) 관련 API 라우트
"""

import logging

from fastapi import APIRouter, HTTPException

from models.profile import Profile, ProfileUpdate
from models.database import get_profile, update_profile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile/{user_id}", response_model=Profile)
async def read_profile(user_id: str):
    profile = get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="프로필을 찾을 수 없습니다.")
    return profile


@router.put("/profile/{user_id}", response_model=Profile)
async def update_settings(user_id: str, payload: ProfileUpdate):
    """목표 설정 변경"""
    if get_profile(user_id) is None:
        raise HTTPException(status_code=404, detail="프로필을 찾을 수 없습니다.")

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="변경할 항목이 없습니다.")

    try:
        profile = update_profile(user_id, changes)
        logger.info("설정 변경: 사용자 %s (%s)", user_id, ", ".join(sorted(changes)))
        return profile
    except Exception as e:
        logger.exception("설정 변경 실패")
        raise HTTPException(status_code=500, detail=str(e))
