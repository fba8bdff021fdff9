"""
Supabase 데이터베이스 연동 모듈
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from supabase import Client, create_client

import config
from models.profile import Profile
from models.reference_book import ReferenceBook
from models.study_log import StudyLog

logger = logging.getLogger(__name__)

# Supabase 초기화 플래그
_supabase_initialized = False
_supabase_client: Optional[Client] = None

# 참고서가 없는 기록의 기본 과목명
DEFAULT_SUBJECT = "その他"


class DatabaseError(Exception):
    """Supabase 쓰기 결과가 비어 있을 때"""


def init_supabase():
    """Supabase 초기화"""
    global _supabase_initialized, _supabase_client

    if _supabase_initialized:
        return

    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise ValueError(
            "SUPABASE_URL과 SUPABASE_KEY 환경 변수를 설정해주세요.\n"
            "Supabase 프로젝트 설정에서 URL과 anon key를 확인할 수 있습니다."
        )

    _supabase_client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    _supabase_initialized = True
    logger.info("Supabase가 초기화되었습니다.")


def get_db() -> Client:
    """Supabase 클라이언트 인스턴스 반환"""
    if not _supabase_initialized:
        init_supabase()
    return _supabase_client


def _first(response, error_message: str) -> Dict:
    if response.data and len(response.data) > 0:
        return response.data[0]
    raise DatabaseError(error_message)


def _serialize(data: Dict) -> Dict:
    """date/datetime 값을 ISO 형식 문자열로 변환"""
    return {
        key: value.isoformat() if hasattr(value, "isoformat") else value
        for key, value in data.items()
    }


# --- 프로필 ---

def get_profile(user_id: str) -> Optional[Profile]:
    """사용자 프로필 조회"""
    db = get_db()
    response = db.table("profiles").select("*").eq("user_id", user_id).limit(1).execute()

    if response.data and len(response.data) > 0:
        return Profile(**response.data[0])
    return None


def update_profile(user_id: str, changes: Dict) -> Profile:
    """프로필 설정 변경"""
    db = get_db()
    record = _serialize(changes)
    record["updated_at"] = datetime.now().astimezone().isoformat()

    response = db.table("profiles").update(record).eq("user_id", user_id).execute()
    return Profile(**_first(response, "프로필 수정 실패"))


# --- 참고서 ---

def get_reference_books(user_id: str, include_deleted: bool = False) -> List[ReferenceBook]:
    """사용자의 참고서 목록 조회 (기본적으로 삭제된 참고서 제외)"""
    db = get_db()

    query = db.table("reference_books").select("*").eq("user_id", user_id)
    if not include_deleted:
        query = query.is_("deleted_at", "null")
    query = query.order("created_at", desc=False)

    response = query.execute()
    return [ReferenceBook(**row) for row in response.data]


def get_reference_book(book_id: str) -> Optional[ReferenceBook]:
    db = get_db()
    response = db.table("reference_books").select("*").eq("id", book_id).limit(1).execute()

    if response.data and len(response.data) > 0:
        return ReferenceBook(**response.data[0])
    return None


def create_reference_book(book_data: Dict) -> ReferenceBook:
    """참고서 등록"""
    db = get_db()
    record = _serialize(book_data)
    record["name"] = record["name"].strip()

    response = db.table("reference_books").insert(record).execute()
    return ReferenceBook(**_first(response, "참고서 저장 실패"))


def soft_delete_reference_book(book_id: str) -> ReferenceBook:
    """참고서 삭제 (deleted_at 설정, 기존 기록은 유지)"""
    db = get_db()
    now = datetime.now().astimezone().isoformat()

    response = db.table("reference_books")\
        .update({"deleted_at": now, "updated_at": now})\
        .eq("id", book_id)\
        .execute()
    return ReferenceBook(**_first(response, "참고서 삭제 실패"))


# --- 공부 기록 ---

def resolve_subject(book: Optional[ReferenceBook], subject: Optional[str] = None) -> str:
    """기록의 과목명 (참고서 이름 > 직접 입력 > 기본값)"""
    if book is not None and book.name.strip():
        return book.name.strip()
    if subject and subject.strip():
        return subject.strip()
    return DEFAULT_SUBJECT


def save_study_log(log_data: Dict) -> StudyLog:
    """공부 기록을 Supabase에 저장 (1분 미만은 저장하지 않음)"""
    minutes = log_data.get("study_minutes")
    if not isinstance(minutes, int) or minutes < 1:
        raise ValueError("1분 이상의 공부 시간만 기록할 수 있습니다.")

    db = get_db()
    record = {
        "user_id": log_data["user_id"],
        "subject": log_data["subject"],
        "reference_book_id": log_data.get("reference_book_id"),
        "study_minutes": minutes,
        "started_at": log_data["started_at"].isoformat() if isinstance(log_data["started_at"], datetime) else log_data["started_at"],
    }

    response = db.table("study_logs").insert(record).execute()
    log = StudyLog(**_first(response, "공부 기록 저장 실패"))
    logger.info("공부 기록 저장: 사용자 %s, %s %d분", log.user_id, log.subject, log.study_minutes)
    return log


def get_user_study_logs(user_id: str, start_date: Optional[datetime] = None,
                        end_date: Optional[datetime] = None) -> List[StudyLog]:
    """사용자의 공부 기록 조회 ([start_date, end_date) 범위)"""
    db = get_db()

    query = db.table("study_logs").select("*").eq("user_id", user_id)

    if start_date:
        query = query.gte("started_at", start_date.isoformat())
    if end_date:
        query = query.lt("started_at", end_date.isoformat())

    query = query.order("started_at", desc=True)

    response = query.execute()
    return [StudyLog(**row) for row in response.data]


def get_latest_study_log(user_id: str) -> Optional[StudyLog]:
    """가장 최근의 공부 기록"""
    db = get_db()

    response = db.table("study_logs")\
        .select("*")\
        .eq("user_id", user_id)\
        .order("started_at", desc=True)\
        .limit(1)\
        .execute()

    if response.data and len(response.data) > 0:
        return StudyLog(**response.data[0])
    return None


def get_study_log(log_id: str) -> Optional[StudyLog]:
    db = get_db()
    response = db.table("study_logs").select("*").eq("id", log_id).limit(1).execute()

    if response.data and len(response.data) > 0:
        return StudyLog(**response.data[0])
    return None


def update_study_log(log_id: str, changes: Dict) -> StudyLog:
    """공부 기록 수정"""
    minutes = changes.get("study_minutes", 1)
    if not isinstance(minutes, int) or minutes < 1:
        raise ValueError("1분 이상의 공부 시간만 기록할 수 있습니다.")

    db = get_db()
    response = db.table("study_logs").update(_serialize(changes)).eq("id", log_id).execute()
    return StudyLog(**_first(response, "공부 기록 수정 실패"))


def delete_study_log(log_id: str) -> None:
    db = get_db()
    db.table("study_logs").delete().eq("id", log_id).execute()
    logger.info("공부 기록 삭제: %s", log_id)
