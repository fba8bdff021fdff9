"""
애플리케이션 설정
.env 파일과 환경 변수에서 설정값을 읽습니다.
"""

import logging
import os
from pathlib import Path

import pytz
from dotenv import load_dotenv

# .env 파일 로드 (여러 위치에서 검색)
_current_file = Path(__file__).resolve()
_possible_paths = [
    _current_file.parent.parent / ".env",  # 프로젝트 루트
    _current_file.parent / ".env",         # backend/.env
    Path.cwd() / ".env",                   # 현재 작업 디렉토리
]

for _env_path in _possible_paths:
    if _env_path.exists():
        load_dotenv(_env_path)
        break
else:
    load_dotenv()  # 기본 동작


SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Tokyo")

# 하루의 경계 시각 (03:00 ~ 다음날 03:00 을 하루로 취급)
DAY_BOUNDARY_HOUR = int(os.getenv("DAY_BOUNDARY_HOUR", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


def get_timezone():
    """설정된 시간대 객체 반환"""
    return pytz.timezone(APP_TIMEZONE)


def setup_logging():
    """로깅 설정 (앱 시작 시 1회)"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
        root_logger.addHandler(handler)

    # uvicorn 접근 로그는 경고 이상만
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
