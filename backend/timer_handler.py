"""
공부 타이머 WebSocket 연결 관리 및 메시지 처리
타이머 상태는 사용자별로 서버에 보관되므로, 연결이 끊겨도 다시 연결하면 이어서 측정합니다.
"""

import json
import logging
import random
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

from fastapi import WebSocket

from config import get_timezone
from models.database import get_reference_book, resolve_subject, save_study_log

logger = logging.getLogger(__name__)


def encouragement_message(seconds: int) -> str:
    """경과 시간에 따른 응원 메시지"""
    minutes = seconds // 60
    if minutes == 0:
        return "공부를 시작해 봅시다!"
    if minutes < 30:
        return f"{minutes}분 경과! 이 기세로 계속해요!"
    if minutes < 60:
        return f"{minutes}분째 집중하고 있어요! 대단해요!"
    return f"{minutes // 60}시간 이상! 정말 열심히 하고 있네요!"


def saved_message(subject: str, minutes: int) -> str:
    messages = [
        f"{subject}을(를) {minutes}분 공부했어요! 훌륭해요!",
        f"{minutes}분 공부, 수고했어요! 합격에 한 걸음 더 가까워졌어요!",
        f"{subject}을(를) {minutes}분 열심히 했네요! 이대로 계속해요!",
        f"{minutes}분 기록 완료! 연속 기록을 이어가 봐요!",
    ]
    return random.choice(messages)


class StudyTimer:
    """스톱워치 상태

    elapsed = 누적 시간 + (실행 중이면 현재 구간의 경과 시간)
    """

    def __init__(self, user_id: str, reference_book_id: Optional[str] = None):
        self.user_id = user_id
        self.reference_book_id = reference_book_id
        self.first_started_at: Optional[datetime] = None
        self.running_since: Optional[datetime] = None
        self.accumulated_seconds = 0

    @property
    def is_running(self) -> bool:
        return self.running_since is not None

    def start(self, now: datetime):
        if self.is_running:
            return
        if self.first_started_at is None:
            self.first_started_at = now
        self.running_since = now

    def pause(self, now: datetime):
        if not self.is_running:
            return
        self.accumulated_seconds += max(0, int((now - self.running_since).total_seconds()))
        self.running_since = None

    def elapsed_seconds(self, now: datetime) -> int:
        seconds = self.accumulated_seconds
        if self.is_running:
            seconds += max(0, int((now - self.running_since).total_seconds()))
        return seconds

    def stop(self, now: datetime) -> int:
        """정지하고 기록할 공부 시간 (분, 내림) 을 반환"""
        self.pause(now)
        return self.accumulated_seconds // 60

    def to_dict(self, now: datetime) -> Dict:
        seconds = self.elapsed_seconds(now)
        return {
            "user_id": self.user_id,
            "reference_book_id": self.reference_book_id,
            "is_running": self.is_running,
            "seconds": seconds,
            "started_at": self.first_started_at.isoformat() if self.first_started_at else None,
            "message": encouragement_message(seconds),
        }


class ConnectionManager:
    """WebSocket 연결 관리자"""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.active_connections: List[WebSocket] = []
        self.client_users: Dict[WebSocket, Optional[str]] = {}
        self.timers: Dict[str, StudyTimer] = {}
        self._clock = clock or (lambda: datetime.now(get_timezone()))

    async def connect(self, websocket: WebSocket):
        """클라이언트 연결"""
        await websocket.accept()
        self.active_connections.append(websocket)
        self.client_users[websocket] = None
        logger.info("클라이언트 연결됨. 총 연결 수: %d", len(self.active_connections))

    def disconnect(self, websocket: WebSocket):
        """클라이언트 연결 해제 (타이머는 유지)"""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        self.client_users.pop(websocket, None)
        logger.info("클라이언트 연결 해제됨. 총 연결 수: %d", len(self.active_connections))

    async def send_personal_message(self, message: str, websocket: WebSocket):
        """특정 클라이언트에게 메시지 전송"""
        try:
            await websocket.send_text(message)
        except Exception as e:
            logger.warning("메시지 전송 실패: %s", e)
            self.disconnect(websocket)

    async def _reply(self, websocket: WebSocket, msg_type: str, **payload):
        response = {"type": msg_type, **payload, "timestamp": time.time()}
        await self.send_personal_message(json.dumps(response, default=str), websocket)

    def _finalize_timer(self, timer: StudyTimer, now: datetime) -> Optional[Dict]:
        """타이머를 정지하고 1분 이상이면 공부 기록으로 저장"""
        minutes = timer.stop(now)
        if minutes < 1:
            return None

        book = get_reference_book(timer.reference_book_id) if timer.reference_book_id else None
        log = save_study_log({
            "user_id": timer.user_id,
            "subject": resolve_subject(book),
            "reference_book_id": timer.reference_book_id,
            "study_minutes": minutes,
            "started_at": timer.first_started_at,
        })
        return log.model_dump(mode="json")

    async def handle_message(self, websocket: WebSocket, message: Dict):
        """받은 메시지 처리"""
        msg_type = message.get("type")
        if websocket not in self.client_users:
            return

        if msg_type == "ping":
            await self._reply(websocket, "pong")
            return

        user_id = message.get("user_id") or self.client_users.get(websocket)
        if not user_id:
            await self._reply(websocket, "error", message="user_id가 필요합니다.")
            return
        self.client_users[websocket] = user_id

        now = self._clock()
        timer = self.timers.get(user_id)

        if msg_type == "timer_start":
            book_id = message.get("reference_book_id")
            if timer is None:
                timer = StudyTimer(user_id, book_id)
                self.timers[user_id] = timer
            elif "reference_book_id" in message and book_id != timer.reference_book_id:
                if timer.is_running:
                    await self._reply(websocket, "error",
                                      message="측정 중에는 참고서를 바꿀 수 없습니다. 먼저 일시정지하세요.",
                                      timer=timer.to_dict(now))
                    return
                timer.reference_book_id = book_id
            timer.start(now)
            await self._reply(websocket, "timer_started", timer=timer.to_dict(now))
            logger.info("타이머 시작: 사용자 %s", user_id)

        elif timer is None:
            await self._reply(websocket, "timer_status", timer=None)

        elif msg_type == "timer_pause":
            timer.pause(now)
            await self._reply(websocket, "timer_paused", timer=timer.to_dict(now))

        elif msg_type == "timer_resume":
            timer.start(now)
            await self._reply(websocket, "timer_resumed", timer=timer.to_dict(now))

        elif msg_type == "timer_status":
            await self._reply(websocket, "timer_status", timer=timer.to_dict(now))

        elif msg_type == "timer_stop":
            seconds = timer.elapsed_seconds(now)
            try:
                log = self._finalize_timer(timer, now)
            except Exception as e:
                # 저장 실패 시 타이머는 정지 상태로 유지
                logger.exception("공부 기록 저장 실패")
                await self._reply(websocket, "error", message=f"저장에 실패했습니다: {e}",
                                  timer=timer.to_dict(now))
                return

            del self.timers[user_id]
            if log is None:
                await self._reply(
                    websocket, "timer_discarded",
                    message=f"1분 이상의 공부 시간을 기록해주세요 (현재: {seconds}초)",
                    seconds=seconds,
                )
                return

            await self._reply(
                websocket, "timer_saved",
                message=saved_message(log["subject"], log["study_minutes"]),
                study_log=log,
            )
            logger.info("타이머 종료: 사용자 %s, %d분", user_id, log["study_minutes"])

        else:
            await self._reply(websocket, "error", message=f"알 수 없는 메시지: {msg_type}")
