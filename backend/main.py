"""
FastAPI 서버 메인 파일
공부 기록, 통계, 합격 확률 API 와 공부 타이머 WebSocket 을 제공합니다.
"""

import json
import logging
from datetime import datetime

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from config import get_timezone, setup_logging
from timer_handler import ConnectionManager
from routes import study_logs, stats, probability, profile, reference_books
from models.database import init_supabase

logger = logging.getLogger(__name__)

app = FastAPI(title="Study Tracker API", version="1.0.0")

# CORS 설정 (웹 프론트엔드에서 접근 가능하도록)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 프로덕션에서는 특정 도메인만 허용
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 타이머 WebSocket 연결 관리자
manager = ConnectionManager()

# 라우터 등록
app.include_router(study_logs.router, prefix="/api", tags=["study-logs"])
app.include_router(stats.router, prefix="/api", tags=["stats"])
app.include_router(probability.router, prefix="/api", tags=["probability"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
app.include_router(reference_books.router, prefix="/api", tags=["reference-books"])


@app.on_event("startup")
async def startup_event():
    """서버 시작 시 로깅 설정 및 Supabase 초기화"""
    setup_logging()
    init_supabase()
    logger.info("서버가 시작되었습니다.")


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {"message": "Study Tracker API", "status": "running"}


@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {"status": "healthy", "timestamp": datetime.now(get_timezone()).isoformat()}


@app.websocket("/ws/timer")
async def timer_endpoint(websocket: WebSocket):
    """WebSocket 엔드포인트 - 공부 타이머"""
    await manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_personal_message(
                    json.dumps({"type": "error", "message": "JSON 형식이 아닙니다."}), websocket
                )
                continue

            await manager.handle_message(websocket, message)

            # 메시지 처리 중 연결이 끊겼다면 루프 종료
            if websocket not in manager.active_connections:
                break

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:
        logger.exception("WebSocket 오류")
        if websocket in manager.active_connections:
            manager.disconnect(websocket)


if __name__ == "__main__":
    import uvicorn
    from config import HOST, PORT
    uvicorn.run(app, host=HOST, port=PORT)
