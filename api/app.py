"""
api/app.py — FastAPI 앱 팩토리

create_app() 이 저장소를 만들어 app.state.repos 에 주입하고
쿠키 세션, CORS, 정적 파일, 세션 정리 스레드를 붙인다.
"""

import logging
import os
import threading
import time
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import DATA_FILE, SEED_SAMPLE_DATA, SESSION_TTL, STATIC_DIR, STORAGE_BACKEND
from api.routes import router
from api.sample_data import seed_sample_data
import api.session as session
from talentflow.services.repository import Repositories
from talentflow.services.storage import KeyValueStore, create_store

SESSION_COOKIE = "talentflow_session"
CLEANUP_INTERVAL = 300  # 5분

logger = logging.getLogger(__name__)

_janitor_started = threading.Event()


def _session_janitor() -> None:
    while True:
        time.sleep(CLEANUP_INTERVAL)
        removed = session.cleanup_expired()
        if removed:
            logger.info(f"만료 세션 {removed}개 정리")


def _start_janitor_once() -> None:
    """세션 저장소는 프로세스 전역이므로 정리 스레드도 하나만 띄운다."""
    if _janitor_started.is_set():
        return
    _janitor_started.set()
    threading.Thread(target=_session_janitor, name="session-janitor", daemon=True).start()


def _attach_session_cookie(app: FastAPI) -> None:
    @app.middleware("http")
    async def session_cookie(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()
        request.state.session_id = sid

        response: Response = await call_next(request)
        response.set_cookie(
            SESSION_COOKIE, sid, max_age=SESSION_TTL, httponly=True, samesite="lax",
        )
        return response


def _attach_frontend(app: FastAPI) -> None:
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/")
    async def index():
        index_path = os.path.join(STATIC_DIR, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"app": "TalentFlow Assessments", "ok": True}


def create_app(
    store: Optional[KeyValueStore] = None,
    seed: bool = SEED_SAMPLE_DATA,
    run_timers: bool = True,
) -> FastAPI:
    """
    Args:
        store:      주입할 저장소. 없으면 설정(STORAGE_BACKEND)에 따라 생성.
        seed:       비어 있는 컬렉션에 샘플 데이터 추가 여부.
        run_timers: 응시 타이머 스레드 사용 여부 (테스트에서는 끈다).
    """
    if store is None:
        store = create_store(STORAGE_BACKEND, DATA_FILE)
        logger.info(f"저장소: {STORAGE_BACKEND} ({DATA_FILE})")
    if seed:
        seed_sample_data(store)

    app = FastAPI(title="TalentFlow Assessments", docs_url=None, redoc_url=None)
    app.state.repos = Repositories(store)
    app.state.run_timers = run_timers

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _attach_session_cookie(app)
    app.include_router(router)
    _attach_frontend(app)
    _start_janitor_once()
    return app
