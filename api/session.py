"""
api/session.py — 로그인 사용자별 인메모리 UI 세션 (쿠키 기반)

쿠키의 세션 ID 하나에 UiSession 하나가 대응한다.
UiSession 은 로그인 정보(user_id, role)와 작성 중인 평가(builder),
응시 중인 평가(runner)를 들고 있으며 서버 재시작 시 사라진다.
응시 진행 상태는 저장소에 기록하지 않는다.

러너를 교체하거나 세션이 만료·초기화되면 러너 타이머를 해제한다.
"""

import threading
import time
import uuid
from typing import Any, Optional

from config import SESSION_TTL

_FIELDS = ("user_id", "role", "builder", "runner")


class UiSession:
    def __init__(self, user_id: str = "", role: str = "") -> None:
        self.user_id = user_id
        self.role = role
        self.builder = None
        self.runner = None
        self.touched_at = time.time()

    def is_expired(self, now: float) -> bool:
        return now - self.touched_at > SESSION_TTL

    def drop_runner(self) -> None:
        if self.runner is not None:
            self.runner.close()
            self.runner = None


_lock = threading.Lock()
_sessions: dict[str, UiSession] = {}


def create_session() -> str:
    """새 세션을 만들고 세션 ID를 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = UiSession()
    return sid


def get_session(sid: str) -> Optional[UiSession]:
    """유효한 세션을 반환하고 접근 시각을 갱신. 만료되었거나 없으면 None."""
    with _lock:
        state = _sessions.get(sid)
        if state is None:
            return None
        now = time.time()
        if state.is_expired(now):
            state.drop_runner()
            del _sessions[sid]
            return None
        state.touched_at = now
        return state


def get(sid: str, key: str, default=None) -> Any:
    if key not in _FIELDS:
        raise KeyError(key)
    state = get_session(sid)
    if state is None:
        return default
    value = getattr(state, key)
    return default if value in (None, "") else value


def put(sid: str, key: str, value) -> bool:
    """
    세션 필드 쓰기. runner 를 바꾸면 이전 러너의 타이머를 해제한다.
    세션이 없으면(만료) 아무것도 저장하지 않고 False.
    """
    if key not in _FIELDS:
        raise KeyError(key)
    with _lock:
        state = _sessions.get(sid)
        if state is None:
            return False
        if key == "runner" and state.runner is not value:
            state.drop_runner()
        setattr(state, key, value)
        state.touched_at = time.time()
        return True


def sign_in(sid: str, user_id: str, role: str) -> None:
    """로그인. 이전 사용자의 builder / runner 는 버린다."""
    with _lock:
        old = _sessions.get(sid)
        if old is not None:
            old.drop_runner()
        _sessions[sid] = UiSession(user_id, role)


def reset(sid: str) -> None:
    """작성·응시 상태만 초기화 (로그인 정보는 유지)."""
    with _lock:
        state = _sessions.get(sid)
        if state is not None:
            state.drop_runner()
            _sessions[sid] = UiSession(state.user_id, state.role)


def cleanup_expired() -> int:
    """만료된 세션을 정리하고 제거된 수를 반환."""
    now = time.time()
    with _lock:
        expired = [sid for sid, state in _sessions.items() if state.is_expired(now)]
        for sid in expired:
            _sessions.pop(sid).drop_runner()
    return len(expired)
