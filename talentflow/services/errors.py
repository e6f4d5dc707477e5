"""
services/errors.py

서비스 계층 예외. 라우트에서 HTTP 상태 코드로 변환한다.
"""


class NotFoundError(LookupError):
    """문서(평가, 지원서, 공고)를 찾을 수 없음."""


class PersistenceError(RuntimeError):
    """저장소 읽기/쓰기 실패."""


class InvalidTransitionError(RuntimeError):
    """현재 응시 단계에서 허용되지 않는 동작."""


class ScoringError(ValueError):
    """채점 불가능한 입력 (예: 총 배점 0)."""
