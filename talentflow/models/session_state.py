"""
models/session_state.py

평가 응시 진행 상태(RunSession) 모델.
Pydantic BaseModel 기반으로 직렬화와 타입 검증을 맡는다.
UI 코드 없음. 저장소에 기록하지 않는 휘발성 상태이다.

상태 전이:
    NOT_STARTED → IN_PROGRESS → COMPLETED (종료 상태, 되돌릴 수 없음)
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from talentflow.models.question_model import Answer
from talentflow.models.result_model import ScoreResult


class RunPhase(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class RunSession(BaseModel):
    """
    지원자 한 명의 평가 응시 세션 상태.

    Attributes:
        assessment_id:     응시 중인 평가 ID.
        candidate_id:      응시자 ID.
        phase:             진행 단계.
        current_index:     현재 문항 인덱스 (0-based).
        answers:           답안지. {question.id: Answer}
        remaining_seconds: 남은 시간 (초). duration_minutes * 60 에서 시작.
        timed_out:         시간 초과로 자동 제출되었는지 여부.
        result:            COMPLETED 진입 시 채점 결과.
    """

    assessment_id: str
    candidate_id: str
    phase: RunPhase = RunPhase.NOT_STARTED
    current_index: int = Field(
        default=0,
        ge=0,
        description="현재 문항 인덱스 (0-based)"
    )
    answers: Dict[str, Answer] = Field(
        default_factory=dict,
        description="답안지. key: question.id"
    )
    remaining_seconds: int = Field(
        default=0,
        ge=0,
        description="남은 응시 시간 (초)"
    )
    timed_out: bool = False
    result: Optional[ScoreResult] = None

    @property
    def is_started(self) -> bool:
        return self.phase != RunPhase.NOT_STARTED

    @property
    def is_in_progress(self) -> bool:
        return self.phase == RunPhase.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.phase == RunPhase.COMPLETED
