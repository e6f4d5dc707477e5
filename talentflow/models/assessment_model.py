"""
models/assessment_model.py

채용 담당자가 작성하는 평가(Assessment) 문서 모델.
문항 순서가 곧 출제 순서이다.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from config import DEFAULT_DURATION_MINUTES, DEFAULT_PASSING_SCORE
from talentflow.models.question_model import Question


class AssessmentStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"


class AssessmentCategory(str, Enum):
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    COGNITIVE = "cognitive"
    PERSONALITY = "personality"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Assessment(BaseModel):
    """
    평가 문서.

    Attributes:
        duration_minutes:      응시 제한 시간 (분). 러너 타이머의 기준.
        passing_score_percent: 합격 기준 (0~100). 환산 점수가 이 값 이상이면 합격.
        questions:             문항 리스트 (순서 유지).
        job_id / job_title / company / owner_id:
                               채용 공고와의 연결 정보 (비정규화 사본).
        status:                draft → active (단방향). active만 응시 가능.
        created_at:            생성 시각. 이후 변경 불가.
    """

    id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    category: AssessmentCategory = AssessmentCategory.TECHNICAL
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, gt=0)
    passing_score_percent: int = Field(DEFAULT_PASSING_SCORE, ge=0, le=100)
    questions: List[Question] = Field(default_factory=list)
    job_id: str
    job_title: str = ""
    company: str = ""
    owner_id: str
    status: AssessmentStatus = AssessmentStatus.DRAFT
    created_at: str = Field(default_factory=utc_now_iso)

    @property
    def is_active(self) -> bool:
        return self.status == AssessmentStatus.ACTIVE

    @property
    def max_points(self) -> int:
        return sum(q.points for q in self.questions)

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60

    def find_question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None
