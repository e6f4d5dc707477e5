"""
models/application_model.py

지원자 ↔ 채용 공고 연결 레코드 + 평가 결과 필드.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from talentflow.models.assessment_model import utc_now_iso


class ApplicationStatus(str, Enum):
    APPLIED = "Applied"
    ASSESSMENT_REQUIRED = "Assessment Required"
    ASSESSMENT_COMPLETED = "Assessment Completed"
    ASSESSMENT_FAILED = "Assessment Failed"
    UNDER_REVIEW = "Under Review"
    SHORTLISTED = "Shortlisted"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    HIRED = "Hired"
    REJECTED = "Rejected"


class Application(BaseModel):
    """
    Attributes:
        assessment_completed: 러너 세션이 끝나기 전까지 False.
        assessment_score:     0~100 정수 환산 점수. 완료 전에는 None.
    """

    id: str = Field(..., min_length=1)
    candidate_id: str
    job_id: str
    status: ApplicationStatus = ApplicationStatus.APPLIED
    assessment_completed: bool = False
    assessment_score: Optional[int] = Field(None, ge=0, le=100)
    applied_at: str = Field(default_factory=utc_now_iso)
    cover_letter: str = ""
