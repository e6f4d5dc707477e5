"""
services/candidate_service.py

지원자 포털 로직: 공고 지원, 응시 가능한 평가 목록.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel

from talentflow.models.application_model import Application
from talentflow.services.repository import (
    ApplicationRepository,
    AssessmentRepository,
    JobRepository,
)

logger = logging.getLogger(__name__)


class CandidateAssessment(BaseModel):
    """지원자 화면에 표시하는 평가 항목."""

    id: str
    title: str
    description: str
    company: str
    job_id: str
    job_title: str
    duration_minutes: int
    passing_score_percent: int
    question_count: int
    max_points: int
    assigned_at: str
    status: str  # "pending" | "completed"
    completed: bool
    score: Optional[int] = None


def apply_to_job(
    jobs: JobRepository,
    applications: ApplicationRepository,
    candidate_id: str,
    job_id: str,
    cover_letter: str = "",
) -> Application:
    """
    공고 지원. 이미 지원한 공고면 기존 지원서를 반환한다.

    Raises:
        NotFoundError: 공고 없음.
    """
    jobs.get(job_id)
    existing = applications.find_for(candidate_id, job_id)
    if existing is not None:
        return existing
    application = applications.create({
        "candidate_id": candidate_id,
        "job_id": job_id,
        "cover_letter": cover_letter,
    })
    logger.info(f"지원 완료: candidate={candidate_id} job={job_id}")
    return application


def list_candidate_assessments(
    assessments: AssessmentRepository,
    applications: ApplicationRepository,
    candidate_id: str,
) -> List[CandidateAssessment]:
    """
    지원한 공고에 연결된 게시(active) 평가 목록과 완료 여부.
    """
    user_apps = {a.job_id: a for a in applications.list(candidate_id=candidate_id)}
    result: List[CandidateAssessment] = []

    for assessment in assessments.list():
        app = user_apps.get(assessment.job_id)
        if app is None or not assessment.is_active:
            continue
        result.append(CandidateAssessment(
            id=assessment.id,
            title=assessment.title,
            description=assessment.description,
            company=assessment.company,
            job_id=assessment.job_id,
            job_title=assessment.job_title,
            duration_minutes=assessment.duration_minutes,
            passing_score_percent=assessment.passing_score_percent,
            question_count=len(assessment.questions),
            max_points=assessment.max_points,
            assigned_at=app.applied_at or assessment.created_at,
            status="completed" if app.assessment_completed else "pending",
            completed=app.assessment_completed,
            score=app.assessment_score,
        ))
    return result


def can_view_assessment(
    assessments: AssessmentRepository,
    applications: ApplicationRepository,
    candidate_id: str,
    assessment_id: str,
) -> bool:
    """지원자는 지원한 공고의 게시된 평가만 볼 수 있다."""
    assessment = assessments.get(assessment_id)
    if not assessment.is_active:
        return False
    return applications.find_for(candidate_id, assessment.job_id) is not None
