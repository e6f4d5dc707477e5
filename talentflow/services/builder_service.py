"""
services/builder_service.py

채용 담당자의 평가 작성 폼 상태와 검증 로직.
Public API (AssessmentBuilder):
  - available_jobs()          : 선택 가능한 공고 (본인 소유 + 진행 중)
  - select_job(job_id)        : 공고 연결 + 제목/설명 자동 입력
  - update_details(**fields)  : 제목, 설명, 분류, 시간, 합격 기준 수정
  - stage_question(draft)     : 문항 검증 후 추가
  - remove_question(id)       : 문항 삭제
  - save(status)              : 평가 단위 검증 후 저장 (draft | active)

검증 실패는 예외 대신 BuilderFeedback(ok=False) 로 보고하며,
실패 시 폼 상태와 저장소는 변경되지 않는다.
"""

import logging
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from config import DEFAULT_DURATION_MINUTES, DEFAULT_PASSING_SCORE
from talentflow.models.assessment_model import Assessment, AssessmentCategory, AssessmentStatus
from talentflow.models.job_model import Job
from talentflow.models.question_model import Question, QuestionDraft, QuestionType
from talentflow.services.errors import InvalidTransitionError, NotFoundError, PersistenceError
from talentflow.services.repository import AssessmentRepository, JobRepository

logger = logging.getLogger(__name__)


class BuilderFeedback(BaseModel):
    """빌더 동작 결과. 실패 시 code 로 어떤 조건이 실패했는지 알린다."""

    ok: bool
    code: str = ""
    title: str = ""
    message: str = ""
    assessment: Optional[Assessment] = None


def _fail(code: str, title: str, message: str) -> BuilderFeedback:
    logger.info(f"빌더 검증 실패: {code}")
    return BuilderFeedback(ok=False, code=code, title=title, message=message)


class BuilderForm(BaseModel):
    """작성 중인 평가 (저장 전)."""

    title: str = ""
    description: str = ""
    category: AssessmentCategory = AssessmentCategory.TECHNICAL
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, gt=0)
    passing_score_percent: int = Field(DEFAULT_PASSING_SCORE, ge=0, le=100)
    questions: List[Question] = Field(default_factory=list)
    job_id: str = ""
    job_title: str = ""
    company: str = ""
    saved_id: Optional[str] = Field(
        None,
        description="임시 저장된 문서 ID. 다시 저장하면 같은 문서를 갱신한다."
    )


def validate_question_draft(draft: QuestionDraft) -> Optional[BuilderFeedback]:
    """
    문항 추가 전 검증. 통과하면 None.

    거부 조건:
    - 문항 내용이 비어 있음
    - 객관식인데 정답 인덱스 미지정 (또는 보기 범위 밖)
    - 객관식인데 빈 보기가 있음
    """
    if not draft.prompt.strip():
        return _fail(
            "question_required", "Question Required",
            "Please enter a question before adding it to the assessment.",
        )
    if draft.type == QuestionType.MULTIPLE_CHOICE:
        index = draft.correct_answer_index
        if index is None or not 0 <= index < len(draft.options):
            return _fail(
                "correct_answer_required", "Correct Answer Required",
                "Please select the correct answer for this multiple-choice question.",
            )
        if not draft.options or any(not opt.strip() for opt in draft.options):
            return _fail(
                "options_required", "Options Required",
                "Please fill in all options before adding the question.",
            )
    return None


class AssessmentBuilder:
    """채용 담당자 한 명의 평가 작성 세션."""

    def __init__(
        self,
        owner_id: str,
        jobs: JobRepository,
        assessments: AssessmentRepository,
    ) -> None:
        self.owner_id = owner_id
        self.jobs = jobs
        self.assessments = assessments
        self.form = BuilderForm()
        self.draft = QuestionDraft()

    # ── 공고 ──────────────────────────────────────────────────────────────

    def available_jobs(self) -> List[Job]:
        return self.jobs.list_owned_by(self.owner_id)

    def select_job(self, job_id: str) -> BuilderFeedback:
        try:
            job = self.jobs.get(job_id)
        except NotFoundError:
            return _fail("job_not_found", "Job Not Found", "The selected job no longer exists.")
        if job.owner_id != self.owner_id or not job.is_open:
            return _fail(
                "job_not_available", "Job Not Available",
                "You can only create assessments for your own open jobs.",
            )

        self.form = self.form.model_copy(update={
            "job_id": job.id,
            "job_title": job.title,
            "company": job.company,
            "title": f"{job.title} Assessment",
            "description": f"Technical assessment for {job.title} position at {job.company}",
        })
        return BuilderFeedback(ok=True)

    # ── 평가 정보 ─────────────────────────────────────────────────────────

    def update_details(self, **fields) -> BuilderFeedback:
        """제목, 설명, 분류, 제한 시간, 합격 기준 수정 (pydantic 검증 적용)."""
        allowed = {"title", "description", "category", "duration_minutes", "passing_score_percent"}
        unknown = set(fields) - allowed
        if unknown:
            return _fail(
                "unknown_field", "Invalid Field",
                f"Unknown assessment fields: {', '.join(sorted(unknown))}",
            )
        try:
            self.form = BuilderForm.model_validate({**self.form.model_dump(), **fields})
        except ValidationError as e:
            errors = "; ".join(err["msg"] for err in e.errors())
            return _fail("invalid_details", "Invalid Details", errors)
        return BuilderFeedback(ok=True)

    # ── 문항 ──────────────────────────────────────────────────────────────

    def stage_question(self, draft: Optional[QuestionDraft] = None) -> BuilderFeedback:
        """
        문항을 검증하여 목록 끝에 추가한다.
        성공 시 새 ID를 부여하고 입력 폼을 기본값으로 되돌린다.
        """
        draft = draft if draft is not None else self.draft
        failure = validate_question_draft(draft)
        if failure is not None:
            return failure

        question = draft.to_question(uuid.uuid4().hex[:12])
        self.form = self.form.model_copy(update={"questions": [*self.form.questions, question]})
        self.draft = QuestionDraft()
        return BuilderFeedback(ok=True, message=f"Question {len(self.form.questions)} added.")

    def remove_question(self, question_id: str) -> bool:
        remaining = [q for q in self.form.questions if q.id != question_id]
        if len(remaining) == len(self.form.questions):
            return False
        self.form = self.form.model_copy(update={"questions": remaining})
        return True

    # ── 저장 ──────────────────────────────────────────────────────────────

    def validate_form(self) -> Optional[BuilderFeedback]:
        """저장 전 평가 단위 검증. 통과하면 None."""
        form = self.form
        if not form.title.strip():
            return _fail("title_required", "Title Required", "Please enter an assessment title")
        if not form.job_id:
            return _fail("job_required", "Job Required", "Please select a job for this assessment")
        if not form.questions:
            return _fail("questions_required", "Questions Required", "Please add at least one question")

        missing = [
            q for q in form.questions
            if q.is_multiple_choice and q.correct_answer_index is None
        ]
        if missing:
            return _fail(
                "correct_answers_required", "Correct Answers Required",
                "Please select correct answers for all multiple-choice questions. "
                f"{len(missing)} question(s) are missing correct answers.",
            )
        return None

    def save(self, status: AssessmentStatus = AssessmentStatus.DRAFT) -> BuilderFeedback:
        """
        평가를 저장한다.

        - active 로 저장하면 폼을 비워 새 평가를 작성할 수 있게 한다.
        - draft 로 저장하면 폼 내용을 유지한다.
        - 저장 실패 시 폼은 그대로 두어 다시 시도할 수 있다.
        """
        status = AssessmentStatus(status)
        failure = self.validate_form()
        if failure is not None:
            return failure

        form = self.form
        doc = form.model_dump(mode="json", exclude={"saved_id"})
        doc.update({"owner_id": self.owner_id, "status": status.value})

        try:
            if form.saved_id and self.assessments.exists(form.saved_id):
                assessment = self.assessments.update(form.saved_id, doc)
            else:
                assessment = self.assessments.create(doc)
        except (PersistenceError, InvalidTransitionError) as e:
            logger.error(f"평가 저장 실패: {e}")
            return _fail("save_failed", "Save Failed", f"Failed to save assessment: {e}")

        if status == AssessmentStatus.ACTIVE:
            self.reset()
            message = "Assessment published successfully!"
        else:
            self.form = form.model_copy(update={"saved_id": assessment.id})
            message = "Assessment saved as draft successfully!"
        return BuilderFeedback(ok=True, title="Assessment Saved", message=message, assessment=assessment)

    def reset(self) -> None:
        self.form = BuilderForm()
        self.draft = QuestionDraft()
