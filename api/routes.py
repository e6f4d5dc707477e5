"""
api/routes.py — FastAPI 엔드포인트

채용 담당자: 공고 조회, 평가 작성(builder), 평가 목록/게시, 결과 통계
지원자:      공고 지원, 응시 가능 평가 목록, 응시(runner)
"""

from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session

from talentflow.models.assessment_model import Assessment, AssessmentStatus
from talentflow.models.question_model import Answer, Question, QuestionDraft
from talentflow.services.builder_service import AssessmentBuilder, BuilderFeedback
from talentflow.services.candidate_service import (
    apply_to_job, can_view_assessment, list_candidate_assessments,
)
from talentflow.services.errors import (
    InvalidTransitionError, NotFoundError, PersistenceError, ScoringError,
)
from talentflow.services.repository import Repositories
from talentflow.services.runner_service import AssessmentRunner, open_runner
from talentflow.services.scoring_service import get_incorrect_questions, summarize_results

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class LoginBody(BaseModel):
    user_id: str
    role: Literal["recruiter", "candidate"]

class SelectJobBody(BaseModel):
    job_id: str

class DetailsBody(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    duration_minutes: Optional[int] = None
    passing_score_percent: Optional[int] = None

class SaveAssessmentBody(BaseModel):
    status: AssessmentStatus = AssessmentStatus.DRAFT

class ApplyBody(BaseModel):
    job_id: str
    cover_letter: str = ""

class ApplicationPatchBody(BaseModel):
    status: Optional[str] = None

class StartRunBody(BaseModel):
    assessment_id: str

class SaveAnswerBody(BaseModel):
    question_id: str
    answer: Optional[Answer] = None

class NavigateBody(BaseModel):
    action: Literal["next", "previous", "goto"] = "next"
    index: int = 0


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _repos(request: Request) -> Repositories:
    return request.app.state.repos


def _sid(request: Request) -> str:
    return request.state.session_id


def _current_user(request: Request) -> tuple[str, str]:
    sid = _sid(request)
    user_id = session.get(sid, "user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Please sign in first.")
    return user_id, session.get(sid, "role")


def _require_user(request: Request, role: str) -> str:
    user_id, current_role = _current_user(request)
    if current_role != role:
        raise HTTPException(status_code=403, detail=f"Only {role}s can do this.")
    return user_id


def _candidate_view(assessment: Assessment) -> dict:
    """지원자용: 정답 인덱스를 제거한 평가."""
    d = assessment.model_dump(mode="json")
    d["questions"] = [_question_to_dict(q, hide_answer=True) for q in assessment.questions]
    return d


def _question_to_dict(q: Question, hide_answer: bool = False) -> dict:
    d = q.model_dump(mode="json")
    if hide_answer:
        d.pop("correct_answer_index", None)
    return d


def _feedback_or_raise(feedback: BuilderFeedback) -> dict:
    if not feedback.ok:
        status = 503 if feedback.code == "save_failed" else 422
        raise HTTPException(
            status_code=status,
            detail={"code": feedback.code, "title": feedback.title, "message": feedback.message},
        )
    return feedback.model_dump(mode="json")


def _builder(request: Request) -> AssessmentBuilder:
    user_id = _require_user(request, "recruiter")
    sid = _sid(request)
    builder: Optional[AssessmentBuilder] = session.get(sid, "builder")
    if builder is None or builder.owner_id != user_id:
        repos = _repos(request)
        builder = AssessmentBuilder(user_id, repos.jobs, repos.assessments)
        session.put(sid, "builder", builder)
    return builder


def _builder_state(builder: AssessmentBuilder) -> dict:
    return {
        "form": builder.form.model_dump(mode="json"),
        "draft": builder.draft.model_dump(mode="json"),
        "max_points": sum(q.points for q in builder.form.questions),
    }


def _runner(request: Request) -> AssessmentRunner:
    _require_user(request, "candidate")
    runner: Optional[AssessmentRunner] = session.get(_sid(request), "runner")
    if runner is None:
        raise HTTPException(status_code=404, detail="No assessment in progress.")
    return runner


def _runner_state(runner: AssessmentRunner) -> dict:
    s = runner.session
    return {
        "assessment_id": runner.assessment.id,
        "title": runner.assessment.title,
        "phase": s.phase.value,
        "current_index": s.current_index,
        "total": runner.total,
        "remaining_seconds": s.remaining_seconds,
        "answered_count": len(s.answers),
        "answers": {k: v.model_dump(mode="json") for k, v in s.answers.items()},
        "question_ids": [q.id for q in runner.assessment.questions],
        "timed_out": s.timed_out,
        "result": s.result.model_dump(mode="json") if s.result else None,
        "result_saved": runner.persisted,
    }


# ── 세션 ─────────────────────────────────────────────────────────────────────

@router.post("/api/login")
async def login(body: LoginBody, request: Request):
    user_id = body.user_id.strip()
    if not user_id:
        raise HTTPException(status_code=422, detail="User ID is required.")
    session.sign_in(_sid(request), user_id, body.role)
    return {"ok": True, "user_id": user_id, "role": body.role}


@router.get("/api/session-status")
async def session_status(request: Request):
    sid = _sid(request)
    runner = session.get(sid, "runner")
    return {
        "user_id": session.get(sid, "user_id"),
        "role": session.get(sid, "role"),
        "building": session.get(sid, "builder") is not None,
        "running": runner is not None and runner.session.is_in_progress,
    }


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(_sid(request))
    return {"ok": True}


# ── 공고 ─────────────────────────────────────────────────────────────────────

@router.get("/api/jobs")
async def list_jobs(request: Request):
    return [j.model_dump(mode="json") for j in _repos(request).jobs.list_active()]


@router.get("/api/jobs/mine")
async def list_my_jobs(request: Request):
    user_id = _require_user(request, "recruiter")
    return [j.model_dump(mode="json") for j in _repos(request).jobs.list_owned_by(user_id)]


# ── 평가 작성 (builder) ──────────────────────────────────────────────────────

@router.get("/api/builder")
async def get_builder(request: Request):
    return _builder_state(_builder(request))


@router.post("/api/builder/job")
async def builder_select_job(body: SelectJobBody, request: Request):
    builder = _builder(request)
    _feedback_or_raise(builder.select_job(body.job_id))
    return _builder_state(builder)


@router.patch("/api/builder/details")
async def builder_details(body: DetailsBody, request: Request):
    builder = _builder(request)
    _feedback_or_raise(builder.update_details(**body.model_dump(exclude_none=True)))
    return _builder_state(builder)


@router.post("/api/builder/questions")
async def builder_stage_question(body: QuestionDraft, request: Request):
    builder = _builder(request)
    feedback = _feedback_or_raise(builder.stage_question(body))
    return {**_builder_state(builder), "message": feedback["message"]}


@router.delete("/api/builder/questions/{question_id}")
async def builder_remove_question(question_id: str, request: Request):
    builder = _builder(request)
    if not builder.remove_question(question_id):
        raise HTTPException(status_code=404, detail="Question not found.")
    return _builder_state(builder)


@router.post("/api/builder/save")
async def builder_save(body: SaveAssessmentBody, request: Request):
    builder = _builder(request)
    feedback = _feedback_or_raise(builder.save(body.status))
    return {**feedback, **_builder_state(builder)}


@router.post("/api/builder/reset")
async def builder_reset(request: Request):
    builder = _builder(request)
    builder.reset()
    return _builder_state(builder)


# ── 평가 ─────────────────────────────────────────────────────────────────────

@router.get("/api/assessments")
async def list_assessments(
    request: Request,
    owner_id: Optional[str] = None,
    job_id: Optional[str] = None,
):
    user_id, role = _current_user(request)
    repos = _repos(request)
    if role == "candidate":
        items = repos.assessments.list(job_id=job_id)
        return [
            _candidate_view(a) for a in items
            if can_view_assessment(repos.assessments, repos.applications, user_id, a.id)
        ]
    _require_user(request, "recruiter")
    items = repos.assessments.list(owner_id=owner_id, job_id=job_id)
    return [a.model_dump(mode="json") for a in items]


@router.get("/api/assessments/{assessment_id}")
async def get_assessment(assessment_id: str, request: Request):
    user_id, role = _current_user(request)
    repos = _repos(request)
    try:
        assessment: Assessment = repos.assessments.get(assessment_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Assessment not found.")

    if role == "candidate":
        if not can_view_assessment(repos.assessments, repos.applications, user_id, assessment_id):
            raise HTTPException(status_code=404, detail="Assessment not found.")
        return _candidate_view(assessment)
    _require_user(request, "recruiter")
    return assessment.model_dump(mode="json")


@router.post("/api/assessments/{assessment_id}/publish")
async def publish_assessment(assessment_id: str, request: Request):
    user_id = _require_user(request, "recruiter")
    repos = _repos(request)
    try:
        assessment = repos.assessments.get(assessment_id)
        if assessment.owner_id != user_id:
            raise HTTPException(status_code=403, detail="Only the author can publish this assessment.")
        published = repos.assessments.publish(assessment_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Assessment not found.")
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Failed to save. Please try again.")
    return published.model_dump(mode="json")


@router.get("/api/assessments/{assessment_id}/results")
async def assessment_results(assessment_id: str, request: Request):
    _require_user(request, "recruiter")
    repos = _repos(request)
    try:
        assessment = repos.assessments.get(assessment_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Assessment not found.")

    applications = repos.applications.list(job_id=assessment.job_id)
    completed = sorted(
        (a for a in applications if a.assessment_completed),
        key=lambda a: a.assessment_score or 0,
        reverse=True,
    )
    return {
        "assessment_id": assessment.id,
        "passing_score_percent": assessment.passing_score_percent,
        "summary": summarize_results(assessment, applications).model_dump(),
        "results": [
            {
                **a.model_dump(mode="json"),
                "passed": (a.assessment_score or 0) >= assessment.passing_score_percent,
            }
            for a in completed
        ],
    }


# ── 지원서 ───────────────────────────────────────────────────────────────────

@router.get("/api/applications")
async def list_applications(
    request: Request,
    candidate_id: Optional[str] = None,
    job_id: Optional[str] = None,
):
    user_id, role = _current_user(request)
    if role == "candidate":
        candidate_id = user_id  # 지원자는 본인 지원서만
    else:
        _require_user(request, "recruiter")
    items = _repos(request).applications.list(candidate_id=candidate_id, job_id=job_id)
    return [a.model_dump(mode="json") for a in items]


@router.post("/api/applications")
async def create_application(body: ApplyBody, request: Request):
    candidate_id = _require_user(request, "candidate")
    repos = _repos(request)
    try:
        app = apply_to_job(repos.jobs, repos.applications, candidate_id, body.job_id, body.cover_letter)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Job not found.")
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Failed to save. Please try again.")
    return app.model_dump(mode="json")


@router.patch("/api/applications/{application_id}")
async def update_application(application_id: str, body: ApplicationPatchBody, request: Request):
    _require_user(request, "recruiter")
    try:
        app = _repos(request).applications.update(
            application_id, body.model_dump(exclude_none=True)
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Application not found.")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return app.model_dump(mode="json")


@router.get("/api/my/assessments")
async def my_assessments(request: Request):
    candidate_id = _require_user(request, "candidate")
    repos = _repos(request)
    items = list_candidate_assessments(repos.assessments, repos.applications, candidate_id)
    return [i.model_dump() for i in items]


# ── 응시 (runner) ────────────────────────────────────────────────────────────

@router.post("/api/runner/start")
async def runner_start(body: StartRunBody, request: Request):
    candidate_id = _require_user(request, "candidate")
    repos = _repos(request)
    try:
        runner = open_runner(repos.assessments, repos.applications, body.assessment_id, candidate_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Assessment not found.")
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    # 세션에 먼저 붙인 뒤 타이머를 시작한다
    if not session.put(_sid(request), "runner", runner):
        raise HTTPException(status_code=401, detail="Session expired. Please sign in again.")
    runner.start(with_timer=request.app.state.run_timers)
    return _runner_state(runner)


@router.get("/api/runner/state")
async def runner_state(request: Request):
    return _runner_state(_runner(request))


@router.get("/api/runner/question/{index}")
async def runner_question(index: int, request: Request):
    runner = _runner(request)
    questions = runner.assessment.questions
    if not (0 <= index < len(questions)):
        raise HTTPException(status_code=404, detail="Question not found.")

    q = questions[index]
    saved = runner.session.answers.get(q.id)
    d = _question_to_dict(q, hide_answer=True)
    d.update({
        "saved_answer": saved.model_dump(mode="json") if saved else None,
        "index": index,
        "total": len(questions),
    })
    return d


@router.post("/api/runner/answer")
async def runner_answer(body: SaveAnswerBody, request: Request):
    runner = _runner(request)
    try:
        if body.answer is None:
            runner.clear_answer(body.question_id)
        else:
            runner.record_answer(body.question_id, body.answer)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Question not found.")
    except InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"ok": True, "answered_count": len(runner.session.answers)}


@router.post("/api/runner/navigate")
async def runner_navigate(body: NavigateBody, request: Request):
    runner = _runner(request)
    try:
        if body.action == "next":
            runner.next()
        elif body.action == "previous":
            runner.previous()
        else:
            runner.go_to(body.index)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"index": runner.session.current_index, "ok": True}


@router.post("/api/runner/submit")
async def runner_submit(request: Request):
    runner = _runner(request)
    try:
        result = runner.submit()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ScoringError as e:
        raise HTTPException(status_code=422, detail=str(e))

    incorrect = get_incorrect_questions(runner.assessment, runner.session.answers)
    return {
        "score": result.final_percent,
        "passed": result.passed,
        "passing_score_percent": result.passing_score_percent,
        "result_saved": runner.persisted,
        "notice": runner.persist_error,
        "incorrect_question_ids": [q.id for q in incorrect],
        "ok": True,
    }


@router.post("/api/runner/leave")
async def runner_leave(request: Request):
    _runner(request)
    session.put(_sid(request), "runner", None)
    return {"ok": True}
