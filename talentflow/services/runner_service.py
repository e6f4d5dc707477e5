"""
services/runner_service.py

평가 응시 진행(러너) 로직.

구성:
  - 순수 상태 전이 함수 (start / go_next / go_previous / go_to /
    record_answer / clear_answer / tick / complete)
    RunSession 을 받아 새 RunSession 을 반환한다. UI·저장소 의존 없음.
  - CountdownTimer : 1초 주기 콜백 스레드 (러너당 1개)
  - AssessmentRunner : 전이 함수 + 타이머 + 지원서 결과 기록을 묶은 객체

제출은 수동 제출과 시간 초과 자동 제출이 같은 채점 경로를 사용한다.
"""

import logging
import threading
from typing import Callable, Optional

from config import TIMER_TICK_SECONDS
from talentflow.models.application_model import ApplicationStatus
from talentflow.models.assessment_model import Assessment
from talentflow.models.question_model import Question, validate_answer
from talentflow.models.result_model import ScoreResult
from talentflow.models.session_state import RunPhase, RunSession
from talentflow.services.errors import InvalidTransitionError, NotFoundError, PersistenceError
from talentflow.services.repository import ApplicationRepository, AssessmentRepository
from talentflow.services.scoring_service import calculate_score

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════════
# 순수 상태 전이
# ══════════════════════════════════════════════════════════════════════════════

def new_session(assessment: Assessment, candidate_id: str) -> RunSession:
    """문항 0번, 남은 시간 duration_minutes * 60 으로 시작하는 새 세션."""
    return RunSession(
        assessment_id=assessment.id,
        candidate_id=candidate_id,
        remaining_seconds=assessment.duration_seconds,
    )


def _require_in_progress(session: RunSession) -> None:
    if session.phase == RunPhase.NOT_STARTED:
        raise InvalidTransitionError("Assessment has not been started.")
    if session.phase == RunPhase.COMPLETED:
        raise InvalidTransitionError("Assessment has already been submitted.")


def start(session: RunSession) -> RunSession:
    if session.phase != RunPhase.NOT_STARTED:
        raise InvalidTransitionError("Assessment has already been started.")
    return session.model_copy(update={"phase": RunPhase.IN_PROGRESS})


def go_to(session: RunSession, index: int, total: int) -> RunSession:
    """인덱스를 [0, total-1] 범위로 보정하여 이동."""
    _require_in_progress(session)
    idx = max(0, min(index, total - 1))
    return session.model_copy(update={"current_index": idx})


def go_next(session: RunSession, total: int) -> RunSession:
    return go_to(session, session.current_index + 1, total)


def go_previous(session: RunSession, total: int) -> RunSession:
    return go_to(session, session.current_index - 1, total)


def record_answer(session: RunSession, question: Question, answer) -> RunSession:
    """
    답안 기록. 같은 문항의 기존 답안은 덮어쓴다.

    Raises:
        InvalidTransitionError: 응시 중이 아닐 때.
        ValueError:             답안 형태가 문항 유형과 맞지 않을 때.
    """
    _require_in_progress(session)
    validate_answer(question, answer)
    answers = {**session.answers, question.id: answer}
    return session.model_copy(update={"answers": answers})


def clear_answer(session: RunSession, question_id: str) -> RunSession:
    _require_in_progress(session)
    answers = {k: v for k, v in session.answers.items() if k != question_id}
    return session.model_copy(update={"answers": answers})


def complete(
    session: RunSession,
    assessment: Assessment,
    timed_out: bool = False,
) -> RunSession:
    """
    채점 후 COMPLETED 로 전이. 이미 완료된 세션은 그대로 반환한다.

    Raises:
        InvalidTransitionError: 시작하지 않은 세션.
    """
    if session.phase == RunPhase.COMPLETED:
        return session
    if session.phase == RunPhase.NOT_STARTED:
        raise InvalidTransitionError("Assessment has not been started.")

    result = calculate_score(assessment, session.answers)
    return session.model_copy(update={
        "phase": RunPhase.COMPLETED,
        "timed_out": timed_out,
        "result": result,
    })


def tick(session: RunSession, assessment: Assessment, seconds: int = 1) -> RunSession:
    """
    타이머 진행. 응시 중일 때만 시간이 줄어든다.
    남은 시간이 0 이 되면 수동 제출과 동일하게 채점·완료한다.
    """
    if session.phase != RunPhase.IN_PROGRESS:
        return session
    remaining = max(0, session.remaining_seconds - seconds)
    session = session.model_copy(update={"remaining_seconds": remaining})
    if remaining == 0:
        return complete(session, assessment, timed_out=True)
    return session


# ══════════════════════════════════════════════════════════════════════════════
# 타이머
# ══════════════════════════════════════════════════════════════════════════════

class CountdownTimer:
    """interval 초마다 callback 을 호출하는 데몬 스레드. cancel() 로 중지."""

    def __init__(self, callback: Callable[[], None], interval: float = TIMER_TICK_SECONDS):
        self._callback = callback
        self._interval = interval
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("타이머 콜백 실행 중 오류")
                self._stop.set()


# ══════════════════════════════════════════════════════════════════════════════
# 러너
# ══════════════════════════════════════════════════════════════════════════════

class AssessmentRunner:
    """
    지원자 한 명의 평가 응시를 진행한다.

    - 타이머는 IN_PROGRESS 동안만 동작하며, 완료 또는 close() 시 해제된다.
    - 제출 결과는 (candidate_id, assessment.job_id) 지원서에 한 번 기록된다.
      지원서가 없거나 기록에 실패해도 점수는 그대로 보여준다 (재시도 없음).
    """

    def __init__(
        self,
        assessment: Assessment,
        candidate_id: str,
        applications: ApplicationRepository,
        tick_interval: float = TIMER_TICK_SECONDS,
    ) -> None:
        self.assessment = assessment
        self.applications = applications
        self.session = new_session(assessment, candidate_id)
        self.persisted = False
        self.persist_error: Optional[str] = None
        self._tick_interval = tick_interval
        self._timer: Optional[CountdownTimer] = None
        self._lock = threading.RLock()

    # ── 조회 ──────────────────────────────────────────────────────────────

    @property
    def total(self) -> int:
        return len(self.assessment.questions)

    @property
    def current_question(self) -> Question:
        return self.assessment.questions[self.session.current_index]

    @property
    def result(self) -> Optional[ScoreResult]:
        return self.session.result

    def _question(self, question_id: str) -> Question:
        question = self.assessment.find_question(question_id)
        if question is None:
            raise NotFoundError(f"Question {question_id} not found")
        return question

    # ── 진행 ──────────────────────────────────────────────────────────────

    def start(self, with_timer: bool = True) -> RunSession:
        with self._lock:
            self.session = start(self.session)
            logger.info(
                f"응시 시작: assessment={self.assessment.id} "
                f"candidate={self.session.candidate_id} "
                f"({self.session.remaining_seconds}초)"
            )
            if with_timer:
                self._timer = CountdownTimer(self.tick, self._tick_interval)
                self._timer.start()
            return self.session

    def next(self) -> RunSession:
        with self._lock:
            self.session = go_next(self.session, self.total)
            return self.session

    def previous(self) -> RunSession:
        with self._lock:
            self.session = go_previous(self.session, self.total)
            return self.session

    def go_to(self, index: int) -> RunSession:
        with self._lock:
            self.session = go_to(self.session, index, self.total)
            return self.session

    def record_answer(self, question_id: str, answer) -> RunSession:
        with self._lock:
            self.session = record_answer(self.session, self._question(question_id), answer)
            return self.session

    def clear_answer(self, question_id: str) -> RunSession:
        with self._lock:
            self.session = clear_answer(self.session, self._question(question_id).id)
            return self.session

    def tick(self, seconds: int = 1) -> RunSession:
        with self._lock:
            was_running = self.session.is_in_progress
            self.session = tick(self.session, self.assessment, seconds)
            if was_running and self.session.is_completed:
                logger.info(f"시간 초과 자동 제출: assessment={self.assessment.id}")
                self._on_completed()
            return self.session

    def submit(self) -> ScoreResult:
        """제출. 이미 완료된 경우 기존 결과를 반환하고 아무것도 기록하지 않는다."""
        with self._lock:
            if self.session.is_completed:
                return self.session.result
            self.session = complete(self.session, self.assessment)
            self._on_completed()
            return self.session.result

    def close(self) -> None:
        """화면 이탈 시 타이머 해제. 진행 상태는 저장하지 않는다."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    # ── 결과 기록 ─────────────────────────────────────────────────────────

    def _on_completed(self) -> None:
        self.close()
        self._persist_result()

    def _persist_result(self) -> None:
        result = self.session.result
        candidate_id = self.session.candidate_id
        try:
            application = self.applications.find_for(candidate_id, self.assessment.job_id)
            if application is None:
                logger.warning(
                    f"지원서 없음 - 결과 기록 생략: candidate={candidate_id} "
                    f"job={self.assessment.job_id} score={result.final_percent}"
                )
                self.persist_error = "No application found for this job."
                return
            status = (
                ApplicationStatus.ASSESSMENT_COMPLETED
                if result.passed
                else ApplicationStatus.ASSESSMENT_FAILED
            )
            self.applications.update(application.id, {
                "assessment_completed": True,
                "assessment_score": result.final_percent,
                "status": status.value,
            })
            self.persisted = True
        except PersistenceError as e:
            logger.error(f"지원서 결과 기록 실패: {e}")
            self.persist_error = str(e)


def open_runner(
    assessments: AssessmentRepository,
    applications: ApplicationRepository,
    assessment_id: str,
    candidate_id: str,
    tick_interval: float = TIMER_TICK_SECONDS,
) -> AssessmentRunner:
    """
    응시용 러너 생성. 같은 평가에 다시 들어오면 항상 새 세션(문항 0번)이다.

    Raises:
        NotFoundError:          평가 없음.
        InvalidTransitionError: 게시되지 않은 평가, 또는 이미 완료한 평가.
    """
    assessment = assessments.get(assessment_id)
    if not assessment.is_active:
        raise InvalidTransitionError("This assessment is not published yet.")
    if not assessment.questions:
        raise InvalidTransitionError("This assessment has no questions.")

    application = applications.find_for(candidate_id, assessment.job_id)
    if application is not None and application.assessment_completed:
        raise InvalidTransitionError(
            f"You have already completed this assessment. "
            f"Your score: {application.assessment_score}%"
        )
    return AssessmentRunner(assessment, candidate_id, applications, tick_interval)
