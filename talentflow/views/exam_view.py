"""
views/exam_view.py — 평가 응시 화면

레이아웃:
  - st.sidebar : 타이머 + 문항 번호 네비게이터 + 최종 제출
  - 메인 영역  : 시작 확인 → 현재 문항 카드 + 이전/다음 + 제출

상태 관리:
  - st.session_state.runner   (AssessmentRunner)
  - 답안은 입력 위젯 ↔ runner.session.answers 동기화
  - 시간 초과 시 러너가 자동 제출하며, 다음 렌더에서 결과 화면으로 이동
"""

from __future__ import annotations

import streamlit as st

from talentflow.services.errors import InvalidTransitionError
from talentflow.services.runner_service import AssessmentRunner
from talentflow.views.components import question_card as qcard
from talentflow.views.components import sidebar as nav
from talentflow.views.components import timer as tmr


def _go_to_result() -> None:
    """채점 후 결과 페이지로 이동."""
    runner: AssessmentRunner = st.session_state.runner
    runner.submit()
    st.session_state.page = "result"
    st.rerun()


def _leave() -> None:
    """응시 화면 이탈. 타이머 해제, 진행 상태는 버린다."""
    runner: AssessmentRunner | None = st.session_state.get("runner")
    if runner is not None:
        runner.close()
    st.session_state.runner = None
    st.session_state.page = "my_assessments"
    st.rerun()


def _sync_answer(runner: AssessmentRunner, question_id: str, answer) -> None:
    """입력 위젯 값을 답안지에 반영. 시간 초과로 이미 제출된 경우 무시."""
    if not runner.session.is_in_progress:
        return
    try:
        if answer is None:
            if question_id in runner.session.answers:
                runner.clear_answer(question_id)
        else:
            runner.record_answer(question_id, answer)
    except InvalidTransitionError:
        # 확인 직후 타이머가 먼저 제출한 경우
        pass


def _render_intro(runner: AssessmentRunner) -> None:
    a = runner.assessment
    st.markdown(f"## {a.title}")
    st.caption(f"{a.company} · {a.job_title}")
    if a.description:
        st.write(a.description)

    c1, c2, c3 = st.columns(3)
    c1.metric("Duration", f"{a.duration_minutes} min")
    c2.metric("Questions", len(a.questions))
    c3.metric("Passing Score", f"{a.passing_score_percent}%")

    st.info("The timer starts when you begin and keeps running until you submit.")
    left, right = st.columns(2)
    with left:
        if st.button("Back", use_container_width=True):
            _leave()
    with right:
        if st.button("Start Assessment", type="primary", use_container_width=True):
            runner.start()
            st.rerun()


def render() -> None:
    """응시 화면 렌더링."""

    # ── 세션 가드 ──────────────────────────────────────────────────────────
    runner: AssessmentRunner | None = st.session_state.get("runner")
    if runner is None:
        st.warning("Assessment not found. Returning to your assessments.")
        if st.button("My Assessments", type="primary"):
            st.session_state.page = "my_assessments"
            st.rerun()
        return

    if not runner.session.is_started:
        _render_intro(runner)
        return

    if runner.session.is_completed:
        st.session_state.page = "result"
        st.rerun()

    session = runner.session
    total = runner.total
    current_q = runner.current_question

    # ── 사이드바 ───────────────────────────────────────────────────────────
    with st.sidebar:
        st.markdown("### 📋 Questions")
        tmr.render(session.remaining_seconds)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        nav.render(runner)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

        unanswered = total - len(session.answers)
        if unanswered > 0:
            st.caption(f"⚠️ Unanswered questions: {unanswered}")

        if st.button("Submit Assessment", key="submit_sidebar", type="primary"):
            if unanswered > 0:
                st.session_state["confirm_submit"] = True
                st.rerun()
            else:
                _go_to_result()

        # 미응답 상태에서 제출 확인
        if st.session_state.get("confirm_submit"):
            st.warning(f"{unanswered} question(s) are unanswered. Submit anyway?")
            col_yes, col_no = st.columns(2)
            with col_yes:
                if st.button("Submit", key="confirm_yes", type="primary"):
                    st.session_state["confirm_submit"] = False
                    _go_to_result()
            with col_no:
                if st.button("Cancel", key="confirm_no"):
                    st.session_state["confirm_submit"] = False
                    st.rerun()

    # ── 메인 영역 ─────────────────────────────────────────────────────────
    st.markdown(f"## {runner.assessment.title}")
    st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

    answer = qcard.render(
        question=current_q,
        question_number=session.current_index + 1,
        total=total,
        saved_answer=session.answers.get(current_q.id),
    )
    _sync_answer(runner, current_q.id, answer)

    # ── 이전 / 다음 네비게이션 ────────────────────────────────────────────
    nav_left, nav_center, nav_right = st.columns([1, 2, 1])

    with nav_left:
        if session.current_index > 0:
            if st.button("← Previous", key="prev_btn", use_container_width=True):
                runner.previous()
                st.rerun()

    with nav_center:
        st.markdown(
            f"<p style='text-align:center; font-size:0.85rem; color:#9ca3af; "
            f"padding-top:8px;'>{session.current_index + 1} / {total}</p>",
            unsafe_allow_html=True,
        )

    with nav_right:
        if session.current_index < total - 1:
            if st.button("Next →", key="next_btn", type="primary", use_container_width=True):
                runner.next()
                st.rerun()
        else:
            if st.button("Submit →", key="submit_last", type="primary", use_container_width=True):
                _go_to_result()
