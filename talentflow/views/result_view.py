"""
views/result_view.py — 평가 결과 화면

지원자:
  - 최종 점수 (100점 만점 환산, 대형 숫자)
  - 합격 / 불합격 배지 + 합격 기준
  - 통계 요약 (정답 수, 오답 수, 미응답 수)
  - 오답 확인 (객관식 오답 문항 + 정답)
  - 지원서 기록 실패 안내

채용 담당자:
  - render_summary() : 평가별 완료자 통계
"""

from __future__ import annotations

import streamlit as st

from talentflow.models.assessment_model import Assessment
from talentflow.models.question_model import McAnswer, Question
from talentflow.services.repository import Repositories
from talentflow.services.runner_service import AssessmentRunner
from talentflow.services.scoring_service import get_incorrect_questions, summarize_results


def _go_to_list() -> None:
    """응시 목록으로 이동하며 러너 정리."""
    runner: AssessmentRunner | None = st.session_state.get("runner")
    if runner is not None:
        runner.close()
    st.session_state.runner = None
    st.session_state.confirm_submit = False
    answer_keys = [k for k in st.session_state if k.startswith("answer_")]
    for k in answer_keys:
        del st.session_state[k]
    st.session_state.page = "my_assessments"


def render() -> None:
    """지원자 결과 화면 렌더링."""

    # ── 세션 가드 ──────────────────────────────────────────────────────────
    runner: AssessmentRunner | None = st.session_state.get("runner")
    if runner is None or runner.result is None:
        st.warning("No result to show.")
        if st.button("My Assessments", type="primary"):
            _go_to_list()
            st.rerun()
        return

    result = runner.result
    session = runner.session
    incorrect = get_incorrect_questions(runner.assessment, session.answers)
    mc_total = sum(1 for q in runner.assessment.questions if q.is_multiple_choice)
    unanswered_count = sum(1 for s in result.breakdown if not s.answered)

    _, col, _ = st.columns([0.8, 2.5, 0.8])

    with col:
        st.markdown('<div class="cbt-card">', unsafe_allow_html=True)

        if session.timed_out:
            st.info("⏰ Time ran out. Your answers were submitted automatically.")

        score_color = "#10b981" if result.passed else "#ef4444"
        st.markdown(
            f'<p class="score-big" style="color:{score_color};">{result.final_percent}%</p>',
            unsafe_allow_html=True,
        )
        st.markdown(
            f"<p style='text-align:center; font-size:0.9rem; color:#9ca3af; "
            f"margin-top:-8px; margin-bottom:16px;'>Passing score: "
            f"{result.passing_score_percent}%</p>",
            unsafe_allow_html=True,
        )

        badge_class = "pass" if result.passed else "fail"
        badge_text = "Passed" if result.passed else "Not Passed"
        st.markdown(
            f"<div style='text-align:center; margin-bottom:24px;'>"
            f"<span class='pass-badge {badge_class}'>{badge_text}</span></div>",
            unsafe_allow_html=True,
        )

        s1, s2, s3 = st.columns(3)
        _stat_card(s1, "Correct", str(mc_total - len(incorrect)), "#10b981")
        _stat_card(s2, "Incorrect", str(len(incorrect)), "#ef4444")
        _stat_card(s3, "Unanswered", str(unanswered_count), "#f59e0b")

        if runner.persist_error:
            st.warning(
                "Your score could not be saved to your application. "
                f"Please contact the recruiter. ({runner.persist_error})"
            )

        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        st.button(
            "Back to My Assessments",
            key="home_btn",
            type="primary",
            use_container_width=True,
            on_click=_go_to_list,
        )
        st.markdown("</div>", unsafe_allow_html=True)

    st.markdown("<br>", unsafe_allow_html=True)
    tabs = st.tabs([f"Review ({len(incorrect)})"])
    with tabs[0]:
        _render_wrong_answers(incorrect, session.answers)


def _render_wrong_answers(incorrect: list[Question], answers: dict) -> None:
    """객관식 오답 확인 섹션."""
    if not incorrect:
        st.success("You answered every multiple-choice question correctly!")
        return

    for q in incorrect:
        answer = answers.get(q.id)
        user_idx = answer.index if isinstance(answer, McAnswer) else None
        options = q.options or []
        user_label = options[user_idx] if user_idx is not None else "Unanswered"
        with st.expander(f"{q.prompt[:60]} | Your answer: {user_label}", expanded=False):
            for i, opt in enumerate(options):
                if i == q.correct_answer_index:
                    prefix = "O "
                    style = "color:#065f46; font-weight:600; background:#d1fae5; " \
                            "border-radius:6px; padding:4px 10px;"
                elif i == user_idx:
                    prefix = "X "
                    style = "color:#991b1b; background:#fee2e2; " \
                            "border-radius:6px; padding:4px 10px;"
                else:
                    prefix = "    "
                    style = "color:#374151; padding:4px 10px;"
                st.markdown(
                    f"<p style='margin:4px 0; font-size:0.93rem; {style}'>"
                    f"{prefix}{opt}</p>",
                    unsafe_allow_html=True,
                )


def render_summary(repos: Repositories, assessment: Assessment) -> None:
    """채용 담당자용 평가 결과 통계."""
    summary = summarize_results(assessment, repos.applications.list(job_id=assessment.job_id))
    if summary.total == 0:
        st.caption("No candidates have completed this assessment yet.")
        return

    c1, c2, c3, c4 = st.columns(4)
    _stat_card(c1, "Completed", str(summary.total), "#3b82f6")
    _stat_card(c2, "Passed", str(summary.passed), "#10b981")
    _stat_card(c3, "Failed", str(summary.failed), "#ef4444")
    _stat_card(c4, "Average", f"{summary.average_score}%", "#f59e0b")
    st.caption(f"Highest {summary.highest_score}% · Lowest {summary.lowest_score}%")


def _stat_card(col, label: str, value: str, color: str) -> None:
    """통계 수치를 카드 형태로 렌더링하는 헬퍼."""
    with col:
        st.markdown(
            f"""
            <div style="text-align:center; background:#f7fafd; border-radius:12px;
                        padding:16px 8px; border-top:3px solid {color};">
                <p style="font-size:1.8rem; font-weight:800; color:{color};
                           margin:0 0 4px 0;">{value}</p>
                <p style="font-size:0.78rem; color:#9ca3af; margin:0;">{label}</p>
            </div>
            """,
            unsafe_allow_html=True,
        )
