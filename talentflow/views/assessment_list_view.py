"""
views/assessment_list_view.py — 지원자 평가 목록 화면

기능:
  - 지원한 공고의 게시된 평가 목록 (완료 여부, 점수)
  - 응시 시작 확인 → 응시 화면으로 이동
  - 진행 중인 공고 목록 + 지원하기
"""

from __future__ import annotations

import streamlit as st

from talentflow.services.candidate_service import (
    CandidateAssessment,
    apply_to_job,
    list_candidate_assessments,
)
from talentflow.services.errors import InvalidTransitionError, NotFoundError, PersistenceError
from talentflow.services.repository import Repositories
from talentflow.services.runner_service import open_runner


def _open(repos: Repositories, item: CandidateAssessment) -> None:
    """러너를 만들고 응시 화면(시작 확인)으로 이동."""
    previous = st.session_state.get("runner")
    if previous is not None:
        previous.close()
    try:
        runner = open_runner(
            repos.assessments, repos.applications, item.id, st.session_state.user_id,
        )
    except (NotFoundError, InvalidTransitionError) as e:
        st.error(str(e))
        return
    answer_keys = [k for k in st.session_state if k.startswith("answer_")]
    for k in answer_keys:
        del st.session_state[k]
    st.session_state.runner = runner
    st.session_state.confirm_submit = False
    st.session_state.page = "exam"
    st.rerun()


def render() -> None:
    """지원자 평가 목록 렌더링."""
    repos: Repositories = st.session_state.repos
    user_id: str = st.session_state.user_id

    st.markdown("## My Assessments")
    items = list_candidate_assessments(repos.assessments, repos.applications, user_id)

    if not items:
        st.info("No assessments are assigned to you yet. Apply to a job below.")
    for item in items:
        _render_item(repos, item)

    st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
    _render_jobs(repos, user_id)


def _render_item(repos: Repositories, item: CandidateAssessment) -> None:
    with st.container(border=True):
        left, right = st.columns([4, 1])
        with left:
            st.markdown(f"**{item.title}**")
            st.caption(
                f"{item.company} · {item.job_title} · {item.question_count} questions · "
                f"{item.duration_minutes} min · pass {item.passing_score_percent}%"
            )
        with right:
            if item.completed:
                st.markdown(f"✅ **{item.score}%**")
            elif st.button("Start", key=f"start_{item.id}", type="primary"):
                _open(repos, item)


def _render_jobs(repos: Repositories, user_id: str) -> None:
    st.markdown("#### Open Jobs")
    applied = {a.job_id for a in repos.applications.list(candidate_id=user_id)}

    for job in repos.jobs.list_active():
        left, right = st.columns([4, 1])
        with left:
            st.markdown(f"**{job.title}** · {job.company}")
            if job.location:
                st.caption(job.location)
        with right:
            if job.id in applied:
                st.caption("Applied")
            elif st.button("Apply", key=f"apply_{job.id}"):
                try:
                    apply_to_job(repos.jobs, repos.applications, user_id, job.id)
                except (NotFoundError, PersistenceError) as e:
                    st.error(f"Failed to apply: {e}")
                else:
                    st.rerun()
