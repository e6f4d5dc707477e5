"""
views/home_view.py — 로그인 / 시작 화면

기능:
  - 역할(채용 담당자 / 지원자) 선택 + 사용자 ID 입력
  - 로그인 후 역할별 첫 화면으로 이동
"""

from __future__ import annotations

import logging

import streamlit as st

logger = logging.getLogger(__name__)

_ROLES = {
    "recruiter": "Recruiter",
    "candidate": "Candidate",
}

LANDING_PAGE = {
    "recruiter": "builder",
    "candidate": "my_assessments",
}


def _sign_in(user_id: str, role: str) -> None:
    st.session_state.user_id = user_id
    st.session_state.role = role
    st.session_state.builder = None
    st.session_state.runner = None
    st.session_state.page = LANDING_PAGE[role]
    logger.info(f"로그인: user={user_id} role={role}")


def sign_out() -> None:
    """로그아웃. 진행 중인 응시 타이머를 해제한다."""
    runner = st.session_state.get("runner")
    if runner is not None:
        runner.close()
    for key in ["user_id", "role", "builder", "runner", "confirm_submit"]:
        if key in st.session_state:
            del st.session_state[key]
    st.session_state.page = "home"


def render() -> None:
    """홈 화면 렌더링."""

    _, col, _ = st.columns([1, 2.2, 1])

    with col:
        st.markdown('<div class="cbt-card">', unsafe_allow_html=True)
        st.markdown('<div class="icon-circle">🎯</div>', unsafe_allow_html=True)
        st.markdown('<p class="cbt-title">TalentFlow Assessments</p>', unsafe_allow_html=True)
        st.markdown(
            '<p class="cbt-subtitle">Build skill assessments for your jobs, '
            'or take the ones assigned to you</p>',
            unsafe_allow_html=True,
        )

        role = st.radio(
            "I am a",
            options=list(_ROLES),
            format_func=lambda r: _ROLES[r],
            horizontal=True,
            key="login_role",
        )
        user_id = st.text_input(
            "User ID",
            placeholder="recruiter_2 or candidate_1",
            key="login_user_id",
        )

        if st.button("Sign In", key="sign_in", type="primary", use_container_width=True):
            if not user_id.strip():
                st.error("Please enter your user ID.")
            else:
                _sign_in(user_id.strip(), role)
                st.rerun()

        st.markdown("</div>", unsafe_allow_html=True)
