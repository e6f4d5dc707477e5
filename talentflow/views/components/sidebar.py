"""
views/components/sidebar.py

문항 번호 네비게이션 그리드 컴포넌트.
각 번호를 클릭하면 해당 문항으로 바로 이동한다.
"""

from __future__ import annotations

import streamlit as st

from talentflow.services.runner_service import AssessmentRunner


def render(runner: AssessmentRunner) -> None:
    """
    사이드바에 문항 번호 버튼 그리드와 진행 현황을 렌더링한다.
    답한 문항은 ●, 미답 문항은 ○ 로 표시한다.
    """
    questions = runner.assessment.questions
    session = runner.session
    total = len(questions)
    answered = len(session.answers)

    # ── 진행 현황 ──────────────────────────────────────────────────────────
    st.markdown(
        f"""
        <div style="display:flex; justify-content:space-between;
                    font-size:0.8rem; color:#6b7280; margin-bottom:4px;">
            <span>Progress</span>
            <span><b>{answered}</b> / {total}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.progress(answered / total if total > 0 else 0)

    # ── 문항 번호 그리드 (5열) ─────────────────────────────────────────────
    cols_per_row = 5

    for row_start in range(0, total, cols_per_row):
        row_qs = questions[row_start : row_start + cols_per_row]
        cols = st.columns(cols_per_row)
        for col_idx, q in enumerate(row_qs):
            q_idx = row_start + col_idx
            marker = "●" if q.id in session.answers else "○"
            label = f"[{q_idx + 1}]" if q_idx == session.current_index else f"{q_idx + 1}{marker}"

            with cols[col_idx]:
                if st.button(label, key=f"nav_{q_idx}", help=f"Go to question {q_idx + 1}"):
                    runner.go_to(q_idx)
                    st.rerun()
