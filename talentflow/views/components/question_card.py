"""
views/components/question_card.py

단일 문항(Question)을 카드 형태로 렌더링하고
문항 유형에 맞는 입력 위젯의 값을 Answer 로 반환하는 컴포넌트.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from talentflow.models.question_model import (
    IntegerAnswer, McAnswer, Question, QuestionType, RatingAnswer, TextAnswer,
)


def render(
    question: Question,
    question_number: int,
    total: int,
    saved_answer=None,
):
    """
    문항 카드를 렌더링하고 사용자가 입력한 답안을 반환한다.

    Args:
        question:        렌더링할 Question 객체
        question_number: 전체 문항 중 몇 번째인지 (1-based 표시용)
        total:           전체 문항 수
        saved_answer:    이미 기록된 답안 (없으면 None)

    Returns:
        Answer (McAnswer / TextAnswer / RatingAnswer / IntegerAnswer),
        아무것도 입력하지 않은 경우 None
    """

    # ── 문항 헤더 ──────────────────────────────────────────────────────────
    st.markdown(
        f"""
        <div style="display:flex; align-items:center; gap:10px; margin-bottom:12px;">
            <span class="question-number-badge">Question {question_number} / {total}</span>
            <span style="font-size:0.8rem; color:#9ca3af;">
                Points: {question.points} | Type: {question.type.value}
            </span>
        </div>
        """,
        unsafe_allow_html=True,
    )

    st.markdown(
        f"""
        <div class="question-card">
            <p style="font-size:1.05rem; font-weight:600; color:#1a1a2e;
                      line-height:1.7; margin:0;">
                {question.prompt}
            </p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    key = f"answer_{question.id}"

    if question.type == QuestionType.MULTIPLE_CHOICE:
        return _render_choice(question, key, saved_answer)
    if question.type == QuestionType.TEXT:
        text = st.text_area(
            "Your answer",
            value=saved_answer.text if isinstance(saved_answer, TextAnswer) else "",
            key=key,
            height=160,
        )
        return TextAnswer(text=text) if text else None
    if question.type == QuestionType.RATING:
        default = saved_answer.value if isinstance(saved_answer, RatingAnswer) else None
        value = st.radio(
            "Rating (1 = lowest, 5 = highest)",
            options=[1, 2, 3, 4, 5],
            index=default - 1 if default else None,
            key=key,
            horizontal=True,
        )
        return RatingAnswer(value=value) if value is not None else None

    value = st.number_input(
        "Your answer",
        value=saved_answer.value if isinstance(saved_answer, IntegerAnswer) else None,
        step=1,
        key=key,
    )
    return IntegerAnswer(value=int(value)) if value is not None else None


def _render_choice(question: Question, key: str, saved_answer) -> Optional[McAnswer]:
    options = question.options or []
    # 저장된 답안이 있으면 해당 보기를 기본 선택
    default_index = saved_answer.index if isinstance(saved_answer, McAnswer) else None

    selected = st.radio(
        "Choose one option",
        options=list(range(len(options))),
        format_func=lambda i: options[i],
        index=default_index,
        key=key,
        label_visibility="collapsed",
    )
    return McAnswer(index=selected) if selected is not None else None
