"""
views/builder_view.py — 평가 작성 화면 (채용 담당자)

레이아웃:
  - 탭 1 "Create" : 공고 선택 → 평가 정보 → 문항 입력 폼 → 추가된 문항 목록 → 저장
  - 탭 2 "My Assessments" : 본인 평가 목록, 임시 저장 평가 게시, 결과 통계

상태 관리:
  - st.session_state.builder  (AssessmentBuilder, 로그인 사용자 기준)
  - 문항 입력 폼의 보기 개수는 st.session_state.draft_option_count
"""

from __future__ import annotations

import streamlit as st

from talentflow.models.assessment_model import AssessmentCategory, AssessmentStatus
from talentflow.models.question_model import QuestionDraft, QuestionType
from talentflow.services.builder_service import AssessmentBuilder, BuilderFeedback
from talentflow.services.errors import InvalidTransitionError, PersistenceError
from talentflow.services.repository import Repositories
from talentflow.views import result_view


def _get_builder(repos: Repositories) -> AssessmentBuilder:
    builder: AssessmentBuilder | None = st.session_state.get("builder")
    if builder is None or builder.owner_id != st.session_state.user_id:
        builder = AssessmentBuilder(st.session_state.user_id, repos.jobs, repos.assessments)
        st.session_state.builder = builder
    return builder


def _show(feedback: BuilderFeedback) -> None:
    if feedback.ok:
        if feedback.message:
            st.success(feedback.message)
    else:
        st.error(f"**{feedback.title}**: {feedback.message}")


def _clear_draft_widgets() -> None:
    draft_keys = [k for k in st.session_state if k.startswith("draft_")]
    for k in draft_keys:
        del st.session_state[k]


def render() -> None:
    """평가 작성 화면 렌더링."""
    repos: Repositories = st.session_state.repos
    builder = _get_builder(repos)

    st.markdown("## Assessment Builder")
    create_tab, list_tab = st.tabs(["Create", "My Assessments"])

    with create_tab:
        _render_job_select(builder)
        _render_details(builder)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        _render_question_form(builder)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        _render_staged_questions(builder)
        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        _render_save(builder)

    with list_tab:
        _render_my_assessments(repos)


# ── 공고 / 평가 정보 ──────────────────────────────────────────────────────────

def _render_job_select(builder: AssessmentBuilder) -> None:
    jobs = builder.available_jobs()
    if not jobs:
        st.info("You have no open jobs. Post a job before creating an assessment.")
        return

    job_ids = [j.id for j in jobs]
    labels = {j.id: f"{j.title} · {j.company}" for j in jobs}
    current = builder.form.job_id
    selected = st.selectbox(
        "Job",
        options=job_ids,
        index=job_ids.index(current) if current in job_ids else None,
        format_func=lambda jid: labels[jid],
        placeholder="Select a job",
        key="builder_job",
    )
    if selected and selected != current:
        feedback = builder.select_job(selected)
        if feedback.ok:
            st.rerun()
        _show(feedback)


def _render_details(builder: AssessmentBuilder) -> None:
    form = builder.form
    # 공고 선택 시 자동 입력된 값을 위젯에 반영하기 위해 job_id 를 키에 포함
    suffix = form.job_id or "none"

    title = st.text_input("Title", value=form.title, key=f"builder_title_{suffix}")
    description = st.text_area(
        "Description", value=form.description, key=f"builder_desc_{suffix}", height=90,
    )
    c1, c2, c3 = st.columns(3)
    categories = list(AssessmentCategory)
    category = c1.selectbox(
        "Category",
        options=categories,
        index=categories.index(form.category),
        format_func=lambda c: c.value.title(),
        key=f"builder_category_{suffix}",
    )
    duration = c2.number_input(
        "Duration (minutes)", min_value=1, value=form.duration_minutes, step=5,
        key=f"builder_duration_{suffix}",
    )
    passing = c3.number_input(
        "Passing score (%)", min_value=0, max_value=100, value=form.passing_score_percent,
        key=f"builder_passing_{suffix}",
    )

    changed = (
        title != form.title
        or description != form.description
        or category != form.category
        or int(duration) != form.duration_minutes
        or int(passing) != form.passing_score_percent
    )
    if changed:
        _show(builder.update_details(
            title=title,
            description=description,
            category=category,
            duration_minutes=int(duration),
            passing_score_percent=int(passing),
        ))


# ── 문항 입력 폼 ──────────────────────────────────────────────────────────────

def _render_question_form(builder: AssessmentBuilder) -> None:
    st.markdown("#### Add Question")

    types = list(QuestionType)
    qtype = st.selectbox(
        "Question type",
        options=types,
        format_func=lambda t: t.value,
        key="draft_type",
    )
    prompt = st.text_area("Question", key="draft_prompt", height=80)
    c1, c2 = st.columns(2)
    points = c1.number_input("Points", min_value=1, value=builder.draft.points, key="draft_points")
    time_limit = c2.number_input(
        "Time limit (seconds)", min_value=0, value=builder.draft.time_limit_seconds or 0,
        key="draft_time_limit",
    )

    options: list[str] = []
    correct_index = None
    if qtype == QuestionType.MULTIPLE_CHOICE:
        count = st.session_state.setdefault("draft_option_count", 1)
        for i in range(count):
            options.append(st.text_input(f"Option {i + 1}", key=f"draft_option_{i}"))

        add_col, remove_col = st.columns(2)
        if add_col.button("+ Add Option", key="draft_add_option"):
            st.session_state.draft_option_count = count + 1
            st.rerun()
        if count > 1 and remove_col.button("− Remove Option", key="draft_remove_option"):
            st.session_state.draft_option_count = count - 1
            st.session_state.pop(f"draft_option_{count - 1}", None)
            st.rerun()

        correct_index = st.radio(
            "Correct answer",
            options=list(range(count)),
            format_func=lambda i: options[i] or f"Option {i + 1}",
            index=None,
            horizontal=True,
            key="draft_correct",
        )

    builder.draft = QuestionDraft(
        type=qtype,
        prompt=prompt,
        options=options or [""],
        correct_answer_index=correct_index,
        points=int(points),
        time_limit_seconds=int(time_limit),
    )

    if st.button("Add Question", key="draft_submit", type="primary"):
        feedback = builder.stage_question()
        if feedback.ok:
            _clear_draft_widgets()
            st.session_state.builder_flash = feedback.message
            st.rerun()
        _show(feedback)

    flash = st.session_state.pop("builder_flash", None)
    if flash:
        st.success(flash)


def _render_staged_questions(builder: AssessmentBuilder) -> None:
    questions = builder.form.questions
    st.markdown(f"#### Questions ({len(questions)})")
    if not questions:
        st.caption("No questions added yet.")
        return

    for i, q in enumerate(questions, start=1):
        left, right = st.columns([6, 1])
        with left:
            st.markdown(f"**{i}. {q.prompt}**  \n`{q.type.value}` · {q.points} pts")
            if q.is_multiple_choice:
                for j, opt in enumerate(q.options or []):
                    mark = "✅" if j == q.correct_answer_index else "▫️"
                    st.markdown(f"{mark} {opt}")
        with right:
            if st.button("Remove", key=f"remove_{q.id}"):
                builder.remove_question(q.id)
                st.rerun()


def _render_save(builder: AssessmentBuilder) -> None:
    form = builder.form
    st.caption(f"Total points: {sum(q.points for q in form.questions)}")

    left, right = st.columns(2)
    feedback = None
    with left:
        if st.button("Save as Draft", key="save_draft", use_container_width=True):
            feedback = builder.save(AssessmentStatus.DRAFT)
    with right:
        if st.button("Publish", key="save_active", type="primary", use_container_width=True):
            feedback = builder.save(AssessmentStatus.ACTIVE)
            if feedback.ok:
                _clear_draft_widgets()

    if feedback is not None:
        _show(feedback)


# ── 내 평가 목록 ──────────────────────────────────────────────────────────────

def _render_my_assessments(repos: Repositories) -> None:
    assessments = repos.assessments.list(owner_id=st.session_state.user_id)
    if not assessments:
        st.info("You have not created any assessments yet.")
        return

    for a in assessments:
        badge = "🟢 Active" if a.is_active else "📝 Draft"
        with st.expander(f"{a.title} · {a.job_title} · {badge}"):
            st.caption(
                f"{len(a.questions)} questions · {a.max_points} points · "
                f"{a.duration_minutes} min · pass {a.passing_score_percent}%"
            )
            if a.is_active:
                result_view.render_summary(repos, a)
            elif st.button("Publish", key=f"publish_{a.id}"):
                try:
                    repos.assessments.publish(a.id)
                except (PersistenceError, InvalidTransitionError) as e:
                    st.error(f"Failed to publish assessment: {e}")
                else:
                    st.rerun()
