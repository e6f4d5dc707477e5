"""Tests for the assessment builder."""

import pytest

from api.sample_data import seed_sample_data
from talentflow.models.assessment_model import AssessmentStatus
from talentflow.models.question_model import Question, QuestionDraft, QuestionType
from talentflow.services.builder_service import AssessmentBuilder, validate_question_draft
from talentflow.services import storage
from talentflow.services.errors import PersistenceError
from talentflow.services.repository import Repositories
from talentflow.services.storage import JsonFileStore


@pytest.fixture()
def builder(seeded_repos, recruiter_id):
    return AssessmentBuilder(recruiter_id, seeded_repos.jobs, seeded_repos.assessments)


def _mc_draft(**overrides):
    data = {
        "type": QuestionType.MULTIPLE_CHOICE,
        "prompt": "What does useState return?",
        "options": ["A value", "A tuple of value and setter"],
        "correct_answer_index": 1,
        "points": 10,
    }
    data.update(overrides)
    return QuestionDraft(**data)


def _ready(builder):
    assert builder.select_job("job_1").ok
    assert builder.stage_question(_mc_draft()).ok


def test_available_jobs_are_own_open_jobs(builder):
    ids = [j.id for j in builder.available_jobs()]
    assert ids == ["job_1", "job_2"]


def test_select_job_prefills_details(builder):
    feedback = builder.select_job("job_1")
    assert feedback.ok
    assert builder.form.job_id == "job_1"
    assert builder.form.company == "TechCorp"
    assert builder.form.title == "Senior Frontend Developer Assessment"
    assert builder.form.description == (
        "Technical assessment for Senior Frontend Developer position at TechCorp"
    )


def test_select_job_rejects_archived_and_foreign_jobs(seeded_repos, builder):
    assert builder.select_job("job_3").code == "job_not_available"
    assert builder.select_job("job_missing").code == "job_not_found"

    other = AssessmentBuilder("recruiter_9", seeded_repos.jobs, seeded_repos.assessments)
    assert other.select_job("job_1").code == "job_not_available"
    assert other.form.job_id == ""


def test_incomplete_multiple_choice_is_rejected(builder):
    feedback = builder.stage_question(_mc_draft(correct_answer_index=None))
    assert not feedback.ok
    assert feedback.code == "correct_answer_required"
    assert builder.form.questions == []


def test_out_of_range_correct_answer_is_rejected(builder):
    assert builder.stage_question(_mc_draft(correct_answer_index=5)).code == "correct_answer_required"


def test_blank_option_is_rejected(builder):
    feedback = builder.stage_question(_mc_draft(options=["A", " "]))
    assert feedback.code == "options_required"
    assert builder.form.questions == []


def test_blank_prompt_is_rejected():
    assert validate_question_draft(QuestionDraft(prompt="  ")).code == "question_required"


def test_text_question_needs_no_options(builder):
    feedback = builder.stage_question(QuestionDraft(type=QuestionType.TEXT, prompt="Explain hooks"))
    assert feedback.ok
    q = builder.form.questions[0]
    assert q.options is None
    assert q.correct_answer_index is None


def test_stage_question_assigns_id_and_resets_draft(builder):
    builder.draft = _mc_draft()
    assert builder.stage_question().ok
    assert builder.form.questions[0].id
    assert builder.draft == QuestionDraft()


def test_remove_question(builder):
    _ready(builder)
    qid = builder.form.questions[0].id
    assert builder.remove_question(qid) is True
    assert builder.remove_question(qid) is False
    assert builder.form.questions == []


def test_update_details_validates(builder):
    assert builder.update_details(duration_minutes=45, passing_score_percent=80).ok
    assert builder.form.duration_minutes == 45

    bad = builder.update_details(passing_score_percent=150)
    assert bad.code == "invalid_details"
    assert builder.form.passing_score_percent == 80
    assert builder.update_details(owner_id="x").code == "unknown_field"


def test_empty_save_writes_nothing(seeded_repos, builder):
    before = len(seeded_repos.assessments.list())
    feedback = builder.save(AssessmentStatus.DRAFT)
    assert feedback.code == "title_required"

    builder.update_details(title="Something")
    assert builder.save().code == "job_required"

    builder.select_job("job_1")
    assert builder.save().code == "questions_required"
    assert len(seeded_repos.assessments.list()) == before


def test_save_draft_keeps_form_and_updates_same_document(seeded_repos, builder):
    _ready(builder)
    first = builder.save(AssessmentStatus.DRAFT)
    assert first.ok
    assert builder.form.saved_id == first.assessment.id
    assert len(builder.form.questions) == 1

    builder.update_details(title="Renamed")
    second = builder.save(AssessmentStatus.DRAFT)
    assert second.assessment.id == first.assessment.id
    assert seeded_repos.assessments.get(first.assessment.id).title == "Renamed"
    assert len(seeded_repos.assessments.list(owner_id=builder.owner_id)) == 3


def test_publish_resets_form(seeded_repos, builder):
    _ready(builder)
    feedback = builder.save(AssessmentStatus.ACTIVE)
    assert feedback.ok
    stored = seeded_repos.assessments.get(feedback.assessment.id)
    assert stored.is_active
    assert stored.owner_id == builder.owner_id
    assert stored.max_points == 10
    assert builder.form.questions == []
    assert builder.form.job_id == ""


def test_save_failure_keeps_form(builder, monkeypatch):
    _ready(builder)

    def _boom(collection, doc):
        raise PersistenceError("disk full")

    monkeypatch.setattr(builder.assessments.store, "put", _boom)
    feedback = builder.save(AssessmentStatus.ACTIVE)
    assert feedback.code == "save_failed"
    assert len(builder.form.questions) == 1


def test_save_rechecks_multiple_choice_answers(seeded_repos, builder):
    _ready(builder)
    unanswered = Question(
        id="q_unanswered",
        type=QuestionType.MULTIPLE_CHOICE,
        prompt="Pick one",
        options=["A", "B"],
        correct_answer_index=None,
    )
    builder.form.questions.append(unanswered)
    before = len(seeded_repos.assessments.list())

    feedback = builder.save(AssessmentStatus.ACTIVE)
    assert feedback.code == "correct_answers_required"
    assert "1 question(s)" in feedback.message
    assert len(seeded_repos.assessments.list()) == before
    assert builder.form.saved_id is None


def test_failed_file_write_then_retry_creates_one_document(tmp_path, recruiter_id, monkeypatch):
    store = JsonFileStore(str(tmp_path / "data.json"))
    seed_sample_data(store)
    repos = Repositories(store)
    builder = AssessmentBuilder(recruiter_id, repos.jobs, repos.assessments)
    _ready(builder)
    before = len(repos.assessments.list())

    real_replace = storage.os.replace
    calls = {"n": 0}

    def _flaky_replace(src, dst):
        calls["n"] += 1
        if calls["n"] == 1:
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(storage.os, "replace", _flaky_replace)

    assert builder.save(AssessmentStatus.DRAFT).code == "save_failed"
    assert len(repos.assessments.list()) == before

    assert builder.save(AssessmentStatus.DRAFT).ok
    assert len(repos.assessments.list()) == before + 1
    assert len(Repositories(JsonFileStore(store.path)).assessments.list()) == before + 1
