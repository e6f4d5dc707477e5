"""Tests for scoring and results review."""

from decimal import Decimal

import pytest

from conftest import make_assessment, make_mc
from talentflow.models.application_model import Application
from talentflow.models.question_model import (
    IntegerAnswer, McAnswer, Question, QuestionType, RatingAnswer, TextAnswer,
)
from talentflow.services.errors import ScoringError
from talentflow.services.scoring_service import (
    calculate_score,
    get_incorrect_questions,
    is_passed,
    question_breakdown,
    score_question,
    summarize_results,
    to_percent,
)


def test_full_credit_multiple_choice():
    assessment = make_assessment([make_mc("q1", points=10, correct=1)])
    result = calculate_score(assessment, {"q1": McAnswer(index=1)})
    assert result.final_percent == 100
    assert result.passed is True


def test_completion_credit_text_question():
    assessment = make_assessment([
        Question(id="q1", type=QuestionType.TEXT, prompt="Explain", points=10),
    ])
    result = calculate_score(assessment, {"q1": TextAnswer(text="Controlled inputs keep state")})
    assert result.earned == 8.0
    assert result.final_percent == 80


def test_unanswered_question_scores_zero():
    assessment = make_assessment([make_mc("q1"), make_mc("q2")])
    result = calculate_score(assessment, {"q1": McAnswer(index=1)})
    assert result.final_percent == 50
    assert result.passed is False


def test_wrong_choice_scores_zero():
    assessment = make_assessment([make_mc("q1", correct=1)])
    result = calculate_score(assessment, {"q1": McAnswer(index=3)})
    assert result.final_percent == 0
    assert result.breakdown[0].correct is False
    assert result.breakdown[0].answered is True


def test_blank_text_counts_as_unanswered():
    q = Question(id="q1", type=QuestionType.TEXT, prompt="Explain", points=10)
    score = score_question(q, TextAnswer(text="   "))
    assert score.answered is False
    assert score.earned == 0.0
    assert score.correct is None


def test_rating_gets_completion_credit():
    q = Question(id="q1", type=QuestionType.RATING, prompt="Rate", points=5)
    assert score_question(q, RatingAnswer(value=1)).earned == 4.0


def test_integer_answer_earns_nothing():
    assessment = make_assessment([
        make_mc("q1", points=10, correct=0),
        Question(id="q2", type=QuestionType.INTEGER, prompt="How many?", points=10),
    ])
    result = calculate_score(assessment, {"q1": McAnswer(index=0), "q2": IntegerAnswer(value=1)})
    assert result.earned == 10.0
    assert result.final_percent == 50


def test_mixed_assessment(mixed_assessment):
    answers = {
        "q1": McAnswer(index=1),
        "q2": McAnswer(index=0),
        "q3": TextAnswer(text="answer"),
        "q4": RatingAnswer(value=4),
    }
    result = calculate_score(mixed_assessment, answers)
    # 10 + 0 + 8 + 8 = 26 / 40
    assert result.earned == 26.0
    assert result.max_score == 40
    assert result.final_percent == 65
    assert result.passed is False


def test_scoring_is_deterministic(mixed_assessment):
    answers = {"q1": McAnswer(index=1), "q3": TextAnswer(text="x")}
    assert calculate_score(mixed_assessment, answers) == calculate_score(mixed_assessment, answers)


def test_final_percent_is_bounded(mixed_assessment):
    everything = {
        "q1": McAnswer(index=1),
        "q2": McAnswer(index=2),
        "q3": TextAnswer(text="x"),
        "q4": RatingAnswer(value=5),
    }
    assert 0 <= calculate_score(mixed_assessment, {}).final_percent <= 100
    assert 0 <= calculate_score(mixed_assessment, everything).final_percent <= 100


def test_passed_matches_threshold():
    assessment = make_assessment([make_mc("q1"), make_mc("q2")], passing=50)
    result = calculate_score(assessment, {"q1": McAnswer(index=1)})
    assert result.final_percent == 50
    assert result.passed is True
    assert result.passed == is_passed(result.final_percent, assessment.passing_score_percent)


def test_half_rounds_up():
    # 1 / 8 = 12.5% → 13
    assert to_percent(Decimal(1), 8) == 13
    # 3 / 8 = 37.5% → 38
    assert to_percent(Decimal(3), 8) == 38
    assert to_percent(Decimal(1), 3) == 33


def test_zero_points_fails_loudly():
    assessment = make_assessment([])
    with pytest.raises(ScoringError):
        calculate_score(assessment, {})


def test_incorrect_questions_include_unanswered(mixed_assessment):
    answers = {"q1": McAnswer(index=1), "q3": TextAnswer(text="")}
    incorrect = get_incorrect_questions(mixed_assessment, answers)
    assert [q.id for q in incorrect] == ["q2"]


def _app(app_id, score, completed=True, job_id="job_1"):
    return Application(
        id=app_id,
        candidate_id=f"candidate_{app_id}",
        job_id=job_id,
        assessment_completed=completed,
        assessment_score=score if completed else None,
    )


def test_summarize_results(mixed_assessment):
    apps = [
        _app("a", 90),
        _app("b", 40),
        _app("c", 70),
        _app("d", None, completed=False),
        _app("e", 100, job_id="job_other"),
    ]
    summary = summarize_results(mixed_assessment, apps)
    assert summary.total == 3
    assert summary.passed == 2
    assert summary.failed == 1
    assert summary.average_score == 66.7
    assert summary.highest_score == 90
    assert summary.lowest_score == 40


def test_summarize_results_empty(mixed_assessment):
    summary = summarize_results(mixed_assessment, [])
    assert summary.total == 0
    assert summary.average_score == 0.0


def test_question_breakdown_keeps_order(mixed_assessment):
    rows = question_breakdown(mixed_assessment, {"q2": McAnswer(index=2), "q4": RatingAnswer(value=2)})
    assert [r.question_id for r in rows] == ["q1", "q2", "q3", "q4"]
    assert [r.earned for r in rows] == [0.0, 10.0, 0.0, 8.0]
    assert [r.correct for r in rows] == [False, True, None, None]
