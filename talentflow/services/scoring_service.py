"""
services/scoring_service.py

평가 채점 및 결과 분석 비즈니스 로직.
순수 Python 함수로 구성하며 UI 코드나 전역 상태 변경이 없다.
같은 (평가, 답안지) 입력에는 항상 같은 결과를 반환한다.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from config import COMPLETION_CREDIT
from talentflow.models.application_model import Application
from talentflow.models.assessment_model import Assessment
from talentflow.models.question_model import (
    McAnswer,
    Question,
    QuestionType,
    RatingAnswer,
    TextAnswer,
)
from talentflow.models.result_model import QuestionScore, ResultsSummary, ScoreResult
from talentflow.services.errors import ScoringError

_COMPLETION_CREDIT = Decimal(str(COMPLETION_CREDIT))


def _is_answered(answer) -> bool:
    """답안이 존재하고 비어 있지 않은지 판정."""
    if answer is None:
        return False
    if isinstance(answer, TextAnswer):
        return not answer.is_blank()
    return True


def _earned(question: Question, answer) -> Decimal:
    """
    문항 하나의 획득 배점.

    채점 기준:
    - 객관식: 선택 인덱스 == correct_answer_index 이면 만점, 아니면 0
    - 주관식(text) / 평점(rating): 비어 있지 않은 응답이면 배점의 80%
      (정답 여부를 보지 않는 응답 완료 점수)
    - 정수(integer): 정답 정보가 없으므로 0
    - 미응답: 0
    """
    if not _is_answered(answer):
        return Decimal(0)
    if question.type == QuestionType.MULTIPLE_CHOICE:
        if isinstance(answer, McAnswer) and answer.index == question.correct_answer_index:
            return Decimal(question.points)
        return Decimal(0)
    if question.type in (QuestionType.TEXT, QuestionType.RATING):
        if isinstance(answer, (TextAnswer, RatingAnswer)):
            return Decimal(question.points) * _COMPLETION_CREDIT
    return Decimal(0)


def score_question(question: Question, answer) -> QuestionScore:
    """문항별 채점 결과 (결과 화면 상세 표시용)."""
    earned = _earned(question, answer)
    correct: Optional[bool] = None
    if question.is_multiple_choice:
        correct = earned == question.points
    return QuestionScore(
        question_id=question.id,
        earned=float(earned),
        possible=question.points,
        answered=_is_answered(answer),
        correct=correct,
    )


def question_breakdown(
    assessment: Assessment,
    answers: Dict[str, object],
) -> List[QuestionScore]:
    """문항 순서대로 문항별 채점 결과."""
    return [score_question(q, answers.get(q.id)) for q in assessment.questions]


def to_percent(earned: Decimal, max_score: int) -> int:
    """획득 배점을 0~100 정수로 환산 (0.5는 올림)."""
    if max_score <= 0:
        raise ScoringError("총 배점이 0인 평가는 채점할 수 없습니다.")
    ratio = Decimal(100) * earned / Decimal(max_score)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_score(
    assessment: Assessment,
    answers: Dict[str, object],
) -> ScoreResult:
    """
    답안지를 채점하여 100점 만점 환산 점수와 합격 여부를 반환한다.

    Args:
        assessment: 채점 대상 평가 (문항 + 합격 기준).
        answers:    답안지. {question.id: Answer}

    Returns:
        ScoreResult. final_percent 는 0 ~ 100 정수.

    Raises:
        ScoringError: 총 배점이 0인 경우 (빌더 저장 검증으로 막아야 하는 입력).
    """
    breakdown = question_breakdown(assessment, answers)
    earned = sum((_earned(q, answers.get(q.id)) for q in assessment.questions), Decimal(0))
    final_percent = to_percent(earned, assessment.max_points)

    return ScoreResult(
        earned=float(earned),
        max_score=assessment.max_points,
        final_percent=final_percent,
        passing_score_percent=assessment.passing_score_percent,
        passed=is_passed(final_percent, assessment.passing_score_percent),
        breakdown=breakdown,
    )


def is_passed(final_percent: int, passing_score_percent: int) -> bool:
    """
    합격 여부를 반환한다.

    Returns:
        final_percent >= passing_score_percent 이면 True, 아니면 False.
    """
    return final_percent >= passing_score_percent


def get_incorrect_questions(
    assessment: Assessment,
    answers: Dict[str, object],
) -> List[Question]:
    """
    틀린 객관식 문항 리스트 (결과 화면 오답 확인용).
    미응답 객관식 문항도 포함한다. 원본 순서 유지.
    주관식/평점/정수 문항은 정답 개념이 없으므로 제외.
    """
    return [
        q for q in assessment.questions
        if q.is_multiple_choice and not score_question(q, answers.get(q.id)).correct
    ]


def summarize_results(
    assessment: Assessment,
    applications: List[Application],
) -> ResultsSummary:
    """
    평가를 완료한 지원서들의 점수 통계.

    assessment.job_id 에 해당하고 assessment_completed 인 지원서만 집계한다.
    """
    scores = [
        a.assessment_score
        for a in applications
        if a.job_id == assessment.job_id
        and a.assessment_completed
        and a.assessment_score is not None
    ]
    if not scores:
        return ResultsSummary()

    passed = sum(1 for s in scores if is_passed(s, assessment.passing_score_percent))
    return ResultsSummary(
        total=len(scores),
        passed=passed,
        failed=len(scores) - passed,
        average_score=round(sum(scores) / len(scores), 1),
        highest_score=max(scores),
        lowest_score=min(scores),
    )
