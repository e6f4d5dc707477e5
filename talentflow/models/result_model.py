from typing import List, Optional

from pydantic import BaseModel, Field


class QuestionScore(BaseModel):
    """문항별 채점 결과. correct 는 객관식에서만 의미가 있다."""

    question_id: str
    earned: float
    possible: int
    answered: bool
    correct: Optional[bool] = None


class ScoreResult(BaseModel):
    """
    채점 결과.

    Attributes:
        earned:        획득 배점 합계 (주관식/평점은 80% 부분 배점 포함).
        max_score:     전체 배점 합계.
        final_percent: 0 ~ 100 정수 환산 점수 (0.5 올림).
        passed:        final_percent >= passing_score_percent
    """

    earned: float
    max_score: int
    final_percent: int = Field(..., ge=0, le=100)
    passing_score_percent: int
    passed: bool
    breakdown: List[QuestionScore] = Field(default_factory=list)


class ResultsSummary(BaseModel):
    """채용 담당자용 평가 결과 통계."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    average_score: float = 0.0
    highest_score: int = 0
    lowest_score: int = 0
