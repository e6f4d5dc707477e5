from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from config import DEFAULT_QUESTION_POINTS, DEFAULT_QUESTION_TIME_LIMIT


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TEXT = "text"
    RATING = "rating"
    INTEGER = "integer"


class Question(BaseModel):
    """
    평가 문항 모델.
    Pydantic v2 적용

    객관식(multiple-choice) 문항만 options / correct_answer_index 를 사용한다.
    완전성(정답 지정 + 빈 보기 없음)은 빌더가 추가 시점에 검사하므로
    이 모델은 형태만 검증한다.
    """
    id: str = Field(
        ...,
        min_length=1,
        description="문항 고유 ID (생성 이후 변경되지 않음)"
    )
    type: QuestionType = Field(
        QuestionType.MULTIPLE_CHOICE,
        description="문항 유형 (채점 방식 결정)"
    )
    prompt: str = Field(
        ...,
        description="문항 내용"
    )
    options: Optional[List[str]] = Field(
        None,
        description="보기 리스트 (객관식 전용)"
    )
    correct_answer_index: Optional[int] = Field(
        None,
        ge=0,
        description="정답 보기 인덱스 (객관식 전용, 0-based)"
    )
    points: int = Field(
        DEFAULT_QUESTION_POINTS,
        gt=0,
        description="배점 (양의 정수)"
    )
    time_limit_seconds: Optional[int] = Field(
        DEFAULT_QUESTION_TIME_LIMIT,
        ge=0,
        description="문항별 권장 시간 (참고용, 강제하지 않음)"
    )

    @model_validator(mode='after')
    def drop_choice_fields(self) -> 'Question':
        """객관식이 아닌 문항은 보기/정답 필드를 갖지 않는다."""
        if self.type != QuestionType.MULTIPLE_CHOICE:
            self.options = None
            self.correct_answer_index = None
        return self

    @property
    def is_multiple_choice(self) -> bool:
        return self.type == QuestionType.MULTIPLE_CHOICE

    def is_complete(self) -> bool:
        """
        객관식 문항의 완전성 판정.
        정답 인덱스가 지정되어 있고, 보기가 1개 이상이며, 빈 보기가 없어야 한다.
        객관식이 아니면 항상 True.
        """
        if not self.is_multiple_choice:
            return True
        if self.correct_answer_index is None or not self.options:
            return False
        if self.correct_answer_index >= len(self.options):
            return False
        return all(opt.strip() for opt in self.options)


class QuestionDraft(BaseModel):
    """
    빌더의 문항 입력 폼 상태.
    아직 ID가 없고, 불완전한 값(빈 보기, 정답 미지정)을 허용한다.
    """
    type: QuestionType = QuestionType.MULTIPLE_CHOICE
    prompt: str = ""
    options: List[str] = Field(default_factory=lambda: [""])
    correct_answer_index: Optional[int] = 0
    points: int = Field(DEFAULT_QUESTION_POINTS, gt=0)
    time_limit_seconds: Optional[int] = DEFAULT_QUESTION_TIME_LIMIT

    def to_question(self, question_id: str) -> Question:
        return Question(
            id=question_id,
            type=self.type,
            prompt=self.prompt.strip(),
            options=list(self.options),
            correct_answer_index=self.correct_answer_index,
            points=self.points,
            time_limit_seconds=self.time_limit_seconds,
        )


# ── 답안 (문항 유형별 태그 유니온) ──────────────────────────────────────────

class McAnswer(BaseModel):
    kind: Literal["multiple-choice"] = "multiple-choice"
    index: int = Field(..., ge=0)


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    text: str

    def is_blank(self) -> bool:
        return not self.text.strip()


class RatingAnswer(BaseModel):
    kind: Literal["rating"] = "rating"
    value: int = Field(..., ge=1, le=5)


class IntegerAnswer(BaseModel):
    kind: Literal["integer"] = "integer"
    value: int


Answer = Annotated[
    Union[McAnswer, TextAnswer, RatingAnswer, IntegerAnswer],
    Field(discriminator="kind"),
]


def answer_matches(question: Question, answer) -> bool:
    """답안 유형이 문항 유형과 일치하는지 확인."""
    return answer.kind == question.type.value


def validate_answer(question: Question, answer) -> None:
    """
    답안을 문항에 기록하기 전 형태 검증.

    Raises:
        ValueError: 유형 불일치 또는 보기 범위를 벗어난 인덱스.
    """
    if not answer_matches(question, answer):
        raise ValueError(
            f"Answer of type '{answer.kind}' does not fit question "
            f"'{question.id}' of type '{question.type.value}'."
        )
    if isinstance(answer, McAnswer):
        options = question.options or []
        if answer.index >= len(options):
            raise ValueError(
                f"Option {answer.index} is out of range for question '{question.id}'."
            )

