import typing

import pydantic

from lms_engine.utils.base_types import IsoTimestamp, QuestionId, QuizId, QuizResultId, UserId

QuestionType = typing.Literal[
    "single",
    "multiple",
    "truefalse",
    "fillblank",
    "sequence",
    "dragdrop",
    "dragdrop-categories",
    "hotspot",
    "hotspot-multiple",
    "hotspot-sequence",
]

QUESTION_TYPES: tuple[str, ...] = typing.get_args(QuestionType)

# Correct answers are stored loosely typed; the scorer coerces them per question type.
# Category answers may be item -> category, category -> [items] or [item, category] pairs.
RawAnswer = typing.Union[
    int,
    str,
    list[typing.Union[int, str]],
    list[list[str]],
    dict[str, typing.Union[str, list[str]]],
]


class HotspotRegionModel(pydantic.BaseModel):
    """A named rectangle on a hotspot question's image, in image coordinates."""

    id: str
    x: float
    y: float
    width: float = pydantic.Field(..., gt=0)
    height: float = pydantic.Field(..., gt=0)

    def contains(self, point_x: float, point_y: float) -> bool:
        return self.x <= point_x <= self.x + self.width and self.y <= point_y <= self.y + self.height


class QuestionModel(pydantic.BaseModel):
    id: QuestionId
    type: QuestionType
    question: str
    options: typing.Optional[list[str]] = None
    correctAnswer: RawAnswer
    points: int = pydantic.Field(default=10, ge=1)
    hotspots: typing.Optional[list[HotspotRegionModel]] = None


class QuizModel(pydantic.BaseModel):
    id: QuizId
    title: str
    description: str = ""
    questions: list[QuestionModel] = pydantic.Field(default_factory=list)
    timeLimit: typing.Optional[int] = pydantic.Field(default=None, ge=1, description="Seconds; enforced by the UI")
    passingScore: int = pydantic.Field(default=70, ge=0, le=100)

    @property
    def total_points(self) -> int:
        return sum(question.points for question in self.questions)


class QuizResultModel(pydantic.BaseModel):
    """
    One attempt at a quiz. Results are immutable; a retake produces a new result.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    id: QuizResultId
    userId: UserId
    quizId: QuizId
    score: int = pydantic.Field(..., ge=0, le=100)
    passed: bool
    answers: dict[QuestionId, typing.Any] = pydantic.Field(default_factory=dict)
    completedAt: IsoTimestamp


class QuestionOutcomeModel(pydantic.BaseModel):
    questionId: QuestionId
    correct: bool
    pointsEarned: int
    pointsPossible: int


class QuizGradeModel(pydantic.BaseModel):
    quizId: QuizId
    score: int
    passed: bool
    pointsEarned: int
    pointsPossible: int
    outcomes: list[QuestionOutcomeModel]
