import pydantic

from lms_engine.models.quiz_models import QuizResultModel
from lms_engine.utils.base_types import CourseId, IsoTimestamp, LessonId, UserId


class UserProgressModel(pydantic.BaseModel):
    """
    Progress of one student in one course. Unique per (userId, courseId).
    completedLessons is a set semantically; it is kept as a list so the stored
    order reflects completion order.
    """

    userId: UserId
    courseId: CourseId
    completedLessons: list[LessonId] = pydantic.Field(default_factory=list)
    quizResults: list[QuizResultModel] = pydantic.Field(default_factory=list)
    courseCompleted: bool = False
    lastAccessedAt: IsoTimestamp

    @pydantic.field_validator("completedLessons", mode="after")
    @classmethod
    def drop_duplicate_lessons(cls, value: list[LessonId]) -> list[LessonId]:
        return list(dict.fromkeys(value))

    def has_completed(self, lesson_id: LessonId) -> bool:
        return lesson_id in self.completedLessons

    @property
    def key(self) -> tuple[UserId, CourseId]:
        return (self.userId, self.courseId)


class LessonCompletionOutcomeModel(pydantic.BaseModel):
    """
    Result of a completion attempt. 'changed' is False for a repeat completion,
    which callers use to decide whether to show a success message.
    """

    progress: UserProgressModel
    changed: bool


class LessonStatusModel(pydantic.BaseModel):
    """A lesson as shown on a course page: its position, lock state and completion."""

    lessonId: LessonId
    title: str
    index: int
    available: bool
    completed: bool


class CourseOverviewModel(pydantic.BaseModel):
    courseId: CourseId
    title: str
    completedCount: int
    totalCount: int
    progressPercent: int
    courseCompleted: bool
    lessons: list[LessonStatusModel]
