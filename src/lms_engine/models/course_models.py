import typing

import pydantic

from lms_engine.utils.base_types import CourseId, LessonId


class LessonModel(pydantic.BaseModel):
    id: LessonId
    title: str
    content: str = ""
    courseId: CourseId
    order: int = pydantic.Field(..., ge=1, description="1-based rank, unique within the owning course")


class CourseModel(pydantic.BaseModel):
    """
    A course owns its lessons. Stored data written by older clients uses
    'lockUntilPassed' for the sequencing flag, so both keys are accepted on read.
    """

    id: CourseId
    title: str
    description: str = ""
    sequential: bool = pydantic.Field(
        default=False,
        validation_alias=pydantic.AliasChoices("sequential", "lockUntilPassed"),
    )
    lessons: list[LessonModel] = pydantic.Field(default_factory=list)

    def ordered_lessons(self) -> list[LessonModel]:
        # sorted() is stable, so equal ranks keep their stored order
        return sorted(self.lessons, key=lambda lesson: lesson.order)

    def find_lesson(self, lesson_id: LessonId) -> typing.Optional[LessonModel]:
        return next((lesson for lesson in self.lessons if lesson.id == lesson_id), None)

    def duplicate_order_ranks(self) -> list[int]:
        seen: set[int] = set()
        duplicates: list[int] = []
        for lesson in self.lessons:
            if lesson.order in seen and lesson.order not in duplicates:
                duplicates.append(lesson.order)
            seen.add(lesson.order)
        return duplicates
