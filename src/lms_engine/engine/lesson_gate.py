import typing

from lms_engine.models.course_models import CourseModel
from lms_engine.models.progress_models import LessonStatusModel, UserProgressModel
from lms_engine.utils.math_utils import percent_of


def is_lesson_available(
    course: CourseModel,
    progress: typing.Optional[UserProgressModel],
    lesson_index: int,
) -> bool:
    """
    Decides whether the lesson at `lesson_index` (position in order-rank order) can be opened.

    - The first lesson is always available.
    - In a non-sequential course every lesson is available.
    - Otherwise a lesson is available iff its immediate predecessor is completed.
      Only the predecessor is checked; gaps further back do not re-lock a lesson.

    A missing progress record counts as nothing completed. An index outside the
    course's lessons is never available.
    """
    lessons = course.ordered_lessons()
    if lesson_index < 0 or lesson_index >= len(lessons):
        return False

    if lesson_index == 0:
        return True

    if not course.sequential:
        return True

    if progress is None:
        return False

    previous_lesson = lessons[lesson_index - 1]
    return progress.has_completed(previous_lesson.id)


def lesson_availability(
    course: CourseModel,
    progress: typing.Optional[UserProgressModel],
) -> list[LessonStatusModel]:
    """Availability and completion of every lesson in a course, in order-rank order."""
    statuses: list[LessonStatusModel] = []
    for index, lesson in enumerate(course.ordered_lessons()):
        statuses.append(
            LessonStatusModel(
                lessonId=lesson.id,
                title=lesson.title,
                index=index,
                available=is_lesson_available(course, progress, index),
                completed=progress.has_completed(lesson.id) if progress else False,
            )
        )
    return statuses


def course_progress_percent(course: CourseModel, progress: typing.Optional[UserProgressModel]) -> int:
    if progress is None:
        return 0
    return percent_of(len(progress.completedLessons), len(course.lessons))
