import logging
import typing

from lms_engine.models.course_models import CourseModel, LessonModel
from lms_engine.models.progress_models import LessonCompletionOutcomeModel, UserProgressModel
from lms_engine.models.quiz_models import QuizResultModel
from lms_engine.models.user_models import UserModel
from lms_engine.storage.progress_collection import ProgressCollection
from lms_engine.utils.base_types import CourseId, IsoTimestamp, UserId
from lms_engine.utils.time_utils import Clock, utc_now_iso

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


def new_progress(user_id: UserId, course_id: CourseId, now: IsoTimestamp) -> UserProgressModel:
    return UserProgressModel(
        userId=user_id,
        courseId=course_id,
        completedLessons=[],
        quizResults=[],
        courseCompleted=False,
        lastAccessedAt=now,
    )


def complete_lesson(
    progress: UserProgressModel,
    lesson: LessonModel,
    course: CourseModel,
    now: IsoTimestamp,
) -> UserProgressModel:
    """
    Returns the progress after finishing `lesson`. A lesson that is already
    completed leaves the record untouched and the same instance is returned.

    courseCompleted is recomputed from the course's current lesson count. It is
    only recomputed here, so lessons added to a course later do not revoke an
    earlier completion.
    """
    if progress.has_completed(lesson.id):
        return progress

    completed_lessons = [*progress.completedLessons, lesson.id]
    return progress.model_copy(
        update={
            "completedLessons": completed_lessons,
            "courseCompleted": len(completed_lessons) == len(course.lessons),
            "lastAccessedAt": now,
        }
    )


def append_quiz_result(progress: UserProgressModel, result: QuizResultModel, now: IsoTimestamp) -> UserProgressModel:
    return progress.model_copy(
        update={
            "quizResults": [*progress.quizResults, result],
            "lastAccessedAt": now,
        }
    )


class CompletionTracker:
    """
    Applies completion transitions to stored progress records.

    Every method takes the acting user as Optional: with no user the call is
    skipped and nothing is created or written.
    """

    def __init__(self, progress_collection: ProgressCollection, clock: Clock = utc_now_iso) -> None:
        self.progress_collection = progress_collection
        self.clock = clock

    def open_course(self, user: typing.Optional[UserModel], course: CourseModel) -> typing.Optional[UserProgressModel]:
        """
        Returns the user's progress for the course, creating an empty record on the first visit.
        """
        if user is None:
            _LOGGER.warning(f"No current user; not opening course {course.id}")
            return None

        progress = self.progress_collection.get_progress(user.id, course.id)
        if progress:
            return progress

        _LOGGER.info(f"No existing progress for user {user.id}, course {course.id}. Creating new record.")
        return self.progress_collection.save_user_progress(new_progress(user.id, course.id, self.clock()))

    def complete_lesson(
        self,
        user: typing.Optional[UserModel],
        course: CourseModel,
        lesson: LessonModel,
    ) -> typing.Optional[LessonCompletionOutcomeModel]:
        if user is None:
            _LOGGER.warning(f"No current user; skipping completion of lesson {lesson.id}")
            return None

        if course.find_lesson(lesson.id) is None:
            _LOGGER.warning(f"Lesson {lesson.id} does not belong to course {course.id}; skipping completion")
            return None

        current = self.progress_collection.get_progress(user.id, course.id)
        if current is None:
            current = new_progress(user.id, course.id, self.clock())

        updated = complete_lesson(current, lesson, course, self.clock())
        if updated is current:
            _LOGGER.debug(f"Lesson {lesson.id} already completed by user {user.id}")
            return LessonCompletionOutcomeModel(progress=current, changed=False)

        self.progress_collection.save_user_progress(updated)
        _LOGGER.info(
            f"User {user.id} completed lesson {lesson.id} in course {course.id} "
            f"({len(updated.completedLessons)}/{len(course.lessons)}, courseCompleted={updated.courseCompleted})"
        )
        return LessonCompletionOutcomeModel(progress=updated, changed=True)

    def record_quiz_result(
        self,
        user: typing.Optional[UserModel],
        course_id: CourseId,
        result: QuizResultModel,
    ) -> typing.Optional[UserProgressModel]:
        """
        Appends a quiz attempt to the user's progress for the course. Earlier attempts are kept.
        """
        if user is None:
            _LOGGER.warning(f"No current user; not recording result for quiz {result.quizId}")
            return None

        now = self.clock()
        current = self.progress_collection.get_progress(user.id, course_id) or new_progress(user.id, course_id, now)
        updated = append_quiz_result(current, result, now)
        self.progress_collection.save_user_progress(updated)
        _LOGGER.info(
            f"Recorded result {result.id} for user {user.id}, quiz {result.quizId}: "
            f"score={result.score}, passed={result.passed}"
        )
        return updated
