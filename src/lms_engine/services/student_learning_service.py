import logging
import re
import typing

from lms_engine.engine import lesson_gate
from lms_engine.engine.completion_tracker import CompletionTracker
from lms_engine.engine.quiz_scorer import score_quiz
from lms_engine.models.answer_models import ScoringOptions
from lms_engine.models.course_models import CourseModel, LessonModel
from lms_engine.models.progress_models import (
    CourseOverviewModel,
    LessonCompletionOutcomeModel,
    UserProgressModel,
)
from lms_engine.models.quiz_models import QuizResultModel
from lms_engine.models.user_models import UserModel
from lms_engine.storage.courses_collection import CoursesCollection
from lms_engine.storage.progress_collection import ProgressCollection
from lms_engine.storage.quizzes_collection import QuizzesCollection
from lms_engine.storage.users_collection import UsersCollection
from lms_engine.utils.base_types import CourseId, LessonId, QuestionId, QuizId
from lms_engine.utils.time_utils import Clock, utc_now_iso

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)

# Lesson markdown embeds quizzes as [quiz:<quizId>]
_QUIZ_REFERENCE_PATTERN = re.compile(r"\[quiz:([^\]\s]+)\]")


def quiz_ids_in_lesson(lesson: LessonModel) -> list[QuizId]:
    """Quiz ids referenced by a lesson's content, in order of appearance, without repeats."""
    found = _QUIZ_REFERENCE_PATTERN.findall(lesson.content)
    return [QuizId(quiz_id) for quiz_id in dict.fromkeys(found)]


class StudentLearningService:
    """
    The student-facing flow for the signed-in user: opening courses, lesson
    availability, completing lessons and submitting quizzes.

    Every operation returns None when there is no current user or when the
    course, lesson or quiz does not exist.
    """

    def __init__(
        self,
        users_collection: UsersCollection,
        courses_collection: CoursesCollection,
        quizzes_collection: QuizzesCollection,
        progress_collection: ProgressCollection,
        scoring_options: typing.Optional[ScoringOptions] = None,
        clock: Clock = utc_now_iso,
    ) -> None:
        self.users_collection = users_collection
        self.courses_collection = courses_collection
        self.quizzes_collection = quizzes_collection
        self.progress_collection = progress_collection
        self.scoring_options = scoring_options or ScoringOptions()
        self.clock = clock
        self.tracker = CompletionTracker(progress_collection, clock)

    def _current_user(self) -> typing.Optional[UserModel]:
        user = self.users_collection.get_current_user()
        if user is None:
            _LOGGER.warning("No user is signed in")
        return user

    def _course(self, course_id: CourseId) -> typing.Optional[CourseModel]:
        course = self.courses_collection.get_course(course_id)
        if course is None:
            _LOGGER.warning(f"Course {course_id} not found")
        return course

    def open_course(self, course_id: CourseId) -> typing.Optional[UserProgressModel]:
        """Returns the current user's progress, creating an empty record on the first visit."""
        course = self._course(course_id)
        if course is None:
            return None
        return self.tracker.open_course(self._current_user(), course)

    def lesson_overview(self, course_id: CourseId) -> typing.Optional[CourseOverviewModel]:
        user = self._current_user()
        course = self._course(course_id)
        if user is None or course is None:
            return None

        progress = self.progress_collection.get_progress(user.id, course.id)
        return CourseOverviewModel(
            courseId=course.id,
            title=course.title,
            completedCount=len(progress.completedLessons) if progress else 0,
            totalCount=len(course.lessons),
            progressPercent=lesson_gate.course_progress_percent(course, progress),
            courseCompleted=progress.courseCompleted if progress else False,
            lessons=lesson_gate.lesson_availability(course, progress),
        )

    def is_lesson_available(self, course_id: CourseId, lesson_id: LessonId) -> typing.Optional[bool]:
        user = self._current_user()
        course = self._course(course_id)
        if user is None or course is None:
            return None

        lesson_ids = [lesson.id for lesson in course.ordered_lessons()]
        if lesson_id not in lesson_ids:
            return None

        progress = self.progress_collection.get_progress(user.id, course.id)
        return lesson_gate.is_lesson_available(course, progress, lesson_ids.index(lesson_id))

    def complete_lesson(self, course_id: CourseId, lesson_id: LessonId) -> typing.Optional[LessonCompletionOutcomeModel]:
        """
        Marks the lesson finished for the current user. Availability is not checked
        here; callers only offer the action for available lessons.
        """
        course = self._course(course_id)
        if course is None:
            return None

        lesson = course.find_lesson(lesson_id)
        if lesson is None:
            _LOGGER.warning(f"Lesson {lesson_id} not found in course {course_id}")
            return None

        return self.tracker.complete_lesson(self._current_user(), course, lesson)

    def next_lesson(self, course_id: CourseId, lesson_id: LessonId) -> typing.Optional[LessonModel]:
        """The lesson after `lesson_id` in order-rank order, or None at the end of the course."""
        course = self._course(course_id)
        if course is None:
            return None

        lessons = course.ordered_lessons()
        for index, lesson in enumerate(lessons[:-1]):
            if lesson.id == lesson_id:
                return lessons[index + 1]
        return None

    def lesson_quizzes(self, course_id: CourseId, lesson_id: LessonId) -> list[QuizId]:
        """Ids of existing quizzes embedded in the lesson."""
        course = self._course(course_id)
        lesson = course.find_lesson(lesson_id) if course else None
        if lesson is None:
            return []
        return [quiz_id for quiz_id in quiz_ids_in_lesson(lesson) if self.quizzes_collection.get_quiz(quiz_id)]

    def submit_quiz(
        self,
        course_id: CourseId,
        quiz_id: QuizId,
        answers: typing.Mapping[QuestionId, typing.Any],
    ) -> typing.Optional[QuizResultModel]:
        """
        Scores the submission and appends the result to the user's progress for the course.
        Every submission is kept as a separate attempt.
        """
        user = self._current_user()
        if user is None:
            return None

        quiz = self.quizzes_collection.get_quiz(quiz_id)
        if quiz is None:
            _LOGGER.warning(f"Quiz {quiz_id} not found")
            return None

        if self._course(course_id) is None:
            return None

        result = score_quiz(quiz, answers, user.id, self.scoring_options, completed_at=self.clock())
        self.tracker.record_quiz_result(user, course_id, result)
        return result

    def my_progress(self) -> list[UserProgressModel]:
        """All progress records of the current user, for the student dashboard."""
        user = self._current_user()
        if user is None:
            return []
        return self.progress_collection.get_user_progress(user.id)
