import logging

from lms_engine.models.course_models import CourseModel, LessonModel
from lms_engine.models.quiz_models import QuestionModel, QuizModel
from lms_engine.services.account_service import AccountService
from lms_engine.storage.courses_collection import CoursesCollection
from lms_engine.storage.quizzes_collection import QuizzesCollection
from lms_engine.storage.users_collection import UsersCollection
from lms_engine.utils.base_types import CourseId, LessonId, QuestionId, QuizId
from lms_engine.utils.time_utils import Clock, utc_now_iso

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)

SAMPLE_COURSE_ID = CourseId("course-1")
SAMPLE_LESSON_ID = LessonId("lesson-1")
SAMPLE_QUIZ_ID = QuizId("quiz-1")

_SAMPLE_LESSON_CONTENT = (
    "# Welcome to the learning system\n\n"
    "This is your first lesson. Here you will learn the basics of the platform.\n\n"
    "## What you will learn:\n"
    "- How to go through lessons\n"
    "- How to take quizzes\n"
    "- How to track your progress\n\n"
    f"[quiz:{SAMPLE_QUIZ_ID}]"
)


def _sample_course() -> CourseModel:
    return CourseModel(
        id=SAMPLE_COURSE_ID,
        title="Introduction to the system",
        description="A starter course to get familiar with the learning platform",
        sequential=True,
        lessons=[
            LessonModel(
                id=SAMPLE_LESSON_ID,
                title="Welcome",
                content=_SAMPLE_LESSON_CONTENT,
                courseId=SAMPLE_COURSE_ID,
                order=1,
            )
        ],
    )


def _sample_quiz() -> QuizModel:
    return QuizModel(
        id=SAMPLE_QUIZ_ID,
        title="Knowledge check",
        description="Quiz for the first lesson",
        timeLimit=600,
        passingScore=70,
        questions=[
            QuestionModel(
                id=QuestionId("q1"),
                type="single",
                question="What is this platform called?",
                options=["LMS System", "Learning platform", "Training system", "All of the above"],
                correctAnswer=3,
                points=10,
            )
        ],
    )


def initialize_default_data(
    users_collection: UsersCollection,
    courses_collection: CoursesCollection,
    quizzes_collection: QuizzesCollection,
    clock: Clock = utc_now_iso,
) -> None:
    """
    Seeds an empty store: the default administrator when there are no users, and
    the sample course with its quiz when there are no courses. Collections that
    already hold data are left alone, so the call is safe on every start-up.
    """
    AccountService(users_collection, clock).ensure_default_admin()

    if courses_collection.get_courses():
        return

    _LOGGER.info("No courses found. Seeding sample course and quiz.")
    courses_collection.save_course(_sample_course())
    quizzes_collection.save_quiz(_sample_quiz())
