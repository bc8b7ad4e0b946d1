import json
import logging
import typing

from lms_engine.models.course_models import CourseModel, LessonModel
from lms_engine.models.quiz_models import QuestionModel, QuestionType, QUESTION_TYPES, QuizModel
from lms_engine.storage.courses_collection import CoursesCollection
from lms_engine.storage.quizzes_collection import QuizzesCollection
from lms_engine.utils.base_types import CourseId, LessonId, QuestionId, QuizId
from lms_engine.utils.input_validator import InputValidator, InvalidInputError
from lms_engine.utils.time_utils import generate_id

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)

# Question types whose options are entered one per line on the authoring form
_TYPES_WITH_OPTIONS = ("single", "multiple", "sequence", "dragdrop")

DEFAULT_QUESTION_POINTS = 10


class DuplicateLessonOrderError(ValueError):
    pass


def build_question_from_form(
    question_type: str,
    question_text: str,
    options_text: typing.Optional[str],
    correct_answer_text: str,
    points_text: typing.Optional[str] = None,
    question_id: typing.Optional[QuestionId] = None,
) -> QuestionModel:
    """
    Builds a question from the raw text fields of the authoring form.

    - options: one per line, only kept for single/multiple/sequence/dragdrop
    - correct answer: an integer index for 'single', a comma-separated list for
      'multiple', one item per line for 'sequence'/'dragdrop', the raw text for
      every other type
    - points: integer, defaults to 10 when missing or not a number

    :raises InvalidInputError: If the type is unknown, the question is blank, or a
        'single' answer is not an integer.
    """
    if question_type not in QUESTION_TYPES:
        raise InvalidInputError(f"Unknown question type: {question_type}")
    InputValidator.validate_field(question_text, "question")

    options: typing.Optional[list[str]] = None
    if options_text and question_type in _TYPES_WITH_OPTIONS:
        options = [line.strip() for line in options_text.split("\n") if line.strip()]

    correct_answer: typing.Union[int, str, list[typing.Union[int, str]]]
    if question_type == "single":
        try:
            correct_answer = int(correct_answer_text.strip())
        except ValueError:
            raise InvalidInputError(f"Correct answer for a single-choice question must be an index: {correct_answer_text}")
    elif question_type == "multiple":
        correct_answer = [part.strip() for part in correct_answer_text.split(",") if part.strip()]
    elif question_type in ("sequence", "dragdrop"):
        correct_answer = [line.strip() for line in correct_answer_text.split("\n") if line.strip()]
    else:
        correct_answer = correct_answer_text

    try:
        points = int(points_text) if points_text else DEFAULT_QUESTION_POINTS
    except ValueError:
        points = DEFAULT_QUESTION_POINTS
    if points < 1:
        points = DEFAULT_QUESTION_POINTS

    return QuestionModel(
        id=question_id or QuestionId(generate_id("question")),
        type=typing.cast(QuestionType, question_type),
        question=question_text,
        options=options,
        correctAnswer=correct_answer,
        points=points,
    )


class CatalogAdminService:
    """
    Administrator authoring of courses, lessons, quizzes and questions.

    Lookups of unknown ids return None/False and log a warning. Invalid authored
    content raises InvalidInputError or DuplicateLessonOrderError.
    """

    def __init__(self, courses_collection: CoursesCollection, quizzes_collection: QuizzesCollection) -> None:
        self.courses_collection = courses_collection
        self.quizzes_collection = quizzes_collection

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    def create_course(self, title: str, description: str = "", sequential: bool = False) -> CourseModel:
        InputValidator.validate_field(title, "title")
        InputValidator.validate_field(description, "description", required=False)
        course = CourseModel(
            id=CourseId(generate_id("course")),
            title=title,
            description=description,
            sequential=sequential,
            lessons=[],
        )
        return self.courses_collection.save_course(course)

    def update_course(
        self,
        course_id: CourseId,
        title: typing.Optional[str] = None,
        description: typing.Optional[str] = None,
        sequential: typing.Optional[bool] = None,
    ) -> typing.Optional[CourseModel]:
        """
        Updates course fields; None leaves a field unchanged. Existing progress
        records are not re-evaluated.
        """
        course = self.courses_collection.get_course(course_id)
        if course is None:
            _LOGGER.warning(f"Update requested for unknown course {course_id}")
            return None

        updates: dict[str, typing.Any] = {}
        if title is not None:
            InputValidator.validate_field(title, "title")
            updates["title"] = title
        if description is not None:
            InputValidator.validate_field(description, "description", required=False)
            updates["description"] = description
        if sequential is not None:
            updates["sequential"] = sequential

        return self.courses_collection.save_course(course.model_copy(update=updates))

    def delete_course(self, course_id: CourseId) -> bool:
        return self.courses_collection.delete_course(course_id)

    # -------------------------------------------------------------------------
    # Lessons
    # -------------------------------------------------------------------------

    def save_lesson(
        self,
        course_id: CourseId,
        title: str,
        content: str,
        lesson_id: typing.Optional[LessonId] = None,
        order: typing.Optional[int] = None,
    ) -> typing.Optional[LessonModel]:
        """
        Adds a lesson, or replaces the lesson with `lesson_id`.

        A new lesson is placed after the current last rank unless `order` is given;
        an edited lesson keeps its rank unless `order` is given.

        :raises DuplicateLessonOrderError: If the rank is already used by another lesson.
        """
        course = self.courses_collection.get_course(course_id)
        if course is None:
            _LOGGER.warning(f"Lesson save requested for unknown course {course_id}")
            return None

        InputValidator.validate_field(title, "title")
        InputValidator.validate_field(content, "content", required=False)

        existing = course.find_lesson(lesson_id) if lesson_id else None
        if order is None:
            if existing:
                order = existing.order
            else:
                order = max((lesson.order for lesson in course.lessons), default=0) + 1

        lesson = LessonModel(
            id=existing.id if existing else (lesson_id or LessonId(generate_id("lesson"))),
            title=title,
            content=content,
            courseId=course.id,
            order=order,
        )

        if existing:
            lessons = [lesson if current.id == existing.id else current for current in course.lessons]
        else:
            lessons = [*course.lessons, lesson]

        updated_course = course.model_copy(update={"lessons": lessons})
        duplicates = updated_course.duplicate_order_ranks()
        if duplicates:
            raise DuplicateLessonOrderError(f"Lesson order {duplicates} already used in course {course.id}")

        self.courses_collection.save_course(updated_course)
        _LOGGER.info(f"Saved lesson {lesson.id} (order {lesson.order}) in course {course.id}")
        return lesson

    def delete_lesson(self, course_id: CourseId, lesson_id: LessonId) -> bool:
        """
        Removes a lesson. Completed-lesson ids already in progress records are left as they are.
        """
        course = self.courses_collection.get_course(course_id)
        if course is None or course.find_lesson(lesson_id) is None:
            _LOGGER.warning(f"Delete requested for unknown lesson {lesson_id} in course {course_id}")
            return False

        lessons = [lesson for lesson in course.lessons if lesson.id != lesson_id]
        self.courses_collection.save_course(course.model_copy(update={"lessons": lessons}))
        _LOGGER.info(f"Deleted lesson {lesson_id} from course {course_id}")
        return True

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    def create_quiz(
        self,
        title: str,
        description: str = "",
        passing_score: int = 70,
        time_limit: typing.Optional[int] = None,
    ) -> QuizModel:
        InputValidator.validate_field(title, "title")
        InputValidator.validate_field(description, "description", required=False)
        quiz = QuizModel(
            id=QuizId(generate_id("quiz")),
            title=title,
            description=description,
            questions=[],
            timeLimit=time_limit,
            passingScore=passing_score,
        )
        return self.quizzes_collection.save_quiz(quiz)

    def update_quiz(
        self,
        quiz_id: QuizId,
        title: typing.Optional[str] = None,
        description: typing.Optional[str] = None,
        passing_score: typing.Optional[int] = None,
        time_limit: typing.Optional[int] = None,
    ) -> typing.Optional[QuizModel]:
        quiz = self.quizzes_collection.get_quiz(quiz_id)
        if quiz is None:
            _LOGGER.warning(f"Update requested for unknown quiz {quiz_id}")
            return None

        data = quiz.model_dump()
        if title is not None:
            InputValidator.validate_field(title, "title")
            data["title"] = title
        if description is not None:
            InputValidator.validate_field(description, "description", required=False)
            data["description"] = description
        if passing_score is not None:
            data["passingScore"] = passing_score
        if time_limit is not None:
            data["timeLimit"] = time_limit

        # Re-validate so that out-of-range scores are rejected
        return self.quizzes_collection.save_quiz(QuizModel.model_validate(data))

    def delete_quiz(self, quiz_id: QuizId) -> bool:
        return self.quizzes_collection.delete_quiz(quiz_id)

    def save_question(self, quiz_id: QuizId, question: QuestionModel) -> typing.Optional[QuizModel]:
        """Adds the question, or replaces the question with the same id."""
        quiz = self.quizzes_collection.get_quiz(quiz_id)
        if quiz is None:
            _LOGGER.warning(f"Question save requested for unknown quiz {quiz_id}")
            return None

        if any(existing.id == question.id for existing in quiz.questions):
            questions = [question if existing.id == question.id else existing for existing in quiz.questions]
        else:
            questions = [*quiz.questions, question]

        _LOGGER.info(f"Saved question {question.id} ({question.type}) in quiz {quiz_id}")
        return self.quizzes_collection.save_quiz(quiz.model_copy(update={"questions": questions}))

    def delete_question(self, quiz_id: QuizId, question_id: QuestionId) -> typing.Optional[QuizModel]:
        quiz = self.quizzes_collection.get_quiz(quiz_id)
        if quiz is None:
            _LOGGER.warning(f"Question delete requested for unknown quiz {quiz_id}")
            return None

        questions = [question for question in quiz.questions if question.id != question_id]
        return self.quizzes_collection.save_quiz(quiz.model_copy(update={"questions": questions}))

    def export_quizzes_json(self) -> str:
        quizzes = self.quizzes_collection.get_quizzes()
        return json.dumps(
            [quiz.model_dump(mode="json", exclude_none=True) for quiz in quizzes],
            indent=2,
            ensure_ascii=False,
        )
