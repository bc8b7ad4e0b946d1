import logging
import typing

from lms_engine.engine.answer_coercion import coerce_answer
from lms_engine.models.answer_models import ScoringOptions
from lms_engine.models.quiz_models import (
    QuestionModel,
    QuestionOutcomeModel,
    QuizGradeModel,
    QuizModel,
    QuizResultModel,
)
from lms_engine.utils.base_types import IsoTimestamp, QuestionId, QuizResultId, UserId
from lms_engine.utils.math_utils import percent_of
from lms_engine.utils.time_utils import generate_id, utc_now_iso

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


def is_answer_correct(
    question: QuestionModel,
    submitted: typing.Any,
    options: typing.Optional[ScoringOptions] = None,
) -> bool:
    """
    Compares a submitted answer with the question's correct answer.
    Both are coerced to the typed variant for the question type; an answer that
    cannot be coerced (or a question whose correct answer cannot) is wrong.
    """
    correct_value = coerce_answer(question, question.correctAnswer, options)
    if correct_value is None:
        _LOGGER.warning(f"Question {question.id} ({question.type}) has an unusable correct answer")
        return False

    submitted_value = coerce_answer(question, submitted, options)
    if submitted_value is None:
        return False

    return submitted_value == correct_value


def grade_quiz(
    quiz: QuizModel,
    submitted_answers: typing.Mapping[QuestionId, typing.Any],
    options: typing.Optional[ScoringOptions] = None,
) -> QuizGradeModel:
    """
    Grades every question all-or-nothing and computes the percentage score.

    score = round_half_up(100 * earned / possible), or 0 when the quiz has no points.
    """
    outcomes: list[QuestionOutcomeModel] = []
    for question in quiz.questions:
        correct = is_answer_correct(question, submitted_answers.get(question.id), options)
        outcomes.append(
            QuestionOutcomeModel(
                questionId=question.id,
                correct=correct,
                pointsEarned=question.points if correct else 0,
                pointsPossible=question.points,
            )
        )

    points_earned = sum(outcome.pointsEarned for outcome in outcomes)
    points_possible = sum(outcome.pointsPossible for outcome in outcomes)
    score = percent_of(points_earned, points_possible)

    return QuizGradeModel(
        quizId=quiz.id,
        score=score,
        passed=score >= quiz.passingScore,
        pointsEarned=points_earned,
        pointsPossible=points_possible,
        outcomes=outcomes,
    )


def score_quiz(
    quiz: QuizModel,
    submitted_answers: typing.Mapping[QuestionId, typing.Any],
    user_id: UserId,
    options: typing.Optional[ScoringOptions] = None,
    result_id: typing.Optional[QuizResultId] = None,
    completed_at: typing.Optional[IsoTimestamp] = None,
) -> QuizResultModel:
    """
    Scores a submission and returns a new, immutable QuizResult.
    The scorer does not look at time limits; it scores whatever it is given.
    """
    grade = grade_quiz(quiz, submitted_answers, options)
    _LOGGER.info(
        f"Scored quiz {quiz.id} for user {user_id}: {grade.pointsEarned}/{grade.pointsPossible} points, "
        f"score={grade.score}, passed={grade.passed}"
    )
    return QuizResultModel(
        id=result_id or QuizResultId(generate_id("result")),
        userId=user_id,
        quizId=quiz.id,
        score=grade.score,
        passed=grade.passed,
        answers=dict(submitted_answers),
        completedAt=completed_at or utc_now_iso(),
    )
