import pytest

from lms_engine.engine.answer_coercion import COERCERS, coerce_answer
from lms_engine.engine.quiz_scorer import grade_quiz, is_answer_correct, score_quiz
from lms_engine.models.answer_models import ChoiceSetAnswer, IndexAnswer, ScoringOptions
from lms_engine.models.quiz_models import QUESTION_TYPES, HotspotRegionModel, QuestionModel, QuizModel
from lms_engine.utils.base_types import IsoTimestamp, QuestionId, QuizId, QuizResultId, UserId

USER = UserId("user-ann")


def _question(question_type: str, correct_answer, points: int = 10, **kwargs) -> QuestionModel:
    return QuestionModel(
        id=QuestionId(f"q-{question_type}"),
        type=question_type,
        question="?",
        correctAnswer=correct_answer,
        points=points,
        **kwargs,
    )


HOTSPOTS = [
    HotspotRegionModel(id="r1", x=0, y=0, width=10, height=10),
    HotspotRegionModel(id="r2", x=50, y=50, width=20, height=20),
]


def test_every_question_type_has_a_coercer():
    assert set(COERCERS) == set(QUESTION_TYPES)


class TestSingleChoice:
    question = _question("single", 3, options=["a", "b", "c", "All of the above"])

    @pytest.mark.parametrize("submitted", [3, "3", " 3 ", "All of the above"])
    def test_correct(self, submitted):
        assert is_answer_correct(self.question, submitted) is True

    @pytest.mark.parametrize("submitted", [2, "b", True, None, [3]])
    def test_wrong(self, submitted):
        assert is_answer_correct(self.question, submitted) is False


class TestMultipleChoice:
    # Authoring form stores indices as strings
    question = _question("multiple", ["0", "2"], options=["red", "green", "blue"])

    def test_order_does_not_matter(self):
        assert is_answer_correct(self.question, [2, 0]) is True
        assert is_answer_correct(self.question, ["blue", "red"]) is True

    def test_exact_set_required(self):
        assert is_answer_correct(self.question, [0]) is False
        assert is_answer_correct(self.question, [0, 1, 2]) is False

    def test_coerces_to_choice_set(self):
        assert coerce_answer(self.question, "0, 2") == ChoiceSetAnswer(choices=frozenset({"0", "2"}))


def test_true_false():
    question = _question("truefalse", "true")
    assert is_answer_correct(question, True) is True
    assert is_answer_correct(question, "true") is True
    assert is_answer_correct(question, "TRUE") is False
    assert is_answer_correct(question, " true ") is False
    assert is_answer_correct(question, False) is False
    assert is_answer_correct(question, 1) is False


class TestFillBlank:
    question = _question("fillblank", "New York")

    def test_exact_match_by_default(self):
        assert is_answer_correct(self.question, "New York") is True
        assert is_answer_correct(self.question, "new york") is False
        assert is_answer_correct(self.question, " New  York ") is False

    def test_ignore_case(self):
        options = ScoringOptions(fillblank_ignore_case=True)
        assert is_answer_correct(self.question, "new york", options) is True
        assert is_answer_correct(self.question, " new york", options) is False

    def test_trim_whitespace(self):
        options = ScoringOptions(fillblank_trim_whitespace=True)
        assert is_answer_correct(self.question, " New  York ", options) is True

    def test_numbers_are_not_text(self):
        assert is_answer_correct(_question("fillblank", "42"), "42") is True
        assert is_answer_correct(_question("fillblank", "42"), 42) is False


@pytest.mark.parametrize("question_type", ["sequence", "dragdrop"])
def test_ordered_questions(question_type):
    question = _question(question_type, "plan\ndo\ncheck")
    assert is_answer_correct(question, ["plan", "do", "check"]) is True
    assert is_answer_correct(question, "plan\ndo\ncheck") is True
    assert is_answer_correct(question, "plan, do, check") is False
    assert is_answer_correct(question, ["do", "plan", "check"]) is False
    assert is_answer_correct(question, ["plan", "do"]) is False


@pytest.mark.parametrize("question_type", ["sequence", "dragdrop"])
def test_ordered_items_are_compared_verbatim(question_type):
    question = _question(question_type, ["a", "b"])
    assert is_answer_correct(question, ["a", "b"]) is True
    assert is_answer_correct(question, [" a", "b"]) is False
    assert is_answer_correct(question, ["A", "b"]) is False
    assert is_answer_correct(question, "a, b") is False
    assert is_answer_correct(_question(question_type, ["1", "2"]), [1, 2]) is False


class TestCategoryMatching:
    question = _question("dragdrop-categories", {"apple": "fruit", "carrot": "vegetable"})

    @pytest.mark.parametrize(
        "submitted",
        [
            {"carrot": "vegetable", "apple": "fruit"},
            {"fruit": ["apple"], "vegetable": ["carrot"]},
            "apple:fruit\ncarrot:vegetable",
            [["apple", "fruit"], ["carrot", "vegetable"]],
        ],
    )
    def test_same_mapping_in_any_shape(self, submitted):
        assert is_answer_correct(self.question, submitted) is True

    def test_wrong_or_partial_mapping(self):
        assert is_answer_correct(self.question, {"apple": "vegetable", "carrot": "fruit"}) is False
        assert is_answer_correct(self.question, {"apple": "fruit"}) is False

    def test_item_in_two_categories_cannot_be_coerced(self):
        assert coerce_answer(self.question, [["apple", "fruit"], ["apple", "vegetable"]]) is None

    @pytest.mark.parametrize(
        "stored",
        [
            {"fruit": ["apple"], "vegetable": ["carrot"]},
            [["apple", "fruit"], ["carrot", "vegetable"]],
        ],
    )
    def test_stored_answer_in_other_shapes(self, stored):
        question = _question("dragdrop-categories", stored)
        assert is_answer_correct(question, {"apple": "fruit", "carrot": "vegetable"}) is True
        assert is_answer_correct(question, {"apple": "vegetable", "carrot": "fruit"}) is False


class TestHotspots:
    def test_single_region_by_id_or_point(self):
        question = _question("hotspot", "r2", hotspots=HOTSPOTS)
        assert is_answer_correct(question, "r2") is True
        assert is_answer_correct(question, {"x": 55, "y": 60}) is True
        assert is_answer_correct(question, {"x": 5, "y": 5}) is False
        assert is_answer_correct(question, {"x": 500, "y": 500}) is False

    def test_region_set_ignores_order(self):
        question = _question("hotspot-multiple", ["r1", "r2"], hotspots=HOTSPOTS)
        assert is_answer_correct(question, ["r2", {"x": 1, "y": 1}]) is True
        assert is_answer_correct(question, ["r2"]) is False

    def test_region_sequence_requires_order(self):
        question = _question("hotspot-sequence", ["r1", "r2"], hotspots=HOTSPOTS)
        assert is_answer_correct(question, ["r1", "r2"]) is True
        assert is_answer_correct(question, ["r2", "r1"]) is False


def test_unusable_correct_answer_is_never_matched():
    question = _question("single", "not-an-index")
    assert is_answer_correct(question, "not-an-index") is False


def test_coerce_index():
    question = _question("single", 1, options=["a", "b"])
    assert coerce_answer(question, "b") == IndexAnswer(index=1)
    assert coerce_answer(question, None) is None


def _quiz(*questions: QuestionModel, passing_score: int = 70) -> QuizModel:
    return QuizModel(id=QuizId("quiz-1"), title="Check", questions=list(questions), passingScore=passing_score)


def test_partial_credit_is_rounded_and_compared_to_passing_score():
    quiz = _quiz(
        QuestionModel(id=QuestionId("q1"), type="single", question="?", options=["a", "b"], correctAnswer=0, points=10),
        QuestionModel(id=QuestionId("q2"), type="truefalse", question="?", correctAnswer="true", points=20),
    )

    grade = grade_quiz(quiz, {QuestionId("q1"): 1, QuestionId("q2"): True})

    assert grade.pointsEarned == 20
    assert grade.pointsPossible == 30
    assert grade.score == 67
    assert grade.passed is False
    assert [outcome.correct for outcome in grade.outcomes] == [False, True]


def test_all_correct_passes():
    quiz = _quiz(QuestionModel(id=QuestionId("q1"), type="truefalse", question="?", correctAnswer="false"))

    grade = grade_quiz(quiz, {QuestionId("q1"): False})

    assert grade.score == 100
    assert grade.passed is True


def test_score_exactly_at_passing_score_passes():
    quiz = _quiz(
        QuestionModel(id=QuestionId("q1"), type="fillblank", question="?", correctAnswer="a", points=7),
        QuestionModel(id=QuestionId("q2"), type="fillblank", question="?", correctAnswer="b", points=3),
    )
    assert grade_quiz(quiz, {QuestionId("q1"): "a"}).passed is True


def test_quiz_without_questions_scores_zero():
    assert grade_quiz(_quiz(), {}).score == 0
    assert grade_quiz(_quiz(passing_score=0), {}).passed is True


def test_unanswered_questions_earn_nothing():
    quiz = _quiz(QuestionModel(id=QuestionId("q1"), type="single", question="?", correctAnswer=0))
    assert grade_quiz(quiz, {}).score == 0


def test_score_quiz_builds_result():
    quiz = _quiz(QuestionModel(id=QuestionId("q1"), type="single", question="?", correctAnswer=0))
    answers = {QuestionId("q1"): 0}

    result = score_quiz(
        quiz,
        answers,
        USER,
        result_id=QuizResultId("r1"),
        completed_at=IsoTimestamp("2024-03-01T12:00:00Z"),
    )

    assert result.id == "r1"
    assert result.userId == USER
    assert result.quizId == quiz.id
    assert result.score == 100
    assert result.passed is True
    assert result.answers == answers
    assert result.completedAt == "2024-03-01T12:00:00Z"


def test_score_quiz_generates_id_and_timestamp():
    result = score_quiz(_quiz(), {}, USER)
    assert result.id.startswith("result-")
    assert result.completedAt.endswith("Z")


def test_true_false_quiz_with_low_passing_score():
    quiz = _quiz(
        QuestionModel(id=QuestionId("q1"), type="truefalse", question="?", correctAnswer="true", points=10),
        passing_score=50,
    )

    first = grade_quiz(quiz, {QuestionId("q1"): "true"})
    second = grade_quiz(quiz, {QuestionId("q1"): "true"})

    assert (first.score, first.passed) == (100, True)
    assert first == second
