import logging
import typing

from lms_engine.models.quiz_models import QuizModel
from lms_engine.storage.json_collection import JsonCollection
from lms_engine.storage.key_value_store import KeyValueStore
from lms_engine.utils.base_types import QuizId, StorageKey

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class QuizzesCollection:
    """
    Data Abstraction Layer for quizzes. Questions are embedded in their quiz record.
    """

    QUIZZES_KEY = StorageKey("lms_quizzes")

    def __init__(self, store: KeyValueStore) -> None:
        self.collection = JsonCollection(store, self.QUIZZES_KEY, QuizModel)

    def get_quizzes(self) -> list[QuizModel]:
        return self.collection.load_all()

    def get_quiz(self, quiz_id: QuizId) -> typing.Optional[QuizModel]:
        return next((quiz for quiz in self.get_quizzes() if quiz.id == quiz_id), None)

    def save_quiz(self, quiz: QuizModel) -> QuizModel:
        self.collection.upsert(quiz, lambda existing: existing.id == quiz.id)
        _LOGGER.info(f"Saved quiz {quiz.id} with {len(quiz.questions)} question(s)")
        return quiz

    def delete_quiz(self, quiz_id: QuizId) -> bool:
        removed = self.collection.remove_where(lambda quiz: quiz.id == quiz_id)
        if removed:
            _LOGGER.info(f"Deleted quiz {quiz_id}")
        else:
            _LOGGER.warning(f"Delete requested for unknown quiz {quiz_id}")
        return removed > 0
