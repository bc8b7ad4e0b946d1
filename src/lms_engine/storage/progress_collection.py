import logging
import typing

from lms_engine.models.progress_models import UserProgressModel
from lms_engine.storage.json_collection import JsonCollection
from lms_engine.storage.key_value_store import KeyValueStore
from lms_engine.utils.base_types import CourseId, StorageKey, UserId

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class ProgressCollection:
    """
    Data Abstraction Layer for progress records.
    Records are uniquely keyed by the (userId, courseId) pair; saves upsert on that pair.
    """

    PROGRESS_KEY = StorageKey("lms_progress")

    def __init__(self, store: KeyValueStore) -> None:
        self.collection = JsonCollection(store, self.PROGRESS_KEY, UserProgressModel)

    def get_all_progress(self) -> list[UserProgressModel]:
        return self.collection.load_all()

    def get_user_progress(self, user_id: UserId) -> list[UserProgressModel]:
        return [progress for progress in self.get_all_progress() if progress.userId == user_id]

    def get_progress(self, user_id: UserId, course_id: CourseId) -> typing.Optional[UserProgressModel]:
        _LOGGER.debug(f"Fetching progress for user_id: {user_id}, course_id: {course_id}")
        return next(
            (progress for progress in self.get_all_progress() if progress.key == (user_id, course_id)),
            None,
        )

    def save_user_progress(self, progress: UserProgressModel) -> UserProgressModel:
        self.collection.upsert(progress, lambda existing: existing.key == progress.key)
        _LOGGER.info(f"Saved progress for user {progress.userId}, course {progress.courseId}")
        return progress
