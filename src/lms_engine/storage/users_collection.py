import logging
import typing

from lms_engine.models.user_models import UserModel
from lms_engine.storage.json_collection import JsonCollection
from lms_engine.storage.key_value_store import KeyValueStore
from lms_engine.utils.base_types import StorageKey, UserId

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class UsersCollection:
    """
    Data Abstraction Layer for the users collection and the current-user pointer.

    Storage keys:
      - lms_users: JSON array of users
      - lms_current_user: id of the signed-in user (plain string)
    """

    USERS_KEY = StorageKey("lms_users")
    CURRENT_USER_KEY = StorageKey("lms_current_user")

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.collection = JsonCollection(store, self.USERS_KEY, UserModel)

    def get_users(self) -> list[UserModel]:
        return self.collection.load_all()

    def get_user(self, user_id: UserId) -> typing.Optional[UserModel]:
        return next((user for user in self.get_users() if user.id == user_id), None)

    def save_user(self, user: UserModel) -> UserModel:
        """
        Creates or replaces the user with the same id.
        """
        self.collection.upsert(user, lambda existing: existing.id == user.id)
        _LOGGER.info(f"Saved user {user.id} ({user.role})")
        return user

    def get_current_user(self) -> typing.Optional[UserModel]:
        current_user_id = self.store.get(self.CURRENT_USER_KEY)
        if not current_user_id:
            return None
        user = self.get_user(UserId(current_user_id))
        if user is None:
            _LOGGER.warning(f"Current user pointer refers to unknown user: {current_user_id}")
        return user

    def set_current_user(self, user_id: UserId) -> None:
        self.store.set(self.CURRENT_USER_KEY, user_id)
        _LOGGER.info(f"Current user set to {user_id}")

    def clear_current_user(self) -> None:
        self.store.remove(self.CURRENT_USER_KEY)
        _LOGGER.info("Current user cleared")
