import logging
import typing

from lms_engine.models.user_models import UserModel
from lms_engine.storage.users_collection import UsersCollection
from lms_engine.utils.base_types import UserId
from lms_engine.utils.input_validator import InputValidator
from lms_engine.utils.time_utils import Clock, generate_id, utc_now_iso

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class AccountService:
    """
    Registration, the bootstrap administrator and the current-user pointer.
    Credential checks happen before this layer; it only records who is signed in.
    """

    DEFAULT_ADMIN_ID = UserId("admin")
    DEFAULT_ADMIN_NAME = "Administrator"
    DEFAULT_ADMIN_DEPARTMENT = "IT"

    def __init__(self, users_collection: UsersCollection, clock: Clock = utc_now_iso) -> None:
        self.users_collection = users_collection
        self.clock = clock

    def register_student(self, name: str, department: str) -> UserModel:
        """
        Creates a student account and signs it in.

        :raises InvalidInputError: If name or department is blank or invalid.
        """
        InputValidator.validate_registration_input(name, department)

        user = UserModel(
            id=UserId(generate_id("user")),
            name=name.strip(),
            department=department.strip(),
            role="student",
            lastActivity=self.clock(),
        )
        self.users_collection.save_user(user)
        self.users_collection.set_current_user(user.id)
        _LOGGER.info(f"Registered student {user.id} in department {InputValidator.sanitize_for_logging(department)}")
        return user

    def ensure_default_admin(self) -> typing.Optional[UserModel]:
        """
        Creates the bootstrap administrator when the users collection is empty.
        Returns the default admin if present, else None.
        """
        users = self.users_collection.get_users()
        if users:
            return next((user for user in users if user.id == self.DEFAULT_ADMIN_ID), None)

        admin = UserModel(
            id=self.DEFAULT_ADMIN_ID,
            name=self.DEFAULT_ADMIN_NAME,
            department=self.DEFAULT_ADMIN_DEPARTMENT,
            role="admin",
            lastActivity=self.clock(),
        )
        _LOGGER.info("No users found. Creating default admin user.")
        return self.users_collection.save_user(admin)

    def touch_activity(self, user: UserModel) -> UserModel:
        """Refreshes lastActivity, the only mutation a user record receives in normal flow."""
        updated = user.model_copy(update={"lastActivity": self.clock()})
        return self.users_collection.save_user(updated)

    def sign_in(self, user_id: UserId) -> typing.Optional[UserModel]:
        user = self.users_collection.get_user(user_id)
        if user is None:
            _LOGGER.warning(f"Sign-in requested for unknown user {user_id}")
            return None
        user = self.touch_activity(user)
        self.users_collection.set_current_user(user.id)
        return user

    def get_current_user(self) -> typing.Optional[UserModel]:
        return self.users_collection.get_current_user()

    def logout(self) -> None:
        self.users_collection.clear_current_user()
