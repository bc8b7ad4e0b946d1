import typing

import pydantic

from lms_engine.utils.base_types import IsoTimestamp, UserId

UserRole = typing.Literal["student", "admin"]


class UserModel(pydantic.BaseModel):
    """
    Pydantic model representing a user stored in the users collection.
    """

    id: UserId = pydantic.Field(description="Unique user id, e.g. user-<hex>")
    name: str
    department: str = ""
    role: UserRole = "student"
    lastActivity: IsoTimestamp

    @property
    def is_student(self) -> bool:
        return self.role == "student"
