import typing

import pydantic

from lms_engine.models.user_models import UserModel
from lms_engine.utils.base_types import IsoTimestamp

ReportSortKey = typing.Literal[
    "name",
    "department",
    "completedLessons",
    "averageScore",
    "completedCourses",
    "lastActivity",
]


class UserReportModel(pydantic.BaseModel):
    """One row of the administrator progress report, one per student."""

    user: UserModel
    completedLessons: int
    totalLessons: int
    averageScore: int
    completedCourses: int
    totalCourses: int
    lastActivity: IsoTimestamp


class DashboardStatsModel(pydantic.BaseModel):
    totalUsers: int
    totalCourses: int
    totalQuizzes: int
    # Mean completion percent over every (student, course) pair with a progress record
    averageProgress: int
    recentActivity: list[UserModel]
