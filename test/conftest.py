"""
Pytest configuration and fixtures for all tests.

This file contains fixtures that are automatically available to all test files.
"""

import os
import typing

import pytest

from lms_engine.models.course_models import CourseModel, LessonModel
from lms_engine.models.user_models import UserModel
from lms_engine.storage.courses_collection import CoursesCollection
from lms_engine.storage.key_value_store import InMemoryKeyValueStore
from lms_engine.storage.progress_collection import ProgressCollection
from lms_engine.storage.quizzes_collection import QuizzesCollection
from lms_engine.storage.users_collection import UsersCollection
from lms_engine.utils.base_types import CourseId, IsoTimestamp, LessonId, UserId

FIXED_NOW = IsoTimestamp("2024-03-01T12:00:00Z")


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """
    Sets up environment variables required for all tests.

    Runs once per session. Tests that need a different configuration use
    monkeypatch, which restores these values afterwards.
    """
    # AWS Configuration
    os.environ["AWS_REGION"] = "us-west-1"

    # Store configuration
    os.environ["LMS_STORE_BACKEND"] = "memory"
    os.environ["LMS_STORE_TABLE_NAME"] = "test-lms-store-table"

    yield


@pytest.fixture(scope="function")
def aws_credentials() -> typing.Iterator[None]:
    """
    Mocks AWS credentials for moto (AWS mocking library).

    Used by DynamoDB store tests together with moto's mock_aws context manager.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-west-1"
    yield
    # Clean up after each test
    del os.environ["AWS_ACCESS_KEY_ID"]
    del os.environ["AWS_SECRET_ACCESS_KEY"]
    del os.environ["AWS_SECURITY_TOKEN"]
    del os.environ["AWS_SESSION_TOKEN"]
    del os.environ["AWS_DEFAULT_REGION"]


@pytest.fixture
def fixed_clock() -> typing.Callable[[], IsoTimestamp]:
    return lambda: FIXED_NOW


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def users_collection(memory_store) -> UsersCollection:
    return UsersCollection(memory_store)


@pytest.fixture
def courses_collection(memory_store) -> CoursesCollection:
    return CoursesCollection(memory_store)


@pytest.fixture
def quizzes_collection(memory_store) -> QuizzesCollection:
    return QuizzesCollection(memory_store)


@pytest.fixture
def progress_collection(memory_store) -> ProgressCollection:
    return ProgressCollection(memory_store)


@pytest.fixture
def student() -> UserModel:
    return UserModel(
        id=UserId("user-ann"),
        name="Ann Smith",
        department="Sales",
        role="student",
        lastActivity=IsoTimestamp("2024-02-20T09:00:00Z"),
    )


@pytest.fixture
def three_lesson_course() -> CourseModel:
    """Sequential course whose lessons are stored out of rank order."""
    course_id = CourseId("course-seq")
    return CourseModel(
        id=course_id,
        title="Onboarding",
        description="",
        sequential=True,
        lessons=[
            LessonModel(id=LessonId("l2"), title="Second", content="", courseId=course_id, order=2),
            LessonModel(id=LessonId("l1"), title="First", content="", courseId=course_id, order=1),
            LessonModel(id=LessonId("l3"), title="Third", content="", courseId=course_id, order=3),
        ],
    )
