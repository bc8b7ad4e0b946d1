import json
from unittest.mock import Mock

from lms_engine.models.course_models import CourseModel
from lms_engine.models.user_models import UserModel
from lms_engine.services.account_service import AccountService
from lms_engine.services.report_service import ReportService
from lms_engine.services.student_learning_service import StudentLearningService
from lms_engine.utils.base_types import IsoTimestamp, LessonId, UserId


def create_report_service(
    users_collection=Mock(),
    courses_collection=Mock(),
    quizzes_collection=Mock(),
    progress_collection=Mock(),
) -> ReportService:
    service = ReportService(users_collection, courses_collection, quizzes_collection, progress_collection)
    assert service.users_collection == users_collection
    assert service.progress_collection == progress_collection
    return service


def test_reports_over_mocked_collections(student: UserModel, three_lesson_course: CourseModel):
    users_collection = Mock()
    users_collection.get_users.return_value = [student]
    courses_collection = Mock()
    courses_collection.get_courses.return_value = [three_lesson_course]
    progress_collection = Mock()
    progress_collection.get_all_progress.return_value = []

    service = create_report_service(users_collection, courses_collection, Mock(), progress_collection)
    reports = service.reports()

    assert len(reports) == 1
    assert reports[0].totalLessons == 3
    assert reports[0].completedLessons == 0


def test_reports_after_student_activity(
    users_collection, courses_collection, quizzes_collection, progress_collection, three_lesson_course, fixed_clock
):
    courses_collection.save_course(three_lesson_course)
    accounts = AccountService(users_collection, fixed_clock)
    accounts.ensure_default_admin()
    learning = StudentLearningService(
        users_collection, courses_collection, quizzes_collection, progress_collection, clock=fixed_clock
    )

    accounts.register_student("Ann", "Sales")
    learning.complete_lesson(three_lesson_course.id, LessonId("l1"))
    accounts.register_student("Bob", "Engineering")
    for lesson_id in ("l1", "l2", "l3"):
        learning.complete_lesson(three_lesson_course.id, LessonId(lesson_id))

    service = create_report_service(users_collection, courses_collection, quizzes_collection, progress_collection)

    by_lessons = service.reports(sort_key="completedLessons", descending=True)
    assert [(r.user.name, r.completedLessons, r.completedCourses) for r in by_lessons] == [("Bob", 3, 1), ("Ann", 1, 0)]
    assert [r.user.name for r in service.reports(search_term="sal")] == ["Ann"]

    stats = service.dashboard_stats()
    assert stats.totalUsers == 2
    assert stats.totalCourses == 1
    assert stats.totalQuizzes == 0
    # (33.3 + 100) / 2
    assert stats.averageProgress == 67


def test_exports(users_collection, courses_collection, quizzes_collection, progress_collection):
    users_collection.save_user(
        UserModel(
            id=UserId("u1"),
            name="Ann",
            department="Sales",
            role="student",
            lastActivity=IsoTimestamp("2024-03-01T12:00:00Z"),
        )
    )
    service = create_report_service(users_collection, courses_collection, quizzes_collection, progress_collection)

    assert service.export_csv().splitlines()[1] == "Ann,Sales,0,0,0,0,0,2024-03-01"
    assert json.loads(service.export_json())[0]["user"]["id"] == "u1"
    assert service.export_csv(search_term="nobody").count("\n") == 1
