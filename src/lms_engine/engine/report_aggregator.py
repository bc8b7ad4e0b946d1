import logging
import math
import typing
from datetime import datetime, timezone
from fractions import Fraction

from lms_engine.models.course_models import CourseModel
from lms_engine.models.progress_models import UserProgressModel
from lms_engine.models.quiz_models import QuizModel
from lms_engine.models.report_models import DashboardStatsModel, ReportSortKey, UserReportModel
from lms_engine.models.user_models import UserModel
from lms_engine.utils.base_types import CourseId, UserId
from lms_engine.utils.math_utils import round_half_up_ratio
from lms_engine.utils.time_utils import parse_iso_timestamp

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _index_progress(
    all_progress: typing.Iterable[UserProgressModel],
) -> dict[UserId, dict[CourseId, UserProgressModel]]:
    progress_by_user: dict[UserId, dict[CourseId, UserProgressModel]] = {}
    for progress in all_progress:
        # One record per pair; if the store somehow holds duplicates, the first one wins
        progress_by_user.setdefault(progress.userId, {}).setdefault(progress.courseId, progress)
    return progress_by_user


def build_reports(
    users: typing.Sequence[UserModel],
    courses: typing.Sequence[CourseModel],
    all_progress: typing.Sequence[UserProgressModel],
) -> list[UserReportModel]:
    """
    Builds one report row per student, in the order the users are given.

    Totals are catalog-wide: totalLessons counts every lesson of every course,
    whether or not the student has started it. Progress records for courses no
    longer in the catalog are ignored.
    """
    total_lessons = sum(len(course.lessons) for course in courses)
    progress_by_user = _index_progress(all_progress)

    reports: list[UserReportModel] = []
    for user in users:
        if not user.is_student:
            continue

        user_progress = progress_by_user.get(user.id, {})
        completed_lessons = 0
        completed_courses = 0
        score_total = 0
        score_count = 0

        for course in courses:
            course_progress = user_progress.get(course.id)
            if course_progress is None:
                continue
            completed_lessons += len(course_progress.completedLessons)
            if course_progress.courseCompleted:
                completed_courses += 1
            for result in course_progress.quizResults:
                score_total += result.score
                score_count += 1

        reports.append(
            UserReportModel(
                user=user,
                completedLessons=completed_lessons,
                totalLessons=total_lessons,
                averageScore=round_half_up_ratio(score_total, score_count) if score_count else 0,
                completedCourses=completed_courses,
                totalCourses=len(courses),
                lastActivity=user.lastActivity,
            )
        )

    _LOGGER.info(f"Built {len(reports)} report row(s) over {len(courses)} course(s)")
    return reports


def filter_reports(reports: typing.Sequence[UserReportModel], search_term: str) -> list[UserReportModel]:
    """Case-insensitive substring match on the student's name or department."""
    needle = search_term.strip().casefold()
    if not needle:
        return list(reports)
    return [
        report
        for report in reports
        if needle in report.user.name.casefold() or needle in report.user.department.casefold()
    ]


def _activity_time(timestamp: str) -> datetime:
    return parse_iso_timestamp(timestamp) or _EPOCH


_SORT_KEYS: dict[str, typing.Callable[[UserReportModel], typing.Any]] = {
    "name": lambda report: report.user.name.casefold(),
    "department": lambda report: report.user.department.casefold(),
    "completedLessons": lambda report: report.completedLessons,
    "averageScore": lambda report: report.averageScore,
    "completedCourses": lambda report: report.completedCourses,
    "lastActivity": lambda report: _activity_time(report.lastActivity),
}


def sort_reports(
    reports: typing.Sequence[UserReportModel],
    sort_key: ReportSortKey = "name",
    descending: bool = False,
) -> list[UserReportModel]:
    """Stable sort; rows with equal keys keep their relative order."""
    if sort_key not in _SORT_KEYS:
        raise ValueError(f"Unsupported report sort key: {sort_key}")
    return sorted(reports, key=_SORT_KEYS[sort_key], reverse=descending)


def build_dashboard_stats(
    users: typing.Sequence[UserModel],
    courses: typing.Sequence[CourseModel],
    quizzes: typing.Sequence[QuizModel],
    all_progress: typing.Sequence[UserProgressModel],
    recent_limit: int = 5,
) -> DashboardStatsModel:
    """
    Headline numbers for the administrator dashboard.

    averageProgress is the mean completion percentage over every (student, course)
    pair that has a progress record; pairs without a record are not counted.
    """
    students = [user for user in users if user.is_student]
    progress_by_user = _index_progress(all_progress)

    rate_total = Fraction(0)
    rate_count = 0
    for student in students:
        for course in courses:
            progress = progress_by_user.get(student.id, {}).get(course.id)
            if progress is None:
                continue
            if course.lessons:
                rate_total += Fraction(100 * len(progress.completedLessons), len(course.lessons))
            rate_count += 1

    average_progress = math.floor(rate_total / rate_count + Fraction(1, 2)) if rate_count else 0

    recent_activity = sorted(students, key=lambda user: _activity_time(user.lastActivity), reverse=True)

    return DashboardStatsModel(
        totalUsers=len(students),
        totalCourses=len(courses),
        totalQuizzes=len(quizzes),
        averageProgress=average_progress,
        recentActivity=recent_activity[:recent_limit],
    )
