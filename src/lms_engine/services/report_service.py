import logging
import typing

from lms_engine.engine import report_aggregator, report_export
from lms_engine.models.report_models import DashboardStatsModel, ReportSortKey, UserReportModel
from lms_engine.storage.courses_collection import CoursesCollection
from lms_engine.storage.progress_collection import ProgressCollection
from lms_engine.storage.quizzes_collection import QuizzesCollection
from lms_engine.storage.users_collection import UsersCollection

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class ReportService:
    """Administrator reports, recomputed from the stored collections on every call."""

    def __init__(
        self,
        users_collection: UsersCollection,
        courses_collection: CoursesCollection,
        quizzes_collection: QuizzesCollection,
        progress_collection: ProgressCollection,
    ) -> None:
        self.users_collection = users_collection
        self.courses_collection = courses_collection
        self.quizzes_collection = quizzes_collection
        self.progress_collection = progress_collection

    def reports(
        self,
        search_term: str = "",
        sort_key: ReportSortKey = "name",
        descending: bool = False,
    ) -> list[UserReportModel]:
        """
        :param search_term: Case-insensitive substring of the student's name or department.
        :param sort_key: Column to sort by.
        :param descending: Reverse the sort order.
        :return: One row per matching student.
        """
        rows = report_aggregator.build_reports(
            self.users_collection.get_users(),
            self.courses_collection.get_courses(),
            self.progress_collection.get_all_progress(),
        )
        rows = report_aggregator.filter_reports(rows, search_term)
        return report_aggregator.sort_reports(rows, sort_key, descending)

    def dashboard_stats(self) -> DashboardStatsModel:
        return report_aggregator.build_dashboard_stats(
            self.users_collection.get_users(),
            self.courses_collection.get_courses(),
            self.quizzes_collection.get_quizzes(),
            self.progress_collection.get_all_progress(),
        )

    def export_csv(self, search_term: str = "", sort_key: ReportSortKey = "name", descending: bool = False) -> str:
        rows = self.reports(search_term, sort_key, descending)
        _LOGGER.info(f"Exporting {len(rows)} report rows as CSV")
        return report_export.export_reports_csv(rows)

    def export_json(self, search_term: str = "", sort_key: ReportSortKey = "name", descending: bool = False) -> str:
        rows = self.reports(search_term, sort_key, descending)
        _LOGGER.info(f"Exporting {len(rows)} report rows as JSON")
        return report_export.export_reports_json(rows)
