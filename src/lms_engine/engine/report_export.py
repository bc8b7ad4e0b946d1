import csv
import io
import json
import typing

from lms_engine.models.report_models import UserReportModel
from lms_engine.utils.time_utils import parse_iso_timestamp

REPORT_CSV_COLUMNS: tuple[str, ...] = (
    "Name",
    "Department",
    "Lessons Completed",
    "Lessons Total",
    "Average Score",
    "Courses Completed",
    "Courses Total",
    "Last Activity",
)


def _format_activity_date(timestamp: str, date_format: str) -> str:
    parsed = parse_iso_timestamp(timestamp)
    return parsed.strftime(date_format) if parsed else timestamp


def export_reports_csv(
    reports: typing.Sequence[UserReportModel],
    date_format: str = "%Y-%m-%d",
) -> str:
    """
    Flat export, one line per report row, columns in REPORT_CSV_COLUMNS order.
    The last-activity timestamp is reduced to a date.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_CSV_COLUMNS)
    for report in reports:
        writer.writerow(
            [
                report.user.name,
                report.user.department,
                report.completedLessons,
                report.totalLessons,
                report.averageScore,
                report.completedCourses,
                report.totalCourses,
                _format_activity_date(report.lastActivity, date_format),
            ]
        )
    return buffer.getvalue()


def export_reports_json(reports: typing.Sequence[UserReportModel]) -> str:
    """Nested export: each row keeps the full user record."""
    return json.dumps([report.model_dump(mode="json") for report in reports], indent=2, ensure_ascii=False)
