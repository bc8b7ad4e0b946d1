from lms_engine.engine.lesson_gate import course_progress_percent, is_lesson_available, lesson_availability
from lms_engine.models.course_models import CourseModel
from lms_engine.models.progress_models import UserProgressModel
from lms_engine.utils.base_types import IsoTimestamp, LessonId, UserId

NOW = IsoTimestamp("2024-03-01T12:00:00Z")


def _progress(course: CourseModel, completed: list[str]) -> UserProgressModel:
    return UserProgressModel(
        userId=UserId("u1"),
        courseId=course.id,
        completedLessons=[LessonId(lesson_id) for lesson_id in completed],
        lastAccessedAt=NOW,
    )


def test_first_lesson_always_available(three_lesson_course: CourseModel):
    assert is_lesson_available(three_lesson_course, None, 0) is True
    assert is_lesson_available(three_lesson_course, _progress(three_lesson_course, []), 0) is True


def test_sequential_course_locks_until_predecessor_completed(three_lesson_course: CourseModel):
    progress = _progress(three_lesson_course, ["l1"])

    assert is_lesson_available(three_lesson_course, progress, 1) is True
    assert is_lesson_available(three_lesson_course, progress, 2) is False


def test_no_progress_locks_later_lessons(three_lesson_course: CourseModel):
    assert is_lesson_available(three_lesson_course, None, 1) is False
    assert is_lesson_available(three_lesson_course, None, 2) is False


def test_only_immediate_predecessor_is_checked(three_lesson_course: CourseModel):
    # l2 completed without l1: the third lesson opens, the second stays locked
    progress = _progress(three_lesson_course, ["l2"])

    assert is_lesson_available(three_lesson_course, progress, 1) is False
    assert is_lesson_available(three_lesson_course, progress, 2) is True


def test_non_sequential_course_opens_everything(three_lesson_course: CourseModel):
    course = three_lesson_course.model_copy(update={"sequential": False})

    assert all(is_lesson_available(course, None, index) for index in range(3))


def test_index_out_of_range_is_unavailable(three_lesson_course: CourseModel):
    assert is_lesson_available(three_lesson_course, None, 3) is False
    assert is_lesson_available(three_lesson_course, None, -1) is False


def test_index_follows_order_rank_not_storage_position(three_lesson_course: CourseModel):
    # Stored order is l2, l1, l3; index 1 is l2 by rank, which needs l1
    progress = _progress(three_lesson_course, ["l2"])
    assert is_lesson_available(three_lesson_course, progress, 1) is False


def test_lesson_availability(three_lesson_course: CourseModel):
    statuses = lesson_availability(three_lesson_course, _progress(three_lesson_course, ["l1"]))

    assert [status.lessonId for status in statuses] == ["l1", "l2", "l3"]
    assert [status.available for status in statuses] == [True, True, False]
    assert [status.completed for status in statuses] == [True, False, False]
    assert [status.index for status in statuses] == [0, 1, 2]


def test_course_progress_percent(three_lesson_course: CourseModel):
    assert course_progress_percent(three_lesson_course, None) == 0
    assert course_progress_percent(three_lesson_course, _progress(three_lesson_course, ["l1"])) == 33
    assert course_progress_percent(three_lesson_course, _progress(three_lesson_course, ["l1", "l2"])) == 67


def test_course_progress_percent_empty_course(three_lesson_course: CourseModel):
    empty = three_lesson_course.model_copy(update={"lessons": []})
    assert course_progress_percent(empty, _progress(empty, [])) == 0
