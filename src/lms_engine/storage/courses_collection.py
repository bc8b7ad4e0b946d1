import logging
import typing

from lms_engine.models.course_models import CourseModel
from lms_engine.storage.json_collection import JsonCollection
from lms_engine.storage.key_value_store import KeyValueStore
from lms_engine.utils.base_types import CourseId, LessonId, StorageKey

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class CoursesCollection:
    """
    Data Abstraction Layer for courses. Lessons are embedded in their course record.
    """

    COURSES_KEY = StorageKey("lms_courses")

    def __init__(self, store: KeyValueStore) -> None:
        self.collection = JsonCollection(store, self.COURSES_KEY, CourseModel)

    def get_courses(self) -> list[CourseModel]:
        return self.collection.load_all()

    def get_course(self, course_id: CourseId) -> typing.Optional[CourseModel]:
        return next((course for course in self.get_courses() if course.id == course_id), None)

    def find_course_for_lesson(self, lesson_id: LessonId) -> typing.Optional[CourseModel]:
        return next((course for course in self.get_courses() if course.find_lesson(lesson_id)), None)

    def save_course(self, course: CourseModel) -> CourseModel:
        self.collection.upsert(course, lambda existing: existing.id == course.id)
        _LOGGER.info(f"Saved course {course.id} with {len(course.lessons)} lesson(s)")
        return course

    def delete_course(self, course_id: CourseId) -> bool:
        removed = self.collection.remove_where(lambda course: course.id == course_id)
        if removed:
            _LOGGER.info(f"Deleted course {course_id}")
        else:
            _LOGGER.warning(f"Delete requested for unknown course {course_id}")
        return removed > 0
