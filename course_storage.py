import os
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from pydantic import ValidationError

from models import Course

logger = logging.getLogger(__name__)


class CourseRepository(ABC):
    """Source of course definitions; a course is never modified once stored"""

    @abstractmethod
    def get_course(self, course_id: str) -> Optional[Course]:
        ...

    @abstractmethod
    def list_courses(self) -> List[Course]:
        ...

    @abstractmethod
    def delete_course(self, course_id: str) -> bool:
        ...


class InMemoryCourseRepository(CourseRepository):
    def __init__(self, courses: Iterable[Course] = ()):
        self._courses: Dict[str, Course] = {course.id: course for course in courses}

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "InMemoryCourseRepository":
        return cls(Course.model_validate(record) for record in records)

    def get_course(self, course_id: str) -> Optional[Course]:
        return self._courses.get(course_id)

    def list_courses(self) -> List[Course]:
        return list(self._courses.values())

    def delete_course(self, course_id: str) -> bool:
        return self._courses.pop(course_id, None) is not None


class CourseStorage(CourseRepository):
    """Courses stored as one JSON file each"""

    SEED_MARKER = ".seeded"

    def __init__(self, storage_dir: str = "courses"):
        self.storage_dir = storage_dir
        self._ensure_storage_dir()

    def _ensure_storage_dir(self):
        """Ensure the storage directory exists"""
        if not os.path.exists(self.storage_dir):
            os.makedirs(self.storage_dir)

    @staticmethod
    def is_valid_id(course_id: str) -> bool:
        """IDs become file names, so they may not name or leave a directory"""
        if not course_id or course_id in (".", ".."):
            return False
        return "/" not in course_id and "\\" not in course_id

    def _get_course_file(self, course_id: str) -> str:
        if not self.is_valid_id(course_id):
            raise ValueError(f"Invalid course id: {course_id!r}")
        return os.path.join(self.storage_dir, f"{course_id}.json")

    def save_course(self, course: Course) -> str:
        """Save a course and return its ID"""
        try:
            file_path = self._get_course_file(course.id)
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(course.model_dump(), f, indent=2, ensure_ascii=False)

            logger.info(f"Course saved successfully: {course.id}")
            return course.id

        except OSError as e:
            logger.error(f"Error saving course: {str(e)}")
            raise

    def load_course(self, course_id: str) -> Optional[Course]:
        """Load a course by ID, None when missing or unreadable"""
        if not self.is_valid_id(course_id):
            logger.warning(f"Refusing to load course with invalid id: {course_id!r}")
            return None
        file_path = self._get_course_file(course_id)
        if not os.path.exists(file_path):
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                course = Course.model_validate(json.load(f))

            logger.info(f"Course loaded successfully: {course_id}")
            return course

        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error loading course {course_id}: {str(e)}")
            return None

    def get_course(self, course_id: str) -> Optional[Course]:
        return self.load_course(course_id)

    def list_courses(self) -> List[Course]:
        """List every readable course in the storage directory"""
        courses = []
        for file_name in sorted(os.listdir(self.storage_dir)):
            if file_name.endswith('.json'):
                course = self.load_course(file_name[:-5])  # Remove .json extension
                if course:
                    courses.append(course)
        return courses

    def delete_course(self, course_id: str) -> bool:
        if not self.is_valid_id(course_id):
            logger.warning(f"Refusing to delete course with invalid id: {course_id!r}")
            return False
        file_path = self._get_course_file(course_id)
        if not os.path.exists(file_path):
            return False
        os.remove(file_path)
        logger.info(f"Course deleted: {course_id}")
        return True

    def seed(self, courses: Iterable[Course]) -> List[str]:
        """Store the given courses once; later deletions are not undone"""
        marker = os.path.join(self.storage_dir, self.SEED_MARKER)
        if os.path.exists(marker):
            return []

        added = []
        for course in courses:
            if not os.path.exists(self._get_course_file(course.id)):
                added.append(self.save_course(course))
        with open(marker, "w", encoding="utf-8") as f:
            f.write(datetime.now().isoformat())
        return added
