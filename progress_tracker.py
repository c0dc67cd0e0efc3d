import os
import json
import logging
from typing import Dict, Any
from datetime import datetime
from pydantic import ValidationError

from course_progress import CourseProgress
from models import Course, Score

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Saves and restores CourseProgress snapshots, one JSON file per course"""

    def __init__(self, storage_dir: str = "progress"):
        self.storage_dir = storage_dir
        self._ensure_storage_dir()

    def _ensure_storage_dir(self):
        """Ensure the storage directory exists"""
        if not os.path.exists(self.storage_dir):
            os.makedirs(self.storage_dir)

    def _get_progress_file(self, course_id: str) -> str:
        """Get the progress file path for a course"""
        return os.path.join(self.storage_dir, f"{course_id}_progress.json")

    def snapshot(self, progress: CourseProgress) -> Dict[str, Any]:
        lesson = progress.current_lesson
        return {
            'course_id': progress.course.id,
            'current_lesson': lesson.id if lesson else None,
            'completed_lessons': [item.id for item in progress.course.lessons
                                  if progress.is_lesson_completed(item.id)],
            'quiz_scores': {quiz_id: score.model_dump()
                            for quiz_id, score in progress.quiz_scores.items()},
            'completed_quizzes': sorted(progress.completed_quiz_ids),
            'last_updated': datetime.now().isoformat()
        }

    def save_progress(self, progress: CourseProgress) -> None:
        """Save progress for a course"""
        course_id = progress.course.id
        try:
            file_path = self._get_progress_file(course_id)
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(self.snapshot(progress), f, indent=2, ensure_ascii=False)

            logger.info(f"Progress saved for course: {course_id}")

        except OSError as e:
            logger.error(f"Error saving progress: {str(e)}")
            raise

    def load_progress(self, course: Course) -> CourseProgress:
        """Restore progress for a course, starting fresh when nothing usable is stored"""
        file_path = self._get_progress_file(course.id)
        if not os.path.exists(file_path):
            return CourseProgress(course)

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                progress_data = json.load(f)
            progress = self.restore(course, progress_data)
            logger.info(f"Progress loaded for course: {course.id}")
            return progress

        except (OSError, json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
            logger.error(f"Error loading progress: {str(e)}")
            return CourseProgress(course)

    def restore(self, course: Course, progress_data: Dict[str, Any]) -> CourseProgress:
        completed = []
        for lesson_id in progress_data.get('completed_lessons', []):
            if course.lesson_index(lesson_id) is None:
                logger.warning(f"Dropping unknown lesson {lesson_id} from progress of {course.id}")
                continue
            completed.append(lesson_id)

        current = progress_data.get('current_lesson')
        if current is not None and course.lesson_index(current) is None:
            logger.warning(f"Stored current lesson {current} is not part of {course.id}")
            current = None

        progress = CourseProgress(course, completed_lesson_ids=completed, current_lesson_id=current)
        completed_quizzes = set(progress_data.get('completed_quizzes', []))
        for quiz_id, score in progress_data.get('quiz_scores', {}).items():
            if course.get_quiz(quiz_id) is None:
                logger.warning(f"Dropping unknown quiz {quiz_id} from progress of {course.id}")
                continue
            progress.record_quiz_result(quiz_id, Score.model_validate(score),
                                        completed=quiz_id in completed_quizzes)
        return progress

    def reset_progress(self, course: Course) -> CourseProgress:
        """Discard stored progress for a course"""
        file_path = self._get_progress_file(course.id)
        if os.path.exists(file_path):
            os.remove(file_path)
            logger.info(f"Progress reset for course: {course.id}")
        return CourseProgress(course)
