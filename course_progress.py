import logging
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

from exceptions import UnknownLesson, UnknownQuiz
from models import Course, Lesson, Score, percentage

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    PREVIOUS = "previous"
    NEXT = "next"


class CourseProgress:
    """Completed lessons and the lesson currently being viewed for one course.

    Completion only grows within a session; the percentage is always derived
    from the completed set, never stored.
    """

    def __init__(self, course: Course, completed_lesson_ids: Optional[Iterable[str]] = None,
                 current_lesson_id: Optional[str] = None):
        self.course = course
        if completed_lesson_ids is None:
            completed_lesson_ids = [lesson.id for lesson in course.lessons if lesson.completed]

        self._completed = set()
        for lesson_id in completed_lesson_ids:
            self._require_lesson(lesson_id)
            self._completed.add(lesson_id)

        self._current_index: Optional[int] = 0 if course.lessons else None
        if current_lesson_id is not None:
            self.set_current_lesson(current_lesson_id)

        self._quiz_scores: Dict[str, Score] = {}
        self._completed_quizzes = {quiz.id for quiz in course.quizzes if quiz.completed}

    def _require_lesson(self, lesson_id: str) -> int:
        idx = self.course.lesson_index(lesson_id)
        if idx is None:
            raise UnknownLesson(f"Lesson {lesson_id} is not part of course {self.course.id}")
        return idx

    @property
    def completed_lesson_ids(self) -> FrozenSet[str]:
        return frozenset(self._completed)

    @property
    def current_index(self) -> Optional[int]:
        return self._current_index

    @property
    def current_lesson(self) -> Optional[Lesson]:
        if self._current_index is None:
            return None
        return self.course.lessons[self._current_index]

    @property
    def is_complete(self) -> bool:
        return bool(self.course.lessons) and len(self._completed) == len(self.course.lessons)

    @property
    def quiz_scores(self) -> Dict[str, Score]:
        return dict(self._quiz_scores)

    @property
    def completed_quiz_ids(self) -> FrozenSet[str]:
        return frozenset(self._completed_quizzes)

    def is_lesson_completed(self, lesson_id: str) -> bool:
        return lesson_id in self._completed

    def is_quiz_completed(self, quiz_id: str) -> bool:
        return quiz_id in self._completed_quizzes

    def mark_lesson_complete(self, lesson_id: str) -> None:
        self._require_lesson(lesson_id)
        if lesson_id not in self._completed:
            self._completed.add(lesson_id)
            logger.debug(f"Course {self.course.id}: lesson {lesson_id} completed")

    def set_current_lesson(self, lesson_id: str) -> None:
        self._current_index = self._require_lesson(lesson_id)

    def progress_percentage(self) -> int:
        return percentage(len(self._completed), len(self.course.lessons))

    def advance(self, direction: Direction) -> None:
        """Move to the adjacent lesson; nothing happens at either end"""
        if self._current_index is None:
            return
        direction = Direction(direction)
        if direction is Direction.PREVIOUS and self._current_index > 0:
            self._current_index -= 1
        elif direction is Direction.NEXT and self._current_index < len(self.course.lessons) - 1:
            self._current_index += 1

    def complete_current_lesson(self) -> None:
        lesson = self.current_lesson
        if lesson is None:
            return
        self.mark_lesson_complete(lesson.id)
        self.advance(Direction.NEXT)

    def record_quiz_result(self, quiz_id: str, score: Score, completed: bool = True) -> None:
        if self.course.get_quiz(quiz_id) is None:
            raise UnknownQuiz(f"Quiz {quiz_id} is not part of course {self.course.id}")
        self._quiz_scores[quiz_id] = score
        if completed:
            self._completed_quizzes.add(quiz_id)
        logger.debug(f"Course {self.course.id}: quiz {quiz_id} scored {score.percentage}%")
