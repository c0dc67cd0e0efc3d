"""
File-backed course storage and progress tracking tests.
"""

import json

import pytest

from course_progress import CourseProgress
from course_storage import CourseStorage, InMemoryCourseRepository
from models import Score
from progress_tracker import ProgressTracker


class TestInMemoryRepository:

    def test_sample_records(self, sample_repository):
        course = sample_repository.get_course("1")
        assert course.title == "Introduction to Machine Learning"
        assert len(course.lessons) == 4
        assert course.quizzes[0].questions[1].correct_answer == 3

    def test_missing_course(self, sample_repository):
        assert sample_repository.get_course("42") is None

    def test_delete(self, sample_repository):
        assert sample_repository.delete_course("1")
        assert not sample_repository.delete_course("1")
        assert sample_repository.list_courses() == []


class TestCourseStorage:

    def test_save_and_load(self, tmp_path, four_lesson_course):
        storage = CourseStorage(str(tmp_path / "courses"))
        assert storage.save_course(four_lesson_course) == "course"
        assert storage.load_course("course") == four_lesson_course
        assert [c.id for c in storage.list_courses()] == ["course"]

    def test_missing_and_corrupt(self, tmp_path):
        storage = CourseStorage(str(tmp_path))
        assert storage.load_course("nope") is None
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        assert storage.get_course("broken") is None
        assert storage.list_courses() == []

    def test_delete(self, tmp_path, four_lesson_course):
        storage = CourseStorage(str(tmp_path))
        storage.save_course(four_lesson_course)
        assert storage.delete_course("course")
        assert not storage.delete_course("course")

    def test_seed_keeps_existing(self, tmp_path, sample_repository):
        storage = CourseStorage(str(tmp_path))
        assert storage.seed(sample_repository.list_courses()) == ["1"]
        assert storage.seed(sample_repository.list_courses()) == []


class TestProgressTracker:

    def test_fresh_progress_without_file(self, tmp_path, four_lesson_course):
        tracker = ProgressTracker(str(tmp_path))
        progress = tracker.load_progress(four_lesson_course)
        assert progress.completed_lesson_ids == frozenset()
        assert progress.current_lesson.id == "l1"

    def test_round_trip(self, tmp_path, four_lesson_course):
        tracker = ProgressTracker(str(tmp_path))
        progress = CourseProgress(four_lesson_course)
        progress.mark_lesson_complete("l1")
        progress.mark_lesson_complete("l2")
        progress.set_current_lesson("l3")
        progress.record_quiz_result("quiz", Score(correct=2, total=2, percentage=100))
        tracker.save_progress(progress)

        restored = tracker.load_progress(four_lesson_course)
        assert restored.completed_lesson_ids == {"l1", "l2"}
        assert restored.current_lesson.id == "l3"
        assert restored.progress_percentage() == 50
        assert restored.quiz_scores["quiz"].percentage == 100
        assert restored.is_quiz_completed("quiz")

    def test_snapshot_layout(self, tmp_path, four_lesson_course):
        tracker = ProgressTracker(str(tmp_path))
        progress = CourseProgress(four_lesson_course)
        progress.mark_lesson_complete("l2")
        tracker.save_progress(progress)

        data = json.loads((tmp_path / "course_progress.json").read_text(encoding="utf-8"))
        assert data["course_id"] == "course"
        assert data["completed_lessons"] == ["l2"]
        assert data["current_lesson"] == "l1"
        assert "last_updated" in data

    def test_unknown_ids_dropped(self, tmp_path, four_lesson_course):
        (tmp_path / "course_progress.json").write_text(json.dumps({
            "course_id": "course",
            "current_lesson": "gone",
            "completed_lessons": ["l1", "gone"],
            "quiz_scores": {"old-quiz": {"correct": 1, "total": 1, "percentage": 100}},
        }), encoding="utf-8")

        progress = ProgressTracker(str(tmp_path)).load_progress(four_lesson_course)
        assert progress.completed_lesson_ids == {"l1"}
        assert progress.current_lesson.id == "l1"
        assert progress.quiz_scores == {}

    def test_corrupt_file_starts_fresh(self, tmp_path, four_lesson_course):
        (tmp_path / "course_progress.json").write_text("[]", encoding="utf-8")
        progress = ProgressTracker(str(tmp_path)).load_progress(four_lesson_course)
        assert progress.completed_lesson_ids == frozenset()

    def test_reset(self, tmp_path, four_lesson_course):
        tracker = ProgressTracker(str(tmp_path))
        progress = CourseProgress(four_lesson_course, completed_lesson_ids=["l1"])
        tracker.save_progress(progress)
        assert tracker.reset_progress(four_lesson_course).progress_percentage() == 0
        assert tracker.load_progress(four_lesson_course).progress_percentage() == 0

    def test_sample_course_seeded_completion(self, tmp_path):
        course = InMemoryCourseRepository.from_records([
            {"id": "x", "title": "X", "lessons": [
                {"id": "a", "title": "A", "content": "", "completed": True},
                {"id": "b", "title": "B", "content": ""},
            ]},
        ]).get_course("x")
        assert ProgressTracker(str(tmp_path)).load_progress(course).progress_percentage() == 50


class TestCourseIds:

    def test_path_like_ids_rejected(self, tmp_path):
        outside = tmp_path / "progress"
        outside.mkdir()
        victim = outside / "1_progress.json"
        victim.write_text("{}", encoding="utf-8")
        storage = CourseStorage(str(tmp_path / "courses"))

        assert not storage.delete_course("../progress/1_progress")
        assert storage.load_course("../progress/1_progress") is None
        assert victim.exists()

    def test_valid_ids(self):
        assert CourseStorage.is_valid_id("intro_to_ml_20240315_103000")
        for bad in ("", ".", "..", "a/b", "a\\b"):
            assert not CourseStorage.is_valid_id(bad)

    def test_save_rejects_path_like_id(self, tmp_path, four_lesson_course):
        storage = CourseStorage(str(tmp_path))
        with pytest.raises(ValueError):
            storage.save_course(four_lesson_course.model_copy(update={"id": "../escape"}))


class TestSeeding:

    def test_deleted_course_not_reseeded(self, tmp_path, sample_repository):
        storage = CourseStorage(str(tmp_path))
        storage.seed(sample_repository.list_courses())
        storage.delete_course("1")

        reopened = CourseStorage(str(tmp_path))
        assert reopened.seed(sample_repository.list_courses()) == []
        assert reopened.list_courses() == []
