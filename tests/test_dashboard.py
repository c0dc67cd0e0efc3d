import pytest

from course_progress import CourseProgress
from dashboard import CourseSummary, filter_courses, summarize_course


def _summary(course_id, progress):
    return CourseSummary(id=course_id, title=course_id, description="", lessons=4, quizzes=1, progress=progress)


class TestDashboard:

    def test_summarize_derives_progress(self, sample_repository):
        summary = summarize_course(CourseProgress(sample_repository.get_course("1")))
        assert summary.progress == 50
        assert summary.lessons == 4
        assert summary.quizzes == 1
        assert summary.created_at == "2024-03-15"

    def test_filter_tabs(self):
        summaries = [_summary("new", 0), _summary("half", 50), _summary("done", 100)]
        assert [s.id for s in filter_courses(summaries)] == ["new", "half", "done"]
        assert [s.id for s in filter_courses(summaries, "in-progress")] == ["half"]
        assert [s.id for s in filter_courses(summaries, "completed")] == ["done"]

    def test_unknown_tab(self):
        with pytest.raises(ValueError):
            filter_courses([], "archived")
