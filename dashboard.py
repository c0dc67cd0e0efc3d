from typing import Iterable, List, Literal, Optional
from pydantic import BaseModel

from course_progress import CourseProgress

DashboardTab = Literal["all", "in-progress", "completed"]


class CourseSummary(BaseModel):
    id: str
    title: str
    description: str
    lessons: int
    quizzes: int
    progress: int
    last_accessed: Optional[str] = None
    created_at: Optional[str] = None


def summarize_course(progress: CourseProgress) -> CourseSummary:
    course = progress.course
    return CourseSummary(
        id=course.id,
        title=course.title,
        description=course.description,
        lessons=len(course.lessons),
        quizzes=len(course.quizzes),
        progress=progress.progress_percentage(),
        last_accessed=course.last_accessed,
        created_at=course.created_at,
    )


def filter_courses(summaries: Iterable[CourseSummary], tab: DashboardTab = "all") -> List[CourseSummary]:
    if tab == "all":
        return list(summaries)
    if tab == "in-progress":
        return [s for s in summaries if 0 < s.progress < 100]
    if tab == "completed":
        return [s for s in summaries if s.progress == 100]
    raise ValueError(f"Unknown dashboard tab: {tab}")
