import pytest

from course_storage import InMemoryCourseRepository
from models import Course, Lesson, Question, Quiz
from sample_data import SAMPLE_COURSES


@pytest.fixture
def two_question_quiz():
    return Quiz(
        id="quiz",
        title="Basics",
        questions=[
            Question(id="q1", question="First?", options=["a", "b", "c", "d"], correct_answer=1),
            Question(id="q2", question="Second?", options=["a", "b", "c", "d"], correct_answer=3),
        ],
    )


@pytest.fixture
def four_lesson_course(two_question_quiz):
    return Course(
        id="course",
        title="Course",
        description="A course",
        lessons=[Lesson(id=f"l{i}", title=f"Lesson {i}", content=f"Content {i}") for i in range(1, 5)],
        quizzes=[two_question_quiz],
    )


@pytest.fixture
def sample_repository():
    return InMemoryCourseRepository.from_records(SAMPLE_COURSES)
