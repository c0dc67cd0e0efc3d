from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up, 0 when there is nothing to count"""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: List[str] = Field(min_length=2)
    correct_answer: int  # 0-based index into options

    @model_validator(mode='after')
    def validate_correct_answer(self):
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(f'correct_answer {self.correct_answer} is not a valid option index')
        return self

    def has_option(self, index: int) -> bool:
        return 0 <= index < len(self.options)


class Quiz(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    questions: List[Question] = Field(min_length=1)
    completed: bool = False

    @field_validator('questions')
    @classmethod
    def validate_questions(cls, v):
        ids = [q.id for q in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Question ids must be unique within a quiz')
        return v

    def get_question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class Lesson(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str
    completed: bool = False


class Course(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    lessons: List[Lesson] = Field(default_factory=list)
    quizzes: List[Quiz] = Field(default_factory=list)
    topic: Optional[str] = None
    structure: Optional[str] = None
    output_format: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    last_accessed: Optional[str] = None

    @field_validator('lessons')
    @classmethod
    def validate_lessons(cls, v):
        ids = [lesson.id for lesson in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Lesson ids must be unique within a course')
        return v

    def lesson_index(self, lesson_id: str) -> Optional[int]:
        for idx, lesson in enumerate(self.lessons):
            if lesson.id == lesson_id:
                return idx
        return None

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        for quiz in self.quizzes:
            if quiz.id == quiz_id:
                return quiz
        return None


class QuizStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SHOWING_RESULTS = "showing_results"
    COMPLETED = "completed"


class Score(BaseModel):
    model_config = ConfigDict(frozen=True)

    correct: int
    total: int
    percentage: int


class QuestionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    question: str
    selected: Optional[int] = None
    correct_answer: int
    is_correct: bool
    selected_text: str
    correct_text: str
