import logging
from typing import Dict, List, Sequence

from exceptions import InvalidIndex, PreconditionNotMet, UnknownQuestion
from models import Question, QuestionResult, Quiz, QuizStatus, Score, percentage

logger = logging.getLogger(__name__)


def compute_score(questions: Sequence[Question], answers: Dict[str, int]) -> Score:
    """Score an answer record against the correct option of each question"""
    correct = sum(1 for q in questions if answers.get(q.id) == q.correct_answer)
    total = len(questions)
    return Score(correct=correct, total=total, percentage=percentage(correct, total))


class QuizSession:
    """Learner's pass through one quiz.

    Advancing past the last question always shows the results; submitting on
    the last question additionally marks the session completed. Rejected
    actions raise a CourseError subclass and leave the session unchanged.
    """

    def __init__(self, quiz: Quiz):
        self.quiz = quiz
        self._current_index = 0
        self._answers: Dict[str, int] = {}
        self._status = QuizStatus.IN_PROGRESS

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question:
        return self.quiz.questions[self._current_index]

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    @property
    def answers(self) -> Dict[str, int]:
        return dict(self._answers)

    @property
    def status(self) -> QuizStatus:
        return self._status

    @property
    def showing_results(self) -> bool:
        return self._status is not QuizStatus.IN_PROGRESS

    @property
    def completed(self) -> bool:
        return self._status is QuizStatus.COMPLETED

    @property
    def is_first(self) -> bool:
        return self._current_index == 0

    @property
    def is_last(self) -> bool:
        return self._current_index == self.total_questions - 1

    @property
    def is_current_answered(self) -> bool:
        return self.current_question.id in self._answers

    def selected_answer(self, question_id: str):
        return self._answers.get(question_id)

    def select_answer(self, question_id: str, option_index: int) -> None:
        """Record (or overwrite) the chosen option for a question"""
        question = self.quiz.get_question(question_id)
        if question is None:
            raise UnknownQuestion(f"Question {question_id} is not part of quiz {self.quiz.id}")
        if not question.has_option(option_index):
            raise InvalidIndex(
                f"Option {option_index} is out of range for question {question_id} "
                f"({len(question.options)} options)"
            )
        if self.showing_results:
            raise PreconditionNotMet("Answers cannot be changed while results are shown")

        self._answers[question_id] = option_index
        logger.debug(f"Quiz {self.quiz.id}: question {question_id} answered with option {option_index}")

    def go_next(self) -> QuizStatus:
        """Advance one question, or show the results from the last one"""
        if self.showing_results:
            raise PreconditionNotMet("The quiz is already showing its results")
        if not self.is_current_answered:
            raise PreconditionNotMet(f"Question {self.current_question.id} has not been answered")

        if self.is_last:
            self._status = QuizStatus.SHOWING_RESULTS
            logger.debug(f"Quiz {self.quiz.id}: showing results")
        else:
            self._current_index += 1
        return self._status

    def go_previous(self) -> None:
        if self.showing_results or self.is_first:
            return
        self._current_index -= 1

    def submit(self) -> QuizStatus:
        """Mark the quiz completed from its last, answered question"""
        if self.completed:
            return self._status
        if not self.is_last:
            raise PreconditionNotMet("The quiz can only be submitted from its last question")
        if not self.is_current_answered:
            raise PreconditionNotMet(f"Question {self.current_question.id} has not been answered")

        self._status = QuizStatus.COMPLETED
        logger.info(f"Quiz {self.quiz.id} submitted: {self.compute_score().percentage}%")
        return self._status

    def compute_score(self) -> Score:
        return compute_score(self.quiz.questions, self._answers)

    def results(self) -> List[QuestionResult]:
        """Per-question breakdown shown alongside the score"""
        results = []
        for question in self.quiz.questions:
            selected = self._answers.get(question.id)
            results.append(QuestionResult(
                question_id=question.id,
                question=question.question,
                selected=selected,
                correct_answer=question.correct_answer,
                is_correct=selected == question.correct_answer,
                selected_text=question.options[selected] if selected is not None else "Not answered",
                correct_text=question.options[question.correct_answer],
            ))
        return results

    def retake(self) -> None:
        self._answers.clear()
        self._current_index = 0
        self._status = QuizStatus.IN_PROGRESS
        logger.debug(f"Quiz {self.quiz.id}: retake")
