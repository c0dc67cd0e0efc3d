import os
import logging
import mimetypes
from functools import partial
from typing import Any, List, Optional, Tuple
import gradio as gr
from pydantic import ValidationError

from config import Settings, configure_logging, load_settings
from course_creator import CourseCreator, CourseRequest, HttpCourseGenerator
from course_progress import CourseProgress, Direction
from course_storage import CourseRepository, CourseStorage
from dashboard import filter_courses, summarize_course
from exceptions import CourseError
from file_upload import UploadedFile, validate_upload
from models import Course
from progress_tracker import ProgressTracker
from quiz_session import QuizSession
from sample_data import SAMPLE_COURSES

logger = logging.getLogger(__name__)


class SessionState:
    def __init__(self, repository: CourseRepository, tracker: ProgressTracker,
                 creator: Optional[CourseCreator] = None, settings: Optional[Settings] = None):
        self.repository = repository
        self.tracker = tracker
        self.creator = creator
        self.settings = settings or Settings()
        self.progress: Optional[CourseProgress] = None
        self.quiz: Optional[QuizSession] = None


def format_course_header(progress: CourseProgress) -> str:
    course = progress.course
    return f"""# {course.title}

{course.description}

**Progress:** {progress.progress_percentage()}%
"""


def format_lesson(progress: CourseProgress) -> str:
    lesson = progress.current_lesson
    if lesson is None:
        return "This course has no lessons yet."

    status = "Lesson Completed" if progress.is_lesson_completed(lesson.id) else "Not completed"
    return f"""## {lesson.title}

{lesson.content}

_Lesson {progress.current_index + 1} of {len(progress.course.lessons)} - {status}_
"""


def format_outline(progress: CourseProgress) -> str:
    lines = ["### Lessons"]
    for lesson in progress.course.lessons:
        marker = "▶ " if progress.current_lesson and lesson.id == progress.current_lesson.id else ""
        check = " ✓" if progress.is_lesson_completed(lesson.id) else ""
        lines.append(f"- {marker}{lesson.title}{check}")

    lines.append("")
    lines.append("### Quizzes")
    for quiz in progress.course.quizzes:
        check = " ✓" if progress.is_quiz_completed(quiz.id) else ""
        lines.append(f"- {quiz.title}{check}")
    return "\n".join(lines)


def format_outline_for(state: SessionState) -> str:
    return format_outline(state.progress) if state.progress else ""


def format_question(session: QuizSession) -> str:
    question = session.current_question
    action = "Submit Quiz" if session.is_last else "Next"
    return f"""# {session.quiz.title}

Question {session.current_index + 1} of {session.total_questions}

### {question.question}

_Choose an answer, then press {action}._
"""


def format_results(session: QuizSession) -> str:
    score = session.compute_score()
    parts = [
        f"# {session.quiz.title} - Results",
        "",
        f"## {score.percentage}%",
        f"You got {score.correct} out of {score.total} questions correct",
        "",
    ]
    for idx, result in enumerate(session.results(), start=1):
        mark = "✅" if result.is_correct else "❌"
        parts.append(f"{mark} **Question {idx}: {result.question}**")
        parts.append(f"- Your answer: {result.selected_text}")
        if not result.is_correct:
            parts.append(f"- Correct answer: {result.correct_text}")
        parts.append("")
    return "\n".join(parts)


def render_dashboard(state: SessionState, tab: str = "all") -> str:
    summaries = [summarize_course(state.tracker.load_progress(course))
                 for course in state.repository.list_courses()]
    courses = filter_courses(summaries, tab)
    if not courses:
        return "No courses found."

    blocks = []
    for summary in courses:
        blocks.append(f"""### {summary.title} (`{summary.id}`)
{summary.description}

{summary.lessons} lessons · {summary.quizzes} quizzes · {summary.progress}% complete""")
    return "\n\n".join(blocks)


def course_choices(state: SessionState) -> List[Tuple[str, str]]:
    return [(course.title, course.id) for course in state.repository.list_courses()]


def delete_course(state: SessionState, course_id: str, tab: str = "all") -> Tuple[str, str]:
    if not course_id:
        return "Select a course to delete", render_dashboard(state, tab)
    if state.progress and state.progress.course.id == course_id:
        state.progress = None
        state.quiz = None
    course = state.repository.get_course(course_id)
    deleted = state.repository.delete_course(course_id)
    if course is not None:
        state.tracker.reset_progress(course)
    status = f"Deleted course {course_id}" if deleted else f"Course {course_id} not found"
    return status, render_dashboard(state, tab)


def _course_outputs(state: SessionState, status: str) -> Tuple[str, str, str, str]:
    progress = state.progress
    if progress is None:
        return status, "", "", ""
    return status, format_course_header(progress), format_lesson(progress), format_outline(progress)


def _quiz_outputs(state: SessionState, status: str) -> Tuple[str, str, Any]:
    session = state.quiz
    if session is None:
        return status, "No quizzes available for this course yet.", gr.update(choices=[], value=None, visible=False)
    if session.showing_results:
        return status, format_results(session), gr.update(visible=False)

    question = session.current_question
    selected = session.selected_answer(question.id)
    return status, format_question(session), gr.update(
        choices=question.options,
        value=question.options[selected] if selected is not None else None,
        visible=True,
    )


def _save_progress(state: SessionState) -> None:
    if state.progress is not None:
        state.tracker.save_progress(state.progress)


def open_course(state: SessionState, course_id: str):
    """Load a course and its stored progress; start on the first quiz"""
    course: Optional[Course] = state.repository.get_course(course_id) if course_id else None
    if course is None:
        state.progress = None
        state.quiz = None
        return (*_course_outputs(state, "Course not found"),
                gr.update(choices=[], value=None), gr.update(choices=[], value=None),
                *_quiz_outputs(state, "")[1:])

    state.progress = state.tracker.load_progress(course)
    state.quiz = QuizSession(course.quizzes[0]) if course.quizzes else None
    lesson = state.progress.current_lesson
    logger.info(f"Opened course: {course.id}")
    return (*_course_outputs(state, f"Loaded course: {course.title}"),
            gr.update(choices=[(item.title, item.id) for item in course.lessons],
                      value=lesson.id if lesson else None),
            gr.update(choices=[(item.title, item.id) for item in course.quizzes],
                      value=state.quiz.quiz.id if state.quiz else None),
            *_quiz_outputs(state, "")[1:])


def _course_action(state: SessionState, action) -> Tuple[str, str, str, str]:
    if state.progress is None:
        return _course_outputs(state, "No active course")
    try:
        action(state.progress)
        _save_progress(state)
        status = ""
    except CourseError as e:
        logger.warning(f"Rejected lesson action: {str(e)}")
        status = str(e)
    return _course_outputs(state, status)


def select_lesson(state: SessionState, lesson_id: str):
    return _course_action(state, lambda progress: progress.set_current_lesson(lesson_id))


def previous_lesson(state: SessionState):
    return _course_action(state, lambda progress: progress.advance(Direction.PREVIOUS))


def next_lesson(state: SessionState):
    return _course_action(state, lambda progress: progress.advance(Direction.NEXT))


def complete_lesson(state: SessionState):
    return _course_action(state, lambda progress: progress.complete_current_lesson())


def start_quiz(state: SessionState, quiz_id: str):
    if state.progress is None:
        return _quiz_outputs(state, "No active course")
    quiz = state.progress.course.get_quiz(quiz_id) if quiz_id else None
    if quiz is None:
        return _quiz_outputs(state, f"Quiz {quiz_id} not found")
    state.quiz = QuizSession(quiz)
    return _quiz_outputs(state, f"Started quiz: {quiz.title}")


def _quiz_action(state: SessionState, action) -> Tuple[str, str, Any]:
    if state.quiz is None:
        return _quiz_outputs(state, "No active quiz")
    try:
        action(state.quiz)
        status = ""
    except CourseError as e:
        logger.warning(f"Rejected quiz action: {str(e)}")
        status = str(e)
    return _quiz_outputs(state, status)


def choose_answer(state: SessionState, option_index: Optional[int]):
    if option_index is None:
        return _quiz_outputs(state, "")
    return _quiz_action(
        state, lambda session: session.select_answer(session.current_question.id, option_index))


def next_question(state: SessionState):
    return _quiz_action(state, lambda session: session.go_next())


def previous_question(state: SessionState):
    return _quiz_action(state, lambda session: session.go_previous())


def submit_quiz(state: SessionState):
    def submit(session: QuizSession):
        session.submit()
        if state.progress is not None:
            state.progress.record_quiz_result(session.quiz.id, session.compute_score())
            _save_progress(state)

    return _quiz_action(state, submit)


def retake_quiz(state: SessionState):
    return _quiz_action(state, lambda session: session.retake())


def _uploaded_file(path: str) -> UploadedFile:
    return UploadedFile(
        name=os.path.basename(path),
        size=os.path.getsize(path),
        content_type=mimetypes.guess_type(path)[0],
        path=path,
    )


async def create_course(state: SessionState, title: str, description: str, input_type: str,
                        topic: str, content_structure: str, output_format: List[str],
                        features: List[str], file_path: Optional[str] = None) -> str:
    """Validate the form, send it for generation and report the outcome"""
    if state.creator is None:
        return "Error: course generation is not configured (set GENERATOR_URL)"

    try:
        request = CourseRequest(
            title=title,
            description=description or None,
            input_type=input_type,
            topic=topic or None,
            content_structure=content_structure,
            output_format=output_format or [],
            features=features or [],
        )
        upload = None
        if input_type == "document" and file_path:
            upload = validate_upload(_uploaded_file(file_path),
                                     state.settings.accepted_types,
                                     state.settings.upload_max_size_mb)

        result = await state.creator.create_course(request, upload)

    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        return f"Error: {messages}"
    except CourseError as e:
        logger.warning(f"Course creation rejected: {str(e)}")
        return f"Error: {str(e)}"

    if not result.success:
        return f"Error: There was a problem generating your course. ({result.error})"
    return f"Course created successfully! ({result.course_id})"


def create_interface(state: SessionState):
    """Create the Gradio interface"""
    with gr.Blocks(title="AI Course Studio") as app:
        gr.Markdown("""
        # 🎓 AI Course Studio
        Create courses, work through their lessons and take quizzes.
        """)

        status_output = gr.Textbox(label="Status", interactive=False)

        with gr.Tab("Dashboard"):
            tab_input = gr.Radio(
                choices=[("All Courses", "all"), ("In Progress", "in-progress"), ("Completed", "completed")],
                value="all",
                label="Show"
            )
            dashboard_output = gr.Markdown(value=render_dashboard(state))
            with gr.Row():
                courses_dropdown = gr.Dropdown(
                    label="Select a Course",
                    choices=course_choices(state),
                    value=None,
                    interactive=True
                )
                refresh_btn = gr.Button("Refresh")
                open_btn = gr.Button("Open Course", variant="primary")
                delete_btn = gr.Button("Delete Course", variant="stop")

        with gr.Tab("Create New Course"):
            title_input = gr.Textbox(label="Course Title", placeholder="Introduction to Machine Learning")
            description_input = gr.Textbox(label="Description (Optional)", lines=2)
            input_type = gr.Radio(
                choices=[("Enter Topic/Question", "text"), ("Upload Document", "document")],
                value="text",
                label="Content Source"
            )
            topic_input = gr.Textbox(label="Learning Topic or Question", lines=4)
            file_input = gr.File(
                label="Document",
                file_types=state.settings.accepted_types,
                type="filepath"
            )
            structure_input = gr.Radio(
                choices=["modular", "flexible", "difficulty", "practice", "paths"],
                value="modular",
                label="Content Structure"
            )
            format_input = gr.CheckboxGroup(
                choices=["text", "audio", "video", "interactive"],
                value=["text"],
                label="Output Format"
            )
            features_input = gr.CheckboxGroup(
                choices=["quizzes", "flashcards", "summaries", "exercises"],
                value=[],
                label="Additional Features"
            )
            generate_btn = gr.Button("Generate Course", variant="primary")

        with gr.Tab("Course"):
            header_output = gr.Markdown()
            with gr.Row():
                with gr.Column(scale=2):
                    lesson_output = gr.Markdown()
                    with gr.Row():
                        prev_lesson_btn = gr.Button("Previous Lesson")
                        next_lesson_btn = gr.Button("Next Lesson")
                        complete_btn = gr.Button("Mark as Complete", variant="primary")
                with gr.Column(scale=1):
                    outline_output = gr.Markdown()
                    lesson_dropdown = gr.Dropdown(label="Go to Lesson", choices=[], interactive=True)

            gr.Markdown("---")
            quiz_dropdown = gr.Dropdown(label="Quiz", choices=[], interactive=True)
            quiz_output = gr.Markdown()
            answer_input = gr.Radio(label="Your Answer", choices=[], type="index", visible=False)
            with gr.Row():
                prev_question_btn = gr.Button("Previous")
                next_question_btn = gr.Button("Next")
                submit_quiz_btn = gr.Button("Submit Quiz", variant="primary")
                retake_btn = gr.Button("Retake Quiz")

        course_outputs = [status_output, header_output, lesson_output, outline_output]
        quiz_outputs = [status_output, quiz_output, answer_input]

        # Event handlers
        tab_input.change(fn=partial(render_dashboard, state), inputs=[tab_input], outputs=[dashboard_output])
        refresh_btn.click(
            fn=lambda tab: (render_dashboard(state, tab), gr.update(choices=course_choices(state))),
            inputs=[tab_input],
            outputs=[dashboard_output, courses_dropdown]
        )
        open_btn.click(
            fn=partial(open_course, state),
            inputs=[courses_dropdown],
            outputs=course_outputs + [lesson_dropdown, quiz_dropdown, quiz_output, answer_input]
        )
        delete_btn.click(
            fn=partial(delete_course, state),
            inputs=[courses_dropdown, tab_input],
            outputs=[status_output, dashboard_output]
        )

        generate_btn.click(
            fn=partial(create_course, state),
            inputs=[title_input, description_input, input_type, topic_input, structure_input,
                    format_input, features_input, file_input],
            outputs=[status_output]
        )

        lesson_dropdown.input(fn=partial(select_lesson, state), inputs=[lesson_dropdown], outputs=course_outputs)
        prev_lesson_btn.click(fn=partial(previous_lesson, state), inputs=[], outputs=course_outputs)
        next_lesson_btn.click(fn=partial(next_lesson, state), inputs=[], outputs=course_outputs)
        complete_btn.click(fn=partial(complete_lesson, state), inputs=[], outputs=course_outputs)

        quiz_dropdown.input(fn=partial(start_quiz, state), inputs=[quiz_dropdown], outputs=quiz_outputs)
        answer_input.input(fn=partial(choose_answer, state), inputs=[answer_input], outputs=quiz_outputs)
        prev_question_btn.click(fn=partial(previous_question, state), inputs=[], outputs=quiz_outputs)
        next_question_btn.click(fn=partial(next_question, state), inputs=[], outputs=quiz_outputs)
        submit_quiz_btn.click(
            fn=partial(submit_quiz, state), inputs=[], outputs=quiz_outputs
        ).then(fn=partial(format_outline_for, state), inputs=[], outputs=[outline_output])
        retake_btn.click(fn=partial(retake_quiz, state), inputs=[], outputs=quiz_outputs)

    return app


def build_state(settings: Settings) -> SessionState:
    storage = CourseStorage(settings.course_storage_dir)
    storage.seed(Course.model_validate(record) for record in SAMPLE_COURSES)
    creator = None
    if settings.generator_url:
        generator = HttpCourseGenerator(settings.generator_url, timeout=settings.generator_timeout)
        creator = CourseCreator(storage, generator)
    return SessionState(storage, ProgressTracker(settings.progress_storage_dir), creator, settings)


if __name__ == "__main__":
    settings = load_settings()
    configure_logging(settings)
    app = create_interface(build_state(settings))
    app.queue()
    app.launch(show_error=True)
