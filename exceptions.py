class CourseError(ValueError):
    """Base class for rejected course and quiz actions"""


class InvalidIndex(CourseError):
    pass


class UnknownLesson(CourseError):
    pass


class UnknownQuestion(CourseError):
    pass


class UnknownQuiz(CourseError):
    pass


class PreconditionNotMet(CourseError):
    pass


class InvalidUpload(CourseError):
    pass


class GenerationInProgress(CourseError):
    pass
