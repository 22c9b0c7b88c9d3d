"""Errors raised by the course operations, each mapped to an HTTP status."""


class CourseServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CourseValidationError(CourseServiceError):
    status_code = 400


class CourseConflictError(CourseServiceError):
    status_code = 400


class CourseForbiddenError(CourseServiceError):
    status_code = 403


class CourseNotFoundError(CourseServiceError):
    status_code = 404
