import pytest
from fastapi.testclient import TestClient

from helpers.course_errors import CourseConflictError, CourseNotFoundError
from helpers.course_store import get_course_store
from middleware.auth_middleware import CurrentUser


class InMemoryCourseStore:
    """Dict-backed stand-in for CourseStore with the same error behaviour"""

    def __init__(self):
        self.courses = {}

    def _title_taken(self, title, exclude_id=None):
        return any(c.title == title and c.courseId != exclude_id for c in self.courses.values())

    def insert(self, course):
        if course.courseId in self.courses or self._title_taken(course.title):
            raise CourseConflictError('Course already exists')
        self.courses[course.courseId] = course.model_copy(deep=True)
        return course

    def get(self, course_id):
        course = self.courses.get(course_id)
        return course.model_copy(deep=True) if course else None

    def _check_unchanged(self, course_id, expected_title):
        stored = self.courses.get(course_id)
        if stored is None:
            raise CourseNotFoundError('Course not found')
        if stored.title != expected_title:
            raise CourseConflictError('Course was modified by another request, please retry')

    def save(self, course, previous_title):
        self._check_unchanged(course.courseId, previous_title)
        if course.title != previous_title and self._title_taken(course.title, course.courseId):
            raise CourseConflictError('Course already exists')
        self.courses[course.courseId] = course.model_copy(deep=True)
        return course

    def delete(self, course):
        self._check_unchanged(course.courseId, course.title)
        del self.courses[course.courseId]

    def scan_all(self):
        return [c.model_copy(deep=True) for c in self.courses.values()]

    def search_title(self, query):
        return [c.model_copy(deep=True) for c in self.courses.values()
                if query.lower() in c.title.lower()]

    def list_by_instructor(self, instructor_id):
        return [c.model_copy(deep=True) for c in self.courses.values()
                if c.instructor == instructor_id]


@pytest.fixture
def store():
    return InMemoryCourseStore()


@pytest.fixture
def instructor():
    return CurrentUser(id="instructor-1", role="instructor")


@pytest.fixture
def other_user():
    return CurrentUser(id="instructor-2", role="instructor")


@pytest.fixture
def admin():
    return CurrentUser(id="admin-1", role="admin")


@pytest.fixture
def client(store):
    from main import app

    app.dependency_overrides[get_course_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id, role="instructor"):
        return {
            "Authorization": "Bearer test-token",
            "X-User-Id": user_id,
            "X-User-Role": role,
        }
    return _headers
