"""
Course operations: create, update, delete and the read paths.
Each function takes the record store and, for writes, the authenticated caller.
Failures are raised as CourseServiceError subclasses.
"""
from typing import List, Optional
from datetime import datetime, timezone
import logging
import math
import uuid

from config import settings
from helpers.course_errors import (
    CourseForbiddenError,
    CourseNotFoundError,
    CourseValidationError,
)
from middleware.auth_middleware import CurrentUser
from models.course import Course
from schemas.course_schema import CourseUpdate

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_video_size(video: Optional[bytes]) -> None:
    if video is not None and len(video) > settings.MAX_VIDEO_BYTES:
        raise CourseValidationError(
            f"Video exceeds maximum size of {settings.MAX_VIDEO_BYTES} bytes"
        )


# DynamoDB caps a partition key (the title claim) at 2048 bytes
MAX_TITLE_BYTES = 2048


def _check_title(title: Optional[str], message: str) -> None:
    if not title or not title.strip():
        raise CourseValidationError(message)
    if len(title.encode("utf-8")) > MAX_TITLE_BYTES:
        raise CourseValidationError(f"Title exceeds maximum length of {MAX_TITLE_BYTES} bytes")


def _check_price(price: Optional[float]) -> None:
    if price is not None and not math.isfinite(price):
        raise CourseValidationError("Price must be a finite number")


def _can_modify(course: Course, caller: CurrentUser) -> bool:
    return course.instructor == caller.id or caller.is_admin


def _get_or_404(store, course_id: str) -> Course:
    course = store.get(course_id)
    if course is None:
        raise CourseNotFoundError("Course not found")
    return course


def create_course(store, caller: CurrentUser, title: str,
                  description: Optional[str] = None,
                  image: Optional[str] = None,
                  category: Optional[str] = None,
                  price: Optional[float] = None,
                  learned: Optional[str] = None,
                  video: Optional[bytes] = None) -> Course:
    """Create a course owned by the caller. Duplicate titles raise CourseConflictError."""
    _check_title(title, "Title is required")
    _check_price(price)
    _check_video_size(video)

    timestamp = _now()
    course = Course(
        courseId=str(uuid.uuid4()),
        title=title,
        description=description,
        image=image,
        category=category,
        price=price,
        learned=learned,
        video=video,
        instructor=caller.id,
        createdAt=timestamp,
        updatedAt=timestamp,
    )
    store.insert(course)
    logger.info(f"Course {course.courseId} created by {caller.id}: {title}")
    return course


def update_course(store, course_id: str, caller: CurrentUser,
                  changes: CourseUpdate, video: Optional[bytes] = None) -> Course:
    course = _get_or_404(store, course_id)
    if not _can_modify(course, caller):
        logger.warning(f"User {caller.id} denied update of course {course_id}")
        raise CourseForbiddenError("Not authorized to update this course")

    fields = changes.present_fields()
    if "title" in fields:
        _check_title(fields["title"], "Title cannot be empty")
    _check_price(fields.get("price"))
    _check_video_size(video)

    previous_title = course.title
    updates = dict(fields, updatedAt=_now())
    if video is not None:
        updates['video'] = video
    updated = course.model_copy(update=updates)

    store.save(updated, previous_title=previous_title)
    logger.info(f"Course {course_id} updated by {caller.id}: {sorted(fields)}")
    return updated


def delete_course(store, course_id: str, caller: CurrentUser) -> None:
    course = _get_or_404(store, course_id)
    if not _can_modify(course, caller):
        logger.warning(f"User {caller.id} denied delete of course {course_id}")
        raise CourseForbiddenError("Not authorized to delete this course")

    store.delete(course)
    logger.info(f"Course {course_id} removed by {caller.id}")


def get_all_courses(store) -> List[Course]:
    return store.scan_all()


def get_course_by_id(store, course_id: str) -> Course:
    return _get_or_404(store, course_id)


def search_courses(store, query: str) -> List[Course]:
    """Case-insensitive substring match on title. The query is literal text."""
    return store.search_title(query)


def get_courses_by_instructor(store, instructor_id: str,
                              empty_policy: Optional[str] = None) -> List[Course]:
    """
    List an instructor's courses.
    With the default 'not_found' policy an empty result raises CourseNotFoundError,
    with 'empty' it returns [].
    """
    empty_policy = empty_policy or settings.EMPTY_INSTRUCTOR_LISTING
    courses = store.list_by_instructor(instructor_id)
    if not courses and empty_policy != settings.EMPTY_LISTING_EMPTY:
        raise CourseNotFoundError("No courses found for this instructor")
    return courses
