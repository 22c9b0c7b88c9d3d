from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional
import logging

from helpers import course_helper
from helpers.course_errors import CourseServiceError
from helpers.course_store import get_course_store
from middleware.auth_middleware import CurrentUser, get_current_user
from schemas.course_schema import CourseResponse, CourseUpdate, MessageResponse

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_video(video: Optional[UploadFile]) -> Optional[bytes]:
    """Uploaded video bytes, or None when no file was sent"""
    if video is None or not video.filename:
        return None
    content = await video.read()
    logger.info(f"Read video {video.filename}, size: {len(content)} bytes")
    return content


def _to_http_error(e: CourseServiceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/courses", response_model=CourseResponse, status_code=201)
async def create_course(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    image: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    learned: Optional[str] = Form(None),
    video: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    store=Depends(get_course_store),
):
    """Create a course owned by the caller, with an optional video upload"""
    try:
        video_bytes = await _read_video(video)
        course = await run_in_threadpool(
            course_helper.create_course, store, user, title,
            description=description, image=image, category=category,
            price=price, learned=learned, video=video_bytes,
        )
        return CourseResponse.from_course(course)
    except CourseServiceError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Error creating course: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/courses/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    learned: Optional[str] = Form(None),
    video: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    store=Depends(get_course_store),
):
    """Update the fields that were sent. Only the instructor or an admin may update."""
    try:
        changes = CourseUpdate(
            title=title, description=description, image=image,
            category=category, price=price, learned=learned,
        )
        video_bytes = await _read_video(video)
        course = await run_in_threadpool(
            course_helper.update_course, store, course_id, user, changes, video_bytes
        )
        return CourseResponse.from_course(course)
    except CourseServiceError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Error updating course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/courses/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: str,
    user: CurrentUser = Depends(get_current_user),
    store=Depends(get_course_store),
):
    try:
        await run_in_threadpool(course_helper.delete_course, store, course_id, user)
        return MessageResponse(message="Course removed")
    except CourseServiceError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Error deleting course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/courses", response_model=List[CourseResponse])
async def get_all_courses(store=Depends(get_course_store)):
    try:
        courses = await run_in_threadpool(course_helper.get_all_courses, store)
        return [CourseResponse.from_course(c) for c in courses]
    except Exception as e:
        logger.error(f"Error listing courses: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/courses/search/{query}", response_model=List[CourseResponse])
async def search_courses(query: str, store=Depends(get_course_store)):
    """Case-insensitive title search"""
    try:
        courses = await run_in_threadpool(course_helper.search_courses, store, query)
        return [CourseResponse.from_course(c) for c in courses]
    except Exception as e:
        logger.error(f"Error searching courses for '{query}': {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/courses/instructor/{instructor_id}", response_model=List[CourseResponse])
async def get_courses_by_instructor(instructor_id: str, store=Depends(get_course_store)):
    try:
        courses = await run_in_threadpool(
            course_helper.get_courses_by_instructor, store, instructor_id
        )
        return [CourseResponse.from_course(c) for c in courses]
    except CourseServiceError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Error listing courses for instructor {instructor_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/courses/{course_id}", response_model=CourseResponse)
async def get_course_by_id(course_id: str, store=Depends(get_course_store)):
    """Fetch one course, with its video inlined as a base64 data URL"""
    try:
        course = await run_in_threadpool(course_helper.get_course_by_id, store, course_id)
        return CourseResponse.from_course(course)
    except CourseServiceError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Error getting course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
