from typing import Optional
from pydantic import BaseModel
from helpers.video_helper import to_data_url


class CourseUpdate(BaseModel):
    """Partial update. Only fields that are set (not None) are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    learned: Optional[str] = None

    def present_fields(self) -> dict:
        return {k: v for k, v in self.model_dump().items() if v is not None}


# Response Models
class CourseResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    learned: Optional[str] = None
    video: Optional[str] = None
    instructor: str
    createdAt: str
    updatedAt: str

    @classmethod
    def from_course(cls, course) -> "CourseResponse":
        return cls(
            id=course.courseId,
            title=course.title,
            description=course.description,
            image=course.image,
            category=course.category,
            price=course.price,
            learned=course.learned,
            video=to_data_url(course.video),
            instructor=course.instructor,
            createdAt=course.createdAt,
            updatedAt=course.updatedAt,
        )


class MessageResponse(BaseModel):
    message: str
