from typing import Any, Dict, Optional
from decimal import Decimal
from pydantic import BaseModel
from helpers.video_helper import to_video_bytes


class Course(BaseModel):
    """
    A course record as kept in the Courses table.
    `courseId` is the hash key, `titleLower` is a stored search key only.
    """
    courseId: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    learned: Optional[str] = None
    video: Optional[bytes] = None
    instructor: str
    createdAt: str
    updatedAt: str

    def to_item(self) -> Dict[str, Any]:
        """Convert to a DynamoDB item, dropping unset attributes"""
        item = {
            'courseId': self.courseId,
            'title': self.title,
            'titleLower': self.title.lower(),
            'instructor': self.instructor,
            'createdAt': self.createdAt,
            'updatedAt': self.updatedAt,
        }
        for field in ('description', 'image', 'category', 'learned'):
            value = getattr(self, field)
            if value is not None:
                item[field] = value
        if self.price is not None:
            item['price'] = Decimal(str(self.price))
        if self.video is not None:
            item['video'] = self.video
        return item

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Course":
        price = item.get('price')
        return cls(
            courseId=item['courseId'],
            title=item['title'],
            description=item.get('description'),
            image=item.get('image'),
            category=item.get('category'),
            price=float(price) if price is not None else None,
            learned=item.get('learned'),
            video=to_video_bytes(item.get('video')),
            instructor=item['instructor'],
            createdAt=item['createdAt'],
            updatedAt=item['updatedAt'],
        )
