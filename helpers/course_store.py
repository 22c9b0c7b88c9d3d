from typing import Any, Dict, List, Optional
import logging
import threading
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from config import settings
from config.db_config import get_dynamodb_client
from helpers.course_errors import CourseConflictError, CourseNotFoundError
from models.course import Course

# Configure logging
logger = logging.getLogger(__name__)

_store = None
_store_lock = threading.Lock()

# Put/Delete on a course only succeeds while the stored title is the one the caller read
TITLE_UNCHANGED = 'attribute_exists(courseId) AND #title = :expected_title'


def _failed_conditions(error: ClientError) -> List[int]:
    """Positions of the transaction items whose condition check failed"""
    if error.response.get('Error', {}).get('Code') != 'TransactionCanceledException':
        return []
    reasons = error.response.get('CancellationReasons', [])
    return [i for i, reason in enumerate(reasons) if reason.get('Code') == 'ConditionalCheckFailed']


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


class CourseStore:
    """
    DynamoDB-backed record store for courses.

    Titles are claimed in a second table keyed by title. Every write that touches
    a title goes through transact_write_items so the claim and the course change
    together, which makes title uniqueness atomic. Writes to an existing course
    are conditioned on its stored title, so a write based on a stale read fails
    instead of putting back a title whose claim is gone.

    All calls go through the low-level client, which is safe to share between
    threadpool workers.
    """

    def __init__(self, client=None,
                 courses_table: str = settings.COURSES_TABLE,
                 titles_table: str = settings.COURSE_TITLES_TABLE,
                 instructor_index: str = settings.INSTRUCTOR_INDEX):
        self.client = client or get_dynamodb_client()
        self.courses_table = courses_table
        self.titles_table = titles_table
        self.instructor_index = instructor_index
        self.serializer = TypeSerializer()
        self.deserializer = TypeDeserializer()

    def _serialize(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {k: self.serializer.serialize(v) for k, v in item.items()}

    def _deserialize(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {k: self.deserializer.deserialize(v) for k, v in item.items()}

    def _title_claim(self, course: Course) -> Dict[str, Any]:
        return self._serialize({'title': course.title, 'courseId': course.courseId})

    def _title_guard(self, expected_title: str) -> Dict[str, Any]:
        return {
            'ConditionExpression': TITLE_UNCHANGED,
            'ExpressionAttributeNames': {'#title': 'title'},
            'ExpressionAttributeValues': self._serialize({':expected_title': expected_title}),
        }

    def _stale_write_error(self, course_id: str) -> Exception:
        """A guarded write failed: the course is either gone or was changed meanwhile"""
        if self.get(course_id) is None:
            return CourseNotFoundError('Course not found')
        logger.warning(f"Rejected write to course {course_id} based on a stale read")
        return CourseConflictError('Course was modified by another request, please retry')

    def _collect(self, operation, **kwargs) -> List[Course]:
        """Run a scan/query and follow LastEvaluatedKey until exhausted"""
        courses = []
        while True:
            response = operation(**kwargs)
            courses.extend(Course.from_item(self._deserialize(item)) for item in response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return courses
            kwargs['ExclusiveStartKey'] = last_key

    def insert(self, course: Course) -> Course:
        try:
            self.client.transact_write_items(TransactItems=[
                {
                    'Put': {
                        'TableName': self.courses_table,
                        'Item': self._serialize(course.to_item()),
                        'ConditionExpression': 'attribute_not_exists(courseId)',
                    }
                },
                {
                    'Put': {
                        'TableName': self.titles_table,
                        'Item': self._title_claim(course),
                        'ConditionExpression': 'attribute_not_exists(title)',
                    }
                },
            ])
        except ClientError as e:
            if _failed_conditions(e):
                raise CourseConflictError('Course already exists')
            raise
        return course

    def get(self, course_id: str) -> Optional[Course]:
        response = self.client.get_item(
            TableName=self.courses_table,
            Key=self._serialize({'courseId': course_id})
        )
        if 'Item' not in response:
            return None
        return Course.from_item(self._deserialize(response['Item']))

    def save(self, course: Course, previous_title: str) -> Course:
        """Overwrite an existing course, moving its title claim if the title changed"""
        if course.title == previous_title:
            try:
                self.client.put_item(
                    TableName=self.courses_table,
                    Item=self._serialize(course.to_item()),
                    **self._title_guard(previous_title)
                )
            except ClientError as e:
                if _is_conditional_failure(e):
                    raise self._stale_write_error(course.courseId)
                raise
            return course

        try:
            self.client.transact_write_items(TransactItems=[
                {
                    'Put': {
                        'TableName': self.courses_table,
                        'Item': self._serialize(course.to_item()),
                        **self._title_guard(previous_title),
                    }
                },
                {
                    'Delete': {
                        'TableName': self.titles_table,
                        'Key': self._serialize({'title': previous_title}),
                    }
                },
                {
                    'Put': {
                        'TableName': self.titles_table,
                        'Item': self._title_claim(course),
                        'ConditionExpression': 'attribute_not_exists(title)',
                    }
                },
            ])
        except ClientError as e:
            failed = _failed_conditions(e)
            if 0 in failed:
                raise self._stale_write_error(course.courseId)
            if failed:
                raise CourseConflictError('Course already exists')
            raise
        return course

    def delete(self, course: Course) -> None:
        try:
            self.client.transact_write_items(TransactItems=[
                {
                    'Delete': {
                        'TableName': self.courses_table,
                        'Key': self._serialize({'courseId': course.courseId}),
                        **self._title_guard(course.title),
                    }
                },
                {
                    'Delete': {
                        'TableName': self.titles_table,
                        'Key': self._serialize({'title': course.title}),
                    }
                },
            ])
        except ClientError as e:
            if _failed_conditions(e):
                raise self._stale_write_error(course.courseId)
            raise

    def scan_all(self) -> List[Course]:
        return self._collect(self.client.scan, TableName=self.courses_table)

    def search_title(self, query: str) -> List[Course]:
        return self._collect(
            self.client.scan,
            TableName=self.courses_table,
            FilterExpression='contains(titleLower, :query)',
            ExpressionAttributeValues=self._serialize({':query': query.lower()})
        )

    def list_by_instructor(self, instructor_id: str) -> List[Course]:
        return self._collect(
            self.client.query,
            TableName=self.courses_table,
            IndexName=self.instructor_index,
            KeyConditionExpression='instructor = :instructor',
            ExpressionAttributeValues=self._serialize({':instructor': instructor_id})
        )


def get_course_store() -> CourseStore:
    """FastAPI dependency returning the shared store, built on first use"""
    global _store
    with _store_lock:
        if _store is None:
            logger.info(f"Connecting course store to tables {settings.COURSES_TABLE}, {settings.COURSE_TITLES_TABLE}")
            _store = CourseStore()
    return _store
