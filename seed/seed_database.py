import os
import json
import logging
from typing import Any, Dict, List

from config.db_config import create_tables
from helpers import course_helper
from helpers.course_errors import CourseConflictError
from helpers.course_store import CourseStore
from middleware.auth_middleware import CurrentUser

logger = logging.getLogger(__name__)

COURSE_SCHEMA = {
    "title": {"type": str, "required": True},
    "instructor": {"type": str, "required": True},
    "description": {"type": str, "required": False},
    "image": {"type": str, "required": False},
    "category": {"type": str, "required": False},
    "price": {"type": (int, float), "required": False},
    "learned": {"type": str, "required": False},
}


def validate_data(data: List[Dict[str, Any]], schema: Dict[str, Any]) -> bool:
    """
    Basic validation for the data structure against a schema.
    """
    for record in data:
        for field, field_schema in schema.items():
            if field not in record:
                if field_schema.get('required', True):
                    logger.error(f"Missing required field '{field}' in record: {record}")
                    return False
            elif isinstance(record[field], bool) and field_schema['type'] is not bool:
                # bool is an int subclass, reject it before the numeric check
                logger.error(f"Field '{field}' has incorrect type in record: {record}")
                return False
            elif not isinstance(record[field], field_schema['type']):
                logger.error(f"Field '{field}' has incorrect type in record: {record}")
                return False
    return True


def load_json_data(file_path: str) -> List[Dict[str, Any]]:
    """
    Load data from a JSON file located in the 'data' directory.
    """
    current_dir = os.path.dirname(os.path.abspath(__file__))
    full_path = os.path.join(current_dir, "data", file_path)

    try:
        with open(full_path, 'r') as file:
            return json.load(file)
    except FileNotFoundError:
        logger.error(f"File not found: {full_path}")
        raise
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON format in file: {full_path}")
        raise


def seed_courses(store, data: List[Dict[str, Any]]) -> int:
    """
    Create each course as its instructor. Titles that already exist are skipped.
    Returns the number of courses created.
    """
    if not validate_data(data, COURSE_SCHEMA):
        raise ValueError("Course seed data failed validation")

    created = 0
    for record in data:
        caller = CurrentUser(id=record['instructor'])
        try:
            course_helper.create_course(
                store, caller, record['title'],
                description=record.get('description'),
                image=record.get('image'),
                category=record.get('category'),
                price=record.get('price'),
                learned=record.get('learned'),
            )
            created += 1
        except CourseConflictError:
            logger.info(f"Skipping existing course: {record['title']}")
    return created


def seed_all():
    """
    Create the tables and seed course data.
    """
    logger.info("Starting database seeding...")
    create_tables()
    created = seed_courses(CourseStore(), load_json_data("courses.json"))
    logger.info(f"Database seeding completed, {created} course(s) created")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_all()
