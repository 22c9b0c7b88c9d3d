"""
Environment-driven settings for the course API server
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# AWS / DynamoDB
AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')
AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
DYNAMODB_ENDPOINT_URL = os.getenv('DYNAMODB_ENDPOINT_URL')  # e.g. http://localhost:8000 for DynamoDB Local

COURSES_TABLE = os.getenv('COURSES_TABLE', 'Courses')
COURSE_TITLES_TABLE = os.getenv('COURSE_TITLES_TABLE', 'CourseTitles')
INSTRUCTOR_INDEX = os.getenv('INSTRUCTOR_INDEX', 'InstructorIndex')

# Authorization
ADMIN_ROLE = os.getenv('ADMIN_ROLE', 'admin')
DEFAULT_ROLE = os.getenv('DEFAULT_ROLE', 'instructor')
USER_ID_HEADER = os.getenv('USER_ID_HEADER', 'X-User-Id')
USER_ROLE_HEADER = os.getenv('USER_ROLE_HEADER', 'X-User-Role')

# Course behaviour
EMPTY_LISTING_NOT_FOUND = 'not_found'
EMPTY_LISTING_EMPTY = 'empty'
EMPTY_INSTRUCTOR_LISTING = os.getenv('EMPTY_INSTRUCTOR_LISTING', EMPTY_LISTING_NOT_FOUND)

# DynamoDB items are capped at 400KB, leave room for the other attributes
MAX_VIDEO_BYTES = int(os.getenv('MAX_VIDEO_BYTES', str(380 * 1024)))

# Server
HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', '5000'))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
CORS_ORIGINS = [origin.strip() for origin in os.getenv('CORS_ORIGINS', '*').split(',') if origin.strip()]
