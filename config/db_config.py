import boto3
import logging
from config import settings

logger = logging.getLogger(__name__)


def _connection_kwargs():
    kwargs = {'region_name': settings.AWS_REGION}
    if settings.DYNAMODB_ENDPOINT_URL:
        kwargs['endpoint_url'] = settings.DYNAMODB_ENDPOINT_URL
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
        kwargs['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY
    return kwargs

# DynamoDB Configuration
def get_dynamodb_client():
    """Get DynamoDB client"""
    return boto3.client('dynamodb', **_connection_kwargs())

def get_dynamodb_resource():
    """Get DynamoDB resource"""
    return boto3.resource('dynamodb', **_connection_kwargs())

def create_tables(dynamodb=None):
    """Create DynamoDB tables if they don't exist"""
    dynamodb = dynamodb or get_dynamodb_resource()

    # Courses table
    try:
        table = dynamodb.create_table(
            TableName=settings.COURSES_TABLE,
            KeySchema=[
                {'AttributeName': 'courseId', 'KeyType': 'HASH'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'courseId', 'AttributeType': 'S'},
                {'AttributeName': 'instructor', 'AttributeType': 'S'}
            ],
            GlobalSecondaryIndexes=[
                {
                    'IndexName': settings.INSTRUCTOR_INDEX,
                    'KeySchema': [
                        {'AttributeName': 'instructor', 'KeyType': 'HASH'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'},
                    'ProvisionedThroughput': {
                        'ReadCapacityUnits': 5,
                        'WriteCapacityUnits': 5
                    }
                }
            ],
            ProvisionedThroughput={
                'ReadCapacityUnits': 5,
                'WriteCapacityUnits': 5
            }
        )
        logger.info(f"Creating {settings.COURSES_TABLE} table...")
        table.wait_until_exists()
    except dynamodb.meta.client.exceptions.ResourceInUseException:
        logger.info(f"{settings.COURSES_TABLE} table already exists")

    # One item per title, written in the same transaction as the course
    try:
        table = dynamodb.create_table(
            TableName=settings.COURSE_TITLES_TABLE,
            KeySchema=[
                {'AttributeName': 'title', 'KeyType': 'HASH'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'title', 'AttributeType': 'S'}
            ],
            ProvisionedThroughput={
                'ReadCapacityUnits': 5,
                'WriteCapacityUnits': 5
            }
        )
        logger.info(f"Creating {settings.COURSE_TITLES_TABLE} table...")
        table.wait_until_exists()
    except dynamodb.meta.client.exceptions.ResourceInUseException:
        logger.info(f"{settings.COURSE_TITLES_TABLE} table already exists")
