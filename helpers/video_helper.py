import base64
from typing import Optional

VIDEO_MEDIA_TYPE = "video/mp4"


def to_video_bytes(value) -> Optional[bytes]:
    """Normalize a stored video attribute (bytes or boto3 Binary) to bytes"""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    # boto3.dynamodb.types.Binary
    return bytes(value.value)


def to_data_url(video: Optional[bytes]) -> Optional[str]:
    """Render video bytes as data:video/mp4;base64,<...>"""
    if video is None:
        return None
    encoded = base64.b64encode(video).decode("ascii")
    return f"data:{VIDEO_MEDIA_TYPE};base64,{encoded}"
