from fastapi import Request, HTTPException
from pydantic import BaseModel
from config import settings


class CurrentUser(BaseModel):
    id: str
    role: str = settings.DEFAULT_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == settings.ADMIN_ROLE


async def get_current_user(request: Request) -> CurrentUser:
    """
    Dependency that resolves the authenticated caller.
    The auth layer in front of this service validates the bearer token and
    forwards the identity as USER_ID_HEADER / USER_ROLE_HEADER.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = request.headers.get(settings.USER_ID_HEADER, "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    role = request.headers.get(settings.USER_ROLE_HEADER, "").strip() or settings.DEFAULT_ROLE
    return CurrentUser(id=user_id, role=role)
