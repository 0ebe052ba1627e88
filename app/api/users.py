"""
app/api/users.py

Purpose: User lookup

- GET /user/{email}: read-only, never creates a record
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_user_service
from app.core.exceptions import ResourceNotFoundError
from app.schemas.response import UserResponse
from app.services.user_service import UserService
from utils.constants import MSG_USER_FOUND, MSG_USER_NOT_FOUND

router = APIRouter()


@router.get("/user/{email}", response_model=UserResponse)
async def get_user(email: str, users: UserService = Depends(get_user_service)):
    """
    Returns the stored user for an email. The outstanding OTP is never included.
    """
    user = await users.get_user_by_email(email)
    if user is None:
        raise ResourceNotFoundError(MSG_USER_NOT_FOUND)
    return UserResponse(message=MSG_USER_FOUND, user=user.to_public(include_otp=False))
