"""
User profile endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends

from readsy.dependencies import get_current_user
from readsy.models.user import User
from readsy.schemas import UserResponse

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)) -> Any:
    """
    Get current user.
    """
    return current_user
