"""
Users Router

Profile endpoints for the signed-in user.
"""

from fastapi import APIRouter, HTTPException, status, Depends

from glamora.models.user import User, UserPublic, UserUpdate
from glamora.services.user_service import UserService
from glamora.dependencies import get_current_user


router = APIRouter()
user_service = UserService()


@router.get("/me", response_model=UserPublic)
async def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """Get current user's profile."""
    return UserPublic.from_user(current_user)


@router.put("/me", response_model=UserPublic)
async def update_current_user_profile(
    request: UserUpdate,
    current_user: User = Depends(get_current_user)
):
    """
    Update current user's profile.

    SECURITY: Only name, email and profile_picture_url can be changed here.
    """
    try:
        updated = await user_service.update_profile(current_user.user_id, request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserPublic.from_user(updated)
