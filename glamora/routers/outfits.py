"""
Outfits Router

Saved outfits and wear history for the signed-in user.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status, Depends

from glamora.models.outfit import Outfit, OutfitCreate
from glamora.models.user import User
from glamora.services.outfit_service import OutfitService
from glamora.dependencies import get_current_user


router = APIRouter()
outfit_service = OutfitService()


def _outfit_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Outfit not found"
    )


@router.post("", response_model=Outfit, status_code=status.HTTP_201_CREATED)
async def create_outfit(
    request: OutfitCreate,
    current_user: User = Depends(get_current_user)
):
    return await outfit_service.create_outfit(current_user.user_id, request)


@router.get("", response_model=List[Outfit])
async def list_outfits(current_user: User = Depends(get_current_user)):
    """Outfit history, most recently worn first."""
    return await outfit_service.list_outfits(current_user.user_id)


@router.get("/{outfit_id}", response_model=Outfit)
async def get_outfit(
    outfit_id: str,
    current_user: User = Depends(get_current_user)
):
    outfit = await outfit_service.get_outfit(current_user.user_id, outfit_id)
    if not outfit:
        raise _outfit_not_found()
    return outfit


@router.patch("/{outfit_id}/favorite", response_model=Outfit)
async def toggle_favorite(
    outfit_id: str,
    current_user: User = Depends(get_current_user)
):
    outfit = await outfit_service.toggle_favorite(current_user.user_id, outfit_id)
    if not outfit:
        raise _outfit_not_found()
    return outfit


@router.delete("/{outfit_id}")
async def delete_outfit(
    outfit_id: str,
    current_user: User = Depends(get_current_user)
):
    if not await outfit_service.delete_outfit(current_user.user_id, outfit_id):
        raise _outfit_not_found()
    return {"message": "Outfit deleted"}
