"""
Marketplace Router

Listings submitted by users. New listings wait for admin approval.
"""

from typing import List

from fastapi import APIRouter, status, Depends, Query

from glamora.models.marketplace_item import MarketplaceItem, MarketplaceItemCreate
from glamora.models.user import User
from glamora.services.marketplace_service import MarketplaceService
from glamora.dependencies import get_current_user


router = APIRouter()
marketplace_service = MarketplaceService()


@router.post("", response_model=MarketplaceItem, status_code=status.HTTP_201_CREATED)
async def create_item(
    request: MarketplaceItemCreate,
    current_user: User = Depends(get_current_user)
):
    """Submit a listing for moderation."""
    return await marketplace_service.create_item(current_user.user_id, request)


@router.get("", response_model=List[MarketplaceItem])
async def list_items(
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user)
):
    """Approved listings, newest first."""
    return await marketplace_service.list_active(limit=limit)
