"""
Clothing Usage Router

Wear tracking and the most-worn items screen.
"""

from fastapi import APIRouter, HTTPException, status, Depends

from glamora.models.clothing_usage import FrequentUsageResponse, TrackUsageRequest, UsagePeriod
from glamora.models.user import User
from glamora.services.usage_service import UsageService
from glamora.dependencies import get_current_user


router = APIRouter()
usage_service = UsageService()


@router.post("/track")
async def track_usage(
    request: TrackUsageRequest,
    current_user: User = Depends(get_current_user)
):
    """Record that every item of an outfit was worn today."""
    count = await usage_service.track_outfit(current_user.user_id, request.outfit_id)
    if count is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Outfit not found"
        )
    return {"message": "Usage tracked", "items_tracked": count}


@router.get("/frequent/{period}", response_model=FrequentUsageResponse)
async def get_frequent_items(
    period: UsagePeriod,
    current_user: User = Depends(get_current_user)
):
    """Most-worn items in the last week, month or year, per category."""
    categories = await usage_service.get_frequent(current_user.user_id, period)
    return FrequentUsageResponse(period=period, categories=categories)
