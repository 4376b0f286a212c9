"""
Reports Router

User reports against other users and their listings.
"""

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel

from glamora.models.report import ReportCreate
from glamora.models.user import User
from glamora.services.report_service import ReportNotFoundError, ReportService
from glamora.dependencies import get_current_user


router = APIRouter()
report_service = ReportService()


class ReportResponse(BaseModel):
    """Report creation response."""
    report_id: str
    message: str


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    request: ReportCreate,
    current_user: User = Depends(get_current_user)
):
    """
    Report another user.

    Reports land in the admin dashboard as pending.
    """
    try:
        report = await report_service.create_report(current_user.user_id, request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ReportNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return ReportResponse(
        report_id=report.report_id,
        message="Report submitted. Our team will review it."
    )
