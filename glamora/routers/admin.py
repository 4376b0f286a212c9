"""
Admin Router

Admin API endpoints for moderation and system management.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Depends, Query
from pydantic import BaseModel, Field

from glamora.config import settings
from glamora.models.admin_log import AdminLogResponse
from glamora.models.marketplace_item import RejectItemRequest
from glamora.models.report import ReportUpdate, RestrictionRequest
from glamora.models.system_settings import SystemSettingsUpdate
from glamora.models.user import AdminUserUpdate, User, UserPublic
from glamora.services.analytics_service import AnalyticsService
from glamora.services.audit_service import AuditService
from glamora.services.auth_service import AuthService
from glamora.services.marketplace_service import MarketplaceService
from glamora.services.report_service import ReportNotFoundError, ReportService
from glamora.services.settings_service import SettingsService
from glamora.services.user_service import UserService
from glamora.dependencies import get_admin_user
from glamora.utils.pagination import paginated


router = APIRouter()
auth_service = AuthService()
user_service = UserService()
report_service = ReportService()
marketplace_service = MarketplaceService()
analytics_service = AnalyticsService()
settings_service = SettingsService()
audit_service = AuditService()


# =============================================================================
# Request/Response Models
# =============================================================================

class AdminLoginRequest(BaseModel):
    """Dashboard credentials."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminProfile(BaseModel):
    id: str
    name: str
    email: str
    role: str


class AdminLoginResponse(BaseModel):
    message: str
    token: str
    user: AdminProfile


def _page_size(limit: Optional[int]) -> int:
    return limit or settings.default_page_size


def _not_found(what: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{what} not found"
    )


# =============================================================================
# Authentication
# =============================================================================

@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(request: AdminLoginRequest):
    """
    Log in to the admin dashboard.

    Credentials come from configuration; the admin account is created on
    the first successful login.
    """
    admin = await auth_service.authenticate_admin(request.username, request.password)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="admin_login",
        target_type="user",
        target_id=admin.user_id
    )

    return AdminLoginResponse(
        message="Login successful",
        token=auth_service.create_access_token(admin),
        user=AdminProfile(
            id=admin.user_id,
            name=admin.name,
            email=admin.email,
            role=admin.role
        )
    )


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/metrics")
async def get_metrics(admin: User = Depends(get_admin_user)):
    """Headline counters for the dashboard."""
    return await analytics_service.get_metrics()


@router.get("/analytics")
async def get_analytics(
    period: str = "6months",
    admin: User = Depends(get_admin_user)
):
    """Month-bucketed activity for the selected period."""
    try:
        return await analytics_service.get_analytics(period)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


# =============================================================================
# User Management Endpoints
# =============================================================================

@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    search: str = "",
    role: str = "all",
    status_filter: str = Query("all", alias="status", pattern="^(all|active|inactive)$"),
    admin: User = Depends(get_admin_user)
):
    """Paginated user listing with search and filters."""
    limit = _page_size(limit)
    users, total = await user_service.list_users(
        page=page,
        limit=limit,
        search=search,
        role=role,
        status=status_filter
    )
    return paginated(
        "users",
        [UserPublic.from_user(u) for u in users],
        total,
        page,
        limit
    )


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    admin: User = Depends(get_admin_user)
):
    """User details with activity counts."""
    user = await user_service.get_user(user_id)
    if not user:
        raise _not_found("User")

    return {
        "user": UserPublic.from_user(user),
        "stats": await user_service.get_user_stats(user_id)
    }


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    request: AdminUserUpdate,
    admin: User = Depends(get_admin_user)
):
    """
    Change a user's role or active flag.

    SECURITY: Admin action, must be logged.
    """
    target_user = await user_service.get_user(user_id)
    if not target_user:
        raise _not_found("User")

    before_state = {"role": target_user.role, "is_active": target_user.is_active}

    updated = await user_service.admin_update_user(user_id, request)
    if not updated:
        raise _not_found("User")

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="update_user",
        target_type="user",
        target_id=user_id,
        before_state=before_state,
        after_state={"role": updated.role, "is_active": updated.is_active}
    )

    return {
        "message": "User updated successfully",
        "user": UserPublic.from_user(updated)
    }


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(get_admin_user)
):
    """
    Deactivate a user account (soft delete).

    SECURITY: Admin action, must be logged.
    """
    if user_id == admin.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot deactivate your own account"
        )

    if not await user_service.deactivate_user(user_id):
        raise _not_found("User")

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="deactivate_user",
        target_type="user",
        target_id=user_id,
        after_state={"is_active": False}
    )

    return {"message": "User deactivated successfully"}


@router.post("/users/{user_id}/lift-restriction")
async def lift_restriction(
    user_id: str,
    admin: User = Depends(get_admin_user)
):
    """
    Lift a restriction before it runs out.

    SECURITY: Admin action, must be logged.
    """
    target_user = await user_service.get_user(user_id)
    if not target_user:
        raise _not_found("User")

    if not target_user.account_status.is_restricted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is not restricted"
        )

    before_state = target_user.account_status.model_dump(mode="json")
    await user_service.lift_restriction(user_id)

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="lift_restriction",
        target_type="user",
        target_id=user_id,
        before_state=before_state,
        after_state={"is_restricted": False}
    )

    return {"message": "Restriction lifted"}


@router.get("/users/{user_id}/history", response_model=List[AdminLogResponse])
async def get_user_history(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    admin: User = Depends(get_admin_user)
):
    """Moderation history of a user."""
    logs = await audit_service.get_user_history(user_id, limit=limit)
    return [AdminLogResponse(**log.model_dump()) for log in logs]


# =============================================================================
# Report Management Endpoints
# =============================================================================

@router.get("/reports")
async def list_reports(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    status_filter: str = Query(
        "all",
        alias="status",
        pattern="^(all|pending|reviewed|resolved|dismissed)$"
    ),
    admin: User = Depends(get_admin_user)
):
    """Paginated reports with reporter, reported user and listing details."""
    limit = _page_size(limit)
    reports, total = await report_service.list_reports(
        page=page,
        limit=limit,
        status=status_filter
    )
    return paginated("reports", reports, total, page, limit)


@router.put("/reports/{report_id}")
async def update_report(
    report_id: str,
    request: ReportUpdate,
    admin: User = Depends(get_admin_user)
):
    """
    Review a report.

    SECURITY: Admin action, must be logged.
    """
    report = await report_service.get_report(report_id)
    if not report:
        raise _not_found("Report")

    updated = await report_service.update_report(report_id, request, admin.user_id)
    if not updated:
        raise _not_found("Report")

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="update_report",
        target_type="report",
        target_id=report_id,
        before_state={"status": report.status},
        after_state={"status": updated.status},
        metadata={"admin_notes": request.admin_notes} if request.admin_notes else None
    )

    return {"message": "Report updated successfully", "report": updated}


@router.put("/reports/{report_id}/restrict")
async def restrict_reported_user(
    report_id: str,
    request: RestrictionRequest,
    admin: User = Depends(get_admin_user)
):
    """
    Restrict the reported user and resolve the report.

    SECURITY: Admin action, must be logged.
    """
    try:
        report, end_date = await report_service.restrict_reported_user(
            report_id,
            request.restriction_duration,
            request.restriction_reason,
            admin.user_id
        )
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

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="restrict_user",
        target_type="user",
        target_id=report.reported_user_id,
        reason=request.restriction_reason,
        after_state={
            "is_restricted": True,
            "restriction_duration": request.restriction_duration,
            "restriction_end_date": end_date.isoformat()
        },
        metadata={"report_id": report_id}
    )

    return {
        "message": "User restricted successfully",
        "restriction_end_date": end_date,
        "restriction_duration": request.restriction_duration
    }


# =============================================================================
# Marketplace Moderation Endpoints
# =============================================================================

@router.get("/marketplace/pending")
async def get_pending_items(admin: User = Depends(get_admin_user)):
    """The moderation queue."""
    items = await marketplace_service.list_pending()
    return {"items": items, "total": len(items)}


@router.get("/marketplace/items")
async def list_marketplace_items(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    status_filter: str = Query("all", alias="status", pattern="^(all|pending|active|rejected)$"),
    category: str = "all",
    admin: User = Depends(get_admin_user)
):
    limit = _page_size(limit)
    items, total = await marketplace_service.list_items(
        page=page,
        limit=limit,
        status=status_filter,
        category=category
    )
    return paginated("items", items, total, page, limit)


@router.get("/marketplace/categories")
async def get_categories(admin: User = Depends(get_admin_user)):
    return await marketplace_service.get_categories()


@router.put("/marketplace/{item_id}/approve")
async def approve_item(
    item_id: str,
    admin: User = Depends(get_admin_user)
):
    """
    Publish a pending listing.

    SECURITY: Admin action, must be logged.
    """
    item = await marketplace_service.approve_item(item_id, admin.user_id)
    if not item:
        raise _not_found("Item")

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="approve_item",
        target_type="marketplace_item",
        target_id=item_id,
        after_state={"status": item.status}
    )

    return {"message": "Item approved successfully", "item": item}


@router.put("/marketplace/{item_id}/reject")
async def reject_item(
    item_id: str,
    request: RejectItemRequest,
    admin: User = Depends(get_admin_user)
):
    """
    Reject a pending listing.

    SECURITY: Admin action, must be logged.
    """
    item = await marketplace_service.reject_item(item_id, admin.user_id, request.reason)
    if not item:
        raise _not_found("Item")

    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="reject_item",
        target_type="marketplace_item",
        target_id=item_id,
        reason=request.reason,
        after_state={"status": item.status}
    )

    return {"message": "Item rejected successfully", "item": item}


# =============================================================================
# Settings and Logs
# =============================================================================

@router.get("/settings")
async def get_settings(admin: User = Depends(get_admin_user)):
    return {"settings": await settings_service.get_settings()}


@router.put("/settings")
async def update_settings(
    request: SystemSettingsUpdate,
    admin: User = Depends(get_admin_user)
):
    """
    Update community and moderation settings.

    SECURITY: Admin action, must be logged.
    """
    before = await settings_service.get_settings()
    updated = await settings_service.update_settings(request, admin.user_id)

    changed = request.model_dump(exclude_none=True)
    await audit_service.log_admin_action(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action="update_settings",
        target_type="settings",
        before_state=before.model_dump(mode="json", include=set(changed)),
        after_state=changed
    )

    return {"message": "Settings updated successfully", "settings": updated}


@router.get("/logs", response_model=List[AdminLogResponse])
async def get_admin_logs(
    limit: int = Query(50, ge=1, le=200),
    admin: User = Depends(get_admin_user)
):
    """Recent admin actions."""
    logs = await audit_service.get_recent_admin_actions(limit=limit)
    return [AdminLogResponse(**log.model_dump()) for log in logs]
