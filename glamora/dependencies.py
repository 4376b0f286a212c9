"""
Authentication Dependencies

FastAPI dependencies for authentication and authorization.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status, Header

from glamora.models.user import User, UserRole
from glamora.services.auth_service import AuthService
from glamora.services.user_service import UserService


auth_service = AuthService()
user_service = UserService()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


async def get_token_claims(
    authorization: Optional[str] = Header(None)
) -> dict:
    """
    Verify the bearer token and return its claims.

    Expects Authorization header: Bearer <jwt>
    """
    if not authorization:
        raise _unauthorized("No token provided")

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization format. Use: Bearer <token>")

    token = authorization[7:]  # Remove "Bearer " prefix

    claims = auth_service.decode_token(token)
    if not claims:
        raise _unauthorized("Invalid token")

    return claims


async def get_authenticated_user(
    claims: dict = Depends(get_token_claims)
) -> User:
    """Resolve the token subject to a user without any account checks."""
    user = await user_service.get_user(claims["sub"])
    if not user:
        raise _unauthorized("Invalid token")
    return user


async def get_current_user(
    user: User = Depends(get_authenticated_user)
) -> User:
    """
    Get current authenticated user.

    SECURITY: This is the primary authentication gate for the mobile API.
    Deactivated accounts and accounts under an active restriction are
    refused here; an expired restriction is lifted on the way through.
    """
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "account_deactivated",
                "message": "Your account has been deactivated."
            }
        )

    if user.account_status.is_restricted:
        is_clear = await user_service.check_restriction_expired(user)
        if not is_clear:
            end = user.account_status.restriction_end_date
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "account_restricted",
                    "message": "Your account is restricted.",
                    "reason": user.account_status.restriction_reason,
                    "restriction_end_date": end.isoformat() if end else None
                }
            )
        user = await user_service.get_user(user.user_id) or user

    return user


async def get_admin_user(
    claims: dict = Depends(get_token_claims)
) -> User:
    """
    Get current user with admin privileges.

    SECURITY: Missing or invalid tokens are 401. A valid token whose
    subject is missing, not an admin, or deactivated is 403.
    """
    user = await user_service.get_user(claims["sub"])
    if not user or user.role != UserRole.ADMIN.value or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user
