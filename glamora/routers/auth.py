"""
Authentication Router

Email and password sign-up and sign-in for the mobile app.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr, Field

from glamora.models.user import UserPublic
from glamora.services.auth_service import AuthService


router = APIRouter()
auth_service = AuthService()


class RegisterRequest(BaseModel):
    """Request to create an account."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(BaseModel):
    """Request to sign in."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Token plus the signed-in user."""
    token: str
    user: UserPublic


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """Create a regular user account and sign it in."""
    try:
        user = await auth_service.register_user(
            name=request.name,
            email=request.email,
            password=request.password
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return AuthResponse(
        token=auth_service.create_access_token(user),
        user=UserPublic.from_user(user)
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """
    Sign in with email and password.

    Restricted users may still sign in; their requests are refused until
    the restriction ends.
    """
    user = await auth_service.authenticate_user(request.email, request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "account_deactivated",
                "message": "Your account has been deactivated."
            }
        )

    return AuthResponse(
        token=auth_service.create_access_token(user),
        user=UserPublic.from_user(user)
    )
