"""
Authentication API router
"""

from fastapi import APIRouter, Depends, Response, status

from bistro.api.deps import get_current_user, get_identity_service
from bistro.core.config import get_settings
from bistro.models import User
from bistro.schemas import (
    AuthData,
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserPublic,
    UserResponse,
)
from bistro.services import IdentityService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_expire_days * 24 * 60 * 60,
    )


def _auth_payload(user: User, token: str) -> AuthData:
    return AuthData(user=UserPublic.model_validate(user), token=token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    service: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    """Register a new customer account."""
    user = await service.register(payload)
    token = service.issue_token(user)
    return AuthResponse(message="User registered successfully", data=_auth_payload(user, token))


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    service: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    """Log in with mobile number and password; sets the session cookie."""
    user = await service.login(payload)
    token = service.issue_token(user)
    _set_session_cookie(response, token)
    return AuthResponse(message="Login successful", data=_auth_payload(user, token))


@router.post("/admin-login", response_model=AuthResponse)
async def admin_login(
    payload: LoginRequest,
    response: Response,
    service: IdentityService = Depends(get_identity_service),
) -> AuthResponse:
    """Log in with the fixed admin credentials."""
    admin = await service.admin_login(payload)
    token = service.issue_token(admin)
    _set_session_cookie(response, token)
    return AuthResponse(message="Admin login successful", data=_auth_payload(admin, token))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
) -> MessageResponse:
    settings = get_settings()
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(data=UserPublic.model_validate(user))
