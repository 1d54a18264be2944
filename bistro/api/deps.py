"""
Request dependencies: the access gate and service providers.

An ``Authorization: Bearer`` header takes precedence over the httponly
session cookie.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.core.config import get_settings
from bistro.core.exceptions import BistroError, Forbidden, Unauthorized
from bistro.core.security import decode_access_token
from bistro.database import get_db
from bistro.models import User
from bistro.services import CatalogService, IdentityService, OrderService, ReviewService


def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    return request.cookies.get(get_settings().cookie_name) or None


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the session token to a user, or fail with 401."""
    token = _extract_token(request, authorization)
    if not token:
        raise Unauthorized("Not authorized, no token")

    claims = decode_access_token(token)
    user = await db.get(User, claims.user_id)
    if user is None:
        raise Unauthorized("User belonging to this token no longer exists")
    return user


async def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous or bad credentials yield None."""
    try:
        return await get_current_user(request, authorization, db)
    except BistroError:
        return None


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden(f"User role {user.role.value} is not authorized to access this route")
    return user


# =============================================================================
# SERVICE PROVIDERS
# =============================================================================

def get_identity_service(db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(db, get_settings().admin_credentials)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db, get_settings().estimated_delivery_minutes)


def get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db, get_settings().approved_reviews_limit)
