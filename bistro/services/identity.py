"""
Identity Service

Account registration, password login and the fixed-credential admin login.
The admin account is provisioned lazily on the first successful admin login.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.core.config import AdminCredentials
from bistro.core.exceptions import DuplicateUser, Unauthorized
from bistro.core.security import create_access_token, hash_password, verify_password
from bistro.models import User, UserRole
from bistro.schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

ADMIN_DISPLAY_NAME = "Admin"


class IdentityService:
    """
    Resolves and creates user accounts.

    Attributes:
        db: Request-scoped database session
        admin_credentials: Configured fixed admin login pair
    """

    def __init__(self, db: AsyncSession, admin_credentials: AdminCredentials):
        self.db = db
        self.admin_credentials = admin_credentials

    async def find_by_mobile(self, mobile_number: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.mobile_number == mobile_number)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(user.id, user.role.value)

    async def register(self, payload: RegisterRequest) -> User:
        """
        Create an ordinary user account.

        Raises:
            DuplicateUser: If the mobile number is already registered or is
                reserved for the admin account
        """
        reserved = payload.mobile_number == self.admin_credentials.mobile_number
        if reserved or await self.find_by_mobile(payload.mobile_number) is not None:
            logger.warning(f"Registration rejected, duplicate mobile {payload.mobile_number}")
            raise DuplicateUser()

        user = User(
            full_name=payload.full_name,
            mobile_number=payload.mobile_number,
            password_hash=hash_password(payload.password),
            role=UserRole.USER,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User #{user.id} registered")
        return user

    async def login(self, payload: LoginRequest) -> User:
        """
        Check a mobile number/password pair.

        Raises:
            Unauthorized: Unknown mobile number or wrong password
        """
        user = await self.find_by_mobile(payload.mobile_number)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.warning(f"Failed login for {payload.mobile_number}")
            raise Unauthorized("Invalid credentials")

        logger.info(f"User #{user.id} logged in")
        return user

    async def admin_login(self, payload: LoginRequest) -> User:
        """
        Log in with the fixed admin credentials, creating the admin on first use.

        An ordinary account already holding the admin mobile number (one
        created before the admin pair was configured) is promoted rather than
        duplicated; its password is replaced with the admin password.

        Raises:
            Unauthorized: If the pair does not match the configured credentials
        """
        if not self.admin_credentials.matches(payload.mobile_number, payload.password):
            logger.warning("Failed admin login attempt")
            raise Unauthorized("Invalid admin credentials")

        admin = await self.find_by_mobile(payload.mobile_number)
        if admin is None:
            admin = User(
                full_name=ADMIN_DISPLAY_NAME,
                mobile_number=payload.mobile_number,
                password_hash=hash_password(payload.password),
                role=UserRole.ADMIN,
            )
            self.db.add(admin)
            await self.db.commit()
            await self.db.refresh(admin)
            logger.info(f"Admin account #{admin.id} provisioned")
        elif admin.role != UserRole.ADMIN:
            admin.role = UserRole.ADMIN
            admin.full_name = ADMIN_DISPLAY_NAME
            admin.password_hash = hash_password(payload.password)
            await self.db.commit()
            await self.db.refresh(admin)
            logger.warning(f"User #{admin.id} promoted to admin via admin login")

        return admin
