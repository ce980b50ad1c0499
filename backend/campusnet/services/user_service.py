"""
User Service - registration, login and profile maintenance
"""

from typing import Dict, Any, Optional, Tuple
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.database import integrity_error_mentions
from campusnet.core.exceptions import (
    AuthorizationError,
    DuplicateIdentityError,
    InvalidCredentialError,
    UserNotFoundError,
)
from campusnet.core.logging_config import logger
from campusnet.core.security import create_access_token, get_password_hash, verify_password
from campusnet.models.user import User
from campusnet.schemas.auth import UserRegister
from campusnet.schemas.user import ProfileUpdate


def build_token_payload(user: User) -> Dict[str, Any]:
    """Identity claims plus a snapshot of the public profile"""
    return {
        "sub": str(user.id),
        "id": user.id,
        "role": user.role.value if user.role else "member",
        "name": user.name,
        "email": user.email,
        "username": user.username,
        "course": user.course,
        "bio": user.bio,
        "avatar_url": user.avatar_url,
    }


class UserService:
    """Credential store operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_or_404(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def register(self, data: UserRegister) -> User:
        """Create a user; email and username arrive lowercased from the schema"""
        user = User(
            name=data.name,
            email=data.email,
            username=data.username,
            password_hash=get_password_hash(data.password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            field = self._duplicate_field(e)
            logger.log_auth_event(
                event="register",
                success=False,
                identifier=data.username,
                reason=f"{field} already exists",
            )
            raise DuplicateIdentityError(field)

        await self.db.refresh(user)
        logger.log_auth_event(event="register", success=True, identifier=user.username, user_id=user.id)
        return user

    async def authenticate(self, identifier: str, password: str) -> Tuple[str, User]:
        """Look up by email OR username and issue an access token"""
        lookup = identifier.strip().lower()
        result = await self.db.execute(
            select(User).where(or_(User.email == lookup, User.username == lookup))
        )
        user = result.scalars().first()

        if not user:
            logger.log_auth_event(event="login", success=False, identifier=lookup, reason="User not found")
            raise UserNotFoundError(lookup)

        if not verify_password(password, user.password_hash):
            logger.log_auth_event(event="login", success=False, identifier=lookup, reason="Incorrect password")
            raise InvalidCredentialError()

        token = create_access_token(build_token_payload(user))
        logger.log_auth_event(event="login", success=True, identifier=user.username, user_id=user.id)
        return token, user

    async def update_profile(self, user_id: int, acting_user_id: int, data: ProfileUpdate) -> User:
        if user_id != acting_user_id:
            raise AuthorizationError()

        user = await self.get_user_or_404(user_id)
        user.name = data.name
        user.username = data.username
        user.course = data.course
        user.bio = data.bio

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if integrity_error_mentions(e, "username"):
                raise DuplicateIdentityError("username")
            raise

        await self.db.refresh(user)
        logger.info(f"[Users] Profile updated for user {user.id}")
        return user

    async def set_avatar(self, user_id: int, file_url: str) -> User:
        user = await self.get_user_or_404(user_id)
        user.avatar_url = file_url
        await self.db.commit()
        await self.db.refresh(user)
        return user

    @staticmethod
    def _duplicate_field(error: IntegrityError) -> str:
        if integrity_error_mentions(error, "email"):
            return "email"
        if integrity_error_mentions(error, "username"):
            return "username"
        raise error
