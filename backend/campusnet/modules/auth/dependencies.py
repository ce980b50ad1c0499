import secrets
from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from campusnet.core.config import settings
from campusnet.core.database import get_db
from campusnet.core.exceptions import AuthenticationError, AuthorizationError, CampusNetError
from campusnet.core.logging_config import set_user_id
from campusnet.core.security import decode_token
from campusnet.models.user import User, UserRole
from campusnet.schemas.auth import TokenIdentity, ProfileSnapshot
from campusnet.services.social_graph_service import ANONYMOUS_VIEWER_ID

# auto_error=False so a missing header reaches our own 401 instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


def _identity_from_token(token: str) -> TokenIdentity:
    payload = decode_token(token)

    user_id = payload.get("id", payload.get("sub"))
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")

    return TokenIdentity(
        id=user_id,
        role=payload.get("role") or UserRole.MEMBER.value,
        profile_snapshot=ProfileSnapshot(
            name=payload.get("name"),
            email=payload.get("email"),
            username=payload.get("username"),
            course=payload.get("course"),
            bio=payload.get("bio"),
            avatar_url=payload.get("avatar_url"),
        ),
    )


def viewer_id_of(identity: Optional[TokenIdentity]) -> int:
    """Viewer id for annotated reads; anonymous callers match nothing"""
    return identity.id if identity else ANONYMOUS_VIEWER_ID


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenIdentity]:
    """Caller identity if a valid token was sent, otherwise None"""
    if not credentials:
        return None

    try:
        identity = _identity_from_token(credentials.credentials)
    except CampusNetError:
        return None

    set_user_id(str(identity.id))
    return identity


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenIdentity:
    """Caller identity; 401 when the token is missing, malformed or expired"""
    if not credentials:
        raise AuthenticationError()

    identity = _identity_from_token(credentials.credentials)
    set_user_id(str(identity.id))
    return identity


async def get_current_admin(
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
) -> TokenIdentity:
    """
    Admin caller. The role is read from the store because the role claim
    in the token may predate a promotion or demotion.
    """
    result = await db.execute(select(User.role).where(User.id == identity.id))
    role = result.scalar_one_or_none()
    if role != UserRole.ADMIN:
        raise AuthorizationError("Admin access required")
    return identity


async def require_board_creator(
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
) -> TokenIdentity:
    if settings.BOARD_CREATION_REQUIRES_ADMIN:
        return await get_current_admin(identity, db)
    return identity


async def require_internal_access(
    x_internal_token: Optional[str] = Header(None, alias="X-Internal-Token"),
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
) -> None:
    """Service-to-service token, or an admin bearer token"""
    if settings.INTERNAL_API_TOKEN and x_internal_token:
        if secrets.compare_digest(x_internal_token, settings.INTERNAL_API_TOKEN):
            return

    if identity is None:
        raise AuthorizationError("Internal access required")
    await get_current_admin(identity, db)
