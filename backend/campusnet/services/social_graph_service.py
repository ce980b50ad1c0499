"""
Social Graph Service - follow edges, profile views and user search
"""

from typing import List, Dict, Any
from sqlalchemy import select, delete, func, exists, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.config import settings
from campusnet.core.exceptions import AlreadyExistsError, InvalidOperationError, UserNotFoundError
from campusnet.core.logging_config import logger
from campusnet.models.follow import Follow
from campusnet.models.notification import NotificationType
from campusnet.models.user import User
from campusnet.services.notification_service import NotificationService

ANONYMOUS_VIEWER_ID = 0


def is_followed_by(viewer_id: int):
    """EXISTS clause: viewer follows the correlated users row"""
    return exists().where(
        Follow.follower_id == viewer_id,
        Follow.following_id == User.id,
    )


class SocialGraphService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve_username(self, username: str) -> int:
        result = await self.db.execute(
            select(User.id).where(User.username == username.lower())
        )
        user_id = result.scalar_one_or_none()
        if user_id is None:
            raise UserNotFoundError(username)
        return user_id

    async def follow(self, follower_id: int, target_username: str) -> None:
        following_id = await self.resolve_username(target_username)

        if following_id == follower_id:
            raise InvalidOperationError("You cannot follow yourself")

        existing = await self.db.execute(
            select(Follow.id).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise AlreadyExistsError("You already follow this user")

        self.db.add(Follow(follower_id=follower_id, following_id=following_id))
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with an identical request
            await self.db.rollback()
            raise AlreadyExistsError("You already follow this user")

        logger.info(f"[Follows] {follower_id} now follows {following_id}")
        await NotificationService(self.db).notify(
            recipient_id=following_id,
            sender_id=follower_id,
            notification_type=NotificationType.FOLLOW,
        )

    async def unfollow(self, follower_id: int, target_username: str) -> None:
        following_id = await self.resolve_username(target_username)

        result = await self.db.execute(
            delete(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise InvalidOperationError("You were not following this user")

        await self.db.commit()
        logger.info(f"[Follows] {follower_id} unfollowed {following_id}")

    def _profile_query(self, viewer_id: int):
        followers_count = (
            select(func.count(Follow.id))
            .where(Follow.following_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        following_count = (
            select(func.count(Follow.id))
            .where(Follow.follower_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        return select(
            User.id,
            User.name,
            User.username,
            User.course,
            User.bio,
            User.avatar_url,
            followers_count.label("followers_count"),
            following_count.label("following_count"),
            is_followed_by(viewer_id).label("is_following_by_me"),
        )

    async def profile_by_username(self, username: str, viewer_id: int = ANONYMOUS_VIEWER_ID) -> Dict[str, Any]:
        result = await self.db.execute(
            self._profile_query(viewer_id).where(User.username == username.lower())
        )
        row = result.first()
        if row is None:
            raise UserNotFoundError(username)
        return dict(row._mapping)

    async def profile_by_id(self, user_id: int, viewer_id: int = ANONYMOUS_VIEWER_ID) -> Dict[str, Any]:
        result = await self.db.execute(
            self._profile_query(viewer_id).where(User.id == user_id)
        )
        row = result.first()
        if row is None:
            raise UserNotFoundError(user_id)
        return dict(row._mapping)

    async def search_users(self, query: str, viewer_id: int = ANONYMOUS_VIEWER_ID) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on username or name, viewer excluded"""
        if not query or not query.strip():
            return []

        pattern = f"%{query.strip()}%"
        result = await self.db.execute(
            select(
                User.id,
                User.name,
                User.username,
                User.avatar_url,
                is_followed_by(viewer_id).label("is_following_by_me"),
            )
            .where(or_(User.username.ilike(pattern), User.name.ilike(pattern)))
            .where(User.id != viewer_id)
            .order_by(User.username)
            .limit(settings.SEARCH_RESULT_LIMIT)
        )
        return [dict(row._mapping) for row in result]
