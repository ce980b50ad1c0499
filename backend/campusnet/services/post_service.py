"""
Post Service - posts, likes and comments
"""

from typing import List, Optional, Dict, Any
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from campusnet.core.logging_config import logger
from campusnet.models.notification import NotificationType
from campusnet.models.post import Post, PostLike, Comment
from campusnet.models.user import User
from campusnet.schemas.auth import TokenIdentity
from campusnet.services.notification_service import NotificationService


class PostService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _post_owner_or_404(self, post_id: int) -> int:
        result = await self.db.execute(select(Post.user_id).where(Post.id == post_id))
        owner_id = result.scalar_one_or_none()
        if owner_id is None:
            raise ResourceNotFoundError("Post", post_id)
        return owner_id

    async def _has_liked(self, post_id: int, user_id: int) -> bool:
        result = await self.db.execute(
            select(PostLike.id).where(PostLike.user_id == user_id, PostLike.post_id == post_id)
        )
        return result.scalar_one_or_none() is not None

    async def create_post(self, user_id: int, content: Optional[str], image_url: Optional[str]) -> Post:
        content = content.strip() if content else None
        if not content and not image_url:
            raise ValidationError("A post cannot be empty")

        post = Post(user_id=user_id, content=content, image_url=image_url)
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)

        logger.info(f"[Posts] User {user_id} created post {post.id}")
        return post

    async def delete_post(self, post_id: int, acting_user_id: int) -> None:
        """Owner-only delete; a missing post and a foreign post look the same"""
        result = await self.db.execute(
            delete(Post).where(Post.id == post_id, Post.user_id == acting_user_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise AuthorizationError()

        await self.db.commit()
        logger.info(f"[Posts] User {acting_user_id} deleted post {post_id}")

    async def toggle_like(self, post_id: int, user_id: int) -> bool:
        """
        Remove the like if present, otherwise add it. Returns the new state.

        Check-then-act without locking: two identical concurrent calls can
        both try to insert, and the loser gets ConflictError (retry).
        """
        owner_id = await self._post_owner_or_404(post_id)

        if await self._has_liked(post_id, user_id):
            await self.db.execute(
                delete(PostLike).where(PostLike.user_id == user_id, PostLike.post_id == post_id)
            )
            await self.db.commit()
            return False

        self.db.add(PostLike(user_id=user_id, post_id=post_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError()

        await NotificationService(self.db).notify(
            recipient_id=owner_id,
            sender_id=user_id,
            notification_type=NotificationType.LIKE,
            post_id=post_id,
        )
        return True

    async def list_comments(self, post_id: int) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(
                Comment.id,
                Comment.content,
                Comment.created_at,
                User.name.label("author_name"),
                User.avatar_url.label("author_avatar"),
                User.username.label("author_username"),
            )
            .join(User, Comment.user_id == User.id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return [dict(row._mapping) for row in result]

    async def create_comment(self, post_id: int, identity: TokenIdentity, content: Optional[str]) -> Dict[str, Any]:
        """
        Author fields in the response come from the token snapshot, not a
        fresh read, so they may lag behind a recent profile edit.
        """
        if not content or not content.strip():
            raise ValidationError("A comment cannot be empty", field="content")

        owner_id = await self._post_owner_or_404(post_id)

        comment = Comment(user_id=identity.id, post_id=post_id, content=content.strip())
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        # Read before the notification commit so nothing needs reloading
        response = {
            "id": comment.id,
            "content": comment.content,
            "created_at": comment.created_at,
            "author_name": identity.profile_snapshot.name,
            "author_avatar": identity.profile_snapshot.avatar_url,
            "author_username": identity.profile_snapshot.username,
        }

        await NotificationService(self.db).notify(
            recipient_id=owner_id,
            sender_id=identity.id,
            notification_type=NotificationType.COMMENT,
            post_id=post_id,
        )
        return response
