"""
Feed Service - read-only, viewer-annotated post listings

Every feed row has the same shape: post fields, author public fields,
total_likes, liked_by_me and total_comments. Rows are ordered newest
first with id as the tie-breaker so equal timestamps sort the same way
on every call.
"""

from typing import List, Dict, Any, Optional
from sqlalchemy import select, func, exists
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.config import settings
from campusnet.models.follow import Follow
from campusnet.models.post import Post, PostLike, Comment
from campusnet.models.user import User
from campusnet.services.social_graph_service import ANONYMOUS_VIEWER_ID, SocialGraphService


class FeedService:

    def __init__(self, db: AsyncSession):
        self.db = db

    def _feed_query(self, viewer_id: int):
        total_likes = (
            select(func.count(PostLike.id))
            .where(PostLike.post_id == Post.id)
            .correlate(Post)
            .scalar_subquery()
        )
        liked_by_me = exists().where(
            PostLike.post_id == Post.id,
            PostLike.user_id == viewer_id,
        )
        total_comments = (
            select(func.count(Comment.id))
            .where(Comment.post_id == Post.id)
            .correlate(Post)
            .scalar_subquery()
        )
        return (
            select(
                Post.id,
                Post.content,
                Post.image_url,
                Post.created_at,
                User.id.label("author_id"),
                User.name.label("author_name"),
                User.avatar_url.label("author_avatar"),
                User.course.label("author_course"),
                User.username.label("author_username"),
                total_likes.label("total_likes"),
                liked_by_me.label("liked_by_me"),
                total_comments.label("total_comments"),
            )
            .join(User, Post.user_id == User.id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )

    async def _run(self, query) -> List[Dict[str, Any]]:
        result = await self.db.execute(query)
        return [dict(row._mapping) for row in result]

    async def for_you(self, viewer_id: int = ANONYMOUS_VIEWER_ID) -> List[Dict[str, Any]]:
        """Latest posts from everyone"""
        return await self._run(
            self._feed_query(viewer_id).limit(settings.FOR_YOU_FEED_LIMIT)
        )

    async def following(self, viewer_id: int) -> List[Dict[str, Any]]:
        """Latest posts from accounts the viewer follows"""
        query = (
            self._feed_query(viewer_id)
            .join(Follow, Post.user_id == Follow.following_id)
            .where(Follow.follower_id == viewer_id)
            .limit(settings.FOLLOWING_FEED_LIMIT)
        )
        return await self._run(query)

    async def by_author_id(self, author_id: int, viewer_id: int = ANONYMOUS_VIEWER_ID,
                           limit: Optional[int] = None) -> List[Dict[str, Any]]:
        query = self._feed_query(viewer_id).where(Post.user_id == author_id)
        if limit:
            query = query.limit(limit)
        return await self._run(query)

    async def by_author_username(self, username: str, viewer_id: int = ANONYMOUS_VIEWER_ID) -> List[Dict[str, Any]]:
        author_id = await SocialGraphService(self.db).resolve_username(username)
        return await self.by_author_id(author_id, viewer_id)
