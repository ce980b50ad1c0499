"""Directed follow edges between users"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, CheckConstraint
from datetime import datetime

from campusnet.core.database import Base


class Follow(Base):
    """follower_id follows following_id; at most one edge per ordered pair"""
    __tablename__ = "follows"

    __table_args__ = (
        Index('ix_follows_follower_following', 'follower_id', 'following_id', unique=True),
        Index('ix_follows_following_id', 'following_id'),
        CheckConstraint('follower_id != following_id', name='ck_follows_no_self_follow'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    follower_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    following_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Follow {self.follower_id} -> {self.following_id}>"
