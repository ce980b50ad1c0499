"""Posts, likes and comments"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from campusnet.core.database import Base


class Post(Base):
    """A post carries text, an image, or both"""
    __tablename__ = "posts"

    __table_args__ = (
        Index('ix_posts_user_id', 'user_id'),
        Index('ix_posts_created_at', 'created_at'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    content = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    author = relationship("User", back_populates="posts")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Post {self.id} by {self.user_id}>"


class PostLike(Base):
    """Presence of a row means the user likes the post"""
    __tablename__ = "post_likes"

    __table_args__ = (
        Index('ix_post_likes_user_post', 'user_id', 'post_id', unique=True),
        Index('ix_post_likes_post_id', 'post_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("Post", back_populates="likes")

    def __repr__(self):
        return f"<PostLike {self.user_id} on {self.post_id}>"


class Comment(Base):
    """Append-only comment on a post"""
    __tablename__ = "comments"

    __table_args__ = (
        Index('ix_comments_post_id', 'post_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)

    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("Post", back_populates="comments")
    author = relationship("User")

    def __repr__(self):
        return f"<Comment {self.id} on {self.post_id}>"
