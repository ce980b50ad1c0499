from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    content: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime


class FeedPost(BaseModel):
    """A post annotated for a given viewer"""
    id: int
    content: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    author_id: int
    author_name: str
    author_avatar: Optional[str] = None
    author_course: Optional[str] = None
    author_username: str
    total_likes: int
    liked_by_me: bool
    total_comments: int


class LikeToggleResponse(BaseModel):
    liked: bool


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: Optional[str] = Field(None, max_length=5000)


class CommentResponse(BaseModel):
    id: int
    content: str
    created_at: datetime
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None
    author_username: Optional[str] = None
