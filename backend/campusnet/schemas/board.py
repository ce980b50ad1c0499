from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from campusnet.models.notice_board import NoticeFileType


class BoardCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    slug: str = Field(..., min_length=1, max_length=255, pattern=r'^[a-z0-9_-]+$')


class BoardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    slug: str
    created_at: datetime


class BoardWithMembership(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    slug: str
    member_count: int
    is_member: bool


class JoinToggleResponse(BaseModel):
    joined: bool


class NoticeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    subject: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None


class NoticeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    board_id: str
    user_id: int
    subject: str
    content: str
    file_url: Optional[str] = None
    file_type: Optional[NoticeFileType] = None
    created_at: datetime


class NoticeFeedItem(BaseModel):
    id: str
    subject: str
    content: str
    file_url: Optional[str] = None
    file_type: Optional[NoticeFileType] = None
    created_at: datetime
    board_id: str
    board_name: str
    author_id: int
    author_name: str
    author_avatar: Optional[str] = None
