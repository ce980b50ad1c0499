from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=100)
    course: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None

    @field_validator('username')
    @classmethod
    def lowercase(cls, value: str) -> str:
        return value.lower()


class ProfileView(BaseModel):
    id: int
    name: str
    username: str
    course: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    followers_count: int
    following_count: int
    is_following_by_me: bool


class UserSearchResult(BaseModel):
    id: int
    name: str
    username: str
    avatar_url: Optional[str] = None
    is_following_by_me: bool


class FollowResponse(BaseModel):
    following: bool
