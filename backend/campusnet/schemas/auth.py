from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional


class UserRegister(BaseModel):
    """Passwords are hashed exactly as sent; only the text fields are stripped"""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=100)

    @field_validator('name', 'email', 'username', mode='before')
    @classmethod
    def strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator('email', 'username')
    @classmethod
    def lowercase(cls, value: str) -> str:
        return value.lower()


class UserLogin(BaseModel):
    identifier: str = Field(..., min_length=1, description="Email or username")
    password: str = Field(..., min_length=1)

    @field_validator('identifier', mode='before')
    @classmethod
    def strip_identifier(cls, value):
        return value.strip() if isinstance(value, str) else value


class UserResponse(BaseModel):
    """Public profile projection"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    username: str
    course: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class ProfileSnapshot(BaseModel):
    """
    Profile fields copied into the token at login.

    These are NOT refreshed when the profile changes; only use them for
    display. Anything that must be current has to be read from the store.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    course: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class TokenIdentity(BaseModel):
    """Verified caller: `id` is authoritative until the token expires"""
    id: int
    role: str = "member"
    profile_snapshot: ProfileSnapshot
