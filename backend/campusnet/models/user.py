from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from campusnet.core.database import Base


class UserRole(str, enum.Enum):
    """User roles"""
    MEMBER = "member"
    ADMIN = "admin"


class User(Base):
    """User model - email and username are stored lowercase"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)

    role = Column(SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e]), default=UserRole.MEMBER, nullable=False)

    # Profile fields
    course = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    notices = relationship("Notice", back_populates="author", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.username}>"
