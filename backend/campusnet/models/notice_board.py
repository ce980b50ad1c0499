"""Notice boards (communities), their members and notices"""
from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from campusnet.core.database import Base
from campusnet.core.types import GUID, generate_uuid


DEFAULT_NOTICE_SUBJECT = "Geral"


class NoticeFileType(str, enum.Enum):
    """Attachment kind, derived from the uploaded MIME type"""
    IMAGE = "image"
    PDF = "pdf"
    OTHER = "other"


class NoticeBoard(Base):
    __tablename__ = "notice_boards"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    slug = Column(String(255), unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship("BoardMember", back_populates="board", cascade="all, delete-orphan", passive_deletes=True)
    notices = relationship("Notice", back_populates="board", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<NoticeBoard {self.slug}>"


class BoardMember(Base):
    """Membership row; toggled like a post like"""
    __tablename__ = "board_members"

    __table_args__ = (
        Index('ix_board_members_user_board', 'user_id', 'board_id', unique=True),
        Index('ix_board_members_board_id', 'board_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    board_id = Column(GUID, ForeignKey("notice_boards.id", ondelete="CASCADE"), nullable=False)

    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    board = relationship("NoticeBoard", back_populates="members")

    def __repr__(self):
        return f"<BoardMember {self.user_id} in {self.board_id}>"


class Notice(Base):
    """A post inside a board; only subject and content are editable"""
    __tablename__ = "notices"

    __table_args__ = (
        Index('ix_notices_board_created', 'board_id', 'created_at'),
        Index('ix_notices_user_id', 'user_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    board_id = Column(GUID, ForeignKey("notice_boards.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    subject = Column(String(255), default=DEFAULT_NOTICE_SUBJECT, nullable=False)
    content = Column(Text, nullable=False)

    file_url = Column(Text, nullable=True)
    file_type = Column(SQLEnum(NoticeFileType, values_callable=lambda e: [m.value for m in e]), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    board = relationship("NoticeBoard", back_populates="notices")
    author = relationship("User", back_populates="notices")

    def __repr__(self):
        return f"<Notice {self.id} in {self.board_id}>"
