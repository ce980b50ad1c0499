from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Index, Enum as SQLEnum
from datetime import datetime
import enum

from campusnet.core.database import Base


class NotificationType(str, enum.Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"


class Notification(Base):
    """Derived activity event for a recipient; written best-effort"""
    __tablename__ = "notifications"

    __table_args__ = (
        Index('ix_notifications_recipient_created', 'recipient_id', 'created_at'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True)

    type = Column(SQLEnum(NotificationType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Notification {self.type} {self.sender_id} -> {self.recipient_id}>"
