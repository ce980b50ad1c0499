from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, Index, Enum as SQLEnum
from datetime import datetime
import enum

from campusnet.core.database import Base


class EventCategory(str, enum.Enum):
    """Calendar categories; only ACADEMIC and CAMPUS are public"""
    ACADEMIC = "ACADEMIC"
    CAMPUS = "CAMPUS"
    USER_PRIVATE = "USER_PRIVATE"


PUBLIC_EVENT_CATEGORIES = (EventCategory.ACADEMIC, EventCategory.CAMPUS)


class Event(Base):
    __tablename__ = "events"

    __table_args__ = (
        Index('ix_events_start_time', 'start_time'),
        Index('ix_events_user_id', 'user_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    category = Column(SQLEnum(EventCategory), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)  # None for ACADEMIC/CAMPUS

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Event {self.title} ({self.category})>"
