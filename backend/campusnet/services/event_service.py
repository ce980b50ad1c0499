"""
Event Service - calendar entries

Public listings hold ACADEMIC and CAMPUS events; USER_PRIVATE events are
only ever returned to their owner.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.exceptions import ValidationError
from campusnet.core.logging_config import logger
from campusnet.models.event import Event, EventCategory, PUBLIC_EVENT_CATEGORIES
from campusnet.schemas.event import EventCreate


def month_bounds(month: Optional[int], year: Optional[int]) -> Tuple[datetime, datetime]:
    """Half-open [first instant of month, first instant of next month)"""
    if month is None or year is None:
        raise ValidationError("Month and year are required")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", field="month")
    if not 1 <= year <= 9998:
        raise ValidationError("Invalid year", field="year")

    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


class EventService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _create(self, data: EventCreate, category: EventCategory, user_id: Optional[int]) -> Event:
        event = Event(
            title=data.title,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            category=category,
            user_id=user_id,
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"[Events] Created {category.value} event {event.id}")
        return event

    async def create_private(self, user_id: int, data: EventCreate) -> Event:
        return await self._create(data, EventCategory.USER_PRIVATE, user_id)

    async def create_academic(self, data: EventCreate) -> Event:
        return await self._create(data, EventCategory.ACADEMIC, None)

    async def list_public(self, month: Optional[int], year: Optional[int]) -> List[Event]:
        start, end = month_bounds(month, year)
        result = await self.db.execute(
            select(Event)
            .where(Event.category.in_(PUBLIC_EVENT_CATEGORIES))
            .where(Event.start_time >= start, Event.start_time < end)
            .order_by(Event.start_time.asc(), Event.id.asc())
        )
        return list(result.scalars().all())

    async def list_own(self, user_id: int, month: Optional[int], year: Optional[int]) -> List[Event]:
        start, end = month_bounds(month, year)
        result = await self.db.execute(
            select(Event)
            .where(Event.category == EventCategory.USER_PRIVATE, Event.user_id == user_id)
            .where(Event.start_time >= start, Event.start_time < end)
            .order_by(Event.start_time.asc(), Event.id.asc())
        )
        return list(result.scalars().all())
