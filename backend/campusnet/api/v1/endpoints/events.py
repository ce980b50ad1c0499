from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campusnet.core.database import get_db
from campusnet.modules.auth.dependencies import get_current_identity, require_internal_access
from campusnet.schemas.auth import TokenIdentity
from campusnet.schemas.event import EventCreate, EventResponse
from campusnet.services.event_service import EventService

router = APIRouter()


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Add a private event to your own calendar"""
    return await EventService(db).create_private(identity.id, data)


@router.get("/events", response_model=List[EventResponse])
async def list_events(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Public (academic and campus) events starting in the given month"""
    return await EventService(db).list_public(month, year)


@router.get("/events/mine", response_model=List[EventResponse])
async def list_my_events(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).list_own(identity.id, month, year)


@router.post(
    "/internal/events/academic",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
    dependencies=[Depends(require_internal_access)],
)
async def create_academic_event(
    data: EventCreate,
    db: AsyncSession = Depends(get_db)
):
    """Seed the academic calendar; internal token or admin only"""
    return await EventService(db).create_academic(data)
