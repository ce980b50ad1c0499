from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from campusnet.core.config import settings
from campusnet.core.database import get_db
from campusnet.core.exceptions import ResourceNotFoundError
from campusnet.modules.auth.dependencies import get_current_identity
from campusnet.schemas.auth import TokenIdentity
from campusnet.schemas.notification import NotificationResponse
from campusnet.services.notification_service import NotificationService

router = APIRouter()


@router.get("/notifications", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = Query(50, ge=1, le=100),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Recent notifications for the caller (disabled unless NOTIFICATIONS_READ_ENABLED)"""
    if not settings.NOTIFICATIONS_READ_ENABLED:
        raise ResourceNotFoundError("Route", message="Not found")
    return await NotificationService(db).list_for_recipient(identity.id, limit=limit)
