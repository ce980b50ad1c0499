from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from campusnet.core.database import get_db
from campusnet.modules.auth.dependencies import get_current_identity
from campusnet.schemas.auth import TokenIdentity
from campusnet.schemas.board import NoticeUpdate, NoticeResponse, NoticeFeedItem
from campusnet.services.board_service import BoardService

router = APIRouter()


@router.get("/notices/feed", response_model=List[NoticeFeedItem])
async def notice_feed(
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Newest notices from the boards you joined"""
    return await BoardService(db).notice_feed(identity.id)


@router.put("/notices/{notice_id}", response_model=NoticeResponse)
async def edit_notice(
    notice_id: str,
    data: NoticeUpdate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await BoardService(db).edit_notice(notice_id, identity.id, data.content, subject=data.subject)


@router.delete("/notices/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notice(
    notice_id: str,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await BoardService(db).delete_notice(notice_id, identity.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
