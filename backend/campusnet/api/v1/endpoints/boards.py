from fastapi import APIRouter, Depends, File, Form, UploadFile, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campusnet.core.database import get_db
from campusnet.modules.auth.dependencies import (
    get_current_identity,
    get_optional_identity,
    require_board_creator,
    viewer_id_of,
)
from campusnet.schemas.auth import TokenIdentity
from campusnet.schemas.board import (
    BoardCreate,
    BoardResponse,
    BoardWithMembership,
    JoinToggleResponse,
    NoticeResponse,
)
from campusnet.services.board_service import BoardService
from campusnet.services.storage_service import StorageService, get_storage_service

router = APIRouter()


@router.post("/boards", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
async def create_board(
    data: BoardCreate,
    identity: TokenIdentity = Depends(require_board_creator),
    db: AsyncSession = Depends(get_db)
):
    return await BoardService(db).create_board(data)


@router.get("/boards", response_model=List[BoardWithMembership])
async def list_boards(
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """All boards with member counts and the caller's membership"""
    return await BoardService(db).list_boards(identity.id)


@router.post("/boards/{board_id}/toggle-join", response_model=JoinToggleResponse)
async def toggle_join(
    board_id: str,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    joined = await BoardService(db).toggle_membership(board_id, identity.id)
    return JoinToggleResponse(joined=joined)


@router.post("/boards/{board_id}/notices", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
async def create_notice(
    board_id: str,
    content: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Post a notice, optionally with an attachment"""
    file_url = None
    content_type = None
    if file is not None and file.filename:
        stored = await storage.save(file, "file")
        file_url = stored.url
        content_type = stored.content_type

    try:
        return await BoardService(db).create_notice(
            board_id,
            identity.id,
            content,
            subject=subject,
            file_url=file_url,
            content_type=content_type,
        )
    except Exception:
        await storage.delete(file_url)
        raise


@router.get("/search/boards", response_model=List[BoardWithMembership])
async def search_boards(
    q: Optional[str] = Query(None),
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    return await BoardService(db).search_boards(q or "", viewer_id_of(identity))
