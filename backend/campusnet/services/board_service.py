"""
Board Service - notice boards, memberships and notices
"""

from typing import List, Optional, Dict, Any
from sqlalchemy import select, delete, update, func, exists, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.config import settings
from campusnet.core.exceptions import (
    AlreadyExistsError,
    AuthorizationError,
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from campusnet.core.logging_config import logger
from campusnet.models.notice_board import (
    DEFAULT_NOTICE_SUBJECT,
    BoardMember,
    Notice,
    NoticeBoard,
    NoticeFileType,
)
from campusnet.models.user import User
from campusnet.schemas.board import BoardCreate
from campusnet.services.social_graph_service import ANONYMOUS_VIEWER_ID


def classify_file_type(content_type: Optional[str]) -> Optional[NoticeFileType]:
    """Map an upload MIME type to the stored attachment kind"""
    if not content_type:
        return None
    content_type = content_type.lower()
    if content_type == "application/pdf":
        return NoticeFileType.PDF
    if content_type.startswith("image/"):
        return NoticeFileType.IMAGE
    return NoticeFileType.OTHER


class BoardService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _board_or_404(self, board_id: str) -> None:
        result = await self.db.execute(select(NoticeBoard.id).where(NoticeBoard.id == board_id))
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundError("Board", board_id)

    async def _is_member(self, board_id: str, user_id: int) -> bool:
        result = await self.db.execute(
            select(BoardMember.id).where(BoardMember.board_id == board_id, BoardMember.user_id == user_id)
        )
        return result.scalar_one_or_none() is not None

    def _membership_query(self, viewer_id: int):
        member_count = (
            select(func.count(BoardMember.id))
            .where(BoardMember.board_id == NoticeBoard.id)
            .correlate(NoticeBoard)
            .scalar_subquery()
        )
        is_member = exists().where(
            BoardMember.board_id == NoticeBoard.id,
            BoardMember.user_id == viewer_id,
        )
        return select(
            NoticeBoard.id,
            NoticeBoard.name,
            NoticeBoard.description,
            NoticeBoard.slug,
            member_count.label("member_count"),
            is_member.label("is_member"),
        )

    async def create_board(self, data: BoardCreate) -> NoticeBoard:
        board = NoticeBoard(name=data.name, description=data.description, slug=data.slug)
        self.db.add(board)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExistsError("A board with this slug already exists")

        await self.db.refresh(board)
        logger.info(f"[Boards] Created board {board.slug} ({board.id})")
        return board

    async def list_boards(self, viewer_id: int = ANONYMOUS_VIEWER_ID) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            self._membership_query(viewer_id).order_by(NoticeBoard.name.asc())
        )
        return [dict(row._mapping) for row in result]

    async def search_boards(self, query: str, viewer_id: int = ANONYMOUS_VIEWER_ID) -> List[Dict[str, Any]]:
        if not query or not query.strip():
            return []

        pattern = f"%{query.strip()}%"
        result = await self.db.execute(
            self._membership_query(viewer_id)
            .where(or_(
                NoticeBoard.name.ilike(pattern),
                NoticeBoard.description.ilike(pattern),
                NoticeBoard.slug.ilike(pattern),
            ))
            .order_by(NoticeBoard.name.asc())
            .limit(settings.SEARCH_RESULT_LIMIT)
        )
        return [dict(row._mapping) for row in result]

    async def toggle_membership(self, board_id: str, user_id: int) -> bool:
        """Leave the board if a member, otherwise join. Returns the new state."""
        await self._board_or_404(board_id)

        if await self._is_member(board_id, user_id):
            await self.db.execute(
                delete(BoardMember).where(BoardMember.board_id == board_id, BoardMember.user_id == user_id)
            )
            await self.db.commit()
            return False

        self.db.add(BoardMember(board_id=board_id, user_id=user_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError()
        return True

    async def create_notice(
        self,
        board_id: str,
        user_id: int,
        content: Optional[str],
        subject: Optional[str] = None,
        file_url: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> Notice:
        """
        Post a notice on a board. Membership is not required; any
        authenticated user may post on any existing board.
        """
        if not content or not content.strip():
            raise ValidationError("Notice content is required", field="content")

        await self._board_or_404(board_id)

        notice = Notice(
            board_id=board_id,
            user_id=user_id,
            subject=(subject or "").strip() or DEFAULT_NOTICE_SUBJECT,
            content=content.strip(),
            file_url=file_url,
            file_type=classify_file_type(content_type) if file_url else None,
        )
        self.db.add(notice)
        await self.db.commit()
        await self.db.refresh(notice)

        logger.info(f"[Boards] User {user_id} posted notice {notice.id} on board {board_id}")
        return notice

    async def edit_notice(
        self,
        notice_id: str,
        user_id: int,
        content: Optional[str],
        subject: Optional[str] = None,
    ) -> Notice:
        """
        Only subject and content change; the attachment stays as posted.
        A blank subject resets to the default, as on creation.
        """
        if not content or not content.strip():
            raise ValidationError("Notice content is required", field="content")

        values = {
            "content": content.strip(),
            "subject": (subject or "").strip() or DEFAULT_NOTICE_SUBJECT,
        }

        result = await self.db.execute(
            update(Notice)
            .where(Notice.id == notice_id, Notice.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise AuthorizationError()
        await self.db.commit()

        refreshed = await self.db.execute(
            select(Notice).where(Notice.id == notice_id).execution_options(populate_existing=True)
        )
        return refreshed.scalar_one()

    async def delete_notice(self, notice_id: str, user_id: int) -> None:
        result = await self.db.execute(
            delete(Notice).where(Notice.id == notice_id, Notice.user_id == user_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise AuthorizationError()
        await self.db.commit()
        logger.info(f"[Boards] User {user_id} deleted notice {notice_id}")

    async def notice_feed(self, user_id: int) -> List[Dict[str, Any]]:
        """Newest notices from every board the user belongs to"""
        result = await self.db.execute(
            select(
                Notice.id,
                Notice.subject,
                Notice.content,
                Notice.file_url,
                Notice.file_type,
                Notice.created_at,
                NoticeBoard.id.label("board_id"),
                NoticeBoard.name.label("board_name"),
                User.id.label("author_id"),
                User.name.label("author_name"),
                User.avatar_url.label("author_avatar"),
            )
            .join(NoticeBoard, Notice.board_id == NoticeBoard.id)
            .join(BoardMember, BoardMember.board_id == Notice.board_id)
            .join(User, Notice.user_id == User.id)
            .where(BoardMember.user_id == user_id)
            .order_by(Notice.created_at.desc(), Notice.id.desc())
            .limit(settings.NOTICE_FEED_LIMIT)
        )
        return [dict(row._mapping) for row in result]
