from fastapi import APIRouter, Depends, File, Form, UploadFile, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campusnet.core.database import get_db
from campusnet.modules.auth.dependencies import get_current_identity, get_optional_identity, viewer_id_of
from campusnet.schemas.auth import TokenIdentity
from campusnet.schemas.post import (
    PostResponse,
    FeedPost,
    LikeToggleResponse,
    CommentCreate,
    CommentResponse,
)
from campusnet.services.feed_service import FeedService
from campusnet.services.post_service import PostService
from campusnet.services.storage_service import StorageService, get_storage_service

router = APIRouter()


@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    content: Optional[str] = Form(None),
    postImage: Optional[UploadFile] = File(None),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Create a post with text, an image, or both"""
    image_url = None
    if postImage is not None and postImage.filename:
        image_url = (await storage.save(postImage, "postImage")).url

    try:
        return await PostService(db).create_post(identity.id, content, image_url)
    except Exception:
        await storage.delete(image_url)
        raise


@router.get("/posts", response_model=List[FeedPost])
async def for_you_feed(
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).for_you(viewer_id_of(identity))


@router.get("/posts/user/id/{user_id}", response_model=List[FeedPost])
async def user_feed_by_id(
    user_id: int,
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).by_author_id(user_id, viewer_id_of(identity))


@router.get("/posts/user/{username}", response_model=List[FeedPost])
async def user_feed(
    username: str,
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).by_author_username(username, viewer_id_of(identity))


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Delete own post; likes, comments and notifications go with it"""
    await PostService(db).delete_post(post_id, identity.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/posts/{post_id}/toggle-like", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    liked = await PostService(db).toggle_like(post_id, identity.id)
    return LikeToggleResponse(liked=liked)


@router.get("/posts/{post_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    post_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).list_comments(post_id)


@router.post("/posts/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: int,
    data: CommentCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).create_comment(post_id, identity, data.content)


@router.get("/feed/following", response_model=List[FeedPost])
async def following_feed(
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Latest posts from people you follow"""
    return await FeedService(db).following(identity.id)
