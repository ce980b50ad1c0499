from fastapi import APIRouter, Depends, File, UploadFile, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from campusnet.core.database import get_db
from campusnet.core.exceptions import ValidationError
from campusnet.modules.auth.dependencies import get_current_identity, get_optional_identity, viewer_id_of
from campusnet.schemas.auth import TokenIdentity, UserResponse
from campusnet.schemas.user import ProfileUpdate, ProfileView, UserSearchResult, FollowResponse
from campusnet.services.social_graph_service import SocialGraphService
from campusnet.services.storage_service import StorageService, get_storage_service
from campusnet.services.user_service import UserService

router = APIRouter()


@router.put("/profile/{user_id}", response_model=UserResponse)
async def update_profile(
    user_id: int,
    data: ProfileUpdate,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Edit own profile"""
    return await UserService(db).update_profile(user_id, identity.id, data)


@router.post("/profile/upload-avatar", response_model=UserResponse)
async def upload_avatar(
    avatar: Optional[UploadFile] = File(None),
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    if avatar is None or not avatar.filename:
        raise ValidationError("No file uploaded", field="avatar")

    stored = await storage.save(avatar, "avatar")
    try:
        return await UserService(db).set_avatar(identity.id, stored.url)
    except Exception:
        await storage.delete(stored.url)
        raise


# Registered before /profile/{username} so "id" is never taken as a username
@router.get("/profile/id/{user_id}", response_model=ProfileView)
async def get_profile_by_id(
    user_id: int,
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    return await SocialGraphService(db).profile_by_id(user_id, viewer_id_of(identity))


@router.get("/profile/{username}", response_model=ProfileView)
async def get_profile(
    username: str,
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    return await SocialGraphService(db).profile_by_username(username, viewer_id_of(identity))


@router.post("/users/{username}/follow", response_model=FollowResponse)
async def follow_user(
    username: str,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await SocialGraphService(db).follow(identity.id, username)
    return FollowResponse(following=True)


@router.delete("/users/{username}/unfollow", response_model=FollowResponse)
async def unfollow_user(
    username: str,
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await SocialGraphService(db).unfollow(identity.id, username)
    return FollowResponse(following=False)


@router.get("/search/users", response_model=List[UserSearchResult])
async def search_users(
    q: Optional[str] = Query(None),
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db)
):
    """Find people by username or name"""
    return await SocialGraphService(db).search_users(q or "", viewer_id_of(identity))
