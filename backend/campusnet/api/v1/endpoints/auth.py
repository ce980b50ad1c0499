from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.database import get_db
from campusnet.modules.auth.dependencies import get_current_identity
from campusnet.schemas.auth import UserRegister, UserLogin, LoginResponse, UserResponse, TokenIdentity
from campusnet.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register new user"""
    return await UserService(db).register(user_data)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login with email or username"""
    token, user = await UserService(db).authenticate(credentials.identifier, credentials.password)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: TokenIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Current stored profile (not the token snapshot)"""
    return await UserService(db).get_user_or_404(identity.id)
