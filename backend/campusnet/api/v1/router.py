from fastapi import APIRouter
from campusnet.api.v1.endpoints import auth, users, posts, boards, notices, events, notifications

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(posts.router, tags=["Posts"])
api_router.include_router(boards.router, tags=["Boards"])
api_router.include_router(notices.router, tags=["Notices"])
api_router.include_router(events.router, tags=["Events"])
api_router.include_router(notifications.router, tags=["Notifications"])
