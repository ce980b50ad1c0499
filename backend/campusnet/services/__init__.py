from campusnet.services.storage_service import StorageService, storage_service
from campusnet.services.notification_service import NotificationService
from campusnet.services.user_service import UserService
from campusnet.services.social_graph_service import SocialGraphService
from campusnet.services.post_service import PostService
from campusnet.services.feed_service import FeedService
from campusnet.services.board_service import BoardService
from campusnet.services.event_service import EventService

__all__ = [
    # Storage
    "StorageService",
    "storage_service",
    # Domain services
    "NotificationService",
    "UserService",
    "SocialGraphService",
    "PostService",
    "FeedService",
    "BoardService",
    "EventService",
]
