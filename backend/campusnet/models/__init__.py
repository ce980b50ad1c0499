# Re-export all models for convenient imports
from campusnet.models.user import User, UserRole
from campusnet.models.follow import Follow
from campusnet.models.post import Post, PostLike, Comment
from campusnet.models.notification import Notification, NotificationType
from campusnet.models.notice_board import NoticeBoard, BoardMember, Notice, NoticeFileType
from campusnet.models.event import Event, EventCategory

__all__ = [
    # User
    "User",
    "UserRole",
    # Social graph
    "Follow",
    # Content
    "Post",
    "PostLike",
    "Comment",
    "Notification",
    "NotificationType",
    # Notice boards
    "NoticeBoard",
    "BoardMember",
    "Notice",
    "NoticeFileType",
    # Calendar
    "Event",
    "EventCategory",
]
