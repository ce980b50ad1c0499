from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from campusnet.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: int
    type: NotificationType
    post_id: Optional[int] = None
    read: bool
    created_at: datetime
    sender_name: str
    sender_avatar: Optional[str] = None
    sender_username: str
