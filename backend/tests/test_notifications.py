import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from campusnet.core.config import settings
from campusnet.models.notification import Notification, NotificationType
from campusnet.models.post import Post
from campusnet.services.notification_service import NotificationService


@pytest.mark.asyncio
async def test_read_path_disabled_by_default(client: AsyncClient, test_user):
    response = await client.get("/notifications", headers=test_user["headers"])

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_read_path_when_enabled(client: AsyncClient, test_user, other_user, monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATIONS_READ_ENABLED", True)
    await client.post(f"/users/{test_user['username']}/follow", headers=other_user["headers"])

    response = await client.get("/notifications", headers=test_user["headers"])

    assert response.status_code == 200
    assert len(response.json()) == 1
    assert response.json()[0]["type"] == "follow"
    assert response.json()[0]["sender_username"] == other_user["username"]
    assert response.json()[0]["read"] is False


@pytest.mark.asyncio
async def test_self_notification_skipped(db_session, test_user):
    service = NotificationService(db_session)

    recorded = await service.notify(test_user["id"], test_user["id"], NotificationType.LIKE)

    assert recorded is False
    assert await db_session.scalar(select(func.count()).select_from(Notification)) == 0


@pytest.mark.asyncio
async def test_failed_notification_is_swallowed(db_session, test_user):
    """A broken notification never affects the caller or earlier writes"""
    db_session.add(Post(user_id=test_user["id"], content="primary write"))
    await db_session.commit()

    recorded = await NotificationService(db_session).notify(
        recipient_id=999999,
        sender_id=test_user["id"],
        notification_type=NotificationType.FOLLOW,
    )

    assert recorded is False
    assert await db_session.scalar(select(func.count()).select_from(Post)) == 1
    assert await db_session.scalar(select(func.count()).select_from(Notification)) == 0
