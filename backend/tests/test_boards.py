import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from campusnet.core.config import settings
from campusnet.models.notice_board import BoardMember, Notice
from campusnet.services.board_service import BoardService


async def create_board(client: AsyncClient, admin, slug="cs-dept", name="Computer Science", description=None):
    response = await client.post(
        "/boards",
        json={"name": name, "slug": slug, "description": description},
        headers=admin["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


async def post_notice(client: AsyncClient, user, board_id, content="Exam on Friday", **kwargs):
    return await client.post(
        f"/boards/{board_id}/notices",
        data={"content": content, **kwargs.pop("data", {})},
        headers=user["headers"],
        **kwargs,
    )


# ==================== Boards ====================

@pytest.mark.asyncio
async def test_admin_creates_board(client: AsyncClient, admin_user):
    response = await client.post(
        "/boards",
        json={"name": "Library", "slug": "library", "description": "Opening hours"},
        headers=admin_user["headers"],
    )

    assert response.status_code == 201
    assert response.json()["slug"] == "library"
    assert response.json()["id"]


@pytest.mark.asyncio
async def test_member_cannot_create_board(client: AsyncClient, test_user):
    response = await client.post("/boards", json={"name": "Mine", "slug": "mine"}, headers=test_user["headers"])

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_member_can_create_board_when_unrestricted(client: AsyncClient, test_user, monkeypatch):
    monkeypatch.setattr(settings, "BOARD_CREATION_REQUIRES_ADMIN", False)

    response = await client.post("/boards", json={"name": "Mine", "slug": "mine"}, headers=test_user["headers"])

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_duplicate_slug(client: AsyncClient, admin_user):
    await create_board(client, admin_user, slug="dup")

    response = await client.post("/boards", json={"name": "Other", "slug": "dup"}, headers=admin_user["headers"])

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_board_requires_name_and_valid_slug(client: AsyncClient, admin_user):
    no_name = await client.post("/boards", json={"slug": "x"}, headers=admin_user["headers"])
    bad_slug = await client.post("/boards", json={"name": "X", "slug": "Not A Slug"}, headers=admin_user["headers"])

    assert no_name.status_code == 400
    assert bad_slug.status_code == 400


@pytest.mark.asyncio
async def test_list_and_toggle_membership(client: AsyncClient, admin_user, test_user):
    zebra = await create_board(client, admin_user, slug="zebra", name="Zebra Club")
    await create_board(client, admin_user, slug="alpha", name="Alpha Society")

    joined = await client.post(f"/boards/{zebra['id']}/toggle-join", headers=test_user["headers"])
    assert joined.json() == {"joined": True}

    boards = (await client.get("/boards", headers=test_user["headers"])).json()
    assert [b["name"] for b in boards] == ["Alpha Society", "Zebra Club"]
    assert boards[1]["is_member"] is True
    assert boards[1]["member_count"] == 1
    assert boards[0]["is_member"] is False
    assert boards[0]["member_count"] == 0

    left = await client.post(f"/boards/{zebra['id']}/toggle-join", headers=test_user["headers"])
    assert left.json() == {"joined": False}

    boards = (await client.get("/boards", headers=test_user["headers"])).json()
    assert all(b["member_count"] == 0 for b in boards)


@pytest.mark.asyncio
async def test_toggle_unknown_board(client: AsyncClient, test_user):
    response = await client.post("/boards/does-not-exist/toggle-join", headers=test_user["headers"])

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_boards_requires_auth(client: AsyncClient):
    response = await client.get("/boards")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_search_boards(client: AsyncClient, admin_user):
    await create_board(client, admin_user, slug="robotics", name="Robotics Lab")
    await create_board(client, admin_user, slug="chess", name="Chess", description="Weekly ROBOTICS-free games")
    await create_board(client, admin_user, slug="music", name="Music")

    response = await client.get("/search/boards", params={"q": "robotics"})
    empty = await client.get("/search/boards", params={"q": " "})

    assert {b["slug"] for b in response.json()} == {"robotics", "chess"}
    assert all(b["is_member"] is False for b in response.json())
    assert empty.json() == []


# ==================== Notices ====================

@pytest.mark.asyncio
async def test_notice_round_trip(client: AsyncClient, admin_user, test_user):
    board = await create_board(client, admin_user)
    await client.post(f"/boards/{board['id']}/toggle-join", headers=test_user["headers"])

    created = await post_notice(client, test_user, board["id"], content="Exam on Friday")
    assert created.status_code == 201
    assert created.json()["subject"] == "Geral"
    assert created.json()["file_url"] is None
    assert created.json()["file_type"] is None

    feed = (await client.get("/notices/feed", headers=test_user["headers"])).json()
    assert len(feed) == 1
    assert feed[0]["content"] == "Exam on Friday"
    assert feed[0]["board_id"] == board["id"]
    assert feed[0]["board_name"] == board["name"]
    assert feed[0]["author_id"] == test_user["id"]
    assert feed[0]["author_name"] == test_user["name"]
    assert feed[0]["subject"] == "Geral"
    assert feed[0]["file_url"] is None
    assert feed[0]["file_type"] is None

    deleted = await client.delete(f"/notices/{created.json()['id']}", headers=test_user["headers"])
    assert deleted.status_code == 204
    assert (await client.get("/notices/feed", headers=test_user["headers"])).json() == []


@pytest.mark.asyncio
async def test_notice_feed_only_joined_boards(client: AsyncClient, admin_user, test_user, other_user):
    joined = await create_board(client, admin_user, slug="joined")
    other = await create_board(client, admin_user, slug="other")
    await client.post(f"/boards/{joined['id']}/toggle-join", headers=test_user["headers"])

    await post_notice(client, other_user, joined["id"], content="visible")
    await post_notice(client, other_user, other["id"], content="hidden")

    feed = (await client.get("/notices/feed", headers=test_user["headers"])).json()

    assert [n["content"] for n in feed] == ["visible"]


@pytest.mark.asyncio
async def test_notice_without_membership_is_allowed(client: AsyncClient, admin_user, test_user):
    board = await create_board(client, admin_user)

    response = await post_notice(client, test_user, board["id"], data={"subject": "Lost & found"})

    assert response.status_code == 201
    assert response.json()["subject"] == "Lost & found"


@pytest.mark.asyncio
async def test_notice_validation(client: AsyncClient, admin_user, test_user):
    board = await create_board(client, admin_user)

    empty = await post_notice(client, test_user, board["id"], content="  ")
    unknown = await post_notice(client, test_user, "no-such-board")

    assert empty.status_code == 400
    assert unknown.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("filename,content_type,expected", [
    ("syllabus.pdf", "application/pdf", "pdf"),
    ("poster.png", "image/png", "image"),
    ("notes.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", "other"),
])
async def test_notice_attachment_type(client: AsyncClient, admin_user, test_user, filename, content_type, expected):
    board = await create_board(client, admin_user)

    response = await post_notice(
        client, test_user, board["id"],
        files={"file": (filename, b"attachment", content_type)},
    )

    assert response.status_code == 201
    assert response.json()["file_type"] == expected
    assert response.json()["file_url"].startswith("/uploads/file-")


@pytest.mark.asyncio
async def test_edit_notice(client: AsyncClient, admin_user, test_user):
    board = await create_board(client, admin_user)
    created = (await post_notice(
        client, test_user, board["id"], files={"file": ("a.pdf", b"pdf", "application/pdf")}
    )).json()

    empty = await client.put(f"/notices/{created['id']}", json={"content": ""}, headers=test_user["headers"])
    edited = await client.put(
        f"/notices/{created['id']}",
        json={"subject": "Update", "content": "Exam moved"},
        headers=test_user["headers"],
    )

    assert empty.status_code == 400
    assert edited.status_code == 200
    assert edited.json()["subject"] == "Update"
    assert edited.json()["content"] == "Exam moved"
    assert edited.json()["file_url"] == created["file_url"]
    assert edited.json()["file_type"] == "pdf"


@pytest.mark.asyncio
async def test_edit_notice_without_subject_resets_default(client: AsyncClient, admin_user, test_user):
    board = await create_board(client, admin_user)
    created = (await post_notice(client, test_user, board["id"], data={"subject": "Exam"})).json()
    assert created["subject"] == "Exam"

    missing = await client.put(f"/notices/{created['id']}", json={"content": "c2"}, headers=test_user["headers"])
    assert missing.status_code == 200
    assert missing.json()["subject"] == "Geral"

    await client.put(
        f"/notices/{created['id']}", json={"subject": "Exam", "content": "c3"}, headers=test_user["headers"]
    )
    blank = await client.put(
        f"/notices/{created['id']}", json={"subject": "   ", "content": "c4"}, headers=test_user["headers"]
    )
    assert blank.json()["subject"] == "Geral"


@pytest.mark.asyncio
async def test_edit_notice_not_author_leaves_row_unchanged(
    client: AsyncClient, db_session, admin_user, test_user, other_user
):
    board = await create_board(client, admin_user)
    created = (await post_notice(client, test_user, board["id"], data={"subject": "Exam"})).json()

    response = await client.put(
        f"/notices/{created['id']}", json={"subject": "x", "content": "hacked"}, headers=other_user["headers"]
    )

    assert response.status_code == 403
    row = (await db_session.execute(
        select(Notice.subject, Notice.content).where(Notice.id == created["id"])
    )).one()
    assert tuple(row) == ("Exam", "Exam on Friday")


@pytest.mark.asyncio
async def test_delete_notice_not_author(client: AsyncClient, db_session, admin_user, test_user, other_user):
    board = await create_board(client, admin_user)
    created = (await post_notice(client, test_user, board["id"])).json()

    response = await client.delete(f"/notices/{created['id']}", headers=other_user["headers"])

    assert response.status_code == 403
    remaining = await db_session.scalar(
        select(func.count()).select_from(Notice).where(Notice.id == created["id"])
    )
    assert remaining == 1


@pytest.mark.asyncio
async def test_concurrent_join_conflict(client: AsyncClient, db_session, admin_user, test_user, monkeypatch):
    """A join that loses the race against an identical one gets a 409"""
    board = await create_board(client, admin_user)
    await client.post(f"/boards/{board['id']}/toggle-join", headers=test_user["headers"])

    async def not_yet_member(self, board_id, user_id):
        return False

    monkeypatch.setattr(BoardService, "_is_member", not_yet_member)
    response = await client.post(f"/boards/{board['id']}/toggle-join", headers=test_user["headers"])

    assert response.status_code == 409
    members = await db_session.scalar(
        select(func.count()).select_from(BoardMember).where(BoardMember.board_id == board["id"])
    )
    assert members == 1
