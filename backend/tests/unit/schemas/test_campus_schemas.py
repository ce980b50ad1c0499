"""
Unit Tests for request schemas
"""
import pytest
from datetime import datetime
from pydantic import ValidationError

from campusnet.schemas.auth import UserLogin, UserRegister
from campusnet.schemas.board import BoardCreate
from campusnet.schemas.event import EventCreate


class TestUserRegister:

    def test_email_and_username_lowercased(self):
        data = UserRegister(name=" Ana ", email="ANA@X.com", password="secret1", username="AnaB")

        assert data.email == "ana@x.com"
        assert data.username == "anab"
        assert data.name == "Ana"

    @pytest.mark.parametrize("field,value", [
        ("email", "not-an-email"),
        ("password", ""),
        ("username", "   "),
        ("name", ""),
    ])
    def test_invalid_fields(self, field, value):
        payload = {"name": "Ana", "email": "ana@x.com", "password": "secret1", "username": "ana"}
        payload[field] = value

        with pytest.raises(ValidationError):
            UserRegister(**payload)

    def test_password_kept_verbatim(self):
        data = UserRegister(name="Ana", email="ana@x.com", password="  secret1  ", username="ana")

        assert data.password == "  secret1  "

    def test_username_has_no_character_restriction(self):
        data = UserRegister(name="Ana", email="ana@x.com", password="abc", username="Ana-Maria")

        assert data.username == "ana-maria"


class TestUserLogin:

    def test_identifier_trimmed_password_not(self):
        data = UserLogin(identifier="  ana ", password=" pw ")

        assert data.identifier == "ana"
        assert data.password == " pw "


class TestBoardCreate:

    @pytest.mark.parametrize("slug", ["cs", "cs-dept", "cs_dept_2025"])
    def test_valid_slugs(self, slug):
        assert BoardCreate(name="CS", slug=slug).slug == slug

    @pytest.mark.parametrize("slug", ["CS", "cs dept", "cs/dept", ""])
    def test_invalid_slugs(self, slug):
        with pytest.raises(ValidationError):
            BoardCreate(name="CS", slug=slug)


class TestEventCreate:

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            EventCreate(title="x", start_time="2025-03-10T16:00:00", end_time="2025-03-10T15:00:00")

    def test_aware_datetimes_normalized_to_naive_utc(self):
        event = EventCreate(
            title="x", start_time="2025-03-10T12:00:00+02:00", end_time="2025-03-10T13:00:00+02:00"
        )

        assert event.start_time == datetime(2025, 3, 10, 10, 0, 0)
        assert event.start_time.tzinfo is None
