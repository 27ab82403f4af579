from __future__ import annotations

import pytest
from flask import Flask

from src.geo_attendance.geo_attendance.container import wire
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.main import register_all
from tests.support import InMemoryActivity, InMemoryAttendance, InMemorySettings, InMemoryUsers, make_user


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        {
            1: make_user(1, Role.ADMIN, full_name="Ada Admin", department="Management"),
            2: make_user(2, Role.MANAGER, full_name="Mia Manager", department="Engineering"),
            3: make_user(3, Role.USER, full_name="Uri User", department="Engineering"),
            4: make_user(4, Role.USER, full_name="Sam Sales", department="Sales"),
            5: make_user(5, Role.USER, full_name="Ina Inactive", is_active=False),
        }
    )


@pytest.fixture
def attendance_repo(users) -> InMemoryAttendance:
    return InMemoryAttendance(users)


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def activity_repo() -> InMemoryActivity:
    return InMemoryActivity()


@pytest.fixture
def container(users, attendance_repo, settings_repo, activity_repo):
    return wire(
        users_repo=users,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        activity_repo=activity_repo,
    )


@pytest.fixture
def app(container) -> Flask:
    app = Flask(__name__)
    app.secret_key = "test-secret"
    app.config["TESTING"] = True
    register_all(app, container)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id: int) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id

    return _login
