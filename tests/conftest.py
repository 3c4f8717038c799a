# tests/conftest.py

from __future__ import annotations

import pytest

from taskcoach import create_app
from taskcoach.config import Config
from taskcoach.extensions import db
from taskcoach.models.enums import Role
from taskcoach.models.user import User

from .fakes import FakeAnnotator


class TestConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_COOKIE_SECURE = False
    SESSION_LIFETIME_HOURS = 24
    ANNOTATION_API_KEY = None
    ANALYZE_MAX_WORKERS = 2
    LOG_DIR = None
    LOG_LEVEL = "WARNING"
    SENTRY_DSN = ""


@pytest.fixture()
def annotator() -> FakeAnnotator:
    return FakeAnnotator()


@pytest.fixture()
def app(annotator: FakeAnnotator):
    """
    App wired with an in-memory database and the fake annotator.

    No app context stays pushed while tests run: every test-client request
    must get a fresh context, otherwise Flask-Login would reuse the user
    cached on ``g`` by an earlier request.
    """
    app = create_app(TestConfig, annotator=annotator)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def app_ctx(app):
    with app.app_context():
        yield app


def register(client, username: str, password: str = "secret1"):
    return client.post("/api/register", json={"username": username, "password": password})


def login(client, username: str, password: str = "secret1"):
    return client.post("/api/login", json={"username": username, "password": password})


def promote(app, username: str, organization_id: int | None = None) -> None:
    with app.app_context():
        u = User.query.filter_by(username=username).one()
        u.role = Role.ADMIN
        u.organization_id = organization_id
        db.session.commit()


@pytest.fixture()
def user_client(app):
    """Client logged in as a fresh regular user ``alice``."""
    c = app.test_client()
    assert register(c, "alice").status_code == 200
    return c


@pytest.fixture()
def admin_client(app):
    """Client logged in as ``root`` after promotion to admin."""
    c = app.test_client()
    assert register(c, "root", "rootpass").status_code == 200
    promote(app, "root")
    return c
