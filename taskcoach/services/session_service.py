# taskcoach/services/session_service.py
"""Server-side sessions.

A session is a row binding an opaque token to a user id. It lives for a
fixed window from creation (``SESSION_LIFETIME_HOURS``) and is never
renewed; logout deletes the row.
"""
import logging
import secrets
from datetime import datetime, timedelta

from flask import current_app

from ..extensions import db
from ..errors import InvalidCredentials, NotFound, Unauthenticated
from ..models.session import UserSession
from ..models.user import User
from . import credential_service

log = logging.getLogger(__name__)

# key under which the opaque token rides in the signed Flask session cookie
SESSION_KEY = "session_token"


def _lifetime() -> timedelta:
    return timedelta(hours=current_app.config.get("SESSION_LIFETIME_HOURS", 24))


def open_session(user: User) -> str:
    now = datetime.utcnow()
    token = secrets.token_urlsafe(32)
    db.session.add(UserSession(token=token, user_id=user.id, created_at=now, expires_at=now + _lifetime()))
    db.session.commit()
    return token


def login(username, password) -> tuple[User, str]:
    """Verify credentials and open a session; returns the user and its token."""
    try:
        ok = credential_service.verify(username, password)
    except NotFound:
        ok = False
    if not ok:
        log.info("Login failed for username=%r", username)
        raise InvalidCredentials()

    user = credential_service.get_by_username(username.strip())
    token = open_session(user)
    log.info("Login succeeded for user id=%s", user.id)
    return user, token


def current_user(token) -> User:
    if not token:
        raise Unauthenticated()

    sess = db.session.get(UserSession, token)
    if sess is None:
        raise Unauthenticated()

    if sess.is_expired():
        db.session.delete(sess)
        db.session.commit()
        raise Unauthenticated("Session expired")

    user = db.session.get(User, sess.user_id)
    if user is None:
        raise Unauthenticated()
    return user


def logout(token) -> None:
    """Destroy the session; unknown or missing tokens are a no-op."""
    if not token:
        return
    deleted = UserSession.query.filter_by(token=token).delete(synchronize_session=False)
    db.session.commit()
    if deleted:
        log.info("Session closed")


def purge_expired(now: datetime | None = None) -> int:
    now = now or datetime.utcnow()
    n = UserSession.query.filter(UserSession.expires_at <= now).delete(synchronize_session=False)
    db.session.commit()
    return n
