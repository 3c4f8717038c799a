# taskcoach/services/credential_service.py
import logging

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import DuplicateUsername, NotFound, ValidationError
from ..models.enums import Role
from ..models.user import User

log = logging.getLogger(__name__)

USERNAME_MIN, USERNAME_MAX = 3, 255
PASSWORD_MIN = 6


def _clean_username(username) -> str:
    if not isinstance(username, str):
        raise ValidationError("Username is required")
    username = username.strip()
    if not (USERNAME_MIN <= len(username) <= USERNAME_MAX):
        raise ValidationError(f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters")
    return username


def get_by_username(username: str) -> User | None:
    return User.query.filter_by(username=username).first()


def register(username, password) -> User:
    """Create a user with role ``user``; the password is stored salted and hashed."""
    username = _clean_username(username)
    if not isinstance(password, str) or len(password) < PASSWORD_MIN:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN} characters")

    if get_by_username(username):
        raise DuplicateUsername()

    user = User(username=username, role=Role.USER)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race against a concurrent registration; the unique index decides
        db.session.rollback()
        raise DuplicateUsername()

    log.info("Registered user id=%s username=%s", user.id, user.username)
    return user


def verify(username, password) -> bool:
    """Check a password for ``username``.

    Raises NotFound for an unknown username; callers that face the client
    must fold that into the same error as a bad password.
    """
    user = get_by_username((username or "").strip()) if isinstance(username, str) else None
    if user is None:
        raise NotFound("User not found")
    return isinstance(password, str) and user.check_password(password)
