# taskcoach/security.py
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask_login import current_user

from .errors import Forbidden, Unauthenticated
from .models.enums import Role


@dataclass(frozen=True)
class SessionContext:
    """Authenticated identity handed explicitly to every service call."""

    user_id: int
    role: Role
    token: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def for_user(cls, user, token: str | None = None) -> "SessionContext":
        return cls(user_id=user.id, role=Role.parse(user.role), token=token)


def current_context() -> SessionContext:
    """Build the context for the logged-in user of the current request."""
    if not getattr(current_user, "is_authenticated", False):
        raise Unauthenticated()
    return SessionContext.for_user(current_user, getattr(current_user, "session_token", None))


def require_admin(ctx: SessionContext) -> None:
    if not ctx.is_admin:
        raise Forbidden()


def roles_required(*roles):
    """Route decorator; use below ``login_required``."""
    wanted = {Role.parse(r) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            ctx = current_context()
            if ctx.role not in wanted:
                raise Forbidden()
            return view(*args, **kwargs)
        return wrapped
    return decorator
