# taskcoach/blueprints/auth/routes.py
from flask import jsonify, session
from flask_login import login_required, current_user

from ...models.user import User
from ...services import credential_service, session_service
from . import auth_bp
from .forms import RegisterForm, LoginForm

# -----------------
# Utilities
# -----------------

def _start_session(token: str) -> None:
    # drop whatever session this browser held before
    session_service.logout(session.get(session_service.SESSION_KEY))
    session.clear()
    session[session_service.SESSION_KEY] = token
    session.permanent = True


def _redirect_url(user: User) -> str:
    # Route by role
    return "/admin" if user.is_admin else "/"

# -----------------
# Register
# -----------------

@auth_bp.post("/register")
def register():
    form = RegisterForm()
    form.validate_or_raise()

    user = credential_service.register(form.username.data, form.password.data)
    _start_session(session_service.open_session(user))
    return jsonify(user.to_dict()), 200


# -----------------
# Login / Logout
# -----------------

@auth_bp.post("/login")
def login():
    form = LoginForm()
    form.validate_or_raise()

    user, token = session_service.login(form.username.data, form.password.data)
    _start_session(token)
    return jsonify({**user.to_dict(), "redirectUrl": _redirect_url(user)}), 200


@auth_bp.post("/logout")
def logout():
    # idempotent: logging out without a session still succeeds
    session_service.logout(session.get(session_service.SESSION_KEY))
    session.clear()
    return jsonify({"message": "Logged out"}), 200


@auth_bp.get("/user")
@login_required
def me():
    return jsonify(current_user.to_dict())
