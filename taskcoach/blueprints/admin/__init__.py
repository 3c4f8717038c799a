from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

# Import route modules to register their endpoints
from . import organizations      # noqa: E402,F401
from . import users_actions      # noqa: E402,F401
from . import stats              # noqa: E402,F401
