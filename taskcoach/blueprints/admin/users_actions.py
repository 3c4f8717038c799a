from flask import jsonify, request
from flask_login import login_required
from ...errors import ValidationError
from ...security import roles_required, current_context
from ...services import admin_service
from . import admin_bp

# ---- Role / organization reassignment ----

@admin_bp.patch('/admin/users/<int:user_id>')
@login_required
@roles_required('admin')
def user_update(user_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Expected a JSON object')

    u = admin_service.update_user(
        current_context(),
        user_id,
        data.get('role'),
        data.get('organizationId', admin_service.KEEP),
    )
    return jsonify(u.to_dict())
