from flask import jsonify
from flask_login import login_required
from ...security import roles_required, current_context
from ...services import admin_service
from . import admin_bp


@admin_bp.get('/organizations')
@login_required
@roles_required('admin')
def organizations_list():
    orgs = admin_service.list_organizations(current_context())
    return jsonify([o.to_dict() for o in orgs])
