from flask import jsonify
from flask_login import login_required
from ...security import roles_required, current_context
from ...services import admin_service
from . import admin_bp


@admin_bp.get('/admin/stats')
@login_required
@roles_required('admin')
def global_stats():
    return jsonify(admin_service.global_stats(current_context()))
