# taskcoach/blueprints/tasks/routes.py
from flask import jsonify, request
from flask_login import login_required

from ...errors import ValidationError
from ...models.enums import Priority
from ...security import current_context
from ...services import task_service
from . import tasks_bp


# -----------------
# Helpers
# -----------------

def _body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


def _dump(tasks):
    return jsonify([t.to_dict() for t in tasks])


# -----------------
# List / Create
# -----------------

@tasks_bp.get("/tasks")
@login_required
def task_list():
    return _dump(task_service.list_tasks(current_context()))


@tasks_bp.post("/tasks")
@login_required
def task_new():
    data = _body()
    t = task_service.create_task(
        current_context(),
        data.get("description"),
        data.get("priority", Priority.MEDIUM.value),
    )
    return jsonify(t.to_dict()), 201


# -----------------
# Per-task mutations (owner only)
# -----------------

@tasks_bp.patch("/tasks/<int:task_id>/priority")
@login_required
def task_priority(task_id):
    t = task_service.update_priority(current_context(), task_id, _body().get("priority"))
    return jsonify(t.to_dict())


@tasks_bp.patch("/tasks/<int:task_id>/complete")
@login_required
def task_complete(task_id):
    t = task_service.set_completed(current_context(), task_id, _body().get("completed"))
    return jsonify(t.to_dict())


@tasks_bp.delete("/tasks/<int:task_id>")
@login_required
def task_delete(task_id):
    task_service.delete_task(current_context(), task_id)
    return "", 204


@tasks_bp.get("/tasks/<int:task_id>/ai-details")
@login_required
def task_ai_details(task_id):
    return jsonify({"details": task_service.explain_task(current_context(), task_id)})


# -----------------
# Analysis / Stats
# -----------------

@tasks_bp.post("/tasks/analyze")
@login_required
def task_analyze():
    result = task_service.analyze_pending(current_context())
    resp = _dump(result.tasks)
    if result.failed_ids:
        # tasks that stay pending after this run
        resp.headers["X-Analysis-Failed"] = ",".join(str(i) for i in result.failed_ids)
    return resp


@tasks_bp.get("/tasks/stats")
@login_required
def task_stats():
    return jsonify(task_service.stats(current_context()))
