# taskcoach/services/admin_service.py
import logging

from ..extensions import db
from ..errors import NotFound, ValidationError
from ..models.enums import ANALYZED_POTENTIALS, Role
from ..models.organization import Organization
from ..models.task import Task
from ..models.user import User
from ..security import SessionContext, require_admin

log = logging.getLogger(__name__)

NO_ORGANIZATION = "No Organization"

# organizationId omitted from the request: leave it as is
KEEP = object()


def list_organizations(ctx: SessionContext) -> list[Organization]:
    require_admin(ctx)
    return Organization.query.order_by(Organization.name.asc(), Organization.id.asc()).all()


def create_organization(name: str) -> Organization:
    """Seed helper used by the CLI; organizations are never created from the API."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Organization name is required")
    org = Organization(name=name)
    db.session.add(org)
    db.session.commit()
    return org


def update_user(ctx: SessionContext, user_id, role, organization_id=KEEP) -> User:
    require_admin(ctx)
    role = Role.parse(role, "role")

    if organization_id is not KEEP and organization_id is not None:
        if isinstance(organization_id, bool) or not isinstance(organization_id, int):
            raise ValidationError("organizationId must be an integer or null")
        if db.session.get(Organization, organization_id) is None:
            raise ValidationError("Unknown organization")

    u = db.session.get(User, user_id)
    if u is None:
        raise NotFound("User not found")

    u.role = role
    if organization_id is not KEEP:
        u.organization_id = organization_id
    db.session.commit()
    log.info("Admin id=%s set user id=%s role=%s organization=%s",
             ctx.user_id, u.id, role.value, u.organization_id)
    return u


def global_stats(ctx: SessionContext) -> dict:
    """Completed-task statistics across all users and organizations.

    The per-user breakdown is keyed by username; that is only sound because
    usernames are unique in the store.
    """
    require_admin(ctx)

    rows = (db.session.query(
                Task.id,
                Task.description,
                Task.estimated_minutes,
                Task.estimated_minutes_with_ai,
                Task.ai_potential,
                Task.created_at,
                User.id.label("user_id"),
                User.username,
                User.role,
                User.organization_id,
                Organization.name.label("organization_name"),
            )
            .join(User, Task.user_id == User.id)
            .outerjoin(Organization, User.organization_id == Organization.id)
            .filter(Task.completed.is_(True))
            .order_by(Task.id.asc())
            .all())

    by_user: dict[str, dict] = {}
    by_potential = {p.value: 0 for p in ANALYZED_POTENTIALS}
    total_saved = 0
    tasks = []

    for r in rows:
        saved = 0
        if r.estimated_minutes is not None and r.estimated_minutes_with_ai is not None:
            saved = r.estimated_minutes - r.estimated_minutes_with_ai
        total_saved += saved

        entry = by_user.get(r.username)
        if entry is None:
            entry = by_user[r.username] = {
                "userId": r.user_id,
                "completed": 0,
                "timeSaved": 0,
                "organizationName": r.organization_name or NO_ORGANIZATION,
                "organizationId": r.organization_id,
                "role": r.role.value,
            }
        entry["completed"] += 1
        entry["timeSaved"] += saved

        # pending tasks are not bucketed
        if r.ai_potential.value in by_potential:
            by_potential[r.ai_potential.value] += 1

        tasks.append({
            "id": r.id,
            "description": r.description,
            "username": r.username,
            "userId": r.user_id,
            "userRole": r.role.value,
            "organizationId": r.organization_id,
            "organizationName": r.organization_name,
            "estimatedMinutes": r.estimated_minutes,
            "estimatedMinutesWithAI": r.estimated_minutes_with_ai,
            "aiPotential": r.ai_potential.value,
            "completedAt": r.created_at.isoformat() if r.created_at else None,
        })

    users_by_role = {role.value: 0 for role in Role}
    for entry in by_user.values():
        users_by_role[entry["role"]] += 1

    return {
        "stats": {
            "totalTasks": len(rows),
            "totalTimeSaved": total_saved,
            "tasksByUser": by_user,
            "tasksByAIPotential": by_potential,
            "usersByRole": users_by_role,
        },
        "tasks": tasks,
    }
