# taskcoach/services/task_service.py
"""Task operations scoped to the owner in the session context.

Every per-task operation goes through ``_owned_task``: a task that does not
exist and a task owned by someone else are both ``NotFound``.
"""
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy import case

from ..extensions import db
from ..errors import AnnotationUnavailable, NotFound, ValidationError
from ..models.enums import AIPotential, Priority, PRIORITY_RANK
from ..models.task import Task
from ..security import SessionContext
from .annotation_service import AnnotationClient, get_annotator

log = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    tasks: list[Task]
    analyzed_ids: list[int] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)


def _ordered(query):
    rank = case(
        *[(Task.priority == p, r) for p, r in PRIORITY_RANK.items()],
        else_=len(PRIORITY_RANK),
    )
    return query.order_by(rank.asc(), Task.created_at.asc(), Task.id.asc())


def _owned_task(ctx: SessionContext, task_id) -> Task:
    t = Task.query.filter_by(id=task_id, user_id=ctx.user_id).first()
    if t is None:
        raise NotFound("Task not found")
    return t


def list_tasks(ctx: SessionContext) -> list[Task]:
    return _ordered(Task.query.filter_by(user_id=ctx.user_id)).all()


def create_task(ctx: SessionContext, description, priority=Priority.MEDIUM,
                annotator: AnnotationClient | None = None) -> Task:
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("Description is required")
    description = description.strip()
    priority = Priority.parse(priority, "priority")

    # creation is blocked on a successful time estimate
    estimate = (annotator or get_annotator()).estimate_time(description)

    t = Task(
        user_id=ctx.user_id,
        description=description,
        priority=priority,
        ai_potential=AIPotential.PENDING,
        estimated_minutes=estimate.manual_minutes,
        estimated_minutes_with_ai=estimate.ai_minutes,
        completed=False,
    )
    db.session.add(t)
    db.session.commit()
    log.info("Created task id=%s for user id=%s", t.id, ctx.user_id)
    return t


def update_priority(ctx: SessionContext, task_id, priority) -> Task:
    t = _owned_task(ctx, task_id)
    t.priority = Priority.parse(priority, "priority")
    db.session.commit()
    return t


def set_completed(ctx: SessionContext, task_id, completed) -> Task:
    t = _owned_task(ctx, task_id)
    if not isinstance(completed, bool):
        raise ValidationError("completed must be a boolean")
    t.completed = completed
    db.session.commit()
    return t


def delete_task(ctx: SessionContext, task_id) -> None:
    t = _owned_task(ctx, task_id)
    db.session.delete(t)
    db.session.commit()
    log.info("Deleted task id=%s for user id=%s", task_id, ctx.user_id)


def explain_task(ctx: SessionContext, task_id, annotator: AnnotationClient | None = None) -> str:
    t = _owned_task(ctx, task_id)
    return (annotator or get_annotator()).explain_implementation(t.description)


def _annotate(annotator: AnnotationClient, description: str):
    return annotator.analyze_potential(description), annotator.estimate_time(description)


def analyze_pending(ctx: SessionContext, annotator: AnnotationClient | None = None) -> AnalysisResult:
    """Annotate every pending task of the caller.

    Annotation calls for distinct tasks run concurrently; each task is then
    updated and committed on its own, so one failed annotation leaves that
    task ``pending`` without affecting its siblings.
    """
    annotator = annotator or get_annotator()
    pending = (Task.query
               .filter_by(user_id=ctx.user_id, ai_potential=AIPotential.PENDING)
               .order_by(Task.id.asc())
               .all())
    result = AnalysisResult(tasks=[])

    if pending:
        # plain values only cross into the worker threads
        jobs = [(t.id, t.description) for t in pending]
        workers = max(1, min(int(current_app.config.get("ANALYZE_MAX_WORKERS", 4)), len(jobs)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [(task_id, pool.submit(_annotate, annotator, desc)) for task_id, desc in jobs]

        for task_id, fut in futures:
            try:
                analysis, estimate = fut.result()
            except AnnotationUnavailable as e:
                log.warning("Annotation failed for task id=%s: %s", task_id, e)
                result.failed_ids.append(task_id)
                continue

            # owner re-checked in the update itself; a task deleted meanwhile is skipped
            updated = (Task.query
                       .filter_by(id=task_id, user_id=ctx.user_id, ai_potential=AIPotential.PENDING)
                       .update({
                           Task.ai_potential: analysis.potential,
                           Task.coaching_tips: analysis.coaching_tips,
                           Task.motivational_score: analysis.motivational_score,
                           Task.estimated_minutes: estimate.manual_minutes,
                           Task.estimated_minutes_with_ai: estimate.ai_minutes,
                       }, synchronize_session=False))
            db.session.commit()
            if updated:
                result.analyzed_ids.append(task_id)

        if result.failed_ids:
            log.warning("Analysis for user id=%s: %d analyzed, %d failed",
                        ctx.user_id, len(result.analyzed_ids), len(result.failed_ids))

    db.session.expire_all()
    result.tasks = list_tasks(ctx)
    return result


def stats(ctx: SessionContext) -> dict:
    done = Task.query.filter_by(user_id=ctx.user_id, completed=True).all()
    return {
        "totalTimeSaved": sum(t.time_saved for t in done),
        "totalTasksCompleted": len(done),
    }
