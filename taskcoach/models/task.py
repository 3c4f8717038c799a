# taskcoach/models/task.py
from datetime import datetime
from ..extensions import db
from .enums import Priority, AIPotential, enum_column

class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    description = db.Column(db.Text, nullable=False)
    priority = enum_column(Priority, nullable=False, default=Priority.MEDIUM, index=True)
    ai_potential = enum_column(AIPotential, nullable=False, default=AIPotential.PENDING, index=True)

    estimated_minutes = db.Column(db.Integer)
    # only meaningful once annotation has run; null when AI cannot help
    estimated_minutes_with_ai = db.Column(db.Integer)
    coaching_tips = db.Column(db.Text)
    motivational_score = db.Column(db.Integer)  # 1..100

    completed = db.Column(db.Boolean, nullable=False, default=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    owner = db.relationship("User", back_populates="tasks")

    __table_args__ = (
        db.CheckConstraint("estimated_minutes IS NULL OR estimated_minutes >= 0", name="ck_tasks_estimated_minutes"),
        db.CheckConstraint(
            "estimated_minutes_with_ai IS NULL OR estimated_minutes_with_ai >= 0",
            name="ck_tasks_estimated_minutes_with_ai",
        ),
        db.CheckConstraint(
            "motivational_score IS NULL OR motivational_score BETWEEN 1 AND 100",
            name="ck_tasks_motivational_score",
        ),
    )

    @property
    def time_saved(self) -> int:
        """Minutes saved with AI; 0 unless both estimates are present."""
        if self.estimated_minutes is None or self.estimated_minutes_with_ai is None:
            return 0
        return self.estimated_minutes - self.estimated_minutes_with_ai

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "description": self.description,
            "priority": self.priority.value,
            "aiPotential": self.ai_potential.value,
            "estimatedMinutes": self.estimated_minutes,
            "estimatedMinutesWithAI": self.estimated_minutes_with_ai,
            "coachingTips": self.coaching_tips,
            "motivationalScore": self.motivational_score,
            "completed": bool(self.completed),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
