# taskcoach/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from ..extensions import db
from .enums import Role, enum_column


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # immutable after creation; uniqueness is what keeps admin stats keyed by username sound
    username = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = enum_column(Role, nullable=False, default=Role.USER, index=True)
    organization_id = db.Column(db.Integer, db.ForeignKey("organizations.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    organization = db.relationship("Organization", back_populates="users")
    tasks = db.relationship("Task", back_populates="owner", lazy="dynamic")

    # --- Auth helpers ---
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        # password material is never serialized
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role.value,
            "organizationId": self.organization_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
