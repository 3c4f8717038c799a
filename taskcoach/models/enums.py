# taskcoach/models/enums.py
from enum import Enum

from ..errors import ValidationError
from ..extensions import db


class _Choice(str, Enum):
    """Closed set of string values, parsed strictly at every boundary."""

    @classmethod
    def parse(cls, value, field: str | None = None):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(f"Invalid {field or cls.__name__.lower()}: expected one of {allowed}") from None


class Role(_Choice):
    ADMIN = "admin"
    USER = "user"


class Priority(_Choice):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# high sorts first
PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class AIPotential(_Choice):
    PENDING = "pending"
    NONE = "none"
    SOME = "some"
    ADVANCED = "advanced"


# outcomes an analysis run may produce
ANALYZED_POTENTIALS = (AIPotential.NONE, AIPotential.SOME, AIPotential.ADVANCED)


def enum_column(enum_cls, **kw):
    # stored as plain strings (no native DB enum), returned as enum members
    return db.Column(
        db.Enum(
            enum_cls,
            native_enum=False,
            length=20,
            validate_strings=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        **kw,
    )
