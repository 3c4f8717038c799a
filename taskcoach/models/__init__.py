from .enums import Role, Priority, AIPotential
from .organization import Organization
from .user import User
from .task import Task
from .session import UserSession
