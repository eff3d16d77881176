"""Enumerated values accepted by the remote service."""

import enum


class Role(str, enum.Enum):
    """Access tier of an account or session."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class WorkItemStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
