from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import Field, field_validator

from ..config import settings
from .base import ConsoleModel
from .enums import Priority, WorkItemStatus


class WorkItem(ConsoleModel):
    """A work item as returned by ``GET /tasks``.

    The service reports an unassigned item with ``assigned_to == 0``; it is
    read as ``None`` here.
    """

    required_fields: ClassVar[Tuple[str, ...]] = ("title",)

    id: int
    title: str
    description: str = ""
    status: WorkItemStatus = WorkItemStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[int] = None
    project_id: int = Field(default_factory=lambda: settings.default_project_id)
    created_by: Optional[int] = None
    due_date: Optional[datetime] = None
    estimated_hours: float = 0.0
    actual_hours: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("assigned_to", "created_by", mode="before")
    @classmethod
    def zero_is_unset(cls, value: Any) -> Any:
        if value in (0, "", None):
            return None
        return value

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_payload(self) -> Dict[str, Any]:
        """Full record body for ``PUT /tasks/{id}``."""
        return self.model_dump(mode="json")


class WorkItemDraft(ConsoleModel):
    """Blank template used by the work item creation form."""

    required_fields: ClassVar[Tuple[str, ...]] = ("title",)

    title: str = ""
    description: str = ""
    status: WorkItemStatus = WorkItemStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[int] = None
    project_id: int = Field(default_factory=lambda: settings.default_project_id)

    @field_validator("assigned_to", mode="before")
    @classmethod
    def zero_is_unset(cls, value: Any) -> Any:
        if value in (0, "", None):
            return None
        return value

    def to_payload(self, created_by: int) -> Dict[str, Any]:
        """Body for ``POST /tasks`` attributed to ``created_by``."""
        payload = self.model_dump(mode="json")
        payload["created_by"] = created_by
        return payload
