"""Create/edit form state for one entity type."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from .config import settings
from .errors import ConsoleError, DraftInvalid, PermissionDenied
from .models import Account, AccountDraft, Role, Session, WorkItem, WorkItemDraft
from .models.base import ConsoleModel
from .permissions import can_assign_work_items, can_manage_accounts, can_manage_work_items, require
from .store import ResourceStore

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=ConsoleModel)


class FormMode(str, enum.Enum):
    CLOSED = "closed"
    CREATING = "creating"
    EDITING = "editing"


@dataclass(frozen=True)
class FormState:
    mode: FormMode = FormMode.CLOSED
    entity_id: Optional[int] = None


class FormController(ABC, Generic[E]):
    """State machine ``Closed -> Creating | Editing(id) -> Closed``.

    Only one draft exists at a time: opening a create form while an edit is
    open (or the reverse) discards the open draft and replaces it.
    """

    def __init__(self, store: ResourceStore[E]) -> None:
        self.store = store
        self._state = FormState()
        self._draft: Optional[ConsoleModel] = None
        self._role: Optional[Role] = None

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def mode(self) -> FormMode:
        return self._state.mode

    @property
    def draft(self) -> Optional[ConsoleModel]:
        return self._draft

    @property
    def is_open(self) -> bool:
        return self._state.mode is not FormMode.CLOSED

    @abstractmethod
    def can_create(self, role: Optional[Role]) -> bool:
        ...

    @abstractmethod
    def can_edit(self, role: Optional[Role]) -> bool:
        ...

    @abstractmethod
    def blank_draft(self) -> ConsoleModel:
        ...

    def create_payload(self, draft: Any, session: Session) -> Dict[str, Any]:
        return draft.to_payload()

    def update_payload(self, draft: Any, session: Session) -> Dict[str, Any]:
        return draft.to_payload()

    def check_change(self, name: str) -> None:
        """Hook rejecting edits to fields the opening role may not touch."""

    def open_create(self, role: Optional[Role]) -> ConsoleModel:
        require(self.can_create(role), f"create {self.store.label}", role)
        if self._state.mode is FormMode.EDITING:
            logger.debug("replacing %s edit draft with a create draft", self.store.label)
        self._draft = self.blank_draft()
        self._role = role
        self._state = FormState(FormMode.CREATING)
        return self._draft

    def toggle_create(self, role: Optional[Role]) -> Optional[ConsoleModel]:
        """Open the create form, or close it when it is already showing."""
        if self._state.mode is FormMode.CREATING:
            self.cancel()
            return None
        return self.open_create(role)

    def open_edit(self, entity: E, role: Optional[Role]) -> ConsoleModel:
        require(self.can_edit(role), f"edit {self.store.label}", role)
        if self._state.mode is FormMode.CREATING:
            logger.debug("replacing %s create draft with an edit draft", self.store.label)
        self._draft = entity.model_copy()
        self._role = role
        self._state = FormState(FormMode.EDITING, entity.id)
        return self._draft

    def update_draft(self, **changes: Any) -> ConsoleModel:
        """Apply ``changes`` to the draft as one validated update.

        Nothing is written when any change is rejected.
        """
        draft = self._draft
        if draft is None:
            raise ConsoleError(f"no {self.store.label} form is open")
        for name in changes:
            if name not in type(draft).model_fields:
                raise ConsoleError(f"{self.store.label} has no field {name}")
            self.check_change(name)
        self._draft = type(draft).model_validate({**draft.model_dump(), **changes})
        return self._draft

    def cancel(self) -> None:
        self._draft = None
        self._role = None
        self._state = FormState()

    async def submit(self, session: Session) -> bool:
        """Send the draft; the form closes only when the service accepts it.

        Raises :class:`DraftInvalid` without contacting the service when a
        required field is blank.
        """

        draft = self._draft
        if draft is None:
            raise ConsoleError(f"no {self.store.label} form is open")
        missing = draft.missing_fields()
        if missing:
            raise DraftInvalid(missing)

        state = self._state
        if state.mode is FormMode.CREATING:
            require(self.can_create(session.role), f"create {self.store.label}", session.role)
            ok = await self.store.create(self.create_payload(draft, session))
        else:
            require(self.can_edit(session.role), f"edit {self.store.label}", session.role)
            ok = await self.store.update(state.entity_id, self.update_payload(draft, session))

        # the operator may have cancelled or reopened the form meanwhile
        if ok and self._draft is draft:
            self.cancel()
        return ok


class AccountForm(FormController[Account]):
    def can_create(self, role: Optional[Role]) -> bool:
        return can_manage_accounts(role)

    def can_edit(self, role: Optional[Role]) -> bool:
        return can_manage_accounts(role)

    def blank_draft(self) -> AccountDraft:
        return AccountDraft()


class WorkItemForm(FormController[WorkItem]):
    """Work item form.

    New items are attributed to the acting session and assigned to it unless
    an assignee was picked; roles that cannot assign always get themselves.
    """

    def __init__(self, store: ResourceStore[WorkItem], default_project_id: Optional[int] = None) -> None:
        super().__init__(store)
        self.default_project_id = (
            settings.default_project_id if default_project_id is None else default_project_id
        )

    def can_create(self, role: Optional[Role]) -> bool:
        return can_manage_work_items(role)

    def can_edit(self, role: Optional[Role]) -> bool:
        return can_manage_work_items(role)

    def blank_draft(self) -> WorkItemDraft:
        return WorkItemDraft(project_id=self.default_project_id)

    def check_change(self, name: str) -> None:
        if name == "assigned_to" and not can_assign_work_items(self._role):
            raise PermissionDenied("assign work items", self._role)

    def create_payload(self, draft: WorkItemDraft, session: Session) -> Dict[str, Any]:
        payload = draft.to_payload(created_by=session.id)
        if draft.assigned_to is None or not can_assign_work_items(session.role):
            payload["assigned_to"] = session.id
        return payload
