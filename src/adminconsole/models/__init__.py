from .account import Account, AccountDraft, RegistrationDraft
from .enums import Priority, Role, WorkItemStatus
from .session import LoginForm, Session
from .work_item import WorkItem, WorkItemDraft

__all__ = [
    "Account",
    "AccountDraft",
    "LoginForm",
    "Priority",
    "RegistrationDraft",
    "Role",
    "Session",
    "WorkItem",
    "WorkItemDraft",
    "WorkItemStatus",
]
