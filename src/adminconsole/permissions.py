"""Which console actions each role may see and use."""

from dataclasses import dataclass
from typing import Optional

from .errors import PermissionDenied
from .models import Role

ASSIGNING_ROLES = frozenset({Role.ADMIN, Role.MANAGER})


def can_manage_accounts(role: Optional[Role]) -> bool:
    """Creating, editing and deleting accounts is reserved for admins."""
    return role == Role.ADMIN


def can_manage_work_items(role: Optional[Role]) -> bool:
    return role is not None


def can_assign_work_items(role: Optional[Role]) -> bool:
    return role in ASSIGNING_ROLES


@dataclass(frozen=True)
class ActionSet:
    create_account: bool = False
    edit_account: bool = False
    delete_account: bool = False
    create_work_item: bool = False
    edit_work_item: bool = False
    delete_work_item: bool = False
    assign_work_items: bool = False


def actions_for(role: Optional[Role]) -> ActionSet:
    """Actions to expose for ``role``; ``None`` means nobody is signed in."""
    accounts = can_manage_accounts(role)
    work_items = can_manage_work_items(role)
    return ActionSet(
        create_account=accounts,
        edit_account=accounts,
        delete_account=accounts,
        create_work_item=work_items,
        edit_work_item=work_items,
        delete_work_item=work_items,
        assign_work_items=can_assign_work_items(role),
    )


def require(allowed: bool, action: str, role: Optional[Role]) -> None:
    if not allowed:
        raise PermissionDenied(action, role)
