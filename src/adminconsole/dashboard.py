"""Counts and breakdowns derived from the cached collections.

Everything here is recomputed from the collections on every call; nothing is
cached between reads.
"""

from collections import Counter
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field

from .models import Account, Role, WorkItem, WorkItemStatus

UNASSIGNED_LABEL = "Unassigned"


class DashboardSummary(BaseModel):
    """Figures shown on the dashboard tab."""

    total_accounts: int = Field(0, description="Number of cached accounts")
    total_work_items: int = Field(0, description="Number of cached work items")
    accounts_by_role: Dict[Role, int]
    work_items_by_status: Dict[WorkItemStatus, int]

    @property
    def in_progress(self) -> int:
        return self.work_items_by_status[WorkItemStatus.IN_PROGRESS]

    @property
    def completed(self) -> int:
        return self.work_items_by_status[WorkItemStatus.COMPLETED]


def count_by_role(accounts: Iterable[Account]) -> Dict[Role, int]:
    counts = Counter(account.role for account in accounts)
    return {role: counts.get(role, 0) for role in Role}


def count_by_status(work_items: Iterable[WorkItem]) -> Dict[WorkItemStatus, int]:
    counts = Counter(item.status for item in work_items)
    return {status: counts.get(status, 0) for status in WorkItemStatus}


def summarize(accounts: Iterable[Account], work_items: Iterable[WorkItem]) -> DashboardSummary:
    accounts = list(accounts)
    work_items = list(work_items)
    return DashboardSummary(
        total_accounts=len(accounts),
        total_work_items=len(work_items),
        accounts_by_role=count_by_role(accounts),
        work_items_by_status=count_by_status(work_items),
    )


def assignee_label(work_item: WorkItem, accounts: Iterable[Account]) -> str:
    """Username of the assignee, or the unassigned label when unknown."""
    assignee: Optional[int] = work_item.assigned_to
    if assignee is not None:
        for account in accounts:
            if account.id == assignee:
                return account.username
    return UNASSIGNED_LABEL
