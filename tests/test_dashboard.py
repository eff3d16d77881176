from adminconsole.dashboard import UNASSIGNED_LABEL, assignee_label, summarize
from adminconsole.models import Account, Role, WorkItem, WorkItemStatus


def make_accounts():
    return [
        Account(id=1, username="root", email="r@x", role="admin"),
        Account(id=2, username="mia", email="m@x", role="manager"),
        Account(id=3, username="ian", email="i@x"),
        Account(id=4, username="ann", email="a@x"),
    ]


def make_work_items():
    return [
        WorkItem(id=10, title="a", status="pending", assigned_to=3),
        WorkItem(id=11, title="b", status="in_progress", assigned_to=99),
        WorkItem(id=12, title="c", status="completed"),
        WorkItem(id=13, title="d", status="completed"),
    ]


def test_partitions_sum_to_totals():
    summary = summarize(make_accounts(), make_work_items())

    assert summary.total_accounts == 4
    assert summary.total_work_items == 4
    assert sum(summary.accounts_by_role.values()) == summary.total_accounts
    assert sum(summary.work_items_by_status.values()) == summary.total_work_items
    assert summary.accounts_by_role[Role.USER] == 2
    assert summary.in_progress == 1
    assert summary.completed == 2


def test_empty_collections_are_zero_filled():
    summary = summarize([], [])
    assert summary.total_accounts == summary.total_work_items == 0
    assert summary.accounts_by_role == {role: 0 for role in Role}
    assert summary.work_items_by_status == {status: 0 for status in WorkItemStatus}


def test_assignee_label():
    accounts = make_accounts()
    items = make_work_items()
    assert assignee_label(items[0], accounts) == "ian"
    assert assignee_label(items[1], accounts) == UNASSIGNED_LABEL
    assert assignee_label(items[2], accounts) == UNASSIGNED_LABEL
