import pytest

from adminconsole.errors import PermissionDenied
from adminconsole.models import Role
from adminconsole.permissions import ActionSet, actions_for, require


@pytest.mark.parametrize("role", list(Role))
def test_account_actions_only_for_admin(role):
    actions = actions_for(role)
    expected = role is Role.ADMIN
    assert actions.create_account is expected
    assert actions.edit_account is expected
    assert actions.delete_account is expected


@pytest.mark.parametrize("role", list(Role))
def test_work_item_actions_for_every_role(role):
    actions = actions_for(role)
    assert actions.create_work_item and actions.edit_work_item and actions.delete_work_item
    assert actions.assign_work_items is (role in (Role.ADMIN, Role.MANAGER))


def test_signed_out_gets_nothing():
    assert actions_for(None) == ActionSet()


def test_require_raises_with_role_name():
    with pytest.raises(PermissionDenied, match="role user may not delete account"):
        require(False, "delete account", Role.USER)
