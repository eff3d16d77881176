"""Top-level controller wiring session, stores, forms and notifications."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, List, Optional, Set

from .dashboard import DashboardSummary, assignee_label, summarize
from .errors import ConsoleError, PermissionDenied
from .forms import AccountForm, FormController, WorkItemForm
from .models import Account, RegistrationDraft, Session, WorkItem
from .notifications import NotificationCenter
from .permissions import ActionSet, actions_for, can_manage_accounts, can_manage_work_items, require
from .remote import RemoteService
from .session import CredentialVerifier, SessionManager
from .store import Confirm, LoadingTracker, ResourceStore

logger = logging.getLogger(__name__)


class Tab(str, enum.Enum):
    DASHBOARD = "dashboard"
    ACCOUNTS = "users"
    WORK_ITEMS = "tasks"


class View(str, enum.Enum):
    LOGIN = "login"
    REGISTER = "register"
    CONSOLE = "console"


@dataclass
class AppState:
    view: View = View.LOGIN
    active_tab: Tab = Tab.DASHBOARD


def decline(prompt: str) -> bool:
    """Confirmation used when no front end supplied one."""
    return False


class ConsoleController:
    """Composes the console and routes operator actions.

    Signing in and switching tabs re-list both collections in the background
    (the dashboard and the work item list need both). Background syncs are
    tracked and cancelled at logout, and the stores themselves drop results
    that arrive after they were cleared.

    All methods must be called from the thread running the event loop.
    """

    def __init__(
        self,
        remote: Optional[RemoteService] = None,
        notifications: Optional[NotificationCenter] = None,
        verifier: Optional[CredentialVerifier] = None,
        confirm: Optional[Confirm] = None,
    ) -> None:
        self.remote = remote if remote is not None else RemoteService()
        self.notifications = notifications if notifications is not None else NotificationCenter()
        self.loading = LoadingTracker()
        self.accounts: ResourceStore[Account] = ResourceStore(
            "users", Account, self.remote, self.notifications, self.loading, label="account"
        )
        self.work_items: ResourceStore[WorkItem] = ResourceStore(
            "tasks",
            WorkItem,
            self.remote,
            self.notifications,
            self.loading,
            label="work item",
            plural="work items",
        )
        self.account_form = AccountForm(self.accounts)
        self.work_item_form = WorkItemForm(self.work_items)
        self.session = SessionManager(self.accounts, self.notifications, verifier=verifier)
        self.state = AppState()
        self.registration = RegistrationDraft()
        self._confirm: Confirm = confirm if confirm is not None else decline
        self._tasks: Set[asyncio.Task] = set()

    # -- session -----------------------------------------------------------

    @property
    def current_user(self) -> Optional[Session]:
        return self.session.current

    def show_register(self) -> None:
        self.state.view = View.REGISTER

    def show_login(self) -> None:
        self.state.view = View.LOGIN

    def update_registration(self, **changes: Any) -> RegistrationDraft:
        for name, value in changes.items():
            setattr(self.registration, name, value)
        return self.registration

    def login(self, username: str, password: str) -> Session:
        session = self.session.login(username, password)
        self.state.view = View.CONSOLE
        self.synchronize()
        return session

    async def register(self) -> bool:
        ok = await self.session.register(self.registration)
        if ok:
            self.registration = RegistrationDraft()
            self.state.view = View.LOGIN
        return ok

    def logout(self) -> None:
        self.cancel_pending()
        self.session.logout()
        self.accounts.clear()
        self.work_items.clear()
        self.account_form.cancel()
        self.work_item_form.cancel()
        self.state = AppState()

    def _require_session(self, action: str) -> Session:
        session = self.session.current
        if session is None:
            raise PermissionDenied(action, None)
        return session

    # -- synchronization ---------------------------------------------------

    def select_tab(self, tab: Tab | str) -> None:
        self.state.active_tab = Tab(tab)
        if self.session.is_authenticated:
            self.synchronize()

    def synchronize(self) -> Optional[Awaitable[List[Any]]]:
        """Re-list both collections in the background.

        Returns an awaitable resolving when both fetches have settled, or
        ``None`` when nobody is signed in or no event loop is running.
        """
        if not self.session.is_authenticated:
            return None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no running event loop, skipping sync")
            return None
        tasks = [self._spawn(self.accounts.list()), self._spawn(self.work_items.list())]
        return asyncio.gather(*tasks, return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait for every background sync started so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            logger.info("cancelled %d pending syncs", len(self._tasks))

    async def refresh_accounts(self) -> Optional[List[Account]]:
        if not self.session.is_authenticated:
            return None
        return await self.accounts.list()

    async def refresh_work_items(self) -> Optional[List[WorkItem]]:
        if not self.session.is_authenticated:
            return None
        return await self.work_items.list()

    async def health(self) -> Dict[str, Any]:
        return await self.remote.health()

    # -- derived views -----------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.loading.active

    def actions(self) -> ActionSet:
        return actions_for(self.session.role)

    def dashboard(self) -> DashboardSummary:
        return summarize(self.accounts.items, self.work_items.items)

    def assignee_label(self, work_item: WorkItem) -> str:
        return assignee_label(work_item, self.accounts.items)

    def tab_counts(self) -> Dict[Tab, int]:
        return {Tab.ACCOUNTS: len(self.accounts), Tab.WORK_ITEMS: len(self.work_items)}

    # -- forms and mutations -------------------------------------------------

    def _lookup(self, store: ResourceStore, entity_id: Any):
        entity = store.get(entity_id)
        if entity is None:
            raise ConsoleError(f"{store.label} {entity_id} is not loaded")
        return entity

    def toggle_account_create(self):
        return self.account_form.toggle_create(self.session.role)

    def edit_account(self, account_id: Any):
        return self.account_form.open_edit(self._lookup(self.accounts, account_id), self.session.role)

    def toggle_work_item_create(self):
        return self.work_item_form.toggle_create(self.session.role)

    def edit_work_item(self, work_item_id: Any):
        return self.work_item_form.open_edit(
            self._lookup(self.work_items, work_item_id), self.session.role
        )

    async def _submit(self, form: FormController) -> bool:
        session = self._require_session(f"submit {form.store.label}")
        return await form.submit(session)

    async def submit_account_form(self) -> bool:
        return await self._submit(self.account_form)

    async def submit_work_item_form(self) -> bool:
        return await self._submit(self.work_item_form)

    async def delete_account(self, account_id: Any) -> bool:
        role = self.session.role
        require(can_manage_accounts(role), "delete account", role)
        return await self.accounts.delete(account_id, self._confirm)

    async def delete_work_item(self, work_item_id: Any) -> bool:
        role = self.session.role
        require(can_manage_work_items(role), "delete work item", role)
        return await self.work_items.delete(work_item_id, self._confirm)

    def close(self) -> None:
        self.cancel_pending()
        self.notifications.close()
