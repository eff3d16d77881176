"""Sign-in, registration and the acting session."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

from .config import settings
from .errors import CredentialsRejected, DraftInvalid
from .models import Account, LoginForm, RegistrationDraft, Role, Session
from .notifications import NotificationCenter
from .store import ResourceStore

logger = logging.getLogger(__name__)

# usernames that sign in with an elevated role
RESERVED_ROLES: Dict[str, Role] = {
    "admin": Role.ADMIN,
    "manager": Role.MANAGER,
}


def derive_role(username: str) -> Role:
    return RESERVED_ROLES.get(username, Role.USER)


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> bool:
        ...


class AcceptAnyCredentials:
    """Verifier used while the service offers no authentication endpoint."""

    def verify(self, username: str, password: str) -> bool:
        return True


class SessionManager:
    """Holds the acting :class:`Session`.

    Signing in never contacts the service. Credential checking is delegated
    to a pluggable :class:`CredentialVerifier` and the role is derived from
    the username alone, so swapping in a real verifier leaves role gating
    untouched.
    """

    def __init__(
        self,
        accounts: ResourceStore[Account],
        notifications: NotificationCenter,
        verifier: Optional[CredentialVerifier] = None,
        account_id: Optional[int] = None,
        email_domain: Optional[str] = None,
    ) -> None:
        self._accounts = accounts
        self._notifications = notifications
        self._verifier = verifier if verifier is not None else AcceptAnyCredentials()
        self._account_id = settings.session_account_id if account_id is None else account_id
        self._email_domain = email_domain or settings.session_email_domain
        self._current: Optional[Session] = None

    @property
    def current(self) -> Optional[Session]:
        return self._current

    @property
    def role(self) -> Optional[Role]:
        return self._current.role if self._current else None

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    def login(self, username: str, password: str) -> Session:
        form = LoginForm(username=username, password=password)
        missing = form.missing_fields()
        if missing:
            raise DraftInvalid(missing)
        if not self._verifier.verify(form.username, form.password):
            logger.info("sign-in rejected for %s", form.username)
            raise CredentialsRejected(form.username)

        session = Session(
            id=self._account_id,
            username=form.username,
            email=f"{form.username}@{self._email_domain}",
            role=derive_role(form.username),
        )
        self._current = session
        logger.info("signed in %s as %s", session.username, session.role.value)
        self._notifications.success(f"Welcome, {session.username}!")
        return session

    async def register(self, draft: RegistrationDraft) -> bool:
        """Create a ``user`` account without signing in."""
        missing = draft.missing_fields()
        if missing:
            raise DraftInvalid(missing)
        return await self._accounts.create(
            draft.to_payload(),
            refresh=False,
            success_message="Registration successful, you can now sign in",
            error_message="Registration failed",
        )

    def logout(self) -> None:
        if self._current is None:
            return
        logger.info("signed out %s", self._current.username)
        self._current = None
        self._notifications.success("You have been signed out")
