"""Session, synchronization and form-mode core of the admin console."""

from .console import AppState, ConsoleController, Tab, View
from .errors import ConsoleError, CredentialsRejected, DraftInvalid, PermissionDenied, RemoteError

__all__ = [
    "AppState",
    "ConsoleController",
    "ConsoleError",
    "CredentialsRejected",
    "DraftInvalid",
    "PermissionDenied",
    "RemoteError",
    "Tab",
    "View",
]
