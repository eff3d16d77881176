"""Exceptions raised by the console core."""

from typing import Iterable


class ConsoleError(Exception):
    """Base class for console errors."""


class RemoteError(ConsoleError):
    """A call to the remote service failed.

    Connectivity failures, non-success statuses and malformed bodies are all
    reported the same way; callers never branch on the cause.
    """

    def __init__(self, operation: str, resource: str, detail: str = "") -> None:
        self.operation = operation
        self.resource = resource
        self.detail = detail
        message = f"{operation} {resource} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DraftInvalid(ConsoleError):
    """A draft is missing required fields and cannot be submitted."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__("missing required fields: " + ", ".join(self.fields))


class PermissionDenied(ConsoleError):
    """The acting role may not perform the requested action."""

    def __init__(self, action: str, role: object) -> None:
        self.action = action
        self.role = role
        super().__init__(f"role {getattr(role, 'value', role)} may not {action}")


class CredentialsRejected(ConsoleError):
    """The configured credential verifier refused the sign-in."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"credentials rejected for {username}")
