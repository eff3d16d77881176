from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import field_validator

from .base import ConsoleModel
from .enums import Role


class Account(ConsoleModel):
    """An account as returned by ``GET /users``."""

    required_fields: ClassVar[Tuple[str, ...]] = ("username", "email")

    id: int
    username: str
    email: str
    first_name: str = ""
    last_name: str = ""
    role: Role = Role.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def blank_names(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_payload(self) -> Dict[str, Any]:
        """Full record body for ``PUT /users/{id}``."""
        return self.model_dump(mode="json")


class AccountDraft(ConsoleModel):
    """Blank template used by the account creation form."""

    required_fields: ClassVar[Tuple[str, ...]] = ("username", "email")

    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: Role = Role.USER

    def to_payload(self) -> Dict[str, Any]:
        """Body for ``POST /users``."""
        return self.model_dump(mode="json")


class RegistrationDraft(ConsoleModel):
    """Self-service registration form.

    The password is collected for form parity only and is never sent.
    """

    required_fields: ClassVar[Tuple[str, ...]] = ("username", "email", "password")

    username: str = ""
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude={"password"})
        payload["role"] = Role.USER.value
        return payload
