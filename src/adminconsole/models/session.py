from typing import ClassVar, Tuple

from pydantic import BaseModel, ConfigDict

from .base import ConsoleModel
from .enums import Role


class Session(BaseModel):
    """The identity acting in the console. Lives only in memory."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str
    first_name: str = "System"
    last_name: str = "User"
    role: Role = Role.USER


class LoginForm(ConsoleModel):
    required_fields: ClassVar[Tuple[str, ...]] = ("username", "password")

    username: str = ""
    password: str = ""
