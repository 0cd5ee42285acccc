from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class UserRecord:
    """
    A stored user account.

    Fields:
    - id: Store-assigned identifier (string)
    - username: Unique login name, email-shaped (validated by the signup schema)
    - password_hash: bcrypt hash of the password
    - name: Display name
    """

    id: str
    username: str
    password_hash: str
    name: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("user id is required")
        if not self.username or "@" not in self.username:
            raise ValueError("username must be an email address")
        if not self.password_hash:
            raise ValueError("password hash is required")
        if not self.name:
            raise ValueError("name is required")


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class TodoRecord:
    """
    A stored todo item owned by exactly one user.

    Fields:
    - id: Store-assigned identifier (string)
    - title: Title text
    - done: Completion flag
    - user_id: Owner id copied from the authenticated caller
    """

    id: str
    title: str
    user_id: str
    done: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("todo id is required")
        if not isinstance(self.title, str):
            raise ValueError("title must be a string")
        if not isinstance(self.done, bool):
            raise ValueError("done must be a boolean")
        if not self.user_id:
            raise ValueError("owner id is required")

    def with_changes(self, changes: Dict[str, Any]) -> "TodoRecord":
        """Return a copy with the given title/done values applied."""
        allowed = {k: v for k, v in changes.items() if k in ("title", "done")}
        return replace(self, **allowed)
