from __future__ import annotations

import logging
import secrets
from abc import ABC, abstractmethod
from threading import RLock
from typing import Any, Dict, List, Optional

from .models import TodoRecord, UserRecord
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class UserRepository(ABC):
    """Storage contract for user accounts. Usernames are unique."""

    @abstractmethod
    def create(self, username: str, password_hash: str, name: str) -> Optional[UserRecord]:
        """Create and return a user, or None if the username is already taken."""

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[UserRecord]:
        """Return the user with this username, or None."""


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """
    Storage contract for todos. Every lookup and mutation is keyed by the
    (todo id, owner id) pair, so a todo owned by someone else behaves exactly
    like a missing one.
    """

    @abstractmethod
    def create(self, user_id: str, title: str) -> TodoRecord:
        """Create and return a new, not-done todo owned by user_id."""

    @abstractmethod
    def list_for_owner(self, user_id: str) -> List[TodoRecord]:
        """Return all todos owned by user_id in insertion order."""

    @abstractmethod
    def get(self, todo_id: str, user_id: str) -> Optional[TodoRecord]:
        """Return the owned todo, or None."""

    @abstractmethod
    def update(self, todo_id: str, user_id: str, changes: Dict[str, Any]) -> Optional[TodoRecord]:
        """Apply title/done changes to an owned todo. Return the updated todo or None."""

    @abstractmethod
    def delete(self, todo_id: str, user_id: str) -> bool:
        """Delete an owned todo. Return True if deleted, False if not found."""


# PUBLIC_INTERFACE
class Store(ABC):
    """
    A handle on one storage backend. The application opens it at startup,
    passes it to handlers and closes it at shutdown.
    """

    name: str = ""
    users: UserRepository
    todos: TodoRepository

    @abstractmethod
    def open(self) -> None:
        """Acquire connections and prepare collections/indexes."""

    @abstractmethod
    def close(self) -> None:
        """Release connections."""


def _new_id() -> str:
    # Same shape as a Mongo ObjectId: 24 hex chars
    return secrets.token_hex(12)


class InMemoryUserRepository(UserRepository):
    def __init__(self, lock: RLock) -> None:
        self._lock = lock
        self._by_username: Dict[str, UserRecord] = {}

    def create(self, username: str, password_hash: str, name: str) -> Optional[UserRecord]:
        with self._lock:
            if username in self._by_username:
                return None
            user = UserRecord(id=_new_id(), username=username, password_hash=password_hash, name=name)
            self._by_username[username] = user
            return user

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        with self._lock:
            return self._by_username.get(username)


class InMemoryTodoRepository(TodoRepository):
    def __init__(self, lock: RLock) -> None:
        self._lock = lock
        self._items: Dict[str, TodoRecord] = {}

    def _owned(self, todo_id: str, user_id: str) -> Optional[TodoRecord]:
        item = self._items.get(todo_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    def create(self, user_id: str, title: str) -> TodoRecord:
        todo = TodoRecord(id=_new_id(), title=title, user_id=user_id, done=False)
        with self._lock:
            self._items[todo.id] = todo
        return todo

    def list_for_owner(self, user_id: str) -> List[TodoRecord]:
        with self._lock:
            return [t for t in self._items.values() if t.user_id == user_id]

    def get(self, todo_id: str, user_id: str) -> Optional[TodoRecord]:
        with self._lock:
            return self._owned(todo_id, user_id)

    def update(self, todo_id: str, user_id: str, changes: Dict[str, Any]) -> Optional[TodoRecord]:
        with self._lock:
            existing = self._owned(todo_id, user_id)
            if existing is None:
                return None
            updated = existing.with_changes(changes)
            self._items[todo_id] = updated
            return updated

    def delete(self, todo_id: str, user_id: str) -> bool:
        with self._lock:
            if self._owned(todo_id, user_id) is None:
                return False
            del self._items[todo_id]
            return True


class InMemoryStore(Store):
    """
    Thread-safe in-memory store suitable for testing and default runtime.
    Records are immutable, so returned values can be shared safely.
    """

    name = "memory"

    def __init__(self) -> None:
        lock = RLock()
        self.users = InMemoryUserRepository(lock)
        self.todos = InMemoryTodoRepository(lock)

    def open(self) -> None:
        logger.info("using in-memory store")

    def close(self) -> None:
        pass


# PUBLIC_INTERFACE
def get_store(settings: Optional[Settings] = None) -> Store:
    """
    Factory to return an unopened store for the configured backend.
    - memory: InMemoryStore
    - mongo: MongoStore (mongoengine)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "mongo":
        from .db import MongoStore

        return MongoStore(settings.mongo_url, settings.mongo_db)
    return InMemoryStore()
