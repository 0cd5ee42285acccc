import uuid

import pytest

from todo_api.models import TodoRecord, UserRecord
from todo_api.repositories import InMemoryStore, get_store
from todo_api.settings import Settings


@pytest.fixture(params=["memory", "mongo"])
def backend(request):
    """An opened store for each backend; Mongo runs against mongomock."""
    if request.param == "memory":
        s = InMemoryStore()
    else:
        mongomock = pytest.importorskip("mongomock")
        from todo_api.db import MongoStore

        s = MongoStore(
            "mongodb://localhost",
            f"todo_test_{uuid.uuid4().hex}",
            mongo_client_class=mongomock.MongoClient,
        )
    s.open()
    try:
        yield s
    finally:
        s.close()


class TestUserRepository:
    def test_create_and_find(self, backend):
        user = backend.users.create("test@example.com", "hash", "Test User")
        assert isinstance(user, UserRecord)
        assert user.id

        found = backend.users.get_by_username("test@example.com")
        assert found == user

    def test_unknown_username(self, backend):
        assert backend.users.get_by_username("nonexistent@example.com") is None

    def test_duplicate_username_returns_none(self, backend):
        assert backend.users.create("dup@example.com", "hash", "First") is not None
        assert backend.users.create("dup@example.com", "hash", "Second") is None
        assert backend.users.get_by_username("dup@example.com").name == "First"


class TestTodoRepository:
    def test_create_defaults_to_not_done(self, backend):
        todo = backend.todos.create("owner-1", "Test Todo")
        assert isinstance(todo, TodoRecord)
        assert (todo.title, todo.done, todo.user_id) == ("Test Todo", False, "owner-1")

    def test_list_is_scoped_and_ordered(self, backend):
        backend.todos.create("owner-1", "a")
        backend.todos.create("owner-2", "b")
        backend.todos.create("owner-1", "c")
        assert [t.title for t in backend.todos.list_for_owner("owner-1")] == ["a", "c"]
        assert [t.title for t in backend.todos.list_for_owner("owner-2")] == ["b"]
        assert backend.todos.list_for_owner("owner-3") == []

    def test_get_requires_owner(self, backend):
        todo = backend.todos.create("owner-1", "mine")
        assert backend.todos.get(todo.id, "owner-1") == todo
        assert backend.todos.get(todo.id, "owner-2") is None

    def test_update_applies_given_fields(self, backend):
        todo = backend.todos.create("owner-1", "before")
        updated = backend.todos.update(todo.id, "owner-1", {"done": True})
        assert (updated.title, updated.done) == ("before", True)

        updated = backend.todos.update(todo.id, "owner-1", {"title": "after"})
        assert (updated.title, updated.done) == ("after", True)
        assert backend.todos.get(todo.id, "owner-1") == updated

    def test_update_with_no_changes_returns_current(self, backend):
        todo = backend.todos.create("owner-1", "same")
        assert backend.todos.update(todo.id, "owner-1", {}) == todo

    def test_update_by_other_owner_is_refused(self, backend):
        todo = backend.todos.create("owner-1", "mine")
        assert backend.todos.update(todo.id, "owner-2", {"done": True}) is None
        assert backend.todos.get(todo.id, "owner-1").done is False

    def test_delete(self, backend):
        todo = backend.todos.create("owner-1", "gone soon")
        assert backend.todos.delete(todo.id, "owner-2") is False
        assert backend.todos.delete(todo.id, "owner-1") is True
        assert backend.todos.get(todo.id, "owner-1") is None
        assert backend.todos.delete(todo.id, "owner-1") is False

    @pytest.mark.parametrize("todo_id", ["abc", "ffffffffffffffffffffffff"])
    def test_unknown_ids(self, backend, todo_id):
        assert backend.todos.get(todo_id, "owner-1") is None
        assert backend.todos.update(todo_id, "owner-1", {"done": True}) is None
        assert backend.todos.delete(todo_id, "owner-1") is False


class TestRecords:
    def test_user_record_validates(self):
        with pytest.raises(ValueError):
            UserRecord(id="1", username="not-an-email", password_hash="h", name="n")
        with pytest.raises(ValueError):
            UserRecord(id="1", username="a@b.co", password_hash="", name="n")

    def test_todo_record_validates(self):
        with pytest.raises(ValueError):
            TodoRecord(id="1", title="t", user_id="")
        with pytest.raises(ValueError):
            TodoRecord(id="1", title="t", user_id="u", done="yes")

    def test_with_changes_ignores_unknown_fields(self):
        todo = TodoRecord(id="1", title="t", user_id="u")
        changed = todo.with_changes({"done": True, "user_id": "intruder"})
        assert (changed.done, changed.user_id) == (True, "u")


def test_get_store_selects_backend():
    assert isinstance(get_store(Settings(persistence_backend="memory")), InMemoryStore)
    mongo_store = get_store(Settings(persistence_backend="mongo"))
    assert mongo_store.name == "mongo"
