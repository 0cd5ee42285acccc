from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional

from bson import ObjectId
from mongoengine import BooleanField, Document, StringField, connect, disconnect
from mongoengine.errors import NotUniqueError, OperationError, ValidationError
from pymongo.errors import PyMongoError

from .errors import StoreError
from .models import TodoRecord, UserRecord
from .repositories import Store, TodoRepository, UserRepository

logger = logging.getLogger(__name__)

# Connection alias the documents are bound to; owned by MongoStore.open/close.
ALIAS = "todo_service"


class UserDocument(Document):
    username = StringField(required=True, unique=True)
    password = StringField(required=True)
    name = StringField(required=True)

    meta = {"collection": "users", "db_alias": ALIAS}


class TodoDocument(Document):
    title = StringField(default="")
    done = BooleanField(default=False)
    user_id = StringField(required=True, db_field="userId")

    meta = {"collection": "todo-collection", "db_alias": ALIAS}


@contextmanager
def _store_errors(operation: str) -> Generator[None, None, None]:
    try:
        yield
    except (PyMongoError, OperationError, ValidationError) as exc:
        raise StoreError(f"{operation} failed: {exc}") from exc


def _user_record(doc: UserDocument) -> UserRecord:
    return UserRecord(id=str(doc.id), username=doc.username, password_hash=doc.password, name=doc.name)


def _todo_record(doc: TodoDocument) -> TodoRecord:
    return TodoRecord(id=str(doc.id), title=doc.title, user_id=doc.user_id, done=bool(doc.done))


def _object_id(todo_id: str) -> Optional[ObjectId]:
    # Ids that cannot be ObjectIds can never match a stored todo
    return ObjectId(todo_id) if ObjectId.is_valid(todo_id) else None


class MongoUserRepository(UserRepository):
    def create(self, username: str, password_hash: str, name: str) -> Optional[UserRecord]:
        doc = UserDocument(username=username, password=password_hash, name=name)
        with _store_errors("create user"):
            try:
                doc.save(force_insert=True)
            except NotUniqueError:
                logger.info("username already taken at insert time")
                return None
        return _user_record(doc)

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        with _store_errors("find user"):
            doc = UserDocument.objects(username=username).first()
        return None if doc is None else _user_record(doc)


class MongoTodoRepository(TodoRepository):
    def create(self, user_id: str, title: str) -> TodoRecord:
        doc = TodoDocument(title=title, done=False, user_id=user_id)
        with _store_errors("create todo"):
            doc.save(force_insert=True)
        return _todo_record(doc)

    def list_for_owner(self, user_id: str) -> List[TodoRecord]:
        with _store_errors("list todos"):
            docs = list(TodoDocument.objects(user_id=user_id).order_by("id"))
        return [_todo_record(d) for d in docs]

    def get(self, todo_id: str, user_id: str) -> Optional[TodoRecord]:
        oid = _object_id(todo_id)
        if oid is None:
            return None
        with _store_errors("get todo"):
            doc = TodoDocument.objects(id=oid, user_id=user_id).first()
        return None if doc is None else _todo_record(doc)

    def update(self, todo_id: str, user_id: str, changes: Dict[str, Any]) -> Optional[TodoRecord]:
        oid = _object_id(todo_id)
        if oid is None:
            return None
        update = {f"set__{k}": v for k, v in changes.items() if k in ("title", "done")}
        if not update:
            return self.get(todo_id, user_id)
        with _store_errors("update todo"):
            doc = TodoDocument.objects(id=oid, user_id=user_id).modify(new=True, **update)
        return None if doc is None else _todo_record(doc)

    def delete(self, todo_id: str, user_id: str) -> bool:
        oid = _object_id(todo_id)
        if oid is None:
            return False
        with _store_errors("delete todo"):
            deleted = TodoDocument.objects(id=oid, user_id=user_id).delete()
        return deleted > 0


class MongoStore(Store):
    """
    MongoDB store backed by mongoengine documents.

    The connection is registered under a private alias in open() and dropped
    in close(); extra keyword arguments are passed to mongoengine.connect
    (for example ``mongo_client_class`` in tests).
    """

    name = "mongo"

    def __init__(self, url: str, db_name: str, **client_kwargs: Any) -> None:
        self._url = url
        self._db_name = db_name
        self._client_kwargs = client_kwargs
        self.users = MongoUserRepository()
        self.todos = MongoTodoRepository()

    def open(self) -> None:
        with _store_errors("connect"):
            connect(db=self._db_name, host=self._url, alias=ALIAS, **self._client_kwargs)
            UserDocument.ensure_indexes()
        logger.info("connected to mongo database %r", self._db_name)

    def close(self) -> None:
        disconnect(alias=ALIAS)
        logger.info("disconnected from mongo database %r", self._db_name)
