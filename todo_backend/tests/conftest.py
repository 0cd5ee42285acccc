from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.repositories import InMemoryStore
from todo_api.settings import Settings

TEST_SECRET = "test-secret-key-for-the-todo-service-suite"


@pytest.fixture()
def settings() -> Settings:
    return Settings(persistence_backend="memory", jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def client(settings, store) -> Generator[TestClient, None, None]:
    """Test client over a fresh in-memory store; runs startup/shutdown hooks."""
    with TestClient(create_app(settings, store)) as test_client:
        yield test_client


@pytest.fixture()
def login_as(client) -> Callable[..., Dict[str, str]]:
    """Sign up a user, log in and return the headers carrying its token."""

    def _login_as(username: str, password: str = "password123") -> Dict[str, str]:
        res = client.post("/signup", json={"username": username, "password": password, "name": "Test User"})
        assert res.status_code == 201
        res = client.post("/login", json={"username": username, "password": password})
        assert res.status_code == 200
        return {"token": res.json()["token"]}

    return _login_as


@pytest.fixture()
def auth_headers(login_as) -> Dict[str, str]:
    return login_as("alice@example.com")


@pytest.fixture()
def other_headers(login_as) -> Dict[str, str]:
    return login_as("bob@example.com")
