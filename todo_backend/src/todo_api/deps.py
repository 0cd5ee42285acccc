from __future__ import annotations

from fastapi import Request

from .repositories import Store
from .security import PasswordHasher, TokenService


def get_store_handle(request: Request) -> Store:
    return request.app.state.store


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens
