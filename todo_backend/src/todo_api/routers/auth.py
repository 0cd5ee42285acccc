from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..deps import get_hasher, get_store_handle, get_token_service
from ..errors import AuthError, InvalidInput, NotFound
from ..repositories import Store
from ..schemas import ErrorOut, LoginIn, LoginOut, MessageOut, SignupIn
from ..security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# PUBLIC_INTERFACE
@router.post(
    "/signup",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create a user account. The username must be an email address.",
    responses={
        400: {"model": ErrorOut, "description": "Invalid input or user already exists"},
        500: {"model": ErrorOut, "description": "Internal server error"},
    },
)
def signup(
    payload: SignupIn,
    store: Store = Depends(get_store_handle),
    hasher: PasswordHasher = Depends(get_hasher),
) -> MessageOut:
    """
    Register a new user after checking the username is free.
    """
    if store.users.get_by_username(payload.username) is not None:
        raise InvalidInput("User already exists")

    created = store.users.create(payload.username, hasher.hash(payload.password), payload.name)
    if created is None:
        # Lost a concurrent signup race on the unique username
        raise InvalidInput("User already exists")

    logger.info("user %s signed up", created.id)
    return MessageOut(message="you are signed up successfully")


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=LoginOut,
    summary="Log in",
    description="Exchange a username and password for a token to send in the `token` header.",
    responses={
        401: {"model": ErrorOut, "description": "Invalid credentials"},
        404: {"model": ErrorOut, "description": "User does not exist"},
        500: {"model": ErrorOut, "description": "Internal server error"},
    },
)
def login(
    payload: LoginIn,
    store: Store = Depends(get_store_handle),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> LoginOut:
    """
    Verify credentials and issue a token.
    """
    user = store.users.get_by_username(payload.username) if payload.username else None
    if user is None:
        raise NotFound("User does not exist")

    if payload.password is None or not hasher.verify(payload.password, user.password_hash):
        logger.info("rejected login for user %s", user.id)
        raise AuthError("invalid credentials")

    logger.info("user %s logged in", user.id)
    return LoginOut(message="you are logged in successfully", token=tokens.issue(user.id))
