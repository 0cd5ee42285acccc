from __future__ import annotations

import logging
from typing import Optional

import jwt
from passlib.context import CryptContext

from .errors import HashingError, InvalidToken

logger = logging.getLogger(__name__)

JWT_ALG = "HS256"
USER_CLAIM = "userid"


# PUBLIC_INTERFACE
class PasswordHasher:
    """bcrypt hashing with a fixed cost factor."""

    def __init__(self, rounds: int = 5) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plaintext: str) -> str:
        """
        Raises:
            HashingError if bcrypt refuses the password (e.g. a NUL byte).
        """
        try:
            return self._context.hash(plaintext)
        except (ValueError, TypeError) as exc:
            raise HashingError(str(exc)) from exc

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """
        Return True when plaintext matches the hash.

        Raises:
            HashingError if the stored hash cannot be parsed.
        """
        try:
            return self._context.verify(plaintext, password_hash)
        except (ValueError, TypeError) as exc:
            raise HashingError(str(exc)) from exc


# PUBLIC_INTERFACE
class TokenService:
    """
    Issues and verifies HS256 tokens carrying a single user id claim.

    Tokens have no expiry; they stay valid until the secret changes.
    """

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def issue(self, user_id: str) -> str:
        return jwt.encode({USER_CLAIM: user_id}, self._secret, algorithm=JWT_ALG)

    def verify(self, token: Optional[str]) -> str:
        """
        Decode a token and return the user id it carries.

        Raises:
            InvalidToken on a missing, malformed or wrongly signed token,
            or when the user id claim is absent.
        """
        if not token:
            raise InvalidToken()
        try:
            claims = jwt.decode(token, self._secret, algorithms=[JWT_ALG])
        except jwt.PyJWTError as exc:
            logger.debug("rejected token: %s", exc)
            raise InvalidToken() from exc

        user_id = claims.get(USER_CLAIM)
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken()
        return user_id
