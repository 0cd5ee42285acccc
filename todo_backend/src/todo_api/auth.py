from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from .deps import get_token_service
from .security import TokenService


# PUBLIC_INTERFACE
def require_user(
    request: Request,
    token: Optional[str] = Header(default=None, description="Token returned by POST /login"),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """
    Gate for todo routes: verify the ``token`` header and return the caller's user id.

    The id is also stored on ``request.state.user_id``. A missing or invalid
    token raises InvalidToken, which is rendered as 401 ``{"message": "invalid token"}``
    before the route handler runs.

    Usage:
        @router.get("/todos")
        def list_todos(user_id: str = Depends(require_user)): ...
    """
    user_id = tokens.verify(token)
    request.state.user_id = user_id
    return user_id
