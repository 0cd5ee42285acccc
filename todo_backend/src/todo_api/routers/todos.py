from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..auth import require_user
from ..deps import get_store_handle
from ..errors import InvalidInput, NotFound
from ..repositories import Store, TodoRepository
from ..schemas import ErrorOut, MessageOut, TodoCreate, TodoOut, TodoUpdate, TodoUpdatedOut

router = APIRouter(
    tags=["todos"],
    responses={
        401: {"model": ErrorOut, "description": "Missing or invalid token"},
        500: {"model": ErrorOut, "description": "Internal server error"},
    },
)


def _get_repo(store: Store = Depends(get_store_handle)) -> TodoRepository:
    """
    Dependency wrapper for the todo repository to keep signatures clean.
    """
    return store.todos


# PUBLIC_INTERFACE
@router.post(
    "/todo",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new, not-done todo owned by the caller.",
    responses={400: {"model": ErrorOut, "description": "Title is required"}},
)
def create_todo(
    payload: TodoCreate,
    user_id: str = Depends(require_user),
    repo: TodoRepository = Depends(_get_repo),
) -> MessageOut:
    """
    Create a new Todo.
    """
    title = (payload.title or "").strip()
    if not title:
        raise InvalidInput("Title is required")
    repo.create(user_id, title)
    return MessageOut(message="todo created")


# PUBLIC_INTERFACE
@router.get(
    "/todos",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List the caller's todos in creation order.",
)
def list_todos(
    user_id: str = Depends(require_user),
    repo: TodoRepository = Depends(_get_repo),
) -> List[TodoOut]:
    return [TodoOut.from_record(t) for t in repo.list_for_owner(user_id)]


# PUBLIC_INTERFACE
@router.get(
    "/todo/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get one of the caller's todos by ID.",
    responses={404: {"model": ErrorOut, "description": "Todo not found"}},
)
def get_todo(
    todo_id: str,
    user_id: str = Depends(require_user),
    repo: TodoRepository = Depends(_get_repo),
) -> TodoOut:
    """
    Retrieve a single Todo. Todos owned by other users are reported as not found.
    """
    item = repo.get(todo_id, user_id)
    if item is None:
        raise NotFound("Todo not found")
    return TodoOut.from_record(item)


# PUBLIC_INTERFACE
@router.put(
    "/todo/{todo_id}",
    response_model=TodoUpdatedOut,
    summary="Update Todo",
    description="Change the title and/or done flag. Omitted fields keep their value.",
    responses={404: {"model": ErrorOut, "description": "Todo not found"}},
)
def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    user_id: str = Depends(require_user),
    repo: TodoRepository = Depends(_get_repo),
) -> TodoUpdatedOut:
    """
    Partial update of an owned Todo.
    """
    if repo.get(todo_id, user_id) is None:
        raise NotFound("Todo not found")

    updated = repo.update(todo_id, user_id, payload.changes())
    if updated is None:
        # Deleted between the ownership check and the write
        raise NotFound("Todo not found")
    return TodoUpdatedOut(message="todo updated successfully", todo=TodoOut.from_record(updated))


# PUBLIC_INTERFACE
@router.delete(
    "/todo/{todo_id}",
    response_model=MessageOut,
    summary="Delete Todo",
    description="Permanently delete one of the caller's todos.",
    responses={404: {"model": ErrorOut, "description": "Todo not found"}},
)
def delete_todo(
    todo_id: str,
    user_id: str = Depends(require_user),
    repo: TodoRepository = Depends(_get_repo),
) -> MessageOut:
    if repo.get(todo_id, user_id) is None or not repo.delete(todo_id, user_id):
        raise NotFound("Todo not found")
    return MessageOut(message="todo deleted successfully")
