from __future__ import annotations

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import TodoRecord


# PUBLIC_INTERFACE
class SignupIn(BaseModel):
    """
    Schema for account creation.

    username must be a syntactically valid email, password at least 6
    characters and name non-empty.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "ada@example.com",
                "password": "s3cret!",
                "name": "Ada",
            }
        }
    )

    username: str = Field(..., min_length=3, description="Email address used as the login name")
    password: str = Field(..., min_length=6, description="Plaintext password (min 6 chars)")
    name: str = Field(..., min_length=1, description="Display name")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """
        Check the address is a valid email but keep it exactly as sent, since
        login looks the user up by the raw string.
        """
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(f"username must be a valid email: {exc}") from exc
        return v


# PUBLIC_INTERFACE
class LoginIn(BaseModel):
    """
    Schema for login. Fields are not constrained; unknown users and wrong
    passwords are reported by the handler.
    """

    username: Optional[str] = None
    password: Optional[str] = None


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a todo. The title check happens in the handler so that
    a missing or blank title gets its own message.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy groceries"}})

    title: Optional[str] = Field(default=None, description="Short title for the todo item")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing todo.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"done": True}})

    title: Optional[str] = Field(default=None, description="New title")
    done: Optional[bool] = Field(default=None, description="Completion status flag")

    def changes(self) -> dict:
        """Fields the client actually sent with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a todo item.
    """

    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    done: bool = Field(..., description="Completion status flag")
    user_id: str = Field(..., description="Id of the owning user")

    @classmethod
    def from_record(cls, record: TodoRecord) -> "TodoOut":
        return cls(id=record.id, title=record.title, done=record.done, user_id=record.user_id)


class MessageOut(BaseModel):
    message: str


class LoginOut(MessageOut):
    token: str


class TodoUpdatedOut(MessageOut):
    todo: TodoOut


class ErrorOut(BaseModel):
    message: str
    error: Optional[List[dict]] = None
