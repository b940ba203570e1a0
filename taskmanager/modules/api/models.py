"""
Task Manager request and response models.

These models define the JSON bodies accepted and returned by the API.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..tasks.store import TaskPriority, TaskStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


# Request Models (API Input)


class RegisterRequest(BaseModel):
    """Request to register a user."""

    username: str = Field(..., description="Display name", min_length=1, max_length=100)
    email: str = Field(..., description="Login email", max_length=254, pattern=EMAIL_PATTERN)
    password: str = Field(..., description="Plaintext password", min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        """Emails are matched case-insensitively."""
        return v.strip().lower() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    """Request to log in."""

    email: str = Field(..., description="Login email", min_length=1)
    password: str = Field(..., description="Plaintext password", min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class TaskCreateRequest(BaseModel):
    """Request to create a task. Any user_id in the body is ignored."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    due_date: date = Field(..., description="Due date (YYYY-MM-DD)")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.PENDING)


class TaskUpdateRequest(BaseModel):
    """Partial task update. Only the fields listed here can change."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


# Response Models (API Output)


class UserResponse(BaseModel):
    """Public view of a user (no password hash)."""

    id: str
    username: str
    email: str


class TaskResponse(BaseModel):
    """A stored task."""

    id: str
    user_id: str
    title: str
    description: str
    due_date: str
    priority: TaskPriority
    status: TaskStatus
    created_date: Optional[str] = None


class MessageResponse(BaseModel):
    """Plain message response."""

    msg: str


class RegisterResponse(MessageResponse):
    """Response after creating a user."""

    user: UserResponse


class LoginResponse(MessageResponse):
    """Response after a successful login."""

    token: str
    refreshToken: str


class TaskEnvelope(MessageResponse):
    """Response carrying a single task and a confirmation message."""

    task: TaskResponse

