"""
API Module - Black Box Interface

Purpose: Request and response shapes for the HTTP layer
Interface: pydantic models
Hidden: Field constraints and normalization

The API layer only parses and renders; all logic lives in the other modules.
"""

from .models import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    TaskCreateRequest,
    TaskEnvelope,
    TaskResponse,
    TaskUpdateRequest,
    UserResponse,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "TaskCreateRequest",
    "TaskEnvelope",
    "TaskResponse",
    "TaskUpdateRequest",
    "UserResponse",
]
