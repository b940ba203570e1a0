"""
Tasks Module - Black Box Interface

Purpose: Per-user task CRUD with ownership scoping
Interface: create(), list_for_user(), get_by_id(), update(), delete()
Hidden: Document layout, owner index, field validation

Replaceable with any document store; callers only ever see Task objects.
"""

from .store import Task, TaskModule, TaskPriority, TaskStatus

__all__ = ["Task", "TaskModule", "TaskPriority", "TaskStatus"]
