"""
Task Module for the Task Manager API.

Stores tasks as JSON documents in Redis and scopes every read and write to
the owning user.

Key layout:
    task:{id}              JSON task document
    user:{user_id}:tasks   set of task ids owned by the user

A task owned by another user is reported exactly like a missing task, so ids
cannot be probed across accounts.
"""

import json
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class TaskPriority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Task progress. Any value may be set directly; transitions are not checked."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


REQUIRED_FIELDS = ("title", "description", "due_date")
MUTABLE_FIELDS = ("title", "description", "due_date", "priority", "status")


@dataclass
class Task:
    """A task owned by exactly one user."""

    id: str
    user_id: str
    title: str
    description: str
    due_date: str
    priority: str = TaskPriority.MEDIUM.value
    status: str = TaskStatus.PENDING.value
    created_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create from dictionary (e.g., from JSON)."""
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            title=data["title"],
            description=data["description"],
            due_date=data["due_date"],
            priority=data.get("priority", TaskPriority.MEDIUM.value),
            status=data.get("status", TaskStatus.PENDING.value),
            created_date=data.get("created_date"),
        )


def _enum_value(enum_cls, value: Any, field_name: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field_name} '{value}'. Allowed: {allowed}")


def _normalize(field_name: str, value: Any) -> Any:
    """Validate and convert a single mutable field for storage."""
    if field_name == "priority":
        return _enum_value(TaskPriority, value, "priority")
    if field_name == "status":
        return _enum_value(TaskStatus, value, "status")
    if value is None or value == "":
        raise ValidationError(f"Field '{field_name}' must not be empty")
    if field_name == "due_date":
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        try:
            return date.fromisoformat(str(value)).isoformat()
        except ValueError:
            raise ValidationError(f"Invalid due_date '{value}'. Expected YYYY-MM-DD")
    return str(value)


class TaskModule:
    """Task CRUD scoped to the owning user."""

    def __init__(self, redis_client):
        """
        Initialize task module.

        Args:
            redis_client: Async Redis client
        """
        self.redis = redis_client

    @staticmethod
    def _task_key(task_id: str) -> str:
        return f"task:{task_id}"

    @staticmethod
    def _owner_key(user_id: str) -> str:
        return f"user:{user_id}:tasks"

    async def _load_owned(self, user_id: str, task_id: str) -> Task:
        data = await self.redis.get(self._task_key(task_id))
        if not data:
            raise NotFoundError("Task not found")

        task = Task.from_dict(json.loads(data))
        if task.user_id != user_id:
            logger.warning(f"User {user_id} requested task {task_id} owned by another user")
            raise NotFoundError("Task not found")
        return task

    async def _save(self, task: Task, existing: bool = False) -> bool:
        """Write the task document. With existing=True the write only lands if the key is still there."""
        written = await self.redis.set(
            self._task_key(task.id), json.dumps(task.to_dict()), xx=existing
        )
        return bool(written)

    async def create(self, user_id: str, payload: Dict[str, Any]) -> Task:
        """
        Create a task owned by the given user.

        Args:
            user_id: Authenticated principal; any user_id in payload is ignored
            payload: title, description, due_date and optional priority/status

        Returns:
            Stored task

        Raises:
            ValidationError: Missing required field or invalid enum value
        """
        missing = [name for name in REQUIRED_FIELDS if payload.get(name) in (None, "")]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        fields = {
            name: _normalize(name, payload[name])
            for name in MUTABLE_FIELDS
            if payload.get(name) is not None
        }

        task = Task(
            id=str(uuid.uuid4()),
            user_id=user_id,
            created_date=datetime.now(UTC).isoformat(),
            **fields,
        )

        await self._save(task)
        await self.redis.sadd(self._owner_key(user_id), task.id)

        logger.info(f"Created task {task.id} for user {user_id}")
        return task

    async def list_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Task]:
        """
        List the user's tasks, oldest first.

        Args:
            user_id: Owner whose tasks are listed
            status: Optional status filter
            priority: Optional priority filter

        Filters only narrow the owner's tasks, never widen beyond them.
        """
        if status is not None:
            status = _enum_value(TaskStatus, status, "status")
        if priority is not None:
            priority = _enum_value(TaskPriority, priority, "priority")

        owner_key = self._owner_key(user_id)
        task_ids = await self.redis.smembers(owner_key)

        tasks = []
        for task_id in task_ids:
            data = await self.redis.get(self._task_key(task_id))
            if not data:
                # Clean up stale entry
                await self.redis.srem(owner_key, task_id)
                continue

            task = Task.from_dict(json.loads(data))
            if task.user_id != user_id:
                continue
            if status is not None and task.status != status:
                continue
            if priority is not None and task.priority != priority:
                continue
            tasks.append(task)

        tasks.sort(key=lambda t: (t.created_date or "", t.id))
        return tasks

    async def get_by_id(self, user_id: str, task_id: str) -> Task:
        """
        Get one of the user's tasks.

        Raises:
            NotFoundError: Task missing or owned by another user
        """
        return await self._load_owned(user_id, task_id)

    async def update(self, user_id: str, task_id: str, payload: Dict[str, Any]) -> Task:
        """
        Apply a partial update to one of the user's tasks.

        Only title, description, due_date, priority and status are applied;
        other keys (user_id, created_date, id, ...) are ignored.

        Raises:
            NotFoundError: Task missing or owned by another user
            ValidationError: Invalid value for a mutable field
        """
        task = await self._load_owned(user_id, task_id)

        changes = {
            name: _normalize(name, payload[name])
            for name in MUTABLE_FIELDS
            if name in payload
        }
        for name, value in changes.items():
            setattr(task, name, value)

        if changes:
            if not await self._save(task, existing=True):
                # Deleted between read and write
                raise NotFoundError("Task not found")
            logger.info(f"Updated task {task_id} fields: {', '.join(sorted(changes))}")

        return task

    async def delete(self, user_id: str, task_id: str) -> Task:
        """
        Delete one of the user's tasks.

        Returns:
            The task as it was before deletion

        Raises:
            NotFoundError: Task missing, already deleted or owned by another user
        """
        task = await self._load_owned(user_id, task_id)

        await self.redis.delete(self._task_key(task_id))
        await self.redis.srem(self._owner_key(user_id), task_id)

        logger.info(f"Deleted task {task_id} for user {user_id}")
        return task
