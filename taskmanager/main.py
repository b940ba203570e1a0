#!/usr/bin/env python3
"""
Task Manager - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Declares the HTTP routes and runs the API server

All business logic is in the modules.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import List, Optional

import redis.asyncio as redis
import uvicorn
from dotenv import find_dotenv, load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskmanager.config.provider import ConfigProvider, EnvConfigProvider
from taskmanager.logging_config import get_logging_config
from taskmanager.modules.api import (
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
from taskmanager.modules.auth import AuthFactory, AuthStack, LoginOutcome, Principal
from taskmanager.modules.config import get_config
from taskmanager.modules.errors import (
    InternalError,
    TaskManagerError,
    UnauthenticatedError,
    ValidationError,
)
from taskmanager.modules.tasks import TaskModule, TaskPriority, TaskStatus

# .env in the working directory; variables already set in the environment win
load_dotenv(find_dotenv(usecwd=True))

# Get configuration
config = get_config()

log_config.dictConfig(get_logging_config(config.get("log_level")))
logger = logging.getLogger(__name__)

# Configuration provider (token and hashing settings)
config_provider: ConfigProvider = EnvConfigProvider()

# Module instances (initialized at startup)
auth_stack: Optional[AuthStack] = None
task_module: Optional[TaskModule] = None
redis_client: Optional[redis.Redis] = None


async def get_redis_client() -> redis.Redis:
    """Create Redis client from configuration."""
    # Password passed separately to avoid URL encoding issues
    redis_url = f"redis://{config.get('redis_host')}:{config.get('redis_port')}/{config.get('redis_db')}"

    return await redis.from_url(
        redis_url,
        password=config.get("redis_password"),
        encoding="utf-8",
        decode_responses=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global auth_stack, task_module, redis_client

    logger.info("Starting Task Manager API...")

    redis_client = await get_redis_client()

    # Build authentication stack via factory (dependency injection)
    auth_stack = AuthFactory.build(config_provider, redis_client)
    task_module = TaskModule(redis_client)

    logger.info("Task Manager API started successfully")

    yield

    logger.info("Shutting down Task Manager API...")
    if redis_client:
        await redis_client.aclose()
    auth_stack = None
    task_module = None
    redis_client = None
    logger.info("Task Manager API shutdown complete")


app = FastAPI(
    title="Task Manager API",
    description="Per-user task tracking with bearer-token authentication",
    version="1.0.0",
    lifespan=lifespan,
)


# Dependency injection helpers


async def get_principal(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer access token"),
) -> Principal:
    """Run the auth gate and attach the caller's user id to the request."""
    if not auth_stack:
        raise HTTPException(503, "Service not initialized")

    principal = await auth_stack.gate.authenticate(authorization)
    request.state.user_id = principal.user_id
    return principal


def get_task_module() -> TaskModule:
    if not task_module:
        raise HTTPException(503, "Service not initialized")
    return task_module


# User Endpoints


@app.post("/users/register", status_code=201, tags=["users"])
async def register(payload: RegisterRequest):
    """
    Register a new user.

    Returns:
        201: User created
        200: Email already registered
        400: Invalid body
    """
    if not auth_stack:
        raise HTTPException(503, "Service not initialized")

    try:
        result = await auth_stack.module.register(
            username=payload.username,
            email=payload.email,
            password=payload.password,
        )
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to register user: {e}")
        raise InternalError("Error occurred while registering user")

    if not result.created:
        return JSONResponse(
            status_code=200,
            content={"msg": "User is already registered, please login"},
        )

    return RegisterResponse(
        msg="User created",
        user=UserResponse(**result.user.to_public_dict()),
    )


@app.post("/users/login", status_code=201, tags=["users"])
async def login(payload: LoginRequest):
    """
    Log in and receive an access token and a refresh token.

    Returns:
        201: Login successful
        200: Email not registered
        401: Wrong password
    """
    if not auth_stack:
        raise HTTPException(503, "Service not initialized")

    try:
        result = await auth_stack.module.login(email=payload.email, password=payload.password)
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to log in: {e}")
        raise InternalError("Error occurred while logging in")

    if result.outcome == LoginOutcome.NOT_REGISTERED:
        return JSONResponse(
            status_code=200,
            content={"msg": "User is not registered, please sign up"},
        )
    if result.outcome == LoginOutcome.WRONG_PASSWORD:
        return JSONResponse(status_code=401, content={"msg": "Wrong password"})

    return LoginResponse(
        msg="Login successful",
        token=result.token,
        refreshToken=result.refresh_token,
    )


@app.get("/users/logout", response_model=MessageResponse, tags=["users"])
async def logout(principal: Principal = Depends(get_principal)):
    """
    Invalidate the presented access token.

    Returns:
        200: Logged out
        401: No token
        403: Token invalid or already logged out
    """
    try:
        await auth_stack.module.logout(principal)
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to log out user {principal.user_id}: {e}")
        raise InternalError("An error occurred while logging out the user")

    return MessageResponse(msg="User logged out successfully")


# Task Endpoints


@app.post("/tasks", response_model=TaskEnvelope, status_code=201, tags=["tasks"])
async def create_task(
    payload: TaskCreateRequest,
    principal: Principal = Depends(get_principal),
    tasks: TaskModule = Depends(get_task_module),
):
    """
    Create a task owned by the caller.

    Returns:
        201: Task created
        400: Invalid body
    """
    try:
        task = await tasks.create(principal.user_id, payload.model_dump(mode="json"))
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to create task for user {principal.user_id}: {e}")
        raise InternalError("Error while creating task")

    return TaskEnvelope(msg="Task created successfully", task=TaskResponse.model_validate(task.to_dict()))


@app.get("/tasks", response_model=List[TaskResponse], tags=["tasks"])
async def list_tasks(
    status: Optional[TaskStatus] = Query(None, description="Only tasks with this status"),
    priority: Optional[TaskPriority] = Query(None, description="Only tasks with this priority"),
    principal: Principal = Depends(get_principal),
    tasks: TaskModule = Depends(get_task_module),
):
    """
    List the caller's tasks, oldest first.

    Returns:
        200: Tasks (possibly empty)
    """
    try:
        found = await tasks.list_for_user(principal.user_id, status=status, priority=priority)
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to list tasks for user {principal.user_id}: {e}")
        raise InternalError("Error while fetching tasks")

    return [TaskResponse.model_validate(task.to_dict()) for task in found]


@app.get("/tasks/{task_id}", response_model=TaskResponse, tags=["tasks"])
async def get_task(
    task_id: str,
    principal: Principal = Depends(get_principal),
    tasks: TaskModule = Depends(get_task_module),
):
    """
    Get one of the caller's tasks.

    Returns:
        200: Task
        404: Task not found (or owned by another user)
    """
    try:
        task = await tasks.get_by_id(principal.user_id, task_id)
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch task {task_id}: {e}")
        raise InternalError("Error while fetching task")

    return TaskResponse.model_validate(task.to_dict())


@app.patch("/tasks/{task_id}", response_model=TaskEnvelope, tags=["tasks"])
async def update_task(
    task_id: str,
    payload: TaskUpdateRequest,
    principal: Principal = Depends(get_principal),
    tasks: TaskModule = Depends(get_task_module),
):
    """
    Partially update one of the caller's tasks.

    Returns:
        200: Updated task
        404: Task not found (or owned by another user)
    """
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)

    try:
        task = await tasks.update(principal.user_id, task_id, changes)
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to update task {task_id}: {e}")
        raise InternalError("Error while updating task")

    return TaskEnvelope(msg="Task updated successfully", task=TaskResponse.model_validate(task.to_dict()))


@app.delete("/tasks/{task_id}", response_model=TaskEnvelope, tags=["tasks"])
async def delete_task(
    task_id: str,
    principal: Principal = Depends(get_principal),
    tasks: TaskModule = Depends(get_task_module),
):
    """
    Delete one of the caller's tasks.

    Returns:
        200: Deleted task (state before deletion)
        404: Task not found (or owned by another user)
    """
    try:
        task = await tasks.delete(principal.user_id, task_id)
    except TaskManagerError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete task {task_id}: {e}")
        raise InternalError("Error while deleting task")

    return TaskEnvelope(msg="Task deleted successfully", task=TaskResponse.model_validate(task.to_dict()))


# Health/Monitoring Endpoints


@app.get("/healthz")
async def healthz():
    """
    Minimal liveness probe. Unauthenticated.

    Returns:
        200: Service is running
    """
    return {"status": "ok"}


@app.get("/health")
async def health_check():
    """
    Readiness check including the store connection.

    Returns:
        200: Service healthy
        503: Service unhealthy
    """
    try:
        if redis_client:
            await redis_client.ping()
            redis_status = "connected"
        else:
            redis_status = "disconnected"

        modules_ready = all([auth_stack, task_module])

        if redis_status == "connected" and modules_ready:
            return {"status": "healthy", "redis": redis_status, "modules": "initialized"}

        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "redis": redis_status,
                "modules": "initialized" if modules_ready else "not initialized",
            },
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "error": str(e)})


# Error handlers


@app.exception_handler(TaskManagerError)
async def task_manager_error_handler(request: Request, exc: TaskManagerError):
    """Render domain errors with their status class."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and query parameters."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    error = ValidationError("; ".join(problems) or "Invalid request")
    logger.info(f"Validation error on {request.method} {request.url.path}: {error.message}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


if __name__ == "__main__":
    uvicorn.run(
        "taskmanager.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level")),
    )
