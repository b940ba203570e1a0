"""
Task Manager - Task tracking API with bearer-token authentication

A small backend for registering users and managing their tasks.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are wired together at startup, never through globals
- All communication through defined interfaces

Modules:
- auth: Password hashing, token issuance, logout blacklist, auth gate
- users: Credential storage
- tasks: Per-user task storage
- api: Request and response models
- config: Runtime configuration
"""

__version__ = "1.0.0"
