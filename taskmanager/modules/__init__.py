"""
Task Manager Modules

Each module is a self-contained unit with:
- Clear interface (public API)
- Hidden storage details
- Single responsibility
- Dependencies passed in through its constructor

Modules communicate only through well-defined interfaces.
"""
