"""
Users Module - Black Box Interface

Purpose: Persist registered users and their password hashes
Interface: find_by_email(), get(), create()
Hidden: Key layout, unique email index

Replaceable with any document store that offers an atomic unique insert.
"""

from .store import User, UserStore

__all__ = ["User", "UserStore"]
