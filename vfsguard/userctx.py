"""Caller identity carried through the current execution context."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from .types import User

_current_user: ContextVar[User] = ContextVar("vfsguard_user", default=User())


def current_user() -> User:
    """Return the user of the current context, root by default."""
    return _current_user.get()


@contextmanager
def acting_as(user: User) -> Iterator[User]:
    """Run the enclosed block with ``user`` as the current identity."""
    token = _current_user.set(user)
    try:
        yield user
    finally:
        _current_user.reset(token)