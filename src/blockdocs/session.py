"""Who is signed in for the current task.

The value lives in a ContextVar so concurrent requests served on one event loop
never observe each other's user.
"""
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator

from blockdocs.errors import AuthorizationError


_current_user_id: ContextVar[int | None] = ContextVar("_current_user_id", default=None)


def get_current_user_id() -> int | None:
    return _current_user_id.get()


def require_user_id() -> int:
    """Return the signed-in user id or raise AuthorizationError."""
    if (user_id := _current_user_id.get()) is None:
        raise AuthorizationError()
    return user_id


@contextmanager
def signed_in_as(user_id: int | None) -> Generator[int | None, None, None]:
    token = _current_user_id.set(user_id)
    try:
        yield user_id
    finally:
        _current_user_id.reset(token)
