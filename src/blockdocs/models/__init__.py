# models/__init__.py

from contextlib import asynccontextmanager


# isort: off
from .base import Base
from .user import User
from .project import Project
from .header import Header
from .navbar_item import NavbarItem
# isort: on

# Alias the context manager from Base for convenience
@asynccontextmanager
async def context(*args, **kwargs):
    async with Base.async_context() as session:
        yield session


__all__ = [
    "Base",
    "User",
    "Project",
    "Header",
    "NavbarItem",
    "context",
]
