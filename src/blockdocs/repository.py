"""Persistence collaborator: owner-scoped CRUD over projects, headers and navbar items.

Every owner-scoped operation starts by resolving the signed-in user; a missing
session or a resource owned by someone else raises `AuthorizationError` before
anything is written. `get_public_project` is the only unauthenticated read.
"""
from __future__ import annotations

import datetime, logging

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable, List, Sequence

from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

from blockdocs.errors import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from blockdocs.models import Base, Header, NavbarItem, Project, User
from blockdocs.navbar_layout import NAVBAR_ITEM_TYPES, NavbarItemRecord, clamp_width
from blockdocs.outline import HeaderRecord, validate_parent
from blockdocs.session import require_user_id


logger = logging.getLogger(__name__)


class ProjectRecord(BaseModel):
    """Detached copy of a persisted project."""
    model_config = ConfigDict(from_attributes=True)

    id          : int
    user_id     : int
    name        : str
    description : str | None               = None
    created_at  : datetime.datetime | None = None
    updated_at  : datetime.datetime | None = None


class ProjectSnapshot(BaseModel):
    """A project with its headers and navbar items, each list in persisted order."""
    project      : ProjectRecord
    headers      : List[HeaderRecord]
    navbar_items : List[NavbarItemRecord]


@asynccontextmanager
async def _persisting(action: str) -> AsyncGenerator[None, None]:
    """Turn driver failures into PersistenceError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("failed to %s: %s", action, e)
        raise PersistenceError(f"Failed to {action}") from e


class DocsRepository:

    # ===================================================================
    # Users
    # ===================================================================

    async def create_user(self, email: str, name: str | None = None) -> User:
        async with Base.async_context():
            if await User.find_by(email=email) is not None:
                raise ValidationError(f"Email already in use: {email}")
            async with _persisting("create user"):
                return await User(email=email, name=name).save()

    # ===================================================================
    # Projects
    # ===================================================================

    async def create_project(self, name: str, description: str | None = None) -> Project:
        user_id = require_user_id()
        async with Base.async_context(), _persisting("create project"):
            return await Project(user_id=user_id, name=name, description=description or "").save()

    async def update_project(self, project_id: int, *, name: str | None = None, description: str | None = None) -> Project:
        async with Base.async_context():
            project = await self._owned_project(project_id)
            if name is not None:
                project.name = name
            if description is not None:
                project.description = description
            async with _persisting("update project"):
                return await project.save()

    async def delete_project(self, project_id: int) -> None:
        """Delete the project together with its headers and navbar items."""
        async with Base.async_context():
            await self._owned_project(project_id)
            async with _persisting("delete project"):
                await Header.delete_where(Header.project_id == project_id, Header.parent_id.is_not(None))
                await Header.delete_where(Header.project_id == project_id)
                await NavbarItem.delete_where(NavbarItem.project_id == project_id)
                await Project.delete_where(Project.id == project_id)

    async def list_projects(self) -> List[Project]:
        user_id = require_user_id()
        return await Project.where(Project.user_id == user_id, order_by=[Project.created_at])

    async def get_project(self, project_id: int) -> Project:
        async with Base.async_context():
            return await self._owned_project(project_id)

    async def get_project_snapshot(self, project_id: int) -> ProjectSnapshot:
        """Owner view of a project with everything needed to edit and export it."""
        async with Base.async_context():
            project = await self._owned_project(project_id)
            return await self._snapshot(project)

    async def get_public_project(self, project_id: int) -> ProjectSnapshot:
        """Unauthenticated read-only view used by the public docs page and the export."""
        async with Base.async_context():
            if (project := await Project.find(project_id)) is None:
                raise NotFoundError("Project", project_id)
            return await self._snapshot(project)

    # ===================================================================
    # Headers
    # ===================================================================

    async def create_header(self, project_id: int, title: str, parent_id: int | None = None, content: str = "", icon: str = "") -> Header:
        """Append a header to the project. A parent must be a top-level header of the same project."""
        async with Base.async_context():
            await self._owned_project(project_id)
            siblings = await Header.where(Header.project_id == project_id)
            validate_parent(siblings, parent_id)
            async with _persisting("create header"):
                header = Header(
                    project_id=project_id,
                    parent_id=parent_id,
                    title=title,
                    content=content,
                    icon=icon,
                    order=await self._next_order(Header, project_id),
                )
                return await header.save()

    async def update_header(self, header_id: int, *, title: str | None = None, content: str | None = None, icon: str | None = None) -> Header:
        async with Base.async_context():
            header = await self._owned_header(header_id)
            if title is not None:
                header.title = title
            if content is not None:
                header.content = content
            if icon is not None:
                header.icon = icon
            async with _persisting("update header"):
                return await header.save()

    async def delete_header(self, header_id: int) -> None:
        """Delete a header and its direct children."""
        async with Base.async_context():
            header = await self._owned_header(header_id)
            async with _persisting("delete header"):
                await Header.delete_where(Header.parent_id == header.id)
                await Header.delete_where(Header.id == header.id)

    async def reorder_headers(self, project_id: int, ordered_ids: Sequence[int]) -> None:
        """Rewrite `order` so it follows `ordered_ids`."""
        async with Base.async_context() as session:
            await self._owned_project(project_id)
            async with _persisting("reorder headers"):
                await self._rewrite_order(session, Header, project_id, ordered_ids)

    # ===================================================================
    # Navbar items
    # ===================================================================

    async def create_navbar_item(self, project_id: int, type: str, label: str | None = None, href: str | None = None, styles: str | None = None) -> NavbarItem:
        if type not in NAVBAR_ITEM_TYPES:
            raise ValidationError(f"Unknown navbar item type: {type!r}")
        async with Base.async_context():
            await self._owned_project(project_id)
            async with _persisting("create navbar item"):
                item = NavbarItem(
                    project_id=project_id,
                    type=type,
                    label=label or "",
                    href=href or "",
                    styles=styles or "{}",
                    order=await self._next_order(NavbarItem, project_id),
                )
                return await item.save()

    async def update_navbar_item(self, item_id: int, *, label: str | None = None, href: str | None = None, width: int | None = None, styles: str | None = None) -> NavbarItem:
        async with Base.async_context():
            item = await self._owned_navbar_item(item_id)
            if label is not None:
                item.label = label
            if href is not None:
                item.href = href
            if width is not None:
                item.width = clamp_width(width)
            if styles is not None:
                item.styles = styles
            async with _persisting("update navbar item"):
                return await item.save()

    async def delete_navbar_item(self, item_id: int) -> None:
        async with Base.async_context():
            item = await self._owned_navbar_item(item_id)
            async with _persisting("delete navbar item"):
                await NavbarItem.delete_where(NavbarItem.id == item.id)

    async def reorder_navbar_items(self, project_id: int, ordered_ids: Sequence[int]) -> None:
        async with Base.async_context() as session:
            await self._owned_project(project_id)
            async with _persisting("reorder navbar items"):
                await self._rewrite_order(session, NavbarItem, project_id, ordered_ids)

    # ===================================================================
    # Internals
    # ===================================================================

    async def _owned_project(self, project_id: int) -> Project:
        user_id = require_user_id()
        if (project := await Project.find(project_id)) is None:
            raise NotFoundError("Project", project_id)
        if not project.is_owned_by(user_id):
            raise AuthorizationError()
        return project

    async def _owned_header(self, header_id: int) -> Header:
        require_user_id()
        if (header := await Header.find(header_id)) is None:
            raise NotFoundError("Header", header_id)
        await self._owned_project(header.project_id)
        return header

    async def _owned_navbar_item(self, item_id: int) -> NavbarItem:
        require_user_id()
        if (item := await NavbarItem.find(item_id)) is None:
            raise NotFoundError("NavbarItem", item_id)
        await self._owned_project(item.project_id)
        return item

    async def _next_order(self, model: type[Header] | type[NavbarItem], project_id: int) -> int:
        async with Base.async_context() as session:
            current = await session.scalar(select(func.max(model.order)).where(model.project_id == project_id))
            return 0 if current is None else current + 1

    async def _rewrite_order(self, session, model: type[Header] | type[NavbarItem], project_id: int, ordered_ids: Iterable[int]) -> None:
        for index, id in enumerate(ordered_ids):
            await session.execute(update(model).where(model.id == id, model.project_id == project_id).values(order=index))
        await session.commit()

    async def _snapshot(self, project: Project) -> ProjectSnapshot:
        headers = await Header.where(Header.project_id == project.id, order_by=[Header.order])
        items = await NavbarItem.where(NavbarItem.project_id == project.id, order_by=[NavbarItem.order])
        return ProjectSnapshot(
            project=ProjectRecord.model_validate(project),
            headers=[HeaderRecord.model_validate(header) for header in headers],
            navbar_items=[NavbarItemRecord.model_validate(item) for item in items],
        )
