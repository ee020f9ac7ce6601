from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blockdocs.models.base import Base


if TYPE_CHECKING:
    from blockdocs.models.project import Project


class User(Base):
    # == Model Metadata =======================================================
    __tablename__   = "users"

    # == Columns ==============================================================
    email           : Mapped[str]           = mapped_column(String(255), nullable=False, unique=True)
    name            : Mapped[str | None]    = mapped_column(String(255), nullable=True)

    # == Relationships ========================================================
    projects        : Mapped[list[Project]] = relationship(back_populates="user", passive_deletes=True, lazy="raise")
