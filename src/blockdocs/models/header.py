from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blockdocs.models.base import Base


if TYPE_CHECKING:
    from blockdocs.models.project import Project


class Header(Base):
    """One section of a project. `content` holds markdown or a JSON block array."""
    # == Model Metadata =======================================================
    __tablename__   = "headers"

    # == Columns ==============================================================
    project_id      : Mapped[int]           = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id       : Mapped[int | None]    = mapped_column(ForeignKey("headers.id", ondelete="CASCADE"), nullable=True, index=True)
    title           : Mapped[str]           = mapped_column(String(255), nullable=False)
    content         : Mapped[str]           = mapped_column(Text, nullable=False, default="", server_default="")
    icon            : Mapped[str]           = mapped_column(String(32), nullable=False, default="", server_default="")
    order           : Mapped[int]           = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # == Relationships ========================================================
    project         : Mapped[Project]       = relationship(back_populates="headers", lazy="raise")

    # == Methods ==============================================================

    @property
    def is_top_level(self) -> bool: return self.parent_id is None
