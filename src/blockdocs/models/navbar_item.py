from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blockdocs.models.base import Base
from blockdocs.navbar_layout import DEFAULT_WIDTH, ItemStyles, parse_styles


if TYPE_CHECKING:
    from blockdocs.models.project import Project


class NavbarItem(Base):
    # == Model Metadata =======================================================
    __tablename__   = "navbar_items"

    # == Columns ==============================================================
    project_id      : Mapped[int]           = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    type            : Mapped[str]           = mapped_column(String(32), nullable=False)
    label           : Mapped[str | None]    = mapped_column(String(255), nullable=True)
    href            : Mapped[str]           = mapped_column(Text, nullable=False, default="", server_default="")
    width           : Mapped[int]           = mapped_column(Integer, nullable=False, default=DEFAULT_WIDTH, server_default=str(DEFAULT_WIDTH))
    styles          : Mapped[str]           = mapped_column(Text, nullable=False, default="{}", server_default="{}")
    order           : Mapped[int]           = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # == Relationships ========================================================
    project         : Mapped[Project]       = relationship(back_populates="navbar_items", lazy="raise")

    # == Methods ==============================================================

    @property
    def parsed_styles(self) -> ItemStyles: return parse_styles(self.styles)
