from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blockdocs.models.base import Base


if TYPE_CHECKING:
    from blockdocs.models.header import Header
    from blockdocs.models.navbar_item import NavbarItem
    from blockdocs.models.user import User


class Project(Base):
    # == Model Metadata =======================================================
    __tablename__   = "projects"

    # == Columns ==============================================================
    user_id         : Mapped[int]               = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name            : Mapped[str]               = mapped_column(String(255), nullable=False)
    description     : Mapped[str | None]        = mapped_column(Text, nullable=True)

    # == Relationships ========================================================
    user            : Mapped[User]              = relationship(back_populates="projects", lazy="raise")
    headers         : Mapped[list[Header]]      = relationship(back_populates="project", order_by="Header.order", passive_deletes=True, lazy="raise")
    navbar_items    : Mapped[list[NavbarItem]]  = relationship(back_populates="project", order_by="NavbarItem.order", passive_deletes=True, lazy="raise")

    # == Methods ==============================================================

    def is_owned_by(self, user_id: int | None) -> bool:
        return user_id is not None and self.user_id == user_id
