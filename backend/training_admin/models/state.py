from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class State(CatalogMixin, Base):
    """Top of the organizational hierarchy (state -> range -> users)."""

    __tablename__ = "states"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    code: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    ranges: Mapped[list["Range"]] = relationship("Range", back_populates="state", order_by="Range.name")
    users: Mapped[list["User"]] = relationship("User", back_populates="state")
