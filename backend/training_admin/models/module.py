from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class Module(CatalogMixin, Base):
    """Top of the training catalog: a module groups topics and owns permissions."""

    __tablename__ = "modules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    route: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    topics: Mapped[list["Topic"]] = relationship(
        "Topic", back_populates="module", order_by="Topic.display_order"
    )
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission", back_populates="module", order_by="Permission.name"
    )
