from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class Permission(CatalogMixin, Base):
    __tablename__ = "permissions"
    __table_args__ = (UniqueConstraint("module_id", "name", name="uq_permissions_module_id_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    module_id: Mapped[int | None] = mapped_column(ForeignKey("modules.id"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)  # e.g. "topics:manage"
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    module: Mapped["Module | None"] = relationship("Module", back_populates="permissions")
    roles: Mapped[list["Role"]] = relationship(
        "Role", secondary="role_permissions", back_populates="permissions"
    )
