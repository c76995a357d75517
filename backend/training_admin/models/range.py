from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class Range(CatalogMixin, Base):
    __tablename__ = "ranges"
    __table_args__ = (UniqueConstraint("state_id", "name", name="uq_ranges_state_id_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    state_id: Mapped[int] = mapped_column(ForeignKey("states.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    head: Mapped[str | None] = mapped_column(String(150), nullable=True)  # officer in charge
    contact_no: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    state: Mapped["State"] = relationship("State", back_populates="ranges")
    users: Mapped[list["User"]] = relationship("User", back_populates="range")
    districts: Mapped[list["District"]] = relationship(
        "District", back_populates="range", order_by="District.name"
    )
