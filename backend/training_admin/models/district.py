from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class District(CatalogMixin, Base):
    """Lowest org unit: a district belongs to a range."""

    __tablename__ = "districts"
    __table_args__ = (UniqueConstraint("range_id", "name", name="uq_districts_range_id_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    range_id: Mapped[int] = mapped_column(ForeignKey("ranges.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    head: Mapped[str | None] = mapped_column(String(150), nullable=True)
    contact_no: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mobile_no: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    area: Mapped[str | None] = mapped_column(String(150), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    range: Mapped["Range"] = relationship("Range", back_populates="districts")
