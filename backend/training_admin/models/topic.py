from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class Topic(CatalogMixin, Base):
    __tablename__ = "topics"
    __table_args__ = (UniqueConstraint("module_id", "name", name="uq_topics_module_id_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    module_id: Mapped[int] = mapped_column(ForeignKey("modules.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    module: Mapped["Module"] = relationship("Module", back_populates="topics")
    sub_topics: Mapped[list["SubTopic"]] = relationship(
        "SubTopic", back_populates="topic", order_by="SubTopic.display_order"
    )
    questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="topic", order_by="Question.display_order"
    )
