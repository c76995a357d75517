from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class SubTopic(CatalogMixin, Base):
    __tablename__ = "sub_topics"
    __table_args__ = (UniqueConstraint("topic_id", "name", name="uq_sub_topics_topic_id_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    topic: Mapped["Topic"] = relationship("Topic", back_populates="sub_topics")
    questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="sub_topic", order_by="Question.display_order"
    )
