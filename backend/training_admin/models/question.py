from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from training_admin.db.base import Base
from training_admin.models.mixins import CatalogMixin


class Question(CatalogMixin, Base):
    """Assessment question attached to a topic, optionally narrowed to one of its sub-topics."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.id"), nullable=False, index=True)
    sub_topic_id: Mapped[int | None] = mapped_column(ForeignKey("sub_topics.id"), nullable=True, index=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(32), nullable=False, default="single_choice")
    options: Mapped[list | None] = mapped_column(JSON, nullable=True)  # answer choices, in display order
    answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    topic: Mapped["Topic"] = relationship("Topic", back_populates="questions")
    sub_topic: Mapped["SubTopic | None"] = relationship("SubTopic", back_populates="questions")
