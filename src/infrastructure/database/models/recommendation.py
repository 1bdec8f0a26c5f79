# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recommendation and learning-path models.

These tables are written only by the recommendation engine. Rows are
never updated in place: every generation run appends new rows.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IdMixin, TimestampMixin
from src.utils.datetime import utc_now


class LearningRecommendation(IdMixin, Base):
    """A scored course or content suggestion for a student."""

    __tablename__ = "learning_recommendations"
    __table_args__ = (
        Index("ix_recommendations_student_score", "student_id", "score"),
    )

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    # "metadata" is reserved on declarative classes
    meta: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return (
            f"<LearningRecommendation {self.entity_type}:{self.entity_id} "
            f"student={self.student_id} score={self.score}>"
        )


class LearningPath(IdMixin, TimestampMixin, Base):
    """A generated study plan for one student in one course."""

    __tablename__ = "learning_paths"
    __table_args__ = (
        Index("ix_learning_paths_student_active", "student_id", "is_active"),
    )

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    items: Mapped[list["LearningPathItem"]] = relationship(
        back_populates="learning_path",
        cascade="all, delete-orphan",
        order_by="LearningPathItem.order",
    )

    def __repr__(self) -> str:
        return f"<LearningPath {self.id} student={self.student_id} course={self.course_id}>"


class LearningPathItem(IdMixin, Base):
    """One ordered lesson or content block inside a learning path."""

    __tablename__ = "learning_path_items"
    __table_args__ = (
        UniqueConstraint("learning_path_id", "order", name="uq_path_item_order"),
    )

    learning_path_id: Mapped[str] = mapped_column(
        ForeignKey("learning_paths.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    completion_criteria: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    learning_path: Mapped[LearningPath] = relationship(back_populates="items")
