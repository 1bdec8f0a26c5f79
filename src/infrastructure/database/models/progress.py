# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engagement progress and learning analytics models.

Both tables are maintained by the engagement tracker and the analytics
pipeline. The recommendation engine only reads them.
"""

from decimal import Decimal

from sqlalchemy import Float, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, IdMixin, TimestampMixin


class ContentEngagement(IdMixin, TimestampMixin, Base):
    """Per-student progress on one content block (0-100)."""

    __tablename__ = "content_engagements"
    __table_args__ = (
        UniqueConstraint("student_id", "content_block_id", name="uq_engagement_student_block"),
    )

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content_block_id: Mapped[str] = mapped_column(
        ForeignKey("content_blocks.id", ondelete="CASCADE"),
        nullable=False,
    )
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class LearningAnalytics(IdMixin, TimestampMixin, Base):
    """Summary analytics for a student in a course."""

    __tablename__ = "learning_analytics"

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    completion_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    average_score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    mastery_level: Mapped[str] = mapped_column(String(20), nullable=False, default="not_assessed")
