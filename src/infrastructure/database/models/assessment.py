# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz and exam models.

Quizzes and exams share one set of tables distinguished by
Assessment.kind. Attempts and responses are written by the assessment
runtime and never modified afterwards.
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IdMixin, TimestampMixin


class Assessment(IdMixin, TimestampMixin, Base):
    """A quiz or an exam belonging to a course."""

    __tablename__ = "assessments"

    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(10), nullable=False, default="quiz")
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    questions: Mapped[list["AssessmentQuestion"]] = relationship(
        back_populates="assessment",
        cascade="all, delete-orphan",
        order_by="AssessmentQuestion.order_number",
    )


class AssessmentQuestion(IdMixin, Base):
    """A question; `topic` groups it for performance aggregation."""

    __tablename__ = "assessment_questions"

    assessment_id: Mapped[str] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    topic: Mapped[str | None] = mapped_column(String(200), nullable=True)
    order_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    assessment: Mapped[Assessment] = relationship(back_populates="questions")


class AssessmentAttempt(IdMixin, TimestampMixin, Base):
    """One student's attempt at an assessment."""

    __tablename__ = "assessment_attempts"

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assessment_id: Mapped[str] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    assessment: Mapped[Assessment] = relationship()
    responses: Mapped[list["AssessmentResponse"]] = relationship(
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="AssessmentResponse.position",
    )


class AssessmentResponse(IdMixin, Base):
    """A single answered question inside an attempt."""

    __tablename__ = "assessment_responses"

    attempt_id: Mapped[str] = mapped_column(
        ForeignKey("assessment_attempts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id: Mapped[str] = mapped_column(String(36), nullable=False)
    chosen_answer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    attempt: Mapped[AssessmentAttempt] = relationship(back_populates="responses")
