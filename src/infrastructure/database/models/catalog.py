# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog models.

These tables are owned by the course/enrollment CRUD layer and are
read-only to the recommendation engine:
- Students and their course enrollments
- Courses, categories and the course/category mapping
- Lessons and their ordered content blocks
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IdMixin, TimestampMixin


class Student(IdMixin, TimestampMixin, Base):
    """A learner known to the platform."""

    __tablename__ = "students"

    display_name: Mapped[str] = mapped_column(String(200), nullable=False)

    enrollments: Mapped[list["CourseEnrollment"]] = relationship(
        back_populates="student",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Student {self.id} {self.display_name!r}>"


class Course(IdMixin, TimestampMixin, Base):
    """A course offered in the catalog."""

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[str] = mapped_column(String(20), nullable=False, default="beginner")
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    category_mappings: Mapped[list["CourseCategoryMapping"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
    )
    lessons: Mapped[list["Lesson"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Lesson.order_number",
    )

    def __repr__(self) -> str:
        return f"<Course {self.id} {self.title!r} level={self.level}>"


class CourseCategory(IdMixin, Base):
    """A catalog category such as 'Mathematics'."""

    __tablename__ = "course_categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class CourseCategoryMapping(Base):
    """Links a course to a category; one mapping may be primary."""

    __tablename__ = "course_category_mappings"

    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[str] = mapped_column(
        ForeignKey("course_categories.id", ondelete="CASCADE"),
        primary_key=True,
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    course: Mapped[Course] = relationship(back_populates="category_mappings")
    category: Mapped[CourseCategory] = relationship()


class CourseEnrollment(IdMixin, TimestampMixin, Base):
    """A student's enrollment in a course."""

    __tablename__ = "course_enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    student: Mapped[Student] = relationship(back_populates="enrollments")


class Lesson(IdMixin, TimestampMixin, Base):
    """An ordered unit of a course."""

    __tablename__ = "lessons"

    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    order_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    course: Mapped[Course] = relationship(back_populates="lessons")
    content_blocks: Mapped[list["ContentBlock"]] = relationship(
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="ContentBlock.order_number",
    )


class ContentBlock(IdMixin, TimestampMixin, Base):
    """A lesson sub-unit: text, video, interactive exercise and so on."""

    __tablename__ = "content_blocks"

    lesson_id: Mapped[str] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    block_type: Mapped[str] = mapped_column(String(30), nullable=False, default="text")
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    lesson: Mapped[Lesson] = relationship(back_populates="content_blocks")
