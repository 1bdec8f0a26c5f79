# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Provides a throwaway learning database seeded with a small catalog.
Tests run against a file-backed SQLite database by default; set
TEST_DATABASE_URL to run them against PostgreSQL instead.
"""

import os

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.infrastructure.database.models import (
    Assessment,
    AssessmentAttempt,
    AssessmentQuestion,
    AssessmentResponse,
    ContentBlock,
    ContentEngagement,
    Course,
    CourseCategory,
    CourseCategoryMapping,
    CourseEnrollment,
    LearningAnalytics,
    Lesson,
    Student,
)
from src.infrastructure.database.models.base import Base


@pytest.fixture
def db_url(tmp_path) -> str:
    """Get database URL for tests."""
    return os.environ.get("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/learnpath_test.db")


@pytest_asyncio.fixture(scope="function")
async def db_engine(db_url: str):
    """Create async engine with a fresh schema."""
    engine = create_async_engine(db_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine) -> async_sessionmaker[AsyncSession]:
    """Create a sessionmaker matching the application configuration."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def seed_catalog(session: AsyncSession) -> None:
    """Seed two students and a small catalog.

    student-1 is enrolled in course-1, half way through it, and failed
    the only fractions question of its quiz. student-2 finished every
    block of course-1 and never took a quiz.
    """
    session.add_all(
        [
            Student(id="student-1", display_name="Ada"),
            Student(id="student-2", display_name="Grace"),
            CourseCategory(id="cat-math", name="Mathematics"),
            CourseCategory(id="cat-sci", name="Science"),
            CourseCategory(id="cat-art", name="Art"),
        ]
    )
    await session.flush()

    session.add_all(
        [
            Course(id="course-1", title="Numbers", level="beginner", is_published=True),
            Course(id="course-2", title="Applied Maths", level="advanced", is_published=True),
            Course(id="course-3", title="Draft", level="intermediate", is_published=False),
            Course(id="course-4", title="Drawing", level="beginner", is_published=True),
        ]
    )
    await session.flush()

    session.add_all(
        [
            CourseCategoryMapping(course_id="course-1", category_id="cat-math", is_primary=True),
            CourseCategoryMapping(course_id="course-2", category_id="cat-math", is_primary=True),
            CourseCategoryMapping(course_id="course-2", category_id="cat-sci", is_primary=True),
            CourseCategoryMapping(course_id="course-3", category_id="cat-math", is_primary=True),
            CourseCategoryMapping(course_id="course-4", category_id="cat-art", is_primary=False),
            CourseEnrollment(student_id="student-1", course_id="course-1", status="active"),
            Lesson(id="lesson-1", course_id="course-1", title="Counting", order_number=1),
            Lesson(id="lesson-2", course_id="course-1", title="Shapes", order_number=2),
            Lesson(id="lesson-3", course_id="course-1", title="Practice", order_number=3),
        ]
    )
    await session.flush()

    session.add_all(
        [
            ContentBlock(id="block-1", lesson_id="lesson-1", title="Intro to numbers", order_number=1),
            ContentBlock(
                id="block-2",
                lesson_id="lesson-1",
                title="Adding fractions",
                content="fractions basics",
                block_type="text",
                order_number=2,
            ),
            ContentBlock(
                id="block-3",
                lesson_id="lesson-2",
                title="Geometry shapes",
                block_type="video",
                order_number=1,
            ),
            ContentBlock(
                id="block-4",
                lesson_id="lesson-2",
                title="Optional reading",
                is_required=False,
                order_number=2,
            ),
            ContentBlock(
                id="block-5",
                lesson_id="lesson-3",
                title="Fractions drill",
                block_type="interactive",
                order_number=1,
            ),
            ContentBlock(id="block-6", lesson_id="lesson-3", title="Summary", order_number=2),
            Assessment(id="quiz-1", course_id="course-1", kind="quiz", title="Checkpoint"),
        ]
    )
    await session.flush()

    session.add_all(
        [
            AssessmentQuestion(id="q1", assessment_id="quiz-1", topic="fractions", order_number=1),
            AssessmentQuestion(id="q2", assessment_id="quiz-1", topic="geometry", order_number=2),
            AssessmentQuestion(id="q3", assessment_id="quiz-1", topic=None, order_number=3),
            AssessmentAttempt(id="attempt-1", student_id="student-1", assessment_id="quiz-1"),
            LearningAnalytics(student_id="student-1", course_id="course-1"),
            LearningAnalytics(student_id="student-2", course_id="course-1"),
        ]
    )
    for block_id, progress in [
        ("block-1", 100.0),
        ("block-2", 50.0),
        ("block-4", 100.0),
        ("block-5", 100.0),
        ("block-6", 100.0),
    ]:
        session.add(
            ContentEngagement(student_id="student-1", content_block_id=block_id, progress=progress)
        )
    for i in range(1, 7):
        session.add(
            ContentEngagement(student_id="student-2", content_block_id=f"block-{i}", progress=100.0)
        )
    await session.flush()

    session.add_all(
        [
            AssessmentResponse(attempt_id="attempt-1", question_id="q1", is_correct=False, position=1),
            AssessmentResponse(attempt_id="attempt-1", question_id="q2", is_correct=True, position=2),
            AssessmentResponse(attempt_id="attempt-1", question_id="q3", is_correct=True, position=3),
        ]
    )
    await session.commit()


@pytest_asyncio.fixture(scope="function")
async def seeded_sessionmaker(db_sessionmaker) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker over a database holding the seed catalog."""
    async with db_sessionmaker() as session:
        await seed_catalog(session)
    return db_sessionmaker
