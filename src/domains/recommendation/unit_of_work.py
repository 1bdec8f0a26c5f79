# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit of work binding every recommendation port to one session.

A unit of work is the explicit atomic scope of the engine: all reads and
writes made through its repositories belong to the same database
transaction, and nothing is visible to other sessions until commit().

Example:
    from src.domains.recommendation.unit_of_work import unit_of_work

    async with unit_of_work() as uow:
        builder = LearningPathBuilder(uow)
        path = await builder.generate_learning_path(student_id, course_id)
"""

import logging
from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domains.recommendation.repositories import (
    SqlAnalyticsRepository,
    SqlAssessmentRepository,
    SqlCatalogRepository,
    SqlEngagementRepository,
    SqlEnrollmentRepository,
    SqlLearningPathRepository,
    SqlRecommendationRepository,
)
from src.infrastructure.database.connection import DatabaseError, get_sessionmaker

logger = logging.getLogger(__name__)


class SqlUnitOfWork:
    """SQLAlchemy-backed unit of work.

    Attributes:
        session: The session every repository shares.
        catalog: Course catalog reads.
        engagement: Content progress reads.
        assessments: Attempt history reads.
        enrollment: Student and enrollment reads.
        analytics: Learning analytics reads.
        recommendations: Recommendation store.
        paths: Learning path store.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.catalog = SqlCatalogRepository(session)
        self.engagement = SqlEngagementRepository(session)
        self.assessments = SqlAssessmentRepository(session)
        self.enrollment = SqlEnrollmentRepository(session)
        self.analytics = SqlAnalyticsRepository(session)
        self.recommendations = SqlRecommendationRepository(session)
        self.paths = SqlLearningPathRepository(session)

    async def commit(self) -> None:
        """Commit every pending write.

        Raises:
            DatabaseError: If the commit fails. The session is rolled back.
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError("Failed to commit unit of work", e) from e

    async def rollback(self) -> None:
        """Discard every pending write."""
        await self.session.rollback()

    async def __aenter__(self) -> "SqlUnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@asynccontextmanager
async def unit_of_work(
    sessionmaker: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[SqlUnitOfWork]:
    """Open a session and wrap it in a unit of work.

    Nothing is committed implicitly: callers commit through the unit of
    work. Uncommitted writes are rolled back when the block exits with an
    exception and discarded when the session closes.

    Args:
        sessionmaker: Session factory; defaults to the initialized database.

    Yields:
        A fresh SqlUnitOfWork.
    """
    factory = sessionmaker or get_sessionmaker()
    async with factory() as session:
        async with SqlUnitOfWork(session) as uow:
            yield uow
