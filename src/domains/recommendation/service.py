# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recommendation service.

This module provides the RecommendationService class for:
- Course recommendations from a student's strength/weakness profile
- Content recommendations for topics a student is struggling with

Every generation run appends new recommendation rows; older rows are
kept as history and never deduplicated.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.core.config import RecommendationSettings, get_settings
from src.domains.recommendation.exceptions import (
    CourseNotFoundError,
    RecommendationValidationError,
    StudentNotFoundError,
)
from src.domains.recommendation.interfaces import RecommendationUnitOfWork
from src.domains.recommendation.records import RecommendationDraft, RecommendationEntityType
from src.domains.recommendation.scoring import (
    ContentScorer,
    CourseScorer,
    ScoredContent,
    ScoredCourse,
)
from src.domains.recommendation.topics import TopicPerformanceAggregator
from src.infrastructure.database.connection import DatabaseError

logger = logging.getLogger(__name__)

COURSE_REASON = "Based on your learning profile and areas for improvement"
CONTENT_REASON = "Based on topics you may need additional help with"


def resolve_limit(limit: int | None, default: int) -> int:
    """Return the caller-supplied limit, or the default when none is given.

    Zero is a valid limit and yields no results.

    Raises:
        RecommendationValidationError: If the limit is negative.
    """
    if limit is None:
        return default
    if limit < 0:
        raise RecommendationValidationError(f"Limit must not be negative: {limit}")
    return limit


class RecommendationService:
    """Service generating and storing course and content recommendations.

    Attributes:
        uow: Unit of work providing every collaborator port.
        settings: Scoring thresholds and limits.
    """

    def __init__(
        self,
        uow: RecommendationUnitOfWork,
        settings: RecommendationSettings | None = None,
    ) -> None:
        """Initialize recommendation service.

        Args:
            uow: Unit of work shared with any caller in the same scope.
            settings: Scoring settings; defaults to application settings.
        """
        self.uow = uow
        self.settings = settings or get_settings().recommendation
        self.aggregator = TopicPerformanceAggregator(
            struggling_threshold=self.settings.struggling_threshold,
            strength_threshold=self.settings.strength_threshold,
        )
        self.course_scorer = CourseScorer(self.settings)
        self.content_scorer = ContentScorer(self.settings)

    async def generate_course_recommendations(
        self,
        student_id: UUID | str,
        limit: int | None = None,
        category_id: UUID | str | None = None,
        level: str | None = None,
        commit: bool = True,
    ) -> list[ScoredCourse]:
        """Recommend courses the student is not enrolled in.

        Args:
            student_id: Student identifier.
            limit: Maximum number of courses; defaults to settings.
            category_id: Only consider courses in this category.
            level: Only consider courses of this level.
            commit: Commit the unit of work after writing.

        Returns:
            Top courses by score, each with a persisted recommendation.

        Raises:
            RecommendationValidationError: If the limit is negative.
            StudentNotFoundError: If student not found.
            DatabaseError: If reading or writing fails.
        """
        student_id = str(student_id)
        limit = resolve_limit(limit, self.settings.course_limit)

        try:
            await self._ensure_student(student_id)

            enrolled = await self.uow.enrollment.get_enrolled_course_ids(student_id)
            attempts = await self.uow.assessments.get_attempts(student_id)
            profile = self.aggregator.build_profile(attempts)

            candidates = await self.uow.catalog.list_course_candidates(
                enrolled,
                category_id=str(category_id) if category_id else None,
                level=level,
            )
            ranked = self.course_scorer.rank(
                candidates, profile.strengths, profile.struggling, limit
            )

            await self.uow.recommendations.create_recommendations(
                [
                    RecommendationDraft(
                        student_id=student_id,
                        entity_type=RecommendationEntityType.COURSE,
                        entity_id=item.candidate.course_id,
                        reason=COURSE_REASON,
                        score=item.score,
                        metadata={
                            "strengths": list(profile.strengths),
                            "weaknesses": list(profile.struggling),
                            "course_level": item.candidate.level,
                            "course_categories": [c.name for c in item.candidate.categories],
                        },
                    )
                    for item in ranked
                ]
            )
            if commit:
                await self.uow.commit()
        except SQLAlchemyError as e:
            if commit:
                await self.uow.rollback()
            raise DatabaseError("Error generating course recommendations", e) from e

        logger.info(
            "Generated course recommendations: student=%s, candidates=%d, returned=%d",
            student_id,
            len(candidates),
            len(ranked),
        )
        return ranked

    async def generate_content_recommendations(
        self,
        student_id: UUID | str,
        course_id: UUID | str,
        limit: int | None = None,
        commit: bool = True,
    ) -> list[ScoredContent]:
        """Recommend course content covering the student's struggling topics.

        Args:
            student_id: Student identifier.
            course_id: Course whose attempts and content are considered.
            limit: Maximum number of content blocks; defaults to settings.
            commit: Commit the unit of work after writing. The path
                builder passes False so the rows share its transaction.

        Returns:
            Top content blocks by score, each with a persisted
            recommendation. Empty when nothing is struggling.

        Raises:
            StudentNotFoundError: If student not found.
            CourseNotFoundError: If course not found.
            RecommendationValidationError: If the limit is negative.
            DatabaseError: If reading or writing fails.
        """
        student_id, course_id = str(student_id), str(course_id)
        limit = resolve_limit(limit, self.settings.content_limit)

        try:
            await self._ensure_student(student_id)
            if await self.uow.catalog.get_course(course_id) is None:
                raise CourseNotFoundError(f"Course not found: {course_id}")

            attempts = await self.uow.assessments.get_attempts(student_id, course_id)
            struggling = self.aggregator.build_profile(attempts).struggling
            if not struggling:
                logger.debug(
                    "No struggling topics: student=%s, course=%s", student_id, course_id
                )
                return []

            blocks = await self.uow.catalog.list_content_blocks(course_id)
            ranked = self.content_scorer.rank(blocks, struggling, limit)

            await self.uow.recommendations.create_recommendations(
                [
                    RecommendationDraft(
                        student_id=student_id,
                        entity_type=RecommendationEntityType.CONTENT_BLOCK,
                        entity_id=item.candidate.content_block_id,
                        reason=CONTENT_REASON,
                        score=item.score,
                        metadata={
                            "struggling_topics": list(struggling),
                            "lesson_id": item.candidate.lesson_id,
                            "course_id": course_id,
                        },
                    )
                    for item in ranked
                ]
            )
            if commit:
                await self.uow.commit()
        except SQLAlchemyError as e:
            if commit:
                await self.uow.rollback()
            raise DatabaseError("Error generating content recommendations", e) from e

        logger.info(
            "Generated content recommendations: student=%s, course=%s, topics=%s, returned=%d",
            student_id,
            course_id,
            struggling,
            len(ranked),
        )
        return ranked

    async def _ensure_student(self, student_id: str) -> None:
        if not await self.uow.enrollment.student_exists(student_id):
            raise StudentNotFoundError(f"Student not found: {student_id}")
