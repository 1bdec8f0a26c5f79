# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Personalized learning path builder.

Builds an ordered, resumable study plan for one student in one course:

1. Validate the course and the student's analytics for it (no writes yet)
2. Create the path header
3. Walk lessons in course order; for every incomplete lesson add the
   lesson (required) followed by its unfinished content blocks
4. Append remediation content for struggling topics as optional items
5. Persist all items in one operation and commit

Steps 2-5 share one unit of work. Each step reports failure through a
PathBuildResult instead of raising; the builder then rolls the unit of
work back so no header, item or remediation recommendation survives.

Item orders are assigned by PathItemSequence and always form 1..N.
"""

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.core.config import RecommendationSettings, get_settings
from src.domains.recommendation.exceptions import (
    CourseNotFoundError,
    LearningPathPersistenceError,
    MissingAnalyticsError,
    RecommendationServiceError,
)
from src.domains.recommendation.interfaces import RecommendationUnitOfWork
from src.domains.recommendation.reader import LearningPathReader
from src.domains.recommendation.records import LessonOutline, PathItemDraft, PathItemEntityType
from src.domains.recommendation.service import RecommendationService
from src.infrastructure.database.connection import DatabaseError
from src.models.recommendation import LearningPathResponse
from src.utils.logging import log_context

logger = logging.getLogger(__name__)

COMPLETE_PROGRESS = 100.0
PATH_DESCRIPTION = "Automatically generated based on your learning profile"


def path_title(course_id: str) -> str:
    """Default title of a generated path."""
    return f"Personalized path for Course #{course_id}"


def completion_criteria() -> dict[str, Any]:
    """Criteria every generated item carries."""
    return {"required_progress": int(COMPLETE_PROGRESS)}


class PathItemSequence:
    """Flat, densely ordered list of path items.

    Orders are handed out on append, so the sequence is always 1..N
    with no gaps or repeats.
    """

    def __init__(self) -> None:
        self._items: list[PathItemDraft] = []
        self._keys: set[tuple[PathItemEntityType, str]] = set()

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> tuple[PathItemDraft, ...]:
        return tuple(self._items)

    def contains(self, entity_type: PathItemEntityType, entity_id: str) -> bool:
        return (entity_type, entity_id) in self._keys

    def append(
        self,
        entity_type: PathItemEntityType,
        entity_id: str,
        is_required: bool,
    ) -> PathItemDraft:
        """Add an item at the next order slot."""
        item = PathItemDraft(
            entity_type=entity_type,
            entity_id=entity_id,
            order=len(self._items) + 1,
            is_required=is_required,
            completion_criteria=completion_criteria(),
        )
        self._items.append(item)
        self._keys.add((entity_type, entity_id))
        return item


@dataclass
class PathBuildResult:
    """Outcome of the write steps of a path build.

    Attributes:
        success: Whether every step succeeded.
        path_id: Id of the created header, when one was created.
        items: Items that were (or would have been) persisted.
        error: The exception that stopped the build.
    """

    success: bool
    path_id: str | None = None
    items: tuple[PathItemDraft, ...] = field(default_factory=tuple)
    error: Exception | None = None

    @property
    def required_count(self) -> int:
        return sum(1 for item in self.items if item.is_required)


class LearningPathBuilder:
    """Builds and atomically stores personalized learning paths.

    Attributes:
        uow: Unit of work shared by every step of a build.
        settings: Scoring settings forwarded to the recommendation service.
    """

    def __init__(
        self,
        uow: RecommendationUnitOfWork,
        settings: RecommendationSettings | None = None,
    ) -> None:
        self.uow = uow
        self.settings = settings or get_settings().recommendation
        self.recommendations = RecommendationService(uow, self.settings)
        self.reader = LearningPathReader(uow, self.settings)

    async def generate_learning_path(
        self,
        student_id: UUID | str,
        course_id: UUID | str,
    ) -> LearningPathResponse:
        """Generate a new learning path for a student in a course.

        Older paths are left untouched, including their active flag.

        Args:
            student_id: Student identifier.
            course_id: Course identifier.

        Returns:
            The stored path with its items in order.

        Raises:
            CourseNotFoundError: If course not found.
            MissingAnalyticsError: If the student has no analytics for the course.
            LearningPathPersistenceError: If the path could not be stored.
        """
        student_id, course_id = str(student_id), str(course_id)
        with log_context(student_id=student_id, course_id=course_id):
            return await self._generate(student_id, course_id)

    async def _generate(self, student_id: str, course_id: str) -> LearningPathResponse:
        await self._validate(student_id, course_id)

        result = await self._build(student_id, course_id)
        if not result.success:
            await self.uow.rollback()
            logger.warning("Learning path build rolled back: error=%s", result.error)
            if isinstance(result.error, RecommendationServiceError):
                raise result.error
            raise LearningPathPersistenceError(
                f"Error generating personalized learning path: {result.error}",
                result.error,
            ) from result.error

        try:
            await self.uow.commit()
        except DatabaseError as e:
            raise LearningPathPersistenceError(
                f"Error generating personalized learning path: {e}", e
            ) from e

        logger.info(
            "Generated learning path: path=%s, items=%d, required=%d",
            result.path_id,
            len(result.items),
            result.required_count,
        )
        return await self.reader.get_learning_path(result.path_id)

    async def _validate(self, student_id: str, course_id: str) -> None:
        if await self.uow.catalog.get_course(course_id) is None:
            raise CourseNotFoundError(f"Course not found: {course_id}")
        if not await self.uow.analytics.has_analytics(student_id, course_id):
            raise MissingAnalyticsError(
                "Learning analytics not found for this student and course"
            )

    async def _build(self, student_id: str, course_id: str) -> PathBuildResult:
        """Run the write steps, reporting any failure as a result."""
        path_id: str | None = None
        sequence = PathItemSequence()
        try:
            path_id = await self.uow.paths.create_path_header(
                student_id=student_id,
                course_id=course_id,
                title=path_title(course_id),
                description=PATH_DESCRIPTION,
            )
            await self._add_incomplete_lessons(student_id, course_id, sequence)
            await self._add_remediation(student_id, course_id, sequence)
            await self.uow.paths.add_path_items(path_id, sequence.items)
        except Exception as e:
            return PathBuildResult(success=False, path_id=path_id, items=sequence.items, error=e)
        return PathBuildResult(success=True, path_id=path_id, items=sequence.items)

    async def _add_incomplete_lessons(
        self,
        student_id: str,
        course_id: str,
        sequence: PathItemSequence,
    ) -> None:
        lessons = await self.uow.catalog.list_lessons(course_id)
        progress = await self.uow.engagement.get_progress_map(student_id, course_id)

        for lesson in lessons:
            if self._lesson_complete(lesson, progress):
                continue
            sequence.append(PathItemEntityType.LESSON, lesson.lesson_id, is_required=True)
            for block in lesson.content_blocks:
                if progress.get(block.content_block_id, 0.0) < COMPLETE_PROGRESS:
                    sequence.append(
                        PathItemEntityType.CONTENT_BLOCK,
                        block.content_block_id,
                        is_required=block.is_required,
                    )

    async def _add_remediation(
        self,
        student_id: str,
        course_id: str,
        sequence: PathItemSequence,
    ) -> None:
        recommended = await self.recommendations.generate_content_recommendations(
            student_id, course_id, commit=False
        )
        for item in recommended:
            block_id = item.candidate.content_block_id
            if sequence.contains(PathItemEntityType.CONTENT_BLOCK, block_id):
                continue
            sequence.append(PathItemEntityType.CONTENT_BLOCK, block_id, is_required=False)

    @staticmethod
    def _lesson_complete(lesson: LessonOutline, progress: dict[str, float]) -> bool:
        return all(
            progress.get(block.content_block_id, 0.0) >= COMPLETE_PROGRESS
            for block in lesson.content_blocks
        )
