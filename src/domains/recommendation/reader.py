# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read accessors for learning paths and recommendations.

All methods are pure queries: nothing is written and the unit of work
is never committed.
"""

from uuid import UUID

from src.core.config import RecommendationSettings, get_settings
from src.domains.recommendation.exceptions import LearningPathNotFoundError
from src.domains.recommendation.interfaces import RecommendationUnitOfWork
from src.domains.recommendation.records import RecommendationEntityType
from src.domains.recommendation.service import resolve_limit
from src.infrastructure.database.models import LearningPath, LearningRecommendation
from src.models.recommendation import (
    LearningPathItemResponse,
    LearningPathResponse,
    RecommendationResponse,
)
from src.utils.datetime import ensure_utc


class LearningPathReader:
    """Queries generated learning paths and standing recommendations."""

    def __init__(
        self,
        uow: RecommendationUnitOfWork,
        settings: RecommendationSettings | None = None,
    ) -> None:
        self.uow = uow
        self.settings = settings or get_settings().recommendation

    async def get_learning_path(self, path_id: UUID | str) -> LearningPathResponse:
        """Get a learning path with its items in order.

        Raises:
            LearningPathNotFoundError: If no path has this id.
        """
        path = await self.uow.paths.get_path(str(path_id))
        if path is None:
            raise LearningPathNotFoundError(f"Learning path not found: {path_id}")
        return self._to_path_response(path)

    async def get_student_learning_paths(self, student_id: UUID | str) -> list[LearningPathResponse]:
        """Active learning paths of a student, newest first."""
        paths = await self.uow.paths.list_active_paths(str(student_id))
        return [self._to_path_response(path) for path in paths]

    async def get_student_recommendations(
        self,
        student_id: UUID | str,
        entity_type: RecommendationEntityType | str | None = None,
        limit: int | None = None,
    ) -> list[RecommendationResponse]:
        """Recommendations of a student, highest score first.

        Args:
            student_id: Student identifier.
            entity_type: Only return this entity type (course or contentBlock).
            limit: Maximum rows; defaults to settings (10). Zero returns nothing.

        Raises:
            RecommendationValidationError: If the limit is negative.
        """
        limit = resolve_limit(limit, self.settings.read_limit)
        if limit == 0:
            return []
        if isinstance(entity_type, RecommendationEntityType):
            entity_type = entity_type.value
        rows = await self.uow.recommendations.list_for_student(
            str(student_id),
            entity_type=entity_type,
            limit=limit,
        )
        return [self._to_recommendation_response(row) for row in rows]

    def _to_path_response(self, path: LearningPath) -> LearningPathResponse:
        return LearningPathResponse(
            id=path.id,
            student_id=path.student_id,
            course_id=path.course_id,
            title=path.title,
            description=path.description,
            is_active=path.is_active,
            created_at=ensure_utc(path.created_at) if path.created_at else None,
            items=[
                LearningPathItemResponse(
                    id=item.id,
                    entity_type=item.entity_type,
                    entity_id=item.entity_id,
                    order=item.order,
                    is_required=item.is_required,
                    completion_criteria=dict(item.completion_criteria or {}),
                )
                for item in sorted(path.items, key=lambda i: i.order)
            ],
        )

    def _to_recommendation_response(self, row: LearningRecommendation) -> RecommendationResponse:
        return RecommendationResponse(
            id=row.id,
            student_id=row.student_id,
            entity_type=row.entity_type,
            entity_id=row.entity_id,
            reason=row.reason,
            score=row.score,
            metadata=dict(row.meta or {}),
            created_at=ensure_utc(row.created_at) if row.created_at else None,
        )
