# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Collaborator ports used by the recommendation engine.

The engine never reaches for a global session or model registry. Every
read and write goes through one of these protocols, bundled together
by a unit of work (see unit_of_work.py).
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from src.domains.recommendation.records import (
    AttemptRecord,
    ContentCandidate,
    CourseCandidate,
    LessonOutline,
    PathItemDraft,
    RecommendationDraft,
)

if TYPE_CHECKING:
    from src.infrastructure.database.models import (
        Course,
        LearningPath,
        LearningRecommendation,
    )


class CatalogReader(Protocol):
    """Course, lesson and content-block catalog."""

    async def get_course(self, course_id: str) -> "Course | None": ...

    async def list_course_candidates(
        self,
        exclude_course_ids: set[str],
        category_id: str | None = None,
        level: str | None = None,
    ) -> list[CourseCandidate]: ...

    async def list_lessons(self, course_id: str) -> list[LessonOutline]: ...

    async def list_content_blocks(self, course_id: str) -> list[ContentCandidate]: ...


class EngagementReader(Protocol):
    """Per-student content progress (0-100)."""

    async def get_progress(self, student_id: str, content_block_id: str) -> float: ...

    async def get_progress_map(self, student_id: str, course_id: str) -> dict[str, float]: ...


class AssessmentReader(Protocol):
    """Quiz and exam attempt history."""

    async def get_attempts(
        self,
        student_id: str,
        course_id: str | None = None,
    ) -> list[AttemptRecord]: ...


class EnrollmentReader(Protocol):
    """Students and their enrollments."""

    async def student_exists(self, student_id: str) -> bool: ...

    async def get_enrolled_course_ids(self, student_id: str) -> set[str]: ...


class AnalyticsReader(Protocol):
    """Learning analytics rows."""

    async def has_analytics(self, student_id: str, course_id: str) -> bool: ...


class RecommendationWriter(Protocol):
    """Append-only recommendation store."""

    async def create_recommendations(self, batch: Sequence[RecommendationDraft]) -> None: ...

    async def list_for_student(
        self,
        student_id: str,
        entity_type: str | None = None,
        limit: int = 10,
    ) -> list["LearningRecommendation"]: ...


class LearningPathWriter(Protocol):
    """Learning path headers and items."""

    async def create_path_header(
        self,
        student_id: str,
        course_id: str,
        title: str,
        description: str | None = None,
    ) -> str: ...

    async def add_path_items(self, path_id: str, items: Sequence[PathItemDraft]) -> None: ...

    async def get_path(self, path_id: str) -> "LearningPath | None": ...

    async def list_active_paths(self, student_id: str) -> list["LearningPath"]: ...


class RecommendationUnitOfWork(Protocol):
    """All ports sharing one atomic scope."""

    catalog: CatalogReader
    engagement: EngagementReader
    assessments: AssessmentReader
    enrollment: EnrollmentReader
    analytics: AnalyticsReader
    recommendations: RecommendationWriter
    paths: LearningPathWriter

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
