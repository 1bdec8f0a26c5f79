# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy implementations of the recommendation ports.

Every repository wraps the same AsyncSession handed to it by the unit
of work. Writes only add and flush; committing is the unit of work's job.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.recommendation.records import (
    AttemptRecord,
    CategoryTag,
    ContentCandidate,
    CourseCandidate,
    LessonOutline,
    PathItemDraft,
    RecommendationDraft,
    ResponseRecord,
)
from src.infrastructure.database.models import (
    Assessment,
    AssessmentAttempt,
    ContentBlock,
    ContentEngagement,
    Course,
    CourseCategoryMapping,
    CourseEnrollment,
    LearningAnalytics,
    LearningPath,
    LearningPathItem,
    LearningRecommendation,
    Lesson,
    Student,
    new_id,
)


def _to_content_candidate(block: ContentBlock, course_id: str) -> ContentCandidate:
    return ContentCandidate(
        content_block_id=block.id,
        lesson_id=block.lesson_id,
        course_id=course_id,
        title=block.title,
        content=block.content,
        block_type=block.block_type,
        is_required=block.is_required,
        order_number=block.order_number,
    )


class SqlCatalogRepository:
    """Catalog reads."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_course(self, course_id: str) -> Course | None:
        result = await self.session.execute(select(Course).where(Course.id == course_id))
        return result.scalar_one_or_none()

    async def list_course_candidates(
        self,
        exclude_course_ids: set[str],
        category_id: str | None = None,
        level: str | None = None,
    ) -> list[CourseCandidate]:
        """Published courses outside the exclusion set, in catalog order."""
        query = (
            select(Course)
            .options(
                selectinload(Course.category_mappings).selectinload(CourseCategoryMapping.category)
            )
            .where(Course.is_published.is_(True))
            .order_by(Course.created_at, Course.id)
        )
        if exclude_course_ids:
            query = query.where(Course.id.notin_(sorted(exclude_course_ids)))
        if category_id:
            query = query.where(
                Course.id.in_(
                    select(CourseCategoryMapping.course_id).where(
                        CourseCategoryMapping.category_id == category_id
                    )
                )
            )
        if level:
            query = query.where(Course.level == level)

        result = await self.session.execute(query)
        candidates = []
        for course in result.scalars().all():
            mappings = sorted(course.category_mappings, key=lambda m: m.category.name)
            candidates.append(
                CourseCandidate(
                    course_id=course.id,
                    title=course.title,
                    level=course.level,
                    categories=tuple(
                        CategoryTag(
                            category_id=m.category_id,
                            name=m.category.name,
                            is_primary=m.is_primary,
                        )
                        for m in mappings
                    ),
                )
            )
        return candidates

    async def list_lessons(self, course_id: str) -> list[LessonOutline]:
        """Lessons of a course with their blocks, both in course order."""
        result = await self.session.execute(
            select(Lesson)
            .options(selectinload(Lesson.content_blocks))
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.order_number, Lesson.id)
        )
        return [
            LessonOutline(
                lesson_id=lesson.id,
                title=lesson.title,
                order_number=lesson.order_number,
                content_blocks=tuple(
                    _to_content_candidate(block, course_id) for block in lesson.content_blocks
                ),
            )
            for lesson in result.scalars().all()
        ]

    async def list_content_blocks(self, course_id: str) -> list[ContentCandidate]:
        result = await self.session.execute(
            select(ContentBlock)
            .join(Lesson, ContentBlock.lesson_id == Lesson.id)
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.order_number, ContentBlock.order_number, ContentBlock.id)
        )
        return [_to_content_candidate(block, course_id) for block in result.scalars().all()]


class SqlEngagementRepository:
    """Content engagement progress reads."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_progress(self, student_id: str, content_block_id: str) -> float:
        result = await self.session.execute(
            select(ContentEngagement.progress).where(
                ContentEngagement.student_id == student_id,
                ContentEngagement.content_block_id == content_block_id,
            )
        )
        progress = result.scalar_one_or_none()
        return float(progress) if progress is not None else 0.0

    async def get_progress_map(self, student_id: str, course_id: str) -> dict[str, float]:
        """Progress per content block of a course; blocks never opened are absent."""
        result = await self.session.execute(
            select(ContentEngagement.content_block_id, ContentEngagement.progress)
            .join(ContentBlock, ContentEngagement.content_block_id == ContentBlock.id)
            .join(Lesson, ContentBlock.lesson_id == Lesson.id)
            .where(
                ContentEngagement.student_id == student_id,
                Lesson.course_id == course_id,
            )
        )
        return {block_id: float(progress) for block_id, progress in result.all()}


class SqlAssessmentRepository:
    """Quiz and exam attempt reads."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_attempts(
        self,
        student_id: str,
        course_id: str | None = None,
    ) -> list[AttemptRecord]:
        """Attempts of a student, optionally restricted to one course."""
        query = (
            select(AssessmentAttempt)
            .options(
                selectinload(AssessmentAttempt.responses),
                selectinload(AssessmentAttempt.assessment).selectinload(Assessment.questions),
            )
            .where(AssessmentAttempt.student_id == student_id)
            .order_by(AssessmentAttempt.created_at, AssessmentAttempt.id)
        )
        if course_id is not None:
            query = query.join(Assessment, AssessmentAttempt.assessment_id == Assessment.id).where(
                Assessment.course_id == course_id
            )

        result = await self.session.execute(query)
        return [
            AttemptRecord(
                attempt_id=attempt.id,
                assessment_kind=attempt.assessment.kind,
                responses=tuple(
                    ResponseRecord(
                        question_id=r.question_id,
                        is_correct=r.is_correct,
                        chosen_answer_id=r.chosen_answer_id,
                    )
                    for r in attempt.responses
                ),
                question_topics={q.id: q.topic for q in attempt.assessment.questions},
            )
            for attempt in result.scalars().all()
        ]


class SqlEnrollmentRepository:
    """Student and enrollment reads."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def student_exists(self, student_id: str) -> bool:
        result = await self.session.execute(select(Student.id).where(Student.id == student_id))
        return result.scalar_one_or_none() is not None

    async def get_enrolled_course_ids(self, student_id: str) -> set[str]:
        result = await self.session.execute(
            select(CourseEnrollment.course_id).where(CourseEnrollment.student_id == student_id)
        )
        return set(result.scalars().all())


class SqlAnalyticsRepository:
    """Learning analytics reads."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def has_analytics(self, student_id: str, course_id: str) -> bool:
        result = await self.session.execute(
            select(LearningAnalytics.id)
            .where(
                LearningAnalytics.student_id == student_id,
                LearningAnalytics.course_id == course_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None


class SqlRecommendationRepository:
    """Append-only recommendation store."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_recommendations(self, batch: Sequence[RecommendationDraft]) -> None:
        if not batch:
            return
        self.session.add_all(
            [
                LearningRecommendation(
                    id=new_id(),
                    student_id=draft.student_id,
                    entity_type=draft.entity_type.value,
                    entity_id=draft.entity_id,
                    reason=draft.reason,
                    score=draft.score,
                    meta=dict(draft.metadata),
                )
                for draft in batch
            ]
        )
        await self.session.flush()

    async def list_for_student(
        self,
        student_id: str,
        entity_type: str | None = None,
        limit: int = 10,
    ) -> list[LearningRecommendation]:
        query = select(LearningRecommendation).where(LearningRecommendation.student_id == student_id)
        if entity_type:
            query = query.where(LearningRecommendation.entity_type == entity_type)
        query = query.order_by(
            LearningRecommendation.score.desc(),
            LearningRecommendation.created_at.desc(),
        ).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())


class SqlLearningPathRepository:
    """Learning path headers and items."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_path_header(
        self,
        student_id: str,
        course_id: str,
        title: str,
        description: str | None = None,
    ) -> str:
        path = LearningPath(
            id=new_id(),
            student_id=student_id,
            course_id=course_id,
            title=title,
            description=description,
            is_active=True,
        )
        self.session.add(path)
        await self.session.flush()
        return path.id

    async def add_path_items(self, path_id: str, items: Sequence[PathItemDraft]) -> None:
        """Persist all items of a path in one flush."""
        if not items:
            return
        self.session.add_all(
            [
                LearningPathItem(
                    id=new_id(),
                    learning_path_id=path_id,
                    entity_type=item.entity_type.value,
                    entity_id=item.entity_id,
                    order=item.order,
                    is_required=item.is_required,
                    completion_criteria=dict(item.completion_criteria),
                )
                for item in items
            ]
        )
        await self.session.flush()

    async def get_path(self, path_id: str) -> LearningPath | None:
        result = await self.session.execute(
            select(LearningPath)
            .options(selectinload(LearningPath.items))
            .where(LearningPath.id == path_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_active_paths(self, student_id: str) -> list[LearningPath]:
        """Active paths of a student, newest first."""
        result = await self.session.execute(
            select(LearningPath)
            .options(selectinload(LearningPath.items))
            .where(
                LearningPath.student_id == student_id,
                LearningPath.is_active.is_(True),
            )
            .order_by(LearningPath.created_at.desc(), LearningPath.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
