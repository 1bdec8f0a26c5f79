# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for learning path builder."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from sqlalchemy.exc import SQLAlchemyError

from src.domains.recommendation.exceptions import (
    CourseNotFoundError,
    LearningPathPersistenceError,
    MissingAnalyticsError,
    RecommendationNotFoundError,
    RecommendationValidationError,
)
from src.domains.recommendation.path_builder import (
    PATH_DESCRIPTION,
    LearningPathBuilder,
    PathBuildResult,
    PathItemSequence,
    path_title,
)
from src.domains.recommendation.records import (
    AttemptRecord,
    ContentCandidate,
    LessonOutline,
    PathItemEntityType,
    ResponseRecord,
)
from src.infrastructure.database.connection import DatabaseError


def block(block_id, lesson_id, title="Block", content=None, block_type="text", is_required=True):
    return ContentCandidate(
        content_block_id=block_id,
        lesson_id=lesson_id,
        course_id="course-1",
        title=title,
        content=content,
        block_type=block_type,
        is_required=is_required,
    )


LESSONS = [
    LessonOutline(
        lesson_id="lesson-1",
        title="Numbers",
        order_number=1,
        content_blocks=(
            block("block-1", "lesson-1", "Intro to numbers"),
            block("block-2", "lesson-1", "Adding fractions", content="fractions basics"),
        ),
    ),
    LessonOutline(
        lesson_id="lesson-2",
        title="Shapes",
        order_number=2,
        content_blocks=(
            block("block-3", "lesson-2", "Geometry shapes", block_type="video"),
            block("block-4", "lesson-2", "Optional reading", is_required=False),
        ),
    ),
    LessonOutline(
        lesson_id="lesson-3",
        title="Practice",
        order_number=3,
        content_blocks=(
            block("block-5", "lesson-3", "Fractions drill", block_type="interactive"),
            block("block-6", "lesson-3", "Summary"),
        ),
    ),
]

PROGRESS = {
    "block-1": 100.0,
    "block-2": 50.0,
    "block-4": 100.0,
    "block-5": 100.0,
    "block-6": 100.0,
}

FRACTIONS_ATTEMPT = AttemptRecord(
    attempt_id="attempt-1",
    assessment_kind="quiz",
    responses=(ResponseRecord(question_id="q1", is_correct=False),),
    question_topics={"q1": "fractions"},
)


def make_path_row(path_id="path-1"):
    row = MagicMock()
    row.id = path_id
    row.student_id = "student-1"
    row.course_id = "course-1"
    row.title = path_title("course-1")
    row.description = PATH_DESCRIPTION
    row.is_active = True
    row.created_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    row.items = []
    return row


@pytest.fixture
def mock_uow():
    """Create mock unit of work with every port stubbed."""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.enrollment.student_exists = AsyncMock(return_value=True)
    uow.analytics.has_analytics = AsyncMock(return_value=True)
    uow.assessments.get_attempts = AsyncMock(return_value=[FRACTIONS_ATTEMPT])
    uow.catalog.get_course = AsyncMock(return_value=MagicMock(id="course-1"))
    uow.catalog.list_lessons = AsyncMock(return_value=LESSONS)
    uow.catalog.list_content_blocks = AsyncMock(
        return_value=[b for lesson in LESSONS for b in lesson.content_blocks]
    )
    uow.engagement.get_progress_map = AsyncMock(return_value=dict(PROGRESS))
    uow.recommendations.create_recommendations = AsyncMock(side_effect=lambda drafts: list(drafts))
    uow.paths.create_path_header = AsyncMock(return_value="path-1")
    uow.paths.add_path_items = AsyncMock()
    uow.paths.get_path = AsyncMock(return_value=make_path_row())
    return uow


@pytest.fixture
def builder(mock_uow, recommendation_settings):
    return LearningPathBuilder(mock_uow, recommendation_settings)


def persisted_items(mock_uow):
    path_id, items = mock_uow.paths.add_path_items.call_args.args
    assert path_id == "path-1"
    return items


class TestPathItemSequence:
    """Tests for PathItemSequence."""

    def test_orders_are_dense(self):
        sequence = PathItemSequence()
        sequence.append(PathItemEntityType.LESSON, "lesson-1", is_required=True)
        sequence.append(PathItemEntityType.CONTENT_BLOCK, "block-1", is_required=True)
        sequence.append(PathItemEntityType.CONTENT_BLOCK, "block-2", is_required=False)

        assert [item.order for item in sequence.items] == [1, 2, 3]
        assert len(sequence) == 3

    def test_contains(self):
        sequence = PathItemSequence()
        sequence.append(PathItemEntityType.CONTENT_BLOCK, "block-1", is_required=True)

        assert sequence.contains(PathItemEntityType.CONTENT_BLOCK, "block-1")
        assert not sequence.contains(PathItemEntityType.LESSON, "block-1")

    def test_items_carry_completion_criteria(self):
        sequence = PathItemSequence()
        item = sequence.append(PathItemEntityType.LESSON, "lesson-1", is_required=True)

        assert item.completion_criteria == {"required_progress": 100}


class TestPathBuildResult:
    """Tests for PathBuildResult."""

    def test_required_count(self):
        sequence = PathItemSequence()
        sequence.append(PathItemEntityType.LESSON, "lesson-1", is_required=True)
        sequence.append(PathItemEntityType.CONTENT_BLOCK, "block-1", is_required=False)

        result = PathBuildResult(success=True, path_id="path-1", items=sequence.items)

        assert result.required_count == 1


class TestMissingAnalyticsError:
    """Tests for the missing analytics error hierarchy."""

    def test_is_not_found_and_validation(self):
        assert issubclass(MissingAnalyticsError, RecommendationNotFoundError)
        assert issubclass(MissingAnalyticsError, RecommendationValidationError)


class TestGenerateLearningPath:
    """Tests for LearningPathBuilder.generate_learning_path."""

    @pytest.mark.asyncio
    async def test_builds_items_in_order(self, builder, mock_uow):
        await builder.generate_learning_path("student-1", "course-1")

        items = persisted_items(mock_uow)
        assert [(i.entity_type, i.entity_id, i.order, i.is_required) for i in items] == [
            (PathItemEntityType.LESSON, "lesson-1", 1, True),
            (PathItemEntityType.CONTENT_BLOCK, "block-2", 2, True),
            (PathItemEntityType.LESSON, "lesson-2", 3, True),
            (PathItemEntityType.CONTENT_BLOCK, "block-3", 4, True),
            (PathItemEntityType.CONTENT_BLOCK, "block-5", 5, False),
        ]

    @pytest.mark.asyncio
    async def test_header_title_and_description(self, builder, mock_uow):
        await builder.generate_learning_path("student-1", "course-1")

        mock_uow.paths.create_path_header.assert_awaited_once_with(
            student_id="student-1",
            course_id="course-1",
            title="Personalized path for Course #course-1",
            description=PATH_DESCRIPTION,
        )

    @pytest.mark.asyncio
    async def test_commits_once_and_returns_stored_path(self, builder, mock_uow):
        path = await builder.generate_learning_path("student-1", "course-1")

        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_called()
        mock_uow.paths.get_path.assert_awaited_once_with("path-1")
        assert path.id == "path-1"

    @pytest.mark.asyncio
    async def test_remediation_shares_transaction(self, builder, mock_uow):
        await builder.generate_learning_path("student-1", "course-1")

        drafts = mock_uow.recommendations.create_recommendations.call_args.args[0]
        assert {d.entity_id for d in drafts} == {"block-2", "block-5"}
        assert mock_uow.commit.await_count == 1

    @pytest.mark.asyncio
    async def test_non_required_block_keeps_flag(self, builder, mock_uow):
        mock_uow.engagement.get_progress_map.return_value = {"block-3": 100.0}
        mock_uow.assessments.get_attempts.return_value = []

        await builder.generate_learning_path("student-1", "course-1")

        items = {i.entity_id: i for i in persisted_items(mock_uow)}
        assert items["block-4"].is_required is False
        assert items["lesson-2"].is_required is True

    @pytest.mark.asyncio
    async def test_completed_student_gets_only_remediation(self, builder, mock_uow):
        mock_uow.engagement.get_progress_map.return_value = {
            f"block-{i}": 100.0 for i in range(1, 7)
        }

        await builder.generate_learning_path("student-1", "course-1")

        items = persisted_items(mock_uow)
        assert [i.entity_id for i in items] == ["block-5", "block-2"]
        assert [i.order for i in items] == [1, 2]
        assert all(not i.is_required for i in items)

    @pytest.mark.asyncio
    async def test_lesson_without_blocks_counts_as_complete(self, builder, mock_uow):
        mock_uow.catalog.list_lessons.return_value = [
            LessonOutline(lesson_id="empty", title="Empty", order_number=1)
        ]
        mock_uow.assessments.get_attempts.return_value = []

        await builder.generate_learning_path("student-1", "course-1")

        assert persisted_items(mock_uow) == ()

    @pytest.mark.asyncio
    async def test_course_not_found(self, builder, mock_uow):
        mock_uow.catalog.get_course.return_value = None

        with pytest.raises(CourseNotFoundError):
            await builder.generate_learning_path("student-1", "missing")

        mock_uow.paths.create_path_header.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_analytics_writes_nothing(self, builder, mock_uow):
        mock_uow.analytics.has_analytics.return_value = False

        with pytest.raises(MissingAnalyticsError):
            await builder.generate_learning_path("student-1", "course-1")

        mock_uow.paths.create_path_header.assert_not_called()
        mock_uow.recommendations.create_recommendations.assert_not_called()
        mock_uow.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_item_failure_rolls_back(self, builder, mock_uow):
        mock_uow.paths.add_path_items.side_effect = SQLAlchemyError("boom")

        with pytest.raises(LearningPathPersistenceError) as exc_info:
            await builder.generate_learning_path("student-1", "course-1")

        assert isinstance(exc_info.value.original_error, SQLAlchemyError)
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_remediation_failure_rolls_back(self, builder, mock_uow):
        mock_uow.recommendations.create_recommendations.side_effect = SQLAlchemyError("boom")

        with pytest.raises(LearningPathPersistenceError) as exc_info:
            await builder.generate_learning_path("student-1", "course-1")

        assert isinstance(exc_info.value.original_error, DatabaseError)
        mock_uow.rollback.assert_awaited_once()
        mock_uow.paths.add_path_items.assert_not_called()

    @pytest.mark.asyncio
    async def test_domain_error_inside_build_is_reraised(self, builder, mock_uow):
        mock_uow.enrollment.student_exists.return_value = False

        with pytest.raises(RecommendationNotFoundError):
            await builder.generate_learning_path("student-1", "course-1")

        mock_uow.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_becomes_persistence_error(self, builder, mock_uow):
        mock_uow.commit.side_effect = DatabaseError("Failed to commit unit of work")

        with pytest.raises(LearningPathPersistenceError):
            await builder.generate_learning_path("student-1", "course-1")


class TestLogContext:
    """Tests for the log context bound around a build."""

    @pytest.mark.asyncio
    async def test_ids_bound_while_building(self, builder, mock_uow):
        seen: list[dict] = []

        async def record_context(*args, **kwargs):
            seen.append(structlog.contextvars.get_contextvars())
            return "path-1"

        mock_uow.paths.create_path_header.side_effect = record_context

        await builder.generate_learning_path("student-1", "course-1")

        assert seen == [{"student_id": "student-1", "course_id": "course-1"}]

    @pytest.mark.asyncio
    async def test_context_released_after_failure(self, builder, mock_uow):
        mock_uow.analytics.has_analytics.return_value = False

        with structlog.contextvars.bound_contextvars(request_id="req-1"):
            with pytest.raises(MissingAnalyticsError):
                await builder.generate_learning_path("student-1", "course-1")

            assert structlog.contextvars.get_contextvars() == {"request_id": "req-1"}
