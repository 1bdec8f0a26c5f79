# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recommendation and personalized learning path domain.

This package provides:
- Topic performance aggregation from quiz and exam attempts
- Course and content scoring with persisted recommendations
- Atomic generation of personalized learning paths
- Read accessors for paths and recommendations

Usage:
    from src.domains.recommendation import LearningPathBuilder, unit_of_work

    async with unit_of_work() as uow:
        path = await LearningPathBuilder(uow).generate_learning_path(
            student_id, course_id
        )
"""

from src.domains.recommendation.exceptions import (
    CourseNotFoundError,
    LearningPathNotFoundError,
    LearningPathPersistenceError,
    MissingAnalyticsError,
    RecommendationNotFoundError,
    RecommendationServiceError,
    RecommendationValidationError,
    StudentNotFoundError,
)
from src.domains.recommendation.path_builder import (
    LearningPathBuilder,
    PathBuildResult,
    PathItemSequence,
)
from src.domains.recommendation.reader import LearningPathReader
from src.domains.recommendation.records import (
    AttemptRecord,
    CategoryTag,
    ContentCandidate,
    CourseCandidate,
    CourseLevel,
    LessonOutline,
    PathItemEntityType,
    RecommendationEntityType,
    ResponseRecord,
)
from src.domains.recommendation.scoring import (
    ContentScorer,
    CourseScorer,
    ScoredContent,
    ScoredCourse,
)
from src.domains.recommendation.service import RecommendationService
from src.domains.recommendation.topics import (
    TopicPerformanceAggregator,
    TopicProfile,
    TopicScore,
)
from src.domains.recommendation.unit_of_work import SqlUnitOfWork, unit_of_work

__all__ = [
    # Services
    "RecommendationService",
    "LearningPathBuilder",
    "LearningPathReader",
    "SqlUnitOfWork",
    "unit_of_work",
    # Aggregation and scoring
    "TopicPerformanceAggregator",
    "TopicProfile",
    "TopicScore",
    "CourseScorer",
    "ContentScorer",
    "ScoredCourse",
    "ScoredContent",
    "PathItemSequence",
    "PathBuildResult",
    # Records
    "AttemptRecord",
    "ResponseRecord",
    "CategoryTag",
    "CourseCandidate",
    "ContentCandidate",
    "LessonOutline",
    "CourseLevel",
    "RecommendationEntityType",
    "PathItemEntityType",
    # Errors
    "RecommendationServiceError",
    "RecommendationNotFoundError",
    "RecommendationValidationError",
    "StudentNotFoundError",
    "CourseNotFoundError",
    "LearningPathNotFoundError",
    "MissingAnalyticsError",
    "LearningPathPersistenceError",
]
