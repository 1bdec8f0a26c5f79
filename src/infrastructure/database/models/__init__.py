# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the learning database.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.assessment import (
    Assessment,
    AssessmentAttempt,
    AssessmentQuestion,
    AssessmentResponse,
)
from src.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, new_id
from src.infrastructure.database.models.catalog import (
    ContentBlock,
    Course,
    CourseCategory,
    CourseCategoryMapping,
    CourseEnrollment,
    Lesson,
    Student,
)
from src.infrastructure.database.models.progress import ContentEngagement, LearningAnalytics
from src.infrastructure.database.models.recommendation import (
    LearningPath,
    LearningPathItem,
    LearningRecommendation,
)

__all__ = [
    # Base
    "Base",
    "IdMixin",
    "TimestampMixin",
    "new_id",
    # Catalog
    "Student",
    "Course",
    "CourseCategory",
    "CourseCategoryMapping",
    "CourseEnrollment",
    "Lesson",
    "ContentBlock",
    # Assessment
    "Assessment",
    "AssessmentQuestion",
    "AssessmentAttempt",
    "AssessmentResponse",
    # Progress
    "ContentEngagement",
    "LearningAnalytics",
    # Recommendation
    "LearningRecommendation",
    "LearningPath",
    "LearningPathItem",
]
