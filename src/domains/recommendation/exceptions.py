# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions raised by the recommendation domain."""


class RecommendationServiceError(Exception):
    """Base exception for recommendation service errors."""

    pass


class RecommendationNotFoundError(RecommendationServiceError):
    """Raised when a referenced entity does not exist."""

    pass


class StudentNotFoundError(RecommendationNotFoundError):
    """Raised when student is not found."""

    pass


class CourseNotFoundError(RecommendationNotFoundError):
    """Raised when course is not found."""

    pass


class LearningPathNotFoundError(RecommendationNotFoundError):
    """Raised when learning path is not found."""

    pass


class RecommendationValidationError(RecommendationServiceError):
    """Raised when required linkage for an operation is missing."""

    pass


class MissingAnalyticsError(RecommendationNotFoundError, RecommendationValidationError):
    """Raised when a student has no learning analytics for a course."""

    pass


class LearningPathPersistenceError(RecommendationServiceError):
    """Raised when a learning path could not be committed.

    The unit of work has already been rolled back when this is raised.

    Attributes:
        original_error: The exception that made the build fail.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error
