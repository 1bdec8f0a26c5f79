# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-side snapshot records consumed by the recommendation engine.

The collaborator ports return these immutable values instead of ORM
objects, so aggregation and scoring never touch a database session.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CourseLevel(str, Enum):
    """Course difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class RecommendationEntityType(str, Enum):
    """Kinds of entities a recommendation can point at."""

    COURSE = "course"
    CONTENT_BLOCK = "contentBlock"


class PathItemEntityType(str, Enum):
    """Kinds of entities a learning path item can point at."""

    LESSON = "lesson"
    CONTENT_BLOCK = "contentBlock"


@dataclass(frozen=True)
class ResponseRecord:
    """One answered question inside an attempt."""

    question_id: str
    is_correct: bool
    chosen_answer_id: str | None = None


@dataclass(frozen=True)
class AttemptRecord:
    """A quiz or exam attempt with its responses.

    Attributes:
        attempt_id: Attempt identifier.
        assessment_kind: "quiz" or "exam".
        responses: Responses in the order they were given.
        question_topics: Topic label for every question of the assessment,
            keyed by question id. None means the question is untagged.
    """

    attempt_id: str
    assessment_kind: str
    responses: tuple[ResponseRecord, ...] = ()
    question_topics: Mapping[str, str | None] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryTag:
    """A category attached to a course."""

    category_id: str
    name: str
    is_primary: bool = False


@dataclass(frozen=True)
class CourseCandidate:
    """A catalog course the student has not enrolled in."""

    course_id: str
    title: str
    level: str
    categories: tuple[CategoryTag, ...] = ()


@dataclass(frozen=True)
class ContentCandidate:
    """A content block belonging to a lesson of a course."""

    content_block_id: str
    lesson_id: str
    course_id: str
    title: str
    content: str | None = None
    block_type: str = "text"
    is_required: bool = True
    order_number: int = 0


@dataclass(frozen=True)
class LessonOutline:
    """A lesson with its content blocks, both in course order."""

    lesson_id: str
    title: str
    order_number: int
    content_blocks: tuple[ContentCandidate, ...] = ()


@dataclass(frozen=True)
class RecommendationDraft:
    """A recommendation row about to be appended."""

    student_id: str
    entity_type: RecommendationEntityType
    entity_id: str
    reason: str
    score: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PathItemDraft:
    """A learning path item about to be persisted."""

    entity_type: PathItemEntityType
    entity_id: str
    order: int
    is_required: bool
    completion_criteria: dict[str, Any] = field(default_factory=dict)
