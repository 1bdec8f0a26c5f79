# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response models for recommendations and learning paths."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class RecommendationResponse(BaseModel):
    """A persisted recommendation."""

    id: str
    student_id: str
    entity_type: str = Field(description="course or contentBlock")
    entity_id: str
    reason: str
    score: int = Field(ge=0, le=100)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class LearningPathItemResponse(BaseModel):
    """One ordered item of a learning path."""

    id: str
    entity_type: str = Field(description="lesson or contentBlock")
    entity_id: str
    order: int = Field(ge=1)
    is_required: bool
    completion_criteria: dict[str, Any] = Field(default_factory=dict)


class LearningPathResponse(BaseModel):
    """A learning path with its items in order."""

    id: str
    student_id: str
    course_id: str
    title: str
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    items: list[LearningPathItemResponse] = Field(default_factory=list)

    @property
    def required_items(self) -> list[LearningPathItemResponse]:
        """Items the student must complete."""
        return [item for item in self.items if item.is_required]

    @property
    def optional_items(self) -> list[LearningPathItemResponse]:
        """Remediation and other optional items."""
        return [item for item in self.items if not item.is_required]
