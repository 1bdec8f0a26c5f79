# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Topic performance aggregation.

Reduces a student's quiz and exam attempts into per-topic correctness
and classifies topics:
- struggling: ratio strictly below the struggling threshold (0.70)
- strength: ratio at or above the strength threshold (0.80)

Low sample sizes are not filtered out. A topic answered once and wrong
is already struggling, so newly introduced material shows up early.

Usage:
    from src.domains.recommendation.topics import TopicPerformanceAggregator

    aggregator = TopicPerformanceAggregator()
    profile = aggregator.build_profile(attempts)
    profile.struggling  # ["algebra"]
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from src.domains.recommendation.records import AttemptRecord

DEFAULT_TOPIC = "general"


@dataclass
class TopicScore:
    """Correct/total counters for one topic."""

    topic: str
    correct: int = 0
    total: int = 0

    @property
    def ratio(self) -> float | None:
        """Correctness ratio, or None when nothing was answered."""
        if self.total == 0:
            return None
        return self.correct / self.total

    @property
    def percentage(self) -> float | None:
        """Correctness as a percentage."""
        ratio = self.ratio
        return None if ratio is None else ratio * 100

    def record(self, is_correct: bool) -> None:
        """Count one response."""
        self.total += 1
        if is_correct:
            self.correct += 1


@dataclass
class TopicProfile:
    """Aggregated topic performance for one student.

    Attributes:
        scores: Counters per topic, in first-seen order.
        struggling: Topics below the struggling threshold.
        strengths: Topics at or above the strength threshold.
    """

    scores: dict[str, TopicScore] = field(default_factory=dict)
    struggling: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "scores": {
                topic: {"correct": s.correct, "total": s.total, "percentage": s.percentage}
                for topic, s in self.scores.items()
            },
            "struggling": list(self.struggling),
            "strengths": list(self.strengths),
        }


def resolve_topic(topic: str | None) -> str:
    """Map an unset or empty topic label to the default bucket."""
    if not topic:
        return DEFAULT_TOPIC
    return topic


class TopicPerformanceAggregator:
    """Aggregates attempt responses into a TopicProfile.

    Attributes:
        struggling_threshold: Ratio strictly below this is struggling.
        strength_threshold: Ratio at or above this is a strength.
    """

    def __init__(
        self,
        struggling_threshold: float = 0.70,
        strength_threshold: float = 0.80,
    ) -> None:
        self.struggling_threshold = struggling_threshold
        self.strength_threshold = strength_threshold

    def aggregate(self, attempts: Iterable[AttemptRecord]) -> dict[str, TopicScore]:
        """Count correct and total responses per topic.

        Responses whose question is not part of the attempt's assessment
        are skipped.

        Args:
            attempts: Quiz and exam attempts, pooled.

        Returns:
            Topic counters keyed by topic, in first-seen order.
        """
        scores: dict[str, TopicScore] = {}
        for attempt in attempts:
            for response in attempt.responses:
                if response.question_id not in attempt.question_topics:
                    continue
                topic = resolve_topic(attempt.question_topics[response.question_id])
                score = scores.get(topic)
                if score is None:
                    score = scores[topic] = TopicScore(topic=topic)
                score.record(response.is_correct)
        return scores

    def build_profile(self, attempts: Iterable[AttemptRecord]) -> TopicProfile:
        """Aggregate attempts and classify each topic.

        Args:
            attempts: Quiz and exam attempts, pooled.

        Returns:
            The student's topic profile. Empty when there are no attempts.
        """
        scores = self.aggregate(attempts)
        profile = TopicProfile(scores=scores)
        for topic, score in scores.items():
            ratio = score.ratio
            if ratio is None:
                continue
            if ratio < self.struggling_threshold:
                profile.struggling.append(topic)
            elif ratio >= self.strength_threshold:
                profile.strengths.append(topic)
        return profile

    def struggling_topics(self, attempts: Iterable[AttemptRecord]) -> list[str]:
        """Shortcut returning only the struggling topics."""
        return self.build_profile(attempts).struggling
