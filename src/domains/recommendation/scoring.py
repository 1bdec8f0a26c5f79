# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course and content scoring.

Both scorers start from a base score, add rule-based bonuses and clamp
the result to [0, max_score]. Ranking is a stable sort on the score, so
candidates with equal scores keep the order the catalog returned them in.

Course rules (base 50):
- +10 beginner course when weaknesses outnumber strengths
- +10 intermediate course when weaknesses equal strengths
- +10 advanced course when strengths outnumber weaknesses
- +5 per primary category

Content rules (base 50):
- +10 per struggling topic found in the title
- +5 per struggling topic found in the content body
- +10 for rich content types (interactive, video, h5p)

Topic matching is a case-insensitive plain substring test. It is known
to produce false positives ("art" matches "partial") and is kept as is.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.core.config import RecommendationSettings, get_settings
from src.domains.recommendation.records import ContentCandidate, CourseCandidate, CourseLevel


def clamp_score(score: int, max_score: int = 100) -> int:
    """Clamp a score into [0, max_score]."""
    return max(0, min(max_score, score))


def topic_in_text(topic: str, text: str | None) -> bool:
    """Case-insensitive substring match of a topic inside free text."""
    if not text:
        return False
    return topic.lower() in text.lower()


@dataclass(frozen=True)
class ScoredCourse:
    """A course candidate with its recommendation score."""

    candidate: CourseCandidate
    score: int


@dataclass(frozen=True)
class ScoredContent:
    """A content candidate with its score and the topics it matched."""

    candidate: ContentCandidate
    score: int
    matched_topics: tuple[str, ...] = ()


class CourseScorer:
    """Ranks courses against a strength/weakness profile."""

    def __init__(self, settings: RecommendationSettings | None = None) -> None:
        self.settings = settings or get_settings().recommendation

    def score(
        self,
        course: CourseCandidate,
        strengths: Sequence[str],
        weaknesses: Sequence[str],
    ) -> int:
        """Score one course.

        Args:
            course: Candidate course.
            strengths: Topics the student is strong in.
            weaknesses: Topics the student is struggling with.

        Returns:
            Score in [0, max_score].
        """
        s = self.settings
        score = s.base_score
        n_strengths, n_weaknesses = len(strengths), len(weaknesses)

        if course.level == CourseLevel.BEGINNER.value and n_weaknesses > n_strengths:
            score += s.level_match_bonus
        elif course.level == CourseLevel.INTERMEDIATE.value and n_weaknesses == n_strengths:
            score += s.level_match_bonus
        elif course.level == CourseLevel.ADVANCED.value and n_strengths > n_weaknesses:
            score += s.level_match_bonus

        score += s.primary_category_bonus * sum(1 for c in course.categories if c.is_primary)

        return clamp_score(score, s.max_score)

    def rank(
        self,
        candidates: Iterable[CourseCandidate],
        strengths: Sequence[str],
        weaknesses: Sequence[str],
        limit: int,
    ) -> list[ScoredCourse]:
        """Return the top `limit` courses by score, stable on ties."""
        scored = [
            ScoredCourse(candidate=c, score=self.score(c, strengths, weaknesses))
            for c in candidates
        ]
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored[:limit]


class ContentScorer:
    """Ranks content blocks against struggling topics."""

    def __init__(self, settings: RecommendationSettings | None = None) -> None:
        self.settings = settings or get_settings().recommendation

    def matched_topics(self, block: ContentCandidate, topics: Sequence[str]) -> tuple[str, ...]:
        """Topics found in the block title or content."""
        return tuple(
            topic
            for topic in topics
            if topic_in_text(topic, block.title) or topic_in_text(topic, block.content)
        )

    def score(self, block: ContentCandidate, topics: Sequence[str]) -> int:
        """Score one content block.

        Args:
            block: Candidate content block.
            topics: Struggling topics.

        Returns:
            Score in [0, max_score].
        """
        s = self.settings
        score = s.base_score
        for topic in topics:
            if topic_in_text(topic, block.title):
                score += s.title_match_bonus
            if topic_in_text(topic, block.content):
                score += s.content_match_bonus

        if block.block_type in s.rich_content_types:
            score += s.rich_content_bonus

        return clamp_score(score, s.max_score)

    def rank(
        self,
        candidates: Iterable[ContentCandidate],
        topics: Sequence[str],
        limit: int,
    ) -> list[ScoredContent]:
        """Return the top `limit` matching blocks by score, stable on ties.

        Blocks matching none of the topics are not candidates. With no
        topics the result is empty.
        """
        if not topics:
            return []

        scored: list[ScoredContent] = []
        for block in candidates:
            matched = self.matched_topics(block, topics)
            if not matched:
                continue
            scored.append(
                ScoredContent(candidate=block, score=self.score(block, topics), matched_topics=matched)
            )
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored[:limit]
