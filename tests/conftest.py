# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

import logging

import pytest
import structlog

from src.core.config import RecommendationSettings, clear_settings_cache
from src.utils import logging as app_logging


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a real database)"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Make every test read settings from a clean cache."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo handlers and levels installed by setup_logging."""
    root = logging.getLogger()
    level = root.level
    src_level = logging.getLogger("src").level
    yield
    if app_logging._handler is not None:
        root.removeHandler(app_logging._handler)
        app_logging._handler = None
    root.setLevel(level)
    logging.getLogger("src").setLevel(src_level)
    structlog.reset_defaults()


@pytest.fixture
def recommendation_settings() -> RecommendationSettings:
    """Provide default recommendation settings."""
    return RecommendationSettings()


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_student_id() -> str:
    """Provide a sample student ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def sample_course_id() -> str:
    """Provide a sample course ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440002"
