# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application lifecycle for the recommendation engine.

The surrounding service (HTTP app, worker, script) enters lifespan()
once, then opens a unit of work per request.

Example:
    from src.app import lifespan
    from src.domains.recommendation import LearningPathBuilder, unit_of_work

    async with lifespan():
        async with unit_of_work() as uow:
            path = await LearningPathBuilder(uow).generate_learning_path(
                student_id, course_id
            )
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from src.core.config import Settings, get_settings
from src.infrastructure.database import (
    check_database_connection,
    close_database,
    create_tables,
    init_database,
)
from src.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
    create_schema: bool = False,
) -> AsyncGenerator[Settings, None]:
    """Application lifespan manager.

    Handles startup and shutdown:
    - Logging configuration
    - Learning database connection pool
    - Optional schema creation for local SQLite databases

    Args:
        settings: Settings to run with; defaults to get_settings().
        create_schema: Create missing tables on startup.

    Yields:
        The active settings.

    Raises:
        DatabaseError: If the database cannot be initialized.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    logger.info(
        "recommendation_engine_starting",
        environment=settings.environment,
        debug=settings.debug,
    )

    await init_database(settings)
    try:
        if create_schema:
            await create_tables()
        if not await check_database_connection():
            logger.warning("learning_database_unreachable")
        yield settings
    finally:
        await close_database()
        logger.info("recommendation_engine_stopped")
