"""
Logging setup.

Configures loguru sinks for the engine from OpportunitySettings.
"""

import sys

from loguru import logger

from opportunity.config.settings import OpportunitySettings
from opportunity.config.settings import settings as default_settings


def setup_logging(settings: OpportunitySettings | None = None) -> list[int]:
    """
    Configure logger with file rotation.

    Args:
        settings: Settings to use, defaults to the environment settings

    Returns:
        Ids of the added sinks, usable with logger.remove()
    """
    settings = settings or default_settings
    sink_ids: list[int] = []

    if settings.log_file:
        sink_ids.append(
            logger.add(
                settings.log_file,
                rotation=settings.log_rotation,
                retention=settings.log_retention,
                level=settings.log_level,
                encoding="utf-8",
            )
        )

    if settings.log_to_stderr:
        sink_ids.append(logger.add(sys.stderr, level=settings.log_level))

    logger.info(
        "Opportunity engine logging configured",
        extra={"environment": settings.environment, "level": settings.log_level},
    )
    return sink_ids
