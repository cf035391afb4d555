"""
Logging setup

cacheaside logs through loguru's global logger. Libraries should not add
sinks on import; applications call setup_logging() once at startup.
"""

import sys
from typing import Optional

from loguru import logger

from cacheaside.config.config_loader import LoggingSettings


def setup_logging(settings: Optional[LoggingSettings] = None) -> int:
    """
    Replace loguru's sinks with the one described by `settings`.
    
    Returns:
        Id of the added sink
    """
    settings = settings or LoggingSettings()
    logger.remove()
    
    if settings.sink:
        return logger.add(
            settings.sink,
            level=settings.level.upper(),
            format=settings.format,
            rotation=settings.rotation,
            encoding="utf-8",
        )
    return logger.add(sys.stderr, level=settings.level.upper(), format=settings.format)
