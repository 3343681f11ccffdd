"""Loguru sinks for the chessmatch engine, service and db layers."""

import sys
from pathlib import Path

from loguru import logger

from chessmatch.core.config import Settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
# plain text (no color tags), one record per line
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "1 week",
    compression: str | None = "gz",
) -> list[int]:
    """Replace loguru's default sink with the chessmatch sinks.

    Args:
        level: Minimum level for every sink.
        log_file: Also write to this file (parent directories are created).
        rotation: Size / age at which the file is rotated.
        retention: How long rotated files are kept.
        compression: Archive format of rotated files, None to keep them as they are.

    Returns:
        The ids of the installed sinks (for ``logger.remove``).
    """
    logger.remove()
    handler_ids = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_path,
                level=level,
                format=FILE_FORMAT,
                rotation=rotation,
                retention=retention,
                compression=compression,
            )
        )

    logger.info(f"Logging configured at level: {level}")
    return handler_ids


def setup_logging_from_settings(settings: Settings) -> list[int]:
    return setup_logging(level=settings.log_level, log_file=settings.log_file)
