import logging
import os

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(default_level: int = logging.WARNING) -> int:
    """Return the level named by RSC_LOG_LEVEL, or ``default_level``."""
    level_name = os.getenv("RSC_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), None)
        if isinstance(level, int):
            return level
    return default_level


def configure_logging(default_level: int = logging.WARNING) -> None:
    """Configure the root logger to write to stderr.

    Respects RSC_LOG_LEVEL env var if present. Program output stays on stdout.
    """
    logging.basicConfig(
        level=resolve_level(default_level),
        format=LOG_FORMAT,
    )
