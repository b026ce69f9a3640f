import logging
import os


def _env_int(name: str, default: int) -> int:
    """Read a non-negative integer setting, falling back to ``default`` on bad input"""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default


def _env_log_level(name: str, default: str) -> str:
    raw = os.environ.get(name, default).upper()
    return raw if isinstance(logging.getLevelName(raw), int) else default


# Logging configuration
LOG_LEVEL = _env_log_level("SLITHERLINK_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Search limits (0 means unbounded)
DEFAULT_MAX_DEPTH = 0
DEFAULT_MAX_ITERATIONS = _env_int("SLITHERLINK_MAX_ITERATIONS", 0)
DEFAULT_FIXPOINT_ITERATIONS = 0

# Generator parameters
GENERATOR_MAX_ATTEMPTS = _env_int("SLITHERLINK_GENERATOR_ATTEMPTS", 10) or 10
DIFFICULTY_MAX_DEPTH = {
    "easy": 1,
    "medium": 2,
    "hard": 3,
    "expert": 4,
}
