"""
Logging setup for FlappyEvo runs.

One console sink and one rotating file sink per run. Generation rollovers are
logged at INFO, per-generation elite details at DEBUG.
"""

from datetime import datetime, timezone
from pathlib import Path
import sys

from loguru import logger

PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
COLOR_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<yellow>{line}</yellow> | "
    "<level>{message}</level>"
)


def run_log_path(log_dir: str | Path, now: datetime | None = None) -> Path:
    """Timestamped log file for a single run inside ``log_dir``."""
    now = now or datetime.now(timezone.utc)
    return Path(log_dir) / f"flappyevo_{now:%Y%m%d_%H%M%S}.log"


def setup_logger(
    log_dir: str = "logs",
    level: str = "INFO",
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
) -> str:
    """
    Replace loguru's default sink with a console sink and a run log file.

    Args:
        log_dir: Directory for log files, created if missing
        level: Minimum level for both sinks
        rotation: When the run log rolls over (e.g., "50 MB", "1 day")
        retention: How long rolled-over files are kept (e.g., "30 days")
        enable_colors: Color console output; ignored when stdout is not a TTY

    Returns:
        Path to the run log file
    """
    log_file = run_log_path(log_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()

    colorize = enable_colors and sys.stdout.isatty()
    logger.add(
        sys.stdout,
        level=level,
        format=COLOR_FORMAT if colorize else PLAIN_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=True,
    )
    logger.add(
        str(log_file),
        level=level,
        format=PLAIN_FORMAT,
        rotation=rotation,
        retention=retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )

    logger.info("Logging to console and {}", log_file)
    logger.debug("Log level: {}, colors: {}", level, colorize)
    return str(log_file)
