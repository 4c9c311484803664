from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/macemu-installer.log"

# Between INFO and WARNING so step banners survive a WARNING-only console.
STEP = 25
logging.addLevelName(STEP, "STEP")


def log_step(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(STEP, msg, *args)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
    fallback_name: str = "macemu-installer.log",
) -> str:
    """Configure logging.

    All decisions are recorded to the log file; the console gets a short
    ``[LEVEL] message`` rendering.

    Notes:
    - Writing to /var/log may not be permitted (e.g. dry runs as a normal user).
      We still *attempt* to write there first; if it fails, we fall back to
      a local file in the working directory.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_macemu_configured", False):
        return getattr(logger, "_macemu_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        fallback = str(Path.cwd() / fallback_name)
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(message)s"))
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_macemu_configured", True)
    setattr(logger, "_macemu_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
