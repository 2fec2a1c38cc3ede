"""Loguru sinks for the container and the modules it hosts."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_COMPONENT = "container"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "{thread.name} | "
    "<cyan>{extra[component]}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(
    log_dir: Path | str | None = None,
    level: str = "INFO",
    *,
    component: str = DEFAULT_COMPONENT,
) -> None:
    """Replace loguru sinks with console output and an optional daily log file.

    The file is ``<log_dir>/<component>.log``. Records logged without a bound
    component are attributed to ``component``.
    """

    logger.remove()
    logger.configure(extra={"component": component})
    logger.add(sys.stdout, format=LOG_FORMAT, colorize=True, level=level)

    if log_dir is None:
        return
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    logger.add(
        path / f"{component}.log",
        rotation="1 day",
        retention="14 days",
        compression="gz",
        level=level,
        backtrace=False,
        diagnose=False,
        format=LOG_FORMAT,
    )


def get_logger(name: Optional[str] = None):
    """Return a logger bound to ``name``, or to the container component."""

    return logger.bind(component=name or DEFAULT_COMPONENT)
