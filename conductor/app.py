"""Process entry-point helper around a container."""

from __future__ import annotations

from typing import Iterable, Optional

from .config import ContainerSettings
from .lifecycle import Container
from .logging_utils import configure_logging, get_logger
from .signals import SignalStopSource, os_signal_source


def serve(
    container: Container,
    *,
    init: Iterable[str] = (),
    start: Iterable[str] = (),
    stop: Optional[Iterable[str]] = None,
    settings: Optional[ContainerSettings] = None,
) -> int:
    """Run a full lifecycle: init, start (blocking), then shutdown.

    ``stop`` defaults to the reverse of ``start``. When ``settings`` is given,
    logging is configured from it. OS signal handlers installed here are
    restored before returning. Returns 0 on a clean shutdown and 1 when a
    module's stop or run failed.
    """

    init_names = list(init)
    start_names = list(start)
    stop_names = list(stop) if stop is not None else list(reversed(start_names))

    if settings is not None:
        configure_logging(settings.log_dir, settings.log_level, component=settings.name)
    settings = settings or ContainerSettings()
    log = get_logger(settings.name)

    signals: Optional[SignalStopSource] = None
    if settings.handle_signals:
        signals = os_signal_source(*settings.signals)
        container.add_stop_signal(signals, name="os-signal")

    try:
        container.init(*init_names)
        log.info("{} module(s) initialized; starting {}", len(init_names), start_names)
        container.start(*start_names)
        errors = container.shutdown(*stop_names)
    finally:
        if signals is not None:
            signals.restore()

    if not container.wait_tasks(settings.task_join_timeout_s):
        pending = [task.name for task in container.tasks if task.running]
        log.warning("Modules still running after {}s: {}", settings.task_join_timeout_s, pending)
    failed_runs = [task.name for task in container.tasks if task.failed]
    if failed_runs:
        log.error("Modules whose run failed: {}", failed_runs)
    if errors or failed_runs:
        return 1
    log.info("Shutdown complete")
    return 0
