"""Fan-in of external stop requests into a single shutdown latch."""

from __future__ import annotations

import signal
import threading
from concurrent import futures
from typing import Any, Callable, Optional, Union

from .errors import LifecycleError
from .logging_utils import get_logger

StopSource = Union[threading.Event, futures.Future, Callable[[], Any]]


def _check_source(source: Any) -> None:
    if isinstance(source, futures.Future):
        return
    if callable(getattr(source, "wait", None)) or callable(source):
        return
    raise TypeError(f"unsupported stop source: {type(source).__name__}")


def _wait_for(source: StopSource) -> None:
    if isinstance(source, futures.Future):
        futures.wait([source])
    elif callable(getattr(source, "wait", None)):
        source.wait()
    else:
        source()


class ShutdownAggregator:
    """Watch every registered stop source and latch on the first one to fire.

    The latch can also be tripped directly with ``trigger()``. It is set at
    most once; sources firing afterwards are only logged.
    """

    def __init__(self) -> None:
        self._sources: list[tuple[str, StopSource]] = []
        self._watchers: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._latch = threading.Event()
        self._fired_by: Optional[str] = None
        self._watching = False
        self._log = get_logger("container.signals")

    def add(self, source: StopSource, name: Optional[str] = None) -> None:
        _check_source(source)
        with self._lock:
            if self._watching:
                raise LifecycleError("stop signals must be registered before start")
            self._sources.append((name or f"stop-signal-{len(self._sources)}", source))

    def watch(self) -> None:
        with self._lock:
            if self._watching:
                return
            self._watching = True
            sources = list(self._sources)
        for name, source in sources:
            thread = threading.Thread(
                target=self._watch_one,
                args=(name, source),
                name=f"watch-{name}",
                daemon=True,
            )
            self._watchers.append(thread)
            thread.start()
        self._log.debug("Watching {} stop source(s)", len(sources))

    def _watch_one(self, name: str, source: StopSource) -> None:
        try:
            _wait_for(source)
        except Exception as exc:
            self._log.warning("Stop source {} raised while waiting: {}", name, exc)
        self._fire(name)

    def trigger(self, reason: str = "shutdown") -> bool:
        """Set the latch directly. Returns False when it was already set."""

        return self._fire(reason)

    def _fire(self, name: str) -> bool:
        with self._lock:
            if self._latch.is_set():
                already = self._fired_by
                fired = False
            else:
                self._fired_by = name
                self._latch.set()
                fired = True
        if fired:
            self._log.info("Shutdown requested by {}", name)
        else:
            self._log.debug("Stop source {} fired after {}; ignored", name, already)
        return fired

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._latch.wait(timeout)

    @property
    def fired(self) -> bool:
        return self._latch.is_set()

    @property
    def fired_by(self) -> Optional[str]:
        return self._fired_by

    @property
    def source_count(self) -> int:
        with self._lock:
            return len(self._sources)


class SignalStopSource:
    """Stop source set by OS signals; remembers the handlers it replaced."""

    def __init__(self, signums: list[int]) -> None:
        self._event = threading.Event()
        self._previous: dict[int, Any] = {}
        self._log = get_logger("container.signals")
        for signum in signums:
            self._previous[signum] = signal.signal(signum, self._handle)

    def _handle(self, signum: int, _frame: Any) -> None:
        self._log.info("Received {}", signal.Signals(signum).name)
        self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def signums(self) -> list[int]:
        return list(self._previous)

    def restore(self) -> None:
        """Reinstall the handlers that were active before this source."""

        previous, self._previous = self._previous, {}
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def os_signal_source(*signals: int | str) -> SignalStopSource:
    """Return a stop source set when the process receives one of ``signals``.

    Defaults to SIGINT and SIGTERM. Handlers can only be installed from the
    main thread; call ``restore()`` on the result to put the old ones back.
    """

    wanted = signals or ("SIGINT", "SIGTERM")
    return SignalStopSource(
        [getattr(signal, item) if isinstance(item, str) else item for item in wanted]
    )
