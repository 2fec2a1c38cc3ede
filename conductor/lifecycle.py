"""Lifecycle controller: init, start and shutdown bound modules in caller order."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .capabilities import Binding, Capability
from .config import ConfigEntry, ConfigProvider
from .errors import InitError, LifecycleError, MissingCapabilityError, StopError
from .logging_utils import get_logger
from .registry import Registry
from .signals import ShutdownAggregator, StopSource


class LifecycleState(str, Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


@dataclass
class ModuleTask:
    """Handle for one module's ``run()`` thread and its outcome."""

    name: str
    thread: Optional[threading.Thread] = None
    error: Optional[BaseException] = None
    done: threading.Event = field(default_factory=threading.Event)

    def join(self, timeout: Optional[float] = None) -> bool:
        return self.done.wait(timeout)

    @property
    def running(self) -> bool:
        return self.thread is not None and not self.done.is_set()

    @property
    def failed(self) -> bool:
        return self.error is not None


class Container:
    """Registry plus lifecycle state machine for one process run.

    Usage:
        container = Container()
        container.bind("db", Database())
        container.bind("api", ApiServer())
        container.add_stop_signal(os_signal_source())
        container.init("db", "api")
        container.start("api")          # blocks until a stop signal fires
        container.shutdown("api", "db")
    """

    def __init__(self, provider: Optional[ConfigProvider] = None, *, name: str = "container") -> None:
        self._registry = Registry(provider)
        self._signals = ShutdownAggregator()
        self._state = LifecycleState.CREATED
        self._state_lock = threading.Lock()
        self._tasks: list[ModuleTask] = []
        self._log = get_logger(name)

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def state(self) -> LifecycleState:
        with self._state_lock:
            return self._state

    @property
    def tasks(self) -> list[ModuleTask]:
        with self._state_lock:
            return list(self._tasks)

    def bind(self, name: str, obj: Any) -> None:
        self._registry.bind(name, obj)

    def resolve(self, name: str) -> Any:
        return self._registry.resolve(name)

    def get_config(self, key: str) -> Any:
        return self._registry.get_config(key)

    def set_configs(self, *entries: ConfigEntry) -> None:
        self._registry.set_configs(*entries)

    def add_stop_signal(self, source: StopSource, name: Optional[str] = None) -> None:
        self._signals.add(source, name)

    def _check(self, phase: str, *allowed: LifecycleState) -> None:
        with self._state_lock:
            state = self._state
        if state not in allowed:
            raise LifecycleError(f"container: cannot {phase} from state {state.value}")

    def _advance(self, target: LifecycleState, phase: str, *allowed: LifecycleState) -> None:
        with self._state_lock:
            if self._state not in allowed:
                raise LifecycleError(
                    f"container: cannot {phase} from state {self._state.value}"
                )
            self._state = target

    def init(self, *modules: str) -> None:
        """Call ``init(registry)`` on each Initable module, in order.

        Modules without ``init`` are skipped. The first failure halts the
        phase; modules already initialized are left as they are.
        """

        allowed = (LifecycleState.CREATED, LifecycleState.INITIALIZED)
        self._check("init", *allowed)
        for name in modules:
            binding = self._registry.binding(name)
            if not binding.has(Capability.INITABLE):
                self._log.debug("module {} has no init; skipped", name)
                continue
            self._log.info("module {} initializing...", name)
            try:
                binding.obj.init(self._registry)
            except Exception as exc:
                self._log.error("module {} init failed: {}", name, exc)
                raise InitError(name, exc) from exc
            self._log.info("module {} initialized", name)
        self._advance(LifecycleState.INITIALIZED, "init", *allowed)

    def start(self, *modules: str) -> None:
        """Launch ``run()`` of every module concurrently, then block.

        All modules are checked for ``run`` before any is launched; a module
        reached after ``shutdown`` has begun is not launched. Returns once a
        registered stop signal fires or ``shutdown`` completes.
        """

        allowed = (LifecycleState.CREATED, LifecycleState.INITIALIZED)
        self._check("start", *allowed)
        bindings: list[Binding] = []
        for name in modules:
            binding = self._registry.binding(name)
            if not binding.has(Capability.RUNNABLE):
                raise MissingCapabilityError(name, "runnable", "starting")
            bindings.append(binding)
        self._advance(LifecycleState.RUNNING, "start", *allowed)

        self._signals.watch()
        for binding in bindings:
            self._launch(binding)

        self._signals.wait()
        self._log.info("container released by {}", self._signals.fired_by)

    def _launch(self, binding: Binding) -> None:
        name = binding.name
        task = ModuleTask(name=name)
        task.thread = threading.Thread(
            target=self._run_module,
            args=(binding.obj, task),
            name=f"module-{name}",
            daemon=True,
        )
        with self._state_lock:
            if self._state is not LifecycleState.RUNNING:
                self._log.info("module {} not started; shutdown in progress", name)
                return
            self._log.info("module {} starting...", name)
            self._tasks.append(task)
            task.thread.start()
        self._log.info("module {} started", name)

    def _run_module(self, module: Any, task: ModuleTask) -> None:
        try:
            module.run()
        except Exception as exc:
            task.error = exc
            self._log.exception("module {} run failed: {}", task.name, exc)
        else:
            self._log.debug("module {} run returned", task.name)
        finally:
            task.done.set()

    def shutdown(self, *modules: str) -> list[StopError]:
        """Call ``stop()`` on each module in the given order.

        Every module is checked for ``stop`` before any is stopped. A failing
        stop is logged and collected; the remaining modules are still stopped.
        A blocked ``start`` is released once, even when this call raises.
        """

        try:
            bindings: list[Binding] = []
            for name in modules:
                binding = self._registry.binding(name)
                if not binding.has(Capability.STOPPABLE):
                    raise MissingCapabilityError(name, "stoppable", "stopping")
                bindings.append(binding)

            with self._state_lock:
                if self._state is not LifecycleState.STOPPED:
                    self._state = LifecycleState.SHUTTING_DOWN
            errors: list[StopError] = []
            for binding in bindings:
                name = binding.name
                self._log.info("module {} stopping...", name)
                try:
                    binding.obj.stop()
                except Exception as exc:
                    error = StopError(name, exc)
                    self._log.error("{}", error)
                    errors.append(error)
                self._log.info("module {} stopped", name)

            with self._state_lock:
                self._state = LifecycleState.STOPPED
            return errors
        finally:
            if not self._signals.trigger("shutdown"):
                self._log.debug("shutdown already signalled; start not re-released")

    def wait_tasks(self, timeout: Optional[float] = None) -> bool:
        """Wait for launched ``run()`` calls to return. False on timeout."""

        deadline = None if timeout is None else time.monotonic() + timeout
        for task in self.tasks:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            if not task.join(remaining):
                return False
        return True
