"""Named module registry with an ordered init/start/shutdown lifecycle."""

from __future__ import annotations

from .app import serve
from .capabilities import Binding, Capability, Initable, Runnable, Stoppable, Validator
from .config import (
    ConfigEntry,
    ConfigProvider,
    ContainerSettings,
    ModelConfigProvider,
    load_module_configs,
    load_settings,
)
from .errors import (
    ConfigValidationError,
    ContainerError,
    InitError,
    LifecycleError,
    MissingCapabilityError,
    NotFoundError,
    StopError,
)
from .lifecycle import Container, LifecycleState, ModuleTask
from .registry import Registry
from .signals import ShutdownAggregator, SignalStopSource, os_signal_source

__version__ = "0.1.0"

__all__ = [
    "Binding",
    "Capability",
    "ConfigEntry",
    "ConfigProvider",
    "ConfigValidationError",
    "Container",
    "ContainerError",
    "ContainerSettings",
    "InitError",
    "Initable",
    "LifecycleError",
    "LifecycleState",
    "MissingCapabilityError",
    "ModelConfigProvider",
    "ModuleTask",
    "NotFoundError",
    "Registry",
    "Runnable",
    "ShutdownAggregator",
    "SignalStopSource",
    "StopError",
    "Stoppable",
    "Validator",
    "load_module_configs",
    "load_settings",
    "os_signal_source",
    "serve",
    "__version__",
]
