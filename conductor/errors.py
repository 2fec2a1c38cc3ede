"""Container error types."""

from __future__ import annotations


class ContainerError(RuntimeError):
    """Base error for the module container."""


class NotFoundError(ContainerError, KeyError):
    """No module binding or config entry exists under the requested name."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{name} no {kind}")
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class MissingCapabilityError(ContainerError):
    """A bound module lacks the capability a lifecycle phase requires."""

    def __init__(self, module: str, capability: str, phase: str) -> None:
        super().__init__(
            f"container: module [{module}] is not {capability}, {phase} failed"
        )
        self.module = module
        self.capability = capability
        self.phase = phase


class InitError(ContainerError):
    """A module's init raised; remaining modules were not initialized."""

    def __init__(self, module: str, cause: BaseException) -> None:
        super().__init__(f"container: module [{module}] init failed: {cause}")
        self.module = module


class ConfigValidationError(ContainerError):
    """The configuration provider rejected an entry of a config batch."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"container: config [{key}] rejected: {cause}")
        self.key = key


class StopError(ContainerError):
    """A module's stop raised during shutdown. Logged, never raised."""

    def __init__(self, module: str, cause: BaseException) -> None:
        super().__init__(f"container: module [{module}] stop failed: {cause}")
        self.module = module
        self.__cause__ = cause


class LifecycleError(ContainerError):
    """The requested phase is not valid from the container's current state."""
