"""Lifecycle capability contracts for bound modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .registry import Registry


@runtime_checkable
class Initable(Protocol):
    def init(self, registry: Registry) -> None: ...


@runtime_checkable
class Runnable(Protocol):
    def run(self) -> None: ...


@runtime_checkable
class Stoppable(Protocol):
    def stop(self) -> None: ...


@runtime_checkable
class Validator(Protocol):
    def validate(self) -> None: ...


class Capability(str, Enum):
    INITABLE = "initable"
    RUNNABLE = "runnable"
    STOPPABLE = "stoppable"
    VALIDATOR = "validator"


_PROTOCOLS: dict[Capability, type] = {
    Capability.INITABLE: Initable,
    Capability.RUNNABLE: Runnable,
    Capability.STOPPABLE: Stoppable,
    Capability.VALIDATOR: Validator,
}


def capabilities_of(obj: Any) -> frozenset[Capability]:
    """Return every capability ``obj`` satisfies structurally."""

    return frozenset(cap for cap, proto in _PROTOCOLS.items() if isinstance(obj, proto))


@dataclass(frozen=True)
class Binding:
    """A bound module. Capabilities are tested against the object on each use."""

    name: str
    obj: Any

    @classmethod
    def of(cls, name: str, obj: Any) -> Binding:
        return cls(name=name, obj=obj)

    @property
    def capabilities(self) -> frozenset[Capability]:
        return capabilities_of(self.obj)

    def has(self, capability: Capability) -> bool:
        return isinstance(self.obj, _PROTOCOLS[capability])
