"""Name-keyed module bindings and config entries."""

from __future__ import annotations

import threading
from typing import Any, Optional

from .capabilities import Binding
from .config import ConfigEntry, ConfigProvider, ModelConfigProvider
from .errors import ConfigValidationError, NotFoundError


class Registry:
    """Holds one live module per name and one config value per key.

    Every map access takes the lock for that single operation only; module
    code is never called while it is held.
    """

    def __init__(self, provider: Optional[ConfigProvider] = None) -> None:
        self._provider = provider or ModelConfigProvider()
        self._bindings: dict[str, Binding] = {}
        self._configs: dict[str, Any] = {}
        self._lock = threading.Lock()

    def bind(self, name: str, obj: Any) -> None:
        binding = Binding.of(name, obj)
        with self._lock:
            self._bindings[name] = binding

    def binding(self, name: str) -> Binding:
        with self._lock:
            binding = self._bindings.get(name)
        if binding is None:
            raise NotFoundError("module", name)
        return binding

    def resolve(self, name: str) -> Any:
        return self.binding(name).obj

    def get_config(self, key: str) -> Any:
        with self._lock:
            if key in self._configs:
                return self._configs[key]
        raise NotFoundError("config", key)

    def set_configs(self, *entries: ConfigEntry) -> None:
        """Validate the whole batch, then commit it. Nothing is stored on failure."""

        for entry in entries:
            try:
                self._provider.validate(entry.value)
            except Exception as exc:
                raise ConfigValidationError(entry.key, exc) from exc
        with self._lock:
            for entry in entries:
                self._configs[entry.key] = entry.value

    def names(self) -> list[str]:
        with self._lock:
            return list(self._bindings)

    def config_keys(self) -> list[str]:
        with self._lock:
            return list(self._configs)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._bindings
