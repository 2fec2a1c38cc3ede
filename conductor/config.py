"""Module configuration entries, validation provider and container settings."""

from __future__ import annotations

import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

import yaml
from pydantic import BaseModel, Field, field_validator

from .capabilities import Validator


@dataclass(frozen=True)
class ConfigEntry:
    key: str
    value: Any


class ConfigProvider(Protocol):
    def validate(self, value: Any) -> None:
        """Raise when ``value`` is not an acceptable configuration object."""
        ...


class ModelConfigProvider:
    """Validate pydantic models and self-validating config objects.

    Pydantic models are re-validated from their dumped data, so fields assigned
    after construction are checked too. The dump is taken by alias and in
    round-trip mode, which leaves computed fields out. Other objects are
    validated through their own ``validate()`` when they have one and accepted
    as-is otherwise.
    """

    def validate(self, value: Any) -> None:
        if isinstance(value, BaseModel):
            type(value).model_validate(value.model_dump(by_alias=True, round_trip=True))
            return
        if isinstance(value, Validator):
            value.validate()


class ContainerSettings(BaseModel):
    name: str = Field("conductor", description="Component name bound to container log lines.")
    log_level: str = Field("INFO", description="Minimum loguru level for configured sinks.")
    log_dir: Optional[Path] = Field(
        None,
        description="Directory for the rotating log file; console only when unset.",
    )
    handle_signals: bool = Field(
        True,
        description="Register an OS signal stop source when serving.",
    )
    signals: list[str] = Field(
        default_factory=lambda: ["SIGINT", "SIGTERM"],
        description="Signal names that request shutdown.",
    )
    task_join_timeout_s: float = Field(
        5.0,
        ge=0.0,
        description="How long serve() waits for run() threads after shutdown.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("signals")
    @classmethod
    def known_signals(cls, value: list[str]) -> list[str]:
        names = [item.strip().upper() for item in value]
        unknown = [item for item in names if not isinstance(getattr(signal, item, None), int)]
        if unknown:
            raise ValueError(f"unknown signal names: {unknown}")
        return names


def _read_yaml(path: Path | str) -> dict[str, Any]:
    config_path = Path(path)
    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")
    return data


def load_settings(path: Path | str) -> ContainerSettings:
    """Load container settings from the ``container`` section of a YAML file."""

    data = _read_yaml(path)
    return ContainerSettings.model_validate(data.get("container") or {})


def load_module_configs(
    path: Path | str, schemas: Mapping[str, type[BaseModel]]
) -> list[ConfigEntry]:
    """Build config entries from the ``modules`` section of a YAML file.

    Each key listed in ``schemas`` is parsed with its model; a key missing from
    the file gets the model's defaults. Keys in the file without a schema are
    ignored.
    """

    data = _read_yaml(path)
    sections = data.get("modules") or {}
    if not isinstance(sections, dict):
        raise ValueError(f"{path}: 'modules' must be a mapping")
    entries: list[ConfigEntry] = []
    for key, model in schemas.items():
        entries.append(ConfigEntry(key=key, value=model.model_validate(sections.get(key) or {})))
    return entries
