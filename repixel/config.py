from __future__ import annotations

import dataclasses
import json
import logging
import typing
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError


@dataclass
class RepixelConfig:
    duration_ms: float = 3000.0
    max_width: int = 800
    max_height: int = 800
    fps: int = 30
    # extra copies of the final frame appended to exports
    hold_frames: int = 0
    log_level: str = "INFO"

    def replace(self, **overrides) -> "RepixelConfig":
        """Copy with every override that is not None applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")
        hints = typing.get_type_hints(type(self))
        checked = {k: _coerce(k, v, hints[k]) for k, v in changes.items()}
        return dataclasses.replace(self, **checked)


def _coerce(name: str, value, kind: type):
    # bool is an int subclass, but `"fps": true` is still a mistake
    if isinstance(value, bool):
        raise ConfigError(f"config {name} must be {kind.__name__}, got {value!r}")
    if kind is float and isinstance(value, (int, float)):
        return float(value)
    if kind is int and isinstance(value, int):
        return value
    if kind is int and isinstance(value, float) and value.is_integer():
        return int(value)
    if kind is str and isinstance(value, str):
        if name == "log_level" and not isinstance(logging.getLevelName(value.upper()), int):
            raise ConfigError(f"unknown log level {value!r}")
        return value
    raise ConfigError(f"config {name} must be {kind.__name__}, got {value!r}")


def load_config(path: str | Path, base: RepixelConfig | None = None) -> RepixelConfig:
    base = base or RepixelConfig()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must hold a JSON object")
    return base.replace(**data)
