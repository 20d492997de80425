from __future__ import annotations

import ast
import json
import tomllib
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Mapping, TypeVar

TConfig = TypeVar("TConfig", bound="ConfigBase")


def read_config_file(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    if p.suffix == ".toml":
        data = tomllib.loads(p.read_text())
    elif p.suffix == ".json":
        data = json.loads(p.read_text())
    else:
        raise ValueError(f"Unsupported config format: {p.suffix}. Use .toml or .json.")
    if not isinstance(data, Mapping):
        raise ValueError("Config must parse to a mapping at the top level.")
    return dict(data)


def parse_override(expression: str) -> tuple[str, Any]:
    """Split a ``KEY=VALUE`` expression, decoding VALUE as JSON or a literal."""
    if "=" not in expression:
        raise ValueError(f"Invalid --set expression: `{expression}` (expected KEY=VALUE)")
    key, raw = expression.split("=", 1)
    key = key.strip()
    try:
        return key, json.loads(raw)
    except json.JSONDecodeError:
        pass
    try:
        return key, ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return key, raw


class ConfigBase:
    """Dataclass mixin: nested sections are fields whose default_factory is a ConfigBase."""

    @classmethod
    def load(cls: type[TConfig], config_path: str | Path) -> TConfig:
        return cls.from_dict(read_config_file(config_path))

    @classmethod
    def from_dict(cls: type[TConfig], data: Mapping[str, Any]) -> TConfig:
        known = {f.name: f for f in fields(cls)}  # type: ignore[arg-type]
        unknown = sorted(key for key in data if key not in known)
        if unknown:
            raise ValueError(f"Unknown config field(s) for {cls.__name__}: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            section = known[name].default_factory
            if isinstance(section, type) and issubclass(section, ConfigBase):
                if not isinstance(value, Mapping):
                    raise ValueError(f"Expected mapping for config section `{name}`.")
                value = section.from_dict(value)
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]

    def with_flat_updates(self: TConfig, updates: Mapping[str, Any]) -> TConfig:
        """Apply ``{"section.field": value}`` overrides and re-validate."""
        merged = self.to_dict()
        for dotted_key, value in updates.items():
            *sections, name = dotted_key.split(".")
            target = merged
            for part in sections:
                target = target.get(part)
                if not isinstance(target, dict):
                    raise ValueError(f"Unknown config section `{part}` in `{dotted_key}`.")
            if name not in target:
                raise ValueError(f"Unknown config field `{dotted_key}`.")
            if isinstance(target[name], dict) and not isinstance(value, Mapping):
                raise ValueError(f"Expected mapping for config section `{dotted_key}`.")
            if not isinstance(target[name], dict) and isinstance(value, Mapping):
                raise ValueError(f"Expected scalar value for `{dotted_key}`, got mapping.")
            target[name] = value
        return type(self).from_dict(merged)
