from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any

import yaml


def load_sweep_config(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Sweep config not found: {p}")
    if p.suffix not in (".yaml", ".yml"):
        raise ValueError(
            f"Unsupported sweep config format: {p.suffix}. Only .yaml is supported."
        )

    data = yaml.safe_load(p.read_text())

    if not isinstance(data, dict):
        raise ValueError("Sweep config must be a mapping at the top level.")
    if not isinstance(data.get("parameters"), dict) or not data["parameters"]:
        raise ValueError("Sweep config needs a non-empty `parameters` mapping.")
    return data


def expand_grid(sweep_cfg: dict[str, Any]) -> list[dict[str, Any]]:
    """Cartesian product of every ``parameters.<dotted.key>.values`` list."""
    keys: list[str] = []
    choices: list[list[Any]] = []
    for key, spec in sweep_cfg["parameters"].items():
        if isinstance(spec, dict) and "value" in spec:
            values = [spec["value"]]
        elif isinstance(spec, dict) and isinstance(spec.get("values"), list):
            values = spec["values"]
        else:
            raise ValueError(f"Sweep parameter `{key}` needs a `value` or a `values` list.")
        if not values:
            raise ValueError(f"Sweep parameter `{key}` has no values.")
        keys.append(key)
        choices.append(values)
    return [dict(zip(keys, combo)) for combo in itertools.product(*choices)]


def run_name_for(overrides: dict[str, Any]) -> str:
    parts = [f"{key}-{value}" for key, value in overrides.items()]
    name = "_".join(parts)
    safe = "".join(ch if ch.isalnum() or ch in {"-", "_", "."} else "_" for ch in name)
    return safe.strip("_") or "sweep"
