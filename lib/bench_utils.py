from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np

from lib.bench_config import BenchConfig


def resolve_value_dtype(dtype_name: str) -> np.dtype:
    mapping: dict[str, Any] = {
        "int32": np.int32,
        "int64": np.int64,
        "float64": np.float64,
    }
    if dtype_name not in mapping:
        raise ValueError(f"Unsupported value_dtype `{dtype_name}`. Choices: {list(mapping)}")
    return np.dtype(mapping[dtype_name])


def prepare_run_dir(cfg: BenchConfig) -> Path:
    run_id = cfg.output.run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
    cfg.output.run_id = run_id
    run_dir = Path(cfg.output.out_dir) / f"{cfg.output.run_name}_{run_id}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def write_json(payload: dict[str, Any], out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, indent=2, sort_keys=True))


def save_resolved_config(cfg: BenchConfig, out_path: Path) -> None:
    write_json(cfg.to_dict(), out_path)
