from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib.bench_config import BenchConfig, WorkloadConfig, load_bench_config, parse_args
from lib.bench_utils import prepare_run_dir, resolve_value_dtype, save_resolved_config
from lib.config_base import parse_override


def test_load_toml_with_nested_sections(tmp_path: Path) -> None:
    path = tmp_path / "bench.toml"
    path.write_text(
        "seed = 5\n"
        "audit_interval = 10\n"
        "[workload]\n"
        "num_ops = 123\n"
        "build_mode = \"iterable\"\n"
        "[output]\n"
        "run_name = \"tiny\"\n"
    )

    cfg = BenchConfig.load(path)

    assert cfg.seed == 5
    assert cfg.audit_interval == 10
    assert isinstance(cfg.workload, WorkloadConfig)
    assert cfg.workload.num_ops == 123
    assert cfg.workload.build_mode == "iterable"
    assert cfg.workload.initial_size == WorkloadConfig().initial_size
    assert cfg.output.run_name == "tiny"


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "bench.json"
    path.write_text(json.dumps({"compare_naive": False, "logging": {"progress": False}}))

    cfg = BenchConfig.load(path)
    assert cfg.compare_naive is False
    assert cfg.logging.progress is False


def test_load_rejects_bad_files(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        BenchConfig.load(tmp_path / "missing.toml")

    yaml_path = tmp_path / "bench.yaml"
    yaml_path.write_text("seed: 1\n")
    with pytest.raises(ValueError, match="Unsupported config format"):
        BenchConfig.load(yaml_path)

    unknown = tmp_path / "unknown.toml"
    unknown.write_text("[workload]\nnum_opz = 3\n")
    with pytest.raises(ValueError, match="num_opz"):
        BenchConfig.load(unknown)


def test_parse_override_decodes_values() -> None:
    assert parse_override("seed=3") == ("seed", 3)
    assert parse_override("compare_naive=false") == ("compare_naive", False)
    assert parse_override("workload.build_mode=iterable") == ("workload.build_mode", "iterable")
    assert parse_override("output.run_id='a=b'") == ("output.run_id", "a=b")
    with pytest.raises(ValueError):
        parse_override("seed")


def test_flat_updates_reach_nested_sections() -> None:
    cfg = BenchConfig().with_flat_updates({"workload.num_ops": 7, "output.run_name": "x", "seed": 2})
    assert (cfg.workload.num_ops, cfg.output.run_name, cfg.seed) == (7, "x", 2)

    with pytest.raises(ValueError, match="Unknown config section"):
        cfg.with_flat_updates({"workload..num_ops": 1})
    with pytest.raises(ValueError, match="Unknown config section"):
        cfg.with_flat_updates({"seed.value": 1})


def test_cli_overrides_apply_on_top_of_file(tmp_path: Path) -> None:
    path = tmp_path / "bench.toml"
    path.write_text("seed = 1\n[workload]\nnum_ops = 10\n")
    args = parse_args(["--config", str(path), "--set", "workload.num_ops=99", "--set", "seed=4"])

    cfg = load_bench_config(args)

    assert cfg.seed == 4
    assert cfg.workload.num_ops == 99
    assert not args.print_config


def test_overrides_are_validated() -> None:
    cfg = BenchConfig()
    with pytest.raises(ValueError, match="Unknown config field"):
        cfg.with_flat_updates({"workload.nope": 1})
    with pytest.raises(ValueError, match="Expected mapping"):
        cfg.with_flat_updates({"workload": 3})
    with pytest.raises(ValueError, match="Expected scalar"):
        cfg.with_flat_updates({"seed": {"x": 1}})
    with pytest.raises(ValueError, match="build_mode"):
        cfg.with_flat_updates({"workload.build_mode": "random"})


def test_workload_validation() -> None:
    with pytest.raises(ValueError):
        WorkloadConfig(value_range=0)
    with pytest.raises(ValueError):
        WorkloadConfig(add_weight=0, poll_weight=0, remove_weight=0, contains_weight=0)
    with pytest.raises(ValueError):
        WorkloadConfig(remove_weight=-1)
    with pytest.raises(ValueError):
        BenchConfig(audit_interval=-1)


def test_resolve_value_dtype() -> None:
    assert resolve_value_dtype("int64").kind == "i"
    assert resolve_value_dtype("float64").kind == "f"
    with pytest.raises(ValueError, match="Unsupported value_dtype"):
        resolve_value_dtype("complex128")


def test_run_dir_and_resolved_config(tmp_path: Path) -> None:
    cfg = BenchConfig().with_flat_updates({"output.out_dir": str(tmp_path), "output.run_name": "r"})
    run_dir = prepare_run_dir(cfg)

    assert run_dir.parent == tmp_path
    assert run_dir.name == f"r_{cfg.output.run_id}"
    save_resolved_config(cfg, run_dir / "config.resolved.json")
    saved = json.loads((run_dir / "config.resolved.json").read_text())
    assert BenchConfig.from_dict(saved) == cfg
