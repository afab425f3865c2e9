import json
from pathlib import Path

import numpy as np
from typer.testing import CliRunner

from isoplate.cli import app

runner = CliRunner()


def test_solve_reference_plate_prints_every_iteration():
    result = runner.invoke(app, ["solve"])

    assert result.exit_code == 0
    assert "Initial Temperatures:" in result.stdout
    assert "Temperature Iteration #7:" in result.stdout
    assert "Temperature Iteration #8:" not in result.stdout
    assert "100.0    50.0    87.5   200.0" in result.stdout
    assert "100.0   125.0   150.0   200.0" in result.stdout
    assert result.stdout.rstrip().endswith("Equilibrium reached.")


def test_solve_quiet_prints_final_grid_only():
    result = runner.invoke(app, ["solve", "--quiet"])

    assert result.exit_code == 0
    assert "Initial Temperatures:" not in result.stdout
    assert "Temperature Iteration #1:" not in result.stdout
    assert "Temperature Iteration #7:" in result.stdout


def test_solve_writes_run_artifacts(tmp_path: Path):
    out_dir = tmp_path / "run"

    result = runner.invoke(app, ["solve", "--out", str(out_dir), "--quiet"])

    assert result.exit_code == 0
    history = np.load(out_dir / "history.npy")
    field = np.load(out_dir / "field.npy")
    assert history.shape == (8, 4, 4)
    np.testing.assert_array_equal(field, history[-1])

    with (out_dir / "metrics.json").open() as f:
        metrics = json.load(f)
    assert metrics["n_sweeps"] == 7
    assert metrics["final_max_change"] <= metrics["tolerance"]
    assert metrics["max_temperature"] == 200.0

    with (out_dir / "config.json").open() as f:
        assert json.load(f)["grid"] == {"rows": 4, "cols": 4}


def test_invalid_config_does_not_create_run_dir(tmp_path: Path):
    bad_config = {
        "grid": {"rows": 2, "cols": 4},
        "boundary": {"tolerance": 0.2},
    }

    cfg_path = tmp_path / "bad.json"
    cfg_path.write_text(json.dumps(bad_config))

    out_dir = tmp_path / "run"

    result = runner.invoke(
        app,
        [
            "solve",
            "--config",
            str(cfg_path),
            "--out",
            str(out_dir),
        ],
    )

    assert result.exit_code != 0
    assert "Validation failed" in result.output
    assert not out_dir.exists()


def test_existing_run_dir_is_rejected(tmp_path: Path):
    out_dir = tmp_path / "run"
    out_dir.mkdir()

    result = runner.invoke(app, ["solve", "--out", str(out_dir)])

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert not (out_dir / "history.npy").exists()


def test_sweep_cap_exits_with_error(tmp_path: Path):
    cfg_path = tmp_path / "fine.json"
    cfg_path.write_text(
        json.dumps({"grid": {"rows": 10, "cols": 10}, "boundary": {"tolerance": 1e-9}})
    )

    result = runner.invoke(
        app, ["solve", "--config", str(cfg_path), "--max-sweeps", "2", "--quiet"]
    )

    assert result.exit_code == 1
    assert "No equilibrium after 2 sweeps" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "isoplate" in result.stdout
