"""Tests for the rvgnav-simulate command-line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rvgnav.experiments.simulate import _Settings, main


class TestSettings:
    def test_flag_strings(self) -> None:
        settings = _Settings({"render": "off"})
        assert settings.flag("yes", "render", False) is True
        assert settings.flag(None, "render", True) is False
        with pytest.raises(ValueError, match="render must be a boolean value"):
            settings.flag("maybe", "render", False)

    def test_integer_rejects_fractional_float(self) -> None:
        settings = _Settings({"steps": 3.0, "seed": 2.5})
        assert settings.integer(None, "steps", 10) == 3
        with pytest.raises(ValueError, match="seed must be an integer value"):
            settings.integer(None, "seed", 0)

    def test_integer_rejects_bool(self) -> None:
        with pytest.raises(ValueError, match="agents must be an integer value"):
            _Settings({"agents": True}).integer(None, "agents", 1)

    def test_cli_beats_file_beats_default(self) -> None:
        settings = _Settings({"dt": 0.5})
        assert settings.real(0.1, "dt", 0.02) == 0.1
        assert settings.real(None, "dt", 0.02) == 0.5
        assert settings.real(None, "missing", 0.02) == 0.02
        assert settings.path(None, "out_dir", "data") == Path("data")


def test_main_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["--agents", "2", "--steps", "5", "--seed", "3", "--out-dir", str(tmp_path)])
    summary = json.loads(capsys.readouterr().out)
    assert summary["steps"] == 5
    assert summary["num_agents"] == 2
    assert summary["run_id"] == "seed3_a2"
    assert (tmp_path / "logs" / "trajectory.parquet").exists()


def test_config_file_values_with_cli_override(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"agents": 1, "steps": 4, "seed": 6}))
    main(["--config", str(config_path), "--steps", "3", "--out-dir", str(tmp_path / "out")])
    summary = json.loads(capsys.readouterr().out)
    assert summary["num_agents"] == 1
    assert summary["steps"] == 3
    assert summary["run_id"] == "seed6_a1"


def test_missing_config_file_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--config", str(tmp_path / "missing.json")])


def test_invalid_value_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--steps", "0", "--out-dir", str(tmp_path)])


def test_too_many_agents_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--agents", "100000", "--steps", "1", "--out-dir", str(tmp_path)])
    assert excinfo.value.code == 1


def test_non_object_config_file_exits(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]")
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(config_path), "--out-dir", str(tmp_path)])
    assert excinfo.value.code == 2
