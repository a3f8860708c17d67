"""Tests for the proctop command line."""

from click.testing import CliRunner

import proctop.app
import proctop.logging
from proctop.cli import main
from proctop.config import Config


def test_write_config(tmp_path):
    """Test --write-config saves the effective config without starting the UI."""
    path = tmp_path / "config.toml"
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["--config", str(path), "--interval", "2", "--measure-elapsed", "--write-config"],
    )

    assert result.exit_code == 0
    assert "Wrote config" in result.output
    config = Config.load(path)
    assert config.display.poll_interval == 2.0
    assert config.sampling.measure_elapsed is True


def test_invalid_option_reported(tmp_path):
    """Test invalid values are reported as a CLI error."""
    runner = CliRunner()

    result = runner.invoke(main, ["--config", str(tmp_path / "c.toml"), "--interval", "0"])

    assert result.exit_code != 0
    assert "poll_interval must be > 0" in result.output


def test_invalid_config_file_reported(tmp_path):
    """Test a broken config file is reported as a CLI error."""
    path = tmp_path / "config.toml"
    path.write_text("not = [valid")
    runner = CliRunner()

    result = runner.invoke(main, ["--config", str(path)])

    assert result.exit_code != 0
    assert "Failed to parse" in result.output


def test_runs_dashboard_with_overrides(tmp_path, monkeypatch):
    """Test options flow into the config handed to the dashboard."""
    seen = {}
    monkeypatch.setattr(proctop.app, "run", lambda config: seen.setdefault("config", config))
    monkeypatch.setattr(proctop.logging, "configure", lambda config: None)
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["--config", str(tmp_path / "c.toml"), "--name-width", "12", "--nominal-interval"],
    )

    assert result.exit_code == 0
    config = seen["config"]
    assert config.display.name_width == 12
    assert config.sampling.measure_elapsed is False
    assert config.display.poll_interval == 1.0


def test_non_table_section_reported(tmp_path):
    """Test a scalar where a section belongs is reported as a CLI error."""
    path = tmp_path / "config.toml"
    path.write_text("display = 5\n")
    runner = CliRunner()

    result = runner.invoke(main, ["--config", str(path)])

    assert result.exit_code != 0
    assert "[display] must be a table" in result.output
