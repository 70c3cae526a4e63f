"""Tests for safespend.config."""

import os
from pathlib import Path

import pytest

from safespend.config import (
    create_default_config,
    get_budget_config,
    get_config_path,
    get_configured_db_path,
    get_data_dir,
    load_config,
    set_budget_config,
)
from safespend.domain.budget import DEFAULT_BUDGET_CONFIG, BudgetConfig


class TestConfigFile:
    """Tests for creating and loading the config file."""

    def test_path_follows_xdg(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Should place the config under XDG_CONFIG_HOME."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "safespend" / "config.toml"

    def test_data_dir_follows_xdg(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Should place data under XDG_DATA_HOME."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert get_data_dir() == tmp_path / "safespend"

    def test_data_dir_fallback(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Should fall back to ~/.local/share without XDG_DATA_HOME."""
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_data_dir() == tmp_path / ".local" / "share" / "safespend"

    def test_default_config(self, tmp_path: Path) -> None:
        """Should write defaults with owner-only permissions."""
        config_path = tmp_path / "safespend" / "config.toml"
        create_default_config(config_path)

        config = load_config(config_path)
        assert config["budget"]["savings_percentage"] == 0.15
        assert config["storage"]["db_path"] == ""
        assert os.stat(config_path).st_mode & 0o777 == 0o600

    def test_load_missing_raises(self, tmp_path: Path) -> None:
        """Should raise when the file doesn't exist."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")


class TestBudgetConfig:
    """Tests for get_budget_config and set_budget_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Should use default fractions without a config file."""
        assert get_budget_config(tmp_path / "missing.toml") == DEFAULT_BUDGET_CONFIG

    def test_reads_budget_section(self, tmp_path: Path) -> None:
        """Should read fractions and default the missing ones."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("[budget]\nfixed_expenses_percentage = 0.4\nsavings_percentage = 0.2\n")

        assert get_budget_config(config_path) == BudgetConfig(
            fixed_expenses_percentage=0.4,
            savings_percentage=0.2,
            investment_percentage=0.05,
        )

    def test_invalid_fractions_give_defaults(self, tmp_path: Path) -> None:
        """Should ignore fractions adding up to more than 100%."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("[budget]\nfixed_expenses_percentage = 0.9\nsavings_percentage = 0.5\n")

        assert get_budget_config(config_path) == DEFAULT_BUDGET_CONFIG

    def test_broken_toml_gives_defaults(self, tmp_path: Path) -> None:
        """Should ignore a file that isn't valid TOML."""
        config_path = tmp_path / "config.toml"
        config_path.write_text("[budget\n")

        assert get_budget_config(config_path) == DEFAULT_BUDGET_CONFIG

    def test_set_budget_config_keeps_other_sections(self, tmp_path: Path) -> None:
        """Should only replace the [budget] section."""
        config_path = tmp_path / "config.toml"
        create_default_config(config_path)
        config = BudgetConfig(fixed_expenses_percentage=0.3, savings_percentage=0.3, investment_percentage=0.1)

        set_budget_config(config, config_path)

        assert get_budget_config(config_path) == config
        assert load_config(config_path)["storage"] == {"db_path": ""}


class TestConfiguredDbPath:
    """Tests for get_configured_db_path."""

    def test_empty_override(self, tmp_path: Path) -> None:
        """Should treat an empty db_path as no override."""
        config_path = tmp_path / "config.toml"
        create_default_config(config_path)
        assert get_configured_db_path(config_path) is None

    def test_override(self, tmp_path: Path) -> None:
        """Should return the configured database path."""
        config_path = tmp_path / "config.toml"
        config_path.write_text(f'[storage]\ndb_path = "{tmp_path / "budget.db"}"\n')
        assert get_configured_db_path(config_path) == tmp_path / "budget.db"
