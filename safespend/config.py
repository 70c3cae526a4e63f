"""Configuration file management for safespend."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from safespend.domain.budget import DEFAULT_BUDGET_CONFIG, BudgetConfig, validate_config

logger = logging.getLogger(__name__)


APP_DIR = "safespend"


def _xdg_dir(variable: str, fallback: Path) -> Path:
    value = os.environ.get(variable)
    return Path(value) if value else fallback


def get_config_path() -> Path:
    """Config file under $XDG_CONFIG_HOME (default ~/.config)."""
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / APP_DIR / "config.toml"


def get_data_dir() -> Path:
    """Data directory under $XDG_DATA_HOME (default ~/.local/share)."""
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share") / APP_DIR


def default_config() -> dict[str, Any]:
    return {
        "budget": {
            "fixed_expenses_percentage": DEFAULT_BUDGET_CONFIG.fixed_expenses_percentage,
            "savings_percentage": DEFAULT_BUDGET_CONFIG.savings_percentage,
            "investment_percentage": DEFAULT_BUDGET_CONFIG.investment_percentage,
        },
        "storage": {
            "db_path": "",
        },
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file isn't valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def _load_or_empty(config_path: Path | None) -> dict[str, Any]:
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Ignoring unreadable config file", exc_info=True)
        return {}


def get_budget_config(config_path: Path | None = None) -> BudgetConfig:
    """Get the default allocation fractions for a fresh budget.

    Missing files, missing keys and invalid fractions fall back to the
    built-in defaults.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        BudgetConfig to start new budgets with.
    """
    section = _load_or_empty(config_path).get("budget", {})
    if not isinstance(section, dict):
        return DEFAULT_BUDGET_CONFIG

    try:
        config = BudgetConfig(
            fixed_expenses_percentage=float(
                section.get("fixed_expenses_percentage", DEFAULT_BUDGET_CONFIG.fixed_expenses_percentage)
            ),
            savings_percentage=float(section.get("savings_percentage", DEFAULT_BUDGET_CONFIG.savings_percentage)),
            investment_percentage=float(
                section.get("investment_percentage", DEFAULT_BUDGET_CONFIG.investment_percentage)
            ),
        )
    except (TypeError, ValueError):
        logger.warning("Invalid [budget] values in config; using defaults")
        return DEFAULT_BUDGET_CONFIG

    valid, error = validate_config(config)
    if not valid:
        logger.warning("Invalid [budget] config (%s); using defaults", error)
        return DEFAULT_BUDGET_CONFIG
    return config


def set_budget_config(config: BudgetConfig, config_path: Path | None = None) -> None:
    """Update the [budget] section, keeping everything else in the file.

    Args:
        config: New default allocation fractions.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    data = _load_or_empty(config_path) or default_config()
    data["budget"] = {
        "fixed_expenses_percentage": config.fixed_expenses_percentage,
        "savings_percentage": config.savings_percentage,
        "investment_percentage": config.investment_percentage,
    }
    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(data, config_path)


def get_configured_db_path(config_path: Path | None = None) -> Path | None:
    """Get the database path override from [storage], if one is set."""
    storage = _load_or_empty(config_path).get("storage", {})
    if not isinstance(storage, dict):
        return None
    raw = storage.get("db_path")
    if not raw:
        return None
    return Path(str(raw)).expanduser()
