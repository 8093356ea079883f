"""Configuration file management for tourbook."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from tourbook.domain.currency import DEFAULT_RATES
from tourbook.exchange import DEFAULT_REFRESH_SECONDS
from tourbook.integrations.bank_rates import DEFAULT_TIMEOUT
from tourbook.store.ledger_store import DEFAULT_STORAGE_KEY
from tourbook.store.persistence import RATES_KEY

# Placeholder endpoint; point [rates] url at the bank feed you use
DEFAULT_RATES_URL = "https://rates.example.com/api/bank-rates"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    storage_key: str = DEFAULT_STORAGE_KEY
    data_dir: Path | None = None
    rates_url: str = DEFAULT_RATES_URL
    rates_timeout: float = DEFAULT_TIMEOUT
    refresh_minutes: float = DEFAULT_REFRESH_SECONDS / 60
    default_rates: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_RATES))

    @property
    def refresh_seconds(self) -> float:
        return self.refresh_minutes * 60


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "tourbook" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the config written by 'tourbook init'."""
    return {
        "storage": {"key": DEFAULT_STORAGE_KEY},
        "rates": {
            "url": DEFAULT_RATES_URL,
            "timeout": DEFAULT_TIMEOUT,
            "refresh_minutes": DEFAULT_REFRESH_SECONDS / 60,
            "defaults": dict(DEFAULT_RATES),
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

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config(), f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
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

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def _section(config: dict[str, Any], key: str, label: str | None = None) -> dict[str, Any]:
    """Get a config table, raising ValueError if the key holds something else."""
    value = config.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"{label or key} must be a table, got {type(value).__name__}")
    return value


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Merge a config dictionary over the built-in defaults.

    Args:
        config: Parsed config file contents.

    Returns:
        Settings with every missing key defaulted.

    Raises:
        ValueError: If a value has the wrong type.
    """
    storage = _section(config, "storage")
    rates = _section(config, "rates")

    default_rates = dict(DEFAULT_RATES)
    for code, value in _section(rates, "defaults", "rates.defaults").items():
        default_rates[str(code).upper()] = float(value)

    storage_key = str(storage.get("key", DEFAULT_STORAGE_KEY)).strip()
    if not storage_key or storage_key == RATES_KEY:
        raise ValueError(f"storage.key must be a non-empty name other than '{RATES_KEY}'")

    data_dir = storage.get("data_dir")

    return Settings(
        storage_key=storage_key,
        data_dir=Path(data_dir).expanduser() if data_dir else None,
        rates_url=str(rates.get("url", DEFAULT_RATES_URL)),
        rates_timeout=float(rates.get("timeout", DEFAULT_TIMEOUT)),
        refresh_minutes=float(rates.get("refresh_minutes", DEFAULT_REFRESH_SECONDS / 60)),
        default_rates=default_rates,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when no config file exists.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Resolved settings.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()
    return settings_from_config(config)


def set_config_value(section: str, key: str, value: Any, config_path: Path | None = None) -> None:
    """Set a single config value, creating the file if needed.

    Args:
        section: Top-level table name (e.g. "rates").
        key: Key within the table.
        value: New value.
        config_path: Path to config file. If None, uses default location.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = default_config()

    config.setdefault(section, {})[key] = value
    save_config(config, config_path)
