"""User settings for spendbook, kept in a TOML file.

Every key is optional. A missing key, or one holding the wrong type, falls
back to the built-in default.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from spendbook.domain.models import CATEGORIES, DEFAULT_CATEGORY, CategoryName


@dataclass(frozen=True)
class Settings:
    """Display and input settings."""

    currency_symbol: str = "$"
    categories: list[CategoryName] = field(default_factory=lambda: list(CATEGORIES))
    default_category: CategoryName = DEFAULT_CATEGORY
    bar_width: int = 40

    def to_toml(self) -> dict[str, Any]:
        return {
            "currency_symbol": self.currency_symbol,
            "categories": [str(cat) for cat in self.categories],
            "default_category": str(self.default_category),
            "bar_width": self.bar_width,
        }


def get_config_path() -> Path:
    """Settings file location ($XDG_CONFIG_HOME/spendbook, or ~/.config/spendbook)."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "spendbook" / "config.toml"


def write_settings(settings: Settings, config_path: Path | None = None) -> Path:
    """Write settings to the TOML file, readable by the owner only.

    Args:
        settings: Settings to write.
        config_path: Path to config file. If None, uses default location.

    Returns:
        Path that was written.
    """
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(settings.to_toml(), f)
    os.chmod(config_path, 0o600)
    return config_path


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Merge a configuration dictionary over the default settings.

    Args:
        config: Decoded TOML (possibly partial).

    Returns:
        Settings with unknown or mistyped keys left at their defaults.
    """
    defaults = Settings()

    symbol = config.get("currency_symbol")
    if not isinstance(symbol, str):
        symbol = defaults.currency_symbol

    raw_categories = config.get("categories")
    if isinstance(raw_categories, list) and raw_categories and all(isinstance(c, str) for c in raw_categories):
        categories = [CategoryName(c) for c in raw_categories]
    else:
        categories = defaults.categories

    # The default has to be one of the offered categories
    default_category = config.get("default_category")
    if not isinstance(default_category, str) or default_category not in categories:
        default_category = categories[0]

    bar_width = config.get("bar_width")
    if isinstance(bar_width, bool) or not isinstance(bar_width, int) or bar_width <= 0:
        bar_width = defaults.bar_width

    return Settings(
        currency_symbol=symbol,
        categories=categories,
        default_category=CategoryName(default_category),
        bar_width=bar_width,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Read settings, using defaults when there is no settings file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    config_path = config_path or get_config_path()
    try:
        with open(config_path, "rb") as f:
            config = tomllib.load(f)
    except FileNotFoundError:
        return Settings()
    return settings_from_config(config)
