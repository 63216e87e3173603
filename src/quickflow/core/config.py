"""
Quickflow configuration management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from quickflow.errors import ConfigError

CONFIG_DIR = ".quickflow"
CONFIG_FILE = "config.yaml"


@dataclass
class QuickflowConfig:
    """
    Complete quickflow configuration.

    Loaded from .quickflow/config.yaml.
    """

    # Commands whose confirmation step the user chose to skip,
    # as "<key>:<menu|command>" (see QuickCommand.skip_confirm_key)
    skip_confirmations: list[str] = field(default_factory=list)

    # Close the wizard when the terminal loses focus (console driver ignores it)
    close_on_focus_out: bool = False

    # Render the "b = back" hint next to steps that allow going back
    show_back_hint: bool = True

    @classmethod
    def from_file(cls, path: Path) -> "QuickflowConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration file {path}: expected a mapping")

        return cls.from_dict(data.get("quickflow", data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuickflowConfig":
        """Create config from dictionary."""
        config = cls()

        if "skip_confirmations" in data:
            config.skip_confirmations = [str(k) for k in data["skip_confirmations"] or []]

        if "close_on_focus_out" in data:
            config.close_on_focus_out = bool(data["close_on_focus_out"])

        if "show_back_hint" in data:
            config.show_back_hint = bool(data["show_back_hint"])

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "quickflow": {
                "skip_confirmations": list(self.skip_confirmations),
                "close_on_focus_out": self.close_on_focus_out,
                "show_back_hint": self.show_back_hint,
            }
        }

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)


def get_config_path(project_path: Path | None = None) -> Path:
    if project_path is None:
        project_path = Path.cwd()
    return project_path / CONFIG_DIR / CONFIG_FILE


# Global config instance
_config: QuickflowConfig | None = None


def get_config(project_path: Path | None = None) -> QuickflowConfig:
    """
    Get quickflow configuration.

    Loads from .quickflow/config.yaml in the project directory.
    Falls back to defaults if not found.
    """
    global _config

    if _config is not None:
        return _config

    _config = QuickflowConfig.from_file(get_config_path(project_path))
    return _config


def reset_config() -> None:
    """Forget the cached configuration."""
    global _config
    _config = None
