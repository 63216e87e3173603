"""Quickflow core - configuration and preference storage."""

from quickflow.core.config import QuickflowConfig, get_config, get_config_path, reset_config
from quickflow.core.preferences import (
    ConfigPreferenceStore,
    MemoryPreferenceStore,
    PreferenceStore,
)

__all__ = [
    "QuickflowConfig",
    "get_config",
    "get_config_path",
    "reset_config",
    "PreferenceStore",
    "MemoryPreferenceStore",
    "ConfigPreferenceStore",
]
