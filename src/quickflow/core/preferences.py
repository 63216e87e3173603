"""
Confirmation preferences.

Commands ask a preference store whether the user chose to skip the
confirmation step for a given ``skip_confirm_key``.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from quickflow.core.config import QuickflowConfig


@runtime_checkable
class PreferenceStore(Protocol):
    """Key/value store answering "skip confirmation for this key?"."""

    def get(self, key: str) -> bool:
        """Return True if confirmation should be skipped for ``key``."""
        ...

    def toggle(self, key: str) -> bool:
        """Flip the preference for ``key`` and return the new value."""
        ...


class MemoryPreferenceStore:
    """In-process preference store; nothing is persisted."""

    def __init__(self, skip_confirmations: list[str] | None = None) -> None:
        self._keys: set[str] = set(skip_confirmations or [])

    def get(self, key: str) -> bool:
        return key in self._keys

    def toggle(self, key: str) -> bool:
        if key in self._keys:
            self._keys.remove(key)
            return False
        self._keys.add(key)
        return True

    def keys(self) -> list[str]:
        return sorted(self._keys)


class ConfigPreferenceStore:
    """
    Preference store backed by ``QuickflowConfig.skip_confirmations``.

    When bound to a path, every toggle is written back to the YAML file.
    """

    def __init__(self, config: QuickflowConfig, path: Path | None = None) -> None:
        self.config = config
        self.path = path

    @classmethod
    def from_file(cls, path: Path) -> "ConfigPreferenceStore":
        return cls(QuickflowConfig.from_file(path), path)

    def get(self, key: str) -> bool:
        return key in self.config.skip_confirmations

    def toggle(self, key: str) -> bool:
        keys = self.config.skip_confirmations
        if key in keys:
            keys.remove(key)
            enabled = False
        else:
            keys.append(key)
            enabled = True

        if self.path is not None:
            self.config.save(self.path)
        return enabled

    def keys(self) -> list[str]:
        return list(self.config.skip_confirmations)

    def clear(self) -> None:
        self.config.skip_confirmations.clear()
        if self.path is not None:
            self.config.save(self.path)
