"""
Command registry.

Maps command keys to factories so the driver's menu, composite commands and
"jump to another command" steps can create commands by name.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from quickflow.core.preferences import PreferenceStore
from quickflow.errors import UnknownSubcommandError
from quickflow.wizard.command import QuickCommand
from quickflow.wizard.navigation import StartedFrom, StepsContext
from quickflow.wizard.steps import StepGenerator

logger = logging.getLogger(__name__)

# Factories receive command args: {"state": {...}, "confirm": bool | None}
CommandFactory = Callable[..., QuickCommand]


@dataclass
class CommandInfo:
    """Metadata about a registered command."""

    key: str
    factory: CommandFactory
    description: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


class CommandRegistry:
    """
    Registry of command factories.

    Example:
        registry = CommandRegistry()
        registry.register("branch", BranchCommand, "create or delete branches")
        command = registry.create("branch", {"state": {"subcommand": "create"}})
    """

    def __init__(self, preferences: PreferenceStore | None = None) -> None:
        self.preferences = preferences
        self._registered: dict[str, CommandInfo] = {}

    def register(
        self,
        key: str,
        factory: CommandFactory,
        description: str = "",
        **metadata: Any,
    ) -> None:
        """Register (or replace) a command factory under ``key``."""
        self._registered[key] = CommandInfo(
            key=key,
            factory=factory,
            description=description,
            metadata=metadata,
        )

    def unregister(self, key: str) -> bool:
        return self._registered.pop(key, None) is not None

    def is_registered(self, key: str) -> bool:
        return key in self._registered

    def get_info(self, key: str) -> CommandInfo | None:
        return self._registered.get(key)

    def list_info(self) -> list[CommandInfo]:
        return list(self._registered.values())

    def get_registered_names(self) -> list[str]:
        return list(self._registered.keys())

    def create(self, key: str, args: dict[str, Any] | None = None) -> QuickCommand:
        """
        Create a command by key.

        Raises:
            UnknownSubcommandError: If nothing is registered under ``key``.
        """
        info = self._registered.get(key)
        if info is None:
            raise UnknownSubcommandError(key, self.get_registered_names())

        command = info.factory(args)
        if command.preferences is None:
            command.preferences = self.preferences
        return command

    def create_all(self) -> list[QuickCommand]:
        """Fresh instances of every registered command, in registration order."""
        return [self.create(key) for key in self._registered]

    def __contains__(self, key: str) -> bool:
        return key in self._registered

    def __len__(self) -> int:
        return len(self._registered)


def get_steps(
    registry: CommandRegistry,
    key: str,
    args: dict[str, Any] | None,
    context: StepsContext,
    started_from: StartedFrom | None,
) -> StepGenerator:
    """
    Jump into another command from inside a running flow.

    The target runs against the caller's context, so back-navigation from
    its first step lands on the caller's last step.
    """
    command = registry.create(key, args)
    command.started_from = started_from
    logger.debug(f"Delegating to command '{key}'")
    return command.execute_steps(context)
