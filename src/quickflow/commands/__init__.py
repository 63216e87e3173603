"""Built-in wizard commands."""

from quickflow.commands.branch import (
    BranchCommand,
    BranchCreateCommand,
    BranchDeleteCommand,
    RefStore,
)
from quickflow.wizard.registry import CommandRegistry


def register_builtin_commands(registry: CommandRegistry, store: RefStore | None = None) -> CommandRegistry:
    """Register the built-in commands, sharing one ``RefStore`` between them."""
    store = store if store is not None else RefStore()
    registry.register("branch", lambda args: BranchCommand(args, store=store), "create or delete branches")
    return registry


__all__ = [
    "BranchCommand",
    "BranchCreateCommand",
    "BranchDeleteCommand",
    "RefStore",
    "register_builtin_commands",
]
