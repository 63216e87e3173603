"""
Quickflow exception taxonomy.

Navigation outcomes (going back, cancelling) are data, not exceptions.
Everything raised from here signals a flow-authoring or setup bug.
"""


class QuickflowError(Exception):
    """Base exception for quickflow errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownSubcommandError(QuickflowError, KeyError):
    """Raised when a flow delegates to a command or subcommand that isn't registered."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Unknown subcommand: {name}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class StepDisposedError(QuickflowError):
    """Raised when a step handle is used after its scope was released."""

    def __init__(self, step: str):
        self.step = step
        super().__init__(f"Step '{step}' was used after it was disposed")


class ConfigError(QuickflowError):
    """Raised when the configuration file can't be read."""

    pass
