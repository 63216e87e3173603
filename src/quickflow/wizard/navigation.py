"""
Wizard navigation state.

A single NavigationContext is created per top-level wizard invocation and is
shared, by reference, with every flow the wizard delegates into. It keeps a
stack of history levels (one per active flow) so that "back" can cross the
boundary between a delegated flow and its caller.

Layout:
    history = [
        ["pick-subcommand"],          # outer flow
        ["create-name", "confirm"],   # delegated flow (top of the stack)
    ]
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class StartedFrom(str, Enum):
    """How the outermost flow was invoked."""

    MENU = "menu"
    COMMAND = "command"


class _StepsComplete:
    """Terminal marker for ``NavigationContext.current_step``."""

    _instance: "_StepsComplete | None" = None

    def __new__(cls) -> "_StepsComplete":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "StepsComplete"


StepsComplete = _StepsComplete()


@dataclass
class NavigationContext:
    """
    Shared navigation state for one wizard invocation.

    Attributes:
        history: Stack of levels; each level lists visited step ids in order.
        current_step: Step the wizard is sitting on, ``StepsComplete`` or None.
        starting_step: First step ever entered in this invocation.
        started_from: How the outermost flow was invoked.
        can_go_back: Cached flag maintained by the open step handle.
    """

    history: list[list[str]] = field(default_factory=list)
    current_step: Any = None
    starting_step: str | None = None
    started_from: StartedFrom | None = None
    can_go_back: bool = False

    @property
    def current_level(self) -> list[str]:
        """History of the innermost active flow."""
        if not self.history:
            raise IndexError("No active history level")
        return self.history[-1]

    @property
    def outer_level(self) -> list[str] | None:
        """History of the flow that delegated into the current one (if any)."""
        if len(self.history) < 2:
            return None
        return self.history[-2]

    @property
    def is_complete(self) -> bool:
        return self.current_step is StepsComplete

    def push_level(self) -> None:
        """Open a new (empty) history level for a flow invocation."""
        self.history.append([])
        logger.debug(f"Pushed history level {len(self.history)}")

    def pop_level(self) -> None:
        """
        Close the innermost history level.

        Re-synchronizes ``current_step`` to the parent level's last step unless
        the wizard has been marked complete.
        """
        self.history.pop()
        logger.debug(f"Popped history level, {len(self.history)} remaining")

        if self.current_step is StepsComplete:
            return

        if self.history and self.history[-1]:
            self.current_step = self.history[-1][-1]
        else:
            self.current_step = None

    def enter(self, step: str) -> None:
        """
        Record a visit to ``step`` in the current level.

        A step already in the level is moved to the tail instead of being
        duplicated (toggling back and forth between two steps).
        """
        level = self.current_level

        if step in level and level[-1] != step:
            level.remove(step)

        if not level or level[-1] != step:
            level.append(step)

        self.current_step = step
        if self.starting_step is None:
            self.starting_step = step

        logger.debug(f"Entered step '{step}' (level {len(self.history)}: {level})")

    def compute_can_go_back(self, step: str) -> bool:
        """
        Check whether "back" is legal from ``step``.

        The starting step can only go back when the wizard was opened from a
        menu. Otherwise back needs either a previous step in this level, or a
        single step in this level with a caller level to return into.
        """
        if step == self.starting_step:
            return self.started_from == StartedFrom.MENU

        level = self.current_level
        if len(level) > 1:
            return True
        return len(level) == 1 and bool(self.outer_level)


@dataclass
class StepsContext:
    """
    Per-flow context handed to flow bodies.

    Flows subclass this to carry their own domain data. The ``steps``
    navigation state is shared by reference when one flow delegates into
    another.
    """

    title: str = ""
    steps: NavigationContext | None = None

    def ensure_steps(self) -> NavigationContext:
        """Return the navigation state, creating it if absent."""
        if self.steps is None:
            self.steps = NavigationContext()
        return self.steps
