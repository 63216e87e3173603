"""
Scoped history controllers.

``StepsController`` wraps one flow invocation's history level and
``StepController`` wraps one entered step. Both are context managers so the
level (or the step's "current" marker) is released on every exit path:
normal return, early ``break``, an exception, or the generator being closed.

Example:
    def steps(self, state, context):
        with StepsController(context, self) as steps:
            while not steps.is_complete:
                with steps.enter_step("pick-name") as step:
                    name = yield from show_step(input_step)
                    if not can_input_step_continue(input_step, name):
                        if step.go_back() is None:
                            break
                        continue
                steps.mark_steps_complete()
"""

import logging
from typing import TYPE_CHECKING, Any

from quickflow.errors import StepDisposedError
from quickflow.wizard.navigation import NavigationContext, StepsComplete, StepsContext

if TYPE_CHECKING:
    from quickflow.wizard.command import QuickCommand

logger = logging.getLogger(__name__)


class StepController:
    """Handle for a single entered step."""

    def __init__(self, navigation: NavigationContext, step: str) -> None:
        self._navigation = navigation
        self._step = step
        self._went_back = False
        self._disposed = False
        self._navigation.can_go_back = self.can_go_back

    @property
    def step(self) -> str:
        return self._step

    @property
    def can_go_back(self) -> bool:
        """Check if there is somewhere for "back" to go from this step."""
        return self._navigation.compute_can_go_back(self._step)

    def go_back(self) -> str | None:
        """
        Move back one step.

        Returns:
            The previous step in this flow, or None when there is no local
            destination. In that case the caller should leave its loop: either
            the outer flow's last step is now current, or the wizard is exited.
        """
        self._ensure_active()
        self._went_back = True

        navigation = self._navigation
        level = navigation.current_level
        if not level:
            return None

        level.pop()

        if level:
            navigation.current_step = level[-1]
            logger.debug(f"Back from '{self._step}' to '{level[-1]}'")
            return level[-1]

        outer = navigation.outer_level
        if outer:
            # The (now empty) level itself is popped by the owning StepsController
            navigation.current_step = outer[-1]
            logger.debug(f"Back from '{self._step}' to outer step '{outer[-1]}'")
            return None

        navigation.current_step = None
        logger.debug(f"Back from starting step '{self._step}' exits the wizard")
        return None

    def skip(self) -> None:
        """
        Erase this step from history as if the user never saw it.

        Only applies while this step is still the tail of its level.
        """
        self._ensure_active()

        level = self._navigation.current_level
        if level and level[-1] == self._step:
            level.pop()
            logger.debug(f"Skipped step '{self._step}'")

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True

        if not self._went_back and self._navigation.current_step == self._step:
            self._navigation.current_step = None

    def _ensure_active(self) -> None:
        if self._disposed:
            raise StepDisposedError(self._step)

    def __enter__(self) -> "StepController":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.dispose()
        return False

    def __repr__(self) -> str:
        return f"StepController(step={self._step!r}, went_back={self._went_back})"


class StepsController:
    """
    Handle for one flow invocation's history level.

    Args:
        context: The flow context holding the shared navigation state.
        command: The driving command. Pass it from a command's own ``steps()``
            entry point so the command can report ``can_go_back``; omit it for
            nested helper generators sharing the caller's context.
    """

    def __init__(self, context: StepsContext, command: "QuickCommand | None" = None) -> None:
        navigation = context.steps
        if command is not None and (navigation is None or not navigation.history):
            # Fresh invocation: never reuse navigation left over from a previous run
            navigation = NavigationContext()
            context.steps = navigation
        else:
            navigation = context.ensure_steps()

        navigation.push_level()
        self._navigation = navigation
        self._disposed = False

        if command is not None:
            command.steps_navigation = navigation
            # Subcommands don't know how they were started; keep the outer value
            if command.started_from is not None:
                navigation.started_from = command.started_from

    @property
    def navigation(self) -> NavigationContext:
        return self._navigation

    @property
    def is_complete(self) -> bool:
        return self._navigation.current_step is StepsComplete

    def is_at_step(self, step: str) -> bool:
        return self._navigation.current_step == step

    def is_at_step_or_unset(self, step: str) -> bool:
        current = self._navigation.current_step
        return current is None or current == step

    def enter_step(self, step: str) -> StepController:
        """Record ``step`` as visited and return a handle scoped to it."""
        self._navigation.enter(step)
        return StepController(self._navigation, step)

    def mark_steps_complete(self) -> None:
        """Mark the wizard complete; enclosing loops exit on their next check."""
        self._navigation.current_step = StepsComplete
        logger.debug("Steps marked complete")

    def go_back_to_step(self, step: str) -> None:
        """
        Jump back to ``step``, discarding anything visited after it.

        If ``step`` was never visited (it was skipped the first time through),
        this level's history is replaced by just ``step``.
        """
        level = self._navigation.current_level

        if step in level:
            index = len(level) - 1 - level[::-1].index(step)
            del level[index + 1 :]
        else:
            level.clear()
            level.append(step)

        self._navigation.current_step = step
        logger.debug(f"Jumped back to step '{step}' (level: {level})")

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._navigation.pop_level()

    def __enter__(self) -> "StepsController":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.dispose()
        return False
