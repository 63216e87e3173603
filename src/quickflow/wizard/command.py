"""
QuickCommand - a named, resumable wizard flow.

A command's body is a generator (``steps``) that yields steps and is resumed
with the driver's selections. The command exposes that generator as a plain
external iterator (``next`` / ``previous`` / ``retry`` / ``terminate``) so a
driver can pump it one step at a time.

Lifecycle:
    NOT_STARTED -> RUNNING <-> SUSPENDED (waiting at a step) -> COMPLETED | CANCELLED
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, NamedTuple

from quickflow.core.preferences import PreferenceStore
from quickflow.wizard.directive import Directive, StepResultBreak
from quickflow.wizard.navigation import NavigationContext, StartedFrom, StepsContext
from quickflow.wizard.steps import AnyStep, StepGenerator

logger = logging.getLogger(__name__)


class CommandState(Enum):
    """Iterator lifecycle states."""

    NOT_STARTED = "not_started"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StepIteration(NamedTuple):
    """Result of pumping a command: the next step to render, or done."""

    value: AnyStep | None
    done: bool


class QuickCommand(ABC):
    """
    Base class for wizard flows.

    Subclasses implement ``steps(state, context)`` as a generator. It must
    return None once the work is done (after ``mark_steps_complete``) and
    ``StepResultBreak`` when the user backed out.

    Example:
        class RenameCommand(QuickCommand):
            def steps(self, state, context=None):
                context = self.create_context(context)
                with StepsController(context, self) as steps:
                    ...
                return None if steps.is_complete else StepResultBreak
    """

    def __init__(
        self,
        key: str,
        label: str,
        title: str,
        description: str = "",
        detail: str = "",
        preferences: PreferenceStore | None = None,
    ) -> None:
        self.key = key
        self.label = label
        self.title = title
        self.description = description
        self.detail = detail
        self.preferences = preferences

        self.initial_state: dict[str, Any] = {}
        self.started_from: StartedFrom | None = None
        self.steps_navigation: NavigationContext | None = None
        self.result: Any = None

        self._steps_iterator: StepGenerator | None = None
        self._current_step: AnyStep | None = None
        self._state = CommandState.NOT_STARTED

    # =========================================================================
    # METADATA
    # =========================================================================

    @property
    def picked_via(self) -> StartedFrom:
        return self.started_from or StartedFrom.MENU

    @property
    def value(self) -> AnyStep | None:
        """The step currently waiting for the driver (if any)."""
        return self._current_step

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def can_go_back(self) -> bool:
        """Whether the driver should offer "back" on the current step."""
        if self.steps_navigation is None:
            return False
        return self.steps_navigation.can_go_back

    def is_match(self, key: str) -> bool:
        return key == self.key

    def is_fuzzy_match(self, name: str) -> bool:
        return name.replace(" ", "").lower() == self.label.replace(" ", "").lower()

    # =========================================================================
    # CONFIRMATION POLICY
    # =========================================================================

    @property
    def can_confirm(self) -> bool:
        return True

    @property
    def can_skip_confirm(self) -> bool:
        return True

    @property
    def skip_confirm_key(self) -> str:
        return f"{self.key}:{self.picked_via.value}"

    def confirm(self, override: bool | None = None) -> bool:
        """
        Decide whether the confirmation step should be shown.

        Commands that can't skip confirmation always confirm. Otherwise an
        explicit ``override`` wins over the stored preference.
        """
        if not self.can_confirm or not self.can_skip_confirm:
            return True
        if override is not None:
            return override
        if self.preferences is None:
            return True
        return not self.preferences.get(self.skip_confirm_key)

    # =========================================================================
    # FLOW DEFINITION
    # =========================================================================

    @abstractmethod
    def steps(self, state: dict[str, Any], context: StepsContext | None = None) -> StepGenerator:
        """The flow body."""
        ...

    def create_context(self, context: StepsContext | None = None) -> StepsContext:
        """
        Build this command's context, sharing navigation with ``context``.

        Override to attach domain data; always carry ``steps`` over.
        """
        return StepsContext(title=self.title, steps=context.steps if context is not None else None)

    def get_steps(
        self,
        state: dict[str, Any] | None = None,
        context: StepsContext | None = None,
    ) -> StepGenerator:
        """Run the flow with ``state`` layered over the command's initial state."""
        merged = {**self.initial_state, **(state or {})}
        return self.steps(merged, self.create_context(context) if context is not None else None)

    def execute_steps(self, context: StepsContext, confirm: bool | None = None) -> StepGenerator:
        """
        Run the flow against a caller-owned context (delegation).

        The caller decides about confirmation once and passes it down.
        """
        state = dict(self.initial_state)
        if confirm is not None:
            state["confirm"] = confirm
        return self.steps(state, self.create_context(context))

    # =========================================================================
    # ITERATOR PROTOCOL
    # =========================================================================

    def next(self, selection: Any = None) -> StepIteration:
        """
        Resume the flow with ``selection`` and return the next step.

        The first call starts the flow (``selection`` is ignored). A finished
        flow is discarded; calling ``next`` again restarts it.
        """
        iterator = self._steps_iterator
        try:
            if iterator is None:
                logger.debug(f"Starting command '{self.key}' ({self.picked_via.value})")
                iterator = self._steps_iterator = self.steps(dict(self.initial_state))
                step = next(iterator)
            else:
                step = iterator.send(selection)
        except StopIteration as e:
            self.result = e.value
            self._finish(
                CommandState.CANCELLED if e.value is StepResultBreak else CommandState.COMPLETED
            )
            return StepIteration(None, True)
        except BaseException:
            self._finish(CommandState.CANCELLED)
            raise

        if step is StepResultBreak:
            self.result = StepResultBreak
            self.terminate()
            return StepIteration(None, True)

        self._current_step = step
        self._state = CommandState.SUSPENDED
        return StepIteration(step, False)

    def previous(self) -> StepIteration:
        """Resume the flow with the BACK directive."""
        return self.next(Directive.BACK)

    def retry(self) -> AnyStep | None:
        """
        Re-render the current step without moving in history.

        Returns None when no step is waiting; only ``next`` (re)starts a flow.
        """
        if self._steps_iterator is None:
            return None

        self.next(Directive.NOOP)
        return self.value

    def terminate(self) -> None:
        """Close the flow, releasing every scope still open inside it."""
        iterator = self._steps_iterator
        if iterator is None:
            return

        self._steps_iterator = None
        iterator.close()
        logger.debug(f"Terminated command '{self.key}'")
        self._finish(CommandState.CANCELLED)

    def _finish(self, state: CommandState) -> None:
        self._steps_iterator = None
        self._current_step = None
        self._state = state

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, state={self._state.value})"
