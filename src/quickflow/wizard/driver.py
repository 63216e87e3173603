"""
Wizard driver.

Pumps a command's step iterator: renders each yielded step through a
``Renderer``, then resumes the command with the selection or turns a
directive into ``previous`` / ``retry`` / cancel. The wizard either starts
from a root menu listing every registered command, or directly with one
command.
"""

import logging
from enum import Enum
from typing import Any, Callable, Protocol

from quickflow.wizard.command import CommandState, QuickCommand
from quickflow.wizard.directive import Directive, StepResultBreak
from quickflow.wizard.navigation import StartedFrom
from quickflow.wizard.registry import CommandRegistry
from quickflow.wizard.steps import (
    AnyStep,
    InputStep,
    PickItem,
    PickStep,
    is_directive_pick_item,
)

logger = logging.getLogger(__name__)


class WizardOutcome(str, Enum):
    """How a wizard run ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WizardAction(Enum):
    """Driver-level actions a renderer can request instead of a selection."""

    TOGGLE_CONFIRMATION = "toggle_confirmation"


class Renderer(Protocol):
    """Shows a step and returns the user's answer."""

    def render(self, step: AnyStep, command: QuickCommand | None, can_go_back: bool) -> Any:
        """
        Returns:
            A selection (list of picked items, input string, custom value),
            a ``Directive``, a ``WizardAction``, or None if the user closed
            the wizard.
        """
        ...


class RootStep(PickStep):
    """The wizard's menu: one pick item per registered command."""

    def __init__(self, commands: list[QuickCommand], title: str) -> None:
        super().__init__(
            title=title,
            placeholder="Choose a command",
            items=[
                PickItem(label=c.label, item=c, description=c.description, detail=c.detail)
                for c in commands
            ],
            disallow_back=True,
        )
        self.command: QuickCommand | None = None


class QuickWizard:
    """
    Drives commands from a registry to completion.

    Example:
        wizard = QuickWizard(registry, ConsoleRenderer())
        outcome = wizard.run()                      # start from the menu
        outcome = wizard.run("branch", {"state": {"subcommand": "create"}})
    """

    def __init__(
        self,
        registry: CommandRegistry,
        renderer: Renderer,
        title: str = "Quick Wizard",
    ) -> None:
        self.registry = registry
        self.renderer = renderer
        self.title = title
        self.started_from = StartedFrom.MENU
        self.command: QuickCommand | None = None

    def run(self, command: str | None = None, args: dict[str, Any] | None = None) -> WizardOutcome:
        root = RootStep(self.registry.create_all(), self.title)

        step: AnyStep | None
        if command is None:
            self.started_from = StartedFrom.MENU
            self.command = None
            step = root
        else:
            self.started_from = StartedFrom.COMMAND
            self.command = self.registry.create(command, args)
            self.command.started_from = StartedFrom.COMMAND
            step = self.command.next().value

        try:
            while step is not None:
                can_go_back = (
                    self.command is not None and self.command.can_go_back and not step.disallow_back
                )
                result = self.renderer.render(step, self.command, can_go_back)
                step = self._advance(step, result, root)
        except Exception:
            logger.exception(f"Wizard failed in command '{self.command.key if self.command else None}'")
            if self.command is not None:
                self.command.terminate()
            raise

        outcome = self._outcome()
        if self.command is not None and self.command.state == CommandState.SUSPENDED:
            self.command.terminate()

        logger.info(f"Wizard {outcome.value} ({self.command.key if self.command else 'menu'})")
        return outcome

    def _outcome(self) -> WizardOutcome:
        if self.command is not None and self.command.state == CommandState.COMPLETED:
            return WizardOutcome.COMPLETED
        return WizardOutcome.CANCELLED

    def _advance(self, step: AnyStep, result: Any, root: RootStep) -> AnyStep | None:
        if isinstance(result, list) and len(result) == 1 and is_directive_pick_item(result[0]):
            result = result[0].directive

        if result is None or result is Directive.CANCEL or result is StepResultBreak:
            return None

        if result is WizardAction.TOGGLE_CONFIRMATION:
            if step is not root and self.command is not None:
                self.toggle_skip_confirmation(self.command)
                return self.command.retry()
            return step

        if step is root:
            return self._start_from_menu(root, result)

        command = self.command
        if command is None:
            return None

        if result is Directive.BACK:
            iteration = command.previous()
            if not iteration.done:
                return iteration.value
            if self.started_from == StartedFrom.MENU and command.state != CommandState.COMPLETED:
                root.command = None
                self.command = None
                return root
            return None

        if isinstance(result, Directive):
            # NOOP, RELOAD, LOAD_MORE, RESET: re-render in place
            return command.retry()

        iteration = command.next(result)
        return None if iteration.done else iteration.value

    def _start_from_menu(self, root: RootStep, result: Any) -> AnyStep | None:
        if result is Directive.BACK:
            return None
        if isinstance(result, Directive):
            return root
        if not isinstance(result, list) or not result:
            return root

        command = result[0].item
        if not isinstance(command, QuickCommand):
            return root

        root.command = command
        self.command = command
        command.started_from = StartedFrom.MENU

        iteration = command.next()
        if iteration.done:
            return None
        return iteration.value

    def toggle_skip_confirmation(self, command: QuickCommand) -> bool:
        """Flip "skip confirmation" for the command's current key."""
        if not command.can_confirm or not command.can_skip_confirm or command.preferences is None:
            return False
        enabled = command.preferences.toggle(command.skip_confirm_key)
        logger.debug(f"Skip confirmation for '{command.skip_confirm_key}': {enabled}")
        return enabled


# =============================================================================
# SCRIPTED RENDERER
# =============================================================================

Answer = Any | Callable[[AnyStep], Any]


class ScriptedRenderer:
    """
    Renderer that replays a fixed list of answers.

    Answers may be:
        - a ``Directive`` or ``WizardAction``, passed through;
        - for pick steps, a label or list of labels to select;
        - for input steps, the string to enter;
        - a callable receiving the step and returning any of the above.

    Once the script runs out the wizard is closed.
    """

    def __init__(self, answers: list[Answer]) -> None:
        self.answers = list(answers)
        self.rendered: list[AnyStep] = []
        self.back_offered: list[bool] = []

    def render(self, step: AnyStep, command: QuickCommand | None, can_go_back: bool) -> Any:
        self.rendered.append(step)
        self.back_offered.append(can_go_back)

        if not self.answers:
            return None

        answer = self.answers.pop(0)
        if callable(answer) and not isinstance(answer, (Directive, WizardAction)):
            answer = answer(step)

        if isinstance(answer, (Directive, WizardAction)) or answer is None:
            return answer

        if isinstance(step, PickStep):
            return self._select(step, answer)
        if isinstance(step, InputStep):
            return str(answer)
        return answer

    @staticmethod
    def _select(step: PickStep, answer: Any) -> list[PickItem]:
        labels = [answer] if isinstance(answer, str) else list(answer)
        selected = []
        for label in labels:
            item = next((i for i in step.items if i.label == label), None)
            if item is None:
                available = ", ".join(i.label for i in step.items)
                raise ValueError(f"No item '{label}' in step '{step.title}' (items: {available})")
            selected.append(item)
        return selected
