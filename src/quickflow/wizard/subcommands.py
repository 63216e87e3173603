"""
Commands composed of subcommands.

The first step picks a subcommand by name; the rest of the flow is delegated
to that subcommand running against the same navigation state, so backing
out of the subcommand's first step returns to the picker.
"""

import logging
from typing import Any

from quickflow.core.preferences import PreferenceStore
from quickflow.wizard.command import QuickCommand
from quickflow.wizard.controller import StepsController
from quickflow.wizard.directive import StepResultBreak
from quickflow.wizard.navigation import StepsContext
from quickflow.wizard.registry import CommandFactory, CommandRegistry
from quickflow.wizard.steps import PickItem, PickStep, StepGenerator, get_pick_result, show_step

logger = logging.getLogger(__name__)


class QuickCommandWithSubcommands(QuickCommand):
    """
    A command whose body picks and then delegates to a subcommand.

    Subclasses register their subcommands in ``__init__``:

        class BranchCommand(QuickCommandWithSubcommands):
            def __init__(self, args=None):
                super().__init__("branch", "branch", "Branch", args=args)
                self.register_subcommand("create", BranchCreateCommand, "creates a new branch")
    """

    def __init__(
        self,
        key: str,
        label: str,
        title: str,
        description: str = "",
        detail: str = "",
        args: dict[str, Any] | None = None,
        preferences: PreferenceStore | None = None,
    ) -> None:
        super().__init__(key, label, title, description, detail, preferences)

        args = args or {}
        self.initial_state = {"confirm": args.get("confirm"), **(args.get("state") or {})}
        self.subcommands = CommandRegistry()
        self.subcommand: str | None = None
        self._instances: dict[str, QuickCommand] = {}

    @property
    def pick_subcommand_step_id(self) -> str:
        return f"{self.key}-pick-subcommand"

    def register_subcommand(self, name: str, factory: CommandFactory, description: str = "") -> None:
        self.subcommands.register(name, factory, description)

    def get_subcommand(self, name: str) -> QuickCommand:
        """
        Get (creating on first use) the subcommand registered as ``name``.

        Raises:
            UnknownSubcommandError: If ``name`` isn't registered.
        """
        command = self._instances.get(name)
        if command is not None:
            return command

        command = self.subcommands.create(name, self._get_subcommand_args(name))
        if command.preferences is None:
            command.preferences = self.preferences
        self._instances[name] = command
        return command

    def _get_subcommand_args(self, name: str) -> dict[str, Any]:
        # Caller-supplied state only applies to the subcommand it was meant for
        if self.initial_state.get("subcommand") != name:
            return {}

        state = {k: v for k, v in self.initial_state.items() if k not in ("subcommand", "confirm")}
        return {"state": state, "confirm": self.initial_state.get("confirm")}

    # =========================================================================
    # CONFIRMATION POLICY
    # =========================================================================

    @property
    def can_confirm(self) -> bool:
        return self.subcommand is not None

    @property
    def can_skip_confirm(self) -> bool:
        if self.subcommand is None:
            return super().can_skip_confirm
        return self.get_subcommand(self.subcommand).can_skip_confirm

    @property
    def skip_confirm_key(self) -> str:
        if self.subcommand is None:
            return f"{self.key}:{self.picked_via.value}"
        return f"{self.key}-{self.subcommand}:{self.picked_via.value}"

    # =========================================================================
    # FLOW
    # =========================================================================

    def steps(self, state: dict[str, Any], context: StepsContext | None = None) -> StepGenerator:
        context = self.create_context(context)
        preselected = state.get("subcommand") is not None
        last_picked: str | None = state.get("subcommand")

        with StepsController(context, self) as steps:
            while not steps.is_complete:
                context.title = self.title

                if steps.is_at_step(self.pick_subcommand_step_id) or state.get("subcommand") is None:
                    self.subcommand = None

                    with steps.enter_step(self.pick_subcommand_step_id) as step:
                        result = yield from self.pick_subcommand_step(state, context, last_picked)
                        if result is StepResultBreak:
                            state["subcommand"] = None
                            if step.go_back() is None:
                                break
                            continue

                        state["subcommand"] = last_picked = result

                self.subcommand = state["subcommand"]
                command = self.get_subcommand(self.subcommand)
                command.started_from = self.started_from

                logger.debug(f"'{self.key}' delegating to subcommand '{self.subcommand}'")
                result = yield from command.execute_steps(context, self.confirm(state.get("confirm")))
                if result is StepResultBreak and not steps.is_complete:
                    # Don't drop the user into a picker they never asked for
                    if preselected:
                        break

                    state["subcommand"] = None

        return None if steps.is_complete else StepResultBreak

    def pick_subcommand_step(
        self,
        state: dict[str, Any],
        context: StepsContext,
        picked: str | None = None,
    ) -> StepGenerator:
        step = PickStep(
            title=self.title,
            placeholder=f"Choose a {self.label} command",
            items=[
                PickItem(
                    label=info.key,
                    item=info.key,
                    description=info.description,
                    picked=(state.get("subcommand") or picked) == info.key,
                )
                for info in self.subcommands.list_info()
            ],
        )
        selection = yield from show_step(step)
        return get_pick_result(step, selection)
