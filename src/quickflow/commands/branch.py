"""
Branch commands.

A small repository-less demo of the wizard engine: ``branch`` picks between
``create`` and ``delete`` and delegates to them. Branches live in an
in-memory ``RefStore`` so the flows can run anywhere.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from quickflow.core.preferences import PreferenceStore
from quickflow.wizard.command import QuickCommand
from quickflow.wizard.controller import StepsController
from quickflow.wizard.directive import Directive, StepResultBreak
from quickflow.wizard.navigation import StepsContext
from quickflow.wizard.steps import (
    InputStep,
    PickItem,
    PickStep,
    StepGenerator,
    can_input_step_continue,
    create_confirm_step,
    create_directive_pick_item,
    get_pick_result,
    get_pick_results,
    show_step,
)
from quickflow.wizard.subcommands import QuickCommandWithSubcommands

logger = logging.getLogger(__name__)


@dataclass
class RefStore:
    """In-memory set of branches with one checked out."""

    branches: list[str] = field(default_factory=lambda: ["main"])
    current: str = "main"

    def exists(self, name: str) -> bool:
        return name in self.branches

    def create(self, name: str, base: str, switch: bool = False) -> None:
        if self.exists(name):
            raise ValueError(f"Branch '{name}' already exists")
        if not self.exists(base):
            raise ValueError(f"Unknown base branch '{base}'")

        self.branches.append(name)
        if switch:
            self.current = name
        logger.info(f"Created branch '{name}' from '{base}'")

    def delete(self, names: list[str], force: bool = False) -> None:
        for name in names:
            if name == self.current:
                raise ValueError(f"Cannot delete the checked out branch '{name}'")
            self.branches.remove(name)
        logger.info(f"Deleted branches {names}{' (forced)' if force else ''}")


def validate_branch_name(store: RefStore, value: str) -> tuple[bool, str | None]:
    name = value.strip()
    if not name:
        return False, "Please enter a branch name"
    if any(c.isspace() for c in name) or name.startswith("-") or ".." in name:
        return False, f"'{name}' is not a valid branch name"
    if store.exists(name):
        return False, f"A branch named '{name}' already exists"
    return True, None


@dataclass
class BranchStepsContext(StepsContext):
    store: RefStore | None = None


# =============================================================================
# CREATE
# =============================================================================


class BranchCreateCommand(QuickCommand):
    PICK_BASE = "branch-create-pick-base"
    INPUT_NAME = "branch-create-input-name"
    CONFIRM = "branch-create-confirm"

    def __init__(
        self,
        store: RefStore,
        args: dict[str, Any] | None = None,
        preferences: PreferenceStore | None = None,
    ) -> None:
        super().__init__(
            "branch-create",
            "create",
            "Create Branch",
            description="creates a new branch",
            preferences=preferences,
        )
        self.store = store

        args = args or {}
        self.initial_state = {"confirm": args.get("confirm"), **(args.get("state") or {})}

    def create_context(self, context: StepsContext | None = None) -> BranchStepsContext:
        return BranchStepsContext(
            title=self.title,
            steps=context.steps if context is not None else None,
            store=self.store,
        )

    def steps(self, state: dict[str, Any], context: StepsContext | None = None) -> StepGenerator:
        context = self.create_context(context)

        with StepsController(context, self) as steps:
            while not steps.is_complete:
                context.title = self.title

                if steps.is_at_step(self.PICK_BASE) or state.get("base") is None:
                    with steps.enter_step(self.PICK_BASE) as step:
                        # Nothing to choose from; behave as if the step never existed
                        if len(self.store.branches) == 1:
                            state["base"] = self.store.branches[0]
                            step.skip()
                        else:
                            result = yield from self.pick_base_step(state, context)
                            if result is StepResultBreak:
                                state["base"] = None
                                if step.go_back() is None:
                                    break
                                continue

                            state["base"] = result

                if steps.is_at_step(self.INPUT_NAME) or state.get("name") is None:
                    with steps.enter_step(self.INPUT_NAME) as step:
                        result = yield from self.input_name_step(state, context)
                        if result is StepResultBreak:
                            state["name"] = None
                            if step.go_back() is None:
                                break
                            continue

                        state["name"] = result

                if self.confirm(state.get("confirm")):
                    if not steps.is_at_step_or_unset(self.CONFIRM):
                        continue

                    with steps.enter_step(self.CONFIRM) as step:
                        result = yield from self.confirm_step(state, context)
                        if result is StepResultBreak:
                            if step.go_back() is None:
                                break
                            continue

                        state["flags"] = result

                steps.mark_steps_complete()
                self.store.create(state["name"], state["base"], "--switch" in (state.get("flags") or []))

        return None if steps.is_complete else StepResultBreak

    def pick_base_step(self, state: dict[str, Any], context: BranchStepsContext) -> StepGenerator:
        step = PickStep(
            title=context.title,
            placeholder="Choose a branch to create the new branch from",
            items=[
                PickItem(
                    label=name,
                    item=name,
                    description="current" if name == context.store.current else "",
                    picked=name == (state.get("base") or context.store.current),
                )
                for name in context.store.branches
            ],
        )
        selection = yield from show_step(step)
        return get_pick_result(step, selection)

    def input_name_step(self, state: dict[str, Any], context: BranchStepsContext) -> StepGenerator:
        step = InputStep(
            title=f"{context.title} from {state['base']}",
            placeholder="Branch name",
            prompt="Please provide a name for the new branch",
            value=state.get("name"),
            validate=lambda value: validate_branch_name(context.store, value),
        )
        value = yield from show_step(step)
        if not can_input_step_continue(step, value):
            return StepResultBreak
        return value.strip()

    def confirm_step(self, state: dict[str, Any], context: BranchStepsContext) -> StepGenerator:
        step = create_confirm_step(
            f"Confirm {context.title}",
            [
                PickItem(
                    label=context.title,
                    item=[],
                    detail=f"Will create branch {state['name']} from {state['base']}",
                ),
                PickItem(
                    label=f"{context.title} and Switch",
                    item=["--switch"],
                    detail=f"Will create and switch to branch {state['name']} from {state['base']}",
                ),
            ],
            context,
        )
        selection = yield from show_step(step)
        return get_pick_result(step, selection)


# =============================================================================
# DELETE
# =============================================================================


class BranchDeleteCommand(QuickCommand):
    PICK_BRANCHES = "branch-delete-pick-branches"
    CONFIRM = "branch-delete-confirm"

    def __init__(
        self,
        store: RefStore,
        args: dict[str, Any] | None = None,
        preferences: PreferenceStore | None = None,
    ) -> None:
        super().__init__(
            "branch-delete",
            "delete",
            "Delete Branches",
            description="deletes the specified branches",
            preferences=preferences,
        )
        self.store = store

        args = args or {}
        self.initial_state = {"confirm": args.get("confirm"), **(args.get("state") or {})}

    @property
    def can_skip_confirm(self) -> bool:
        return False

    def create_context(self, context: StepsContext | None = None) -> BranchStepsContext:
        return BranchStepsContext(
            title=self.title,
            steps=context.steps if context is not None else None,
            store=self.store,
        )

    def steps(self, state: dict[str, Any], context: StepsContext | None = None) -> StepGenerator:
        context = self.create_context(context)

        with StepsController(context, self) as steps:
            while not steps.is_complete:
                context.title = self.title

                if steps.is_at_step(self.PICK_BRANCHES) or not state.get("references"):
                    with steps.enter_step(self.PICK_BRANCHES) as step:
                        result = yield from self.pick_branches_step(state, context)
                        if result is StepResultBreak:
                            state["references"] = None
                            if step.go_back() is None:
                                break
                            continue

                        state["references"] = result

                context.title = (
                    f"Delete {len(state['references'])} Branches"
                    if len(state["references"]) > 1
                    else "Delete Branch"
                )

                if not steps.is_at_step_or_unset(self.CONFIRM):
                    continue

                with steps.enter_step(self.CONFIRM) as step:
                    result = yield from self.confirm_step(state, context)
                    if result is StepResultBreak:
                        if step.go_back() is None:
                            break
                        continue

                    state["flags"] = result

                steps.mark_steps_complete()
                self.store.delete(state["references"], "--force" in state["flags"])

        return None if steps.is_complete else StepResultBreak

    def pick_branches_step(self, state: dict[str, Any], context: BranchStepsContext) -> StepGenerator:
        candidates = [b for b in context.store.branches if b != context.store.current]
        if not candidates:
            step = PickStep(
                title=context.title,
                placeholder="No branches found which can be deleted",
                items=[
                    create_directive_pick_item(Directive.BACK, picked=True),
                    create_directive_pick_item(Directive.CANCEL),
                ],
            )
        else:
            selected = state.get("references") or []
            step = PickStep(
                title=context.title,
                placeholder="Choose branches to delete",
                items=[PickItem(label=name, item=name, picked=name in selected) for name in candidates],
                multiselect=True,
            )

        selection = yield from show_step(step)
        return get_pick_results(step, selection)

    def confirm_step(self, state: dict[str, Any], context: BranchStepsContext) -> StepGenerator:
        names = ", ".join(state["references"])
        step = create_confirm_step(
            f"Confirm {context.title}",
            [
                PickItem(label=context.title, item=[], detail=f"Will delete {names}"),
                PickItem(
                    label=f"Force {context.title}",
                    item=["--force"],
                    detail=f"Will forcibly delete {names}",
                ),
            ],
            context,
        )
        selection = yield from show_step(step)
        return get_pick_result(step, selection)


# =============================================================================
# BRANCH (COMPOSITE)
# =============================================================================


class BranchCommand(QuickCommandWithSubcommands):
    """Create or delete branches."""

    def __init__(
        self,
        args: dict[str, Any] | None = None,
        store: RefStore | None = None,
        preferences: PreferenceStore | None = None,
    ) -> None:
        super().__init__(
            "branch",
            "branch",
            "Branch",
            description="create or delete branches",
            args=args,
            preferences=preferences,
        )
        self.store = store if store is not None else RefStore()

        self.register_subcommand(
            "create", lambda a: BranchCreateCommand(self.store, a), "creates a new branch"
        )
        self.register_subcommand(
            "delete", lambda a: BranchDeleteCommand(self.store, a), "deletes the specified branches"
        )
