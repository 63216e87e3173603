"""
Quickflow Wizard - generator-driven multi-step flows.

Provides the command base classes, scoped step history controllers and the
driver that pumps a command's steps through a renderer.
"""

from quickflow.wizard.directive import (
    Directive,
    StepResultBreak,
    get_directive_label,
    is_directive,
)

from quickflow.wizard.navigation import (
    NavigationContext,
    StartedFrom,
    StepsComplete,
    StepsContext,
)

from quickflow.wizard.steps import (
    CustomStep,
    DirectivePickItem,
    InputStep,
    PickItem,
    PickStep,
    StepKind,
    can_input_step_continue,
    can_pick_step_continue,
    can_step_continue,
    create_confirm_step,
    create_directive_pick_item,
    get_pick_result,
    get_pick_results,
    show_step,
)

from quickflow.wizard.controller import StepController, StepsController
from quickflow.wizard.command import CommandState, QuickCommand, StepIteration
from quickflow.wizard.registry import CommandInfo, CommandRegistry, get_steps
from quickflow.wizard.subcommands import QuickCommandWithSubcommands

from quickflow.wizard.driver import (
    QuickWizard,
    Renderer,
    ScriptedRenderer,
    WizardAction,
    WizardOutcome,
)

__all__ = [
    # Directives
    "Directive",
    "StepResultBreak",
    "get_directive_label",
    "is_directive",
    # Navigation
    "NavigationContext",
    "StartedFrom",
    "StepsComplete",
    "StepsContext",
    # Steps
    "CustomStep",
    "DirectivePickItem",
    "InputStep",
    "PickItem",
    "PickStep",
    "StepKind",
    "can_input_step_continue",
    "can_pick_step_continue",
    "can_step_continue",
    "create_confirm_step",
    "create_directive_pick_item",
    "get_pick_result",
    "get_pick_results",
    "show_step",
    # Controllers
    "StepController",
    "StepsController",
    # Commands
    "CommandState",
    "QuickCommand",
    "StepIteration",
    "QuickCommandWithSubcommands",
    "CommandInfo",
    "CommandRegistry",
    "get_steps",
    # Driver
    "QuickWizard",
    "Renderer",
    "ScriptedRenderer",
    "WizardAction",
    "WizardOutcome",
]
