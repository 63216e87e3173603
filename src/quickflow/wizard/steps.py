"""
Step descriptors and continuation predicates.

A step is one suspension point of a flow: a pick list, a free-text input,
or a custom interaction. Flow bodies build a step, yield it (through
``show_step``), and route whatever the driver resumes them with through one
of the ``can_*_continue`` predicates before treating it as data.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Generator, Iterator

from quickflow.wizard.directive import Directive, StepResultBreak, get_directive_label, is_directive

# A driver-installed hook: disable interaction, return a callable that restores it
FreezeHook = Callable[[], Callable[[], None] | None]


class StepKind(str, Enum):
    """Kinds of steps a driver knows how to render."""

    PICK = "pick"
    INPUT = "input"
    CUSTOM = "custom"


# =============================================================================
# PICK ITEMS
# =============================================================================


@dataclass
class PickItem:
    """One entry of a pick list, carrying an arbitrary payload in ``item``."""

    label: str
    item: Any = None
    description: str = ""
    detail: str = ""
    picked: bool = False


@dataclass
class DirectivePickItem(PickItem):
    """Pick list entry that stands for a directive (e.g. "Back") rather than data."""

    directive: Directive = Directive.CANCEL


def create_directive_pick_item(
    directive: Directive,
    picked: bool = False,
    label: str | None = None,
    detail: str = "",
) -> DirectivePickItem:
    return DirectivePickItem(
        label=label or get_directive_label(directive),
        item=directive,
        detail=detail,
        picked=picked,
        directive=directive,
    )


def is_directive_pick_item(item: Any) -> bool:
    return isinstance(item, DirectivePickItem)


# =============================================================================
# STEPS
# =============================================================================


@dataclass
class Step:
    """
    Base step descriptor.

    Attributes:
        title: Title shown by the driver.
        placeholder: Hint shown while nothing is entered/selected.
        disallow_back: Hide the driver's back affordance for this step.
        frozen: True while interaction is disabled (see ``freeze``).
        on_freeze: Hook installed by the driver to disable its widget.
    """

    kind: ClassVar[StepKind]

    title: str = ""
    placeholder: str = ""
    disallow_back: bool = False
    frozen: bool = False
    on_freeze: FreezeHook | None = field(default=None, repr=False, compare=False)

    @contextmanager
    def freeze(self) -> Iterator["Step"]:
        """Disable the driver's affordances while async work is pending."""
        release = self.on_freeze() if self.on_freeze is not None else None
        self.frozen = True
        try:
            yield self
        finally:
            self.frozen = False
            if release is not None:
                release()


@dataclass
class PickStep(Step):
    """Select one (or many) items from a list."""

    kind: ClassVar[StepKind] = StepKind.PICK

    items: list[PickItem] = field(default_factory=list)
    multiselect: bool = False
    selected_items: list[PickItem] | None = None
    allow_empty: bool = False
    is_confirmation_step: bool = False
    validate: Callable[[list[PickItem]], bool] | None = field(default=None, repr=False)

    def initially_selected(self) -> list[PickItem]:
        """Items the driver should highlight when it first renders the step."""
        if self.selected_items is not None:
            return self.selected_items
        return [i for i in self.items if i.picked]


@dataclass
class InputStep(Step):
    """Enter a free-form string value."""

    kind: ClassVar[StepKind] = StepKind.INPUT

    prompt: str = ""
    value: str | None = None
    validate: Callable[[str], tuple[bool, str | None]] | None = field(default=None, repr=False)


@dataclass
class CustomStep(Step):
    """A step whose interaction is implemented by the step itself."""

    kind: ClassVar[StepKind] = StepKind.CUSTOM

    show: Callable[["CustomStep"], Any] | None = field(default=None, repr=False)


AnyStep = PickStep | InputStep | CustomStep

# Flow generators yield steps, receive selections and return a result
StepGenerator = Generator[Any, Any, Any]


def is_pick_step(step: Any) -> bool:
    return isinstance(step, PickStep)


def is_input_step(step: Any) -> bool:
    return isinstance(step, InputStep)


def is_custom_step(step: Any) -> bool:
    return isinstance(step, CustomStep)


def create_confirm_step(
    title: str,
    confirmations: list[PickItem],
    context: Any,
    cancel: DirectivePickItem | None = None,
    **options: Any,
) -> PickStep:
    """
    Build the standard confirmation step.

    The confirmations are followed by a cancel entry; the first ``picked``
    confirmation (or the first one) is pre-selected.
    """
    selected = next((c for c in confirmations if c.picked), confirmations[0] if confirmations else None)
    options.setdefault("placeholder", f"Confirm {context.title}")

    return PickStep(
        title=title,
        items=[*confirmations, cancel or create_directive_pick_item(Directive.CANCEL)],
        selected_items=[selected] if selected is not None else None,
        is_confirmation_step=True,
        **options,
    )


def show_step(step: AnyStep) -> StepGenerator:
    """
    Yield ``step`` and return what the driver resumes the flow with.

    ``NOOP`` and ``RELOAD`` re-yield the same step so a refresh never
    disturbs history.
    """
    while True:
        selection = yield step
        if selection is Directive.NOOP or selection is Directive.RELOAD:
            continue
        return selection


# =============================================================================
# CONTINUATION PREDICATES
# =============================================================================


def can_step_continue(step: AnyStep, value: Any) -> bool:
    """True if ``value`` is real data rather than a directive or nothing."""
    return value is not None and not is_directive(value)


def can_pick_step_continue(step: PickStep, selection: Any) -> bool:
    if not can_step_continue(step, selection):
        return False
    if not isinstance(selection, list):
        return False
    if not selection and not step.allow_empty:
        return False
    if any(is_directive_pick_item(i) for i in selection):
        return False
    if step.validate is not None:
        return bool(step.validate(selection))
    return True


def can_input_step_continue(step: InputStep, value: Any) -> bool:
    if not can_step_continue(step, value):
        return False
    if step.validate is not None:
        valid, _ = step.validate(value)
        return valid
    return True


def get_pick_result(step: PickStep, selection: Any) -> Any:
    """First selected payload, or ``StepResultBreak`` if the pick can't continue."""
    if not can_pick_step_continue(step, selection):
        return StepResultBreak
    return selection[0].item


def get_pick_results(step: PickStep, selection: Any) -> Any:
    """All selected payloads, or ``StepResultBreak`` if the pick can't continue."""
    if not can_pick_step_continue(step, selection):
        return StepResultBreak
    return [i.item for i in selection]
