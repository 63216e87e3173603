"""
Tests for directives, step descriptors and continuation predicates.
"""

from quickflow.wizard.directive import (
    Directive,
    StepResultBreak,
    get_directive_label,
    is_directive,
)
from quickflow.wizard.navigation import StepsContext
from quickflow.wizard.steps import (
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
    is_directive_pick_item,
    is_input_step,
    is_pick_step,
    show_step,
)


class TestDirectives:
    """Tests for Directive and StepResultBreak."""

    def test_is_directive(self) -> None:
        """Directives and the break sentinel are recognized; data is not."""
        for directive in Directive:
            assert is_directive(directive)
        assert is_directive(StepResultBreak)

        assert not is_directive("back")
        assert not is_directive(None)
        assert not is_directive([])

    def test_directive_never_equals_string(self) -> None:
        """A typed string can't be mistaken for a directive."""
        assert Directive.BACK != "back"

    def test_labels(self) -> None:
        """Directives have display labels for pick lists."""
        assert get_directive_label(Directive.BACK) == "Back"
        assert get_directive_label(Directive.CANCEL) == "Cancel"

    def test_break_is_singleton(self) -> None:
        """StepResultBreak compares by identity."""
        assert type(StepResultBreak)() is StepResultBreak
        assert repr(StepResultBreak) == "StepResultBreak"


class TestStepDescriptors:
    """Tests for step dataclasses."""

    def test_kinds(self) -> None:
        """Each step class reports its kind."""
        assert PickStep().kind == StepKind.PICK
        assert InputStep().kind == StepKind.INPUT
        assert is_pick_step(PickStep())
        assert is_input_step(InputStep())
        assert not is_pick_step(InputStep())

    def test_initially_selected(self) -> None:
        """Explicit selected_items win over picked flags."""
        a = PickItem("a", picked=True)
        b = PickItem("b")

        assert PickStep(items=[a, b]).initially_selected() == [a]
        assert PickStep(items=[a, b], selected_items=[b]).initially_selected() == [b]

    def test_freeze_restores(self) -> None:
        """freeze() calls the driver hook and restores afterwards."""
        calls = []
        step = InputStep(on_freeze=lambda: lambda: calls.append("released"))

        with step.freeze():
            assert step.frozen

        assert not step.frozen
        assert calls == ["released"]

    def test_confirm_step(self) -> None:
        """Confirmation steps end with a cancel item and preselect a choice."""
        yes = PickItem("Do it", item=[])
        step = create_confirm_step("Confirm", [yes], StepsContext(title="Thing"))

        assert step.is_confirmation_step
        assert step.items[0] is yes
        assert is_directive_pick_item(step.items[-1])
        assert step.items[-1].directive == Directive.CANCEL
        assert step.selected_items == [yes]
        assert step.placeholder == "Confirm Thing"


class TestShowStep:
    """Tests for show_step()."""

    def test_returns_selection(self) -> None:
        """The resumed value becomes the generator's return value."""
        step = InputStep()
        gen = show_step(step)

        assert next(gen) is step
        try:
            gen.send("value")
        except StopIteration as e:
            assert e.value == "value"
        else:
            raise AssertionError("show_step did not return")

    def test_noop_and_reload_re_yield(self) -> None:
        """NOOP and RELOAD re-yield the same step."""
        step = InputStep()
        gen = show_step(step)
        next(gen)

        assert gen.send(Directive.NOOP) is step
        assert gen.send(Directive.RELOAD) is step


class TestContinuationPredicates:
    """Tests for can_*_continue and pick result helpers."""

    def test_can_step_continue(self) -> None:
        """Only real data continues."""
        step = InputStep()
        assert can_step_continue(step, "x")
        assert not can_step_continue(step, None)
        assert not can_step_continue(step, Directive.BACK)
        assert not can_step_continue(step, StepResultBreak)

    def test_pick_requires_non_empty_selection(self) -> None:
        """Empty selections only continue when allowed."""
        assert not can_pick_step_continue(PickStep(), [])
        assert can_pick_step_continue(PickStep(allow_empty=True), [])

    def test_pick_rejects_directive_items(self) -> None:
        """Picking a directive item isn't data."""
        back = create_directive_pick_item(Directive.BACK)
        step = PickStep(items=[back])

        assert not can_pick_step_continue(step, [back])
        assert get_pick_result(step, [back]) is StepResultBreak

    def test_pick_validator(self) -> None:
        """The step's validator gets the final say."""
        step = PickStep(validate=lambda items: len(items) == 2)
        a, b = PickItem("a", item=1), PickItem("b", item=2)

        assert not can_pick_step_continue(step, [a])
        assert get_pick_results(step, [a, b]) == [1, 2]

    def test_pick_results(self) -> None:
        """Pick helpers unwrap item payloads."""
        step = PickStep(multiselect=True)
        a, b = PickItem("a", item="x"), PickItem("b", item="y")

        assert get_pick_result(step, [a, b]) == "x"
        assert get_pick_results(step, [a, b]) == ["x", "y"]
        assert get_pick_results(step, Directive.BACK) is StepResultBreak

    def test_input_validator(self) -> None:
        """Input steps continue only with a valid value."""
        step = InputStep(validate=lambda v: (v.isdigit(), "digits only"))

        assert can_input_step_continue(step, "42")
        assert not can_input_step_continue(step, "abc")
        assert not can_input_step_continue(step, Directive.BACK)
