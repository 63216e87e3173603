"""
Tests for the rich console renderer.
"""

import io

from rich.console import Console

from quickflow.console import ConsoleRenderer
from quickflow.wizard.directive import Directive
from quickflow.wizard.driver import WizardAction
from quickflow.wizard.steps import CustomStep, InputStep, PickItem, PickStep


def make_renderer(text: str, show_back_hint: bool = True) -> tuple[ConsoleRenderer, io.StringIO]:
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=100)
    return ConsoleRenderer(console, stream=io.StringIO(text), show_back_hint=show_back_hint), output


def pick_step(multiselect: bool = False) -> PickStep:
    return PickStep(
        title="Pick",
        items=[PickItem("one", 1), PickItem("two", 2), PickItem("three", 3)],
        multiselect=multiselect,
    )


class TestPickRendering:
    """Tests for pick steps."""

    def test_select_by_number(self) -> None:
        """Test choosing an item by its number."""
        renderer, output = make_renderer("2\n")
        step = pick_step()

        result = renderer.render(step, None, False)

        assert result == [step.items[1]]
        assert "three" in output.getvalue()

    def test_multiselect(self) -> None:
        """Test choosing several items."""
        renderer, _ = make_renderer("1, 3\n")
        step = pick_step(multiselect=True)

        assert renderer.render(step, None, False) == [step.items[0], step.items[2]]

    def test_invalid_then_valid(self) -> None:
        """Test that invalid answers are re-asked."""
        renderer, output = make_renderer("9\n1,2\n1\n")

        result = renderer.render(pick_step(), None, False)

        assert [i.label for i in result] == ["one"]
        assert "Invalid selection" in output.getvalue()

    def test_default_from_preselected(self) -> None:
        """Test that an empty answer takes the preselected item."""
        renderer, _ = make_renderer("\n")
        step = pick_step()
        step.items[2].picked = True

        assert renderer.render(step, None, False) == [step.items[2]]

    def test_back_only_when_allowed(self) -> None:
        """Test that "b" means back only when back is offered."""
        renderer, _ = make_renderer("b\n")
        assert renderer.render(pick_step(), None, True) is Directive.BACK

        renderer, output = make_renderer("b\nq\n")
        assert renderer.render(pick_step(), None, False) is Directive.CANCEL
        assert "Invalid selection" in output.getvalue()

    def test_back_hint(self) -> None:
        """Test the back hint follows configuration."""
        renderer, output = make_renderer("q\n")
        renderer.render(pick_step(), None, True)
        assert "back" in output.getvalue()

        renderer, output = make_renderer("q\n", show_back_hint=False)
        renderer.render(pick_step(), None, True)
        assert "back" not in output.getvalue()

    def test_toggle_needs_command(self) -> None:
        """Test that "!" only toggles while a command runs."""
        renderer, _ = make_renderer("!\nq\n")
        assert renderer.render(pick_step(), None, False) is Directive.CANCEL

        class Running:
            title = "Running"
            can_confirm = True
            can_skip_confirm = True

        renderer, _ = make_renderer("!\n")
        assert renderer.render(pick_step(), Running(), False) is WizardAction.TOGGLE_CONFIRMATION

    def test_empty_answer_closes(self) -> None:
        """Test that an empty answer with nothing preselected closes the wizard."""
        renderer, _ = make_renderer("\n")
        assert renderer.render(pick_step(), None, False) is None


class TestInputRendering:
    """Tests for input and custom steps."""

    def test_validation_message_then_value(self) -> None:
        """Test that validation messages are shown and the step re-asked."""
        renderer, output = make_renderer("bad value\ngood\n")
        step = InputStep(
            title="Name",
            prompt="Name",
            validate=lambda v: (" " not in v, "No spaces allowed"),
        )

        assert renderer.render(step, None, False) == "good"
        assert "No spaces allowed" in output.getvalue()

    def test_default_value(self) -> None:
        """Test that an empty answer keeps the current value."""
        renderer, _ = make_renderer("\n")
        assert renderer.render(InputStep(prompt="Name", value="kept"), None, False) == "kept"

    def test_bare_shortcut_letters_are_values(self) -> None:
        """Test that "b" and "q" can be entered as input values."""
        renderer, _ = make_renderer("b\n")
        assert renderer.render(InputStep(prompt="Name"), None, True) == "b"

        renderer, _ = make_renderer("q\n")
        assert renderer.render(InputStep(prompt="Name"), None, True) == "q"

    def test_prefixed_shortcuts(self) -> None:
        """Test that input steps take ":b" and ":q" as back and cancel."""
        renderer, output = make_renderer(":b\n")
        assert renderer.render(InputStep(prompt="Name"), None, True) is Directive.BACK
        assert ":b" in output.getvalue()

        renderer, _ = make_renderer(":q\n")
        assert renderer.render(InputStep(prompt="Name"), None, False) is Directive.CANCEL

    def test_custom_step(self) -> None:
        """Test that custom steps render themselves."""
        renderer, _ = make_renderer("")
        assert renderer.render(CustomStep(show=lambda step: 42), None, False) == 42
        assert renderer.render(CustomStep(), None, False) is Directive.CANCEL
