"""
Tests for the command registry.
"""

import pytest

from quickflow.core.preferences import MemoryPreferenceStore
from quickflow.errors import QuickflowError, UnknownSubcommandError
from quickflow.wizard.controller import StepsController
from quickflow.wizard.navigation import StartedFrom, StepsContext
from quickflow.wizard.registry import CommandRegistry, get_steps
from quickflow.wizard.steps import InputStep, show_step

from test_command import NameCommand


class TestCommandRegistry:
    """Tests for CommandRegistry."""

    def test_register_and_create(self) -> None:
        """Registered factories create commands by key."""
        registry = CommandRegistry()
        registry.register("name", lambda args: NameCommand(), "asks for a name", group="demo")

        assert "name" in registry
        assert len(registry) == 1
        assert registry.is_registered("name")
        assert registry.get_registered_names() == ["name"]

        info = registry.get_info("name")
        assert info.description == "asks for a name"
        assert info.metadata == {"group": "demo"}

        assert isinstance(registry.create("name"), NameCommand)

    def test_create_unknown_raises(self) -> None:
        """Unknown keys raise a KeyError subclass listing what exists."""
        registry = CommandRegistry()
        registry.register("name", lambda args: NameCommand())

        with pytest.raises(UnknownSubcommandError) as exc_info:
            registry.create("nope")

        assert isinstance(exc_info.value, KeyError)
        assert isinstance(exc_info.value, QuickflowError)
        assert str(exc_info.value) == "Unknown subcommand: nope (available: name)"

    def test_unregister(self) -> None:
        """Unregistering reports whether anything was removed."""
        registry = CommandRegistry()
        registry.register("name", lambda args: NameCommand())

        assert registry.unregister("name") is True
        assert registry.unregister("name") is False
        assert len(registry) == 0

    def test_injects_preferences(self) -> None:
        """Commands without a preference store get the registry's."""
        preferences = MemoryPreferenceStore()
        registry = CommandRegistry(preferences=preferences)
        registry.register("name", lambda args: NameCommand())

        assert registry.create("name").preferences is preferences

    def test_create_all_in_registration_order(self) -> None:
        """create_all() returns fresh instances in registration order."""
        registry = CommandRegistry()
        registry.register("b", lambda args: NameCommand())
        registry.register("a", lambda args: NameCommand())

        first = registry.create_all()
        second = registry.create_all()

        assert len(first) == 2
        assert first[0] is not second[0]
        assert [i.key for i in registry.list_info()] == ["b", "a"]


class TestGetSteps:
    """Tests for jumping into another command mid-flow."""

    def test_jump_shares_navigation(self) -> None:
        """The target command runs against the caller's history."""
        registry = CommandRegistry()
        registry.register("name", lambda args: NameCommand())
        context = StepsContext()

        def caller():
            with StepsController(context) as steps:
                with steps.enter_step("intro"):
                    yield from show_step(InputStep(title="Intro"))
                return (yield from get_steps(registry, "name", None, context, StartedFrom.MENU))

        gen = caller()
        assert next(gen).title == "Intro"

        step = gen.send("ok")
        assert step.title == "Name"
        assert context.steps.history == [["intro"], ["name"]]
        assert context.steps.compute_can_go_back("name") is True
