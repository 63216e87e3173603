"""
Navigation directives.

Directives travel through the same channel as user answers but mean
"navigate" rather than "here is a value". Always test for them with
``is_directive`` (or the step continuation predicates), never by comparing
against a literal.
"""

from enum import Enum
from typing import Any


class Directive(Enum):
    """Navigation intents a driver can resume a flow with."""

    BACK = "back"
    CANCEL = "cancel"
    LOAD_MORE = "load_more"
    NOOP = "noop"
    RELOAD = "reload"
    RESET = "reset"


class _StepResultBreak:
    """Sentinel returned (or yielded) by a flow to abort the whole flow."""

    _instance: "_StepResultBreak | None" = None

    def __new__(cls) -> "_StepResultBreak":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "StepResultBreak"


StepResultBreak = _StepResultBreak()


def is_directive(value: Any) -> bool:
    """Check whether a resumed value is a navigation directive rather than data."""
    return isinstance(value, Directive) or value is StepResultBreak


def get_directive_label(directive: Directive) -> str:
    """Human readable label for a directive shown inside a pick list."""
    return _DIRECTIVE_LABELS.get(directive, directive.value.replace("_", " ").title())


_DIRECTIVE_LABELS: dict[Directive, str] = {
    Directive.BACK: "Back",
    Directive.CANCEL: "Cancel",
    Directive.LOAD_MORE: "Load more",
    Directive.NOOP: "",
    Directive.RELOAD: "Refresh",
    Directive.RESET: "Reset",
}
