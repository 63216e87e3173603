"""
Terminal renderer for the wizard.

Shows each step as a rich panel and reads the answer with ``rich.prompt``.
Pick steps list numbered items; typing ``b`` goes back (when allowed), ``q``
cancels and ``!`` toggles "skip confirmation" for the running command. Input
steps take any text, so there the shortcuts need a ``:`` prefix (``:b``).
"""

import logging
from typing import IO, Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from quickflow.wizard.command import QuickCommand
from quickflow.wizard.directive import Directive
from quickflow.wizard.driver import WizardAction
from quickflow.wizard.steps import (
    AnyStep,
    CustomStep,
    InputStep,
    PickItem,
    PickStep,
    is_directive_pick_item,
)

logger = logging.getLogger(__name__)

BACK_KEYS = ("b", "back")
CANCEL_KEYS = ("q", "quit")
TOGGLE_KEY = "!"
INPUT_SHORTCUT_PREFIX = ":"


class ConsoleRenderer:
    """Renders steps to a rich ``Console`` and reads answers from the terminal."""

    def __init__(
        self,
        console: Console | None = None,
        stream: IO[str] | None = None,
        show_back_hint: bool = True,
    ) -> None:
        self.console = console or Console()
        self.stream = stream
        self.show_back_hint = show_back_hint

    def render(self, step: AnyStep, command: QuickCommand | None, can_go_back: bool) -> Any:
        if isinstance(step, CustomStep):
            if step.show is None:
                return Directive.CANCEL
            return step.show(step)

        self._print_header(step, command)
        prefix = INPUT_SHORTCUT_PREFIX if isinstance(step, InputStep) else ""
        self._print_hints(command, can_go_back, prefix)

        if isinstance(step, PickStep):
            return self._render_pick(step, command, can_go_back)
        if isinstance(step, InputStep):
            return self._render_input(step, command, can_go_back)

        logger.warning(f"Don't know how to render {type(step).__name__}")
        return Directive.CANCEL

    # =========================================================================
    # OUTPUT
    # =========================================================================

    def _print_header(self, step: AnyStep, command: QuickCommand | None) -> None:
        subtitle = step.placeholder or None
        title = step.title or (command.title if command is not None else "")
        self.console.print()
        self.console.print(Panel(f"[bold]{title}[/bold]", subtitle=subtitle, border_style="cyan"))

    def _print_hints(self, command: QuickCommand | None, can_go_back: bool, prefix: str = "") -> None:
        hints = []
        if can_go_back and self.show_back_hint:
            hints.append(f"[cyan]{prefix}b[/cyan] back")
        hints.append(f"[cyan]{prefix}q[/cyan] cancel")
        if command is not None and command.can_confirm and command.can_skip_confirm:
            hints.append(f"[cyan]{prefix}{TOGGLE_KEY}[/cyan] toggle confirmation")
        self.console.print(f"[dim]{'  '.join(hints)}[/dim]")

    def _print_items(self, step: PickStep) -> None:
        table = Table(box=box.SIMPLE, show_header=False)
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Item")
        table.add_column("Detail", style="dim")

        selected = step.initially_selected()
        for index, item in enumerate(step.items, start=1):
            label = f"[dim]{item.label}[/dim]" if is_directive_pick_item(item) else item.label
            if item in selected:
                label = f"[bold]{label}[/bold] [green]*[/green]"
            table.add_row(str(index), label, item.detail or item.description)

        self.console.print(table)

    # =========================================================================
    # INPUT
    # =========================================================================

    def _ask(self, prompt: str, default: str | None = None) -> str:
        if default is None:
            return Prompt.ask(prompt, console=self.console, stream=self.stream)

        answer = Prompt.ask(prompt, console=self.console, default=default, stream=self.stream)
        # Lines read from a stream keep their newline, so rich doesn't apply the default
        return answer if answer.strip() else default

    def _directive_for(
        self,
        answer: str,
        command: QuickCommand | None,
        can_go_back: bool,
        prefix: str = "",
    ) -> Any:
        key = answer.strip().lower()
        if not key.startswith(prefix):
            return None
        key = key[len(prefix):]
        if key in CANCEL_KEYS:
            return Directive.CANCEL
        if key in BACK_KEYS and can_go_back:
            return Directive.BACK
        if key == TOGGLE_KEY and command is not None:
            return WizardAction.TOGGLE_CONFIRMATION
        return None

    def _render_pick(self, step: PickStep, command: QuickCommand | None, can_go_back: bool) -> Any:
        self._print_items(step)

        selected = step.initially_selected()
        default = ",".join(str(step.items.index(i) + 1) for i in selected if i in step.items) or None
        label = "Select items (comma separated)" if step.multiselect else "Select"

        while True:
            try:
                answer = self._ask(label, default)
            except EOFError:
                return None

            directive = self._directive_for(answer, command, can_go_back)
            if directive is not None:
                return directive

            # Nothing entered and nothing preselected closes the wizard
            if not answer.strip() and default is None and not step.allow_empty:
                return None

            picked = self._parse_selection(step, answer)
            if picked is None:
                self.console.print(f"[red]Invalid selection: {answer}[/red]")
                continue
            if not picked and not step.allow_empty:
                self.console.print("[red]Please select at least one item[/red]")
                continue
            return picked

    @staticmethod
    def _parse_selection(step: PickStep, answer: str) -> list[PickItem] | None:
        parts = [p.strip() for p in answer.split(",") if p.strip()]
        if len(parts) > 1 and not step.multiselect:
            return None

        picked = []
        for part in parts:
            if not part.isdigit() or not 1 <= int(part) <= len(step.items):
                return None
            item = step.items[int(part) - 1]
            if item not in picked:
                picked.append(item)
        return picked

    def _render_input(self, step: InputStep, command: QuickCommand | None, can_go_back: bool) -> Any:
        prompt = step.prompt or step.placeholder or "Value"

        while True:
            try:
                answer = self._ask(prompt, step.value)
            except EOFError:
                return None

            directive = self._directive_for(answer, command, can_go_back, INPUT_SHORTCUT_PREFIX)
            if directive is not None:
                return directive

            if step.validate is not None:
                valid, message = step.validate(answer)
                if not valid:
                    self.console.print(f"[red]{message or 'Invalid value'}[/red]")
                    continue
            return answer
