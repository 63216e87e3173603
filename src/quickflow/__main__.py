"""
Quickflow CLI entry point.

Usage:
    quickflow [OPTIONS] COMMAND [ARGS]...
"""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from quickflow import __version__
from quickflow.commands import register_builtin_commands
from quickflow.console import ConsoleRenderer
from quickflow.core.config import QuickflowConfig, get_config_path
from quickflow.core.preferences import ConfigPreferenceStore
from quickflow.errors import QuickflowError
from quickflow.wizard.driver import QuickWizard, WizardOutcome
from quickflow.wizard.registry import CommandRegistry

console = Console()


def _load_store(project_path: str) -> ConfigPreferenceStore:
    path = get_config_path(Path(project_path))
    try:
        return ConfigPreferenceStore.from_file(path)
    except QuickflowError as e:
        raise click.ClickException(e.message) from e


@click.group()
@click.version_option(version=__version__, prog_name="quickflow")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """Quickflow - step-by-step command wizards."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--command", "-c", "command_key", default=None, help="Start directly with a command")
@click.option("--subcommand", "-s", default=None, help="Preselect a subcommand")
@click.option("--project-path", "-p", default=".", help="Project directory")
def run(command_key, subcommand, project_path):
    """Run the wizard, from the menu or directly with a command."""
    store = _load_store(project_path)
    config: QuickflowConfig = store.config

    registry = register_builtin_commands(CommandRegistry(preferences=store))
    renderer = ConsoleRenderer(console=console, show_back_hint=config.show_back_hint)
    wizard = QuickWizard(registry, renderer)

    args = {"state": {"subcommand": subcommand}} if subcommand else None
    try:
        outcome = wizard.run(command_key, args)
    except QuickflowError as e:
        raise click.ClickException(e.message) from e

    if outcome == WizardOutcome.COMPLETED:
        console.print("\n[bold green]Done.[/bold green]")
    else:
        console.print("\n[yellow]Cancelled.[/yellow]")


@cli.group()
def confirmations():
    """Manage skipped confirmation steps."""
    pass


@confirmations.command("list")
@click.option("--project-path", "-p", default=".", help="Project directory")
def confirmations_list(project_path):
    """List commands whose confirmation step is skipped."""
    keys = _load_store(project_path).keys()
    if not keys:
        console.print("[dim]No confirmations are skipped.[/dim]")
        return

    table = Table(title="Skipped Confirmations")
    table.add_column("Command", style="cyan")
    table.add_column("Started From")
    for key in keys:
        command, _, via = key.rpartition(":")
        table.add_row(command or key, via)
    console.print(table)


@confirmations.command("reset")
@click.option("--project-path", "-p", default=".", help="Project directory")
def confirmations_reset(project_path):
    """Turn every confirmation step back on."""
    store = _load_store(project_path)
    count = len(store.keys())
    store.clear()
    console.print(f"[green]Re-enabled {count} confirmation(s).[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
