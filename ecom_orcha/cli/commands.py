"""
CLI commands for the e-commerce compose dispatcher.

This module provides the command-line interface: one command per dispatcher
operation plus the aliases declared in ``ecom_orcha.cli.presets``.
"""

import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from ecom_orcha.cli.presets import PRESETS, Preset
from ecom_orcha.core.dispatcher import Dispatcher
from ecom_orcha.core.runner import CommandRunner
from ecom_orcha.models.context import resolve_context
from ecom_orcha.models.enums import Command
from ecom_orcha.models.settings import ConfigurationError, OrchestratorSettings, load_settings


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Commands whose positional tokens are forwarded to the orchestrator
FORWARDING_COMMANDS = {
    Command.UP, Command.DOWN, Command.BUILD, Command.LOGS,
    Command.RESTART, Command.SHELL, Command.PS, Command.STATUS,
}

# Commands that act the same in every mode; mode options are accepted and ignored
MODE_INDEPENDENT_COMMANDS = {
    Command.HEALTH, Command.CLEAN, Command.CLEAN_VOLUMES, Command.CLEAN_ALL,
    Command.INSTALL, Command.COMPILE, Command.TYPE_CHECK, Command.RUN_DEV,
}

# Flags after the command name belong to the orchestrator, not to us
FORWARDING_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}

COMMAND_HELP = {
    Command.UP: ("Start services in the background", "Docker Services"),
    Command.DOWN: ("Stop and remove services", "Docker Services"),
    Command.BUILD: ("Build service images", "Docker Services"),
    Command.LOGS: ("Follow service logs (all services unless one is named)", "Docker Services"),
    Command.RESTART: ("Restart services", "Docker Services"),
    Command.SHELL: ("Open a shell in a service container (default: backend)", "Docker Services"),
    Command.PS: ("Show running containers", "Docker Services"),
    Command.STATUS: ("Show running containers", "Utilities"),
    Command.HEALTH: ("Check gateway and backend health", "Utilities"),
    Command.BACKUP: ("Backup the MongoDB database", "Database"),
    Command.RESET: ("Reset the MongoDB database (WARNING: deletes all data)", "Database"),
    Command.MONGO_SHELL: ("Open a MongoDB shell", "Shell Access"),
    Command.CLEAN: ("Remove containers and networks (dev and prod)", "Cleanup"),
    Command.CLEAN_VOLUMES: ("Remove containers, networks and volumes (dev and prod)", "Cleanup"),
    Command.CLEAN_ALL: ("Remove everything (containers, volumes, images)", "Cleanup"),
    Command.INSTALL: ("Install backend dependencies", "Backend (Local Development)"),
    Command.COMPILE: ("Build backend TypeScript", "Backend (Local Development)"),
    Command.TYPE_CHECK: ("Type check backend code", "Backend (Local Development)"),
    Command.RUN_DEV: ("Run backend locally (not Docker)", "Backend (Local Development)"),
}

GROUP_ORDER = [
    "Docker Services",
    "Development",
    "Production",
    "Shell Access",
    "Database",
    "Utilities",
    "Cleanup",
    "Backend (Local Development)",
]

# Initialize Typer app
app = typer.Typer(help="E-Commerce Backend - Docker Management", add_completion=True, no_args_is_help=True)

# Initialize Rich console
console = Console()


def build_dispatcher(settings: OrchestratorSettings) -> Dispatcher:
    """Create the dispatcher for one invocation."""
    return Dispatcher(settings, runner=CommandRunner(console=console), console=console)


def run_command(command: Command, services: Optional[List[str]], mode: Optional[str],
                service: Optional[str], args: Optional[str], preset: Preset = None) -> None:
    """
    Resolve the invocation and hand it to the dispatcher.

    Raises:
        typer.Exit: Always, carrying the delegated exit code
    """
    if preset is not None:
        mode, service = preset.apply(mode, service)

    try:
        settings = load_settings()
        context = resolve_context(settings, mode=mode, service=service, extra_args=args)
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(code=2)

    dispatcher = build_dispatcher(settings)
    returncode = dispatcher.dispatch(command, context, services or [])
    raise typer.Exit(code=returncode)


def _forwarding_handler(command: Command, preset: Preset = None):
    def handler(
        services: Optional[List[str]] = typer.Argument(
            None, help="Services and extra arguments forwarded to docker compose"
        ),
        mode: Optional[str] = typer.Option(
            None, "--mode", "-m", envvar="ECOM_ORCHA_MODE", help="dev/development or prod/production"
        ),
        service: Optional[str] = typer.Option(
            None, "--service", "-s", envvar="ECOM_ORCHA_SERVICE", help="Default service for logs and shell"
        ),
        args: Optional[str] = typer.Option(
            None, "--args", envvar="ECOM_ORCHA_ARGS", help="Extra flags for up, down and build"
        ),
    ):
        run_command(command, services, mode, service, args, preset=preset)
    return handler


def _fixed_handler(command: Command, preset: Preset = None):
    def handler(
        mode: Optional[str] = typer.Option(
            None, "--mode", "-m", envvar="ECOM_ORCHA_MODE", help="dev/development or prod/production"
        ),
        service: Optional[str] = typer.Option(None, "--service", "-s", envvar="ECOM_ORCHA_SERVICE", hidden=True),
        args: Optional[str] = typer.Option(None, "--args", envvar="ECOM_ORCHA_ARGS", hidden=True),
    ):
        run_command(command, None, mode, service, args, preset=preset)
    return handler


def _unscoped_handler(command: Command, preset: Preset = None):
    def handler(
        mode: Optional[str] = typer.Option(None, "--mode", "-m", hidden=True),
        service: Optional[str] = typer.Option(None, "--service", "-s", hidden=True),
        args: Optional[str] = typer.Option(None, "--args", hidden=True),
    ):
        run_command(command, None, None, None, None, preset=preset)
    return handler


def register(name: str, command: Command, help_text: str, preset: Preset = None) -> None:
    """Register a dispatcher command (or an alias of one) on the app."""
    if command in FORWARDING_COMMANDS:
        app.command(name, help=help_text, context_settings=FORWARDING_CONTEXT)(_forwarding_handler(command, preset))
    elif command in MODE_INDEPENDENT_COMMANDS:
        app.command(name, help=help_text)(_unscoped_handler(command, preset))
    else:
        app.command(name, help=help_text)(_fixed_handler(command, preset))


for _command, (_help_text, _group) in COMMAND_HELP.items():
    register(_command.value, _command, _help_text)

for _preset in PRESETS:
    register(_preset.name, _preset.command, f"Alias: {_preset.help}", preset=_preset)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """E-Commerce Backend - Docker Management"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


@app.command("help")
def show_help():
    """Display the grouped command overview."""
    rows = {group: [] for group in GROUP_ORDER}
    for command, (help_text, group) in COMMAND_HELP.items():
        rows[group].append((command.value, help_text))
    for preset in PRESETS:
        rows[preset.group].append((preset.name, preset.help))

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Command", style="cyan")
    table.add_column("Description", style="green")
    for group in GROUP_ORDER:
        table.add_row(f"[bold]{group}[/bold]", "")
        for name, help_text in rows[group]:
            table.add_row(f"  {name}", help_text)
        table.add_row("", "")

    console.print(Panel(table, title="E-Commerce Backend - Docker Management", border_style="cyan"))
    console.print("[dim]Options: --mode dev|prod, --service NAME, --args \"extra flags\" "
                  "(or MODE=, SERVICE=, ARGS= after the command)[/]")


@app.command()
def version():
    """Show version information."""
    from ecom_orcha import __version__
    console.print(f"[bold cyan]ecom-orcha[/bold cyan] v{__version__}")


if __name__ == "__main__":
    app()
