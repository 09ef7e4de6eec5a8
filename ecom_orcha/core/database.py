"""
MongoDB operations for the e-commerce compose dispatcher.

Backups and resets run the mongo tools inside the mode's database
container with the administrative credentials from the environment.
"""

import os
import logging
from datetime import datetime
from typing import Callable, List

import questionary
from rich.console import Console

from ecom_orcha.core.runner import CommandRunner, EXIT_INTERRUPTED
from ecom_orcha.models.context import DispatchContext
from ecom_orcha.models.settings import OrchestratorSettings
from ecom_orcha.utils.formatting import format_backup_timestamp, backup_filename


logger = logging.getLogger('ecom_orchestrator.database')

AUTH_DATABASE = "admin"
BACKUP_TOOL = "mongodb"


def acknowledge(message: str) -> bool:
    """
    Block until the operator presses a key.

    Returns:
        bool: False when the operator interrupted instead
    """
    try:
        questionary.press_any_key_to_continue(message).unsafe_ask()
    except (KeyboardInterrupt, EOFError):
        return False
    return True


class DatabaseOperations:
    """
    Backup, reset and shell access for the mode's MongoDB container.
    """
    def __init__(self, settings: OrchestratorSettings, runner: CommandRunner, console: Console = None,
                 acknowledge: Callable[[str], bool] = acknowledge,
                 clock: Callable[[], datetime] = datetime.now):
        self.settings = settings
        self.runner = runner
        self.console = console or runner.console
        self.acknowledge = acknowledge
        self.clock = clock

    def _mongosh(self, context: DispatchContext, interactive: bool = True) -> List[str]:
        credentials = self.settings.credentials
        command = ["docker", "exec"]
        if interactive:
            command.append("-it")
        command += [
            context.mongo_container, "mongosh",
            "-u", credentials.username,
            "-p", credentials.password,
            "--authenticationDatabase", AUTH_DATABASE,
        ]
        return command

    def backup_path(self, context: DispatchContext, moment: datetime) -> str:
        filename = backup_filename(BACKUP_TOOL, context.env_suffix, format_backup_timestamp(moment))
        return os.path.join(self.settings.backups_dir, filename)

    def backup(self, context: DispatchContext) -> int:
        """
        Dump the mode's database into a timestamped archive.

        Args:
            context: Resolved invocation context

        Returns:
            int: Exit code of ``mongodump``
        """
        os.makedirs(self.settings.backups_dir, exist_ok=True)
        path = self.backup_path(context, self.clock())

        credentials = self.settings.credentials
        command = [
            "docker", "exec", context.mongo_container, "mongodump",
            "--username", credentials.username,
            "--password", credentials.password,
            "--authenticationDatabase", AUTH_DATABASE,
            "--archive",
        ]
        with open(path, 'wb') as archive:
            returncode = self.runner.run(command, stdout=archive, echo=False)

        if returncode != 0:
            logger.error(f"Backup of {context.mongo_container} failed with exit code {returncode}")
            self.console.print(f"[bold red]✗[/] Backup failed, partial archive left at {path}")
            return returncode

        logger.info(f"Backup written to {path}")
        self.console.print(f"Backup created: {path}")
        return 0

    def reset(self, context: DispatchContext) -> int:
        """
        Drop the mode's database after an explicit acknowledgment.

        Returns:
            int: Exit code of the drop, or 130 when the operator aborted
        """
        self.console.print(
            f"[bold yellow]WARNING:[/] This will delete ALL data in the {context.mode.value} database!"
        )
        if not self.acknowledge("Press Ctrl+C to cancel, or Enter to continue..."):
            logger.info(f"Reset of {context.mode.value} database cancelled")
            self.console.print("[yellow]Database reset cancelled[/]")
            return EXIT_INTERRUPTED

        database = self.settings.credentials.database
        command = self._mongosh(context) + ["--eval", f"db.getSiblingDB('{database}').dropDatabase()"]
        returncode = self.runner.run(command, echo=False)
        if returncode == 0:
            self.console.print("[bold green]Database reset complete[/]")
        return returncode

    def shell(self, context: DispatchContext) -> int:
        """Open an interactive ``mongosh`` session."""
        return self.runner.run(self._mongosh(context), echo=False)
