"""
Process runner for delegated commands.

Every external tool the dispatcher calls goes through ``CommandRunner.run``,
which echoes the command, runs it in the foreground and returns its exit
code untouched.
"""

import os
import logging
import subprocess
from typing import IO, List, Optional

from rich.console import Console
from rich.markup import escape

from ecom_orcha.utils.formatting import format_command


logger = logging.getLogger('ecom_orchestrator.runner')

# Exit codes used when the child never ran or was interrupted
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 127
EXIT_INTERRUPTED = 130


class CommandRunner:
    """
    Runs external commands with inherited terminal I/O.
    """
    def __init__(self, console: Console = None, echo: bool = True):
        self.console = console or Console()
        self.echo = echo

    def run(self, command: List[str], cwd: Optional[str] = None, stdout: Optional[IO] = None,
            echo: Optional[bool] = None) -> int:
        """
        Run a command in the foreground.

        Args:
            command: Command and arguments
            cwd: Working directory for the child
            stdout: File object receiving the child's standard output
            echo: Override the echo setting; commands carrying credentials pass False

        Returns:
            int: The child's exit code
        """
        if echo is None:
            echo = self.echo
        if echo:
            self.console.print(format_command(command, cwd=cwd), style="dim", markup=False, highlight=False)
            logger.debug(f"Running {command} (cwd={cwd})")
        else:
            logger.debug(f"Running {command[0]} {command[1] if len(command) > 1 else ''} (arguments hidden)")

        if cwd and not os.path.isdir(cwd):
            logger.error(f"Working directory not found: {cwd}")
            self.console.print(f"[bold red]✗[/] Working directory not found: {escape(cwd)}", highlight=False)
            return EXIT_FAILURE

        try:
            result = subprocess.run(command, cwd=cwd, stdout=stdout, check=False)
        except FileNotFoundError as e:
            logger.error(f"Executable not found: {str(e)}")
            self.console.print(f"[bold red]✗[/] Command not found: {escape(command[0])} ({escape(str(e))})", highlight=False)
            return EXIT_NOT_FOUND
        except KeyboardInterrupt:
            # The child received the same SIGINT from the terminal
            self.console.print("\n[yellow]Interrupted[/]")
            return EXIT_INTERRUPTED

        if result.returncode != 0:
            logger.debug(f"{command[0]} exited with {result.returncode}")
        return result.returncode
