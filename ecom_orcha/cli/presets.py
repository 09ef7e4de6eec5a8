"""
Command aliases.

An alias is a base command with its mode and/or default service bound in
advance. Applying a preset only fills in those values; the command itself
runs exactly as it would without the alias.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ecom_orcha.models.enums import Command, Mode


@dataclass(frozen=True)
class Preset:
    """A named alias for a base command."""
    name: str
    command: Command
    help: str
    group: str
    mode: Optional[Mode] = None
    service: Optional[str] = None

    def apply(self, mode: Optional[str], service: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
        """
        Merge the invocation options with the bound values.

        A bound mode replaces the requested one; a bound service replaces
        the default service option.
        """
        if self.mode is not None:
            mode = self.mode.value
        if self.service is not None:
            service = self.service
        return mode, service


DEV = Mode.DEVELOPMENT
PROD = Mode.PRODUCTION

PRESETS: List[Preset] = [
    Preset("dev-up", Command.UP, "Start development environment", "Development", mode=DEV),
    Preset("dev-down", Command.DOWN, "Stop development environment", "Development", mode=DEV),
    Preset("dev-build", Command.BUILD, "Build development containers", "Development", mode=DEV),
    Preset("dev-logs", Command.LOGS, "View development logs", "Development", mode=DEV),
    Preset("dev-restart", Command.RESTART, "Restart development services", "Development", mode=DEV),
    Preset("dev-shell", Command.SHELL, "Open shell in development backend container", "Development",
           mode=DEV, service="backend"),
    Preset("dev-ps", Command.PS, "Show running development containers", "Development", mode=DEV),
    Preset("prod-up", Command.UP, "Start production environment", "Production", mode=PROD),
    Preset("prod-down", Command.DOWN, "Stop production environment", "Production", mode=PROD),
    Preset("prod-build", Command.BUILD, "Build production containers", "Production", mode=PROD),
    Preset("prod-logs", Command.LOGS, "View production logs", "Production", mode=PROD),
    Preset("prod-restart", Command.RESTART, "Restart production services", "Production", mode=PROD),
    Preset("prod-ps", Command.PS, "Show running production containers", "Production", mode=PROD),
    Preset("backend-shell", Command.SHELL, "Open shell in backend container", "Shell Access", service="backend"),
    Preset("gateway-shell", Command.SHELL, "Open shell in gateway container", "Shell Access", service="gateway"),
    Preset("db-backup", Command.BACKUP, "Backup MongoDB database", "Database"),
    Preset("db-reset", Command.RESET, "Reset database (WARNING: deletes all data)", "Database"),
    Preset("backend-install", Command.INSTALL, "Install backend dependencies", "Backend (Local Development)"),
    Preset("backend-build", Command.COMPILE, "Build backend TypeScript", "Backend (Local Development)"),
    Preset("backend-type-check", Command.TYPE_CHECK, "Type check backend code", "Backend (Local Development)"),
    Preset("backend-dev", Command.RUN_DEV, "Run backend locally (not Docker)", "Backend (Local Development)"),
]

