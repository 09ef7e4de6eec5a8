"""
Command dispatcher for the e-commerce deployment.

This module maps each command onto exactly one delegated invocation. The
dispatcher keeps no state between calls: the mode and the default service
arrive in a ``DispatchContext`` resolved once per invocation, and positional
tokens are forwarded verbatim in the order given.
"""

import logging
from typing import Callable, Dict, List, Sequence

from rich.console import Console

from ecom_orcha.core.cleanup import CleanupManager
from ecom_orcha.core.database import DatabaseOperations
from ecom_orcha.core.health import HealthChecker
from ecom_orcha.core.runner import CommandRunner
from ecom_orcha.models.context import DispatchContext
from ecom_orcha.models.enums import Command
from ecom_orcha.models.settings import OrchestratorSettings
from ecom_orcha.utils.formatting import format_probe_result


logger = logging.getLogger('ecom_orchestrator.dispatcher')


class Dispatcher:
    """
    Forwards commands to ``docker compose``, the mongo tools and npm.
    """
    def __init__(self, settings: OrchestratorSettings, runner: CommandRunner = None,
                 database: DatabaseOperations = None, cleanup: CleanupManager = None,
                 health: HealthChecker = None, console: Console = None):
        self.settings = settings
        self.runner = runner or CommandRunner(console=console)
        self.console = console or self.runner.console
        self.database = database or DatabaseOperations(settings, self.runner, console=self.console)
        self.cleanup = cleanup or CleanupManager(settings, self.runner, console=self.console)
        self.health_checker = health or HealthChecker(settings.gateway_url, timeout=settings.health_timeout)

    def _compose(self, context: DispatchContext, *args: str) -> int:
        return self.runner.run(context.compose_prefix() + list(args))

    def _npm(self, *args: str) -> int:
        return self.runner.run(["npm"] + list(args), cwd=self.settings.backend_dir)

    # Compose lifecycle

    def up(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self._compose(context, "up", "-d", *context.extra_args, *services)

    def down(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self._compose(context, "down", *context.extra_args, *services)

    def build(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self._compose(context, "build", *context.extra_args, *services)

    def restart(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self._compose(context, "restart", *services)

    def logs(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        """
        Follow logs until interrupted.

        Positional services win over the default service; with neither,
        every service is followed.
        """
        if services:
            targets = list(services)
        elif context.service:
            targets = [context.service]
        else:
            targets = []
        return self._compose(context, "logs", "-f", *targets)

    def shell(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        """Open ``sh`` inside a running service container."""
        if services:
            targets = list(services)
        else:
            targets = [context.service or self.settings.default_shell_service]
        return self._compose(context, "exec", *targets, "sh")

    def ps(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self._compose(context, "ps", *services)

    def status(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.ps(context, services)

    # Utilities

    def health(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        """
        Probe the gateway and the backend through it.

        Always returns 0; each probe prints its own pass/fail indicator.
        """
        self.console.print("Checking service health...")
        for result in self.health_checker.check_all():
            self.console.print("")
            self.console.print(f"{result.probe.title}:")
            if result.ok:
                self.console.print(result.body, end=" ", markup=False, highlight=False)
                self.console.print(format_probe_result(True))
            else:
                logger.debug(f"{result.probe.title} failed: {result.error}")
                self.console.print(f" {format_probe_result(False)}")
        self.console.print("")
        return 0

    # Database

    def backup(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.database.backup(context)

    def reset(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.database.reset(context)

    def mongo_shell(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.database.shell(context)

    # Cleanup, always across both modes

    def clean(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.cleanup.clean()

    def clean_volumes(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.cleanup.clean_volumes()

    def clean_all(self, context: DispatchContext, services: Sequence[str] = ()) -> int:
        return self.cleanup.clean_all()

    # Backend toolchain, outside any container

    def install(self, context: DispatchContext = None, services: Sequence[str] = ()) -> int:
        return self._npm("install")

    def compile(self, context: DispatchContext = None, services: Sequence[str] = ()) -> int:
        return self._npm("run", "build")

    def type_check(self, context: DispatchContext = None, services: Sequence[str] = ()) -> int:
        return self._npm("run", "type-check")

    def run_dev(self, context: DispatchContext = None, services: Sequence[str] = ()) -> int:
        return self._npm("run", "dev")

    def handlers(self) -> Dict[Command, Callable[[DispatchContext, Sequence[str]], int]]:
        """Forwarding rule for every dispatchable command."""
        return {
            Command.UP: self.up,
            Command.DOWN: self.down,
            Command.BUILD: self.build,
            Command.LOGS: self.logs,
            Command.RESTART: self.restart,
            Command.SHELL: self.shell,
            Command.PS: self.ps,
            Command.STATUS: self.status,
            Command.HEALTH: self.health,
            Command.BACKUP: self.backup,
            Command.RESET: self.reset,
            Command.MONGO_SHELL: self.mongo_shell,
            Command.CLEAN: self.clean,
            Command.CLEAN_VOLUMES: self.clean_volumes,
            Command.CLEAN_ALL: self.clean_all,
            Command.INSTALL: self.install,
            Command.COMPILE: self.compile,
            Command.TYPE_CHECK: self.type_check,
            Command.RUN_DEV: self.run_dev,
        }

    def dispatch(self, command: Command, context: DispatchContext, services: List[str] = None) -> int:
        """
        Run one command.

        Args:
            command: Command to run
            context: Resolved invocation context
            services: Positional tokens forwarded verbatim

        Returns:
            int: Exit code of the delegated tool
        """
        command = Command(command)
        handler = self.handlers().get(command)
        if handler is None:
            raise ValueError(f"Command {command} cannot be dispatched")
        logger.debug(f"Dispatching {command.value} in {context.mode.value} mode with {services or []}")
        return handler(context, list(services or []))
