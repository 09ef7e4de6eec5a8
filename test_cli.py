#!/usr/bin/env python3
"""
Test Suite for the ecom-orcha command line

Drives the Typer app with a recording runner in place of the real
processes, covering option handling, argument forwarding, aliases and
exit codes.

Usage:
  pytest test_cli.py

Requirements:
  - pytest
  - typer
"""

import io
import unittest
from unittest.mock import MagicMock, patch

import requests
from rich.console import Console
from typer.testing import CliRunner

from ecom_orcha.cli import commands
from ecom_orcha.cli.presets import PRESETS
from ecom_orcha.core.dispatcher import Dispatcher
from ecom_orcha.core.health import HealthChecker
from ecom_orcha.core.runner import CommandRunner
from ecom_orcha.models.enums import Mode
from ecom_orcha.models.settings import ConfigurationError, OrchestratorSettings
from ecom_orcha_cli import normalize_argv


DEV_FILE = "docker/compose.development.yaml"
PROD_FILE = "docker/compose.production.yaml"

PRESETS_BY_NAME = {preset.name: preset for preset in PRESETS}

CLEAN_ENV = {
    'ECOM_ORCHA_MODE': None,
    'ECOM_ORCHA_SERVICE': None,
    'ECOM_ORCHA_ARGS': None,
    'ECOM_ORCHA_CONFIG': None,
}


class RecordingRunner(CommandRunner):
    """Runner that records commands instead of executing them."""

    def __init__(self, returncode=0):
        super().__init__(console=Console(file=io.StringIO()), echo=False)
        self.returncode = returncode
        self.calls = []

    def run(self, command, cwd=None, stdout=None, echo=None):
        self.calls.append(list(command))
        return self.returncode


class TestCommandLine(unittest.TestCase):
    """Test cases for the Typer command surface"""

    def setUp(self):
        self.cli = CliRunner()
        self.runner = RecordingRunner()
        self.session = MagicMock()
        self.session.get.side_effect = requests.exceptions.ConnectionError("refused")

        def build_dispatcher(settings):
            return Dispatcher(
                settings,
                runner=self.runner,
                console=commands.console,
                health=HealthChecker(settings.gateway_url, session=self.session),
            )

        patchers = [
            patch.object(commands, 'build_dispatcher', side_effect=build_dispatcher),
            patch.object(commands, 'load_settings', return_value=OrchestratorSettings()),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

    def invoke(self, *args, env=None):
        merged = dict(CLEAN_ENV)
        merged.update(env or {})
        return self.cli.invoke(commands.app, list(args), env=merged)

    def last_command(self):
        return self.runner.calls[-1]

    def test_up_forwards_services_and_flags_in_order(self):
        result = self.invoke("up", "--build", "backend", "gateway")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command(), [
            "docker", "compose", "-f", DEV_FILE, "--env-file", ".env",
            "up", "-d", "--build", "backend", "gateway",
        ])

    def test_mode_and_args_options(self):
        result = self.invoke("up", "backend", "--mode", "prod", "--args", "--force-recreate --no-deps")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command()[3], PROD_FILE)
        self.assertEqual(self.last_command()[6:], ["up", "-d", "--force-recreate", "--no-deps", "backend"])

    def test_mode_from_environment(self):
        result = self.invoke("ps", env={'ECOM_ORCHA_MODE': 'production'})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command()[3], PROD_FILE)

    def test_logs_with_service_option(self):
        result = self.invoke("logs", "--service", "gateway")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command()[6:], ["logs", "-f", "gateway"])

    def test_logs_positional_beats_service_option(self):
        result = self.invoke("logs", "backend", "-s", "gateway")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command()[6:], ["logs", "-f", "backend"])

    def test_exit_code_of_delegated_command_propagates(self):
        self.runner.returncode = 3

        result = self.invoke("down")

        self.assertEqual(result.exit_code, 3)

    def test_invalid_mode_is_a_usage_error(self):
        result = self.invoke("up", "--mode", "staging")

        self.assertEqual(result.exit_code, 2)
        self.assertIn("Unknown mode", result.output)
        self.assertEqual(self.runner.calls, [])

    def test_configuration_error_is_reported(self):
        commands.load_settings.side_effect = ConfigurationError("Unknown settings: nope")

        result = self.invoke("ps")

        self.assertEqual(result.exit_code, 2)
        self.assertIn("Unknown settings: nope", result.output)

    def test_prod_alias_ignores_requested_mode(self):
        result = self.invoke("prod-up", "--mode", "dev")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command()[3], PROD_FILE)
        self.assertEqual(self.last_command()[6:], ["up", "-d"])

    def test_dev_shell_alias_binds_mode_and_service(self):
        result = self.invoke("dev-shell", "--mode", "prod")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command(), [
            "docker", "compose", "-f", DEV_FILE, "--env-file", ".env", "exec", "backend", "sh",
        ])

    def test_gateway_shell_keeps_requested_mode(self):
        result = self.invoke("gateway-shell", "-m", "prod")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command()[3], PROD_FILE)
        self.assertEqual(self.last_command()[6:], ["exec", "gateway", "sh"])

    def test_backend_aliases_run_npm(self):
        result = self.invoke("backend-build")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.last_command(), ["npm", "run", "build"])

    def test_clean_ignores_mode(self):
        result = self.invoke("clean", "--mode", "prod")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.runner.calls, [
            ["docker", "compose", "-f", DEV_FILE, "down"],
            ["docker", "compose", "-f", PROD_FILE, "down"],
        ])

    def test_mode_independent_commands_ignore_invalid_mode(self):
        expected = {
            "install": [["npm", "install"]],
            "backend-type-check": [["npm", "run", "type-check"]],
            "clean-volumes": [
                ["docker", "compose", "-f", DEV_FILE, "down", "-v"],
                ["docker", "compose", "-f", PROD_FILE, "down", "-v"],
            ],
        }
        for name, calls in expected.items():
            self.runner.calls = []

            from_env = self.invoke(name, env={'ECOM_ORCHA_MODE': 'staging', 'ECOM_ORCHA_ARGS': '"unterminated'})
            self.assertEqual(from_env.exit_code, 0, from_env.output)
            from_option = self.invoke(name, "--mode", "staging")
            self.assertEqual(from_option.exit_code, 0, from_option.output)

            self.assertEqual(self.runner.calls, calls + calls, name)

    def test_health_ignores_invalid_mode(self):
        result = self.invoke("health", env={'ECOM_ORCHA_MODE': 'staging'})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.count("✗"), 2)

    def test_health_always_exits_zero(self):
        result = self.invoke("health")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.count("✗"), 2)

    def test_help_lists_commands_and_aliases(self):
        result = self.invoke("help")

        self.assertEqual(result.exit_code, 0, result.output)
        for name in ("dev-up", "prod-logs", "db-reset", "clean-all", "mongo-shell"):
            self.assertIn(name, result.output)

    def test_every_preset_is_registered(self):
        registered = {info.name for info in commands.app.registered_commands}
        for preset in PRESETS:
            self.assertIn(preset.name, registered)


class TestPresets(unittest.TestCase):
    """Test cases for alias presets"""

    def test_bound_mode_wins(self):
        self.assertEqual(PRESETS_BY_NAME["prod-logs"].apply("dev", None), ("production", None))

    def test_unbound_values_pass_through(self):
        self.assertEqual(PRESETS_BY_NAME["backend-shell"].apply("prod", "gateway"), ("prod", "backend"))
        self.assertEqual(PRESETS_BY_NAME["db-backup"].apply("prod", None), ("prod", None))

    def test_development_aliases(self):
        for preset in PRESETS:
            if preset.name.startswith("dev-"):
                self.assertIs(preset.mode, Mode.DEVELOPMENT)
            if preset.name.startswith("prod-"):
                self.assertIs(preset.mode, Mode.PRODUCTION)

    def test_unknown_preset(self):
        self.assertNotIn("stage-up", PRESETS_BY_NAME)


class TestArgvNormalization(unittest.TestCase):
    """Test cases for make-style assignments"""

    def test_assignments_become_options(self):
        self.assertEqual(
            normalize_argv(["up", "backend", "MODE=prod", "ARGS=--build --no-deps", "SERVICE=gateway"]),
            ["up", "backend", "--mode=prod", "--args=--build --no-deps", "--service=gateway"],
        )

    def test_other_tokens_are_untouched(self):
        self.assertEqual(
            normalize_argv(["up", "mode=prod", "FOO=bar", "--build"]),
            ["up", "mode=prod", "FOO=bar", "--build"],
        )


if __name__ == "__main__":
    unittest.main()
