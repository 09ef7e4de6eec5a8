"""
Project settings for the e-commerce compose dispatcher.

Defaults describe the standard repository layout. Any of them can be
overridden from a YAML file, located through ``ECOM_ORCHA_CONFIG`` or as
``ecom-orcha.yaml`` in the working directory.
"""

import os
import logging
from dataclasses import dataclass, field, fields
from typing import List, Mapping, Optional

import yaml

from ecom_orcha.models.enums import Mode


logger = logging.getLogger('ecom_orchestrator.settings')

CONFIG_ENV_VAR = "ECOM_ORCHA_CONFIG"
DEFAULT_CONFIG_FILE = "ecom-orcha.yaml"

# Settings that must hold a non-empty string
STRING_SETTINGS = (
    'development_compose_file',
    'production_compose_file',
    'env_file',
    'development_mongo_container',
    'production_mongo_container',
    'gateway_url',
    'backend_dir',
    'backups_dir',
    'default_shell_service',
)


class ConfigurationError(Exception):
    """Raised when the invocation or the settings file cannot be understood."""


@dataclass
class DatabaseCredentials:
    """Administrative credentials forwarded to the mongo tools."""
    username: str = ""
    password: str = ""
    database: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "DatabaseCredentials":
        """Read credentials at invocation time; absent values become empty strings."""
        if environ is None:
            environ = os.environ
        return cls(
            username=environ.get('MONGO_INITDB_ROOT_USERNAME', ''),
            password=environ.get('MONGO_INITDB_ROOT_PASSWORD', ''),
            database=environ.get('MONGO_DATABASE', ''),
        )


@dataclass
class OrchestratorSettings:
    """Static configuration shared by every invocation."""
    development_compose_file: str = "docker/compose.development.yaml"
    production_compose_file: str = "docker/compose.production.yaml"
    env_file: str = ".env"
    development_mongo_container: str = "ecommerce-mongo-dev"
    production_mongo_container: str = "ecommerce-mongo-prod"
    images: List[str] = field(default_factory=lambda: [
        "ecommerce-backend-dev",
        "ecommerce-backend-prod",
        "ecommerce-gateway-dev",
        "ecommerce-gateway-prod",
    ])
    gateway_url: str = "http://localhost:5921"
    backend_dir: str = "backend"
    backups_dir: str = "backups"
    default_shell_service: str = "backend"
    health_timeout: float = 5.0
    credentials: DatabaseCredentials = field(default_factory=DatabaseCredentials)

    def compose_file(self, mode: Mode) -> str:
        if mode is Mode.PRODUCTION:
            return self.production_compose_file
        return self.development_compose_file

    def mongo_container(self, mode: Mode) -> str:
        if mode is Mode.PRODUCTION:
            return self.production_mongo_container
        return self.development_mongo_container

    def compose_files(self) -> List[str]:
        """Both compose files, development first."""
        return [self.development_compose_file, self.production_compose_file]

    @classmethod
    def from_mapping(cls, data: Mapping, environ: Mapping[str, str] = None) -> "OrchestratorSettings":
        """
        Build settings from a mapping of overrides.

        Args:
            data: Keys matching the settings fields
            environ: Environment used for the database credentials

        Returns:
            OrchestratorSettings: Defaults updated with ``data``
        """
        allowed = {f.name for f in fields(cls) if f.name != 'credentials'}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

        overrides = dict(data)
        if 'images' in overrides:
            images = overrides['images']
            if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
                raise ConfigurationError("Setting 'images' must be a list of image names")
        for name in STRING_SETTINGS:
            if name in overrides:
                value = overrides[name]
                if not isinstance(value, str) or not value.strip():
                    raise ConfigurationError(f"Setting '{name}' must be a non-empty string")
        if 'health_timeout' in overrides:
            timeout = overrides['health_timeout']
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigurationError("Setting 'health_timeout' must be a positive number of seconds")
            overrides['health_timeout'] = float(timeout)

        return cls(credentials=DatabaseCredentials.from_env(environ), **overrides)


def find_config_file(environ: Mapping[str, str] = None, cwd: str = None) -> Optional[str]:
    """Locate the settings file, if any."""
    if environ is None:
        environ = os.environ
    explicit = environ.get(CONFIG_ENV_VAR)
    if explicit:
        if not os.path.exists(explicit):
            raise ConfigurationError(f"Settings file not found at {explicit}")
        return explicit

    candidate = os.path.join(cwd or os.getcwd(), DEFAULT_CONFIG_FILE)
    if os.path.exists(candidate):
        return candidate
    return None


def load_settings(path: str = None, environ: Mapping[str, str] = None, cwd: str = None) -> OrchestratorSettings:
    """
    Load settings from the YAML file, falling back to defaults.

    Args:
        path: Explicit settings file; located automatically when omitted
        environ: Process environment (defaults to ``os.environ``)
        cwd: Directory searched for ``ecom-orcha.yaml``

    Returns:
        OrchestratorSettings: Resolved settings
    """
    if path is None:
        path = find_config_file(environ=environ, cwd=cwd)
    if path is None:
        return OrchestratorSettings.from_mapping({}, environ=environ)

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read settings from {path}: {str(e)}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")

    logger.debug(f"Loaded settings from {path}")
    return OrchestratorSettings.from_mapping(data, environ=environ)
