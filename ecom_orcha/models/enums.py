"""
Enumeration classes for the e-commerce compose dispatcher.
"""

from enum import Enum


class Mode(str, Enum):
    """Deployment target selecting the compose file and labels."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"

    @property
    def suffix(self) -> str:
        """Short label used in container names, filenames and prompts."""
        return "prod" if self is Mode.PRODUCTION else "dev"

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """Accept both long and short mode names."""
        if isinstance(value, Mode):
            return value
        normalized = (value or "").strip().lower()
        for mode in cls:
            if normalized in (mode.value, mode.suffix):
                return mode
        raise ValueError(f"Unknown mode: {value!r} (expected dev, development, prod or production)")


class Command(str, Enum):
    """Commands understood by the dispatcher."""
    UP = "up"
    DOWN = "down"
    BUILD = "build"
    LOGS = "logs"
    RESTART = "restart"
    SHELL = "shell"
    PS = "ps"
    STATUS = "status"
    HEALTH = "health"
    BACKUP = "backup"
    RESET = "reset"
    CLEAN = "clean"
    CLEAN_VOLUMES = "clean-volumes"
    CLEAN_ALL = "clean-all"
    INSTALL = "install"
    COMPILE = "compile"
    TYPE_CHECK = "type-check"
    RUN_DEV = "run-dev"
    MONGO_SHELL = "mongo-shell"
    HELP = "help"
