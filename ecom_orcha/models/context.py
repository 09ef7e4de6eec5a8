"""
Per-invocation dispatch context.
"""

import shlex
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ecom_orcha.models.enums import Mode
from ecom_orcha.models.settings import OrchestratorSettings, ConfigurationError


@dataclass(frozen=True)
class DispatchContext:
    """
    Everything an operation needs to know about one invocation.

    Resolved once from the settings and the command-line options, then
    threaded through every dispatcher operation.
    """
    mode: Mode
    compose_file: str
    env_file: str
    mongo_container: str
    service: Optional[str] = None
    extra_args: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def env_suffix(self) -> str:
        return self.mode.suffix

    def compose_prefix(self) -> List[str]:
        """``docker compose`` invocation bound to this mode's files."""
        return ["docker", "compose", "-f", self.compose_file, "--env-file", self.env_file]


def split_extra_args(args: Optional[str]) -> Tuple[str, ...]:
    """Split an ``ARGS`` string into tokens the way a shell would."""
    if not args:
        return ()
    try:
        return tuple(shlex.split(args))
    except ValueError as e:
        raise ConfigurationError(f"Cannot parse extra arguments {args!r}: {str(e)}")


def resolve_context(
    settings: OrchestratorSettings,
    mode: Optional[str] = None,
    service: Optional[str] = None,
    extra_args: Optional[str] = None,
) -> DispatchContext:
    """
    Resolve the invocation options against the settings.

    Args:
        settings: Project settings
        mode: Mode name; development when omitted
        service: Default service for logs and shell
        extra_args: Extra flags for up, down and build

    Returns:
        DispatchContext: The resolved context
    """
    try:
        resolved_mode = Mode.parse(mode) if mode else Mode.DEVELOPMENT
    except ValueError as e:
        raise ConfigurationError(str(e))

    return DispatchContext(
        mode=resolved_mode,
        compose_file=settings.compose_file(resolved_mode),
        env_file=settings.env_file,
        mongo_container=settings.mongo_container(resolved_mode),
        service=service or None,
        extra_args=split_extra_args(extra_args),
    )
