"""
Formatting utilities for the e-commerce compose dispatcher.
"""

import shlex
from datetime import datetime
from typing import List, Optional


BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def format_backup_timestamp(moment: datetime) -> str:
    """
    Format a moment as a backup identifier.

    Args:
        moment: Time of the backup

    Returns:
        str: Timestamp with second resolution, e.g. ``20240131_235959``
    """
    return moment.strftime(BACKUP_TIMESTAMP_FORMAT)


def backup_filename(tool: str, suffix: str, timestamp: str) -> str:
    """Name of a backup archive, e.g. ``mongodb_backup_dev_20240131_235959.archive``."""
    return f"{tool}_backup_{suffix}_{timestamp}.archive"


def format_command(command: List[str], cwd: Optional[str] = None) -> str:
    """Render a command line the way it would be typed in a shell."""
    line = " ".join(shlex.quote(part) for part in command)
    if cwd:
        line = f"cd {shlex.quote(cwd)} && {line}"
    return line


def format_probe_result(ok: bool) -> str:
    """Pass/fail indicator for a health probe."""
    return "[bold green]✓[/]" if ok else "[bold red]✗[/]"
