"""Usage telemetry.

Commands record one usage event when they start. The event is sent from a
detached task: it never delays the command and its failures are only logged
at debug level.
"""

from __future__ import annotations

import platform
from typing import TYPE_CHECKING

from .shared.logging import get_logger
from .shared.tasks import DetachedTasks

if TYPE_CHECKING:
    from .client import RetoolClient

logger = get_logger(__name__)


def build_usage_event(command: str, version: str) -> dict[str, str]:
    """Build the usage event payload for ``command``."""
    return {
        "event": "cli_command",
        "command": command,
        "cliVersion": version,
        "python": platform.python_version(),
        "os": platform.system().lower(),
    }


def log_usage(
    client: RetoolClient,
    detached: DetachedTasks,
    command: str,
    version: str,
    enabled: bool = True,
) -> None:
    """Fire and forget a usage event.

    Args:
        client: Open Retool client
        detached: Task set that owns the background send
        command: Command name (e.g. "scaffold")
        version: CLI version
        enabled: Telemetry setting from config
    """
    if not enabled:
        logger.debug("telemetry_disabled", command=command)
        return
    detached.spawn(client.log_usage(build_usage_event(command, version)), name="telemetry")
