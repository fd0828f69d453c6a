"""Failure types raised by the tool cache installer.

Nothing in the core catches these; the entry script maps them to workflow
commands and exit codes.
"""

from __future__ import annotations

import subprocess


class ToolCacheError(RuntimeError):
    """Base class for resolve/install/cache failures."""


class ResolutionError(ToolCacheError):
    """Registry query for the latest version failed."""


class InstallError(ToolCacheError):
    """Package manager exited non-zero while installing."""


class CacheStoreError(ToolCacheError):
    """Tool cache rejected a persist operation."""


class ConfigError(RuntimeError):
    """Tool definition or runner settings are invalid."""


def describe_failure(exc: subprocess.CalledProcessError) -> str:
    """Render a failed command the way the command itself reported it."""
    cmd = exc.cmd if isinstance(exc.cmd, str) else " ".join(str(part) for part in exc.cmd)
    message = f"`{cmd}` exited with status {exc.returncode}"
    stderr = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
    if stderr:
        message = f"{message}: {stderr}"
    return message
