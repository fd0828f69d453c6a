"""npm registry query and package install, run through the npm CLI."""

from __future__ import annotations

import json
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .errors import InstallError, ResolutionError, describe_failure

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


def _npm_executable() -> str:
    # npm ships as npm.cmd on Windows runners.
    return shutil.which("npm") or "npm"


@dataclass
class NpmRegistry:
    """Answers "what is the current version of <package>"."""
    runner: CommandRunner = subprocess.run

    def latest_version(self, package: str) -> str:
        """Return the registry's current version for package, trimmed.

        Raises:
            ResolutionError: npm is missing, exited non-zero, or printed nothing.
        """
        cmd = [_npm_executable(), "view", package, "version"]
        try:
            result = self.runner(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as exc:
            raise ResolutionError(f"npm not found while resolving {package}: {exc}") from exc

        if result.returncode != 0:
            failure = subprocess.CalledProcessError(
                result.returncode, cmd, result.stdout, result.stderr
            )
            raise ResolutionError(describe_failure(failure)) from failure

        version = (result.stdout or "").strip()
        if not version:
            raise ResolutionError(f"`{' '.join(cmd)}` returned no version")
        return version


@dataclass
class NpmPackageManager:
    """Installs <package>@<version> into a working directory."""
    runner: CommandRunner = subprocess.run

    def install(self, package: str, version: str, install_dir: Path) -> str | None:
        """Run npm install with install_dir as cwd; output goes straight to the job log.

        Returns the version npm actually installed (it differs from version for
        ranges such as ^9), or None when package.json cannot be read.

        Raises:
            InstallError: npm is missing or exited non-zero.
        """
        cmd = [_npm_executable(), "install", f"{package}@{version}"]
        try:
            result = self.runner(cmd, cwd=str(install_dir), check=False)
        except FileNotFoundError as exc:
            raise InstallError(f"npm not found while installing {package}@{version}: {exc}") from exc

        if result.returncode != 0:
            failure = subprocess.CalledProcessError(
                result.returncode, cmd, result.stdout, result.stderr
            )
            raise InstallError(describe_failure(failure)) from failure
        return installed_version(install_dir, package)


def installed_version(install_dir: Path, package: str) -> str | None:
    """Version recorded in node_modules/<package>/package.json, if readable."""
    manifest = install_dir / "node_modules" / package / "package.json"
    try:
        payload = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    version = payload.get("version") if isinstance(payload, dict) else None
    return version.strip() if isinstance(version, str) and version.strip() else None
