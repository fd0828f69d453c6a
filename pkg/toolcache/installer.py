"""Resolve a tool version, then reuse or populate its tool cache entry.

    Start -> Resolving -> CacheHit -> Done
                       -> CacheMiss -> Installing -> Caching -> Done

Failures on any edge propagate to the caller unchanged. Nothing is retried,
and an install that failed is never handed to the cache.
"""

from __future__ import annotations

import os
import tempfile
import time
from dataclasses import InitVar, dataclass, field
from pathlib import Path
from typing import MutableMapping, Protocol

from . import actions
from .config import RunnerEnvironment, ToolSpec
from .layout import BinLayout, bin_layout_for
from .npm import NpmPackageManager, NpmRegistry
from .store import ToolCache, cached_version, is_explicit_version

LATEST = "latest"


class VersionSource(Protocol):
    def latest_version(self, package: str) -> str:
        ...


class PackageInstaller(Protocol):
    def install(self, package: str, version: str, install_dir: Path) -> str | None:
        ...


class CacheStore(Protocol):
    def find(self, tool: str, version: str) -> Path | None:
        ...

    def cache_dir(self, source: Path, tool: str, version: str) -> Path:
        ...


@dataclass(frozen=True)
class ToolInstallation:
    """Outcome of one resolve + cache lookup/install."""
    version: str
    root: Path
    bin_dir: Path
    cache_hit: bool


def resolve_version(specifier: str, *, package: str, registry: VersionSource) -> str:
    """Turn "latest" into a concrete version; anything else is returned as-is."""
    if specifier != LATEST:
        return specifier
    return registry.latest_version(package)


def make_install_dir(base: Path, tool: str, version: str) -> Path:
    """Fresh directory per install attempt, unique even for concurrent runs."""
    base.mkdir(parents=True, exist_ok=True)
    prefix = f"{tool}-{version}-{time.time_ns()}-"
    return Path(tempfile.mkdtemp(prefix=prefix, dir=base))


@dataclass
class ToolInstaller:
    spec: ToolSpec
    runner_env: RunnerEnvironment
    registry: VersionSource = field(default_factory=lambda: NpmRegistry())
    package_manager: PackageInstaller = field(default_factory=lambda: NpmPackageManager())
    cache: InitVar[CacheStore | None] = None
    layout: InitVar[BinLayout | None] = None
    store: CacheStore = field(init=False)
    bin_layout: BinLayout = field(init=False)

    def __post_init__(self, cache: CacheStore | None, layout: BinLayout | None) -> None:
        self.store = cache if cache is not None else ToolCache(self.runner_env.tool_cache_dir)
        self.bin_layout = layout if layout is not None else bin_layout_for(self.spec.bin_layout)

    def resolve(self, specifier: str) -> str:
        return resolve_version(specifier, package=self.spec.package, registry=self.registry)

    def ensure(self, specifier: str = LATEST) -> ToolInstallation:
        """Resolve the version and make sure it exists in the tool cache.

        Ranges such as ^9 hit any cached version they match; on a miss the
        install is cached under the concrete version npm picked.
        """
        tool = self.spec.name
        version = self.resolve(specifier)
        actions.info(f"{tool} version: {version}")

        root = self.store.find(tool, version)
        cache_hit = root is not None
        if root is not None:
            version = cached_version(root) or version
            actions.info(f"Found cached {tool}@{version}")
        else:
            actions.info(f"Installing {tool}@{version}...")
            install_dir = make_install_dir(self.runner_env.temp_dir, tool, version)
            actions.debug(f"Install directory: {install_dir}", enabled=self.runner_env.debug)
            installed = self.package_manager.install(self.spec.package, version, install_dir)
            if not is_explicit_version(version):
                version = installed or version

            if is_explicit_version(version):
                root = self.store.cache_dir(install_dir, tool, version)
                actions.info(f"Cached {tool}@{version} to {root}")
            else:
                actions.warning(
                    f"Could not determine the installed version of {tool}@{version}; "
                    "using it without caching"
                )
                root = install_dir

        return ToolInstallation(
            version=version,
            root=root,
            bin_dir=self.bin_layout.bin_dir(root),
            cache_hit=cache_hit,
        )

    def get_tool_path(
        self,
        specifier: str = LATEST,
        *,
        environ: MutableMapping[str, str] | None = None,
    ) -> Path:
        """Ensure the tool is cached, put its bin directory on PATH and return it.

        environ defaults to os.environ; pass a dict to keep the PATH change local.
        """
        installation = self.ensure(specifier)
        self.add_to_path(installation.bin_dir, environ=environ)
        return installation.bin_dir

    def add_to_path(
        self,
        bin_dir: Path,
        *,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        env = os.environ if environ is None else environ
        actions.add_path(bin_dir, environ=env, path_file=self.runner_env.path_file)
        actions.info(f"Added {bin_dir} to PATH")


def get_tool_path(
    specifier: str = LATEST,
    *,
    spec: ToolSpec | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> Path:
    """Install-or-reuse the tool described by the given ToolSpec (firebase-tools by default)."""
    env = os.environ if environ is None else environ
    installer = ToolInstaller(spec=spec or ToolSpec(), runner_env=RunnerEnvironment.from_env(env))
    return installer.get_tool_path(specifier, environ=env)
