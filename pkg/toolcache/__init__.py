"""Resolve, install and cache a CLI tool on a GitHub Actions runner."""

from .config import RunnerEnvironment, ToolSpec, load_tool_spec
from .errors import CacheStoreError, ConfigError, InstallError, ResolutionError, ToolCacheError
from .installer import LATEST, ToolInstallation, ToolInstaller, get_tool_path, resolve_version
from .layout import NPM_BIN_LAYOUT, BinLayout, RelativeBinLayout, bin_layout_for
from .npm import NpmPackageManager, NpmRegistry, installed_version
from .store import ToolCache, cached_version, clean_version, host_arch, is_explicit_version

__all__ = [
    "BinLayout",
    "CacheStoreError",
    "ConfigError",
    "InstallError",
    "LATEST",
    "NPM_BIN_LAYOUT",
    "NpmPackageManager",
    "NpmRegistry",
    "RelativeBinLayout",
    "ResolutionError",
    "RunnerEnvironment",
    "ToolCache",
    "ToolCacheError",
    "ToolInstallation",
    "ToolInstaller",
    "ToolSpec",
    "bin_layout_for",
    "cached_version",
    "clean_version",
    "get_tool_path",
    "host_arch",
    "installed_version",
    "is_explicit_version",
    "load_tool_spec",
    "resolve_version",
]
