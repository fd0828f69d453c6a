"""Typed loaders for the tool definition and the runner environment."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError

DEFAULT_TOOL_NAME = "firebase-tools"
DEFAULT_BIN_LAYOUT = "npm"
TOOL_CACHE_DIRNAME = "tool-cache"


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{ctx}: expected mapping")
    return value


def _require_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    if not s:
        raise ConfigError(f"{ctx}: must be non-empty")
    return s


def _optional_str(value: Any, ctx: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    return s or None


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text())
    except FileNotFoundError:
        raise ConfigError(f"missing config file: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e


@dataclass(frozen=True)
class ToolSpec:
    """Which package to install and how to find its executables."""
    name: str = DEFAULT_TOOL_NAME
    package: str = DEFAULT_TOOL_NAME
    bin_layout: str = DEFAULT_BIN_LAYOUT

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ToolSpec":
        """From dict."""
        cfg = _require_mapping(dict(raw), "tool")
        name = _require_str(cfg.get("name"), "tool.name")
        # The registry package defaults to the cache key.
        package = _optional_str(cfg.get("package"), "tool.package") or name
        layout = _optional_str(cfg.get("bin_layout"), "tool.bin_layout") or DEFAULT_BIN_LAYOUT
        return cls(name=name, package=package, bin_layout=layout)


def load_tool_spec(path: Path) -> ToolSpec:
    """Load tool spec."""
    raw = _load_yaml(path)
    cfg = _require_mapping(raw, "config")
    tool = cfg.get("tool")
    if tool is None:
        raise ConfigError("config.tool: missing required key")
    return ToolSpec.from_dict(_require_mapping(tool, "config.tool"))


@dataclass(frozen=True)
class RunnerEnvironment:
    """Runner-provided locations the installer reads and writes."""
    temp_dir: Path
    tool_cache_dir: Path
    path_file: Path | None = None
    output_file: Path | None = None
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RunnerEnvironment":
        """Build from RUNNER_* / GITHUB_* variables, falling back to the system temp dir."""
        env = os.environ if environ is None else environ
        temp_dir = Path(env.get("RUNNER_TEMP") or tempfile.gettempdir())
        tool_cache = env.get("RUNNER_TOOL_CACHE") or ""
        path_file = env.get("GITHUB_PATH") or ""
        output_file = env.get("GITHUB_OUTPUT") or ""
        return cls(
            temp_dir=temp_dir,
            tool_cache_dir=Path(tool_cache) if tool_cache else temp_dir / TOOL_CACHE_DIRNAME,
            path_file=Path(path_file) if path_file else None,
            output_file=Path(output_file) if output_file else None,
            debug=env.get("RUNNER_DEBUG") == "1",
        )
