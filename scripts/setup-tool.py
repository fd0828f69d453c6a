#!/usr/bin/env python3
"""Install (or reuse from the tool cache) the configured CLI tool.

Puts the tool's bin directory on PATH for later steps and writes the step
outputs `bin-path`, `version` and `cache-hit`.

Exit codes:
  0  tool available
  1  resolve/install/cache failed
  2  invalid tool definition
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from pkg.toolcache import actions
from pkg.toolcache.config import RunnerEnvironment, load_tool_spec
from pkg.toolcache.errors import ConfigError, ToolCacheError
from pkg.toolcache.installer import LATEST, ToolInstaller

DEFAULT_TOOL_CONFIG = Path(__file__).resolve().parent.parent / "defaults" / "tool.yml"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="setup-tool.py")
    parser.add_argument(
        "--version",
        default=actions.get_input("version", default=LATEST),
        help="exact version or 'latest' (default: INPUT_VERSION, else latest)",
    )
    parser.add_argument(
        "--tool-config",
        default=str(DEFAULT_TOOL_CONFIG),
        help="Path to the tool definition YAML.",
    )
    parser.add_argument(
        "--github-output",
        default="",
        help="Path to GITHUB_OUTPUT file (default: env GITHUB_OUTPUT).",
    )
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    """Main."""
    args = parse_args(argv)
    version = str(args.version).strip() or LATEST

    try:
        spec = load_tool_spec(Path(args.tool_config))
        installer = ToolInstaller(spec=spec, runner_env=RunnerEnvironment.from_env())
    except ConfigError as e:
        print(f"tool config error: {e}", file=sys.stderr)
        return 2

    try:
        installation = installer.ensure(version)
    except ToolCacheError as exc:
        actions.error(str(exc))
        return 1

    installer.add_to_path(installation.bin_dir, environ=os.environ)

    output_file = args.github_output or (
        str(installer.runner_env.output_file) if installer.runner_env.output_file else ""
    )
    if output_file:
        output_path = Path(output_file)
        actions.set_output(output_path, "bin-path", str(installation.bin_dir))
        actions.set_output(output_path, "version", installation.version)
        actions.set_output(output_path, "cache-hit", "true" if installation.cache_hit else "false")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
