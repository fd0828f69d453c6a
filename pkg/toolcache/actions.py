"""GitHub Actions runner glue: workflow commands, PATH, inputs and outputs."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, MutableMapping
from uuid import uuid4


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def is_debug(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get("RUNNER_DEBUG") == "1"


def info(message: str) -> None:
    print(message)


def debug(message: str, *, enabled: bool | None = None) -> None:
    if enabled is None:
        enabled = is_debug()
    if enabled:
        print(f"::debug::{_escape_data(message)}")


def warning(message: str) -> None:
    print(f"::warning::{_escape_data(message)}", file=sys.stderr)


def error(message: str) -> None:
    print(f"::error::{_escape_data(message)}", file=sys.stderr)


def get_input(
    name: str,
    *,
    default: str = "",
    environ: Mapping[str, str] | None = None,
) -> str:
    """Read an action input the way the runner exports it (INPUT_<NAME>)."""
    env = os.environ if environ is None else environ
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = (env.get(key) or "").strip()
    return value or default


def add_path(
    directory: Path,
    *,
    environ: MutableMapping[str, str],
    path_file: Path | None = None,
) -> None:
    """Prepend directory to PATH in environ; persist it for later steps via GITHUB_PATH."""
    if path_file is not None:
        with path_file.open("a", encoding="utf-8") as fh:
            fh.write(f"{directory}\n")
    current = environ.get("PATH", "")
    environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)


def set_output(output_path: Path, key: str, value: str) -> None:
    """Append a step output using the heredoc form so any value is safe."""
    delimiter = f"TOOLCACHE_{key.upper().replace('-', '_')}_{uuid4().hex}"
    while delimiter in value:
        delimiter = f"TOOLCACHE_{key.upper().replace('-', '_')}_{uuid4().hex}"
    with output_path.open("a", encoding="utf-8") as fh:
        fh.write(f"{key}<<{delimiter}\n")
        fh.write(value)
        if not value.endswith("\n"):
            fh.write("\n")
        fh.write(f"{delimiter}\n")
