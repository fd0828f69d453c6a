"""Where each package manager puts the executable shims of an install."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ConfigError


class BinLayout(Protocol):
    def bin_dir(self, root: Path) -> Path:
        ...


@dataclass(frozen=True)
class RelativeBinLayout:
    """Executables live at a fixed path beneath the install root."""
    parts: tuple[str, ...]

    def bin_dir(self, root: Path) -> Path:
        return root.joinpath(*self.parts)


NPM_BIN_LAYOUT = RelativeBinLayout(("node_modules", ".bin"))

BIN_LAYOUTS: dict[str, BinLayout] = {
    "npm": NPM_BIN_LAYOUT,
}


def bin_layout_for(name: str) -> BinLayout:
    layout = BIN_LAYOUTS.get(name.strip().lower())
    if layout is None:
        raise ConfigError(f"unknown bin layout '{name}' (expected one of {sorted(BIN_LAYOUTS)})")
    return layout
