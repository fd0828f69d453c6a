"""Runner tool cache: <root>/<tool>/<version>/<arch> with a .complete marker.

Entries are written once per (tool, version, arch) and read by later steps or
jobs on the same runner. An entry whose marker is missing was interrupted
mid-copy and is treated as absent.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

import semantic_version

from .errors import CacheStoreError

# platform.machine() -> Node's os.arch() naming, which the hosted cache uses.
_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "x32",
    "i686": "x32",
    "x86": "x32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
}


def host_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine or "x64")


def clean_version(version: str) -> str:
    """Strip whitespace and a leading 'v' or '=' so v9.1.0 and 9.1.0 share an entry."""
    cleaned = version.strip()
    while cleaned[:1] in ("v", "="):
        cleaned = cleaned[1:].lstrip()
    return cleaned


def is_explicit_version(version: str) -> bool:
    return semantic_version.validate(clean_version(version))


def _npm_range(version: str) -> semantic_version.NpmSpec | None:
    try:
        return semantic_version.NpmSpec(version.strip())
    except ValueError:
        return None


def _marker_for(entry: Path) -> Path:
    return entry.with_name(f"{entry.name}.complete")


def cached_version(entry: Path) -> str | None:
    """Exact version of an entry laid out as <root>/<tool>/<version>/<arch>."""
    name = entry.parent.name
    return name if is_explicit_version(name) else None


@dataclass(frozen=True)
class ToolCache:
    root: Path

    def entry_dir(self, tool: str, version: str, arch: str | None = None) -> Path:
        cleaned = clean_version(version)
        if not cleaned:
            raise CacheStoreError(f"version {version!r} is empty once cleaned")
        return self.root / tool / cleaned / (arch or host_arch())

    def find_all_versions(self, tool: str, arch: str | None = None) -> list[str]:
        """Completed exact versions cached for (tool, arch), oldest first."""
        tool_dir = self.root / tool
        if not tool_dir.is_dir():
            return []
        arch = arch or host_arch()
        versions = []
        for child in tool_dir.iterdir():
            entry = child / arch
            if is_explicit_version(child.name) and entry.is_dir() and _marker_for(entry).is_file():
                versions.append(semantic_version.Version(child.name))
        return [str(v) for v in sorted(versions)]

    def find(self, tool: str, version: str, arch: str | None = None) -> Path | None:
        """Return the cached directory for (tool, version, arch), or None on a miss.

        A range such as ^9 or 9.x resolves to the highest completed entry it matches.
        """
        if not tool:
            raise ValueError("tool name must be non-empty")
        if not version:
            raise ValueError("version must be non-empty")

        if not is_explicit_version(version):
            spec = _npm_range(version)
            if spec is None:
                return None
            best = spec.select(semantic_version.Version(v) for v in self.find_all_versions(tool, arch))
            if best is None:
                return None
            version = str(best)

        entry = self.entry_dir(tool, version, arch)
        if entry.is_dir() and _marker_for(entry).is_file():
            return entry
        return None

    def cache_dir(self, source: Path, tool: str, version: str, arch: str | None = None) -> Path:
        """Copy source into the cache and return the canonical entry directory.

        Raises:
            CacheStoreError: source is not a directory, version is not exact, or the copy failed.
        """
        if not source.is_dir():
            raise CacheStoreError(f"source directory not found: {source}")
        if not is_explicit_version(version):
            # A range key could never be found again; only concrete versions are stored.
            raise CacheStoreError(f"refusing to cache {tool}@{version!r}: not an exact version")

        entry = self.entry_dir(tool, version, arch)
        marker = _marker_for(entry)
        try:
            if entry.exists():
                shutil.rmtree(entry)
            marker.unlink(missing_ok=True)
            entry.parent.mkdir(parents=True, exist_ok=True)
            # npm's .bin shims are relative symlinks; copying their targets would break them.
            shutil.copytree(source, entry, symlinks=True)
            marker.write_text("", encoding="utf-8")
        except OSError as exc:
            raise CacheStoreError(f"failed to cache {tool}@{version} into {entry}: {exc}") from exc
        return entry
