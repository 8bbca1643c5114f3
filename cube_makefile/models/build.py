"""Data models for build files found by scanning a workspace."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BuildFiles:
    """Scanned paths bucketed by role. Headers are not bucketed here."""

    c_sources: list[str] = field(default_factory=list)
    cxx_sources: list[str] = field(default_factory=list)
    assembly_sources: list[str] = field(default_factory=list)
    library_directories: list[str] = field(default_factory=list)

    def normalize(self) -> None:
        """Deduplicate and sort every bucket in place."""
        for bucket in (
            self.c_sources,
            self.cxx_sources,
            self.assembly_sources,
            self.library_directories,
        ):
            bucket[:] = sorted(set(bucket))


@dataclass
class RequiredFileCheck:
    """Presence check for a file a CubeMX project is expected to have."""

    file: str
    is_present: bool
    warning: str = ""
