"""Data models for the structured build description and its extracted counterpart."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass
class ToolChain:
    """Toolchain locations. Empty or "." means: resolve through PATH."""

    arm_toolchain_path: str = ""
    openocd_path: str = ""


@dataclass
class CustomMakefileRule:
    """Extra Makefile target spliced verbatim into the generated output."""

    command: str
    rule: str
    depends_on: str = ""


@dataclass
class MakeInfo:
    """Structured build description consumed by the Makefile generator.

    File and definition groups are sets in disguise: the generator dedupes and
    sorts them at render time. Flag groups are ordered and emitted as given.
    cpu/fpu/float_abi are stored bare (``cortex-m7``, not ``-mcpu=cortex-m7``).
    """

    target: str = ""
    cpu: str = ""
    fpu: str = ""
    float_abi: str = ""
    target_mcu: str = ""  # openocd target, e.g. "stm32h7x"
    ldscript: str = ""
    optimization: str = "-Og"

    c_sources: list[str] = field(default_factory=list)
    cxx_sources: list[str] = field(default_factory=list)
    asm_sources: list[str] = field(default_factory=list)
    c_includes: list[str] = field(default_factory=list)
    libs: list[str] = field(default_factory=list)  # without -l
    libdir: list[str] = field(default_factory=list)  # without -L

    c_defs: list[str] = field(default_factory=list)  # without -D
    cxx_defs: list[str] = field(default_factory=list)
    as_defs: list[str] = field(default_factory=list)

    c_flags: list[str] = field(default_factory=list)
    cxx_flags: list[str] = field(default_factory=list)
    assembly_flags: list[str] = field(default_factory=list)
    ld_flags: list[str] = field(default_factory=list)

    tools: ToolChain = field(default_factory=ToolChain)
    custom_makefile_rules: list[CustomMakefileRule] = field(default_factory=list)


# Collection fields of ExtractedMakefileInfo that behave as sets
_SET_FIELDS = (
    "c_sources",
    "cxx_sources",
    "assembly_sources",
    "c_includes",
    "c_defs",
    "cxx_defs",
    "as_defs",
    "library_directories",
)


@dataclass
class ExtractedMakefileInfo:
    """Fields recovered from an existing Makefile, prefixes already stripped."""

    target: str = ""
    mcu: str = ""  # raw MCU flag line, e.g. "$(CPU) -mthumb $(FPU) $(FLOAT-ABI)"
    cpu: str = ""
    fpu: str = ""
    float_abi: str = ""
    linker_script: str = ""
    openocd_target: str = ""
    optimization: str = ""
    toolchain_prefix: str = ""
    arm_toolchain_path: str = ""

    c_sources: list[str] = field(default_factory=list)
    cxx_sources: list[str] = field(default_factory=list)
    assembly_sources: list[str] = field(default_factory=list)
    c_includes: list[str] = field(default_factory=list)
    c_defs: list[str] = field(default_factory=list)
    cxx_defs: list[str] = field(default_factory=list)
    as_defs: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    library_directories: list[str] = field(default_factory=list)

    c_flags: list[str] = field(default_factory=list)
    cxx_flags: list[str] = field(default_factory=list)
    assembly_flags: list[str] = field(default_factory=list)
    ld_flags: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when nothing identifying a firmware build was recovered."""
        return not (
            self.target
            or self.cpu
            or self.c_sources
            or self.cxx_sources
            or self.assembly_sources
        )

    def to_make_info(self) -> MakeInfo:
        return MakeInfo(
            target=self.target,
            cpu=self.cpu,
            fpu=self.fpu,
            float_abi=self.float_abi,
            target_mcu=self.openocd_target,
            ldscript=self.linker_script,
            optimization=self.optimization or MakeInfo.optimization,
            c_sources=list(self.c_sources),
            cxx_sources=list(self.cxx_sources),
            asm_sources=list(self.assembly_sources),
            c_includes=list(self.c_includes),
            libs=list(self.libraries),
            libdir=list(self.library_directories),
            c_defs=list(self.c_defs),
            cxx_defs=list(self.cxx_defs),
            as_defs=list(self.as_defs),
            c_flags=list(self.c_flags),
            cxx_flags=list(self.cxx_flags),
            assembly_flags=list(self.assembly_flags),
            ld_flags=list(self.ld_flags),
            tools=ToolChain(arm_toolchain_path=self.arm_toolchain_path),
        )

    def diff(self, other: ExtractedMakefileInfo) -> dict[str, dict[str, Any]]:
        """Compare against ``other`` (the newer side).

        Returns ``{field: {"old": a, "new": b}}`` for changed scalars and
        ordered collections, and ``{field: {"removed": [...], "added": [...]}}``
        for set-like collections. Unchanged fields are omitted.
        """
        changes: dict[str, dict[str, Any]] = {}
        for f in fields(self):
            old = getattr(self, f.name)
            new = getattr(other, f.name)
            if f.name in _SET_FIELDS:
                removed = sorted(set(old) - set(new))
                added = sorted(set(new) - set(old))
                if removed or added:
                    changes[f.name] = {"removed": removed, "added": added}
            elif old != new:
                changes[f.name] = {"old": old, "new": new}
        return changes
