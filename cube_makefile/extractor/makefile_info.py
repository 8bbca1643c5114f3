"""Whole-document extraction: Makefile text -> ExtractedMakefileInfo.

Fields are recovered independently through FIELD_RULES. Each rule lists the
variable names a field may be spelled with (CubeMX spelling first, then the
spelling of the generated Makefile), so both kinds of Makefile parse into the
same shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

import structlog

from cube_makefile.extractor.rules import (
    extract_list_info,
    extract_prefixed_tokens,
    extract_single_line_info,
    get_target_stm,
    remove_prefixes,
)
from cube_makefile.models.make_info import ExtractedMakefileInfo

log = structlog.get_logger("cube_makefile.extractor")

# Recipe line of the generated erase target: "... reset halt; stm32h7x mass_erase 0; ..."
_ERASE_TARGET_RE = re.compile(r"reset halt;\s+(\S+)\s+mass_erase")


class FieldKind(Enum):
    """How the values of a FieldRule are read."""

    SINGLE = "single"  # first single-line value among the names
    SET = "set"  # list entries, deduplicated and sorted
    PREFIXED = "prefixed"  # only whitespace tokens starting with the prefix
    FLAGS = "flags"  # whitespace tokens, order kept


@dataclass(frozen=True)
class FieldRule:
    """How one ExtractedMakefileInfo field is recovered.

    ``mixed_names`` are variables that mix references with options, such as
    CubeMX's LDFLAGS. Only their tokens starting with ``prefix`` are taken.
    """

    field: str
    names: tuple[str, ...]
    kind: FieldKind
    prefix: str = ""
    ordered: bool = False
    mixed_names: tuple[str, ...] = ()


FIELD_RULES: list[FieldRule] = [
    FieldRule("target", ("TARGET",), FieldKind.SINGLE),
    FieldRule("mcu", ("MCU", "MCU_FLAGS"), FieldKind.SINGLE),
    FieldRule("cpu", ("CPU",), FieldKind.SINGLE, prefix="-mcpu="),
    FieldRule("fpu", ("FPU",), FieldKind.SINGLE, prefix="-mfpu="),
    FieldRule("float_abi", ("FLOAT-ABI",), FieldKind.SINGLE, prefix="-mfloat-abi="),
    FieldRule("linker_script", ("LDSCRIPT", "LINKER_SCRIPT"), FieldKind.SINGLE, prefix="-T"),
    FieldRule("optimization", ("OPT", "OPTIMIZATION"), FieldKind.SINGLE),
    FieldRule("toolchain_prefix", ("ARM_PREFIX", "PREFIX"), FieldKind.SINGLE),
    FieldRule("arm_toolchain_path", ("ARM_GCC_PATH", "GCC_PATH"), FieldKind.SINGLE),
    FieldRule("c_sources", ("C_SOURCES",), FieldKind.SET),
    FieldRule("cxx_sources", ("CXX_SOURCES", "CPP_SOURCES"), FieldKind.SET),
    FieldRule("assembly_sources", ("ASM_SOURCES", "ASMM_SOURCES", "AS_SOURCES"), FieldKind.SET),
    FieldRule("c_includes", ("C_INCLUDES",), FieldKind.SET, prefix="-I"),
    FieldRule("c_defs", ("C_DEFS", "C_DEFINITIONS"), FieldKind.SET, prefix="-D"),
    FieldRule("cxx_defs", ("CXX_DEFS", "CXX_DEFINITIONS"), FieldKind.SET, prefix="-D"),
    FieldRule("as_defs", ("AS_DEFS", "AS_DEFINITIONS"), FieldKind.SET, prefix="-D"),
    FieldRule("libraries", ("LIBS", "LIBRARIES"), FieldKind.PREFIXED, prefix="-l", ordered=True),
    FieldRule(
        "library_directories", ("LIBDIR", "LIBRARY_DIRECTORIES"), FieldKind.PREFIXED, prefix="-L"
    ),
    FieldRule("c_flags", ("ADDITIONAL_C_FLAGS",), FieldKind.FLAGS),
    FieldRule("cxx_flags", ("ADDITIONAL_CXX_FLAGS",), FieldKind.FLAGS),
    FieldRule("assembly_flags", ("ADDITIONAL_AS_FLAGS",), FieldKind.FLAGS),
    FieldRule(
        "ld_flags",
        ("ADDITIONAL_LINKER_FLAGS",),
        FieldKind.FLAGS,
        prefix="-specs=",
        mixed_names=("LDFLAGS",),
    ),
]


def _strip_prefix(value: str, prefix: str) -> str:
    if prefix and value.startswith(prefix):
        return value[len(prefix):]
    return value


def _apply_rule(rule: FieldRule, makefile: str) -> str | list[str]:
    if rule.kind is FieldKind.SINGLE:
        for name in rule.names:
            value = extract_single_line_info(name, makefile)
            if value is not None:
                return _strip_prefix(value.strip("\"'"), rule.prefix)
        log.debug("field not found", field=rule.field, names=list(rule.names))
        return ""

    if rule.kind is FieldKind.PREFIXED:
        entries = remove_prefixes(
            extract_prefixed_tokens(makefile, rule.names, rule.prefix), rule.prefix
        )
    else:
        entries = []
        for name in rule.names:
            entries.extend(extract_list_info(name, makefile))
        if rule.kind is FieldKind.FLAGS:
            tokens = [token for entry in entries for token in entry.split()]
            for token in extract_prefixed_tokens(makefile, rule.mixed_names, rule.prefix):
                if token not in tokens:
                    tokens.append(token)
            return tokens
        entries = remove_prefixes(entries, rule.prefix) if rule.prefix else entries

    if rule.ordered:
        return entries
    return sorted(set(entries))


def extract_openocd_target(makefile: str, sources: list[str]) -> str:
    """Openocd target from a generated erase recipe, else inferred from file names."""
    match = _ERASE_TARGET_RE.search(makefile)
    if match:
        return match.group(1)
    return get_target_stm(sources)


def extract_makefile_info(makefile: str) -> ExtractedMakefileInfo:
    """Recover every known field from Makefile text. Never raises."""
    info = ExtractedMakefileInfo()
    for rule in FIELD_RULES:
        setattr(info, rule.field, _apply_rule(rule, makefile))

    info.openocd_target = extract_openocd_target(
        makefile, info.c_sources + info.assembly_sources
    )
    if not info.openocd_target:
        log.debug("openocd target could not be inferred", target=info.target)

    log.debug(
        "makefile info extracted",
        target=info.target,
        c_sources=len(info.c_sources),
        cxx_sources=len(info.cxx_sources),
        assembly_sources=len(info.assembly_sources),
        openocd_target=info.openocd_target,
    )
    return info
