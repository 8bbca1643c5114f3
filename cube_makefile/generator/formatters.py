"""String helpers that render MakeInfo fragments for Makefile assignments."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath, PureWindowsPath

from cube_makefile.models.make_info import CustomMakefileRule

_RULE_BANNER = "#######################################"


def create_string_list(entries: Iterable[str], prefix: str = "") -> str:
    """Render entries one per line, joined with Makefile line continuations.

    Entries are deduplicated and sorted so the output is stable. Every line,
    including the last, ends with a newline; empty input renders as "".
    """
    sorted_entries = sorted(set(entries))
    lines = [f"{prefix}{entry}" for entry in sorted_entries]
    if not lines:
        return ""
    return " \\\n".join(lines) + "\n"


def create_single_line_string_list(entries: Iterable[str], prefix: str = "") -> str:
    """Render entries deduplicated and sorted on one line, each followed by a space."""
    return "".join(f"{prefix}{entry} " for entry in sorted(set(entries)))


def prefix_if_missing(token: str | None, prefix: str) -> str:
    """Prepend ``prefix`` unless the token is empty or already carries it."""
    if not token:
        return ""
    if prefix in token:
        return token
    return f"{prefix}{token}"


def to_posix_path(path: str) -> str:
    """Convert a (possibly Windows) filesystem path to forward slashes."""
    if "\\" in path:
        return PureWindowsPath(path).as_posix()
    return PurePath(path).as_posix()


def create_gcc_path_output(arm_toolchain_path: str | None) -> str:
    """Assignment for ARM_GCC_PATH, or "" when the toolchain comes from PATH."""
    if not arm_toolchain_path or arm_toolchain_path == ".":
        return ""
    return f"ARM_GCC_PATH ?= {to_posix_path(arm_toolchain_path)}"


def format_custom_rule(rule: CustomMakefileRule) -> str:
    target_line = f"{rule.command}: {rule.depends_on}".rstrip()
    return "\n".join(
        [
            _RULE_BANNER,
            f"# {rule.command}",
            _RULE_BANNER,
            target_line,
            f"\t{rule.rule}",
        ]
    )


def format_custom_rules(rules: Iterable[CustomMakefileRule] | None) -> str:
    """Render custom targets as blank-line separated blocks, in input order."""
    if not rules:
        return ""
    return "\n\n".join(format_custom_rule(rule) for rule in rules)
