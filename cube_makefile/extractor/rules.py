"""Field-level extraction rules for Makefile text.

Each rule is a standalone function over the full text. Makefiles written by
CubeMX, edited by hand or generated by this package differ in spelling,
assignment operator and which optional groups they contain, so a missing
field is never an error: single-line lookups return ``None`` when the key is
absent, list lookups return ``[]``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

CONTINUATION_MARKER = "\\"

# GNU make assignment operators: =  :=  ::=  +=  ?=  !=
_ASSIGNMENT_OPERATOR = r"(?:::|:|\+|\?|!)?="

# Openocd family inference from CubeMX file naming, ordered by priority.
# Each entry: (pattern, format for the captured family). Extend in place.
TARGET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(?:^|/)(stm32[a-z0-9]+?)x+_hal_msp\.c$", re.IGNORECASE), "{}x"),
    (re.compile(r"(?:^|/)(stm32[a-z0-9]+?)x+_it\.c$", re.IGNORECASE), "{}x"),
    (re.compile(r"(?:^|/)system_(stm32[a-z0-9]+?)x+\.c$", re.IGNORECASE), "{}x"),
    (re.compile(r"(?:^|/)startup_(stm32(?:mp1|wb|wl|[a-z]\d))\w*\.s$", re.IGNORECASE), "{}x"),
]


def _assignment_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[ \t]*{re.escape(name)}[ \t]*{_ASSIGNMENT_OPERATOR}(.*)$",
        re.IGNORECASE,
    )


def _iter_assignments(name: str, makefile: str) -> Iterator[tuple[str, list[str] | None]]:
    """Yield ``(value, continuation_lines)`` for each assignment of ``name``.

    ``value`` is the raw right-hand side on the assignment line.
    ``continuation_lines`` is ``None`` when the line has no trailing marker;
    otherwise the trimmed following lines up to and including the first one
    without the marker.
    """
    pattern = _assignment_re(name)
    lines = makefile.splitlines()
    index = 0
    while index < len(lines):
        match = pattern.match(lines[index])
        index += 1
        if not match:
            continue
        value = match.group(1)
        if not value.rstrip().endswith(CONTINUATION_MARKER):
            yield value, None
            continue
        continued: list[str] = []
        while index < len(lines):
            line = lines[index].strip()
            index += 1
            if line.endswith(CONTINUATION_MARKER):
                continued.append(line[: -len(CONTINUATION_MARKER)].strip())
            else:
                continued.append(line)
                break
        yield value, continued


def extract_single_line_info(name: str, makefile: str) -> str | None:
    """Trimmed right-hand side of the first assignment of ``name``.

    Returns "" when the key is assigned nothing, and ``None`` when the key is
    never assigned.
    """
    for value, _ in _iter_assignments(name, makefile):
        return value.strip()
    return None


def extract_multi_line_info(name: str, makefile: str) -> list[str]:
    """Entries of every continued assignment of ``name``, one per line.

    Whatever follows the operator on the assignment line itself counts as an
    entry too. Assignments that are not continued contribute nothing.
    """
    entries: list[str] = []
    for value, continued in _iter_assignments(name, makefile):
        if continued is None:
            continue
        head = value.rstrip()[: -len(CONTINUATION_MARKER)].strip()
        if head:
            entries.append(head)
        entries.extend(entry for entry in continued if entry)
    return entries


def extract_list_info(name: str, makefile: str) -> list[str]:
    """Entries of ``name`` whether written on one line or continued.

    Single-line values are split on whitespace; continued values follow
    :func:`extract_multi_line_info`.
    """
    entries: list[str] = []
    for value, continued in _iter_assignments(name, makefile):
        if continued is None:
            entries.extend(value.split())
            continue
        head = value.rstrip()[: -len(CONTINUATION_MARKER)].strip()
        if head:
            entries.extend(head.split())
        entries.extend(entry for entry in continued if entry)
    return entries


def extract_prefixed_tokens(
    makefile: str,
    names: Iterable[str],
    prefix: str,
) -> list[str]:
    """Whitespace tokens of the ``names`` assignments that start with ``prefix``.

    Order is preserved; link order matters for libraries.
    """
    tokens: list[str] = []
    for name in names:
        for entry in extract_list_info(name, makefile):
            tokens.extend(token for token in entry.split() if token.startswith(prefix))
    return tokens


def extract_libraries(
    makefile: str,
    names: Iterable[str] = ("LIBS", "LIBRARIES"),
    prefix: str = "-l",
) -> list[str]:
    """Link flags (``-lfoo``) from the libraries assignments, in original order."""
    return extract_prefixed_tokens(makefile, names, prefix)


def remove_prefixes(entries: Iterable[str], prefix: str) -> list[str]:
    """Strip one leading ``prefix`` from each entry; others pass through."""
    return [entry[len(prefix):] if entry.startswith(prefix) else entry for entry in entries]


def get_target_stm(c_sources: Iterable[str]) -> str:
    """Best-guess openocd target family (e.g. ``stm32h7x``) from source file names.

    Returns "" when no file follows a known CubeMX naming convention.
    """
    files = list(c_sources)
    for pattern, fmt in TARGET_PATTERNS:
        for file_name in files:
            match = pattern.search(file_name.replace("\\", "/"))
            if match:
                return fmt.format(match.group(1).lower())
    return ""
