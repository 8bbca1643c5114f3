"""Makefile generation: MakeInfo -> Makefile text."""

from cube_makefile.generator.formatters import (
    create_single_line_string_list,
    create_string_list,
    format_custom_rules,
    prefix_if_missing,
)
from cube_makefile.generator.makefile import create_makefile

__all__ = [
    "create_makefile",
    "create_single_line_string_list",
    "create_string_list",
    "format_custom_rules",
    "prefix_if_missing",
]
