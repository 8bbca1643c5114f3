"""Makefile extraction: Makefile text -> ExtractedMakefileInfo."""

from cube_makefile.extractor.makefile_info import FIELD_RULES, FieldKind, FieldRule, extract_makefile_info
from cube_makefile.extractor.rules import (
    TARGET_PATTERNS,
    extract_libraries,
    extract_list_info,
    extract_multi_line_info,
    extract_single_line_info,
    get_target_stm,
    remove_prefixes,
)

__all__ = [
    "FIELD_RULES",
    "TARGET_PATTERNS",
    "FieldKind",
    "FieldRule",
    "extract_libraries",
    "extract_list_info",
    "extract_makefile_info",
    "extract_multi_line_info",
    "extract_single_line_info",
    "get_target_stm",
    "remove_prefixes",
]
