"""cube-makefile: generate STM32 Makefiles and parse CubeMX Makefiles back into build info."""

__version__ = "0.1.0"

from cube_makefile.extractor import (
    extract_libraries,
    extract_makefile_info,
    extract_multi_line_info,
    extract_single_line_info,
    get_target_stm,
    remove_prefixes,
)
from cube_makefile.generator import (
    create_makefile,
    create_single_line_string_list,
    create_string_list,
    prefix_if_missing,
)
from cube_makefile.models import (
    BuildFiles,
    CustomMakefileRule,
    ExtractedMakefileInfo,
    MakeInfo,
    ToolChain,
)

__all__ = [
    "BuildFiles",
    "CustomMakefileRule",
    "ExtractedMakefileInfo",
    "MakeInfo",
    "ToolChain",
    "create_makefile",
    "create_single_line_string_list",
    "create_string_list",
    "extract_libraries",
    "extract_makefile_info",
    "extract_multi_line_info",
    "extract_single_line_info",
    "get_target_stm",
    "prefix_if_missing",
    "remove_prefixes",
]
