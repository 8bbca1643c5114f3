from cube_makefile.models.build import BuildFiles, RequiredFileCheck
from cube_makefile.models.make_info import (
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
    "RequiredFileCheck",
    "ToolChain",
]
