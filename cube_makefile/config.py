"""Project configuration — the JSON file a Makefile is generated from.

The file is validated with pydantic; runtime settings (log level, toolchain
override) come from CUBE_MAKEFILE_* environment variables.
"""

from __future__ import annotations

import json
import os
from pathlib import Path, PurePosixPath, PureWindowsPath

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cube_makefile.exceptions import ConfigError
from cube_makefile.files import has_glob_magic
from cube_makefile.models.make_info import (
    CustomMakefileRule,
    ExtractedMakefileInfo,
    MakeInfo,
    ToolChain,
)

ENV_ARM_TOOLCHAIN_PATH = "CUBE_MAKEFILE_ARM_TOOLCHAIN_PATH"
ENV_OPENOCD_PATH = "CUBE_MAKEFILE_OPENOCD_PATH"


class CustomMakefileRuleSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str
    rule: str
    depends_on: str = ""


class ProjectConfig(BaseModel):
    """Schema of cube-makefile.json."""

    model_config = ConfigDict(extra="forbid")

    target: str
    cpu: str = ""
    fpu: str = ""
    float_abi: str = ""
    target_mcu: str = ""
    ldscript: str = ""
    optimization: str = "-Og"

    # Globs (or plain paths) relative to the project directory
    source_files: list[str] = ["Core/**/*.c", "Core/**/*.cpp", "Drivers/**/*.c", "*.s"]
    # Globs for header files; plain directory entries are used as include paths
    header_files: list[str] = ["Core/**/*.h", "Drivers/**/*.h"]

    c_definitions: list[str] = []
    cxx_definitions: list[str] = []
    as_definitions: list[str] = []

    c_flags: list[str] = []
    cxx_flags: list[str] = []
    assembly_flags: list[str] = []
    linker_flags: list[str] = []

    libraries: list[str] = []
    library_directories: list[str] = []

    custom_makefile_rules: list[CustomMakefileRuleSchema] = []

    openocd_interface: str = "stlink"
    arm_toolchain_path: str = ""
    openocd_path: str = ""

    @field_validator("target", "cpu", "fpu", "float_abi", "target_mcu", "ldscript", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("source_files", "header_files")
    @classmethod
    def _relative_globs(cls, v: list[str]) -> list[str]:
        for entry in v:
            if has_glob_magic(entry) and (
                PurePosixPath(entry).is_absolute() or PureWindowsPath(entry).is_absolute()
            ):
                raise ValueError(f"glob pattern must be relative to the project directory: {entry}")
        return v

    def to_make_info(self) -> MakeInfo:
        """MakeInfo from the configured fields only; scanned files are merged by the project layer."""
        return MakeInfo(
            target=self.target,
            cpu=self.cpu,
            fpu=self.fpu,
            float_abi=self.float_abi,
            target_mcu=self.target_mcu,
            ldscript=self.ldscript,
            optimization=self.optimization,
            libs=list(self.libraries),
            libdir=list(self.library_directories),
            c_defs=list(self.c_definitions),
            cxx_defs=list(self.cxx_definitions),
            as_defs=list(self.as_definitions),
            c_flags=list(self.c_flags),
            cxx_flags=list(self.cxx_flags),
            assembly_flags=list(self.assembly_flags),
            ld_flags=list(self.linker_flags),
            tools=ToolChain(
                arm_toolchain_path=self.arm_toolchain_path,
                openocd_path=self.openocd_path,
            ),
            custom_makefile_rules=[
                CustomMakefileRule(r.command, r.rule, r.depends_on)
                for r in self.custom_makefile_rules
            ],
        )

    @classmethod
    def from_extracted(cls, info: ExtractedMakefileInfo) -> ProjectConfig:
        """Configuration reproducing a parsed Makefile, with explicit file lists."""
        return cls(
            target=info.target,
            cpu=info.cpu,
            fpu=info.fpu,
            float_abi=info.float_abi,
            target_mcu=info.openocd_target,
            ldscript=info.linker_script,
            optimization=info.optimization or "-Og",
            source_files=info.c_sources + info.cxx_sources + info.assembly_sources,
            header_files=list(info.c_includes),
            c_definitions=list(info.c_defs),
            cxx_definitions=list(info.cxx_defs),
            as_definitions=list(info.as_defs),
            c_flags=list(info.c_flags),
            cxx_flags=list(info.cxx_flags),
            assembly_flags=list(info.assembly_flags),
            linker_flags=list(info.ld_flags),
            libraries=list(info.libraries),
            library_directories=list(info.library_directories),
            arm_toolchain_path=info.arm_toolchain_path,
        )


# Starter file written by `cube-makefile init-config`
PROJECT_CONFIG_TEMPLATE = {
    "target": "firmware",
    "cpu": "cortex-m4",
    "fpu": "fpv4-sp-d16",
    "float_abi": "hard",
    "target_mcu": "stm32f4x",
    "ldscript": "STM32F407VGTx_FLASH.ld",
    "optimization": "-Og",
    "source_files": ["Core/**/*.c", "Core/**/*.cpp", "Drivers/**/*.c", "*.s"],
    "header_files": ["Core/**/*.h", "Drivers/**/*.h"],
    "c_definitions": ["USE_HAL_DRIVER", "STM32F407xx"],
    "libraries": ["c", "m", "nosys"],
    "linker_flags": ["-specs=nano.specs"],
    "custom_makefile_rules": [],
    "openocd_interface": "stlink",
}


def load_project_config(path: str | Path) -> ProjectConfig:
    """Load and validate a project configuration file.

    Raises ConfigError on unreadable JSON or a schema violation.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid project configuration in {path}:\n{e}") from e


def toolchain_from_env() -> ToolChain:
    """Toolchain overrides from the environment (empty fields mean: no override)."""
    return ToolChain(
        arm_toolchain_path=os.environ.get(ENV_ARM_TOOLCHAIN_PATH, ""),
        openocd_path=os.environ.get(ENV_OPENOCD_PATH, ""),
    )

