"""Makefile generator — renders a MakeInfo into the STM32Make.make text.

The output is a pure function of its input: file and definition groups are
sorted and deduplicated, flag groups keep their order, and nothing in the
template depends on time or environment. Downstream tooling diffs the result,
so identical input must give byte-identical output.
"""

from __future__ import annotations

import structlog

from cube_makefile.definitions import (
    DEFAULT_ARM_PREFIX,
    MAKEFILE_NAME,
    OPENOCD_CONFIG_NAME,
    STM32_ENVIRONMENT_FILE_NAME,
)
from cube_makefile.generator.formatters import (
    create_gcc_path_output,
    create_string_list,
    format_custom_rules,
    prefix_if_missing,
)
from cube_makefile.models.make_info import MakeInfo

log = structlog.get_logger("cube_makefile.generator")

_CUSTOM_RULES_BANNER = """\
#######################################
# custom makefile rules
#######################################

"""

# Placeholders use str.format; the Makefile text itself never needs braces.
_MAKEFILE_TEMPLATE = """\
##########################################################################################################################
# File automatically-generated by cube-makefile
##########################################################################################################################

# ------------------------------------------------
# Makefile generated from the cube-makefile project configuration
# WARNING: This file is overwritten when the project settings change
# This Makefile can be used for CI/CD purposes. To use it, set up an environment
# file with the following name: {env_file}.
# That file is sourced at the start of this Makefile and is used to set
# compiler paths and other tooling paths.
# Most variables can also be overwritten when invoking make
# e.g to change the optimization flags
# make -j 16 -f {makefile_name} DEBUG=0 OPTIMIZATION=-Os
# ------------------------------------------------

######################################
# Environment Variables
######################################
# Imports the environment file in which the compiler and other tooling is set
# for the build machine.
# This can also be used to overwrite some makefile variables
-include {env_file}

######################################
# Target
######################################
# This is the name of the embedded target which will be build
# The final file name will also have debug or release appended to it.
TARGET ?= {target}

#######################################
# Build directories
#######################################
# Build path can be overwritten when calling make or setting the environment variable
# in {env_file}

BUILD_DIRECTORY ?= build


######################################
# Optimization
######################################
# Optimization is switched based upon the DEBUG variable. If set to 1
# it will be build in debug mode with the Og optimization flag (optimized for debugging).
# If set to 0 (false) then the OPTIMIZATION variable is used.
# It can be overwritten by calling make with the OPTIMIZATION variable e.g.:
# make -f {makefile_name} -j 16  OPTIMIZATION=-Os

# variable which determines if it is a debug build
DEBUG ?= 1

# optimization used for release builds
OPTIMIZATION ?= {optimization}

ifeq ($(DEBUG),1)
\t# Sets debugging optimization -Og and the debug information output
\tOPTIMIZATION_FLAGS += -Og -g -gdwarf -ggdb
\tBUILD_MODE = debug
else
\tOPTIMIZATION_FLAGS += $(OPTIMIZATION)
\tBUILD_MODE = release
endif

RELEASE_DIRECTORY ?= $(BUILD_DIRECTORY)/$(BUILD_MODE)

######################################
# Definitions
######################################

# C definitions
C_DEFINITIONS = \\
{c_defs}
# C++ definitions
CXX_DEFINITIONS = \\
{cxx_defs}
# Assembly definitions
AS_DEFINITIONS = \\
{as_defs}
######################################
# Source Files
######################################

# C sources
C_SOURCES += \\
{c_sources}
# C++ sources
CXX_SOURCES += \\
{cxx_sources}
# ASM sources
AS_SOURCES += \\
{asm_sources}
######################################
# Include Directories
######################################
# AS includes
AS_INCLUDES = \\

# C includes
C_INCLUDES = \\
{c_includes}
######################################
# Target System Flags
######################################
# The specific flags for the target system
# This sets things like hardware floating point and
# which version a specific Cortex-M processor is.

# cpu
CPU = {cpu}

# fpu
FPU = {fpu}

# float-abi
FLOAT-ABI = {float_abi}

# mcu
MCU_FLAGS = $(CPU) -mthumb $(FPU) $(FLOAT-ABI)


######################################
# C and CPP Flags
######################################

# additional flags provided by the project configuration file
ADDITIONAL_C_FLAGS :={c_flags}
ADDITIONAL_CXX_FLAGS :={cxx_flags}
ADDITIONAL_AS_FLAGS :={assembly_flags}

# Provides dependency information about header files
# This is used to recompile when a source file depends on
# information from a header file
DEPENDENCY_FLAGS = -MMD -MP -MF"$(@:%.o=%.d)"

# Output a list file for the compiled source file.
# This is a representative of the source code in assembly
ASSEMBLER_LIST_OUTPUT_FLAG = -Wa,-a,-ad,-alms=$(@:%.o=%.lst)

# Combining the compilation flags with language specific flags and MCU specific flags
C_FLAGS = \\
\t$(MCU_FLAGS) \\
\t$(C_DEFINITIONS) \\
\t$(C_INCLUDES) \\
\t$(OPTIMIZATION_FLAGS) \\
\t$(DEPENDENCY_FLAGS) \\
\t$(ADDITIONAL_C_FLAGS) \\
\t$(ASSEMBLER_LIST_OUTPUT_FLAG)

CXX_FLAGS = \\
\t$(MCU_FLAGS) \\
\t$(CXX_DEFINITIONS) \\
\t$(C_INCLUDES) \\
\t$(OPTIMIZATION_FLAGS) \\
\t$(DEPENDENCY_FLAGS) \\
\t$(ADDITIONAL_CXX_FLAGS) \\
\t$(ASSEMBLER_LIST_OUTPUT_FLAG)

AS_FLAGS = $(C_FLAGS) $(AS_DEFINITIONS) $(AS_INCLUDES) $(ADDITIONAL_AS_FLAGS)

######################################
# Linker Flags
######################################
# linker script. This script will determine where certain sections will
# be place in memory.
LINKER_SCRIPT := {ldscript}

# libraries
LIBRARIES := \\
{libs}
# library directories
LIBRARY_DIRECTORIES := \\
{libdir}
# Additional linker flags from the project configuration file
# can be overwritten in the environment file
ADDITIONAL_LINKER_FLAGS ?={ld_flags}

# Flags for outputting a map file
# -Wl,-Map= flag will output the map file to the specified file
# --cref will generate a cross reference table in the map file
LINKER_MAP_FLAGS ?= -Wl,-Map=$(FINAL_TARGET_NAME).map,--cref

# Flags for cleaning up code at link time
# --gc-sections will eliminate dead code e.g. unused functions
LINKER_CLEAN_UP_FLAGS ?= -Wl,--gc-sections

LINKER_FLAGS = \\
\t$(MCU_FLAGS) \\
\t$(LINKER_SCRIPT) \\
\t$(LIBRARY_DIRECTORIES) \\
\t$(LIBRARIES) \\
\t$(ADDITIONAL_LINKER_FLAGS) \\
\t$(LINKER_MAP_FLAGS) \\
\t$(LINKER_CLEAN_UP_FLAGS)

#######################################
# Tools
#######################################
ARM_PREFIX ?= {arm_prefix}
# The gcc compiler bin path can be defined in the make command via ARM_GCC_PATH variable (e.g.: make ARM_GCC_PATH=xxx)
# or in the environment file: {env_file}.
# When it is not defined the tools are resolved through the PATH environment variable.
{gcc_path}
ifdef ARM_GCC_PATH
\tCC = "$(ARM_GCC_PATH)/$(ARM_PREFIX)gcc"
\tCXX = "$(ARM_GCC_PATH)/$(ARM_PREFIX)g++"
\tAS = "$(ARM_GCC_PATH)/$(ARM_PREFIX)gcc" -x assembler-with-cpp
\tCP = "$(ARM_GCC_PATH)/$(ARM_PREFIX)objcopy"
\tSZ = "$(ARM_GCC_PATH)/$(ARM_PREFIX)size"
else
\tCC = $(ARM_PREFIX)gcc
\tCXX = $(ARM_PREFIX)g++
\tAS = $(ARM_PREFIX)gcc -x assembler-with-cpp
\tCP = $(ARM_PREFIX)objcopy
\tSZ = $(ARM_PREFIX)size
endif

HEX = $(CP) -O ihex
BIN = $(CP) -O binary -S

# Flash and debug tools
OPENOCD ?= {openocd}

REMOVE_DIRECTORY_COMMAND = rm -fR
MKDIR_COMMAND = mkdir
ifeq ($(OS),Windows_NT)
\tREMOVE_DIRECTORY_COMMAND = cmd /c rd /s /q
else
\tMKDIR_COMMAND += -p
endif

#######################################
# Build rules
#######################################

# Create object list
OBJECTS = $(addprefix $(RELEASE_DIRECTORY)/,$(addsuffix .o,$(basename $(C_SOURCES))))
# objects for the different C++ file extensions
OBJECTS += $(addprefix $(RELEASE_DIRECTORY)/,$(addsuffix .o,$(basename $(CXX_SOURCES))))
# Objects for assembly code
OBJECTS += $(addprefix $(RELEASE_DIRECTORY)/,$(addsuffix .o,$(basename $(AS_SOURCES))))

# Dependency files
DEPENDENCY_FILES = $(OBJECTS:.o=.d)

# the tree of folders which needs to be present based on the object files
BUILD_TREE = $(sort $(dir $(OBJECTS)))

FINAL_TARGET_NAME = $(RELEASE_DIRECTORY)/$(TARGET)-$(BUILD_MODE)

#######################################
# All
#######################################
# default action: build all
.PHONY: all flash erase clean
all: $(FINAL_TARGET_NAME).elf $(FINAL_TARGET_NAME).hex $(FINAL_TARGET_NAME).bin

#######################################
# Build directories
#######################################
# Makes the build directory
$(BUILD_DIRECTORY):
\t$(MKDIR_COMMAND) $@

# Makes the release folder
$(RELEASE_DIRECTORY): | $(BUILD_DIRECTORY)
\t$(MKDIR_COMMAND) $@

$(BUILD_TREE):
\t$(MKDIR_COMMAND) $@

#######################################
# Build Firmware
#######################################
$(FINAL_TARGET_NAME).elf: $(OBJECTS) {makefile_name} | $(RELEASE_DIRECTORY)
\t$(CC) $(OBJECTS) $(LINKER_FLAGS) -o $@
\t$(SZ) $@

$(FINAL_TARGET_NAME).hex: $(FINAL_TARGET_NAME).elf
\t$(HEX) $< $@

$(FINAL_TARGET_NAME).bin: $(FINAL_TARGET_NAME).elf
\t$(BIN) $< $@

#######################################
# Object rules
#######################################
# c files
$(RELEASE_DIRECTORY)/%.o: %.c {makefile_name} | $(BUILD_TREE)
\t$(CC) -c $(C_FLAGS) $< -o $@

# cpp files
$(RELEASE_DIRECTORY)/%.o: %.cpp {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.cxx {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.cc {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.cp {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.CPP {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.c++ {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.C++ {makefile_name} | $(BUILD_TREE)
\t$(CXX) -c $(CXX_FLAGS) $< -o $@

# assembly files
$(RELEASE_DIRECTORY)/%.o: %.s {makefile_name} | $(BUILD_TREE)
\t$(AS) -c $(AS_FLAGS) $< -o $@
$(RELEASE_DIRECTORY)/%.o: %.S {makefile_name} | $(BUILD_TREE)
\t$(AS) -c $(AS_FLAGS) $< -o $@

#######################################
# flash
#######################################
flash: $(FINAL_TARGET_NAME).elf
\t$(OPENOCD) -f ./{openocd_config} -c "program $(FINAL_TARGET_NAME).elf verify reset exit"

#######################################
# erase
#######################################
erase: $(FINAL_TARGET_NAME).elf
\t$(OPENOCD) -f ./{openocd_config} -c "init; reset halt; {target_mcu} mass_erase 0; exit"

#######################################
# clean up
#######################################
clean:
\t$(REMOVE_DIRECTORY_COMMAND) $(BUILD_DIRECTORY)

{custom_rules}#######################################
# dependencies
#######################################
-include $(DEPENDENCY_FILES)

# *** EOF ***
"""


def _flag_value(flags: list[str]) -> str:
    """Space-joined flags with a leading space, or "" so no trailing blank remains."""
    if not flags:
        return ""
    return " " + " ".join(flags)


def _custom_rules_section(make_info: MakeInfo) -> str:
    rules = format_custom_rules(make_info.custom_makefile_rules)
    if not rules:
        return ""
    return f"{_CUSTOM_RULES_BANNER}{rules}\n\n"


def create_makefile(make_info: MakeInfo, makefile_name: str = MAKEFILE_NAME) -> str:
    """Render the complete Makefile text for ``make_info``.

    ``makefile_name`` is the name the file is written under. The object and
    ``.elf`` rules list it as a prerequisite.
    """
    log.debug(
        "rendering makefile",
        target=make_info.target,
        c_sources=len(make_info.c_sources),
        cxx_sources=len(make_info.cxx_sources),
        asm_sources=len(make_info.asm_sources),
    )
    gcc_path = create_gcc_path_output(make_info.tools.arm_toolchain_path)
    return _MAKEFILE_TEMPLATE.format(
        env_file=STM32_ENVIRONMENT_FILE_NAME,
        makefile_name=makefile_name,
        openocd_config=OPENOCD_CONFIG_NAME,
        target=make_info.target,
        optimization=make_info.optimization,
        c_defs=create_string_list(make_info.c_defs, "-D"),
        cxx_defs=create_string_list(make_info.cxx_defs, "-D"),
        as_defs=create_string_list(make_info.as_defs, "-D"),
        c_sources=create_string_list(make_info.c_sources),
        cxx_sources=create_string_list(make_info.cxx_sources),
        asm_sources=create_string_list(make_info.asm_sources),
        c_includes=create_string_list(make_info.c_includes, "-I"),
        cpu=prefix_if_missing(make_info.cpu, "-mcpu="),
        fpu=prefix_if_missing(make_info.fpu, "-mfpu="),
        float_abi=prefix_if_missing(make_info.float_abi, "-mfloat-abi="),
        c_flags=_flag_value(make_info.c_flags),
        cxx_flags=_flag_value(make_info.cxx_flags),
        assembly_flags=_flag_value(make_info.assembly_flags),
        ldscript=f"-T{make_info.ldscript}" if make_info.ldscript else "",
        libs=create_string_list(make_info.libs, "-l"),
        libdir=create_string_list(make_info.libdir, "-L"),
        ld_flags=_flag_value(make_info.ld_flags),
        arm_prefix=DEFAULT_ARM_PREFIX,
        gcc_path=gcc_path,
        openocd=make_info.tools.openocd_path or "openocd",
        target_mcu=make_info.target_mcu,
        custom_rules=_custom_rules_section(make_info),
    )
