"""Shared pytest fixtures for cube-makefile tests."""

from pathlib import Path

import pytest

from cube_makefile.models.make_info import CustomMakefileRule, MakeInfo, ToolChain

# Makefile as written by STM32CubeMX for an STM32H743 board (trimmed build rules).
# C_DEFS repeats its entries, as older CubeMX releases do.
CUBEMX_MAKEFILE = r"""##########################################################################################################################
# File automatically-generated by tool: [projectgenerator] version: [3.10.0-B14] date: [Thu Oct 29 12:00:00 CET 2020]
##########################################################################################################################

# ------------------------------------------------
# Generic Makefile (based on gcc)
# ------------------------------------------------

######################################
# target
######################################
TARGET = test_project


######################################
# building variables
######################################
# debug build?
DEBUG = 1
# optimization
OPT = -Og


#######################################
# paths
#######################################
# Build path
BUILD_DIR = build

######################################
# source
######################################
# C sources
C_SOURCES =  \
Core/Src/main.c \
Core/Src/stm32h7xx_it.c \
Core/Src/stm32h7xx_hal_msp.c \
Drivers/STM32H7xx_HAL_Driver/Src/stm32h7xx_hal_cortex.c \
Drivers/STM32H7xx_HAL_Driver/Src/stm32h7xx_hal.c \
Core/Src/system_stm32h7xx.c

# ASM sources
ASM_SOURCES =  \
startup_stm32h743xx.s


#######################################
# binaries
#######################################
PREFIX = arm-none-eabi-
# The gcc compiler bin path can be either defined in make command via GCC_PATH variable (> make GCC_PATH=xxx)
# either it can be added to the PATH environment variable.
ifdef GCC_PATH
CC = $(GCC_PATH)/$(PREFIX)gcc
AS = $(GCC_PATH)/$(PREFIX)gcc -x assembler-with-cpp
CP = $(GCC_PATH)/$(PREFIX)objcopy
SZ = $(GCC_PATH)/$(PREFIX)size
else
CC = $(PREFIX)gcc
AS = $(PREFIX)gcc -x assembler-with-cpp
CP = $(PREFIX)objcopy
SZ = $(PREFIX)size
endif
HEX = $(CP) -O ihex
BIN = $(CP) -O binary -S

#######################################
# CFLAGS
#######################################
# cpu
CPU = -mcpu=cortex-m7

# fpu
FPU = -mfpu=fpv5-d16

# float-abi
FLOAT-ABI = -mfloat-abi=hard

# mcu
MCU = $(CPU) -mthumb $(FPU) $(FLOAT-ABI)

# macros for gcc
# AS defines
AS_DEFS =

# C defines
C_DEFS =  \
-DUSE_HAL_DRIVER \
-DSTM32H743xx \
-DUSE_HAL_DRIVER \
-DSTM32H743xx


# AS includes
AS_INCLUDES =

# C includes
C_INCLUDES =  \
-ICore/Inc \
-IDrivers/STM32H7xx_HAL_Driver/Inc \
-IDrivers/STM32H7xx_HAL_Driver/Inc/Legacy \
-IDrivers/CMSIS/Device/ST/STM32H7xx/Include \
-IDrivers/CMSIS/Include


# compile gcc flags
ASFLAGS = $(MCU) $(AS_DEFS) $(AS_INCLUDES) $(OPT) -Wall -fdata-sections -ffunction-sections

CFLAGS = $(MCU) $(C_DEFS) $(C_INCLUDES) $(OPT) -Wall -fdata-sections -ffunction-sections

ifeq ($(DEBUG), 1)
CFLAGS += -g -gdwarf-2
endif


# Generate dependency information
CFLAGS += -MMD -MP -MF"$(@:%.o=%.d)"


#######################################
# LDFLAGS
#######################################
# link script
LDSCRIPT = STM32H743ZITx_FLASH.ld

# libraries
LIBS = -lc -lm -lnosys
LIBDIR =
LDFLAGS = $(MCU) -specs=nano.specs -T$(LDSCRIPT) $(LIBDIR) $(LIBS) -Wl,-Map=$(BUILD_DIR)/$(TARGET).map,--cref -Wl,--gc-sections

# default action: build all
all: $(BUILD_DIR)/$(TARGET).elf $(BUILD_DIR)/$(TARGET).hex $(BUILD_DIR)/$(TARGET).bin

#######################################
# clean up
#######################################
clean:
	-rm -fR $(BUILD_DIR)

#######################################
# dependencies
#######################################
-include $(wildcard $(BUILD_DIR)/*.d)

# *** EOF ***
"""

CUBEMX_C_SOURCES = [
    "Core/Src/main.c",
    "Core/Src/stm32h7xx_it.c",
    "Core/Src/stm32h7xx_hal_msp.c",
    "Drivers/STM32H7xx_HAL_Driver/Src/stm32h7xx_hal_cortex.c",
    "Drivers/STM32H7xx_HAL_Driver/Src/stm32h7xx_hal.c",
    "Core/Src/system_stm32h7xx.c",
]

CUBEMX_INCLUDES = [
    "Core/Inc",
    "Drivers/STM32H7xx_HAL_Driver/Inc",
    "Drivers/STM32H7xx_HAL_Driver/Inc/Legacy",
    "Drivers/CMSIS/Device/ST/STM32H7xx/Include",
    "Drivers/CMSIS/Include",
]


@pytest.fixture
def cubemx_makefile() -> str:
    return CUBEMX_MAKEFILE


@pytest.fixture
def cubemx_c_sources() -> list[str]:
    return list(CUBEMX_C_SOURCES)


@pytest.fixture
def cubemx_includes() -> list[str]:
    return list(CUBEMX_INCLUDES)


@pytest.fixture
def make_info() -> MakeInfo:
    return MakeInfo(
        target="blinky",
        cpu="cortex-m7",
        fpu="fpv5-d16",
        float_abi="hard",
        target_mcu="stm32h7x",
        ldscript="STM32H743ZITx_FLASH.ld",
        optimization="-Os",
        c_sources=["Core/Src/main.c", "Core/Src/stm32h7xx_it.c", "Core/Src/main.c"],
        cxx_sources=["Core/Src/app.cpp"],
        asm_sources=["startup_stm32h743xx.s"],
        c_includes=["Core/Inc", "Drivers/CMSIS/Include"],
        libs=["m", "c", "nosys"],
        libdir=["lib/dsp"],
        c_defs=["USE_HAL_DRIVER", "STM32H743xx"],
        cxx_defs=["USE_HAL_DRIVER"],
        as_defs=["DEBUG"],
        c_flags=["-Wall", "-fdata-sections", "-ffunction-sections"],
        cxx_flags=["-fno-rtti", "-fno-exceptions"],
        assembly_flags=[],
        ld_flags=["-specs=nano.specs"],
        tools=ToolChain(),
        custom_makefile_rules=[],
    )


@pytest.fixture
def custom_rules() -> list[CustomMakefileRule]:
    return [
        CustomMakefileRule(command="docs", rule="doxygen Doxyfile", depends_on="all"),
        CustomMakefileRule(command="lint", rule="cppcheck Core/Src"),
    ]


@pytest.fixture
def cubemx_project(tmp_path: Path) -> Path:
    """A minimal CubeMX project tree with the Makefile and a few sources."""
    (tmp_path / "Makefile").write_text(CUBEMX_MAKEFILE)
    for src in CUBEMX_C_SOURCES:
        path = tmp_path / src
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("int x;\n")
    (tmp_path / "startup_stm32h743xx.s").write_text("  .syntax unified\n")
    (tmp_path / "Core" / "Inc").mkdir(parents=True, exist_ok=True)
    (tmp_path / "Core" / "Inc" / "main.h").write_text("#pragma once\n")
    (tmp_path / "Drivers" / "CMSIS" / "Include").mkdir(parents=True, exist_ok=True)
    (tmp_path / "Drivers" / "CMSIS" / "Include" / "core_cm7.h").write_text("#pragma once\n")
    return tmp_path
