"""Fixed names shared by the generator, the extractor and the project layer."""

from __future__ import annotations

# Environment file sourced at the top of every generated Makefile
STM32_ENVIRONMENT_FILE_NAME = ".stm32env"

# Name of the generated Makefile (kept apart from the CubeMX "Makefile")
MAKEFILE_NAME = "STM32Make.make"

# Makefile written by STM32CubeMX with the toolchain set to "Makefile"
CUBEMX_MAKEFILE_NAME = "Makefile"

OPENOCD_CONFIG_NAME = "openocd.cfg"

PROJECT_CONFIG_NAME = "cube-makefile.json"

DEFAULT_ARM_PREFIX = "arm-none-eabi-"
