"""Custom exceptions for cube-makefile.

The generator and the extraction rules never raise; these are raised by the
project layer and the configuration loader only.
"""


class CubeMakefileError(Exception):
    """Base exception for all cube-makefile errors."""


class MakefileNotFoundError(CubeMakefileError):
    """Raised when no Makefile exists at the resolved workspace path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"No Makefile found at '{path}'. Initialize the project with CubeMX "
            "and set the toolchain to Makefile under the project manager."
        )


class EmptyMakefileError(CubeMakefileError):
    """Raised when a Makefile was read but no usable build information was found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No usable build information could be extracted from '{path}'")


class ConfigError(CubeMakefileError):
    """Raised when the project configuration file is invalid."""
