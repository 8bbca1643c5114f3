"""Build file discovery — bucket workspace files by role.

A CubeMX project initialized with the Makefile toolchain looks like:

    <project>.ioc
    Core/Inc, Core/Src
    Drivers/
    Middlewares/          (optional)
    Makefile
    startup_<chip>xx.s
    <CHIP>x_FLASH.ld
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable

from cube_makefile.definitions import CUBEMX_MAKEFILE_NAME, PROJECT_CONFIG_NAME
from cube_makefile.models.build import BuildFiles, RequiredFileCheck
from cube_makefile.workspace.base import Workspace

SOURCE_FILE_EXTENSIONS = frozenset({"c", "cpp", "cxx", "cc", "s", "a"})
HEADER_FILE_EXTENSIONS = frozenset({"h", "hpp", "hxx"})

_GLOB_MAGIC_RE = re.compile(r"[*?[]")

# (file, warning shown when missing)
REQUIRED_RESOURCES: list[tuple[str, str]] = [
    (
        CUBEMX_MAKEFILE_NAME,
        "No Makefile is present, please initialize your project using CubeMX, "
        "with the toolchain set to Makefile under the project manager",
    ),
    (PROJECT_CONFIG_NAME, ""),
]


def _extension(path: str) -> str:
    return path.rsplit(".", 1)[-1].lower() if "." in path else ""


def has_glob_magic(pattern: str) -> bool:
    return _GLOB_MAGIC_RE.search(pattern) is not None


def get_dir_case_free(name: str, entries: Iterable[str]) -> str | None:
    """Return the entry whose basename equals ``name`` ignoring case, spelled as on disk."""
    wanted = name.lower()
    for entry in entries:
        if posixpath.basename(entry).lower() == wanted:
            return entry
    return None


def check_for_required_files(entries: Iterable[str]) -> list[RequiredFileCheck]:
    """Check that the Makefile and the project config are among ``entries``."""
    entries = list(entries)
    return [
        RequiredFileCheck(
            file=file,
            is_present=get_dir_case_free(file, entries) is not None,
            warning=warning,
        )
        for file, warning in REQUIRED_RESOURCES
    ]


def get_include_directories_from_file_list(headers: Iterable[str]) -> list[str]:
    """Unique, sorted parent directories of the given header files."""
    return sorted({posixpath.dirname(header.replace("\\", "/")) or "." for header in headers})


def sort_files(paths: Iterable[str]) -> BuildFiles:
    """Bucket paths by extension. Archives contribute their directory as a library path."""
    output = BuildFiles()
    for path in paths:
        extension = _extension(path)
        if extension in ("cpp", "cxx", "cc"):
            output.cxx_sources.append(path)
        elif extension == "c":
            output.c_sources.append(path)
        elif extension == "s":
            output.assembly_sources.append(path)
        elif extension == "a":
            output.library_directories.append(posixpath.dirname(path) or ".")
        # headers are handled by get_include_directories_from_file_list
    output.normalize()
    return output


def scan_for_files(workspace: Workspace, patterns: Iterable[str]) -> list[str]:
    """Expand glob patterns in the workspace; plain paths are kept when they exist."""
    files: list[str] = []
    for pattern in patterns:
        if has_glob_magic(pattern):
            files.extend(workspace.glob_files(pattern))
        elif workspace.exists(pattern):
            files.append(pattern)
    return files


def get_source_files(workspace: Workspace, patterns: Iterable[str]) -> list[str]:
    return [
        path
        for path in scan_for_files(workspace, patterns)
        if _extension(path) in SOURCE_FILE_EXTENSIONS
    ]


def get_header_files(workspace: Workspace, patterns: Iterable[str]) -> list[str]:
    return [
        path
        for path in scan_for_files(workspace, patterns)
        if _extension(path) in HEADER_FILE_EXTENSIONS
    ]


def get_non_glob_include_directories(patterns: Iterable[str]) -> list[str]:
    """Entries without glob characters, taken as include directories verbatim."""
    return [pattern for pattern in patterns if not has_glob_magic(pattern)]
