"""Project orchestration — ties the workspace to the generator and the extractor.

The generator and the extractor are pure; everything that touches files lives
here. Workspace I/O errors propagate to the caller, except a missing Makefile,
which is reported as MakefileNotFoundError.
"""

from __future__ import annotations

import posixpath
from dataclasses import replace

import structlog

from cube_makefile.config import ProjectConfig
from cube_makefile.definitions import CUBEMX_MAKEFILE_NAME, MAKEFILE_NAME
from cube_makefile.exceptions import EmptyMakefileError, MakefileNotFoundError
from cube_makefile.extractor.makefile_info import extract_makefile_info
from cube_makefile.extractor.rules import get_target_stm
from cube_makefile.files import (
    HEADER_FILE_EXTENSIONS,
    get_header_files,
    get_include_directories_from_file_list,
    get_non_glob_include_directories,
    get_source_files,
    sort_files,
)
from cube_makefile.generator.makefile import create_makefile
from cube_makefile.models.make_info import ExtractedMakefileInfo, MakeInfo, ToolChain
from cube_makefile.openocd import read_or_create_openocd_config
from cube_makefile.workspace.base import Workspace

log = structlog.get_logger("cube_makefile.project")


def makefile_path(directory: str = "") -> str:
    """Workspace-relative path of the CubeMX Makefile in ``directory``."""
    directory = directory.strip("/")
    if not directory or directory == ".":
        return CUBEMX_MAKEFILE_NAME
    return posixpath.join(directory, CUBEMX_MAKEFILE_NAME)


def get_makefile(workspace: Workspace, path: str = CUBEMX_MAKEFILE_NAME) -> str:
    """Read Makefile text. Raises MakefileNotFoundError when the file is missing."""
    try:
        return workspace.read_text(path)
    except FileNotFoundError as e:
        log.warning("makefile not found", path=path)
        raise MakefileNotFoundError(path) from e


def get_makefile_info(workspace: Workspace, directory: str = "") -> ExtractedMakefileInfo:
    """Extract build information from ``<directory>/Makefile``.

    Raises:
        MakefileNotFoundError: no Makefile at that path.
        EmptyMakefileError: the Makefile holds nothing usable.
    """
    path = makefile_path(directory)
    info = extract_makefile_info(get_makefile(workspace, path))
    if info.is_empty():
        log.warning("makefile holds no usable build information", path=path)
        raise EmptyMakefileError(path)
    log.info(
        "makefile info loaded",
        path=path,
        target=info.target,
        openocd_target=info.openocd_target,
    )
    return info


def merge_toolchain(make_info: MakeInfo, overrides: ToolChain | None) -> MakeInfo:
    """Return a copy of ``make_info`` where non-empty override fields win."""
    if overrides is None:
        return make_info
    tools = ToolChain(
        arm_toolchain_path=overrides.arm_toolchain_path or make_info.tools.arm_toolchain_path,
        openocd_path=overrides.openocd_path or make_info.tools.openocd_path,
    )
    return replace(make_info, tools=tools)


def build_make_info(workspace: Workspace, config: ProjectConfig) -> MakeInfo:
    """Combine the configuration with the source and header files found in the workspace."""
    build_files = sort_files(get_source_files(workspace, config.source_files))
    headers = get_header_files(workspace, config.header_files)
    plain_include_dirs = [
        entry
        for entry in get_non_glob_include_directories(config.header_files)
        if entry.rsplit(".", 1)[-1].lower() not in HEADER_FILE_EXTENSIONS
    ]

    make_info = config.to_make_info()
    make_info.c_sources = build_files.c_sources
    make_info.cxx_sources = build_files.cxx_sources
    make_info.asm_sources = build_files.assembly_sources
    make_info.c_includes = get_include_directories_from_file_list(headers) + plain_include_dirs
    make_info.libdir = make_info.libdir + build_files.library_directories
    if not make_info.target_mcu:
        make_info.target_mcu = get_target_stm(make_info.c_sources + make_info.asm_sources)

    log.info(
        "build info assembled",
        target=make_info.target,
        c_sources=len(make_info.c_sources),
        cxx_sources=len(make_info.cxx_sources),
        asm_sources=len(make_info.asm_sources),
        includes=len(make_info.c_includes),
    )
    return make_info


def write_makefile(
    workspace: Workspace,
    make_info: MakeInfo,
    name: str = MAKEFILE_NAME,
) -> str:
    """Render and write the Makefile; returns the written text."""
    text = create_makefile(make_info, name)
    workspace.write_text(name, text)
    return text


def generate_project(
    workspace: Workspace,
    config: ProjectConfig,
    toolchain: ToolChain | None = None,
    name: str = MAKEFILE_NAME,
) -> MakeInfo:
    """Scan, build MakeInfo, write the Makefile and make sure openocd.cfg exists."""
    make_info = merge_toolchain(build_make_info(workspace, config), toolchain)
    write_makefile(workspace, make_info, name)
    read_or_create_openocd_config(
        workspace,
        target=make_info.target_mcu,
        interface=config.openocd_interface,
    )
    return make_info
