"""CLI entry point for standalone usage: cube-makefile.

Subcommands:
    cube-makefile extract Makefile                 # Print fields parsed from a Makefile
    cube-makefile diff old/Makefile new/Makefile   # Compare two Makefiles field by field
    cube-makefile init-config                      # Write a project configuration template
    cube-makefile import-config ./project          # CubeMX Makefile -> project configuration
    cube-makefile generate cube-makefile.json      # Project configuration -> STM32Make.make
    cube-makefile set-programmer stlink            # Change the openocd.cfg interface
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, replace
from pathlib import Path

import click

from cube_makefile.config import (
    PROJECT_CONFIG_TEMPLATE,
    ProjectConfig,
    load_project_config,
    toolchain_from_env,
)
from cube_makefile.core.logging import setup_logging
from cube_makefile.definitions import MAKEFILE_NAME, PROJECT_CONFIG_NAME
from cube_makefile.exceptions import CubeMakefileError
from cube_makefile.extractor.makefile_info import extract_makefile_info
from cube_makefile.files import check_for_required_files
from cube_makefile.generator.formatters import create_single_line_string_list
from cube_makefile.models.make_info import ExtractedMakefileInfo
from cube_makefile.openocd import set_programmer
from cube_makefile.project import generate_project, get_makefile_info
from cube_makefile.workspace.local import LocalWorkspace


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _read_extracted(path: str) -> ExtractedMakefileInfo:
    return extract_makefile_info(Path(path).read_text(encoding="utf-8", errors="replace"))


def _echo_info(info: ExtractedMakefileInfo) -> None:
    click.echo(f"Target: {info.target}")
    click.echo(f"OpenOCD target: {info.openocd_target or 'unknown'}")
    click.echo(f"CPU: {info.cpu}  FPU: {info.fpu}  Float ABI: {info.float_abi}")
    click.echo(f"Linker script: {info.linker_script}")
    click.echo(f"Toolchain prefix: {info.toolchain_prefix}")
    click.echo(f"C sources: {len(info.c_sources)}")
    click.echo(f"C++ sources: {len(info.cxx_sources)}")
    click.echo(f"ASM sources: {len(info.assembly_sources)}")
    click.echo(f"Includes: {len(info.c_includes)}")
    click.echo(f"C definitions: {create_single_line_string_list(info.c_defs, '-D').rstrip()}")
    # libraries keep link order
    click.echo(f"Libraries: {' '.join('-l' + lib for lib in info.libraries)}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """cube-makefile: generate and parse STM32 firmware Makefiles."""
    setup_logging("DEBUG" if verbose else None)


@main.command("extract")
@click.argument("makefile", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print all fields as JSON")
def extract(makefile: str, as_json: bool) -> None:
    """Print the build information parsed from a Makefile."""
    info = _read_extracted(makefile)
    if as_json:
        click.echo(json.dumps(asdict(info), indent=2))
        return
    if info.is_empty():
        click.echo(f"No build information found in {makefile}", err=True)
    _echo_info(info)


@main.command("diff")
@click.argument("old", type=click.Path(exists=True, dir_okay=False))
@click.argument("new", type=click.Path(exists=True, dir_okay=False))
def diff(old: str, new: str) -> None:
    """Compare the build information of two Makefiles."""
    changes = _read_extracted(old).diff(_read_extracted(new))
    if not changes:
        click.echo("No differences.")
        return
    for field_name, change in changes.items():
        click.echo(f"{field_name}:")
        if "old" in change:
            click.echo(f"  - {change['old']}")
            click.echo(f"  + {change['new']}")
            continue
        for entry in change["removed"]:
            click.echo(f"  - {entry}")
        for entry in change["added"]:
            click.echo(f"  + {entry}")


@main.command("init-config")
@click.option("-o", "--output", default=PROJECT_CONFIG_NAME, help="Output file path")
def init_config(output: str) -> None:
    """Generate a project configuration template."""
    Path(output).write_text(json.dumps(PROJECT_CONFIG_TEMPLATE, indent=2) + "\n")
    click.echo(f"Project configuration template written to {output}")
    click.echo("Edit the file, then run: cube-makefile generate " + output)


@main.command("import-config")
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False))
@click.option("-o", "--output", default=None, help="Output file path (default: <project_dir>/cube-makefile.json)")
def import_config(project_dir: str, output: str | None) -> None:
    """Create a project configuration from the CubeMX Makefile in PROJECT_DIR."""
    workspace = LocalWorkspace(project_dir)
    for check in check_for_required_files(workspace.list_entries()):
        if not check.is_present and check.warning:
            click.echo(f"Warning: {check.warning}", err=True)
    try:
        info = get_makefile_info(workspace)
    except CubeMakefileError as e:
        _fail(str(e))
    config = ProjectConfig.from_extracted(info)
    out_path = Path(output) if output else Path(project_dir) / PROJECT_CONFIG_NAME
    out_path.write_text(json.dumps(config.model_dump(), indent=2) + "\n")
    click.echo(f"Imported '{info.target}' into {out_path}")


@main.command("generate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--project-dir", default=".", type=click.Path(file_okay=False), help="Project root")
@click.option("-o", "--output", default=MAKEFILE_NAME, help="Makefile name, relative to the project root")
@click.option("--toolchain", default=None, help="ARM toolchain bin directory (overrides config and env)")
def generate(config_file: str, project_dir: str, output: str, toolchain: str | None) -> None:
    """Generate the Makefile described by CONFIG_FILE."""
    try:
        config = load_project_config(config_file)
    except CubeMakefileError as e:
        _fail(str(e))

    overrides = toolchain_from_env()
    if toolchain:
        overrides = replace(overrides, arm_toolchain_path=toolchain)

    make_info = generate_project(LocalWorkspace(project_dir), config, overrides, output)
    click.echo(f"Makefile written to {Path(project_dir) / output}")
    click.echo(
        f"  Sources: {len(make_info.c_sources)} C, {len(make_info.cxx_sources)} C++, "
        f"{len(make_info.asm_sources)} ASM"
    )
    click.echo(f"  OpenOCD target: {make_info.target_mcu or 'unknown'}")


@main.command("set-programmer")
@click.argument("programmer")
@click.option("--project-dir", default=".", type=click.Path(exists=True, file_okay=False), help="Project root")
def set_programmer_cmd(programmer: str, project_dir: str) -> None:
    """Change the programmer interface in openocd.cfg."""
    try:
        set_programmer(LocalWorkspace(project_dir), programmer)
    except FileNotFoundError:
        _fail(f"No openocd.cfg in {project_dir}; run 'cube-makefile generate' first")
    click.echo(f"Programmer set to {programmer}")


if __name__ == "__main__":
    main()
