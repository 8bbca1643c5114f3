"""Tests for openocd.cfg handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from cube_makefile.openocd import (
    DEFAULT_INTERFACE,
    change_programmer,
    create_openocd_config,
    read_or_create_openocd_config,
    set_programmer,
)
from cube_makefile.workspace.local import LocalWorkspace


class TestCreateOpenocdConfig:
    def test_interface_and_target(self):
        config = create_openocd_config("stlink", "stm32h7x")
        assert "source [find interface/stlink.cfg]\n" in config
        assert "source [find target/stm32h7x.cfg]\n" in config


class TestChangeProgrammer:
    def test_replaces_interface_only(self):
        config = create_openocd_config("stlink", "stm32f4x")
        changed = change_programmer(config, "jlink")
        assert "interface/jlink.cfg" in changed
        assert "interface/stlink.cfg" not in changed
        assert "source [find target/stm32f4x.cfg]" in changed

    def test_hyphenated_interface(self):
        config = "source [find interface/stlink-v2-1.cfg]\n"
        assert change_programmer(config, "cmsis-dap") == "source [find interface/cmsis-dap.cfg]\n"

    def test_hand_written_lines_kept(self):
        config = (
            "source [find interface/stlink.cfg]\n"
            "transport select hla_swd\n"
            "source [find target/stm32l4x.cfg]\n"
            "reset_config srst_only\n"
        )
        changed = change_programmer(config, "jlink")
        assert changed == config.replace("interface/stlink.cfg", "interface/jlink.cfg")

    def test_no_interface_line_unchanged(self):
        assert change_programmer("source [find target/stm32l4x.cfg]\n", "jlink") == (
            "source [find target/stm32l4x.cfg]\n"
        )


class TestReadOrCreate:
    def test_creates_missing_config(self, tmp_path: Path):
        workspace = LocalWorkspace(str(tmp_path))
        config = read_or_create_openocd_config(workspace, "stm32h7x")
        assert (tmp_path / "openocd.cfg").read_text() == config
        assert f"interface/{DEFAULT_INTERFACE}.cfg" in config

    def test_existing_config_untouched(self, tmp_path: Path):
        (tmp_path / "openocd.cfg").write_text("# custom\n")
        workspace = LocalWorkspace(str(tmp_path))
        assert read_or_create_openocd_config(workspace, "stm32h7x", "jlink") == "# custom\n"
        assert (tmp_path / "openocd.cfg").read_text() == "# custom\n"


class TestSetProgrammer:
    def test_rewrites_config(self, tmp_path: Path):
        workspace = LocalWorkspace(str(tmp_path))
        read_or_create_openocd_config(workspace, "stm32f1x")
        set_programmer(workspace, "stlink-v2")
        text = (tmp_path / "openocd.cfg").read_text()
        assert "interface/stlink-v2.cfg" in text
        assert "target/stm32f1x.cfg" in text

    def test_unknown_programmer_still_written(self, tmp_path: Path):
        workspace = LocalWorkspace(str(tmp_path))
        read_or_create_openocd_config(workspace, "stm32f1x")
        assert "interface/my-probe.cfg" in set_programmer(workspace, "my-probe")

    def test_missing_config_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            set_programmer(LocalWorkspace(str(tmp_path)), "jlink")
