"""Tests for the string-list formatters and prefix helpers — pure logic."""

from __future__ import annotations

from cube_makefile.extractor.rules import remove_prefixes
from cube_makefile.generator.formatters import (
    create_gcc_path_output,
    create_single_line_string_list,
    create_string_list,
    format_custom_rules,
    prefix_if_missing,
    to_posix_path,
)
from cube_makefile.models.make_info import CustomMakefileRule


class TestCreateStringList:
    def test_sorted_deduplicated_with_continuations(self):
        assert create_string_list(["b.c", "a.c", "b.c"]) == "a.c \\\nb.c\n"

    def test_prefix_added_to_every_entry(self):
        assert create_string_list(["STM32H743xx", "USE_HAL_DRIVER"], "-D") == (
            "-DSTM32H743xx \\\n-DUSE_HAL_DRIVER\n"
        )

    def test_single_entry_has_no_continuation(self):
        assert create_string_list(["main.c"]) == "main.c\n"

    def test_empty_input_renders_nothing(self):
        assert create_string_list([]) == ""
        assert create_string_list([], "-I") == ""

    def test_idempotent(self):
        entries = ["z", "a", "m", "a"]
        assert create_string_list(entries) == create_string_list(entries)
        assert create_string_list(entries) == create_string_list(reversed(entries))

    def test_case_sensitive_uniqueness(self):
        assert create_string_list(["Main.c", "main.c"]) == "Main.c \\\nmain.c\n"


class TestCreateSingleLineStringList:
    def test_sorted_deduplicated_on_one_line(self):
        assert create_single_line_string_list(["m", "c", "m"], "-l") == "-lc -lm "

    def test_no_prefix(self):
        assert create_single_line_string_list(["-Wall", "-O2"]) == "-O2 -Wall "

    def test_empty(self):
        assert create_single_line_string_list([]) == ""

    def test_prefix_round_trip(self):
        for entries, prefix in [
            (["c", "m", "nosys"], "-l"),
            (["Core/Inc", "Drivers/CMSIS/Include", "Core/Inc"], "-I"),
            (["USE_HAL_DRIVER", "STM32F4"], "-D"),
            ([], "-L"),
        ]:
            rendered = create_single_line_string_list(entries, prefix)
            stripped = remove_prefixes(rendered.split(), prefix)
            assert create_single_line_string_list(stripped) == create_single_line_string_list(
                entries
            )


class TestPrefixIfMissing:
    def test_adds_prefix(self):
        assert prefix_if_missing("cortex-m7", "-mcpu=") == "-mcpu=cortex-m7"

    def test_already_prefixed_unchanged(self):
        assert prefix_if_missing("-mfpu=fpv5-d16", "-mfpu=") == "-mfpu=fpv5-d16"

    def test_empty_and_none(self):
        assert prefix_if_missing("", "-mcpu=") == ""
        assert prefix_if_missing(None, "-mcpu=") == ""

    def test_idempotent(self):
        for token in ["hard", "-mfloat-abi=hard", ""]:
            once = prefix_if_missing(token, "-mfloat-abi=")
            assert prefix_if_missing(once, "-mfloat-abi=") == once


class TestToolchainPath:
    def test_windows_path_to_posix(self):
        assert to_posix_path("C:\\ST\\gcc\\bin") == "C:/ST/gcc/bin"

    def test_posix_path_unchanged(self):
        assert to_posix_path("/opt/gcc-arm/bin") == "/opt/gcc-arm/bin"

    def test_gcc_path_assignment(self):
        assert create_gcc_path_output("/opt/gcc-arm/bin") == "ARM_GCC_PATH ?= /opt/gcc-arm/bin"

    def test_path_fallback(self):
        assert create_gcc_path_output("") == ""
        assert create_gcc_path_output(None) == ""
        assert create_gcc_path_output(".") == ""


class TestFormatCustomRules:
    def test_empty(self):
        assert format_custom_rules([]) == ""
        assert format_custom_rules(None) == ""

    def test_single_rule_block(self):
        rule = CustomMakefileRule(command="docs", rule="doxygen Doxyfile", depends_on="all")
        assert format_custom_rules([rule]) == (
            "#######################################\n"
            "# docs\n"
            "#######################################\n"
            "docs: all\n"
            "\tdoxygen Doxyfile"
        )

    def test_missing_dependency_leaves_bare_target(self):
        rule = CustomMakefileRule(command="lint", rule="cppcheck Core/Src")
        assert "\nlint:\n\tcppcheck Core/Src" in format_custom_rules([rule])

    def test_blocks_keep_input_order(self, custom_rules):
        rendered = format_custom_rules(custom_rules)
        assert rendered.index("# docs") < rendered.index("# lint")
        assert "\tdoxygen Doxyfile\n\n#######" in rendered
