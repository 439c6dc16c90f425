#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Binary to C source embedding tests."""

import io

from wswantool.utils.bin2c import Bin2CEntry, bin2c, format_byte_array

DATE = "Thu Jan  1 00:00:00 2025"


def test_format_byte_array() -> None:
    """Test twelve values per line with tab indentation."""
    expected = (
        "\n\t0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09, 0x0A, 0x0B,"
        "\n\t0x0C, 0x0D"
    )
    assert format_byte_array(bytes(range(14))) == expected
    assert format_byte_array(b"\xff") == "\n\t0xFF"
    assert format_byte_array(b"") == ""


def test_bin2c_single_entry() -> None:
    """Test the generated source and header of one aligned far array."""
    c_file = io.StringIO()
    h_file = io.StringIO()
    entries = {"tiles": Bin2CEntry(bytes(range(14)), align=2, address_space="__far")}
    bin2c(c_file, h_file, "wswantool", entries, generated_on=DATE)

    assert h_file.getvalue() == (
        f"// autogenerated by wswantool on {DATE}\n\n"
        "#pragma once\n#include <stdint.h>\n#include <wonderful.h>\n\n"
        "#define tiles_size (14)\n"
        "extern const uint8_t __far tiles[14];\n"
    )
    assert c_file.getvalue() == (
        f"// autogenerated by wswantool on {DATE}\n\n"
        "#include <stdint.h>\n#include <wonderful.h>\n\n"
        "const uint8_t __far tiles[14] __attribute__((aligned(2))) = {"
        "\n\t0x00, 0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09, 0x0A, 0x0B,"
        "\n\t0x0C, 0x0D"
        "\n};\n"
    )


def test_bin2c_entries_in_order() -> None:
    """Test that plain arrays are written in mapping order."""
    c_file = io.StringIO()
    h_file = io.StringIO()
    entries = {"b_second": Bin2CEntry(b"\x01"), "a_first": Bin2CEntry(b"\x02\x03")}
    bin2c(c_file, h_file, "tool", entries, generated_on=DATE)

    header = h_file.getvalue()
    source = c_file.getvalue()
    assert header.index("b_second") < header.index("a_first")
    assert "extern const uint8_t a_first[2];\n" in header
    assert "#define b_second_size (1)\n" in header
    assert "const uint8_t b_second[1] = {\n\t0x01\n};\n" in source
    assert "const uint8_t a_first[2] = {\n\t0x02, 0x03\n};\n" in source
    assert "aligned" not in source
    assert source.startswith(f"// autogenerated by tool on {DATE}\n")


def test_entry_qualifier() -> None:
    """Test the address space qualifier rendering."""
    assert Bin2CEntry(b"").qualifier == ""
    assert Bin2CEntry(b"", address_space="__wf_rom").qualifier == "__wf_rom "
