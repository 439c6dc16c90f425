#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""C source and header generator embedding binary data as byte arrays."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, TextIO

logger = logging.getLogger(__name__)

C_VALUES_PER_LINE = 12


@dataclass
class Bin2CEntry:
    """Byte array to embed.

    :param data: Array content.
    :param align: Alignment of the array in bytes, optional.
    :param address_space: Named address space qualifier, e.g. ``__far``, optional.
    """

    data: bytes
    align: Optional[int] = None
    address_space: Optional[str] = None

    @property
    def qualifier(self) -> str:
        """Address space qualifier followed by a space, or nothing."""
        return f"{self.address_space} " if self.address_space else ""


def format_byte_array(data: bytes) -> str:
    """Format bytes as the body of a C array initializer.

    :param data: Bytes to format.
    :return: Hex literals, twelve per tab-indented line.
    """
    result = ""
    for i, byte in enumerate(data):
        result += "\n\t" if i % C_VALUES_PER_LINE == 0 else " "
        result += f"0x{byte:02X}"
        if i < len(data) - 1:
            result += ","
    return result


def bin2c(
    c_file: TextIO,
    h_file: TextIO,
    program_name: str,
    entries: Mapping[str, Bin2CEntry],
    generated_on: Optional[str] = None,
) -> None:
    """Write a C source and header pair defining one byte array per entry.

    :param c_file: Writable C source sink.
    :param h_file: Writable C header sink.
    :param program_name: Tool name mentioned in the generation comment.
    :param entries: Array name to array content, in output order.
    :param generated_on: Generation date for the comment, defaults to now.
    """
    comment_header = (
        f"// autogenerated by {program_name} on "
        f"{generated_on or datetime.now().strftime('%c')}\n\n"
    )

    h_file.write(comment_header)
    h_file.write("#pragma once\n#include <stdint.h>\n#include <wonderful.h>\n\n")

    c_file.write(comment_header)
    c_file.write("#include <stdint.h>\n#include <wonderful.h>\n\n")

    for array_name, entry in entries.items():
        size = len(entry.data)
        logger.debug(f"Embedding {array_name}: {size} byte(s)")

        h_file.write(f"#define {array_name}_size ({size})\n")
        h_file.write(f"extern const uint8_t {entry.qualifier}{array_name}[{size}];\n")

        c_file.write(f"const uint8_t {entry.qualifier}{array_name}[{size}] ")
        if entry.align:
            c_file.write(f"__attribute__((aligned({entry.align}))) ")
        c_file.write("= {")
        c_file.write(format_byte_array(entry.data))
        c_file.write("\n};\n")
