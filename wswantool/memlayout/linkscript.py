#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Linker script emission for a normalized memory layout.

The emitted script places the code in ROM and every RAM region as a NOLOAD
band at its declared address, loaded right after the previous band so that
the ROM image holds one contiguous block the startup code copies or clears.

Every logical band exists in three bank variants distinguished by a section
name suffix: the untagged primary image and two alternate overlay images
(``!`` and ``&``) sharing the same address range. A translation unit selects
its bank image by the suffix of the section names it emits.

The exact text is consumed by startup code through the ``__s*``, ``__e*``,
``__l*`` and ``__lw*`` symbols and must not change shape.
"""

import logging
from datetime import datetime
from typing import Mapping, Optional, TextIO

from wswantool.memlayout.exceptions import InvalidConstantType
from wswantool.memlayout.layout import (
    HEAP_REGION,
    IRAM_BASE,
    SRAM_BASE,
    NormalizedLayout,
    RegionSpec,
)
from wswantool.utils.wswan_enum import WSWANEnum

logger = logging.getLogger(__name__)

STACK_POINTER_SYMBOL = "__wf_stack_pointer"

# (name, origin, length, attributes) of the RAM windows
RAM_MEMORY_REGIONS = (
    ("IRAM", IRAM_BASE, 0x10000, "wx"),
    ("SRAM", SRAM_BASE, 0x10000, "wx"),
)

# input section suffixes collected by the far text/rodata bands, in order
FAR_SORT_SUFFIXES = ("!*", "$*", "&*", ".*")

DEBUG_SECTIONS: tuple[tuple[str, ...], ...] = (
    (".debug",),
    (".line",),
    (".debug_srcinfo",),
    (".debug_sfnames",),
    (".debug_aranges",),
    (".debug_pubnames",),
    (".debug_info", ".gnu.linkonce.wi.*"),
    (".debug_abbrev",),
    (".debug_line", ".debug_line.*", ".debug_line_end"),
    (".debug_frame",),
    (".debug_str",),
    (".debug_loc",),
    (".debug_macinfo",),
    (".debug_weaknames",),
    (".debug_funcnames",),
    (".debug_typenames",),
    (".debug_varnames",),
    (".debug_pubtypes",),
    (".debug_ranges",),
    (".debug_addr",),
    (".debug_line_str",),
    (".debug_loclists",),
    (".debug_macro",),
    (".debug_names",),
    (".debug_rnglists",),
    (".debug_str_offsets",),
    (".debug_sup",),
)


class BankTag(WSWANEnum):
    """Bank image a section name belongs to, identified by its suffix."""

    PRIMARY = (0, "", "Active bank image")
    SHADOW = (1, "!", "Alternate bank image opening the band")
    MIRROR = (2, "&", "Alternate bank image closing the band")

    @property
    def suffix(self) -> str:
        """Section and symbol name suffix."""
        return self.label

    def symbol(self, name: str) -> str:
        """Render a symbol name in this bank.

        :param name: Plain symbol name.
        :return: Symbol as written into the script.
        """
        if self is BankTag.PRIMARY:
            return name
        return f'"{name}{self.suffix}"'

    def input_sections(self, section: str, bare: bool = True) -> str:
        """Render the input section patterns of a section family.

        :param section: Section family without the leading dot, e.g. ``text``.
        :param bare: Primary bank also collects the unsuffixed section itself.
        :return: Input section description, e.g. ``*(.text ".text.*[^&]")``.
        """
        if self is BankTag.PRIMARY:
            if bare:
                return f'*(.{section} ".{section}.*[^&]")'
            return f'*(".{section}.*[^&]")'
        return f'*(".{section}{self.suffix}*" ".{section}.*{self.suffix}")'


class LinkerScriptWriter:
    """Line oriented writer of linker script text."""

    INDENT = "    "

    def __init__(self, stream: TextIO) -> None:
        """Initialize the writer.

        :param stream: Writable text sink.
        """
        self.stream = stream

    def raw(self, text: str) -> None:
        """Write text unchanged.

        :param text: Text to write.
        """
        self.stream.write(text)

    def line(self, text: str = "", level: int = 1) -> None:
        """Write one indented line, or an empty one.

        :param text: Line content.
        :param level: Indentation level.
        """
        self.stream.write(f"{self.INDENT * level}{text}\n" if text else "\n")

    def assign(self, symbol: str, value: str, level: int = 1) -> None:
        """Write a symbol assignment.

        :param symbol: Symbol as it appears in the script.
        :param value: Expression assigned to the symbol.
        :param level: Indentation level.
        """
        self.line(f"{symbol} = {value};", level)

    def open_section(self, header: str) -> None:
        """Write an output section header and the opening brace.

        :param header: Output section header without the brace.
        """
        self.line(header)
        self.line("{")

    def close_section(self, region: Optional[str] = None) -> None:
        """Write the closing brace of an output section.

        :param region: Memory region the section is assigned to.
        """
        self.line("}" + (f" >{region}" if region else ""))


class LinkerScriptEmitter:
    """Emitter of the linker script for one normalized layout.

    The emitter keeps the running chain head, the band whose end is the load
    address of the next RAM window.
    """

    def __init__(
        self,
        layout: NormalizedLayout,
        constants: Mapping[str, int],
        rom_start: int,
        rom_length: int,
        program_name: str = "wswantool",
    ) -> None:
        """Initialize the emitter.

        :param layout: Normalized memory layout.
        :param constants: Link-time integer constants exported as absolute symbols.
        :param rom_start: ROM origin.
        :param rom_length: ROM length.
        :param program_name: Tool name mentioned in the generation comment.
        :raises InvalidConstantType: A constant value is not an integer.
        """
        self.layout = layout
        self.constants = dict(constants)
        self.constants[STACK_POINTER_SYMBOL] = layout.sp
        for name, value in self.constants.items():
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidConstantType(name)
        self.rom_start = rom_start
        self.rom_length = rom_length
        self.program_name = program_name
        self.far_text = layout.model.far_text
        self.last_end_key = "erom"

    def emit(self, stream: TextIO, generated_on: Optional[str] = None) -> None:
        """Write the complete linker script.

        :param stream: Writable text sink.
        :param generated_on: Generation date for the header comment, defaults to now.
        """
        writer = LinkerScriptWriter(stream)
        self.last_end_key = "erom"
        logger.debug(
            f"Emitting linker script: model {self.layout.model.label}, "
            f"far text {self.far_text}, {len(self.constants)} constant(s)"
        )

        self._write_header(writer, generated_on or datetime.now().strftime("%c"))
        self._write_text_band(writer, BankTag.SHADOW)
        writer.line()
        self._write_text_band(writer, BankTag.PRIMARY)
        for name, value in self.constants.items():
            self._write_constant(writer, name, value)
        writer.line()
        self._write_text_band(writer, BankTag.MIRROR)
        if self.far_text:
            self._write_far_band(writer, "fartext")
            self._write_far_band(writer, "farrodata")
        self._write_end_marker(writer, "erom", alignment=16)
        writer.line()

        for window, base, regions in self.layout.windows():
            self._write_window(writer, window, base, regions)

        for sections in DEBUG_SECTIONS:
            self._write_debug_section(writer, *sections)
        writer.raw("}\n")

    def _write_header(self, writer: LinkerScriptWriter, generated_on: str) -> None:
        writer.raw(f"/* automatically generated by {self.program_name} on {generated_on} */\n")
        writer.raw('OUTPUT_FORMAT("elf32-i386")\n')
        writer.raw("ENTRY(_start)\n")
        writer.raw("MEMORY\n{\n")
        memory_regions = RAM_MEMORY_REGIONS + (("ROM", self.rom_start, self.rom_length, "rx"),)
        for name, origin, length, attributes in memory_regions:
            writer.line(f"{name} ({attributes}) : ORIGIN = {origin}, LENGTH = {length}")
        writer.raw("}\nSECTIONS\n{\n")
        writer.line("/* ROM */")
        writer.raw(f"{writer.INDENT}\n")

    def _write_text_band(self, writer: LinkerScriptWriter, tag: BankTag) -> None:
        """Write the ROM code band of one bank.

        :param writer: Script writer.
        :param tag: Bank of the band.
        """
        if tag is BankTag.SHADOW:
            writer.open_section(f"{tag.symbol('.text')} {self.rom_start} (NOLOAD) :")
        elif tag is BankTag.PRIMARY:
            writer.open_section(".text . :")
        else:
            writer.open_section(f"{tag.symbol('.text')} . (NOLOAD) :")
        writer.assign(tag.symbol("__stext"), ".", level=2)
        writer.line(f'KEEP(*(".start{tag.suffix}"))', level=2)
        writer.line(tag.input_sections("text"), level=2)
        if not self.far_text:
            writer.line(tag.input_sections("fartext", bare=False), level=2)
            writer.line(tag.input_sections("farrodata", bare=False), level=2)
        writer.assign(tag.symbol("__etext"), ".", level=2)
        if tag is BankTag.PRIMARY:
            writer.line(". = ALIGN (16);", level=2)
        writer.close_section("ROM" if tag is BankTag.SHADOW else None)

    @staticmethod
    def _write_constant(writer: LinkerScriptWriter, name: str, value: int) -> None:
        writer.line()
        writer.assign(BankTag.SHADOW.symbol(name), "0")
        writer.assign(f'"{name}"', f"ABSOLUTE({value})")

    @staticmethod
    def _write_far_band(writer: LinkerScriptWriter, section: str) -> None:
        writer.line()
        writer.line(f".{section} ALIGN (0x10) : SUBALIGN (0x10) {{")
        for suffix in FAR_SORT_SUFFIXES:
            writer.line(f'*(SORT (".{section}{suffix}"))', level=2)
        writer.line(". = .;", level=2)
        writer.line("}")

    def _write_end_marker(self, writer: LinkerScriptWriter, key: str, alignment: int) -> None:
        """Write the marker band closing a group and make it the chain head.

        :param writer: Script writer.
        :param key: Marker name without the leading dot.
        :param alignment: Alignment of the marker address.
        """
        writer.line()
        writer.open_section(f".{key} . (NOLOAD) :")
        writer.line(f". = ALIGN ({alignment});", level=2)
        for tag in BankTag:
            writer.assign(f'"__{key}{tag.suffix}"', ".", level=2)
        writer.line(". = .;", level=2)
        writer.close_section()
        self.last_end_key = key

    def _write_window(
        self, writer: LinkerScriptWriter, window: str, base: int, regions: list[RegionSpec]
    ) -> None:
        """Write all bands of one RAM window.

        :param writer: Script writer.
        :param window: Window name, ``iram`` or ``sram``.
        :param base: Window base address.
        :param regions: Regions of the window sorted by start address.
        """
        writer.line(f"/* {window.upper()} */")
        if regions:
            self._write_marker_band(writer, window, base, regions, BankTag.SHADOW)
            for region in regions:
                writer.line()
                writer.assign(".", str(region.start))
                if region.name == HEAP_REGION:
                    self._write_heap_body(writer, region)
                else:
                    self._write_region_body(writer, region)
            self._write_marker_band(writer, window, base, regions, BankTag.MIRROR)
            self._write_end_marker(writer, f"e{window}", alignment=2)
        writer.line()

    def _write_marker_band(
        self,
        writer: LinkerScriptWriter,
        window: str,
        base: int,
        regions: list[RegionSpec],
        tag: BankTag,
    ) -> None:
        """Write the alternate bank band covering a whole RAM window.

        The opening (shadow) band is placed at the window base and loaded right
        after the current chain head. It also carries the region boundary symbols.

        :param writer: Script writer.
        :param window: Window name.
        :param base: Window base address.
        :param regions: Regions of the window.
        :param tag: Bank of the band.
        """
        writer.line()
        section = tag.symbol(f".{window}")
        if tag is BankTag.SHADOW:
            last = f'".{self.last_end_key}"'
            writer.line(f"{section} {base} (NOLOAD) : AT(ADDR({last}) + SIZEOF({last}))")
        else:
            writer.line(f"{section} . (NOLOAD) :")
        writer.line("{")
        with_symbols = tag is BankTag.SHADOW
        if with_symbols:
            for region in regions:
                writer.assign(tag.symbol(f"__s{self._symbol_stem(region)}"), ".", level=2)
        for region in regions:
            if region.name == HEAP_REGION:
                for section_name in ("rodata", "data", "bss"):
                    writer.line(tag.input_sections(section_name), level=2)
            else:
                writer.line(tag.input_sections(region.name), level=2)
        if with_symbols:
            for region in regions:
                writer.assign(tag.symbol(f"__e{self._symbol_stem(region)}"), ".", level=2)
        writer.close_section(window.upper())

    @staticmethod
    def _symbol_stem(region: RegionSpec) -> str:
        return "data" if region.name == HEAP_REGION else region.name

    @staticmethod
    def _write_lengths(writer: LinkerScriptWriter, name: str, section: str) -> None:
        """Write the byte and word length symbols of a band.

        :param writer: Script writer.
        :param name: Symbol stem, e.g. ``data``.
        :param section: Output section measured.
        """
        writer.assign(BankTag.SHADOW.symbol(f"__l{name}"), "0")
        writer.assign(f"__l{name}", f"SIZEOF({section})")
        writer.assign(BankTag.SHADOW.symbol(f"__lw{name}"), "0")
        writer.assign(f"__lw{name}", f"(__l{name} + 1) / 2")

    def _write_heap_body(self, writer: LinkerScriptWriter, region: RegionSpec) -> None:
        """Write the data, bss and heap bands of the C heap region.

        :param writer: Script writer.
        :param region: The ``c_heap`` region.
        """
        writer.assign("__sheap", ".")
        writer.line()
        writer.assign("__sdata", ".")
        writer.line('".data" . : AT(ADDR(".erom") + SIZEOF(".erom"))')
        writer.line("{")
        writer.line(BankTag.PRIMARY.input_sections("rodata"), level=3)
        writer.line(BankTag.PRIMARY.input_sections("data"), level=3)
        writer.close_section()
        writer.assign("__edata", ".")
        self._write_lengths(writer, "data", ".data")
        writer.line()
        writer.assign("__sbss", ".")
        writer.open_section(".bss . (NOLOAD) :")
        writer.line(BankTag.PRIMARY.input_sections("bss"), level=3)
        writer.close_section()
        writer.assign("__ebss", ".")
        self._write_lengths(writer, "bss", ".bss")
        writer.line()
        writer.assign(".", str(region.end + 1))
        writer.assign(BankTag.SHADOW.symbol("__eheap"), "0")
        writer.assign("__eheap", ".")

    def _write_region_body(self, writer: LinkerScriptWriter, region: RegionSpec) -> None:
        """Write the zero-filled band of a user region.

        :param writer: Script writer.
        :param region: User region.
        """
        name = region.name
        writer.assign(f"__s{name}", ".")
        writer.open_section(f".{name} . (NOLOAD) :")
        writer.line(BankTag.PRIMARY.input_sections(name), level=3)
        writer.close_section()
        writer.assign(f"__e{name}", ".")
        self._write_lengths(writer, name, f".{name}")
        writer.assign(".", str(region.end + 1))
        writer.assign(f"__e{name}", ".")

    @staticmethod
    def _write_debug_section(writer: LinkerScriptWriter, name: str, *extra: str) -> None:
        writer.assign(BankTag.SHADOW.symbol(name), "0")
        writer.line(f"{name} 0 : {{ *({' '.join((name,) + extra)}) }}")


def emit(
    stream: TextIO,
    layout: NormalizedLayout,
    constants: Mapping[str, int],
    rom_start: int,
    rom_length: int,
    generated_on: Optional[str] = None,
) -> None:
    """Write the linker script of a normalized layout to a text sink.

    Constants are exported in mapping order, followed by the stack pointer
    symbol. On failure the sink content must be discarded.

    :param stream: Writable text sink.
    :param layout: Normalized memory layout.
    :param constants: Link-time integer constants.
    :param rom_start: ROM origin.
    :param rom_length: ROM length.
    :param generated_on: Generation date for the header comment, defaults to now.
    :raises InvalidConstantType: A constant value is not an integer.
    """
    LinkerScriptEmitter(layout, constants, rom_start, rom_length).emit(stream, generated_on)
