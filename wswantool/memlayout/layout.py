#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Memory layout normalization.

The user describes the RAM map as named, inclusive ``[start, end]`` ranges in
the 20-bit physical address space. Only the two 64KB RAM windows below the ROM
split point are modelled:

    - IRAM at 0x00000 - 0x0FFFF
    - SRAM at 0x10000 - 0x1FFFF

Two region names are reserved. ``stack`` grows down from its end and is exempt
from overlap checking. ``c_heap`` carries the initialized data, the zeroed data
and the free heap of the C runtime.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Sequence, Union

import prettytable

from wswantool.exceptions import WSWANKeyError, WSWANValueError
from wswantool.memlayout.exceptions import (
    InvalidIdentifier,
    MissingStackArea,
    NegativeSizeRegion,
    OverlappingRegions,
    RegionCrossesSegmentBoundary,
    RegionInRomArea,
    UnsupportedMemoryModel,
)
from wswantool.utils.wswan_enum import WSWANEnum

logger = logging.getLogger(__name__)

IRAM_BASE = 0x00000
SRAM_BASE = 0x10000
ROM_SPLIT = 0x20000
SEGMENT_MASK = 0xF0000
OFFSET_MASK = 0x0FFFF

STACK_REGION = "stack"
HEAP_REGION = "c_heap"

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


class MemoryModel(WSWANEnum):
    """Compiler memory model of the firmware image."""

    TINY = (0, "tiny", "Code and data in a single segment")
    SMALL = (1, "small", "Near code, near data")
    MEDIUM = (2, "medium", "Far code, near data")
    COMPACT = (3, "compact", "Near code, far data")
    LARGE = (4, "large", "Far code, far data")
    HUGE = (5, "huge", "Far code, far data, normalized pointers")

    @property
    def far_text(self) -> bool:
        """Code and read-only data are placed in the far text group."""
        return self in (MemoryModel.MEDIUM, MemoryModel.LARGE, MemoryModel.HUGE)

    @classmethod
    def parse(cls, model: Union[str, "MemoryModel"]) -> "MemoryModel":
        """Get memory model from its label.

        :param model: Memory model label or member.
        :raises UnsupportedMemoryModel: Unknown memory model label.
        :return: Memory model member.
        """
        if isinstance(model, MemoryModel):
            return model
        try:
            return cls.from_label(model)
        except WSWANKeyError as exc:
            raise UnsupportedMemoryModel(str(model)) from exc


@dataclass(frozen=True)
class RegionSpec:
    """Named RAM region with inclusive bounds."""

    name: str
    start: int
    end: int

    @property
    def size(self) -> int:
        """Size of the region in bytes."""
        return self.end - self.start + 1

    @property
    def segment(self) -> int:
        """Physical base of the 64KB segment holding the region."""
        return self.start & SEGMENT_MASK

    def overlaps(self, other: "RegionSpec") -> bool:
        """Check whether two regions share at least one address.

        :param other: Region to compare with.
        :return: True if the inclusive ranges intersect.
        """
        return self.start <= other.end and other.start <= self.end


@dataclass
class NormalizedLayout:
    """Canonical form of a validated memory layout.

    ``ds``, ``ss`` and ``sp`` are the register values loaded by the startup
    code. ``iram`` and ``sram`` hold the non-stack regions of each RAM window
    sorted by start address.
    """

    model: MemoryModel
    ds: int
    ss: int
    sp: int
    iram: list[RegionSpec] = field(default_factory=list)
    sram: list[RegionSpec] = field(default_factory=list)

    def windows(self) -> Iterator[tuple[str, int, list[RegionSpec]]]:
        """Iterate RAM windows in emission order.

        :return: Iterator of (window name, window base, regions).
        """
        yield "iram", IRAM_BASE, self.iram
        yield "sram", SRAM_BASE, self.sram

    def get_table(self) -> str:
        """Render the layout as a text table.

        :return: Table with one row per region.
        """
        table = prettytable.PrettyTable(["Window", "Region", "Start", "End", "Size"])
        table.align = "l"
        for window, _, regions in self.windows():
            for region in regions:
                table.add_row(
                    [
                        window.upper(),
                        region.name,
                        f"0x{region.start:05X}",
                        f"0x{region.end:05X}",
                        f"0x{region.size:X}",
                    ]
                )
        return table.get_string()

    def __str__(self) -> str:
        return (
            f"Memory model: {self.model.label}\n"
            f"DS: 0x{self.ds:04X}, SS: 0x{self.ss:04X}, SP: 0x{self.sp:04X}\n"
            f"{self.get_table()}"
        )


def _parse_region(name: str, bounds: Sequence[int]) -> RegionSpec:
    """Validate a single layout entry on its own.

    :param name: Region name.
    :param bounds: Inclusive start and end address.
    :raises WSWANValueError: Entry is not a pair of non-negative integers.
    :return: Region specification.
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.fullmatch(name):
        raise InvalidIdentifier(name)
    if len(bounds) != 2 or not all(
        isinstance(x, int) and not isinstance(x, bool) for x in bounds
    ):
        raise WSWANValueError(f"memory layout entry {name} must be a [start, end] pair")
    if bounds[0] < 0 or bounds[1] < 0:
        raise WSWANValueError(f"memory layout entry {name} has a negative address")
    region = RegionSpec(name, bounds[0], bounds[1])
    if region.end < region.start:
        raise NegativeSizeRegion(name)
    if region.start >= ROM_SPLIT:
        raise RegionInRomArea(name)
    if (region.start & SEGMENT_MASK) != (region.end & SEGMENT_MASK):
        raise RegionCrossesSegmentBoundary(name)
    return region


def normalize(
    raw_layout: Mapping[str, Sequence[int]], model: Union[str, MemoryModel] = "medium"
) -> NormalizedLayout:
    """Validate a user memory layout and convert it to the canonical form.

    Entries are validated in declaration order. Every entry is first checked on
    its own (identifier, size, ROM area, segment boundary), then each non-stack
    entry is checked for overlap against every other non-stack entry. The first
    violated rule raises.

    :param raw_layout: Mapping of region name to inclusive ``[start, end]`` pair.
    :param model: Memory model label, defaults to "medium".
    :raises InvalidIdentifier: Region name is not an identifier.
    :raises NegativeSizeRegion: Region end is below its start.
    :raises RegionInRomArea: Region starts at or above the ROM split point.
    :raises RegionCrossesSegmentBoundary: Region spans two segments.
    :raises OverlappingRegions: Two non-stack regions overlap.
    :raises MissingStackArea: Neither stack nor c_heap region is declared.
    :raises UnsupportedMemoryModel: Unknown memory model label.
    :return: Normalized layout.
    """
    memory_model = MemoryModel.parse(model)

    regions = {name: _parse_region(name, bounds) for name, bounds in raw_layout.items()}

    # the stack may share its range with anything
    placed = [region for region in regions.values() if region.name != STACK_REGION]
    for region in placed:
        for other in placed:
            if other is not region and region.overlaps(other):
                raise OverlappingRegions(region.name, other.name)

    heap = regions.get(HEAP_REGION)
    stack = regions.get(STACK_REGION)

    ds = (heap.start & SEGMENT_MASK) >> 4 if heap else 0x0000

    if stack:
        stack_top = stack.end + 1
    elif heap:
        stack_top = heap.end + 1
    else:
        raise MissingStackArea()
    ss = (stack_top & SEGMENT_MASK) >> 4
    sp = stack_top & OFFSET_MASK

    layout = NormalizedLayout(model=memory_model, ds=ds, ss=ss, sp=sp)
    for region in sorted(regions.values(), key=lambda r: r.start):
        if region.name == STACK_REGION:
            continue
        if region.start >= SRAM_BASE:
            layout.sram.append(region)
        else:
            layout.iram.append(region)

    logger.debug(
        f"Normalized {len(regions)} region(s), model {memory_model.label}: "
        f"DS=0x{ds:04X} SS=0x{ss:04X} SP=0x{sp:04X}, "
        f"{len(layout.iram)} in IRAM, {len(layout.sram)} in SRAM"
    )
    return layout
