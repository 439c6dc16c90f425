#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Memory layout compiler exception classes.

Errors raised while normalizing a user memory map or while emitting the
linker script. Each error names the offending region(s) or constant.
"""

from wswantool.exceptions import WSWANOverlapError, WSWANTypeError, WSWANValueError


class WSWANLayoutError(WSWANValueError):
    """Base exception for memory layout validation failures."""

    fmt = "{description}"


class InvalidIdentifier(WSWANLayoutError):
    """Region name is not a valid identifier."""

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        :param name: Offending region name.
        """
        super().__init__(f"memory layout contains invalid identifier: {name}")
        self.name = name


class NegativeSizeRegion(WSWANLayoutError):
    """Region end address lies below its start address."""

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        :param name: Offending region name.
        """
        super().__init__(f"memory layout contains negative-sized entry: {name}")
        self.name = name


class RegionInRomArea(WSWANLayoutError):
    """Region starts in the ROM part of the address space."""

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        :param name: Offending region name.
        """
        super().__init__(f"memory layout contains entry in ROM area: {name}")
        self.name = name


class RegionCrossesSegmentBoundary(WSWANLayoutError):
    """Region start and end lie in different 64KB segments."""

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        :param name: Offending region name.
        """
        super().__init__(f"memory layout contains entry across segment boundaries: {name}")
        self.name = name


class OverlappingRegions(WSWANLayoutError, WSWANOverlapError):
    """Two regions share at least one address."""

    def __init__(self, name1: str, name2: str) -> None:
        """Initialize the exception.

        :param name1: Name of the region being checked.
        :param name2: Name of the region it overlaps.
        """
        super().__init__(f"memory layout contains overlapping entries: {name1}, {name2}")
        self.name1 = name1
        self.name2 = name2


class MissingStackArea(WSWANLayoutError):
    """Neither a stack nor a C heap region is declared."""

    def __init__(self) -> None:
        """Initialize the exception."""
        super().__init__("missing stack area in memory layout")


class UnsupportedMemoryModel(WSWANLayoutError):
    """Memory model label is not known."""

    def __init__(self, model: str) -> None:
        """Initialize the exception.

        :param model: Offending memory model label.
        """
        super().__init__(f"unsupported memory model: {model}")
        self.model = model


class InvalidConstantType(WSWANTypeError):
    """Link-time constant value is not an integer."""

    fmt = "{description}"

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        :param name: Name of the offending constant.
        """
        super().__init__(f"invalid constant type for {name}")
        self.name = name
