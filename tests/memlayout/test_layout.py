#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Memory layout normalization tests.

Covers the per-entry validation rules, the overlap rules with the stack
exemption, the derivation of the DS/SS/SP register values and the partition
of regions into the IRAM and SRAM windows.
"""

from typing import Any

import pytest

from wswantool.exceptions import WSWANOverlapError, WSWANValueError
from wswantool.memlayout.exceptions import (
    InvalidIdentifier,
    MissingStackArea,
    NegativeSizeRegion,
    OverlappingRegions,
    RegionCrossesSegmentBoundary,
    RegionInRomArea,
    UnsupportedMemoryModel,
)
from wswantool.memlayout.layout import MemoryModel, NormalizedLayout, RegionSpec, normalize


def test_normalize_sram_heap_and_stack() -> None:
    """Test the typical layout with the heap and the stack in SRAM."""
    layout = normalize({"stack": [0x1F000, 0x1FFFF], "c_heap": [0x10000, 0x1EFFF]}, "medium")
    assert layout.model == MemoryModel.MEDIUM
    assert layout.ds == 0x1000
    # stack top is 0x20000, its segment is the next one
    assert layout.ss == 0x2000
    assert layout.sp == 0x0000
    assert layout.iram == []
    assert layout.sram == [RegionSpec("c_heap", 0x10000, 0x1EFFF)]


def test_normalize_heap_only_derives_stack() -> None:
    """Test that the stack top follows the heap when no stack is declared."""
    layout = normalize({"c_heap": [0x10000, 0x103FF]}, "small")
    assert layout.ds == 0x1000
    assert layout.ss == 0x1000
    assert layout.sp == 0x0400


def test_normalize_stack_only() -> None:
    """Test that DS defaults to zero without a heap."""
    layout = normalize({"stack": [0x0E00, 0x0FFF]}, "small")
    assert layout.ds == 0x0000
    assert layout.ss == 0x0000
    assert layout.sp == 0x1000
    assert layout.iram == []
    assert layout.sram == []


def test_normalize_missing_stack_area() -> None:
    """Test that a layout without stack and heap is rejected."""
    with pytest.raises(MissingStackArea) as exc:
        normalize({"buffer": [0x1000, 0x1FFF]}, "medium")
    assert str(exc.value) == "missing stack area in memory layout"


@pytest.mark.parametrize(
    "name",
    ["1buffer", "_buffer", "buf-fer", "buf fer", "", "bufé"],
)
def test_normalize_invalid_identifier(name: str) -> None:
    """Test region names which are not identifiers.

    :param name: Invalid region name.
    """
    with pytest.raises(InvalidIdentifier) as exc:
        normalize({"stack": [0x0E00, 0x0FFF], name: [0x1000, 0x1FFF]}, "medium")
    assert exc.value.name == name
    assert str(exc.value) == f"memory layout contains invalid identifier: {name}"


@pytest.mark.parametrize("name", ["a", "Buffer", "b1", "sprite_table_2"])
def test_normalize_valid_identifier(name: str) -> None:
    """Test accepted region names.

    :param name: Valid region name.
    """
    layout = normalize({"stack": [0x0E00, 0x0FFF], name: [0x1000, 0x1FFF]}, "medium")
    assert layout.iram[0].name == name


def test_normalize_single_byte_region() -> None:
    """Test that a region with start equal to end is the minimal valid region."""
    layout = normalize({"stack": [0x0E00, 0x0FFF], "flag": [0x2000, 0x2000]}, "medium")
    assert layout.iram[0].size == 1


def test_normalize_negative_size() -> None:
    """Test that the end below the start is rejected."""
    with pytest.raises(NegativeSizeRegion) as exc:
        normalize({"stack": [0x0E00, 0x0FFF], "buffer": [0x2001, 0x2000]}, "medium")
    assert exc.value.name == "buffer"


@pytest.mark.parametrize("start", [0x20000, 0x20001, 0xFFFFF])
def test_normalize_region_in_rom_area(start: int) -> None:
    """Test that regions at or above the ROM split point are rejected.

    :param start: Region start address.
    """
    with pytest.raises(RegionInRomArea) as exc:
        normalize({"stack": [0x0E00, 0x0FFF], "rom_data": [start, start]}, "medium")
    assert exc.value.name == "rom_data"
    assert "ROM area" in str(exc.value)


def test_normalize_last_ram_byte() -> None:
    """Test that the last byte below the ROM split point is accepted."""
    layout = normalize({"c_heap": [0x1FFFF, 0x1FFFF]}, "medium")
    assert layout.sp == 0x0000
    assert layout.ss == 0x2000


@pytest.mark.parametrize(
    "bounds",
    [
        [-0x10000, -1],
        [-1, 0x0FFF],
        [-0x100, -0x100],
    ],
)
def test_normalize_negative_address(bounds: list[int]) -> None:
    """Test that addresses below zero are rejected.

    :param bounds: Region bounds.
    """
    with pytest.raises(WSWANValueError, match="c_heap has a negative address"):
        normalize({"c_heap": bounds}, "small")


@pytest.mark.parametrize("name", [1, 0x1000, None])
def test_normalize_non_string_identifier(name: Any) -> None:
    """Test region names which are not strings at all.

    :param name: Invalid region name.
    """
    with pytest.raises(InvalidIdentifier) as exc:
        normalize({"stack": [0x0E00, 0x0FFF], name: [0x1000, 0x1FFF]}, "medium")
    assert exc.value.name == name


@pytest.mark.parametrize(
    "bounds,valid",
    [
        ([0x0FFF0, 0x10010], False),
        ([0x0FFF0, 0x0FFFF], True),
        ([0x10000, 0x1FFFF], True),
        ([0x00000, 0x1FFFF], False),
    ],
)
def test_normalize_segment_boundary(bounds: list[int], valid: bool) -> None:
    """Test the single segment rule.

    :param bounds: Region bounds.
    :param valid: The region is expected to be accepted.
    """
    raw = {"stack": [0x0E00, 0x0FFF], "buffer": bounds}
    if valid:
        normalize(raw, "medium")
    else:
        with pytest.raises(RegionCrossesSegmentBoundary):
            normalize(raw, "medium")


@pytest.mark.parametrize(
    "first,second",
    [
        ([0x1000, 0x1FFF], [0x1FFF, 0x2FFF]),
        ([0x1000, 0x1FFF], [0x1800, 0x1900]),
        ([0x1800, 0x1900], [0x1000, 0x1FFF]),
        ([0x1000, 0x1FFF], [0x1000, 0x1FFF]),
    ],
)
def test_normalize_overlapping_regions(first: list[int], second: list[int]) -> None:
    """Test that intersecting non-stack regions are rejected.

    :param first: Bounds of the first region.
    :param second: Bounds of the second region.
    """
    with pytest.raises(OverlappingRegions) as exc:
        normalize({"stack": [0x0E00, 0x0FFF], "a": first, "b": second}, "medium")
    assert {exc.value.name1, exc.value.name2} == {"a", "b"}
    assert str(exc.value) == "memory layout contains overlapping entries: a, b"
    assert isinstance(exc.value, WSWANOverlapError)


def test_normalize_adjacent_regions() -> None:
    """Test that regions touching at a boundary do not overlap."""
    layout = normalize(
        {"stack": [0x0E00, 0x0FFF], "a": [0x1000, 0x1FFF], "b": [0x2000, 0x2FFF]}, "medium"
    )
    assert [region.name for region in layout.iram] == ["a", "b"]


def test_normalize_stack_overlap_exempt() -> None:
    """Test that the stack may overlap any other region."""
    layout = normalize(
        {"c_heap": [0x10000, 0x1FFFF], "stack": [0x1F000, 0x1FFFF], "a": [0x0000, 0x0FFF]},
        "medium",
    )
    assert [region.name for region in layout.sram] == ["c_heap"]
    assert all(region.name != "stack" for region in layout.iram + layout.sram)


def test_normalize_entry_rules_checked_before_overlaps() -> None:
    """Test that a malformed later entry wins over an earlier overlap."""
    with pytest.raises(RegionInRomArea):
        normalize(
            {
                "stack": [0x0E00, 0x0FFF],
                "a": [0x1000, 0x1FFF],
                "b": [0x1800, 0x1900],
                "c": [0x30000, 0x30010],
            },
            "medium",
        )


def test_normalize_partition_and_order() -> None:
    """Test the window assignment and the ascending start order."""
    layout = normalize(
        {
            "stack": [0x0E00, 0x0FFF],
            "late": [0x3000, 0x3FFF],
            "edge": [0x0FFFF, 0x0FFFF],
            "c_heap": [0x10000, 0x10FFF],
            "early": [0x1000, 0x1FFF],
            "sbuf": [0x18000, 0x18FFF],
        },
        "medium",
    )
    assert [region.name for region in layout.iram] == ["early", "late", "edge"]
    assert [region.name for region in layout.sram] == ["c_heap", "sbuf"]


def test_normalize_deterministic() -> None:
    """Test that identical input yields identical layouts."""
    raw = {"stack": [0x1F000, 0x1FFFF], "c_heap": [0x10000, 0x1EFFF], "a": [0x1000, 0x1FFF]}
    assert normalize(raw, "large") == normalize(dict(raw), "large")


def test_normalize_default_model() -> None:
    """Test that the medium model is used by default."""
    assert normalize({"c_heap": [0x10000, 0x103FF]}).model == MemoryModel.MEDIUM


@pytest.mark.parametrize("bounds", [[0x1000], [0x1000, 0x1FFF, 0x2000], ["0x1000", 0x1FFF]])
def test_normalize_malformed_entry(bounds: Any) -> None:
    """Test entries which are not a pair of integers.

    :param bounds: Malformed bounds.
    """
    with pytest.raises(WSWANValueError):
        normalize({"stack": [0x0E00, 0x0FFF], "buffer": bounds}, "medium")


@pytest.mark.parametrize(
    "label,model,far_text",
    [
        ("tiny", MemoryModel.TINY, False),
        ("small", MemoryModel.SMALL, False),
        ("medium", MemoryModel.MEDIUM, True),
        ("compact", MemoryModel.COMPACT, False),
        ("large", MemoryModel.LARGE, True),
        ("huge", MemoryModel.HUGE, True),
        ("LARGE", MemoryModel.LARGE, True),
    ],
)
def test_memory_model_parse(label: str, model: MemoryModel, far_text: bool) -> None:
    """Test memory model lookup and the far text switch.

    :param label: Memory model label.
    :param model: Expected member.
    :param far_text: Expected far text switch.
    """
    assert MemoryModel.parse(label) is model
    assert MemoryModel.parse(model) is model
    assert model.far_text is far_text


def test_memory_model_unsupported() -> None:
    """Test that an unknown memory model label is rejected."""
    with pytest.raises(UnsupportedMemoryModel) as exc:
        normalize({"c_heap": [0x10000, 0x103FF]}, "gigantic")
    assert exc.value.model == "gigantic"
    assert str(exc.value) == "unsupported memory model: gigantic"


def test_region_spec_properties() -> None:
    """Test size, segment and overlap of a region."""
    region = RegionSpec("buffer", 0x10100, 0x101FF)
    assert region.size == 0x100
    assert region.segment == 0x10000
    assert region.overlaps(RegionSpec("other", 0x101FF, 0x10200))
    assert not region.overlaps(RegionSpec("other", 0x10200, 0x10300))


def test_layout_table() -> None:
    """Test the text rendering of a normalized layout."""
    layout = normalize(
        {"stack": [0x1F000, 0x1FFFF], "c_heap": [0x10000, 0x1EFFF], "a": [0x1000, 0x1FFF]},
        "medium",
    )
    assert isinstance(layout, NormalizedLayout)
    text = str(layout)
    assert "Memory model: medium" in text
    assert "DS: 0x1000, SS: 0x2000, SP: 0x0000" in text
    assert "c_heap" in text
    assert "0x10000" in text
    assert "0x1EFFF" in text
    assert "IRAM" in text
    assert "stack" not in text
