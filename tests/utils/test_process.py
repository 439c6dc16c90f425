#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Process context and file-or-data conversion tests."""

import os
import pathlib
from typing import Any

import pytest

from wswantool.exceptions import WSWANError
from wswantool.utils.misc import load_binary, load_text
from wswantool.utils.process import (
    DataRef,
    FileRef,
    ProcessContext,
    UnsupportedInputType,
    filename,
    symbol,
    to_data,
    to_file,
)


def test_context_lifecycle() -> None:
    """Test that the owned temporary directory exists only inside the context."""
    with ProcessContext() as ctx:
        temp_dir = ctx.temp_dir
        assert temp_dir is not None
        assert os.path.isdir(temp_dir)
    assert not os.path.exists(temp_dir)
    assert ctx.temp_dir is None


def test_context_keeps_given_directory(tmpdir: Any) -> None:
    """Test that a caller supplied directory is not removed.

    :param tmpdir: Temporary directory fixture.
    """
    with ProcessContext(str(tmpdir)) as ctx:
        assert ctx.temp_dir == str(tmpdir)
    assert os.path.isdir(str(tmpdir))


def test_tmpfile_names() -> None:
    """Test the sequential temporary file names."""
    with ProcessContext() as ctx:
        first = ctx.tmpfile(".bin")
        second = ctx.tmpfile()
        assert os.path.basename(first.path) == "wf00001.bin"
        assert os.path.basename(second.path) == "wf00002"
        assert os.path.dirname(first.path) == ctx.temp_dir
        assert not os.path.exists(first.path)


def test_tmpfile_outside_context() -> None:
    """Test that temporary files need an active context."""
    with pytest.raises(WSWANError, match="not active"):
        ProcessContext().tmpfile()


def test_dependency_file(tmpdir: Any) -> None:
    """Test the Makefile rule of the recorded file accesses.

    :param tmpdir: Temporary directory fixture.
    """
    depfile = os.path.join(str(tmpdir), "out.d")
    with ProcessContext() as ctx:
        ctx.access_file("link.yaml")
        ctx.access_file("assets/tiles.bin", "rb")
        ctx.access_file("link.yaml", "r")
        ctx.access_file("build/link.ld", "w")
        ctx.write_dependency_file(depfile)
    assert load_text(depfile) == "build/link.ld: \\\n  link.yaml \\\n  assets/tiles.bin\n"


def test_dependency_file_explicit_target(tmpdir: Any) -> None:
    """Test the dependency file rule with an explicit target.

    :param tmpdir: Temporary directory fixture.
    """
    depfile = os.path.join(str(tmpdir), "out.d")
    with ProcessContext() as ctx:
        ctx.write_dependency_file(depfile, target="all")
    assert load_text(depfile) == "all:\n"


def test_dependency_file_without_target(tmpdir: Any) -> None:
    """Test that a dependency file needs a target.

    :param tmpdir: Temporary directory fixture.
    """
    with ProcessContext() as ctx:
        ctx.access_file("link.yaml")
        with pytest.raises(WSWANError, match="No target"):
            ctx.write_dependency_file(os.path.join(str(tmpdir), "out.d"))


def test_filename() -> None:
    """Test file name extraction for every supported input."""
    assert filename(FileRef("a/b.bin")) == "a/b.bin"
    assert filename("a/b.bin") == "a/b.bin"
    assert filename(pathlib.PurePosixPath("a/b.bin")) == "a/b.bin"
    assert filename(DataRef(b"\x00")) is None
    assert filename(b"\x00") is None
    assert filename(bytearray(b"\x00")) is None


def test_to_file_from_data() -> None:
    """Test that data is stored in a new temporary file."""
    with ProcessContext() as ctx:
        ref = to_file(ctx, DataRef(b"\x12\x34"))
        assert os.path.basename(ref.path) == "wf00001.tmp"
        assert load_binary(ref.path) == b"\x12\x34"
        raw_ref = to_file(ctx, bytearray(b"\x56"))
        assert load_binary(raw_ref.path) == b"\x56"


def test_to_file_from_path() -> None:
    """Test that paths are wrapped without creating files."""
    with ProcessContext() as ctx:
        assert to_file(ctx, "a.bin") == FileRef("a.bin")
        ref = FileRef("b.bin")
        assert to_file(ctx, ref) is ref
        assert ctx.tmpfile().path.endswith("wf00001")


def test_to_data(data_dir: str) -> None:
    """Test reading of data and recording of the access.

    :param data_dir: Test data directory.
    """
    path = os.path.join(data_dir, "blob.bin")
    with ProcessContext() as ctx:
        assert to_data(path, ctx) == DataRef(b"\x00\x01\x02\xff")
        assert to_data(FileRef(path)).data == b"\x00\x01\x02\xff"
        assert ctx.dependencies == [path.replace("\\", "/")]
    ref = DataRef(b"\x01")
    assert to_data(ref) is ref
    assert to_data(b"\x02") == DataRef(b"\x02")


@pytest.mark.parametrize("value", [None, 42, 1.5, ["a.bin"], {"file": "a.bin"}])
def test_unsupported_input(value: Any) -> None:
    """Test values which are neither paths nor data.

    :param value: Unsupported input.
    """
    with pytest.raises(UnsupportedInputType):
        filename(value)
    with pytest.raises(UnsupportedInputType):
        to_data(value)
    with ProcessContext() as ctx:
        with pytest.raises(UnsupportedInputType):
            to_file(ctx, value)


@pytest.mark.parametrize(
    "obj,prefix,expected",
    [
        ("assets/tiles.bin", "", "tiles"),
        (FileRef("assets/tiles.bin"), "gfx_", "gfx_tiles"),
        ("assets/title-screen.v2.bin", "", "title_screen_v2"),
        ("font/8x8.bin", "", "_8x8"),
        ("noext", "p_", "p_noext"),
    ],
)
def test_symbol(obj: Any, prefix: str, expected: str) -> None:
    """Test C symbol names derived from file names.

    :param obj: File reference or path.
    :param prefix: Symbol prefix.
    :param expected: Expected symbol.
    """
    assert symbol(obj, prefix) == expected


def test_symbol_of_data() -> None:
    """Test that in-memory data has no symbol name."""
    with pytest.raises(WSWANError, match="Could not determine file name"):
        symbol(DataRef(b"\x00"))
