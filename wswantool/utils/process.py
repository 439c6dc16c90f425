#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Process context and file-or-data conversions.

Build steps pass their inputs either as files on disk or as in-memory data.
External tools need real files, code generators need bytes. The helpers in this
module convert between the two representations, allocating temporary files
inside an explicit :class:`ProcessContext` which also records the accessed
files so a Makefile dependency file can be written at the end of the step.
"""

import logging
import os
from dataclasses import dataclass
from tempfile import TemporaryDirectory
from types import TracebackType
from typing import Optional, Type, Union

from typing_extensions import Self

from wswantool.exceptions import WSWANError, WSWANTypeError
from wswantool.utils.misc import load_binary, to_c_identifier, write_file

logger = logging.getLogger(__name__)


class UnsupportedInputType(WSWANTypeError):
    """Value is neither a path-like nor a byte-buffer-like value."""

    fmt = "{description}"

    def __init__(self, value: object) -> None:
        """Initialize the exception.

        :param value: Offending value.
        """
        super().__init__(f"unsupported type: {type(value).__name__}")


@dataclass(frozen=True)
class FileRef:
    """Input or output available as a file on disk."""

    path: str


@dataclass(frozen=True)
class DataRef:
    """Input or output available as bytes in memory."""

    data: bytes


FileOrData = Union[FileRef, DataRef, str, "os.PathLike[str]", bytes, bytearray]


class ProcessContext:
    """Context of one build step.

    Owns the temporary directory of the step and records every file the step
    reads or writes. Use it as a context manager; the temporary directory is
    removed on exit unless it was supplied by the caller.
    """

    def __init__(self, temp_dir: Optional[str] = None) -> None:
        """Initialize the process context.

        :param temp_dir: Existing directory for temporary files, defaults to a new one.
        """
        self.temp_dir = temp_dir
        self.dependencies: list[str] = []
        self.targets: list[str] = []
        self._owned_dir: Optional[TemporaryDirectory] = None
        self._tmpfile_counter = 0

    def __enter__(self) -> Self:
        if self.temp_dir is None:
            self._owned_dir = TemporaryDirectory(prefix="wswantool-")
            self.temp_dir = self._owned_dir.name
            logger.debug(f"Created temporary directory {self.temp_dir}")
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]] = None,
        exc_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        if self._owned_dir is not None:
            logger.debug(f"Removing temporary directory {self.temp_dir}")
            self._owned_dir.cleanup()
            self._owned_dir = None
            self.temp_dir = None

    def tmpfile(self, ext: str = "") -> FileRef:
        """Allocate a temporary file name.

        The file itself is not created. It is deleted together with the context.

        :param ext: File extension including the dot.
        :raises WSWANError: The context is not active.
        :return: Reference to the temporary file.
        """
        if self.temp_dir is None:
            raise WSWANError("Process context is not active")
        self._tmpfile_counter += 1
        return FileRef(os.path.join(self.temp_dir, f"wf{self._tmpfile_counter:05d}{ext}"))

    def access_file(self, path: str, mode: str = "r") -> None:
        """Record a file access done outside of the helpers of this module.

        Read accesses become dependencies, write accesses become targets of the
        dependency file.

        :param path: Accessed file.
        :param mode: File access mode as for :func:`open`.
        """
        path = path.replace("\\", "/")
        records = self.targets if any(m in mode for m in "wax") else self.dependencies
        if path not in records:
            records.append(path)

    def write_dependency_file(self, path: str, target: Optional[str] = None) -> None:
        """Write a Makefile rule listing the recorded dependencies.

        :param path: Dependency file to write.
        :param target: Rule target, defaults to the recorded targets.
        :raises WSWANError: No target is known.
        """
        targets = [target] if target else self.targets
        if not targets:
            raise WSWANError("No target for the dependency file")
        rule = " ".join(targets) + ":"
        for dependency in self.dependencies:
            rule += f" \\\n  {dependency}"
        write_file(rule + "\n", path)


def filename(obj: FileOrData) -> Optional[str]:
    """Get the file name of a file reference or path.

    :param obj: File reference, path or data.
    :raises UnsupportedInputType: Value is neither path-like nor bytes-like.
    :return: File name, None for in-memory data.
    """
    if isinstance(obj, FileRef):
        return obj.path
    if isinstance(obj, (DataRef, bytes, bytearray)):
        return None
    if isinstance(obj, (str, os.PathLike)):
        return os.fspath(obj)
    raise UnsupportedInputType(obj)


def to_file(ctx: ProcessContext, obj: FileOrData) -> FileRef:
    """Convert a path or data to a file reference.

    Data is written to a new temporary file of the context.

    :param ctx: Active process context.
    :param obj: File reference, path or data.
    :raises UnsupportedInputType: Value is neither path-like nor bytes-like.
    :return: File reference.
    """
    if isinstance(obj, FileRef):
        return obj
    if isinstance(obj, (DataRef, bytes, bytearray)):
        data = obj.data if isinstance(obj, DataRef) else bytes(obj)
        result = ctx.tmpfile(".tmp")
        write_file(data, result.path, mode="wb")
        return result
    if isinstance(obj, (str, os.PathLike)):
        return FileRef(os.fspath(obj))
    raise UnsupportedInputType(obj)


def to_data(obj: FileOrData, ctx: Optional[ProcessContext] = None) -> DataRef:
    """Convert a path or file reference to in-memory data.

    :param obj: File reference, path or data.
    :param ctx: Process context recording the file read, optional.
    :raises UnsupportedInputType: Value is neither path-like nor bytes-like.
    :return: Data reference.
    """
    if isinstance(obj, DataRef):
        return obj
    if isinstance(obj, (bytes, bytearray)):
        return DataRef(bytes(obj))
    path = filename(obj)
    assert path is not None
    if ctx is not None:
        ctx.access_file(path, "rb")
    return DataRef(load_binary(path))


def symbol(obj: FileOrData, prefix: str = "") -> str:
    """Create a C symbol name from the base name of a file.

    :param obj: File reference or path.
    :param prefix: Symbol prefix.
    :raises WSWANError: The value has no file name.
    :return: C identifier, e.g. ``gfx_tiles`` for ``assets/tiles.bin`` with prefix ``gfx_``.
    """
    path = filename(obj)
    if path is None:
        raise WSWANError("Could not determine file name for symbol")
    basename = os.path.splitext(os.path.basename(path))[0]
    return prefix + to_c_identifier(basename)
