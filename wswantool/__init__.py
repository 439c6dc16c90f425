#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""wswantool - build-time helpers for segmented 16-bit handheld targets.

The package compiles a declarative RAM map into a linker control script and
provides the small helpers a firmware build pipeline needs around it:

    - memory layout normalization and validation
    - linker script emission with bank-tagged section families
    - embedding of binary blobs into C source/header pairs
    - explicit process context for temporary files and dependency tracking
"""

import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs


def get_wswantool_version() -> Version:
    """Get wswantool version information.

    :return: Parsed version object containing the package version.
    """
    from .__version__ import __version__ as wswantool_version

    return parse(wswantool_version)


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version = get_wswantool_version()

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)

WSWANTOOL_VERSION_BASE = version.base_version
WSWANTOOL_PLATFORM_DIRS = PlatformDirs(
    appauthor="wonderful",
    appname="wswantool",
    version=WSWANTOOL_VERSION_BASE,
)

WSWANTOOL_DEBUG = value_to_bool(os.environ.get("WSWANTOOL_DEBUG"))

WSWANTOOL_DEBUG_LOGGING_DISABLED = value_to_bool(
    os.environ.get("WSWANTOOL_DEBUG_LOGGING_DISABLED")
)
WSWANTOOL_DEBUG_LOG_FILE = os.environ.get(
    "WSWANTOOL_DEBUG_LOG_FILE", os.path.join(WSWANTOOL_PLATFORM_DIRS.user_log_dir, "debug.log")
)
