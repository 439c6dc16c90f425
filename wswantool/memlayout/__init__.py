#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Memory layout compiler: layout normalization and linker script emission."""

from wswantool.memlayout.config import LinkConfig
from wswantool.memlayout.layout import MemoryModel, NormalizedLayout, RegionSpec, normalize
from wswantool.memlayout.linkscript import BankTag, emit

__all__ = [
    "BankTag",
    "LinkConfig",
    "MemoryModel",
    "NormalizedLayout",
    "RegionSpec",
    "emit",
    "normalize",
]
