#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""wswantool exception classes.

This module defines the base exception hierarchy used throughout the package
for consistent error handling and reporting.
"""

from typing import Optional

#######################################################################
# # wswantool Exceptions
#######################################################################


class WSWANError(Exception):
    """wswantool Base Exception.

    Base exception class for all package errors. Provides consistent error
    formatting across the layout compiler, the helpers and the CLI.

    :cvar fmt: Default error message format template.
    """

    fmt = "WSWAN: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class WSWANKeyError(WSWANError, KeyError):
    """wswantool Key Error exception for missing or invalid keys."""


class WSWANValueError(WSWANError, ValueError):
    """wswantool standard value error exception."""


class WSWANTypeError(WSWANError, TypeError):
    """wswantool standard type error exception."""


class WSWANOverlapError(WSWANError, ValueError):
    """wswantool exception for overlapping address ranges."""
