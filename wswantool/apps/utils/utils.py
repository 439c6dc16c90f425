#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Application utilities and helper functions.

This module provides the application error, integer parameter parsing and the
error catching decorator used by the command-line application.
"""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from wswantool import WSWANTOOL_DEBUG_LOG_FILE, WSWANTOOL_DEBUG_LOGGING_DISABLED
from wswantool.exceptions import WSWANError

logger = logging.getLogger(__name__)


class WSWANAppError(WSWANError):
    """Application error exception for CLI tools.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "{description}"

    def __init__(self, desc: Optional[str] = None, error_code: int = 1) -> None:
        """Initialize the AppError.

        :param desc: Description to print out on command line, defaults to None
        :param error_code: Error code passed to OS, defaults to 1
        """
        super().__init__(desc)
        self.description = desc
        self.error_code = error_code


class INT(click.ParamType):
    """Click parameter type for integers in binary, octal, decimal or hex notation.

    :cvar name: Parameter type name used by Click framework.
    """

    name = "integer"

    def __init__(self, base: int = 0) -> None:
        """Initialize custom INT param class.

        :param base: requested base for the number, defaults to 0
        """
        super().__init__()
        self.base = base

    # pylint: disable=inconsistent-return-statements
    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> int:
        """Perform the conversion str -> int.

        :param value: value to convert
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: value as integer
        """
        if isinstance(value, int):
            return value
        try:
            return int(value, self.base)
        except TypeError:
            self.fail(
                "expected string for int() conversion, got "
                f"{value!r} of type {type(value).__name__}",
                param,
                ctx,
            )
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


def catch_wswan_error(function: Callable) -> Callable:
    """Catch and handle WSWANError and other exceptions.

    WSWANAppError exits with its own error code, WSWANError and AssertionError
    exit with code 2 and any other exception exits with code 3. The message is
    printed to stderr and the traceback goes to the debug log.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except WSWANAppError as app_exc:
            if app_exc.description:
                click.echo(f"{app_exc.__class__.__name__}: {app_exc}", err=True)
            if 0 < app_exc.error_code < 256:
                sys.exit(app_exc.error_code)
            sys.exit(1)
        except (AssertionError, WSWANError) as wswan_exc:
            click.echo(f"{wswan_exc.__class__.__name__}: {wswan_exc}", err=True)
            logger.debug(str(wswan_exc), exc_info=True)
            if not WSWANTOOL_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {WSWANTOOL_DEBUG_LOG_FILE} for more info", fg="yellow"
                )
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            sys.exit(3)

    return wrapper
