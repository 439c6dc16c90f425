#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Logger installation tests."""

import io
import logging

import colorama

from wswantool.apps.utils import wswan_logger


def test_install_plain() -> None:
    """Test the plain formatter and the level of the stream handler."""
    stream = io.StringIO()
    logger = logging.getLogger("wswantool.test.plain")
    wswan_logger.install(
        level=logging.INFO, stream=stream, colored=False, logger=logger, create_debug_logger=False
    )
    logger.debug("hidden")
    logger.info(f"{colorama.Fore.GREEN}shown{colorama.Fore.RESET}")
    output = stream.getvalue()
    assert "hidden" not in output
    assert "INFO:wswantool.test.plain:shown" in output
    assert "\x1b[" not in output


def test_install_colored() -> None:
    """Test that the colored formatter wraps messages in color codes."""
    stream = io.StringIO()
    logger = logging.getLogger("wswantool.test.colored")
    wswan_logger.install(stream=stream, colored=True, logger=logger, create_debug_logger=False)
    logger.info("not shown")
    logger.warning("careful")
    output = stream.getvalue()
    assert "not shown" not in output
    assert colorama.Fore.YELLOW in output
    assert "WARNING:wswantool.test.colored:careful" in output
