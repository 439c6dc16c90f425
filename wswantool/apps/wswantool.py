#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI application generating build artifacts of WonderSwan firmware images."""

import io
import logging
import os
import sys
from typing import Optional

import click

from wswantool.apps.utils import wswan_logger
from wswantool.apps.utils.common_cli_options import (
    CommandsTreeGroup,
    wswan_apps_common_options,
    wswan_config_option,
    wswan_output_option,
)
from wswantool.apps.utils.utils import INT, WSWANAppError, catch_wswan_error
from wswantool.memlayout.config import LinkConfig
from wswantool.utils.bin2c import Bin2CEntry, bin2c
from wswantool.utils.config import Config
from wswantool.utils.misc import get_printable_path, write_file
from wswantool.utils.process import ProcessContext, symbol, to_data

logger = logging.getLogger(__name__)


@click.group(name="wswantool", no_args_is_help=True, cls=CommandsTreeGroup)
@wswan_apps_common_options
def main(log_level: int) -> None:
    """Collection of build utilities for WonderSwan firmware images."""
    wswan_logger.install(level=log_level)


@main.command(name="linkscript", no_args_is_help=True)
@wswan_config_option()
@wswan_output_option(help="Path to the generated linker script.")
@click.option("--rom-start", type=INT(), help="ROM origin, overrides the configuration.")
@click.option("--rom-length", type=INT(), help="ROM length, overrides the configuration.")
@click.option(
    "--depfile",
    type=click.Path(resolve_path=True, dir_okay=False),
    help="Path to a Makefile dependency file listing the configuration file.",
)
def linkscript(
    config: str,
    output: str,
    rom_start: Optional[int],
    rom_length: Optional[int],
    depfile: Optional[str],
) -> None:
    """Generate linker script from the memory layout configuration."""
    with ProcessContext() as ctx:
        ctx.access_file(config, "r")
        link_config = LinkConfig.load_from_config(
            Config.create_from_file(config), rom_start=rom_start, rom_length=rom_length
        )
        script = io.StringIO()
        link_config.write_linker_script(script)
        write_file(script.getvalue(), output)
        ctx.access_file(output, "w")
        if depfile:
            ctx.write_dependency_file(depfile)
    click.echo(f"Linker script has been written to '{get_printable_path(output)}'")


@main.command(name="bin2c", no_args_is_help=True)
@wswan_output_option(help="Path to the generated C source file.")
@click.option(
    "--header",
    type=click.Path(resolve_path=True, dir_okay=False),
    help="Path to the generated C header file, defaults to the source path with .h extension.",
)
@click.option("--align", type=INT(), help="Alignment of the arrays in bytes.")
@click.option("--address-space", help="Named address space of the arrays, e.g. __far.")
@click.option("--prefix", default="", help="Prefix of the array names.")
@click.argument(
    "inputs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
def bin2c_command(
    output: str,
    header: Optional[str],
    align: Optional[int],
    address_space: Optional[str],
    prefix: str,
    inputs: tuple[str, ...],
) -> None:
    """Embed binary files into a C source and header pair."""
    header = header or os.path.splitext(output)[0] + ".h"
    if align is not None and align <= 0:
        raise WSWANAppError(f"Alignment must be a positive number, got {align}")

    with ProcessContext() as ctx:
        entries: dict[str, Bin2CEntry] = {}
        for input_file in inputs:
            name = symbol(input_file, prefix)
            if name in entries:
                raise WSWANAppError(f"Duplicate array name {name} for input {input_file}")
            entries[name] = Bin2CEntry(to_data(input_file, ctx).data, align, address_space)

        c_file = io.StringIO()
        h_file = io.StringIO()
        bin2c(c_file, h_file, "wswantool", entries)
        write_file(c_file.getvalue(), output)
        write_file(h_file.getvalue(), header)
    click.echo(
        f"Embedded {len(entries)} file(s) into '{get_printable_path(output)}' "
        f"and '{get_printable_path(header)}'"
    )


@main.command(name="layout", no_args_is_help=True)
@wswan_config_option()
def layout(config: str) -> None:
    """Print the normalized memory layout of the configuration."""
    link_config = LinkConfig.load_from_config(Config.create_from_file(config))
    click.echo(str(link_config.layout))


@catch_wswan_error
def safe_main() -> None:
    """Call the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
