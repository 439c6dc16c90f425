#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Link configuration loading.

A link configuration file gathers everything the linker script needs: the
memory model and the RAM layout, the ROM bounds and the exported constants.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, TextIO

from wswantool.memlayout.layout import MemoryModel, NormalizedLayout, normalize
from wswantool.memlayout.linkscript import emit
from wswantool.utils.config import Config
from wswantool.utils.misc import value_to_int

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_MODEL = MemoryModel.MEDIUM

_NUMBER = {"type": ["integer", "string"], "format": "number"}

LINK_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "title": "Link configuration",
    "required": ["memory", "rom"],
    "properties": {
        "memory": {
            "type": "object",
            "required": ["layout"],
            "properties": {
                "model": {"type": "string", "enum": MemoryModel.labels()},
                "layout": {
                    "type": "object",
                    "minProperties": 1,
                    "additionalProperties": {
                        "type": "array",
                        "minItems": 2,
                        "maxItems": 2,
                        "items": _NUMBER,
                    },
                },
            },
        },
        "rom": {
            "type": "object",
            "required": ["start", "length"],
            "properties": {"start": _NUMBER, "length": _NUMBER},
        },
        "constants": {"type": "object", "additionalProperties": _NUMBER},
    },
}


@dataclass
class LinkConfig:
    """Inputs of one linker script emission."""

    layout: NormalizedLayout
    rom_start: int
    rom_length: int
    constants: dict[str, int] = field(default_factory=dict)

    @staticmethod
    def get_validation_schemas() -> list[dict[str, Any]]:
        """Get validation schemas of the link configuration.

        :return: List of validation schemas.
        """
        return [LINK_CONFIG_SCHEMA]

    @classmethod
    def load_from_config(
        cls,
        config: Config,
        rom_start: Optional[int] = None,
        rom_length: Optional[int] = None,
    ) -> "LinkConfig":
        """Validate the configuration and normalize its memory layout.

        :param config: Link configuration.
        :param rom_start: ROM origin overriding the configuration.
        :param rom_length: ROM length overriding the configuration.
        :return: Link configuration object.
        """
        config.check(cls.get_validation_schemas(), check_unknown_props=True)
        raw_layout = {
            name: [value_to_int(bound) for bound in bounds]
            for name, bounds in config.get_dict("memory/layout").items()
        }
        model = config.get_str("memory/model", DEFAULT_MEMORY_MODEL.label)
        layout = normalize(raw_layout, model)
        return cls(
            layout=layout,
            rom_start=rom_start if rom_start is not None else config.get_int("rom/start"),
            rom_length=rom_length if rom_length is not None else config.get_int("rom/length"),
            constants={
                name: value_to_int(value)
                for name, value in config.get_dict("constants", {}).items()
            },
        )

    def write_linker_script(self, stream: TextIO, generated_on: Optional[str] = None) -> None:
        """Emit the linker script of this configuration.

        :param stream: Writable text sink.
        :param generated_on: Generation date for the header comment, defaults to now.
        """
        emit(stream, self.layout, self.constants, self.rom_start, self.rom_length, generated_on)
