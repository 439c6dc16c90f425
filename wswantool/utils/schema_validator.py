#!/usr/bin/env python
# -*- coding: UTF-8 -*-
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Schema-based configuration validation utilities.

This module validates configuration data against JSON schemas compiled with
fastjsonschema. Partial schemas are merged together before validation.
"""

import copy
import json
import logging
import os
from typing import Any, Callable, Optional

import fastjsonschema
from deepmerge import always_merger

from wswantool import WSWANTOOL_DEBUG
from wswantool.exceptions import WSWANError
from wswantool.utils.misc import find_dir, find_file, value_to_int

logger = logging.getLogger(__name__)


def _is_number(param: Any) -> bool:
    """Check if the input parameter represents a number.

    :param param: Input value to analyze for numeric representation.
    :return: True if input represents a number, False otherwise.
    """
    try:
        value_to_int(param)
        return True
    except WSWANError:
        return False


def _print_validation_fail_reason(
    exc: fastjsonschema.JsonSchemaValueException,
    extra_formatters: Optional[dict[str, Callable[[str], bool]]] = None,
) -> str:
    """Format JSON schema validation failure into human-readable error message.

    :param exc: The JSON schema validation exception to process.
    :param extra_formatters: Optional dictionary of custom format validators for schema validation.
    :return: Formatted error message explaining the validation failure reason.
    """

    def process_nested_rule(
        exception: fastjsonschema.JsonSchemaValueException,
        extra_formatters: Optional[dict[str, Callable[[str], bool]]],
    ) -> str:
        message = ""
        for rule_def_ix, rule_def in enumerate(exception.rule_definition):
            try:
                validator = fastjsonschema.compile(rule_def, formats=extra_formatters)
                validator(exception.value)
                message += f"\nRule#{rule_def_ix} passed.\n"
            except fastjsonschema.JsonSchemaValueException as _exc:
                message += (
                    f"\nReason of fail for {exception.rule} rule#{rule_def_ix}: "
                    f"\n {_print_validation_fail_reason(_exc , extra_formatters)}\n"
                )
        return message

    message = str(exc)
    if exc.rule == "required":
        missing = filter(lambda x: x not in exc.value.keys(), exc.rule_definition)
        message += f"; Missing field(s): {', '.join(missing)}"
    elif exc.rule == "format":
        if exc.rule_definition == "file":
            message += f"; Non-existing file: {exc.value}"
        elif exc.rule_definition == "number":
            message += f"; Value '{exc.value}' is not a valid number"
    elif exc.rule in ("anyOf", "oneOf"):
        message += process_nested_rule(exc, extra_formatters=extra_formatters)
    return message


def check_unknown_properties(config_dict: dict, schema_dict: dict, path: str = "") -> None:
    """Recursively check for unknown properties in configuration against schema.

    Unknown properties are reported as warnings, they do not fail the validation.

    :param config_dict: Configuration dictionary to check.
    :param schema_dict: Schema dictionary containing property definitions.
    :param path: Current path in the configuration for error reporting.
    """
    if not isinstance(config_dict, dict) or "properties" not in schema_dict:
        return

    properties = schema_dict["properties"]
    for key, value in config_dict.items():
        current_path = f"{path}/{key}" if path else key
        if key not in properties:
            if "additionalProperties" in schema_dict:
                continue
            logger.warning(f"Unknown property '{current_path}' found in configuration")
            continue
        check_unknown_properties(value, properties[key], current_path)


def check_config(
    config: dict[str, Any],
    schemas: list[dict[str, Any]],
    extra_formatters: Optional[dict[str, Callable[[str], bool]]] = None,
    search_paths: Optional[list[str]] = None,
    check_unknown_props: bool = False,
) -> None:
    """Check the configuration by provided list of validation schemas.

    :param config: Configuration dictionary to validate.
    :param schemas: List of JSON schema dictionaries for validation.
    :param extra_formatters: Additional custom format validators for schema validation.
    :param search_paths: List of directory paths to search for files during validation.
    :param check_unknown_props: Whether to check and warn about unknown properties in config.
    :raises WSWANError: Invalid validation schema or configuration validation failed.
    """
    custom_formatters: dict[str, Callable[[str], bool]] = {
        "dir": lambda x: bool(find_dir(x, search_paths=search_paths, raise_exc=False)),
        "file": lambda x: bool(find_file(x, search_paths=search_paths, raise_exc=False)),
        "file_name": lambda x: os.path.basename(x.replace("\\", "/")) not in ("", None),
        "number": _is_number,
    }

    config_to_check = copy.deepcopy(config)

    schema: dict[str, Any] = {}
    for sch in schemas:
        always_merger.merge(schema, copy.deepcopy(sch))
    formats = always_merger.merge(custom_formatters, extra_formatters or {})
    if check_unknown_props and "properties" in schema:
        check_unknown_properties(config_to_check, schema)
    if WSWANTOOL_DEBUG:
        logger.debug(f"Merged validation schema:\n{json.dumps(schema, indent=2)}")
        config_dump = json.dumps(config_to_check, indent=2, default=str)
        logger.debug(f"Configuration to check:\n{config_dump}")

    try:
        validator = fastjsonschema.compile(schema, formats=formats)
    except (TypeError, fastjsonschema.JsonSchemaDefinitionException) as exc:
        raise WSWANError(f"Invalid validation schema to check config: {str(exc)}") from exc
    try:
        validator(config_to_check)
    except fastjsonschema.JsonSchemaValueException as exc:
        message = _print_validation_fail_reason(exc, formats)
        raise WSWANError(f"Configuration validation failed: {message}") from exc
