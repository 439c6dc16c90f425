#!/usr/bin/env python
# -*- coding: UTF-8 -*-
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Configuration management utilities.

This module provides the configuration dictionary used by the command line
tools, including nested key addressing, typed getters and schema validation.
"""

import logging
import os
from typing import Any, Optional, Union

from typing_extensions import Self

from wswantool.exceptions import WSWANError, WSWANKeyError
from wswantool.utils.misc import load_configuration, value_to_int
from wswantool.utils.schema_validator import check_config

logger = logging.getLogger(__name__)


class Config(dict):
    """Configuration Manager.

    This class extends Python's dictionary to support nested key addressing using
    path separators, file-based configuration loading and keeps the context about
    the configuration source and search paths.

    :cvar SEP: Path separator used for nested key addressing in configuration.
    """

    SEP = "/"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize configuration dictionary with default settings.

        :param args: Variable length argument list passed to parent dictionary constructor.
        :param kwargs: Arbitrary keyword arguments passed to parent dictionary constructor.
        """
        super().__init__(*args, **kwargs)
        self.config_dir = os.getcwd()
        self.config_name = ""
        self.search_paths: list[str] = []

    @classmethod
    def create_from_file(cls, file_path: str) -> Self:
        """Create configuration object from file.

        :param file_path: Path to the configuration file to load.
        :return: Configuration object with loaded data and set search paths.
        """
        cfg_abs_path = os.path.abspath(file_path).replace("\\", "/")
        cfg = cls(load_configuration(cfg_abs_path))
        cfg_dir = os.path.dirname(cfg_abs_path)
        cfg.search_paths = [cfg_dir]
        cfg.config_dir = cfg_dir
        cfg.config_name = os.path.basename(cfg_abs_path)
        return cfg

    @classmethod
    def get_path(cls, key: Union[str, int]) -> list:
        """Get keypath in list format.

        :param key: Key to convert - either string path with separators or single integer.
        :return: List of path components as integers or strings.
        """
        ret: list[Union[int, str]] = []

        if isinstance(key, int):
            return [str(key)]
        for k in key.split(cls.SEP):
            try:
                ret.append(value_to_int(k))
            except WSWANError:
                ret.append(k)
        return ret

    def get(self, key: str, defaults: Optional[Any] = None) -> Any:
        """Get configuration value with nested key support.

        :param key: Key name including support of key path with '/'.
        :param defaults: Default value in case that item doesn't exist, defaults to None.
        :return: Configuration value or default if key not found.
        """
        try:
            return self.__getitem__(key)
        except WSWANError:
            return defaults

    def __getitem__(self, key: str) -> Any:
        """Get configuration value by key path.

        :param key: Configuration key or '/' separated path to nested value
        :raises WSWANError: Invalid key path or unsupported data type in path
        :raises WSWANKeyError: Key doesn't exist in configuration
        :return: Configuration value at the specified key path
        """

        def gets(source: Any, key_path: list) -> Any:
            key = key_path.pop(0)
            if isinstance(source, list):
                if not isinstance(key, int):
                    raise WSWANError("Invalid key path - from list must be used number as key")
                ret = source[key]
            elif isinstance(source, dict):
                ret = dict.get(source, key)
            else:
                raise WSWANError("Invalid configuration key path.")

            if ret is None:
                raise WSWANKeyError(f"The {key} doesn't exists in {str(self)}")

            if len(key_path):
                return gets(ret, key_path)

            return ret

        try:
            return gets(self, self.get_path(key))
        except WSWANKeyError:
            return gets(self, [key])

    def get_dict(self, key: str, default: Optional[dict] = None) -> dict:
        """Get the key value as dictionary.

        :param key: Key name of the sub configuration.
        :param default: Default value if configuration doesn't contain the key.
        :raises WSWANError: If the retrieved value is not a dictionary type.
        :return: Sub configuration as dictionary.
        """
        ret = self.get(key, default)
        if not isinstance(ret, dict):
            raise WSWANError(f"The value is not dictionary at key: {key}")
        return ret

    def get_int(self, key: str, default: Optional[int] = None) -> int:
        """Get the key value as integer.

        :param key: Key name of the sub configuration.
        :param default: Default value if configuration doesn't contain it.
        :raises WSWANError: The value is not integer at specified key.
        :return: Integer loaded from configuration.
        """
        ret = self.get(key, default)
        if ret is None:
            raise WSWANError(f"The value is not integer at key: {key}")
        return value_to_int(ret)

    def get_str(self, key: str, default: Optional[str] = None) -> str:
        """Get the key value as string.

        :param key: Key name of the configuration entry.
        :param default: Default value to return if the key doesn't exist in configuration.
        :raises WSWANError: If the retrieved value is not a string type.
        :return: Configuration value as string.
        """
        ret = self.get(key, default)
        if not isinstance(ret, str):
            raise WSWANError(f"The value is not string at key: {key}")
        return ret

    def check(self, schemas: list[dict[str, Any]], check_unknown_props: bool = False) -> None:
        """Check configuration against validation schemas.

        :param schemas: List of validation schemas.
        :param check_unknown_props: If True, check for unknown properties in config
            and print warnings.
        """
        check_config(
            self, schemas, search_paths=self.search_paths, check_unknown_props=check_unknown_props
        )
