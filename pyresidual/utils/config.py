# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
"""Configuration of pyresidual.

Settings are read from ``.pyresidual.yaml`` in the directory named by ``PYRESIDUAL_HOME``,
or else in the home directory, and overridden by ``PYRESIDUAL_*`` environment variables.
A double underscore in a variable name nests, a single one becomes a dash, so
``PYRESIDUAL_MAX_WORKERS=8`` sets ``max-workers``.

Keys:
    max-workers: The size of the thread pool used to compute residuals.
    case-sensitive: Whether column names in filters are matched case sensitively (default true).
"""
import logging
import os
from typing import List, Optional

import yaml

from pyresidual.typedef import FrozenDict, RecursiveDict

PYRESIDUAL = "pyresidual_"
HOME = "HOME"
PYRESIDUAL_HOME = "PYRESIDUAL_HOME"
PYRESIDUAL_YML = ".pyresidual.yaml"
UTF8 = "utf-8"

_TRUE_STRINGS = {"y", "yes", "t", "true", "on", "1"}
_FALSE_STRINGS = {"n", "no", "f", "false", "off", "0"}

logger = logging.getLogger(__name__)


def merge_config(lhs: RecursiveDict, rhs: RecursiveDict) -> RecursiveDict:
    """Merges right-hand side into the left-hand side, nested dicts are merged key by key."""
    new_config = lhs.copy()
    for rhs_key, rhs_value in rhs.items():
        if rhs_key in new_config:
            lhs_value = new_config[rhs_key]
            if isinstance(lhs_value, dict) and isinstance(rhs_value, dict):
                new_config[rhs_key] = merge_config(lhs_value, rhs_value)
            else:
                new_config[rhs_key] = rhs_value
        else:
            new_config[rhs_key] = rhs_value
    return new_config


def _lowercase_dictionary_keys(input_dict: RecursiveDict) -> RecursiveDict:
    """Lowers all the keys of a dictionary in a recursive manner, to make the lookup case-insensitive."""
    return {k.lower(): _lowercase_dictionary_keys(v) if isinstance(v, dict) else v for k, v in input_dict.items()}


class Config:
    config: RecursiveDict

    def __init__(self) -> None:
        config = self._from_configuration_files() or {}
        config = merge_config(config, self._from_environment_variables({}))
        self.config = FrozenDict(**config)

    @staticmethod
    def _from_configuration_files() -> Optional[RecursiveDict]:
        """Loads the first configuration file that it finds.

        Will first look in the PYRESIDUAL_HOME env variable, and then in the home directory.
        """

        def _load_yaml(directory: Optional[str]) -> Optional[RecursiveDict]:
            if directory:
                path = os.path.join(directory, PYRESIDUAL_YML)
                if os.path.isfile(path):
                    with open(path, encoding=UTF8) as f:
                        file_config = yaml.safe_load(f) or {}
                    logger.debug("Loaded configuration from %s", path)
                    return _lowercase_dictionary_keys(file_config)
            return None

        # Give priority to the PYRESIDUAL_HOME directory
        if home_config := _load_yaml(os.environ.get(PYRESIDUAL_HOME)):
            return home_config
        # Look into the home directory
        if home_config := _load_yaml(os.environ.get(HOME)):
            return home_config
        # Didn't find a config
        return None

    @staticmethod
    def _from_environment_variables(config: RecursiveDict) -> RecursiveDict:
        """Reads the environment variables, to check if there are any prepended by PYRESIDUAL_.

        Args:
            config: Existing configuration that's being amended with configuration from environment variables.

        Returns:
            Amended configuration.
        """

        def set_property(_config: RecursiveDict, path: List[str], config_value: str) -> None:
            while len(path) > 0:
                element = path.pop(0)
                if len(path) == 0:
                    _config[element] = config_value
                else:
                    if element not in _config:
                        _config[element] = {}
                    nested = _config[element]
                    if not isinstance(nested, dict):
                        raise ValueError(f"Incompatible configurations for table properties: {element}")
                    _config = nested

        for env_var, config_value in os.environ.items():
            # Make it lowercase to make it case-insensitive
            env_var_lower = env_var.lower()
            if env_var_lower.startswith(PYRESIDUAL) and env_var_lower != PYRESIDUAL_HOME.lower():
                key = env_var_lower[len(PYRESIDUAL) :]
                parts = [part.replace("_", "-") for part in key.split("__")]
                set_property(config, parts, config_value)

        return config

    def get(self, key: str) -> Optional[object]:
        return self.config.get(key)

    def get_int(self, key: str) -> Optional[int]:
        if (val := self.config.get(key)) is not None:
            try:
                return int(val)  # type: ignore
            except (TypeError, ValueError) as err:
                raise ValueError(f"{key} should be an integer or left unset. Current value: {val}") from err
        return None

    def get_bool(self, key: str) -> Optional[bool]:
        if (val := self.config.get(key)) is not None:
            if isinstance(val, bool):
                return val
            normalized = str(val).strip().lower()
            if normalized in _TRUE_STRINGS:
                return True
            elif normalized in _FALSE_STRINGS:
                return False
            raise ValueError(f"{key} should be a boolean or left unset. Current value: {val}")
        return None
