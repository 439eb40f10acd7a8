#
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
from __future__ import annotations

import functools
import json
import logging
import os
from configparser import ConfigParser
from json.decoder import JSONDecodeError
from typing import TYPE_CHECKING, Any

from spanner_admin.exceptions import SpannerAdminConfigException
from spanner_admin.secrets import DEFAULT_SECRETS_SEARCH_PATH
from spanner_admin.utils.module_loading import import_string

if TYPE_CHECKING:
    from spanner_admin.secrets.base_secrets import BaseSecretsBackend

log = logging.getLogger(__name__)

ENV_VAR_PREFIX = "SPANNER_ADMIN__"

_NOT_SET = object()


def expand_env_var(env_var: str | None) -> str | None:
    """
    Expand (potentially nested) env vars.

    Repeat and apply `expandvars` and `expanduser` until
    interpolation stops having any effect.
    """
    if not env_var:
        return env_var
    while True:
        interpolated = os.path.expanduser(os.path.expandvars(str(env_var)))
        if interpolated == env_var:
            return interpolated
        else:
            env_var = interpolated


def _default_config_file_path(file_name: str) -> str:
    templates_dir = os.path.join(os.path.dirname(__file__), "config_templates")
    return os.path.join(templates_dir, file_name)


@functools.lru_cache(maxsize=None)
def _DEFAULT_CONFIG() -> str:
    path = _default_config_file_path("default_spanner_admin.cfg")
    with open(path) as fh:
        return fh.read()


class SpannerAdminConfigParser(ConfigParser):
    """
    Custom ConfigParser supporting built-in defaults and environment overrides.

    Options are looked up, in order, in the ``SPANNER_ADMIN__{SECTION}__{KEY}`` environment
    variable, in the files read into this parser, and in the built-in defaults.

    :param default_config: default configuration (in the form of ini file).
    """

    def __init__(self, default_config: str | None = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._default_values = ConfigParser()
        self._default_values.read_string(_DEFAULT_CONFIG() if default_config is None else default_config)

    def optionxform(self, optionstr: str) -> str:
        return optionstr.lower()

    def _env_var_name(self, section: str, key: str) -> str:
        return f"{ENV_VAR_PREFIX}{section.replace('.', '_').upper()}__{key.upper()}"

    def _get_env_var_option(self, section: str, key: str) -> str | None:
        # must have format SPANNER_ADMIN__{SECTION}__{KEY} (note double underscore)
        env_var = self._env_var_name(section, key)
        if env_var in os.environ:
            return expand_env_var(os.environ[env_var])
        return None

    def get_default_value(self, section: str, key: str) -> str | None:
        if self._default_values.has_option(section, key):
            return self._default_values.get(section, key)
        return None

    def get_mandatory_value(self, section: str, key: str, **kwargs) -> str:
        value = self.get(section, key, **kwargs)
        if value is None:
            raise ValueError(f"The value {section}/{key} should be set!")
        return value

    def get(  # type: ignore[override]
        self, section: str, key: str, fallback: Any = _NOT_SET, **kwargs
    ) -> str | None:
        section = section.lower()
        key = key.lower()

        # first check environment variables
        option = self._get_env_var_option(section, key)
        if option is not None:
            return option

        # ...then the config file
        if super().has_option(section, key):
            return expand_env_var(super().get(section, key, **kwargs))

        # ...then the default config
        option = self.get_default_value(section, key)
        if option is not None:
            return expand_env_var(option)

        if fallback is not _NOT_SET:
            return fallback

        log.warning("section/key [%s/%s] not found in config", section, key)
        raise SpannerAdminConfigException(f"section/key [{section}/{key}] not found in config")

    def has_option(self, section: str, option: str) -> bool:
        return self.get(section, option, fallback=None) is not None

    def getboolean(self, section: str, key: str, **kwargs) -> bool:  # type: ignore[override]
        val = str(self.get(section, key, **kwargs)).lower().strip()
        if "#" in val:
            val = val.split("#")[0].strip()
        if val in ("t", "true", "1"):
            return True
        elif val in ("f", "false", "0"):
            return False
        else:
            raise SpannerAdminConfigException(
                f'Failed to convert value to bool. Please check "{key}" key in "{section}" section. '
                f'Current value: "{val}".'
            )

    def getfloat(self, section: str, key: str, **kwargs) -> float:  # type: ignore[override]
        val = self.get(section, key, **kwargs)
        if val is None:
            raise SpannerAdminConfigException(
                f"Failed to convert value None to float. "
                f'Please check "{key}" key in "{section}" section is set.'
            )
        try:
            return float(val)
        except ValueError:
            raise SpannerAdminConfigException(
                f'Failed to convert value to float. Please check "{key}" key in "{section}" section. '
                f'Current value: "{val}".'
            )

    def getimport(self, section: str, key: str, **kwargs) -> Any:
        """
        Read options, import the full qualified name, and return the object.

        In case of failure, it throws an exception with the key and section names

        :return: The object or None, if the option is empty
        """
        full_qualified_path = self.get(section=section, key=key, **kwargs)
        if not full_qualified_path:
            return None

        try:
            return import_string(full_qualified_path)
        except ImportError as e:
            log.error(e)
            raise SpannerAdminConfigException(
                f'The object could not be loaded. Please check "{key}" key in "{section}" section. '
                f'Current value: "{full_qualified_path}".'
            )

    def getjson(
        self, section: str, key: str, fallback=None, **kwargs
    ) -> dict | list | str | int | float | None:
        """
        Return a config value parsed from a JSON string.

        ``fallback`` is *not* JSON parsed but used verbatim when no config value is given.
        """
        data = self.get(section=section, key=key, fallback=None, **kwargs)

        if data is None or data == "":
            return fallback

        try:
            return json.loads(data)
        except JSONDecodeError as e:
            raise SpannerAdminConfigException(f"Unable to parse [{section}] {key!r} as valid json") from e

    def getoptionalfloat(self, section: str, key: str) -> float | None:
        """Return the option as a float, or None when it is empty."""
        val = self.get(section, key, fallback=None)
        if val is None or val.strip() == "":
            return None
        return self.getfloat(section, key)


def get_spanner_admin_home() -> str:
    """Get path to the directory holding the user configuration."""
    return expand_env_var(os.environ.get("SPANNER_ADMIN_HOME", "~/spanner_admin"))


def get_spanner_admin_config(spanner_admin_home: str) -> str:
    """Get path to spanner_admin.cfg."""
    config_var = os.environ.get("SPANNER_ADMIN_CONFIG")
    if config_var is None:
        return os.path.join(spanner_admin_home, "spanner_admin.cfg")
    return expand_env_var(config_var)


def initialize_config() -> SpannerAdminConfigParser:
    """
    Load the configuration files.

    Called for you automatically when ``spanner_admin.configuration`` is imported.
    """
    config_parser = SpannerAdminConfigParser()
    if config_parser.getboolean("core", "unit_test_mode"):
        return config_parser
    config_file = get_spanner_admin_config(get_spanner_admin_home())
    if os.path.isfile(config_file):
        log.debug("Reading the config from %s", config_file)
        config_parser.read(config_file)
    return config_parser


def get_custom_secret_backend() -> BaseSecretsBackend | None:
    """Get Secret Backend if defined in the configuration."""
    secrets_backend_cls = conf.getimport(section="secrets", key="backend")

    if not secrets_backend_cls:
        return None

    try:
        backend_kwargs = conf.getjson(section="secrets", key="backend_kwargs")
        if not backend_kwargs:
            backend_kwargs = {}
        elif not isinstance(backend_kwargs, dict):
            raise ValueError("not a dict")
    except SpannerAdminConfigException:
        log.warning("Failed to parse [secrets] backend_kwargs as JSON, defaulting to no kwargs.")
        backend_kwargs = {}
    except ValueError:
        log.warning("Failed to parse [secrets] backend_kwargs into a dict, defaulting to no kwargs.")
        backend_kwargs = {}

    return secrets_backend_cls(**backend_kwargs)


def initialize_secrets_backends() -> list[BaseSecretsBackend]:
    """
    Initialize secrets backend.

    * import secrets backend classes
    * instantiate them and return them in a list
    """
    backend_list = []

    custom_secret_backend = get_custom_secret_backend()

    if custom_secret_backend is not None:
        backend_list.append(custom_secret_backend)

    for class_name in DEFAULT_SECRETS_SEARCH_PATH:
        secrets_backend_cls = import_string(class_name)
        backend_list.append(secrets_backend_cls())

    return backend_list


def ensure_secrets_loaded() -> list[BaseSecretsBackend]:
    """
    Ensure that all secrets backends are loaded.

    Reloads the list when only the default backends are present, so that a custom backend
    configured after import is picked up.
    """
    global secrets_backend_list
    if len(secrets_backend_list) == len(DEFAULT_SECRETS_SEARCH_PATH):
        secrets_backend_list = initialize_secrets_backends()
    return secrets_backend_list


conf: SpannerAdminConfigParser = initialize_config()
secrets_backend_list: list[BaseSecretsBackend] = initialize_secrets_backends()
