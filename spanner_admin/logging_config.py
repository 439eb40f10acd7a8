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

import logging
from logging.config import dictConfig

from spanner_admin.configuration import conf
from spanner_admin.exceptions import SpannerAdminConfigException
from spanner_admin.utils.module_loading import import_string

log = logging.getLogger(__name__)


def configure_logging():
    """Configure & Validate logging."""
    logging_class_path = ""
    try:
        logging_class_path = conf.get("logging", "logging_config_class")
    except SpannerAdminConfigException:
        log.debug("Could not find key logging_config_class in config")

    if logging_class_path:
        try:
            logging_config = import_string(logging_class_path)

            # Make sure that the variable is in scope
            if not isinstance(logging_config, dict):
                raise ValueError("Logging Config should be of dict type")

            log.info("Successfully imported user-defined logging config from %s", logging_class_path)
        except Exception as err:
            # Import default logging configurations.
            raise ImportError(f"Unable to load custom logging from {logging_class_path} due to {err}")
    else:
        logging_class_path = (
            "spanner_admin.config_templates.spanner_admin_local_settings.DEFAULT_LOGGING_CONFIG"
        )
        logging_config = import_string(logging_class_path)
        log.debug("Unable to load custom logging, using default config instead")

    try:
        dictConfig(logging_config)
    except (ValueError, KeyError) as e:
        log.error("Unable to load the config, contains a configuration error.")
        # When there is an error in the config, escalate the exception
        # otherwise it will silently fallback to the default config
        raise e

    return logging_class_path
