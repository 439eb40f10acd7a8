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
"""Logging configuration used when ``[logging] logging_config_class`` is not set."""
from __future__ import annotations

from typing import Any

from spanner_admin.configuration import conf

LOG_LEVEL: str = conf.get_mandatory_value("logging", "LOGGING_LEVEL").upper()

LOG_FORMAT: str = conf.get_mandatory_value("logging", "LOG_FORMAT")

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "spanner_admin": {"format": LOG_FORMAT},
    },
    "handlers": {
        "console": {
            "class": "spanner_admin.utils.log.logging_mixin.RedirectStdHandler",
            "formatter": "spanner_admin",
            "stream": "sys.stdout",
        },
    },
    "loggers": {
        "spanner_admin": {
            "level": LOG_LEVEL,
            "propagate": True,
        },
        # The generated client logs every retry at DEBUG
        "google.api_core": {
            "level": "WARNING",
            "propagate": True,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}
