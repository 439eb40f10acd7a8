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

from spanner_admin.configuration import conf
from spanner_admin.logging_config import configure_logging

log = logging.getLogger(__name__)

LOGGING_CLASS_PATH: str | None = None


def initialize():
    """Initialize the package with all the settings from this file."""
    global LOGGING_CLASS_PATH
    if conf.getboolean("logging", "configure_logging"):
        LOGGING_CLASS_PATH = configure_logging()
