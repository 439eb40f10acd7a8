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
"""
Secrets framework provides means of getting connection objects from various sources, e.g. the following:
    * Environment variables
    * A custom backend named in the ``[secrets] backend`` option
"""
from __future__ import annotations

__all__ = ["CONN_ENV_PREFIX", "DEFAULT_SECRETS_SEARCH_PATH"]

CONN_ENV_PREFIX = "SPANNER_ADMIN_CONN_"

DEFAULT_SECRETS_SEARCH_PATH = [
    "spanner_admin.secrets.environment_variables.EnvironmentVariablesBackend",
]
