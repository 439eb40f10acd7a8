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

import os
import sys

import pytest

# We should set these before loading _any_ of the rest of spanner_admin so that the
# unit test mode config is set as early as possible.
assert "spanner_admin" not in sys.modules, "No spanner_admin module can be imported before these lines"

os.environ["SPANNER_ADMIN__CORE__UNIT_TEST_MODE"] = "True"
os.environ["SPANNER_ADMIN__LOGGING__CONFIGURE_LOGGING"] = "False"
os.environ.pop("SPANNER_EMULATOR_HOST", None)


@pytest.fixture
def reset_environment():
    """Resets env variables."""
    init_env = os.environ.copy()
    yield
    changed_env = os.environ
    for key in list(changed_env):
        if key not in init_env:
            del os.environ[key]
        else:
            os.environ[key] = init_env[key]
