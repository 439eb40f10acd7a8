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
"""Base class for all hooks"""
from __future__ import annotations

import logging
from typing import Any

from spanner_admin.models.connection import Connection
from spanner_admin.utils.log.logging_mixin import LoggingMixin

log = logging.getLogger(__name__)


class BaseHook(LoggingMixin):
    """
    Base class for hooks. A hook resolves a connection id to its settings
    and hands out a client for the remote service from ``get_conn``.
    """

    @classmethod
    def get_connection(cls, conn_id: str) -> Connection:
        """
        Get connection, given connection id.

        :param conn_id: connection id
        :return: connection
        """
        conn = Connection.get_connection_from_secrets(conn_id)
        log.info(
            "Using connection ID '%s' for Spanner admin calls. Host: %s, Port: %s, Login: %s, "
            "Password: %s, extra: %s",
            conn.conn_id,
            conn.host,
            conn.port,
            conn.login,
            "XXXXXXXX" if conn.password else None,
            "XXXXXXXX" if conn.extra_dejson else None,
        )
        return conn

    def get_conn(self) -> Any:
        """Returns connection for the hook."""
        raise NotImplementedError()
