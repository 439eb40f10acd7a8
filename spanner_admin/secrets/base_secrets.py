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

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spanner_admin.models.connection import Connection


class BaseSecretsBackend(ABC):
    """Source of Google Cloud connections, looked up by ``conn_id``."""

    @staticmethod
    def build_path(path_prefix: str, secret_id: str, sep: str = "/") -> str:
        """Join a prefix and a secret id, e.g. ``SPANNER_ADMIN_CONN`` and ``GOOGLE_CLOUD_DEFAULT``."""
        return f"{path_prefix}{sep}{secret_id}"

    @abstractmethod
    def get_conn_value(self, conn_id: str) -> str | None:
        """
        Return the stored form of the connection, a URI or a JSON document.

        :param conn_id: connection id
        :return: the raw value, or ``None`` when this backend does not hold it
        """

    def deserialize_connection(self, conn_id: str, value: str) -> Connection:
        """
        Build a Connection from a stored URI or JSON document.

        A value starting with ``{`` is read as JSON, anything else as a URI.

        :param conn_id: connection id
        :param value: the serialized representation of the Connection object
        :return: the deserialized Connection
        """
        from spanner_admin.models.connection import Connection

        value = value.strip()
        if value.startswith("{"):
            return Connection.from_json(conn_id=conn_id, value=value)
        return Connection(conn_id=conn_id, uri=value)

    def get_connection(self, conn_id: str) -> Connection | None:
        """
        Look up ``conn_id`` in this backend.

        :param conn_id: connection id
        """
        value = self.get_conn_value(conn_id=conn_id)
        if value:
            return self.deserialize_connection(conn_id=conn_id, value=value)
        return None
