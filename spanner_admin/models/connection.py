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

import json
import logging
from json import JSONDecodeError
from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit

import re2

from spanner_admin.configuration import ensure_secrets_loaded
from spanner_admin.exceptions import SpannerAdminException, SpannerAdminNotFoundException
from spanner_admin.utils.log.logging_mixin import LoggingMixin

log = logging.getLogger(__name__)
RE_SANITIZE_CONN_ID = re2.compile(r"^[\w\#\!\(\)\-\.\:\/\\]{1,}$")
CONN_ID_MAX_LEN: int = 250


def sanitize_conn_id(conn_id: str | None, max_length=CONN_ID_MAX_LEN) -> str | None:
    r"""
    Sanitizes the connection id and allows only specific characters to be within.

    Namely, it allows alphanumeric characters plus the symbols #,!,-,_,.,:,\,/ and () from 1 and up to
    250 consecutive matches.

    :return: the sanitized string, `None` otherwise.
    """
    if not isinstance(conn_id, str) or len(conn_id) > max_length:
        return None
    res = RE_SANITIZE_CONN_ID.match(conn_id)
    if res is None:
        return None
    return res.group(0)


class Connection(LoggingMixin):
    """
    Connection information for Google Cloud, referenced by ``conn_id``.

    Hooks look connections up by id instead of hard coding project ids, key files and
    endpoints. The Google settings live in ``extra``, given either as query parameters,
    ``google-cloud-platform://?project=my-project&key_path=%2Fkeys%2Fsa.json``, or as raw JSON
    under the ``__extra__`` query key when values are not plain strings.

    :param conn_id: The connection ID.
    :param conn_type: The connection type, ``google_cloud_platform`` for the hooks in this package.
    :param host: The host, e.g. a private endpoint.
    :param login: The login.
    :param password: The password.
    :param schema: The schema.
    :param port: The port number.
    :param extra: JSON encoded dict, or a dict, with the Google specific settings.
    :param uri: URI address describing connection parameters.
    """

    EXTRA_KEY = "__extra__"

    def __init__(
        self,
        conn_id: str | None = None,
        conn_type: str | None = None,
        host: str | None = None,
        login: str | None = None,
        password: str | None = None,
        schema: str | None = None,
        port: int | None = None,
        extra: str | dict | None = None,
        uri: str | None = None,
    ):
        super().__init__()
        self.conn_id = sanitize_conn_id(conn_id)
        if extra and not isinstance(extra, str):
            extra = json.dumps(extra)
        if uri and (conn_type or host or login or password or schema or port or extra):
            raise SpannerAdminException(
                "You must create an object using the URI or individual values "
                "(conn_type, host, login, password, schema, port or extra). "
                "You can't mix these two ways to create this object."
            )
        if uri:
            self._parse_from_uri(uri)
        else:
            self.conn_type = conn_type and self._normalize_conn_type(conn_type)
            self.host = host
            self.login = login
            self.password = password
            self.schema = schema
            self.port = port
            self.extra = extra
        if self.extra:
            self._validate_extra(self.extra, self.conn_id)

    @staticmethod
    def _validate_extra(extra: str, conn_id: str | None) -> None:
        try:
            extra_parsed = json.loads(extra)
        except JSONDecodeError:
            raise ValueError(f"Encountered non-JSON in `extra` field for connection {conn_id!r}.")
        if not isinstance(extra_parsed, dict):
            raise ValueError(
                f"The `extra` field of connection {conn_id!r} must contain a JSON "
                "representation of a Python dict."
            )

    @staticmethod
    def _normalize_conn_type(conn_type: str) -> str:
        return conn_type.replace("-", "_")

    def _parse_from_uri(self, uri: str) -> None:
        if uri.count("://") != 1:
            raise SpannerAdminException(f"Invalid connection string: {uri}.")
        uri_parts = urlsplit(uri)
        self.conn_type = self._normalize_conn_type(uri_parts.scheme)
        self.host = unquote(uri_parts.hostname) if uri_parts.hostname else None
        self.login = unquote(uri_parts.username) if uri_parts.username else None
        self.password = unquote(uri_parts.password) if uri_parts.password else None
        self.port = uri_parts.port
        self.schema = unquote(uri_parts.path.lstrip("/")) or None
        self.extra = None
        if uri_parts.query:
            query = dict(parse_qsl(uri_parts.query, keep_blank_values=True))
            self.extra = query[self.EXTRA_KEY] if self.EXTRA_KEY in query else json.dumps(query)

    def __repr__(self):
        return self.conn_id or ""

    @property
    def extra_dejson(self) -> dict:
        """Returns the extra property by deserializing json."""
        extra: dict[str, Any] = {}
        if self.extra:
            try:
                extra = json.loads(self.extra)
            except JSONDecodeError:
                self.log.exception("Failed parsing the json for conn_id %s", self.conn_id)
        return extra

    @classmethod
    def from_json(cls, value: str, conn_id: str | None = None) -> Connection:
        """Build a connection from a JSON document whose keys are the constructor arguments."""
        kwargs = json.loads(value)
        port = kwargs.pop("port", None)
        if port:
            try:
                kwargs["port"] = int(port)
            except ValueError:
                raise ValueError(f"Expected integer value for `port`, but got {port!r} instead.")
        return Connection(conn_id=conn_id, **kwargs)

    @classmethod
    def get_connection_from_secrets(cls, conn_id: str) -> Connection:
        """
        Get connection by conn_id.

        The secrets backends are tried in order; a backend that fails is logged and skipped.

        :param conn_id: connection id
        :return: connection
        """
        for secrets_backend in ensure_secrets_loaded():
            try:
                conn = secrets_backend.get_connection(conn_id=conn_id)
                if conn:
                    return conn
            except Exception:
                log.exception(
                    "Unable to retrieve connection from secrets backend (%s). "
                    "Checking subsequent secrets backend.",
                    type(secrets_backend).__name__,
                )

        raise SpannerAdminNotFoundException(f"The conn_id `{conn_id}` isn't defined")
