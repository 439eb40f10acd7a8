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
Parsing and validation of fully-qualified Cloud Spanner database names.

A database name has the form ``projects/<project>/instances/<instance>/databases/<database>``.
Validation returns a :class:`DatabasePath`, from which the parent instance name is derived
without splitting the input string again.
"""
from __future__ import annotations

from typing import NamedTuple, Union

import re2

from spanner_admin.exceptions import InvalidArgument

DATABASE_PATH_PATTERN = (
    r"^projects/(?P<project>[^/\r\n]+)/instances/(?P<instance>[^/\r\n]+)"
    r"/databases/(?P<database>[^/\r\n]+)$"
)

# Shown to callers in error messages, without the named groups. Tokens never span a line break.
DISPLAY_PATTERN = "^projects/[^/]+/instances/[^/]+/databases/[^/]+$"


class DatabasePath(NamedTuple):
    """
    A database name split into its tokens.

    Instances come from :meth:`ResourcePathValidator.validate`; one built directly is
    not trusted until it passes validation.
    """

    project: str
    instance: str
    database: str

    @property
    def name(self) -> str:
        return f"{self.instance_path}/databases/{self.database}"

    @property
    def instance_path(self) -> str:
        """The parent instance, ``projects/<project>/instances/<instance>``."""
        return f"projects/{self.project}/instances/{self.instance}"

    def __str__(self) -> str:
        return self.name


class ResourcePathValidator:
    """
    Validates database names against a fixed pattern.

    The pattern is compiled once, in the constructor, and the instance holds no other
    state, so a single validator can be shared freely between threads.

    :param pattern: regular expression with ``project``, ``instance`` and ``database`` groups
    :param display_pattern: the pattern as it should be reported in error messages
    """

    def __init__(self, pattern: str = DATABASE_PATH_PATTERN, display_pattern: str = DISPLAY_PATTERN):
        self._regex = re2.compile(pattern)
        self.display_pattern = display_pattern

    def validate(self, path: str) -> DatabasePath:
        """
        Check that ``path`` is exactly ``projects/P/instances/I/databases/D``.

        :param path: the database name to check
        :return: the project, instance and database tokens
        :raises InvalidArgument: if the name does not match the pattern
        """
        if not isinstance(path, str):
            raise InvalidArgument(path, self.display_pattern)
        match = self._regex.fullmatch(path)
        if not match:
            raise InvalidArgument(path, self.display_pattern)
        return DatabasePath(match.group("project"), match.group("instance"), match.group("database"))

    def is_valid(self, path: str) -> bool:
        try:
            self.validate(path)
        except InvalidArgument:
            return False
        return True

    def parent_instance_path(self, path: Union[DatabasePath, str]) -> str:
        """
        Return the instance that contains the database.

        Strings are validated first. A :class:`DatabasePath` built by hand rather than by
        :meth:`validate` is checked again through its name.
        """
        if isinstance(path, DatabasePath):
            self.validate(path.name)
        else:
            path = self.validate(path)
        return path.instance_path


DATABASE_PATH_VALIDATOR = ResourcePathValidator()


def validate_database_path(path: str) -> DatabasePath:
    """Validate ``path`` with the shared validator."""
    return DATABASE_PATH_VALIDATOR.validate(path)


def parent_instance_path(path: Union[DatabasePath, str]) -> str:
    """Return the parent instance name of ``path`` using the shared validator."""
    return DATABASE_PATH_VALIDATOR.parent_instance_path(path)
