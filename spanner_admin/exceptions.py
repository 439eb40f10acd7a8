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
"""Exceptions used by the Spanner database admin hooks."""

from __future__ import annotations

from http import HTTPStatus


class SpannerAdminException(Exception):
    """
    Base class for all errors raised by this package.

    Each custom exception should be derived from this class. Errors reported by the
    service itself are raised by the generated client as ``google.api_core.exceptions``
    and are not wrapped.
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class SpannerAdminBadRequest(SpannerAdminException):
    """Raise when the request cannot be built from the values given by the caller."""

    status_code = HTTPStatus.BAD_REQUEST


class SpannerAdminNotFoundException(SpannerAdminException):
    """Raise when the requested object/resource is not available in the system."""

    status_code = HTTPStatus.NOT_FOUND


class SpannerAdminConfigException(SpannerAdminException):
    """Raise when there is configuration problem."""


class InvalidArgument(SpannerAdminBadRequest):
    """
    Raise when a resource path does not conform to the expected pattern.

    :param path: the offending value, as given by the caller
    :param pattern: the pattern the value was matched against
    """

    def __init__(self, path, pattern: str):
        super().__init__(f"database name {path!r} should conform to pattern {pattern!r}")
        self.path = path
        self.pattern = pattern
