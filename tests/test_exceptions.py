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

from http import HTTPStatus

import pytest

from spanner_admin.exceptions import (
    InvalidArgument,
    SpannerAdminBadRequest,
    SpannerAdminConfigException,
    SpannerAdminException,
    SpannerAdminNotFoundException,
)


class TestExceptions:
    @pytest.mark.parametrize(
        "exception_class, status_code",
        [
            (SpannerAdminException, HTTPStatus.INTERNAL_SERVER_ERROR),
            (SpannerAdminBadRequest, HTTPStatus.BAD_REQUEST),
            (SpannerAdminNotFoundException, HTTPStatus.NOT_FOUND),
            (SpannerAdminConfigException, HTTPStatus.INTERNAL_SERVER_ERROR),
        ],
    )
    def test_status_code(self, exception_class, status_code):
        assert exception_class.status_code == status_code
        assert issubclass(exception_class, SpannerAdminException)

    def test_invalid_argument(self):
        error = InvalidArgument("db", "^x$")

        assert isinstance(error, SpannerAdminBadRequest)
        assert error.status_code == HTTPStatus.BAD_REQUEST
        assert str(error) == "database name 'db' should conform to pattern '^x$'"
