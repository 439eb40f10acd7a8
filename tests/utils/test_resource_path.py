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

import pytest

from spanner_admin.exceptions import InvalidArgument, SpannerAdminBadRequest
from spanner_admin.utils.resource_path import (
    DATABASE_PATH_VALIDATOR,
    DISPLAY_PATTERN,
    DatabasePath,
    ResourcePathValidator,
    parent_instance_path,
    validate_database_path,
)

INVALID_PATHS = [
    "",
    "db",
    "project/instances/databases/foodb",
    "projects/p/instances/i",
    "projects/p/instances/i/databases/",
    "projects/p/instances/i/databases/d/",
    "projects/p/instances/i/databases/d/extra",
    "projects//instances/i/databases/d",
    "projects/p/instances//databases/d",
    "/projects/p/instances/i/databases/d",
    "projects/p/instance/i/databases/d",
    "Projects/p/instances/i/databases/d",
    "projects/p/instances/i/databases/d\n",
    "xprojects/p/instances/i/databases/d",
    "projects/p/instances/i\n/databases/d",
]


class TestResourcePathValidator:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("projects/p/instances/i/databases/d", DatabasePath("p", "i", "d")),
            (
                "projects/spanner-cloud-test/instances/fooinstance/databases/foodb",
                DatabasePath("spanner-cloud-test", "fooinstance", "foodb"),
            ),
            (
                "projects/my-project/instances/test-instance/databases/orders_db",
                DatabasePath("my-project", "test-instance", "orders_db"),
            ),
            ("projects/p.q:r/instances/i i/databases/d-1", DatabasePath("p.q:r", "i i", "d-1")),
        ],
    )
    def test_validate(self, path, expected):
        result = DATABASE_PATH_VALIDATOR.validate(path)

        assert result == expected
        assert result.name == path
        assert str(result) == path

    @pytest.mark.parametrize("path", INVALID_PATHS)
    def test_validate_rejects(self, path):
        with pytest.raises(InvalidArgument) as ctx:
            DATABASE_PATH_VALIDATOR.validate(path)

        assert ctx.value.path == path
        assert ctx.value.pattern == DISPLAY_PATTERN

    @pytest.mark.parametrize("path", [None, 42, b"projects/p/instances/i/databases/d"])
    def test_validate_rejects_non_string(self, path):
        with pytest.raises(InvalidArgument):
            DATABASE_PATH_VALIDATOR.validate(path)

    @pytest.mark.parametrize("suffix", ["\n", "\r\n", "\n\n"])
    def test_trailing_line_break_is_not_stripped(self, suffix):
        path = "projects/p/instances/i/databases/d" + suffix

        assert not DATABASE_PATH_VALIDATOR.is_valid(path)
        with pytest.raises(InvalidArgument) as ctx:
            validate_database_path(path)
        assert ctx.value.path == path

    def test_error_message_names_the_value_and_pattern(self):
        with pytest.raises(InvalidArgument) as ctx:
            DATABASE_PATH_VALIDATOR.validate("bad")

        assert str(ctx.value) == (
            "database name 'bad' should conform to pattern "
            "'^projects/[^/]+/instances/[^/]+/databases/[^/]+$'"
        )

    def test_invalid_argument_is_a_bad_request(self):
        with pytest.raises(SpannerAdminBadRequest):
            validate_database_path("bad")

    @pytest.mark.parametrize(
        "path, expected",
        [("projects/p/instances/i/databases/d", True)] + [(path, False) for path in INVALID_PATHS],
    )
    def test_is_valid(self, path, expected):
        assert DATABASE_PATH_VALIDATOR.is_valid(path) is expected

    def test_validators_share_no_state(self):
        first = ResourcePathValidator()
        second = ResourcePathValidator()

        assert first.validate("projects/a/instances/b/databases/c") == DatabasePath("a", "b", "c")
        assert not second.is_valid("projects/a/instances/b")
        assert first.is_valid("projects/x/instances/y/databases/z")


class TestParentInstancePath:
    def test_from_string(self):
        assert parent_instance_path("projects/p/instances/i/databases/d") == "projects/p/instances/i"

    def test_from_database_path(self):
        path = DatabasePath("my-project", "test-instance", "orders_db")

        assert parent_instance_path(path) == "projects/my-project/instances/test-instance"
        assert path.instance_path == "projects/my-project/instances/test-instance"

    @pytest.mark.parametrize("path", ["db", "projects/p/instances/i", "projects/p/instances/i/databases/d/x"])
    def test_malformed_string_is_rejected(self, path):
        with pytest.raises(InvalidArgument):
            parent_instance_path(path)

    def test_validate_then_derive(self):
        path = validate_database_path("projects/p/instances/i/databases/d")

        assert DATABASE_PATH_VALIDATOR.parent_instance_path(path) == "projects/p/instances/i"

    @pytest.mark.parametrize(
        "path",
        [
            DatabasePath("p/x", "", "d"),
            DatabasePath("p", "i", ""),
            DatabasePath("p", "i/databases/d", "e"),
        ],
    )
    def test_hand_built_database_path_is_checked(self, path):
        with pytest.raises(InvalidArgument) as ctx:
            parent_instance_path(path)

        assert ctx.value.path == path.name
