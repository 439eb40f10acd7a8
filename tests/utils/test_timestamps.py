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

import datetime

import pytest
from google.api_core.datetime_helpers import DatetimeWithNanoseconds

from spanner_admin.exceptions import SpannerAdminBadRequest
from spanner_admin.utils.timestamps import build_expire_timestamp, timestamp_from_unix

UTC = datetime.timezone.utc
CET = datetime.timezone(datetime.timedelta(hours=1))


class TestTimestampFromUnix:
    @pytest.mark.parametrize(
        "seconds, nanos, expected_seconds, expected_nanos",
        [
            (0, 0, 0, 0),
            (1136239445, 12345, 1136239445, 12345),
            (-1000, 12345, -1000, 12345),
            (-1000, -1, -1001, 999999999),
            (5, 2_000_000_001, 7, 1),
            (0, 999_999_999, 0, 999_999_999),
        ],
    )
    def test_components(self, seconds, nanos, expected_seconds, expected_nanos):
        result = timestamp_from_unix(seconds, nanos)

        assert result.seconds == expected_seconds
        assert result.nanos == expected_nanos

    def test_nanos_default_to_zero(self):
        assert timestamp_from_unix(42).nanos == 0


class TestBuildExpireTimestamp:
    @pytest.mark.parametrize(
        "value, expected_seconds, expected_nanos",
        [
            (datetime.datetime(1970, 1, 1, tzinfo=UTC), 0, 0),
            (datetime.datetime(1970, 1, 1), 0, 0),
            (DatetimeWithNanoseconds(2006, 1, 2, 22, 4, 5, nanosecond=12345, tzinfo=UTC), 1136239445, 12345),
            (datetime.datetime(2006, 1, 2, 22, 4, 5, 12, tzinfo=UTC), 1136239445, 12000),
            (
                datetime.datetime(2006, 1, 2, 23, 4, 5, tzinfo=CET),
                1136239445,
                0,
            ),
            (DatetimeWithNanoseconds(1969, 12, 31, 23, 43, 20, nanosecond=12345, tzinfo=UTC), -1000, 12345),
        ],
    )
    def test_decomposition(self, value, expected_seconds, expected_nanos):
        result = build_expire_timestamp(value)

        assert result.seconds == expected_seconds
        assert result.nanos == expected_nanos

    def test_round_trip_keeps_the_instant(self):
        value = DatetimeWithNanoseconds(2030, 6, 1, 12, 30, 15, nanosecond=123456789, tzinfo=UTC)

        result = DatetimeWithNanoseconds.from_timestamp_pb(build_expire_timestamp(value))

        assert result == value
        assert result.nanosecond == 123456789

    @pytest.mark.parametrize("value", ["2006-01-02T22:04:05Z", 1136239445, None, datetime.date(2006, 1, 2)])
    def test_rejects_non_datetime(self, value):
        with pytest.raises(SpannerAdminBadRequest, match="Expected a datetime"):
            build_expire_timestamp(value)

    def test_foreign_nanosecond_attribute_is_ignored(self):
        # pandas.Timestamp style: ``nanosecond`` holds only the sub-microsecond remainder.
        class RemainderDatetime(datetime.datetime):
            nanosecond = 7

        value = RemainderDatetime(2006, 1, 2, 22, 4, 5, 12, tzinfo=UTC)

        result = build_expire_timestamp(value)

        assert result.seconds == 1136239445
        assert result.nanos == 12000
