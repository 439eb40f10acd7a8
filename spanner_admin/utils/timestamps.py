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

import calendar
import datetime

from google.api_core.datetime_helpers import DatetimeWithNanoseconds
from google.protobuf.timestamp_pb2 import Timestamp

from spanner_admin.exceptions import SpannerAdminBadRequest

NANOS_PER_SECOND = 1_000_000_000


def timestamp_from_unix(seconds: int, nanos: int = 0) -> Timestamp:
    """
    Build a wire timestamp from seconds and nanoseconds since the Unix epoch.

    ``nanos`` outside ``[0, 1e9)`` is carried into ``seconds``, so ``(-1000, -1)`` becomes
    ``seconds=-1001, nanos=999999999``. The instant is preserved.
    """
    carry, nanos = divmod(int(nanos), NANOS_PER_SECOND)
    return Timestamp(seconds=int(seconds) + carry, nanos=nanos)


def build_expire_timestamp(value: datetime.datetime) -> Timestamp:
    """
    Decompose a point in time into the ``google.protobuf.Timestamp`` sent to the service.

    Naive datetimes are taken to be in UTC. Nanoseconds are kept for
    ``google.api_core.datetime_helpers.DatetimeWithNanoseconds`` values, other datetimes
    carry microsecond precision.

    :param value: the point in time
    :return: timestamp with whole ``seconds`` since the epoch and ``nanos`` in ``[0, 1e9)``
    """
    if not isinstance(value, datetime.datetime):
        raise SpannerAdminBadRequest(f"Expected a datetime for the expire time, got {value!r}")
    # Read before replace(), which does not carry nanoseconds over.
    if isinstance(value, DatetimeWithNanoseconds):
        nanos = value.nanosecond
    else:
        nanos = value.microsecond * 1000
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    seconds = calendar.timegm(value.utctimetuple())
    return timestamp_from_unix(seconds, nanos)
