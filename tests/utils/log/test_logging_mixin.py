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

import io
import logging
import sys
from unittest import mock

import pytest

from spanner_admin.utils.log.logging_mixin import LoggingMixin, RedirectStdHandler


class DummyClass(LoggingMixin):
    pass


class TestLoggingMixin:
    def test_log_name(self):
        assert DummyClass().log.name == f"{__name__}.DummyClass"

    def test_log_is_cached(self):
        dummy = DummyClass()

        assert dummy.log is dummy.log

    def test_log_is_per_class(self):
        class OtherClass(LoggingMixin):
            pass

        assert OtherClass().log.name == f"{__name__}.OtherClass"
        assert DummyClass().log is logging.getLogger(f"{__name__}.DummyClass")


class TestRedirectStdHandler:
    @pytest.mark.parametrize("stream, expected", [("sys.stdout", "stdout"), ("sys.stderr", "stderr")])
    def test_stream_follows_current_sys_stream(self, stream, expected):
        handler = RedirectStdHandler(stream)
        replacement = io.StringIO()

        with mock.patch.object(sys, expected, replacement):
            assert handler.stream is replacement
            handler.emit(logging.makeLogRecord({"msg": "message", "levelno": logging.INFO}))

        assert "message" in replacement.getvalue()

    def test_file_like_objects_are_rejected(self):
        with pytest.raises(Exception, match="Cannot use file like objects"):
            RedirectStdHandler(sys.stdout)
