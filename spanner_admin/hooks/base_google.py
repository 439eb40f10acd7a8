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
"""This module contains a Google Cloud API base hook."""
from __future__ import annotations

import functools
import json
import os
from typing import Any, Callable, Sequence, TypeVar

import google.auth
from google.api_core.client_options import ClientOptions
from google.api_core.gapic_v1.client_info import ClientInfo
from google.auth.credentials import AnonymousCredentials, Credentials
from google.oauth2 import service_account

from spanner_admin import __version__
from spanner_admin.configuration import conf
from spanner_admin.exceptions import SpannerAdminException, SpannerAdminNotFoundException
from spanner_admin.hooks.base import BaseHook
from spanner_admin.models.connection import Connection

RT = TypeVar("RT")

EMULATOR_HOST_ENV_VAR = "SPANNER_EMULATOR_HOST"


class GoogleBaseHook(BaseHook):
    """
    A base hook for Google cloud-related hooks. Google cloud has a shared REST
    API client that is built in the same way no matter which service you use.
    This class helps construct and authorize the credentials needed to then
    call the generated client.

    Three ways of authentication are supported:

    Default credentials: Only the 'Project Id' is required. You'll need to
    have set up default credentials, such as by the
    ``GOOGLE_APPLICATION_DEFAULT`` environment variable or from the metadata
    server on Google Compute Engine.

    JSON key file: Specify 'Project Id', 'Keyfile Path' and 'Scope'.

    Legacy P12 key files are not supported.

    JSON data provided in the connection extras: Specify 'Keyfile JSON'.

    An ``emulator_host`` extra, or the ``SPANNER_EMULATOR_HOST`` environment variable,
    switches to anonymous credentials against a local emulator.

    :param gcp_conn_id: The connection ID to use when fetching connection info.
    :param delegate_to: The account to impersonate, if any.
        For this to work, the service account making the request must have
        domain-wide delegation enabled.
    """

    conn_type = "google_cloud_platform"

    def __init__(self, gcp_conn_id: str | None = None, delegate_to: str | None = None) -> None:
        super().__init__()
        self.gcp_conn_id = gcp_conn_id or conf.get("google", "default_conn_id")
        self.delegate_to = delegate_to
        self.extras: dict = self._get_connection_or_default().extra_dejson
        self._cached_credentials: Credentials | None = None
        self._cached_project_id: str | None = None

    def _get_connection_or_default(self) -> Connection:
        """
        Look up the hook's connection.

        The configured default connection id resolves to an empty Google connection when no
        backend defines it, leaving credentials and project to Application Default Credentials
        or the emulator. Any other id must be defined.
        """
        try:
            return self.get_connection(self.gcp_conn_id)
        except SpannerAdminNotFoundException:
            if self.gcp_conn_id != conf.get("google", "default_conn_id"):
                raise
            self.log.info(
                "Connection %s is not defined, using Application Default Credentials", self.gcp_conn_id
            )
            return Connection(conn_id=self.gcp_conn_id, conn_type=self.conn_type)

    def _get_field(self, f: str, default: Any = None) -> Any:
        """
        Fetches a field from extras, and returns it.

        Both the prefixed ``extra__google_cloud_platform__{f}`` form and the bare
        ``{f}`` form are accepted; the prefixed one wins.
        """
        long_f = f"extra__{self.conn_type}__{f}"
        if long_f in self.extras:
            return self.extras[long_f]
        return self.extras.get(f, default)

    @property
    def scopes(self) -> Sequence[str]:
        """
        Return OAuth 2.0 scopes.

        :return: Returns the scope defined in the connection configuration, or the default scope
        """
        scope_value = self._get_field("scope")
        if scope_value:
            return [s.strip() for s in scope_value.split(",")]
        return [conf.get("google", "default_scope")]

    @property
    def emulator_host(self) -> str | None:
        return self._get_field("emulator_host") or os.environ.get(EMULATOR_HOST_ENV_VAR)

    def _get_credentials_and_project_id(self) -> tuple[Credentials, str | None]:
        """Returns the Credentials object and project id for the Google API."""
        if self._cached_credentials is not None:
            return self._cached_credentials, self._cached_project_id

        key_path: str | None = self._get_field("key_path")
        keyfile_dict: str | dict | None = self._get_field("keyfile_dict")
        project_id: str | None = None

        if self.emulator_host:
            self.log.info("Using anonymous credentials against the emulator at %s", self.emulator_host)
            credentials: Credentials = AnonymousCredentials()
        elif key_path:
            if key_path.endswith(".p12"):
                raise SpannerAdminException("Legacy P12 key file are not supported, use a JSON key file.")
            if not key_path.endswith(".json"):
                raise SpannerAdminException("Unrecognised extension for key file.")
            self.log.debug("Getting connection using JSON key file %s", key_path)
            credentials = service_account.Credentials.from_service_account_file(key_path, scopes=self.scopes)
            project_id = credentials.project_id
        elif keyfile_dict:
            self.log.debug("Getting connection using JSON Dict")
            if isinstance(keyfile_dict, str):
                try:
                    keyfile_dict = json.loads(keyfile_dict)
                except json.decoder.JSONDecodeError:
                    raise SpannerAdminException("Invalid key JSON.")
            # Depending on how the JSON was formatted, it may contain
            # escaped newlines. Convert those to actual newlines.
            keyfile_dict["private_key"] = keyfile_dict["private_key"].replace("\\n", "\n")
            credentials = service_account.Credentials.from_service_account_info(
                keyfile_dict, scopes=self.scopes
            )
            project_id = credentials.project_id
        else:
            self.log.info(
                "Getting connection using `google.auth.default()` since no key file is defined for hook."
            )
            credentials, project_id = google.auth.default(scopes=self.scopes)

        if self.delegate_to:
            if hasattr(credentials, "with_subject"):
                credentials = credentials.with_subject(self.delegate_to)
            else:
                raise SpannerAdminException(
                    "The `delegate_to` parameter cannot be used here as the current "
                    "authentication method does not support account impersonate. "
                    "Please use service-account for authorization."
                )

        overridden_project_id = self._get_field("project")
        if overridden_project_id:
            project_id = overridden_project_id

        self._cached_credentials = credentials
        self._cached_project_id = project_id
        return credentials, project_id

    def get_credentials(self) -> Credentials:
        """Returns the Credentials object for the Google API."""
        credentials, _ = self._get_credentials_and_project_id()
        return credentials

    @property
    def project_id(self) -> str | None:
        """
        Returns project id.

        :return: id of the project
        """
        _, project_id = self._get_credentials_and_project_id()
        return project_id

    @property
    def client_info(self) -> ClientInfo:
        """
        Return client information used to generate a user-agent for API calls.

        It allows for better errors tracking.
        """
        return ClientInfo(client_library_version="spanner-admin-" + __version__)

    @property
    def client_options(self) -> ClientOptions | None:
        """Client options built from the ``api_endpoint`` extra, if it is set."""
        api_endpoint = self._get_field("api_endpoint")
        if not api_endpoint:
            return None
        return ClientOptions(api_endpoint=api_endpoint)

    @staticmethod
    def fallback_to_default_project_id(func: Callable[..., RT]) -> Callable[..., RT]:
        """
        Decorator that provides fallback for Google Cloud project id. If
        the project is None it will be replaced with the project_id from the
        service account the Hook is authenticated with. The wrapped method must be
        called with keyword arguments only.

        :param func: function to wrap
        :return: result of the function call
        """

        @functools.wraps(func)
        def inner_wrapper(self: GoogleBaseHook, *args, **kwargs) -> RT:
            if args:
                raise SpannerAdminException(
                    "You must use keyword arguments in this methods rather than positional"
                )
            if "project_id" in kwargs:
                kwargs["project_id"] = kwargs["project_id"] or self.project_id
            else:
                kwargs["project_id"] = self.project_id
            if not kwargs["project_id"]:
                raise SpannerAdminException(
                    "The project id must be passed either as "
                    "keyword project_id parameter or as project_id extra "
                    "in Google Cloud connection definition. Both are not set!"
                )
            return func(self, *args, **kwargs)

        return inner_wrapper
