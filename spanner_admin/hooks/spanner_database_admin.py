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
This module contains a Google Cloud Spanner database admin hook.
"""
from __future__ import annotations

import datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

import grpc
from google.api_core import operation
from google.api_core.gapic_v1.method import DEFAULT, _MethodDefault
from google.api_core.retry import Retry
from google.cloud.spanner_admin_database_v1 import DatabaseAdminClient
from google.cloud.spanner_admin_database_v1.services.database_admin.pagers import (
    ListBackupOperationsPager,
    ListBackupsPager,
    ListDatabaseOperationsPager,
    ListDatabasesPager,
)
from google.cloud.spanner_admin_database_v1.services.database_admin.transports.grpc import (
    DatabaseAdminGrpcTransport,
)
from google.cloud.spanner_admin_database_v1.types import (
    Backup,
    CreateBackupMetadata,
    CreateBackupRequest,
    CreateDatabaseMetadata,
    Database,
    RestoreDatabaseMetadata,
    UpdateDatabaseDdlMetadata,
)
from google.iam.v1 import policy_pb2
from google.protobuf import empty_pb2, field_mask_pb2

from spanner_admin.configuration import conf
from spanner_admin.hooks.base_google import GoogleBaseHook
from spanner_admin.utils.resource_path import DATABASE_PATH_VALIDATOR
from spanner_admin.utils.timestamps import build_expire_timestamp


class SpannerDatabaseAdminHook(GoogleBaseHook):
    """
    Hook for the Google Cloud Spanner database admin API.

    Every method forwards to the generated ``DatabaseAdminClient``. Long-running calls
    return the client's ``google.api_core.operation.Operation`` and list calls return
    its pagers; polling and paging are left to the caller.

    All the methods in the hook where project_id is used must be called with
    keyword arguments rather than positional.

    The hook caches its client, so it is not meant to be shared between threads.

    :param gcp_conn_id: The connection ID to use when fetching connection info.
    :type gcp_conn_id: str
    :param delegate_to: The account to impersonate, if any.
        For this to work, the service account making the request must have
        domain-wide delegation enabled.
    :type delegate_to: str
    """

    def __init__(self, gcp_conn_id: Optional[str] = None, delegate_to: Optional[str] = None) -> None:
        super().__init__(gcp_conn_id, delegate_to)
        self._client: Optional[DatabaseAdminClient] = None

    def __enter__(self) -> "SpannerDatabaseAdminHook":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_conn(self) -> DatabaseAdminClient:
        """
        Retrieves client library object that allow access to the Cloud Spanner database admin service.
        """
        if not self._client:
            if self.emulator_host:
                transport = DatabaseAdminGrpcTransport(channel=grpc.insecure_channel(self.emulator_host))
                self._client = DatabaseAdminClient(transport=transport, client_info=self.client_info)
            else:
                self._client = DatabaseAdminClient(
                    credentials=self.get_credentials(),
                    client_info=self.client_info,
                    client_options=self.client_options,
                )
        return self._client

    def close(self) -> None:
        """Closes the connection to the API service. The hook builds a new client on next use."""
        if self._client is not None:
            self._client.transport.close()
            self._client = None

    @staticmethod
    def _timeout(timeout: Optional[float]) -> Union[float, _MethodDefault]:
        if timeout is not None:
            return timeout
        default_timeout = conf.getoptionalfloat("database_admin", "default_timeout")
        return DEFAULT if default_timeout is None else default_timeout

    @GoogleBaseHook.fallback_to_default_project_id
    def list_databases(
        self,
        instance_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> ListDatabasesPager:
        """
        Lists Cloud Spanner databases.

        :param instance_id: The ID of the Cloud Spanner instance.
        :type instance_id: str
        :param project_id: Optional, the ID of the Google Cloud project that owns the instance.
            If set to None or missing, the default project_id from the GCP connection is used.
        :type project_id: str
        :param retry: A retry object used to retry requests. If ``None`` is specified, requests will not be
            retried.
        :type retry: google.api_core.retry.Retry
        :param timeout: The amount of time, in seconds, to wait for the request to complete. Note that if
            ``retry`` is specified, the timeout applies to each individual attempt.
        :type timeout: float
        :param metadata: Additional metadata that is provided to the method.
        :type metadata: Sequence[Tuple[str, str]]
        """
        client = self.get_conn()
        parent = DatabaseAdminClient.instance_path(project_id, instance_id)
        return client.list_databases(
            request={"parent": parent}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def create_database(
        self,
        instance_id: str,
        database_id: str,
        ddl_statements: Optional[List[str]] = None,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> operation.Operation:
        """
        Creates a new Cloud Spanner database and starts to prepare it for serving.

        The returned operation has a name of the format
        ``<database_name>/operations/<operation_id>``, its result is the
        :class:`~google.cloud.spanner_admin_database_v1.types.Database`.

        :param instance_id: The ID of the Cloud Spanner instance.
        :type instance_id: str
        :param database_id: The ID of the database to create.
        :type database_id: str
        :param ddl_statements: Optional list of DDL statements executed inside the newly
            created database, e.g. ``CREATE TABLE`` statements.
        :type ddl_statements: list[str]
        :param project_id: Optional, the ID of the Google Cloud project that owns the instance.
            If set to None or missing, the default project_id from the GCP connection is used.
        :type project_id: str
        :param retry: A retry object used to retry requests.
        :type retry: google.api_core.retry.Retry
        :param timeout: The amount of time, in seconds, to wait for the request to complete.
        :type timeout: float
        :param metadata: Additional metadata that is provided to the method.
        :type metadata: Sequence[Tuple[str, str]]
        """
        client = self.get_conn()
        parent = DatabaseAdminClient.instance_path(project_id, instance_id)
        self.log.info("Creating Spanner database %s in %s", database_id, parent)
        return client.create_database(
            request={
                "parent": parent,
                "create_statement": f"CREATE DATABASE `{database_id}`",
                "extra_statements": ddl_statements or [],
            },
            retry=retry,
            timeout=self._timeout(timeout),
            metadata=metadata,
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def get_database(
        self,
        instance_id: str,
        database_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> Database:
        """
        Gets the state of a Cloud Spanner database.

        Raises ``google.api_core.exceptions.NotFound`` if the database does not exist.
        """
        client = self.get_conn()
        name = DatabaseAdminClient.database_path(project_id, instance_id, database_id)
        return client.get_database(
            request={"name": name}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def update_database_ddl(
        self,
        instance_id: str,
        database_id: str,
        ddl_statements: List[str],
        operation_id: Optional[str] = None,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> operation.Operation:
        """
        Updates the schema of a Cloud Spanner database by creating/altering/dropping
        tables, columns, indexes, etc.

        :param instance_id: The ID of the Cloud Spanner instance.
        :type instance_id: str
        :param database_id: The ID of the database.
        :type database_id: str
        :param ddl_statements: The DDL statements to apply, in order.
        :type ddl_statements: list[str]
        :param operation_id: Optional, used to make the call idempotent. Reusing an
            ``operation_id`` makes the service reply ``ALREADY_EXISTS``.
        :type operation_id: str
        :param project_id: Optional, the ID of the Google Cloud project that owns the instance.
        :type project_id: str
        """
        client = self.get_conn()
        database = DatabaseAdminClient.database_path(project_id, instance_id, database_id)
        self.log.info("Updating the DDL of %s with %d statement(s)", database, len(ddl_statements))
        request: Dict = {"database": database, "statements": ddl_statements}
        if operation_id:
            request["operation_id"] = operation_id
        return client.update_database_ddl(
            request=request, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def drop_database(
        self,
        instance_id: str,
        database_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> None:
        """
        Drops (aka deletes) a Cloud Spanner database.
        """
        client = self.get_conn()
        database = DatabaseAdminClient.database_path(project_id, instance_id, database_id)
        self.log.info("Dropping Spanner database %s", database)
        client.drop_database(
            request={"database": database}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def get_database_ddl(
        self,
        instance_id: str,
        database_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> List[str]:
        """
        Returns the schema of a Cloud Spanner database as a list of formatted DDL statements.

        Pending schema updates are not shown; list the database operations to see them.
        """
        client = self.get_conn()
        database = DatabaseAdminClient.database_path(project_id, instance_id, database_id)
        response = client.get_database_ddl(
            request={"database": database}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )
        return list(response.statements)

    def set_iam_policy(
        self,
        resource: str,
        policy: Union[Dict, policy_pb2.Policy],
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> policy_pb2.Policy:
        """
        Sets the access control policy on a database or backup resource.
        Replaces any existing policy.

        Authorization requires ``spanner.databases.setIamPolicy`` permission on ``resource``.

        :param resource: Fully-qualified name of the database or backup.
        :type resource: str
        :param policy: The complete policy to apply.
        :type policy: Union[Dict, google.iam.v1.policy_pb2.Policy]
        """
        client = self.get_conn()
        self.log.info("Setting the IAM policy of %s", resource)
        return client.set_iam_policy(
            request={"resource": resource, "policy": policy},
            retry=retry,
            timeout=self._timeout(timeout),
            metadata=metadata,
        )

    def get_iam_policy(
        self,
        resource: str,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> policy_pb2.Policy:
        """
        Gets the access control policy for a database or backup resource.
        Returns an empty policy if the resource exists but does not have a policy set.
        """
        client = self.get_conn()
        return client.get_iam_policy(
            request={"resource": resource}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    def test_iam_permissions(
        self,
        resource: str,
        permissions: List[str],
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> List[str]:
        """
        Returns the subset of ``permissions`` that the caller has on the resource.

        On a database that does not exist the service answers ``NOT_FOUND`` when the caller
        has ``spanner.databases.list`` on the instance, and an empty set otherwise.
        """
        client = self.get_conn()
        response = client.test_iam_permissions(
            request={"resource": resource, "permissions": permissions},
            retry=retry,
            timeout=self._timeout(timeout),
            metadata=metadata,
        )
        return list(response.permissions)

    @GoogleBaseHook.fallback_to_default_project_id
    def create_backup(
        self,
        instance_id: str,
        backup_id: str,
        backup: Union[Dict, Backup],
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> operation.Operation:
        """
        Starts creating a new Cloud Spanner backup.

        :param instance_id: The ID of the instance in which the backup will be created. It must
            be the instance that contains the source database.
        :type instance_id: str
        :param backup_id: The ID of the backup to create.
        :type backup_id: str
        :param backup: Required. The backup to create, with at least ``database`` and
            ``expire_time`` set.

            If a dict is provided, it must be of the same form as the protobuf message
            :class:`~google.cloud.spanner_admin_database_v1.types.Backup`
        :type backup: Union[Dict, google.cloud.spanner_admin_database_v1.types.Backup]
        :param project_id: Optional, the ID of the Google Cloud project that owns the instance.
        :type project_id: str
        """
        client = self.get_conn()
        parent = DatabaseAdminClient.instance_path(project_id, instance_id)
        self.log.info("Creating Spanner backup %s in %s", backup_id, parent)
        return client.create_backup(
            request={"parent": parent, "backup_id": backup_id, "backup": backup},
            retry=retry,
            timeout=self._timeout(timeout),
            metadata=metadata,
        )

    def create_new_backup(
        self,
        backup_id: str,
        database_path: str,
        expire_time: datetime.datetime,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> operation.Operation:
        """
        Creates a backup called ``backup_id`` of the database at ``database_path``.

        The backup is created in the instance that contains the database and stored in the
        location(s) of that instance's configuration. The database name is validated before
        any request is sent.

        :param backup_id: The ID of the backup to create.
        :type backup_id: str
        :param database_path: Fully-qualified name of the source database,
            ``projects/<project>/instances/<instance>/databases/<database>``.
        :type database_path: str
        :param expire_time: The time after which the backup is eligible for deletion. It must
            be at least 6 hours and at most 366 days from the time the request is processed.
        :type expire_time: datetime.datetime
        :raises spanner_admin.exceptions.InvalidArgument: if ``database_path`` is malformed
        """
        database = DATABASE_PATH_VALIDATOR.validate(database_path)
        request = CreateBackupRequest(
            parent=database.instance_path,
            backup_id=backup_id,
            backup=Backup(database=database.name, expire_time=build_expire_timestamp(expire_time)),
        )
        self.log.info(
            "Creating Spanner backup %s of %s in %s", backup_id, database.name, database.instance_path
        )
        client = self.get_conn()
        return client.create_backup(
            request=request, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def get_backup(
        self,
        instance_id: str,
        backup_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> Backup:
        """
        Gets metadata on a pending or completed Cloud Spanner backup.
        """
        client = self.get_conn()
        name = DatabaseAdminClient.backup_path(project_id, instance_id, backup_id)
        return client.get_backup(
            request={"name": name}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    def update_backup(
        self,
        backup: Union[Dict, Backup],
        update_mask: Union[Dict, field_mask_pb2.FieldMask],
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> Backup:
        """
        Updates a pending or completed Cloud Spanner backup.

        :param backup: The backup to update, ``backup.name`` identifies it. Only
            ``expire_time`` can currently be updated.
        :type backup: Union[Dict, google.cloud.spanner_admin_database_v1.types.Backup]
        :param update_mask: The fields of ``backup`` to update, e.g. ``{"paths": ["expire_time"]}``.
        :type update_mask: Union[Dict, google.protobuf.field_mask_pb2.FieldMask]
        """
        client = self.get_conn()
        return client.update_backup(
            request={"backup": backup, "update_mask": update_mask},
            retry=retry,
            timeout=self._timeout(timeout),
            metadata=metadata,
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def delete_backup(
        self,
        instance_id: str,
        backup_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> None:
        """
        Deletes a pending or completed Cloud Spanner backup.
        """
        client = self.get_conn()
        name = DatabaseAdminClient.backup_path(project_id, instance_id, backup_id)
        self.log.info("Deleting Spanner backup %s", name)
        client.delete_backup(
            request={"name": name}, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def list_backups(
        self,
        instance_id: str,
        filter_: Optional[str] = None,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> ListBackupsPager:
        """
        Lists completed and pending backups of the instance, most recent first.

        :param filter_: Optional filter expression, e.g. ``database:prod``.
        :type filter_: str
        """
        client = self.get_conn()
        request: Dict = {"parent": DatabaseAdminClient.instance_path(project_id, instance_id)}
        if filter_:
            request["filter"] = filter_
        return client.list_backups(
            request=request, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def restore_database(
        self,
        instance_id: str,
        database_id: str,
        backup_id: str,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> operation.Operation:
        """
        Creates a new database in the instance by restoring from a backup of the same instance.

        The database can be used once the returned operation completes; its result is the
        :class:`~google.cloud.spanner_admin_database_v1.types.Database`.

        :param instance_id: The ID of the instance holding the backup and the new database.
        :type instance_id: str
        :param database_id: The ID of the database to create.
        :type database_id: str
        :param backup_id: The ID of the backup to restore from.
        :type backup_id: str
        :param project_id: Optional, the ID of the Google Cloud project that owns the instance.
        :type project_id: str
        """
        client = self.get_conn()
        parent = DatabaseAdminClient.instance_path(project_id, instance_id)
        backup = DatabaseAdminClient.backup_path(project_id, instance_id, backup_id)
        self.log.info("Restoring Spanner database %s in %s from %s", database_id, parent, backup)
        return client.restore_database(
            request={"parent": parent, "database_id": database_id, "backup": backup},
            retry=retry,
            timeout=self._timeout(timeout),
            metadata=metadata,
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def list_database_operations(
        self,
        instance_id: str,
        filter_: Optional[str] = None,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> ListDatabaseOperationsPager:
        """
        Lists database long-running operations of the instance.
        """
        client = self.get_conn()
        request: Dict = {"parent": DatabaseAdminClient.instance_path(project_id, instance_id)}
        if filter_:
            request["filter"] = filter_
        return client.list_database_operations(
            request=request, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    @GoogleBaseHook.fallback_to_default_project_id
    def list_backup_operations(
        self,
        instance_id: str,
        filter_: Optional[str] = None,
        project_id: Optional[str] = None,
        retry: Union[Retry, _MethodDefault] = DEFAULT,
        timeout: Optional[float] = None,
        metadata: Sequence[Tuple[str, str]] = (),
    ) -> ListBackupOperationsPager:
        """
        Lists backup long-running operations of the instance.
        """
        client = self.get_conn()
        request: Dict = {"parent": DatabaseAdminClient.instance_path(project_id, instance_id)}
        if filter_:
            request["filter"] = filter_
        return client.list_backup_operations(
            request=request, retry=retry, timeout=self._timeout(timeout), metadata=metadata
        )

    def _resume_operation(self, name: str, result_type, metadata_type) -> operation.Operation:
        operations_client = self.get_conn().transport.operations_client
        return operation.from_gapic(
            operations_client.get_operation(name),
            operations_client,
            result_type,
            metadata_type=metadata_type,
        )

    def get_create_backup_operation(self, name: str) -> operation.Operation:
        """
        Returns the create-backup operation with the given name.

        The operation may have been started by a different process.
        """
        return self._resume_operation(name, Backup, CreateBackupMetadata)

    def get_create_database_operation(self, name: str) -> operation.Operation:
        """Returns the create-database operation with the given name."""
        return self._resume_operation(name, Database, CreateDatabaseMetadata)

    def get_restore_database_operation(self, name: str) -> operation.Operation:
        """Returns the restore-database operation with the given name."""
        return self._resume_operation(name, Database, RestoreDatabaseMetadata)

    def get_update_database_ddl_operation(self, name: str) -> operation.Operation:
        """Returns the update-DDL operation with the given name. Its result is empty."""
        return self._resume_operation(name, empty_pb2.Empty, UpdateDatabaseDdlMetadata)
