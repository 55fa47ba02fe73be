#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Facade over the Azure SQL management client.

`SqlClient` manages logical SQL servers, their databases and firewall rules,
and lists the service objectives, the performance tiers of a database, that are
offered in a location. Databases can be copied to another server, once or
continuously, and exported to or imported from BACPAC files in blob storage.
Database sizes are given and reported in gigabytes.
"""

import ipaddress
import logging
from urllib.parse import urlparse

from azure.mgmt.sql import SqlManagementClient
from azure.mgmt.sql.models import (
    Database,
    DatabaseUpdate,
    ExportDatabaseDefinition,
    FirewallRule,
    ImportNewDatabaseDefinition,
    Server,
    Sku,
)

from azcmd.clients import (
    DatabaseCopyNotFoundError,
    ManagementClient,
    resource_group_of,
    value_of,
    wait,
)
from azcmd.paging import get_paginated_resources

LOG = logging.getLogger(__name__)

GB = 1024 ** 3


class SqlClient(ManagementClient):
    """Facade over `azure.mgmt.sql.SqlManagementClient`."""

    sdk_class = SqlManagementClient

    # Servers

    def filter_servers(self, resource_group=None, name=None):
        """Returns the server called `name` or all servers."""
        if resource_group and name:
            return [server_record(self.client.servers.get(resource_group, name))]

        def predicate(s):
            return not name or s.name.lower() == name.lower()

        if resource_group:
            servers = get_paginated_resources(
                self.client.servers.list_by_resource_group,
                predicate,
                resource_group_name=resource_group,
            )
        else:
            servers = get_paginated_resources(self.client.servers.list, predicate)
        return [server_record(s) for s in servers]

    def create_server(
        self,
        resource_group,
        name,
        location,
        admin_login,
        admin_password,
        version="12.0",
        tags=None,
    ):
        parameters = Server(
            location=location,
            administrator_login=admin_login,
            administrator_login_password=admin_password,
            version=version,
            tags=tags,
        )
        server = wait(
            self.client.servers.begin_create_or_update(resource_group, name, parameters),
            f"creation of SQL server {name}",
        )
        return server_record(server)

    def delete_server(self, resource_group, name):
        wait(
            self.client.servers.begin_delete(resource_group, name),
            f"deletion of SQL server {name}",
        )

    # Databases

    def filter_databases(self, resource_group, server, name=None):
        """Returns the database called `name` or all databases of a server.

        Raises `azure.core.exceptions.ResourceNotFoundError` if there is no
        database called `name`.
        """
        if name:
            db = self.client.databases.get(resource_group, server, name)
            return [database_record(db)]

        databases = get_paginated_resources(
            self.client.databases.list_by_server,
            resource_group_name=resource_group,
            server_name=server,
        )
        return [database_record(db) for db in databases]

    def create_database(
        self,
        resource_group,
        server,
        name,
        edition=None,
        service_objective=None,
        max_size_gb=None,
        collation=None,
        tags=None,
    ):
        """Creates a database on a server and returns it.

        `service_objective` is a SKU name such as `S0` or `GP_Gen5_2` and
        `edition` is its tier such as `Standard`. The database is created in
        the location of the server.
        """
        location = self.client.servers.get(resource_group, server).location
        parameters = Database(
            location=location,
            sku=_sku(edition, service_objective),
            max_size_bytes=max_size_gb * GB if max_size_gb else None,
            collation=collation,
            tags=tags,
        )
        db = wait(
            self.client.databases.begin_create_or_update(
                resource_group, server, name, parameters
            ),
            f"creation of database {name} on {server}",
        )
        return database_record(db)

    def update_database(
        self,
        resource_group,
        server,
        name,
        edition=None,
        service_objective=None,
        max_size_gb=None,
    ):
        """Changes the SKU or maximum size of a database."""
        if not service_objective and not edition and not max_size_gb:
            raise ValueError("Nothing to update, specify a service objective or size")

        parameters = DatabaseUpdate(
            sku=_sku(edition, service_objective),
            max_size_bytes=max_size_gb * GB if max_size_gb else None,
        )
        db = wait(
            self.client.databases.begin_update(resource_group, server, name, parameters),
            f"update of database {name} on {server}",
        )
        return database_record(db)

    def delete_database(self, resource_group, server, name):
        wait(
            self.client.databases.begin_delete(resource_group, server, name),
            f"deletion of database {name} on {server}",
        )

    # Copies

    def copy_database(
        self,
        resource_group,
        server,
        name,
        partner_server,
        partner_database=None,
        partner_resource_group=None,
        continuous=False,
        edition=None,
        service_objective=None,
    ):
        """Copies a database to a partner server and returns the copy.

        A one-time copy is a new database that is transactionally consistent
        with the source when the copy completes. A continuous copy is a
        readable geo-secondary that is kept in sync with the source until the
        copy is stopped with `stop_database_copy`. The copy is created in the
        location of the partner server. Its name is the name of the source
        unless `partner_database` is given, which a continuous copy does not
        allow.
        """
        partner_resource_group = partner_resource_group or resource_group
        partner_database = partner_database or name
        if continuous:
            if partner_database != name:
                raise ValueError("A continuous copy has the name of its source")
            if (partner_resource_group, partner_server.lower()) == (
                resource_group,
                server.lower(),
            ):
                raise ValueError("A continuous copy must be on another server")
        elif (partner_server.lower(), partner_database.lower()) == (
            server.lower(),
            name.lower(),
        ):
            raise ValueError("A database cannot be copied onto itself")

        source = self.client.databases.get(resource_group, server, name)
        partner = self.client.servers.get(partner_resource_group, partner_server)
        parameters = Database(
            location=partner.location,
            create_mode="Secondary" if continuous else "Copy",
            source_database_id=source.id,
            sku=None if continuous else _sku(edition, service_objective),
        )
        kind = "continuous copy" if continuous else "copy"
        db = wait(
            self.client.databases.begin_create_or_update(
                partner_resource_group, partner_server, partner_database, parameters
            ),
            f"{kind} of database {name} to {partner_server}",
        )
        return database_record(db)

    def _copies(self, resource_group, server, name, partner_server, partner_database):
        def predicate(link):
            return _matches(link.partner_server, partner_server) and _matches(
                link.partner_database, partner_database
            )

        return get_paginated_resources(
            self.client.replication_links.list_by_database,
            predicate,
            resource_group_name=resource_group,
            server_name=server,
            database_name=name,
        )

    def filter_database_copies(
        self, resource_group, server, name, partner_server=None, partner_database=None
    ):
        """Returns the continuous copies of a database and their state."""
        links = self._copies(
            resource_group, server, name, partner_server, partner_database
        )
        return [database_copy_record(link) for link in links]

    def stop_database_copy(
        self, resource_group, server, name, partner_server, partner_database=None
    ):
        """Stops the continuous copies of a database on a partner server.

        The partner databases are kept as independent databases. Returns the
        copies that were stopped. Raises `DatabaseCopyNotFoundError` if the
        database has no copy on the partner server.
        """
        links = self._copies(
            resource_group, server, name, partner_server, partner_database
        )
        if not links:
            raise DatabaseCopyNotFoundError(name, partner_server, partner_database)

        for link in links:
            LOG.info(
                "stopping copy of %s to %s/%s",
                name,
                link.partner_server,
                link.partner_database,
            )
            self.client.replication_links.delete(
                resource_group, server, name, link.name
            )
        return [database_copy_record(link) for link in links]

    # Import and export

    def export_database(
        self,
        resource_group,
        server,
        name,
        storage_uri,
        storage_key,
        admin_login,
        admin_password,
    ):
        """Exports a database to a BACPAC blob and returns the request.

        `storage_uri` is the URL of the blob to create, such as
        `https://acct.blob.core.windows.net/bacpacs/orders.bacpac`, and
        `storage_key` is an access key of its storage account. The export
        signs in to the server with the SQL administrator login.
        """
        parameters = ExportDatabaseDefinition(
            storage_key_type="StorageAccessKey",
            storage_key=storage_key,
            storage_uri=_blob_uri(storage_uri),
            administrator_login=admin_login,
            administrator_login_password=admin_password,
        )
        result = wait(
            self.client.databases.begin_export(resource_group, server, name, parameters),
            f"export of database {name} to {storage_uri}",
        )
        return import_export_record(result)

    def import_database(
        self,
        resource_group,
        server,
        name,
        storage_uri,
        storage_key,
        admin_login,
        admin_password,
        edition=None,
        service_objective=None,
        max_size_gb=None,
    ):
        """Imports a BACPAC blob into a new database and returns the request."""
        parameters = ImportNewDatabaseDefinition(
            database_name=name,
            edition=edition,
            service_objective_name=service_objective,
            max_size_bytes=str(max_size_gb * GB) if max_size_gb else None,
            storage_key_type="StorageAccessKey",
            storage_key=storage_key,
            storage_uri=_blob_uri(storage_uri),
            administrator_login=admin_login,
            administrator_login_password=admin_password,
        )
        result = wait(
            self.client.servers.begin_import_database(
                resource_group, server, parameters
            ),
            f"import of database {name} from {storage_uri}",
        )
        return import_export_record(result)

    def get_import_export_status(self, resource_group, server, name):
        """Returns the import and export operations of a database.

        Operations that are running report their percentage complete, and
        failed operations report the error.
        """
        operations = get_paginated_resources(
            self.client.database_operations.list_by_database,
            _is_import_export,
            resource_group_name=resource_group,
            server_name=server,
            database_name=name,
        )
        return [database_operation_record(op) for op in operations]

    # Firewall rules

    def filter_firewall_rules(self, resource_group, server, name=None):
        if name:
            rule = self.client.firewall_rules.get(resource_group, server, name)
            return [firewall_rule_record(rule)]

        rules = get_paginated_resources(
            self.client.firewall_rules.list_by_server,
            resource_group_name=resource_group,
            server_name=server,
        )
        return [firewall_rule_record(r) for r in rules]

    def create_firewall_rule(self, resource_group, server, name, start_ip, end_ip=None):
        """Creates or replaces a firewall rule allowing a range of addresses.

        If `end_ip` is not provided, the rule allows `start_ip` only. Raises
        `ValueError` if an address is invalid or the range is reversed.
        """
        end_ip = end_ip or start_ip
        start, end = ipaddress.IPv4Address(start_ip), ipaddress.IPv4Address(end_ip)
        if start > end:
            raise ValueError(f"Start address {start} is after end address {end}")

        rule = self.client.firewall_rules.create_or_update(
            resource_group,
            server,
            name,
            FirewallRule(start_ip_address=str(start), end_ip_address=str(end)),
        )
        return firewall_rule_record(rule)

    def delete_firewall_rule(self, resource_group, server, name):
        LOG.info("deleting firewall rule %s on %s", name, server)
        self.client.firewall_rules.delete(resource_group, server, name)

    # Service objectives

    def get_service_objectives(self, location, edition=None):
        """Returns the service objectives offered in a location."""
        capabilities = self.client.capabilities.list_by_location(location)
        records = []
        for version in capabilities.supported_server_versions or []:
            for ed in version.supported_editions or []:
                if edition and ed.name.lower() != edition.lower():
                    continue
                for slo in ed.supported_service_level_objectives or []:
                    records.append(service_objective_record(ed.name, slo))
        return records


def _sku(edition, service_objective):
    if not edition and not service_objective:
        return None
    return Sku(name=service_objective or edition, tier=edition)


def _blob_uri(uri):
    parts = urlparse(uri or "")
    container, _, blob = parts.path.strip("/").partition("/")
    if parts.scheme not in ("http", "https") or not container or not blob:
        raise ValueError(f"Storage URI must name a container and a blob: {uri}")
    return uri


def _matches(value, name):
    return not name or value.lower() == name.lower()


def _is_import_export(op):
    operation = (op.operation or "").lower()
    return "import" in operation or "export" in operation


def server_record(s):
    return {
        "name": s.name,
        "resource_group": resource_group_of(s.id),
        "location": s.location,
        "version": s.version,
        "administrator_login": s.administrator_login,
        "fully_qualified_domain_name": s.fully_qualified_domain_name,
        "state": s.state,
        "tags": s.tags or {},
    }


def database_record(db):
    return {
        "name": db.name,
        "resource_group": resource_group_of(db.id),
        "status": value_of(db.status),
        "edition": db.sku.tier if db.sku else None,
        "service_objective": db.current_service_objective_name,
        "max_size_gb": db.max_size_bytes // GB if db.max_size_bytes else None,
        "collation": db.collation,
        "creation_date": db.creation_date,
    }


def firewall_rule_record(r):
    return {
        "name": r.name,
        "start_ip_address": r.start_ip_address,
        "end_ip_address": r.end_ip_address,
    }


def service_objective_record(edition, slo):
    level = slo.performance_level
    return {
        "edition": edition,
        "service_objective": slo.name,
        "performance_level": f"{level.value} {value_of(level.unit)}" if level else None,
        "is_default": value_of(slo.status) == "Default",
    }


def database_copy_record(link):
    return {
        "partner_server": link.partner_server,
        "partner_database": link.partner_database,
        "partner_location": link.partner_location,
        "role": value_of(link.role),
        "partner_role": value_of(link.partner_role),
        "replication_state": value_of(link.replication_state),
        "percent_complete": link.percent_complete,
        "start_time": link.start_time,
    }


def import_export_record(r):
    return {
        "request_id": r.request_id,
        "request_type": r.request_type,
        "database_name": r.database_name,
        "status": r.status,
        "blob_uri": r.blob_uri,
        "queued_time": r.queued_time,
        "last_modified_time": r.last_modified_time,
        "error_message": r.error_message,
    }


def database_operation_record(op):
    return {
        "operation": op.operation_friendly_name or op.operation,
        "state": value_of(op.state),
        "percent_complete": op.percent_complete,
        "start_time": op.start_time,
        "error": op.error_description,
    }
