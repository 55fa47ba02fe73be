#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the firewall rules of an Azure SQL server.

A rule with the range `0.0.0.0` to `0.0.0.0` allows access from Azure
services.

    $ azcmd [options] get_sql_firewall_rule -g RG -s SERVER [--name NAME]
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display SQL firewall rules."""

    columns = ["name", "start_ip_address", "end_ip_address"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "firewall rule", required=False)
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, server, name=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.filter_firewall_rules(self.resource_group, self.server, self.name)
