#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Create or replace a firewall rule on an Azure SQL server.

## Overview

Allows access to the server from a range of IPv4 addresses. Without
`--end-ip`, only the start address is allowed. An existing rule with the same
name is replaced:

    $ azcmd [options] new_sql_firewall_rule -s app-sql-01 -n office \\
        --start-ip 203.0.113.0 --end-ip 203.0.113.255

## Reference

### Synopsis

    $ azcmd [options] new_sql_firewall_rule [cmdlet options]

### Configuration

    Commands:
      new_sql_firewall_rule:
        resource_group: STRING
        server: STRING
        start_ip: IP
        end_ip: IP

### Cmdlet Options

`--start-ip ADDRESS`
: The first address of the range. Required unless configured.

`--end-ip ADDRESS`
: The last address of the range.
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.sql import add_server_arg
from azcmd.config import IP
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Create a SQL firewall rule."""

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_server_arg(parser, cfg)
        add_name_arg(parser, "firewall rule")

        start_ip = cfg("start_ip", type=IP)
        parser.add_argument(
            "--start-ip",
            metavar="ADDRESS",
            default=start_ip,
            required=start_ip is None,
            help="first address of the range",
        )
        parser.add_argument(
            "--end-ip",
            metavar="ADDRESS",
            default=cfg("end_ip", type=IP),
            help="last address of the range",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group, server, name, start_ip, end_ip=None, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.server = server
        self.name = name
        self.start_ip = start_ip
        self.end_ip = end_ip

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.create_firewall_rule(
            self.resource_group, self.server, self.name, self.start_ip, self.end_ip
        )
