#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display the service objectives offered for SQL databases in a location.

    $ azcmd [options] get_sql_service_objective -l eastus2 [--edition Standard]
"""

from azcmd.clients.sql import SqlClient
from azcmd.cmdlets import add_location_arg
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display SQL service objectives."""

    columns = ["edition", "service_objective", "performance_level", "is_default"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_location_arg(parser, cfg)
        parser.add_argument(
            "--edition", metavar="EDITION", help="include only this edition"
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, location, edition=None, output="text"):
        super().__init__(output)
        self.location = location
        self.edition = edition

    def cmdlet_execute(self, session, sub):
        client = SqlClient.from_session(session, sub.id)
        return client.get_service_objectives(self.location, self.edition)
