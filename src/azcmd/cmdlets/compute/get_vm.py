#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Display virtual machines.

## Overview

Lists the VMs in each subscription, or in a resource group if
`--resource-group` is specified. The power state of each VM requires an extra
request per VM, so it is only displayed when `--status` is used, or when a
single VM is selected by resource group and name:

    $ azcmd [options] get_vm -g app-rg --status
    00000000-0000-0000-0000-000000000000:
    name      resource_group  location  vm_size          power_state
    ====      ==============  ========  =======          ===========
    app-vm-1  app-rg          eastus2   Standard_D2s_v3  running
    app-vm-2  app-rg          eastus2   Standard_D2s_v3  deallocated

## Reference

### Synopsis

    $ azcmd [options] get_vm [cmdlet options]

### Cmdlet Options

`resource_group`, `--resource-group NAME`
: Include only VMs in this resource group.

`--name NAME`
: Display only the named VM.

`--status`
: Include the power state of each VM.
"""

from azcmd.clients.compute import ComputeClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.cmdlets.compute import VMCmdlet
from azcmd.runner import Cmdlet


class CLICommand(Cmdlet):
    """Display virtual machines."""

    columns = VMCmdlet.columns

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg, required=False)
        add_name_arg(parser, "VM", required=False)
        parser.add_argument(
            "--status",
            action="store_true",
            help="include the power state of each VM",
        )
        return cls(**vars(parser.parse_args(argv)))

    def __init__(self, resource_group=None, name=None, status=False, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name
        self.status = status

    def cmdlet_execute(self, session, sub):
        client = ComputeClient.from_session(session, sub.id)
        if self.resource_group and self.name:
            return client.get_vm(self.resource_group, self.name)
        return client.list_vms(self.resource_group, self.name, status=self.status)
