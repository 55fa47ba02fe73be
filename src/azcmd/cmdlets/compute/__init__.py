#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Cmdlets for virtual machines.

All of these cmdlets use the `azcmd.clients.compute.ComputeClient` facade. The
cmdlets that change the power state of a VM wait for the operation to complete
and then display the VM with its new power state.
"""

from azcmd.clients.compute import ComputeClient
from azcmd.cmdlets import add_name_arg, add_resource_group_arg
from azcmd.runner import Cmdlet


class VMCmdlet(Cmdlet):
    """Base class for cmdlets that act on a single VM."""

    columns = ["name", "resource_group", "location", "vm_size", "power_state"]

    @classmethod
    def cmdlet_from_cli(cls, parser, argv, cfg):
        add_resource_group_arg(parser, cfg)
        add_name_arg(parser, "VM")
        cls.add_vm_args(parser, cfg)
        return cls(**vars(parser.parse_args(argv)))

    @classmethod
    def add_vm_args(cls, parser, cfg):
        """Subclasses may override to add arguments to `parser`."""

    def __init__(self, resource_group, name, output="text"):
        super().__init__(output)
        self.resource_group = resource_group
        self.name = name

    def cmdlet_execute(self, session, sub):
        client = ComputeClient.from_session(session, sub.id)
        return self.vm_execute(client)

    def vm_execute(self, client):
        """Subclasses must override to act on the VM with `client`."""
        raise NotImplementedError
