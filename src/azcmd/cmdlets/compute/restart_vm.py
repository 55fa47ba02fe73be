#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Restart a running virtual machine.

    $ azcmd [options] restart_vm -g RG -n NAME
"""

from azcmd.cmdlets.compute import VMCmdlet


class CLICommand(VMCmdlet):
    """Restart a virtual machine."""

    def vm_execute(self, client):
        return client.restart_vm(self.resource_group, self.name)
