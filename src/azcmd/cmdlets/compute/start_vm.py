#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Start a virtual machine and wait until it is running.

    $ azcmd [options] start_vm -g RG -n NAME
"""

from azcmd.cmdlets.compute import VMCmdlet


class CLICommand(VMCmdlet):
    """Start a virtual machine."""

    def vm_execute(self, client):
        return client.start_vm(self.resource_group, self.name)
