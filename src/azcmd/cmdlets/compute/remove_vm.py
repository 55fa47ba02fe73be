#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Delete a virtual machine.

Disks and network interfaces attached to the VM are not deleted.

    $ azcmd [options] remove_vm -g RG -n NAME
"""

from azcmd.cmdlets.compute import VMCmdlet


class CLICommand(VMCmdlet):
    """Delete a virtual machine."""

    columns = None

    def vm_execute(self, client):
        client.delete_vm(self.resource_group, self.name)
        return f"removed VM {self.name}"
