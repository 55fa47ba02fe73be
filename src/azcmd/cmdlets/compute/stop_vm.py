#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Stop a virtual machine.

## Overview

By default the VM is deallocated, which releases its compute resources so that
it is no longer billed for them. Its dynamic public IP address, if any, is
released as well. Use `--stay-provisioned` to shut down the operating system
while keeping the VM allocated:

    $ azcmd [options] stop_vm -g app-rg -n app-vm-1 --stay-provisioned

## Reference

### Synopsis

    $ azcmd [options] stop_vm [cmdlet options]

### Cmdlet Options

`--stay-provisioned`
: Power off the VM without deallocating it.
"""

from azcmd.cmdlets.compute import VMCmdlet


class CLICommand(VMCmdlet):
    """Stop or deallocate a virtual machine."""

    @classmethod
    def add_vm_args(cls, parser, cfg):
        parser.add_argument(
            "--stay-provisioned",
            action="store_true",
            help="power off without deallocating",
        )

    def __init__(self, resource_group, name, stay_provisioned=False, output="text"):
        super().__init__(resource_group, name, output)
        self.stay_provisioned = stay_provisioned

    def vm_execute(self, client):
        return client.stop_vm(
            self.resource_group, self.name, stay_provisioned=self.stay_provisioned
        )
