#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Facade over the Azure compute management client.

`ComputeClient` lists virtual machines and changes their power state. The power
state of a VM is only available from its instance view, which requires one
additional request per VM, so it is retrieved only when asked for.

Stopping a VM deallocates it by default, which releases its compute resources
so it is no longer billed. Pass `stay_provisioned=True` to power it off while
keeping the allocation.
"""

import logging

from azure.mgmt.compute import ComputeManagementClient

from azcmd.clients import ManagementClient, resource_group_of, value_of, wait
from azcmd.paging import get_paginated_resources

LOG = logging.getLogger(__name__)


class ComputeClient(ManagementClient):
    """Facade over `azure.mgmt.compute.ComputeManagementClient`."""

    sdk_class = ComputeManagementClient

    def list_vms(self, resource_group=None, name=None, status=False):
        """Returns the VMs in the subscription or a resource group.

        If `status` is `True`, the power state of each VM is included.
        """

        def predicate(vm):
            return not name or vm.name.lower() == name.lower()

        if resource_group:
            vms = get_paginated_resources(
                self.client.virtual_machines.list,
                predicate,
                resource_group_name=resource_group,
            )
        else:
            vms = get_paginated_resources(
                self.client.virtual_machines.list_all, predicate
            )

        if status:
            return [self.get_vm(resource_group_of(vm.id), vm.name) for vm in vms]
        return [vm_record(vm) for vm in vms]

    def get_vm(self, resource_group, name):
        """Returns a VM including its power state."""
        vm = self.client.virtual_machines.get(
            resource_group, name, expand="instanceView"
        )
        return vm_record(vm)

    def start_vm(self, resource_group, name):
        wait(
            self.client.virtual_machines.begin_start(resource_group, name),
            f"start of VM {name}",
        )
        return self.get_vm(resource_group, name)

    def stop_vm(self, resource_group, name, stay_provisioned=False):
        """Stops a VM, deallocating it unless `stay_provisioned` is `True`."""
        if stay_provisioned:
            poller = self.client.virtual_machines.begin_power_off(resource_group, name)
        else:
            poller = self.client.virtual_machines.begin_deallocate(resource_group, name)
        wait(poller, f"stop of VM {name}")
        return self.get_vm(resource_group, name)

    def restart_vm(self, resource_group, name):
        wait(
            self.client.virtual_machines.begin_restart(resource_group, name),
            f"restart of VM {name}",
        )
        return self.get_vm(resource_group, name)

    def delete_vm(self, resource_group, name):
        wait(
            self.client.virtual_machines.begin_delete(resource_group, name),
            f"deletion of VM {name}",
        )


def power_state(vm):
    """Returns the power state of a VM from its instance view, or `None`."""
    view = getattr(vm, "instance_view", None)
    if not view:
        return None
    for status in view.statuses or []:
        if status.code and status.code.startswith("PowerState/"):
            return status.code.split("/", 1)[1]
    return None


def vm_record(vm):
    hardware = vm.hardware_profile
    storage = vm.storage_profile
    os_disk = storage.os_disk if storage else None
    return {
        "name": vm.name,
        "resource_group": resource_group_of(vm.id),
        "location": vm.location,
        "vm_size": value_of(hardware.vm_size) if hardware else None,
        "os_type": value_of(os_disk.os_type) if os_disk else None,
        "provisioning_state": vm.provisioning_state,
        "power_state": power_state(vm),
        "tags": vm.tags or {},
    }
