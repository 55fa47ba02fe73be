#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""CLI and library of cmdlets that manage Azure resources across subscriptions.

## Overview

`azcmd` is both a CLI and library of small commands, called cmdlets, that wrap
the Azure Resource Manager management SDKs. Each cmdlet parses its own
arguments, calls one or more operations on an Azure SDK client, and reshapes
the returned models into simple records that are rendered as a text table,
JSON, or YAML. Cmdlets are executed against one or more subscriptions, which
are processed one after another.

The cmdlets included cover the following areas:

Resource groups, resources, and template deployments
: See `azcmd.cmdlets.resources` and the `azcmd.clients.resources` facade.

Storage accounts and their access keys
: See `azcmd.cmdlets.storage` and the `azcmd.clients.storage` facade.

Virtual machines
: See `azcmd.cmdlets.compute` and the `azcmd.clients.compute` facade.

Automation runbooks, jobs, and schedules
: See `azcmd.cmdlets.automation` and the `azcmd.clients.automation` facade.

SQL servers, databases, and firewall rules
: See `azcmd.cmdlets.sql` and the `azcmd.clients.sql` facade.

### CLI Usage

The azcmd CLI command is documented on the `azcmd.cli` page. It includes a user
guide on selecting subscriptions, the subscription loader and credential
plug-ins, as well as the syntax of the configuration file.

### Library Usage

The facades in `azcmd.clients` can be used without the CLI. Each accepts an
Azure SDK management client, which makes them easy to reuse in other scripts:

    from azure.identity import DefaultAzureCredential
    from azure.mgmt.resource import ResourceManagementClient

    from azcmd.clients.resources import ResourcesClient

    sub_id = "00000000-0000-0000-0000-000000000000"
    rmc = ResourceManagementClient(DefaultAzureCredential(), sub_id)
    client = ResourcesClient(rmc)

    for rg in client.filter_resource_groups():
        print(rg["name"], rg["location"])

Listing operations in the facades follow continuation tokens until the service
reports no further pages. The pagination helper used to do so is available in
`azcmd.paging`.

### User-Defined Cmdlets

A cmdlet is a single Python module that contains a subclass of
`azcmd.runner.Cmdlet` called `CLICommand`. After the cmdlet has been written,
add the directory or package containing it to the command path using the
`--cmd-path` [CLI flag](cli.html#options) or the `cmd_path` option in the
configuration file. Refer to `azcmd.runner` for the contract between the
framework and a cmdlet author.

### User-Defined Plug-ins

Subscription loaders and credential loaders are plug-ins. To write your own,
subclass `azcmd.plugmgr.Plugin` and return an instance of either
`azcmd.subload.SubscriptionLoader` or `azcmd.session.SessionProvider` from
`azcmd.plugmgr.Plugin.instantiate`. Review the plug-ins included in
`azcmd.plugins` for examples.
"""

name = "azcmd"
__version__ = "1.0.0"
