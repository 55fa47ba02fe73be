#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Plug-ins included with azcmd.

The azcmd CLI has two pluggable behaviors. Each is selected with a plug-in
specification block in the user configuration file (see `azcmd.plugmgr`):

`Subscriptions`
:  Builds the `azcmd.subload.SubscriptionLoader` used to select subscriptions.
See `azcmd.plugins.subs`. The default is `azcmd.plugins.subs.Identity`.

`Credentials`
:  Builds the `azcmd.session.SessionProvider` that hands out credentials. See
`azcmd.plugins.creds`. The default is `azcmd.plugins.creds.Default`.
"""
