#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Obtain Azure credentials for subscriptions.

## Overview

This module provides the `SessionProvider` interface used by
`azcmd.runner.SubscriptionRunner` to obtain a credential for each subscription
being processed. The returned object is an `azure.core` token credential that
is passed as the first argument to the constructors of the Azure management SDK
clients. Concrete implementations are found in `azcmd.session.azure`.
"""


class SessionProvider:
    """A session provider is used to obtain credentials for subscriptions.

    This is an abstract base class and cannot be instantiated directly.
    """

    def session(self, subscription_id):
        """Returns a credential for the requested subscription.

        The `subscription_id` is the GUID of an Azure subscription as a string.
        The returned credential is ready to be passed to an Azure SDK client.
        """
        raise NotImplementedError
