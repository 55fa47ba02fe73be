#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Subscription loader plug-ins.

The plug-ins in this module let users select subscriptions using the metadata
filters of the `azcmd.cli` instead of listing each subscription explicitly.
Subscriptions given explicitly are validated against the loaded list. To select
a plug-in, specify a `Subscriptions` block in the user configuration file. The
`plugin` key may be one of the following values:

azcmd.plugins.subs.Identity
:  `Identity` uses the subscription IDs given on the command line as-is.

azcmd.plugins.subs.Azure
:  `Azure` loads the subscriptions visible to the user from Azure.

azcmd.plugins.subs.URL
:  `URL` loads subscriptions and metadata from a JSON or YAML document.
"""
import logging
from pathlib import Path

from azcmd.config import Bool, Choice, Int, List, Str
from azcmd.plugmgr import Plugin
from azcmd.subload import (
    AzureSubscriptionLoader,
    IdentitySubscriptionLoader,
    URLSubscriptionLoader,
)

LOG = logging.getLogger(__name__)


class Identity(Plugin):
    """Subscription loader plug-in that performs no lookups.

    The subscriptions processed are exactly those given via `--subscription`.
    Names cannot be used and metadata filters are not available. There are no
    options for this plug-in.
    """

    def instantiate(self, args):
        return IdentitySubscriptionLoader()


class Azure(Plugin):
    """Subscription loader plug-in that lists subscriptions from Azure.

    ## Overview

    Subscriptions are listed with the credentials obtained from the
    `Credentials` plug-in, so the list contains every subscription the user can
    see. Subscriptions can then be given on the CLI by ID or by name, and
    selected with the `--include` and `--exclude` metadata filters:

        $ azcmd --include env=prod get_resource_group

    The metadata attached to each subscription is `id`, `name`, `state`, and
    `tenant_id`. Named capture groups of the `name_regexp` pattern add more.

    ## Configuration

        Subscriptions:
          plugin: azcmd.plugins.subs.Azure
          options:
            name_regexp: STRING
            str_template: STRING
            max_age: INTEGER

    ## Plug-in Options

    `name_regexp`, `--loader-name-regexp`
    : A regular expression with named capture groups applied to each
    subscription name. For example, `^sub-(?P<bu>[^-]+)-(?P<env>.+)` adds the
    `bu` and `env` attributes.

    `str_template`, `--loader-str-template`
    : The format string used when printing a subscription. The default is
    `{id}`. Use `{name}` to see names in the output instead.

    `max_age`, `--loader-max-age`
    : The number of seconds to cache the subscription list in
    `~/.cache/azcmd/subscriptions.json`. The default is 0, which disables the
    cache.
    """

    def __init__(self, parser, cfg):
        super().__init__(parser, cfg)

        # Plug-in flags are commingled with the main CLI flags, so they are
        # prefixed with '--loader-'.
        group = parser.add_argument_group("subscription loader options")
        group.add_argument(
            "--loader-name-regexp",
            metavar="STRING",
            default=cfg("name_regexp", type=Str),
            help="regexp applied to subscription name for metadata attributes",
        )

        group.add_argument(
            "--loader-str-template",
            metavar="STRING",
            default=cfg("str_template", type=Str, default="{id}"),
            help="format string used to display a subscription",
        )

        group.add_argument(
            "--loader-max-age",
            metavar="SECS",
            type=int,
            default=cfg("max_age", type=Int, default=0),
            help="max age of the cached subscription list",
        )

    def instantiate(self, args):
        # The CLI instantiates the credentials plug-in first and makes its
        # session provider available on the namespace.
        credential = args.session_provider.session(None)
        return AzureSubscriptionLoader(
            credential,
            name_regexp=args.loader_name_regexp,
            str_template=args.loader_str_template,
            cache_path=Path.home() / ".cache" / "azcmd" / "subscriptions.json",
            max_age=args.loader_max_age,
        )


class URL(Plugin):
    """Subscription loader plug-in that loads subscriptions from a document.

    ## Overview

    Subscriptions and their metadata are read from a JSON or YAML document
    retrieved from a URL. This lets an organization attach its own metadata,
    such as business unit or environment, to each subscription and select
    subscriptions with the `--include` and `--exclude` filters. Each entry must
    have an `id` key:

        Subscriptions:
          - id: 00000000-0000-0000-0000-000000000000
            name: sub-retail-prod
            env: prod

    ## Configuration

        Subscriptions:
          plugin: azcmd.plugins.subs.URL
          options:
            url: STRING
            format: ("json" | "yaml")
            path:
              - STRING
            str_template: STRING
            max_age: INTEGER
            no_verify: BOOLEAN

    ## Plug-in Options

    `url`, `--loader-url`
    : The URL of the document. Use `file:///path/to/subs.yaml` for a local
    file. Required.

    `format`, `--loader-format`
    : The format of the document, `json` (the default) or `yaml`.

    `path`, `--loader-path`
    : Keys followed into the document to find the list of subscriptions. On
    the command line, separate the keys with dots. The example above uses
    `Subscriptions`.

    `str_template`, `--loader-str-template`
    : The format string used when printing a subscription.

    `max_age`, `--loader-max-age`
    : The number of seconds to cache the document in
    `~/.cache/azcmd/subscriptions-url.json`. The default is 0.

    `no_verify`, `--loader-no-verify`
    : Do not verify the TLS certificate of the server.
    """

    def __init__(self, parser, cfg):
        super().__init__(parser, cfg)

        group = parser.add_argument_group("subscription loader options")
        url = cfg("url", type=Str)
        group.add_argument(
            "--loader-url",
            metavar="URL",
            default=url,
            required=url is None,
            help="URL of the subscription document",
        )

        group.add_argument(
            "--loader-format",
            choices=("json", "yaml"),
            default=cfg("format", type=Choice("json", "yaml"), default="json"),
            help="format of the subscription document",
        )

        group.add_argument(
            "--loader-path",
            metavar="KEYS",
            type=lambda s: s.split("."),
            default=cfg("path", type=List(Str), default=[]),
            help="dotted keys to the list of subscriptions",
        )

        group.add_argument(
            "--loader-str-template",
            metavar="STRING",
            default=cfg("str_template", type=Str, default="{id}"),
            help="format string used to display a subscription",
        )

        group.add_argument(
            "--loader-max-age",
            metavar="SECS",
            type=int,
            default=cfg("max_age", type=Int, default=0),
            help="max age of the cached subscription document",
        )

        group.add_argument(
            "--loader-no-verify",
            action="store_true",
            default=cfg("no_verify", type=Bool, default=False),
            help="do not verify the TLS certificate",
        )

    def instantiate(self, args):
        return URLSubscriptionLoader(
            args.loader_url,
            fmt=args.loader_format,
            path=args.loader_path,
            str_template=args.loader_str_template,
            cache_path=Path.home() / ".cache" / "azcmd" / "subscriptions-url.json",
            max_age=args.loader_max_age,
            no_verify=args.loader_no_verify,
        )
