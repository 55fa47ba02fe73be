#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Cmdlets for resource groups, resources, template deployments, and locations.

All of these cmdlets use the `azcmd.clients.resources.ResourcesClient` facade.
The cmdlets that deploy or validate a template share the template options
defined in this module:

`--template-file FILE` or `--template-uri URI`
: The ARM template to deploy. Exactly one must be specified.

`--parameters-file FILE`
: A standard ARM parameters file.

`--parameter NAME=VALUE`
: A template parameter, which overrides the same parameter in the parameters
file. Can be specified multiple times. Use `NAME=int:VALUE` or
`NAME=bool:VALUE` for parameters that are not strings.

`--deployment-name NAME`
: The name of the deployment. The default is the name of the template file
without its extension, or a generated name if a URI is used.

`--mode MODE`
: Either `Incremental`, the default, or `Complete`.
"""

from azcmd.argparse import KeyValuePair
from azcmd.clients.resources import DeploymentSpec
from azcmd.config import Choice, File

DEPLOYMENT_MODES = ("Incremental", "Complete")

_DEPLOYMENT_KEYS = (
    "template_file",
    "template_uri",
    "parameters_file",
    "parameters",
    "deployment_name",
    "mode",
)


def add_resource_type_args(parser, required=True):
    """Adds the options that identify the type of a generic resource."""
    parser.add_argument(
        "--resource-type",
        "-t",
        metavar="TYPE",
        required=required,
        help="fully qualified type such as Microsoft.Web/sites",
    )
    parser.add_argument(
        "--parent",
        metavar="PATH",
        help="parent of a nested resource such as servers/myserver",
    )
    parser.add_argument(
        "--api-version",
        metavar="VERSION",
        help="API version to use instead of the newest",
    )


def add_deployment_args(parser, cfg):
    """Adds the template deployment options to `parser`."""
    group = parser.add_argument_group("template options")
    source = group.add_mutually_exclusive_group()
    source.add_argument(
        "--template-file",
        metavar="FILE",
        help="local ARM template file",
    )
    source.add_argument(
        "--template-uri",
        metavar="URI",
        help="URI of an ARM template",
    )

    group.add_argument(
        "--parameters-file",
        metavar="FILE",
        default=cfg("parameters_file", type=File),
        help="ARM template parameters file",
    )
    group.add_argument(
        "--parameter",
        metavar="NAME=VALUE",
        dest="parameters",
        action=KeyValuePair,
        default={},
        help="template parameter, can be specified multiple times",
    )
    group.add_argument(
        "--deployment-name",
        metavar="NAME",
        help="name of the deployment",
    )
    group.add_argument(
        "--mode",
        choices=DEPLOYMENT_MODES,
        default=cfg("mode", type=Choice(*DEPLOYMENT_MODES), default="Incremental"),
        help="deployment mode",
    )


def pop_deployment_spec(parser, kwargs, required=True):
    """Removes the template options from `kwargs` and returns a `DeploymentSpec`.

    `kwargs` is the dict of parsed arguments. Returns `None` if no template
    was specified and `required` is `False`. Otherwise, exits via the parser
    when no template was specified.
    """
    options = {k: kwargs.pop(k) for k in _DEPLOYMENT_KEYS}

    if not (options["template_file"] or options["template_uri"]):
        if required:
            parser.error("one of --template-file or --template-uri is required")
        return None

    return DeploymentSpec(
        name=options["deployment_name"],
        template_file=options["template_file"],
        template_uri=options["template_uri"],
        parameters_file=options["parameters_file"],
        parameters=options["parameters"],
        mode=options["mode"],
    )
