"""Install command implementation"""

import sys

import click

from ..utils.output import (
    console,
    format_install_result,
    print_error,
    print_json,
    print_release_error,
)
from ...api.exceptions import ReleaseToolError


@click.command()
@click.argument('config_name')
@click.argument('platform')
@click.option('--version', 'version', help='Version overriding the environment')
@click.option('--json', 'as_json', is_flag=True, help='Print the installed settings as JSON')
@click.pass_context
def install(ctx, config_name, platform, version, as_json):
    """Install an environment's configuration into a native project

    Writes the app identity and settings without building, e.g. to
    debug an environment from the IDE.

    Examples:

        release-tool install staging android
    """
    overrides = {"version": version} if version else None

    try:
        result = ctx.obj.releaser.install_config(config_name, platform, overrides)

    except ReleaseToolError as e:
        print_release_error(e)
        sys.exit(1)

    except Exception as e:
        print_error("Install failed", e)
        if ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    if as_json:
        print_json(result.to_dict())
    else:
        format_install_result(result)
