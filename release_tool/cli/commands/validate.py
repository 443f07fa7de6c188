"""Validate command implementation"""

import sys

import click

from ..utils.output import console, format_environments, print_release_error, print_success
from ...api.exceptions import ReleaseToolError


@click.command()
@click.option('-p', '--platform', 'platforms', multiple=True,
              help='Platform to validate (default: all supported)')
@click.pass_context
def validate(ctx, platforms):
    """Validate the configuration and list environments

    Evaluates the project and platform options and shows which
    platforms every environment targets.
    """
    try:
        releaser = ctx.obj.releaser
        evaluated = releaser.validate(list(platforms) or None)
        environments = releaser.get_path_resolver().list_environments()

    except ReleaseToolError as e:
        print_release_error(e)
        sys.exit(1)

    print_success(f"Options are valid for {', '.join(evaluated)}")
    console.print()
    format_environments(environments, list(evaluated))
