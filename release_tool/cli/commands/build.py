"""Build command implementation"""

import sys
from pathlib import Path

import click

from ..utils.output import (
    console,
    format_build_result,
    print_error,
    print_json,
    print_release_error,
)
from ...api.exceptions import ReleaseToolError
from ...constants import ReleaseChannel


@click.command()
@click.argument('platform')
@click.option('--store-release', is_flag=True, help='Build for store distribution')
@click.option('--output', 'output_path', type=click.Path(file_okay=False, path_type=Path),
              help='Artifact directory')
@click.option('--json', 'as_json', is_flag=True, help='Print the build result as JSON')
@click.pass_context
def build(ctx, platform, store_release, output_path, as_json):
    """Build a native project with its current configuration

    Examples:

        release-tool build ios --store-release --output ./dist
    """
    try:
        result = ctx.obj.releaser.build(ReleaseChannel.from_flag(store_release), platform, output_path)

    except ReleaseToolError as e:
        print_release_error(e)
        sys.exit(1)

    except Exception as e:
        print_error("Build failed", e)
        if ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    if as_json:
        print_json(result.to_dict())
    else:
        format_build_result(result)

    if not result.success:
        sys.exit(1)
