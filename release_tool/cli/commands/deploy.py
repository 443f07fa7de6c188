"""Deploy command implementation"""

import sys

import click

from ..utils.output import (
    ConsoleEventHandler,
    console,
    format_job_result,
    print_error,
    print_json,
    print_release_error,
)
from ...api.exceptions import ReleaseToolError
from ...models.request import DeploymentRequest


@click.command()
@click.option('-c', '--config', 'configs', multiple=True, required=True,
              help='Environment to release (repeatable)')
@click.option('-p', '--platform', 'platforms', multiple=True, required=True,
              help='Platform to build (repeatable)')
@click.option('--store-release', is_flag=True, help='Build for store distribution')
@click.option('--version', 'version', help='Version overriding every environment')
@click.option('--json', 'as_json', is_flag=True, help='Print the job as JSON')
@click.pass_context
def deploy(ctx, configs, platforms, store_release, version, as_json):
    """Release environments on platforms

    Every environment is installed, built and processed on every
    platform, one pair after another. A failing pair does not stop
    the others.

    Examples:

        # Internal builds of staging for both platforms
        release-tool deploy -c staging -p android -p ios

        # Store build of two environments with an explicit version
        release-tool deploy -c acme -c globex -p ios --store-release --version 2.1.0
    """
    request = DeploymentRequest(
        configs=list(configs),
        platforms=list(platforms),
        store_release=store_release,
        version=version,
    )

    try:
        releaser = ctx.obj.releaser
        if not as_json and not ctx.obj.quiet:
            releaser.use_event_handler(ConsoleEventHandler())

        job = releaser.deploy(request)

    except ReleaseToolError as e:
        print_release_error(e)
        sys.exit(1)

    except Exception as e:
        print_error("Deployment failed", e)
        if ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    if as_json:
        print_json(job.to_dict())
    else:
        console.print()
        format_job_result(job)

    if not job.is_success:
        sys.exit(1)
