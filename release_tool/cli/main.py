# release_tool/cli/main.py
"""Main CLI entry point for release-tool"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..api.releaser import Releaser

# Import all commands
from .commands import (
    deploy,
    install,
    build,
    validate,
)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        level = logging.getLevelName(env_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiofiles").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy releaser initialization

    The configuration file is only loaded when a command asks for the
    releaser.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize CLI context"""
        self.config_path = config_path
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self._releaser: Optional[Releaser] = None

    @property
    def releaser(self) -> Releaser:
        """Get the releaser (lazy loading)

        Raises:
            ConfigError: If the configuration file cannot be loaded
        """
        if self._releaser is None:
            self._releaser = Releaser.from_config_file(self.config_path)
            if self.debug:
                console.print(f"[dim]Configuration: {self.config_path or 'auto'}[/dim]")
        return self._releaser


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (default: ./.release-tool.yaml)')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Release Tool - Build and release mobile apps per environment

    Installs each environment's configuration into the Android and iOS
    projects, builds a signed package and hands it to the configured
    artifact processors.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.obj.quiet = quiet


# Register commands
cli.add_command(deploy.deploy)
cli.add_command(install.install)
cli.add_command(build.build)
cli.add_command(validate.validate)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
