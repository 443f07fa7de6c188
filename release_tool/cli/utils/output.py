"""Output formatting utilities"""

import json
from typing import Any, Dict, List, Optional

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...api.exceptions import ReleaseToolError
from ...constants import EMOJI_ARROW, EMOJI_ERROR, EMOJI_SKIP, EMOJI_SUCCESS, EMOJI_WARNING
from ...core.event_bus import EventHandler
from ...models.job import DeploymentJob, PairStatus
from ...models.result import BuildResult, InstallResult
from ...utils.file_utils import format_size

console = Console()

STATUS_STYLES = {
    PairStatus.SUCCESSFUL: f"[green]{EMOJI_SUCCESS} Successful[/green]",
    PairStatus.FAILED: f"[red]{EMOJI_ERROR} Failed[/red]",
    PairStatus.ESCAPED: f"[yellow]{EMOJI_SKIP} Escaped[/yellow]",
}


class ConsoleEventHandler(EventHandler):
    """Prints live job progress"""

    def __init__(self, output: Console = None):
        super().__init__()
        self.console = output or console

    def on_will_start_job(self, event):
        job = event.job
        self.console.print(
            f"[bold]Releasing {', '.join(job.configs)} on {', '.join(job.platforms)}[/bold] "
            f"[dim]({job.status.total} pair(s))[/dim]"
        )

    def on_will_start_config(self, event):
        self.console.print(f"\n[cyan]{EMOJI_ARROW} {event.payload.label}[/cyan]")

    def on_did_escape_config(self, event):
        self.console.print(f"  [yellow]{EMOJI_SKIP} No {event.payload.platform} configuration, skipped[/yellow]")

    def on_did_install_config(self, event):
        self.console.print(f"  [green]{EMOJI_SUCCESS}[/green] Configuration installed")

    def on_will_build(self, event):
        self.console.print(f"  Building into [dim]{event.payload.output_path}[/dim]")

    def on_did_build(self, event):
        result = event.payload.result
        if result.success:
            self.console.print(f"  [green]{EMOJI_SUCCESS}[/green] Built {result.output_artifact_path} "
                               f"[dim]({result.duration:.1f}s)[/dim]")

    def on_did_process_artifact(self, event):
        payload = event.payload
        if payload.result.success:
            self.console.print(f"  [green]{EMOJI_SUCCESS}[/green] {payload.processor}: {payload.result.message}")

    def on_did_fail_config(self, event):
        payload = event.payload
        self.console.print(f"  [red]{EMOJI_ERROR} Failed on {payload.failed_on}:[/red] {payload.error}")


def format_job_result(job: DeploymentJob) -> None:
    """Format and display a finished job"""
    table = Table(title="Release Summary", box=box.ROUNDED)
    table.add_column("Config", style="cyan")
    table.add_column("Platform")
    table.add_column("Status")
    table.add_column("Completed Tasks", style="dim")
    table.add_column("Failed On")

    for config_name in job.configs:
        for platform in job.platforms:
            result = job.get_result(config_name, platform)
            if result is None:
                continue
            table.add_row(
                config_name,
                platform,
                STATUS_STYLES.get(result.status, result.status.value),
                ", ".join(result.completed_tasks) or "-",
                result.failed_on or "",
            )

    console.print(table)

    status = job.status
    lines = [
        f"[bold]Successful:[/bold] {status.successful}",
        f"[bold]Failed:[/bold] {status.failed}",
        f"[bold]Escaped:[/bold] {status.escaped}",
        f"[bold]Total:[/bold] {status.total}",
    ]
    if job.duration is not None:
        lines.append(f"[bold]Duration:[/bold] {job.duration:.1f}s")

    if job.is_success:
        panel = Panel("\n".join(lines), title=f"{EMOJI_SUCCESS} {job.last_update}", border_style="green")
    else:
        panel = Panel("\n".join(lines), title=f"{EMOJI_ERROR} {job.last_update}", border_style="red")
    console.print(panel)


def format_install_result(result: InstallResult) -> None:
    """Format and display installed settings"""
    table = Table(title=f"Installed '{result.installed_config_name}'", box=box.SIMPLE)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for name, value in result.config_settings.items():
        table.add_row(name, str(value))

    console.print(table)


def format_build_result(result: BuildResult) -> None:
    """Format and display a build result"""
    if result.success:
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] Build completed successfully!",
            "",
            f"[bold]Artifact:[/bold] {result.output_artifact_path}",
            f"[bold]Duration:[/bold] {result.duration:.1f}s",
        ]
        if result.output_artifact_path and result.output_artifact_path.exists():
            lines.append(f"[bold]Size:[/bold] {format_size(result.output_artifact_path.stat().st_size)}")

        console.print(Panel("\n".join(lines), title="Build Result", border_style="green"))
    else:
        lines = [f"[red]{EMOJI_ERROR} Build failed:[/red] {result.message}"]
        if result.stderr:
            lines.extend(["", "[dim]" + result.stderr.strip()[-2000:] + "[/dim]"])

        console.print(Panel("\n".join(lines), title="Build Error", border_style="red"))


def format_environments(environments: Dict[str, List[str]], platforms: List[str]) -> None:
    """Display which platforms each environment targets"""
    if not environments:
        console.print(f"[yellow]{EMOJI_WARNING} No environments found[/yellow]")
        return

    table = Table(title="Environments", box=box.SIMPLE)
    table.add_column("Config", style="cyan")
    for platform in platforms:
        table.add_column(platform)

    for name, targeted in environments.items():
        cells = [
            f"[green]{EMOJI_SUCCESS}[/green]" if platform.lower() in targeted else f"[dim]{EMOJI_SKIP}[/dim]"
            for platform in platforms
        ]
        table.add_row(name, *cells)

    console.print(table)


def print_json(data: Any) -> None:
    """Print machine-readable JSON"""
    click.echo(json.dumps(data, indent=2, default=str))


def print_release_error(error: ReleaseToolError) -> None:
    """Display a release-tool error with its field errors"""
    lines = [f"[red]{EMOJI_ERROR} {error}[/red]"]

    for field_error in getattr(error, "errors", None) or []:
        lines.append(f"  • {field_error}")

    cause = getattr(error, "cause", None)
    if cause is not None:
        lines.append(f"[dim]Caused by {cause.__class__.__name__}: {cause}[/dim]")

    console.print(Panel("\n".join(lines), title=f"Error {error.error_code}", border_style="red"))


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
