"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from onedrive_fetch import __version__
from onedrive_fetch.config.input_loader import InputLoader
from onedrive_fetch.core.pipeline import FetchPipeline
from onedrive_fetch.exceptions import ConfigurationError
from onedrive_fetch.host import github_actions
from onedrive_fetch.models.config import FetchConfig
from onedrive_fetch.models.result import PipelineResult
from onedrive_fetch.utils.sharing import decode_share_link, encode_share_link

from .formatters import format_error_with_suggestions, format_failure, format_success

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("onedrive_fetch")

app = typer.Typer(
    name="onedrive-fetch",
    help=(
        "Download a file shared through a OneDrive or SharePoint link using an"
        " Entra ID application identity."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

AUTHORITY_HOST_OPTION = typer.Option(
    None,
    "--authority-host",
    envvar="ONEDRIVE_FETCH_AUTHORITY_HOST",
    help="Identity provider host (default: https://login.microsoftonline.com).",
)
GRAPH_BASE_URL_OPTION = typer.Option(
    None,
    "--graph-base-url",
    envvar="ONEDRIVE_FETCH_GRAPH_BASE_URL",
    help="Microsoft Graph base URL (default: https://graph.microsoft.com/v1.0).",
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """OneDrive shared file downloader"""
    if version:
        console.print(f"[bold]onedrive-fetch[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("onedrive_fetch").setLevel(log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _run_pipeline(config: FetchConfig) -> PipelineResult:
    return asyncio.run(FetchPipeline(config).run())


@app.command()
def action(
    authority_host: str | None = AUTHORITY_HOST_OPTION,
    graph_base_url: str | None = GRAPH_BASE_URL_OPTION,
):
    """Run as a GitHub Actions step, reading INPUT_* variables."""
    try:
        config = InputLoader().load_config(
            {"authority_host": authority_host, "graph_base_url": graph_base_url}
        )
    except ConfigurationError as e:
        raise typer.Exit(code=github_actions.set_failed(str(e))) from e

    result = _run_pipeline(config)
    if not result.succeeded:
        raise typer.Exit(code=github_actions.set_failed(result.error_message or ""))

    github_actions.set_output("file_name", result.file_name or "")


@app.command()
def fetch(
    link: str = typer.Argument(..., help="Shareable OneDrive or SharePoint link."),
    client_id: str | None = typer.Option(
        None, "--client-id", envvar="AZURE_CLIENT_ID", help="Application client ID."
    ),
    client_secret: str | None = typer.Option(
        None,
        "--client-secret",
        envvar="AZURE_CLIENT_SECRET",
        help="Application client secret.",
    ),
    tenant_id: str | None = typer.Option(
        None, "--tenant-id", envvar="AZURE_TENANT_ID", help="Entra ID tenant ID."
    ),
    output_dir: Path | None = typer.Option(  # noqa: B008
        None,
        "--output-dir",
        "-d",
        file_okay=False,
        help="Directory to save the file in (default: current directory).",
    ),
    authority_host: str | None = AUTHORITY_HOST_OPTION,
    graph_base_url: str | None = GRAPH_BASE_URL_OPTION,
):
    """Download the file behind a sharing link."""
    cli_options = {
        "azure_client_id": client_id,
        "azure_client_secret": client_secret,
        "azure_tenant_id": tenant_id,
        "onedrive_link": link,
        "output_dir": str(output_dir) if output_dir else None,
        "authority_host": authority_host,
        "graph_base_url": graph_base_url,
    }
    try:
        config = InputLoader().load_config(cli_options)
    except ConfigurationError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    result = _run_pipeline(config)
    if not result.succeeded:
        console.print(format_failure(result))
        raise typer.Exit(code=1)

    console.print(
        format_success(result.file_name, config.output_dir / result.file_name)
    )


@app.command(name="share-id")
def share_id(
    value: str = typer.Argument(..., help="A sharing link, or a share id with --decode."),
    decode: bool = typer.Option(
        False, "--decode", help="Decode a 'u!' share id back into its link."
    ),
):
    """Print the Graph share id for a sharing link (or decode one)."""
    try:
        text = decode_share_link(value) if decode else encode_share_link(value)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)
