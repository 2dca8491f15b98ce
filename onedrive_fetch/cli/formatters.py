"""
Functions for formatting and displaying results in the console using Rich.
"""

from pathlib import Path

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from onedrive_fetch.models.result import ErrorKind, PipelineResult

SUGGESTIONS = {
    ErrorKind.INPUT_VALIDATION: [
        "• Provide azure_client_id, azure_client_secret, azure_tenant_id and"
        " onedrive_link.",
        "• In a workflow, check that the secrets referenced in `with:` exist.",
    ],
    ErrorKind.AUTH: [
        "• Verify the client id, tenant id and client secret of the app"
        " registration.",
        "• The client secret may have expired. Create a new one in Entra ID.",
    ],
    ErrorKind.RESOLUTION: [
        "• Make sure the link points to a single file, not a folder.",
        "• The app registration needs the Files.Read.All or Sites.Read.All"
        " application permission with admin consent.",
        "• Check that the sharing link has not been revoked.",
    ],
    ErrorKind.DOWNLOAD: [
        "• Check free disk space and write permissions in the output directory.",
        "• The download URL is short-lived. Run the command again.",
    ],
}

GENERIC_SUGGESTIONS = ["• Run the command with -vv for detailed logs."]


def _error_panel(title: str, message: str, suggestions: list[str], context=None) -> Panel:
    error_text = Text()
    error_text.append(f"{title}: ", style="bold red")
    error_text.append(message)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def format_failure(result: PipelineResult) -> Panel:
    """Formats a failed pipeline result with actionable suggestions."""
    kind = result.error_kind
    title = kind.name.replace("_", " ").title() + " Error" if kind else "Error"
    context = None
    if result.failed_stage:
        context = {"stage": result.failed_stage.value}
    return _error_panel(
        title,
        result.error_message or "Unknown error",
        SUGGESTIONS.get(kind, GENERIC_SUGGESTIONS),
        context,
    )


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an exception raised outside the pipeline into a Rich Panel."""
    return _error_panel(
        type(error).__name__, str(error), GENERIC_SUGGESTIONS, context
    )


def format_success(file_name: str, path: Path) -> Panel:
    """Formats the summary shown after a successful download."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()
    table.add_row("File name:", file_name)
    table.add_row("Saved to:", str(path))
    return Panel(
        table,
        title="[bold green]✓ Download Complete[/bold green]",
        border_style="green",
        expand=False,
    )
