# asset_deploy/cli/utils/output.py
"""Output formatting utilities"""

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from ...models.result import DeployResult, PublishResult

console = Console()


def format_publish_table(result: PublishResult) -> Table:
    """Create a table of published and failed keys"""
    table = Table(title="Objects", box=box.SIMPLE)
    table.add_column("Key", style="cyan")
    table.add_column("Status")

    for key in result.published:
        table.add_row(key, "[green]✓ Uploaded[/green]")
    for key in result.failed:
        table.add_row(key, "[red]✗ Failed[/red]")

    return table


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    if result.success:
        lines = [
            f"[green]✓[/green] Deployment completed successfully!",
            f"",
        ]

        if result.publish:
            lines.append(f"[bold]Objects:[/bold] {len(result.publish.published)}")
            lines.append(f"[bold]Size:[/bold] {_format_size(result.publish.total_bytes)}")
            if result.publish.invalidated:
                lines.append(f"[bold]Invalidated:[/bold] {len(result.publish.invalidated)} path(s)")
        lines.append(f"[bold]Duration:[/bold] {result.duration:.1f}s")

        panel = Panel(
            "\n".join(lines),
            title="Deploy Result",
            border_style="green"
        )
        console.print(panel)

    else:
        lines = [f"[red]✗ Deploy failed:[/red] {result.error}"]
        if result.error_code:
            lines.append(f"[dim]Error code: {result.error_code}[/dim]")

        # Uploads may have landed before the failure
        if result.publish and result.publish.published:
            lines.append("")
            lines.append(
                f"[yellow]Partially published: {len(result.publish.published)} object(s). "
                "Redeploy to converge.[/yellow]"
            )

        panel = Panel(
            "\n".join(lines),
            title="Deploy Error",
            border_style="red"
        )
        console.print(panel)

    if result.publish and (result.publish.published or result.publish.failed):
        console.print(format_publish_table(result.publish))


def _format_size(size_bytes: float) -> str:
    """Format file size in human-readable format"""
    if size_bytes == 0:
        return "0B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0

    while size_bytes >= 1024 and unit_index < len(units) - 1:
        size_bytes /= 1024.0
        unit_index += 1

    return f"{size_bytes:.1f}{units[unit_index]}"
