import asyncio
import json

from rich.console import Console
from rich.table import Table
import typer

from fleet_dashboard.bulk import BulkOperationResult
from fleet_dashboard.client import get_store
from fleet_dashboard.config import get_settings
from fleet_dashboard.notifications import ConsoleNotifier, Notifier
from fleet_dashboard.status_editor import EditOutcome
from fleet_dashboard.view import DeploymentListView, ListView
from shared.contracts.dto import DeploymentStatus

console = Console()

app = typer.Typer()


def _open_view(notifier: Notifier | None = None) -> DeploymentListView:
    settings = get_settings()
    return DeploymentListView(
        get_store(settings),
        notifier=notifier,
        items_per_page=settings.items_per_page,
        bulk_concurrency=settings.bulk_concurrency,
    )


async def list_deployments_command(
    query: str = "",
    status: DeploymentStatus | None = None,
    project: str | None = None,
    page: int = 1,
    per_page: int | None = None,
) -> ListView:
    """Fetch and derive one page of the deployments list."""
    view = _open_view()
    try:
        await view.refresh()
        if view.error:
            raise RuntimeError(view.error)
        await view.load_related()

        if per_page is not None:
            view.set_items_per_page(per_page)
        view.set_query(query)
        view.set_status_filter(status)
        view.set_project_filter(project)
        view.go_to_page(page)
        return view.current
    finally:
        await view.store.close()


async def set_status_command(
    deployment_id: str, status: DeploymentStatus, notifier: Notifier
) -> tuple[EditOutcome, str | None]:
    """Run one inline status edit. Returns the outcome and the inline error, if any."""
    view = _open_view(notifier)
    try:
        await view.refresh()
        if view.error:
            raise RuntimeError(view.error)

        view.edit_status(deployment_id)
        outcome = await view.confirm_status(deployment_id, status)
        return outcome, view.status_error(deployment_id)
    finally:
        await view.store.close()


async def delete_deployments_command(
    deployment_ids: list[str], notifier: Notifier
) -> BulkOperationResult | None:
    view = _open_view(notifier)
    try:
        await view.refresh()
        if view.error:
            raise RuntimeError(view.error)
        return await view.bulk_delete(deployment_ids)
    finally:
        await view.store.close()


def _render_table(result: ListView) -> Table:
    table = Table(title=f"Deployments ({result.total_items})")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Project")
    table.add_column("Status")
    table.add_column("Engineer")
    table.add_column("Deployed At")

    for deployment in result.page_items:
        engineer = deployment.engineer.full_name if deployment.engineer else None
        table.add_row(
            str(deployment.id),
            deployment.display_name,
            deployment.project_name or str(deployment.project_id),
            deployment.status.label,
            engineer or "-",
            deployment.deployed_at.isoformat(),
        )
    return table


@app.command("list")
def list_(
    query: str = typer.Option("", "--query", "-q", help="Free-text search"),
    status: DeploymentStatus | None = typer.Option(None, "--status", "-s"),
    project: str | None = typer.Option(None, "--project", "-p", help="Project ID"),
    page: int = typer.Option(1, "--page", min=1),
    per_page: int | None = typer.Option(None, "--per-page", min=1),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List deployments, newest first."""
    try:
        result = asyncio.run(list_deployments_command(query, status, project, page, per_page))
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(code=1) from None

    if json_output:
        payload = {
            "items": [d.model_dump(mode="json", by_alias=True) for d in result.page_items],
            "totalItems": result.total_items,
            "totalPages": result.total_pages,
            "currentPage": result.current_page,
            "statusCounts": {s.value: n for s, n in result.status_counts.items()},
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print(_render_table(result))
    counts = "  ".join(f"{s.label}: {n}" for s, n in result.status_counts.items())
    console.print(f"Page {result.current_page} of {result.total_pages}  |  {counts}")


@app.command("set-status")
def set_status(
    deployment_id: str = typer.Argument(..., help="Deployment ID"),
    status: DeploymentStatus = typer.Argument(..., help="New status"),
):
    """Change the status of one deployment."""
    try:
        outcome, inline_error = asyncio.run(
            set_status_command(deployment_id, status, ConsoleNotifier(console))
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(code=1) from None

    if outcome == EditOutcome.UNCHANGED:
        console.print(f"Status is already [cyan]{status.value}[/cyan]; nothing to update.")
    elif outcome == EditOutcome.FAILED:
        console.print(f"[bold red]Error:[/bold red] {inline_error}")
        raise typer.Exit(code=1)


@app.command()
def delete(
    deployment_ids: list[str] = typer.Argument(..., help="Deployment IDs"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete one or more deployments."""
    if not yes:
        typer.confirm(f"Delete {len(deployment_ids)} deployment(s)?", abort=True)

    try:
        result = asyncio.run(delete_deployments_command(deployment_ids, ConsoleNotifier(console)))
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(code=1) from None

    # Summaries were already printed by the notifier
    if result is None or result.error_count > 0:
        raise typer.Exit(code=1)
