"""Summary mode: fetch the help request summary through the API client and print it."""

import asyncio
from typing import Optional

import typer
from rich.table import Table

from relief_hub.client import ApiClient, HelpRequestService
from relief_hub.config import API_URL
from relief_hub.models.responses import ApiResponse, HelpRequestSummary

from .shared import console, logger


async def _fetch(base_url: str) -> ApiResponse:
    async with ApiClient(base_url=base_url) as client:
        return await HelpRequestService(client).get_summary()


def _counts_table(title: str, counts: dict[str, int]) -> Table:
    table = Table(title=title)
    table.add_column("Key")
    table.add_column("Count", justify="right")
    for key, value in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        table.add_row(key, str(value))
    return table


def render_summary(summary: HelpRequestSummary) -> None:
    people = summary.people
    console.print(f"[bold]Help requests (last 30 days):[/bold] {summary.total}")
    console.print(
        f"People: {people.combined_total} "
        f"([dim]{people.total_people} people, {people.elders} elders, {people.children} children, {people.pets} pets[/dim])"
    )
    console.print(_counts_table("By urgency", summary.by_urgency))
    console.print(_counts_table("By status", summary.by_status))
    if summary.by_district:
        console.print(_counts_table("By district", summary.by_district))

    items = Table(title=f"Ration items ({summary.total_ration_item_types} types needed)")
    for column in ("Item", "Needed", "Donated", "Pending", "Remaining", "Requests"):
        items.add_column(column, justify="left" if column == "Item" else "right")
    for code, entry in sorted(summary.ration_items.items()):
        items.add_row(
            code,
            str(entry.quantity_needed),
            str(entry.quantity_donated),
            str(entry.quantity_pending),
            str(entry.quantity_remaining),
            str(entry.request_count),
        )
    console.print(items)


def summary(
    api_url: Optional[str] = typer.Option(None, "--api-url", help="API base URL (default: NEXT_PUBLIC_API_URL)"),
) -> None:
    """Print the help request summary from a running API."""
    base_url = api_url or API_URL
    result = asyncio.run(_fetch(base_url))
    if not result.success or result.data is None:
        logger.warning("cli.summary.failed", api_url=base_url, error=result.error)
        console.print(f"[red]{result.error or 'Summary unavailable'}[/red]")
        raise typer.Exit(1)
    render_summary(result.data)
