"""CLI entry point — speaker command."""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="speaker", help="Webhook Speaker — turn webhooks into sounds")
console = Console()

DEFAULT_URL = "http://localhost:8888/webhook"

SAMPLE_WEBHOOKS: list[tuple[str, dict[str, Any]]] = [
    ("Sale Notification", {"event_type": "sale", "amount": 4999, "customer_name": "John Doe"}),
    ("New Lead", {"event_type": "new_lead", "message": "New lead from Facebook Ads!"}),
    ("Stripe Payment", {
        "type": "payment_intent.succeeded",
        "data": {"object": {"amount": 12500, "customer_name": "Jane Smith"}},
    }),
    ("Custom Alert", {
        "event_type": "custom", "message": "Wake up! The kids just snuck out!", "sound": "alarm.mp3",
    }),
    ("Shopify Order", {
        "topic": "shopify.orders.create", "total_price": "149.99", "customer": {"first_name": "Bob"},
    }),
]


def _default_url() -> str:
    return os.environ.get("WEBHOOK_URL", DEFAULT_URL)


def _json_or_text(r: httpx.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return r.text


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Start the webhook server."""
    import uvicorn
    from webhook_speaker.config import load_config

    config = load_config()
    uvicorn.run(
        "api.main:app",
        host=host or config.server.host,
        port=port or config.server.port,
        reload=reload,
    )


@app.command()
def send(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Webhook URL (default: $WEBHOOK_URL)"),
    key: str = typer.Option("test-key", "--key", "-k"),
):
    """Send the sample webhooks, then poll once."""
    failed = asyncio.run(_send(url or _default_url(), key))
    raise typer.Exit(code=1 if failed else 0)


async def _send(url: str, key: str, transport: httpx.AsyncBaseTransport | None = None) -> int:
    console.print(f"[bold]Webhook Speaker test[/bold] target=[cyan]{url}[/cyan]")
    passed = failed = 0

    async with httpx.AsyncClient(timeout=10, transport=transport) as client:
        for name, payload in SAMPLE_WEBHOOKS:
            try:
                r = await client.post(url, json=payload)
            except httpx.HTTPError as e:
                console.print(f"{name}: [red]ERROR[/red] {e}")
                failed += 1
                continue
            data = _json_or_text(r)
            if r.status_code == 200 and isinstance(data, dict) and data.get("success"):
                console.print(f"{name}: [green]PASSED[/green] {json.dumps(data)}")
                passed += 1
            else:
                console.print(f"{name}: [red]FAILED[/red] status={r.status_code} {data}")
                failed += 1

        try:
            r = await client.get(url, params={"key": key})
            data = _json_or_text(r)
            count = data.get("count", 0) if isinstance(data, dict) else 0
            console.print(f"Poll: [green]{count}[/green] notification(s)")
            passed += 1
        except httpx.HTTPError as e:
            console.print(f"Poll: [red]ERROR[/red] {e}")
            failed += 1

    console.print(f"Results: {passed} passed, {failed} failed")
    return failed


@app.command()
def poll(
    url: Optional[str] = typer.Option(None, "--url", "-u"),
    key: str = typer.Option(..., "--key", "-k", help="Speaker key"),
):
    """Drain pending notifications once and print them."""
    ok = asyncio.run(_poll(url or _default_url(), key))
    raise typer.Exit(code=0 if ok else 1)


async def _poll(url: str, key: str, transport: httpx.AsyncBaseTransport | None = None) -> bool:
    async with httpx.AsyncClient(timeout=10, transport=transport) as client:
        try:
            r = await client.get(url, params={"key": key})
        except httpx.HTTPError as e:
            console.print(f"[red]Poll failed:[/red] {e}")
            return False
    data = _json_or_text(r)
    if r.status_code != 200 or not isinstance(data, dict):
        console.print(f"[red]Poll failed:[/red] status={r.status_code} {data}")
        return False

    notifications = data.get("notifications", [])
    if not notifications:
        console.print("[dim]No pending notifications.[/dim]")
        return True
    table = Table(title=f"Notifications ({data.get('count', len(notifications))})")
    table.add_column("Time", style="cyan")
    table.add_column("Event")
    table.add_column("Sound", style="green")
    table.add_column("Message")
    table.add_column("Amount")
    for n in notifications:
        extra = n.get("data") or {}
        table.add_row(n.get("timestamp", ""), n.get("event_type", "-"), n.get("sound", ""),
                      n.get("message", ""), extra.get("amount") or "-")
    console.print(table)
    return True


@app.command()
def events():
    """Show the event table."""
    from webhook_speaker.config import build_classifier, load_config

    classifier = build_classifier(load_config())
    table = Table(title="Event Table")
    table.add_column("Event", style="cyan", no_wrap=True)
    table.add_column("Sound", style="green", no_wrap=True)
    table.add_column("Message")
    for key, entry in sorted(classifier.table.items()):
        table.add_row(key, entry.sound, entry.message)
    console.print(table)


if __name__ == "__main__":
    app()
