"""Typer CLI for people-admin.

Commands
--------
- ``people-admin init``    -- interactive first-time setup
- ``people-admin start``   -- launch the FastAPI server
- ``people-admin status``  -- display current configuration status
- ``people-admin decode``  -- decode a URL-encoded form body into a person
"""

from __future__ import annotations

import asyncio
import socket
from pathlib import Path
from urllib.parse import parse_qsl

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from people_admin.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_PORT,
    ensure_base_dir,
    get_api_base_url,
    get_base_dir,
    get_env_path,
    get_port,
    reload_env,
)
from people_admin.forms import decode as decode_form
from people_admin.people_api import PeopleAPIClient

app = typer.Typer(
    name="people-admin",
    help="Admin backend for people and their contact details",
    add_completion=False,
)
console = Console()


def _is_port_in_use(port: int) -> bool:
    """Return True if *port* on localhost is currently accepting connections."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(1)
        return sock.connect_ex(("127.0.0.1", port)) == 0


def _write_env_file(path: Path, api_base_url: str, port: int) -> None:
    """Write a minimal .env file for people-admin."""
    lines = [
        "# people-admin configuration",
        f"PEOPLE_API_BASE_URL={api_base_url}",
        f"PEOPLE_ADMIN_PORT={port}",
        "",
    ]
    path.write_text("\n".join(lines), encoding="utf-8")


@app.command()
def init() -> None:
    """Create ~/.people-admin/ and write the initial configuration."""

    console.print(
        Panel(
            "[bold cyan]people-admin[/bold cyan] -- first-time setup",
            subtitle="People management admin backend",
        )
    )

    # 1. Create directory ---------------------------------------------------
    console.print("\n[bold]1.[/bold] Creating configuration directory ...")
    ensure_base_dir()
    console.print(f"   [green]✓[/green] {get_base_dir()}")

    # 2. People API ---------------------------------------------------------
    console.print()
    api_base_url = Prompt.ask(
        "[bold]2.[/bold] People API base URL",
        default=DEFAULT_API_BASE_URL,
    ).strip().rstrip("/")
    if not api_base_url.startswith(("http://", "https://")):
        console.print(f"[red]Not an http(s) URL: {api_base_url}. Aborting.[/red]")
        raise typer.Exit(code=1)

    # 3. Port ---------------------------------------------------------------
    port_str = Prompt.ask(
        "[bold]3.[/bold] Server port",
        default=str(DEFAULT_PORT),
    )
    try:
        port = int(port_str)
    except ValueError:
        console.print(f"[red]Invalid port: {port_str}. Using default {DEFAULT_PORT}.[/red]")
        port = DEFAULT_PORT

    # 4. Write .env ---------------------------------------------------------
    env_path = get_env_path()
    _write_env_file(env_path, api_base_url, port)
    console.print(f"\n   [green]✓[/green] Configuration written to [bold]{env_path}[/bold]")

    reload_env()

    console.print(
        Panel(
            f"[bold green]Setup complete![/bold green]\n\n"
            f"  Config dir : {get_base_dir()}\n"
            f"  People API : {api_base_url}\n"
            f"  Port       : {port}\n\n"
            f"Run [bold]people-admin start[/bold] to launch the server.",
            title="Done",
        )
    )


@app.command()
def start(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int | None = typer.Option(None, help="Override configured port"),
    reload: bool = typer.Option(False, help="Enable auto-reload (development)"),
) -> None:
    """Load configuration and start the people-admin server."""

    import uvicorn

    reload_env()

    effective_port = port if port is not None else get_port()

    console.print(
        Panel(
            f"Starting [bold cyan]people-admin[/bold cyan] server\n"
            f"  Address    : http://{host}:{effective_port}\n"
            f"  People API : {get_api_base_url()}\n"
            f"  Reload     : {'on' if reload else 'off'}",
            title="people-admin",
        )
    )

    uvicorn.run(
        "people_admin.server:app",
        host=host,
        port=effective_port,
        reload=reload,
    )


@app.command()
def status() -> None:
    """Show the current status of people-admin."""

    reload_env()

    port = get_port()
    api_base_url = get_api_base_url()
    env_exists = get_env_path().exists()
    server_running = _is_port_in_use(port)
    api_reachable = asyncio.run(PeopleAPIClient(base_url=api_base_url).is_reachable())

    table = Table(title="people-admin status", show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Config directory", str(get_base_dir()))
    table.add_row(
        "Configuration",
        "[green]found[/green]" if env_exists else "[yellow]missing -- using defaults[/yellow]",
    )
    table.add_row(
        "Server",
        f"[green]running[/green] on port {port}"
        if server_running
        else f"[yellow]stopped[/yellow] (port {port})",
    )
    table.add_row(
        "People API",
        f"[green]reachable[/green] at {api_base_url}"
        if api_reachable
        else f"[red]unreachable[/red] at {api_base_url}",
    )

    console.print()
    console.print(table)
    console.print()


@app.command()
def decode(
    body: str = typer.Argument(..., help="URL-encoded form body, e.g. 'first_name=A&emails[0].email=a%40x.com'"),
    payload: bool = typer.Option(False, help="Print the people API request body instead"),
) -> None:
    """Decode a submitted form body and print the resulting person as JSON."""

    person = decode_form(parse_qsl(body, keep_blank_values=True))
    if payload:
        console.print_json(data=person.to_api_payload())
    else:
        console.print_json(person.model_dump_json(by_alias=True, exclude_none=True))


if __name__ == "__main__":
    app()
