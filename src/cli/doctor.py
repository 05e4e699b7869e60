"""Doctor command for environment diagnostics."""

from __future__ import annotations

from typing import List, Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from cli.options import parse_pairs
from core.config import DEFAULT_SERVICE_ENV, ClientSettings, write_user_env_vars
from core.exceptions import ConfigurationError
from core.services.service_registry import ServiceRegistry

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(client: httpx.Client, url: str) -> tuple[bool, str]:
    """Best-effort reachability probe; any HTTP answer counts as reachable."""

    try:
        response = client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run(
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Init param as key=value (repeatable)."
    ),
) -> None:
    """Run baseline diagnostics and probe every configured SDK service."""

    settings = ClientSettings()
    init_params = parse_pairs(param)

    table = Table(title="BIOSDK-CLIENT Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.default_service_url:
        table.add_row("Default service", "OK", settings.default_service_url)
    else:
        table.add_row("Default service", "OPTIONAL", f"{DEFAULT_SERVICE_ENV} not set")
    table.add_row("API version", "OK", settings.api_version)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row(
        "Request/response debug",
        "ON" if settings.request_response_debug else "OFF",
        "Bodies are logged at DEBUG" if settings.request_response_debug else "-",
    )

    failed = False
    try:
        registry = ServiceRegistry.from_init_params(init_params, settings.default_service_url)
    except ConfigurationError as exc:
        table.add_row("Service registry", "FAIL", exc.message)
        failed = True
    else:
        table.add_row("Service registry", "OK", f"{len(registry.endpoints)} route(s)")
        with build_client(settings) as client:
            for name, url in registry.endpoints.items():
                ok, detail = _check_http(client, url)
                failed = failed or not ok
                table.add_row(f"Service '{name}'", "OK" if ok else "FAIL", f"{url} -> {detail}")

    _console.print(table)
    if failed:
        raise typer.Exit(code=1)


@app.command(name="set-default-url")
def set_default_url(
    url: str = typer.Argument(..., help="Base URL of the default SDK service."),
) -> None:
    """Store the default SDK service URL in the user config .env."""

    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise typer.BadParameter("url must start with http:// or https://")

    env_path = write_user_env_vars({DEFAULT_SERVICE_ENV: url})
    _console.print(f"[green]Saved default service URL to:[/green] {env_path}")
