"""CLI principal (Typer).

Comandos:
- `info`: ejecuta `init` contra los backends y muestra las capacidades agregadas.
- `routes`: muestra el registro de URLs y a qué backend iría una llamada.
- `doctor`: diagnósticos de configuración y conectividad.
"""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.biosdk_client import BioSdkClient
from cli import doctor
from cli.options import parse_pairs
from cli.ui_components import build_capabilities_table, build_routes_table, print_banner
from core.config import ClientSettings
from core.domain.models import Modality
from core.exceptions import BioSdkClientError
from core.logging_config import setup_logging_from_settings
from core.services.service_registry import ServiceRegistry

app = typer.Typer(no_args_is_help=True, help="Client for remote biometric SDK services.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.command()
def info(
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Init param as key=value (repeatable)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the aggregated SdkInfo as JSON."),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    """Initialize against every configured SDK service and show capabilities."""

    settings = ClientSettings()
    setup_logging_from_settings(settings)
    init_params = parse_pairs(param)

    try:
        with BioSdkClient(settings) as client:
            sdk_info = client.init(init_params)
    except BioSdkClientError as exc:
        _console.print(f"[red]init failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if as_json:
        payload = sdk_info.model_dump_json(by_alias=True, indent=2) if sdk_info else "null"
        typer.echo(payload)
        return

    if banner:
        print_banner(_console)
    if sdk_info is None:
        _console.print("[yellow]No SDK info returned by the configured services.[/yellow]")
        return
    _console.print(build_capabilities_table(sdk_info))


@app.command()
def routes(
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Init param as key=value (repeatable)."
    ),
    modality: Optional[Modality] = typer.Option(
        None, "--modality", "-m", case_sensitive=False, help="Modality to route."
    ),
    flag: Optional[List[str]] = typer.Option(
        None, "--flag", "-f", help="Operation flag as key=value (repeatable)."
    ),
) -> None:
    """Show the service registry and the URL a call would be sent to."""

    settings = ClientSettings()
    try:
        registry = ServiceRegistry.from_init_params(parse_pairs(param), settings.default_service_url)
    except BioSdkClientError as exc:
        _console.print(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(code=1) from exc

    _console.print(build_routes_table(registry.endpoints))

    flags = parse_pairs(flag, option="--flag")
    if modality is not None or flags:
        target = registry.resolve(modality, flags)
        label = modality.value if modality is not None else "(from flags)"
        _console.print(f"[bold]{label}[/bold] -> [magenta]{target}[/magenta]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
