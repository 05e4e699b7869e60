"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Mapping

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import SdkInfo


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("BIOSDK-CLIENT", style="bold cyan")
    subtitle = Text("Servicios SDK biométricos • Enrutado • Capacidades", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_capabilities_table(info: SdkInfo) -> Table:
    """Tabla con el `SdkInfo` agregado de todos los backends."""

    table = Table(title="SDK Capabilities")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    owner = info.product_owner
    table.add_row("API version", info.api_version or "-")
    table.add_row("SDK version", info.sdk_version or "-")
    table.add_row("Organization", (owner.organization if owner else None) or "-")
    table.add_row("Owner type", (owner.type if owner else None) or "-")
    table.add_row(
        "Modalities",
        ", ".join(m.value for m in info.supported_modalities) or "-",
    )
    for method, modalities in info.supported_methods.items():
        if isinstance(modalities, (list, tuple)):
            value = ", ".join(str(m) for m in modalities)
        else:
            value = str(modalities)
        table.add_row(f"Method: {method}", value)
    for key, value in info.other_info.items():
        table.add_row(f"Info: {key}", value)
    return table


def build_routes_table(endpoints: Mapping[str, str]) -> Table:
    """Tabla nombre -> URL del registro de backends."""

    table = Table(title="SDK Service Routes")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("URL", style="magenta")
    for name, url in endpoints.items():
        table.add_row(name, url)
    return table
