"""Parsing de opciones repetibles `clave=valor` de la CLI."""

from __future__ import annotations

from typing import Iterable

import typer


def parse_pairs(values: Iterable[str] | None, *, option: str = "--param") -> dict[str, str]:
    """Convierte `["a=1", "b=2"]` en `{"a": "1", "b": "2"}` conservando el orden."""

    out: dict[str, str] = {}
    for raw in values or ():
        if "=" not in raw:
            raise typer.BadParameter(f"expected key=value, got {raw!r}", param_hint=option)
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"empty key in {raw!r}", param_hint=option)
        out[key] = value.strip()
    return out
