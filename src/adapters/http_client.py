"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers de todas las llamadas a servicios SDK.
- Concentra el volcado opcional de petición/respuesta
  (`mosip_biosdk_request_response_debug=y`).
- Facilita testeo: se puede sustituir por un client mockeado (respx).
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from core.config import ClientSettings
from core.logging_config import get_logger

logger = get_logger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las operaciones se comporten igual.
    - Permite inyectar un `transport` en pruebas.
    """

    settings = settings or ClientSettings()
    headers = dict(JSON_HEADERS)
    if extra_headers:
        headers.update(extra_headers)
    # Sin seguir redirecciones: un 3xx a un POST es un fallo del backend.
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )


def post_json(
    client: httpx.Client,
    url: str,
    body: Any,
    *,
    debug: bool = False,
) -> httpx.Response:
    """POST de un cuerpo JSON; no interpreta el estado HTTP."""

    if debug:
        logger.debug("request", url=url, body=json.dumps(body, ensure_ascii=False))
    response = client.post(url, json=body)
    if debug:
        logger.debug("response", url=url, status_code=response.status_code, body=response.text)
    return response
