"""Sobres de petición/respuesta de los servicios SDK.

Responsabilidad:
- Construir el sobre de salida: `{"version", "request": base64(JSON)}`.
- Parsear el sobre de entrada: `errors` + `response` con el anidamiento que
  corresponde a cada operación.
- Convertir la lista `errors` del backend en una única excepción.

Por qué el anidamiento es un parámetro (`ResponseShape`):
- Los backends no responden igual a todas las operaciones (ver tabla en
  `ResponseShape`). Es el contrato real del servicio, no una elección interna.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Iterable, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.domain.models import ErrorRecord, RequestEnvelope, ResponseEnvelope
from core.exceptions import BackendReportedError, MalformedResponseError

T = TypeVar("T")

API_VERSION = "1.0"

TAG_ERRORS = "errors"
TAG_RESPONSE = "response"
TAG_STATUS_CODE = "statusCode"
TAG_STATUS_MESSAGE = "statusMessage"


class ResponseShape(str, Enum):
    """Dónde vive el resultado dentro de `response`.

    - DIRECT: `response` es el resultado (init, convert-format v1).
    - UNWRAP: `response.response` es el resultado (check-quality).
    - STATUS: `response` = `{statusCode, statusMessage, response}`
      (match, extract-template, segment, convert-format v2).
    """

    DIRECT = "direct"
    UNWRAP = "unwrap"
    STATUS = "status"


@dataclass(frozen=True)
class DecodedResponse(Generic[T]):
    errors: list[ErrorRecord | None] | None
    result: T | None
    status_code: int | None = None
    status_message: str = ""


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def _to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    return payload


def encode(payload: Any, version: str = API_VERSION) -> RequestEnvelope:
    """Serializa `payload` a JSON, lo codifica en base64 y lo envuelve.

    Los campos nulos se conservan (`null`), igual que espera el backend.
    """

    raw = json.dumps(_to_jsonable(payload), ensure_ascii=False)
    encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    return RequestEnvelope(version=version, request=encoded)


def decode_request(envelope: RequestEnvelope | dict[str, Any]) -> Any:
    """Inverso de `encode`: recupera el JSON original del campo `request`."""

    if isinstance(envelope, RequestEnvelope):
        request = envelope.request
    else:
        request = envelope["request"]
    return json.loads(base64.b64decode(request).decode("utf-8"))


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def _parse_body(body: str | bytes) -> ResponseEnvelope:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedResponseError(f"Response is not valid JSON: {exc}", cause=exc) from exc
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Response body must be a JSON object, got {type(data).__name__}")
    try:
        return ResponseEnvelope.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(f"Invalid response envelope: {exc}", cause=exc) from exc


def _require_object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponseError(f"Missing or invalid '{where}' object in response")
    return value


def _validate(result_type: Any, value: Any) -> Any:
    if value is None:
        return None
    try:
        return TypeAdapter(result_type).validate_python(value)
    except ValidationError as exc:
        raise MalformedResponseError(f"Unexpected response payload: {exc}", cause=exc) from exc


def _status_code(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise MalformedResponseError(f"Invalid '{TAG_STATUS_CODE}': {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise MalformedResponseError(f"Invalid '{TAG_STATUS_CODE}': {value!r}")
    try:
        return int(value)
    except ValueError as exc:
        raise MalformedResponseError(f"Invalid '{TAG_STATUS_CODE}': {value!r}", cause=exc) from exc


def decode(
    body: str | bytes,
    result_type: Any,
    *,
    shape: ResponseShape = ResponseShape.STATUS,
    raise_errors: bool = True,
) -> DecodedResponse[Any]:
    """Parsea el sobre de respuesta según `shape`.

    Con `raise_errors=True` (por defecto) una lista `errors` no vacía aborta
    antes de mirar `response`.
    """

    envelope = _parse_body(body)
    if raise_errors:
        raise_for_errors(envelope.errors)

    if shape is ResponseShape.DIRECT:
        if envelope.response is None:
            raise MalformedResponseError(f"Missing '{TAG_RESPONSE}' in response")
        return DecodedResponse(
            errors=envelope.errors,
            result=_validate(result_type, envelope.response),
        )

    outer = _require_object(envelope.response, TAG_RESPONSE)
    if shape is ResponseShape.UNWRAP:
        inner = _require_object(outer.get(TAG_RESPONSE), f"{TAG_RESPONSE}.{TAG_RESPONSE}")
        return DecodedResponse(
            errors=envelope.errors,
            result=_validate(result_type, inner),
        )

    status_message = outer.get(TAG_STATUS_MESSAGE)
    return DecodedResponse(
        errors=envelope.errors,
        result=_validate(result_type, outer.get(TAG_RESPONSE)),
        status_code=_status_code(outer.get(TAG_STATUS_CODE)),
        status_message=str(status_message) if status_message is not None else "",
    )


# ---------------------------------------------------------------------------
# Errores reportados por el backend
# ---------------------------------------------------------------------------


def format_errors(errors: Iterable[ErrorRecord | None]) -> str:
    lines = [
        f"Code: {err.code}, Message: {err.message}"
        for err in errors
        if err is not None
    ]
    return "\n".join(lines)


def raise_for_errors(errors: list[ErrorRecord | None] | None) -> None:
    """Lanza `BackendReportedError` si el backend reportó errores.

    Varios errores se colapsan en un único mensaje, uno por línea. Tienen
    prioridad sobre un estado HTTP exitoso.
    """

    if not errors:
        return
    message = format_errors(errors)
    if message:
        raise BackendReportedError(message, errors=[e for e in errors if e is not None])
