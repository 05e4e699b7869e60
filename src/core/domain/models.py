"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación en el borde (JSON de los backends) y serialización con los
  nombres camelCase que esperan los servicios SDK, sin acoplar el Core a HTTP.
- Los objetos biométricos son opacos: el cliente los transporta, no los
  interpreta. Por eso permiten (y conservan) campos arbitrarios.

Nota:
- Estos modelos describen *qué* viaja por el cable, no *cómo* se envía.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

T = TypeVar("T")


class Modality(str, Enum):
    """Tipos biométricos reconocidos por los servicios SDK."""

    FACE = "FACE"
    FINGER = "FINGER"
    IRIS = "IRIS"
    VOICE = "VOICE"
    DNA = "DNA"
    SIGNATURE = "SIGNATURE"
    HAND_GEOMETRY = "HAND_GEOMETRY"
    EXCEPTION_PHOTO = "EXCEPTION_PHOTO"


def _as_text(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class _WireModel(BaseModel):
    """Base para DTOs: alias camelCase en el cable, snake_case en Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _OpaqueModel(BaseModel):
    """Base para payloads biométricos que el cliente no interpreta."""

    model_config = ConfigDict(extra="allow")


class BiometricRecord(_OpaqueModel):
    """Registro biométrico (CBEFF) tal como lo entrega el llamador o el backend."""


class QualityCheck(_OpaqueModel):
    """Resultado de calidad devuelto por `check-quality`."""


class MatchDecision(_OpaqueModel):
    """Decisión de matching para un elemento de la galería."""


class ErrorRecord(_WireModel):
    """Error reportado por un backend dentro del sobre de respuesta."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    code: str | None = Field(
        default=None,
        description="Código de error del backend.",
    )
    message: str | None = Field(
        default=None,
        description="Mensaje legible del backend.",
    )


class ProductOwner(_WireModel):
    organization: str | None = None
    type: str | None = None


class SdkInfo(_WireModel):
    """Descriptor de capacidades de un servicio SDK (respuesta de `init`).

    Por qué un modelo propio:
    - Se agrega entre varios backends; necesitamos contenedores mutables
      propios (no compartidos) para la fusión.
    - Es tolerante: un descriptor con valores no textuales en `otherInfo` o
      modalidades desconocidas no debe tumbar el `init` de todos los backends.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    api_version: str | None = Field(
        default=None,
        alias="apiVersion",
        description="Versión de la API biométrica implementada.",
    )
    sdk_version: str | None = Field(
        default=None,
        alias="sdkVersion",
        description="Versión del SDK del proveedor.",
    )
    product_owner: ProductOwner | None = Field(
        default=None,
        alias="productOwner",
        description="Organización y tipo del propietario del producto.",
    )
    other_info: dict[str, str] = Field(
        default_factory=dict,
        alias="otherInfo",
        description="Metadatos libres del proveedor.",
    )
    supported_methods: dict[str, Any] = Field(
        default_factory=dict,
        alias="supportedMethods",
        description="Función biométrica -> modalidades soportadas.",
    )
    supported_modalities: list[Modality] = Field(
        default_factory=list,
        alias="supportedModalities",
        description="Modalidades soportadas, sin duplicados.",
    )

    @field_validator("other_info", mode="before")
    @classmethod
    def stringify_other_info(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        return {
            key: _as_text(item)
            for key, item in value.items()
            if item is not None
        }

    @field_validator("supported_modalities", mode="before")
    @classmethod
    def drop_unknown_modalities(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        known = {m.value for m in Modality}
        return [
            item for item in value
            if isinstance(item, Modality) or (isinstance(item, str) and item in known)
        ]


class SdkResponse(BaseModel, Generic[T]):
    """Resultado tipado de una operación (análogo a `Response<T>`)."""

    status_code: int | None = Field(
        default=None,
        description="Código de estado reportado por el backend (no HTTP).",
    )
    status_message: str = Field(
        default="",
        description="Mensaje de estado reportado por el backend.",
    )
    response: T | None = Field(
        default=None,
        description="Carga útil de la operación.",
    )


# ---------------------------------------------------------------------------
# Sobres (envelopes)
# ---------------------------------------------------------------------------


class RequestEnvelope(_WireModel):
    """Sobre de petición: versión + payload JSON codificado en base64."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str
    request: str


class ResponseEnvelope(_WireModel):
    """Sobre de respuesta de nivel superior."""

    version: str | None = None
    responsetime: str | None = None
    errors: list[ErrorRecord | None] | None = None
    response: Any = None


# ---------------------------------------------------------------------------
# Peticiones por operación
# ---------------------------------------------------------------------------


class InitRequest(_WireModel):
    init_params: dict[str, str] | None = Field(default=None, alias="initParams")


class CheckQualityRequest(_WireModel):
    sample: BiometricRecord | None = None
    modalities_to_check: list[Modality] | None = Field(default=None, alias="modalitiesToCheck")
    flags: dict[str, str] | None = None


class MatchRequest(_WireModel):
    sample: BiometricRecord | None = None
    gallery: list[BiometricRecord] | None = None
    modalities_to_match: list[Modality] | None = Field(default=None, alias="modalitiesToMatch")
    flags: dict[str, str] | None = None


class ExtractTemplateRequest(_WireModel):
    sample: BiometricRecord | None = None
    modalities_to_extract: list[Modality] | None = Field(default=None, alias="modalitiesToExtract")
    flags: dict[str, str] | None = None


class SegmentRequest(_WireModel):
    sample: BiometricRecord | None = None
    modalities_to_segment: list[Modality] | None = Field(default=None, alias="modalitiesToSegment")
    flags: dict[str, str] | None = None


class ConvertFormatRequest(_WireModel):
    sample: BiometricRecord | None = None
    source_format: str | None = Field(default=None, alias="sourceFormat")
    target_format: str | None = Field(default=None, alias="targetFormat")
    source_params: dict[str, str] | None = Field(default=None, alias="sourceParams")
    target_params: dict[str, str] | None = Field(default=None, alias="targetParams")
    modalities_to_convert: list[Modality] | None = Field(default=None, alias="modalitiesToConvert")
