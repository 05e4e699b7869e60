"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el dispatcher, el logging y la CLI lean config de forma
  consistente.

Nota: los parámetros de `init` (URLs `format.url.*`) NO viven aquí; los pasa
el llamador en cada inicialización.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Variables de entorno de los despliegues MOSIP (sin prefijo).
DEFAULT_SERVICE_ENV = "mosip_biosdk_service"
REQUEST_RESPONSE_DEBUG_ENV = "mosip_biosdk_request_response_debug"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "biosdk-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "biosdk-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "biosdk-client"
    return Path.home() / ".config" / "biosdk-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# biosdk-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ClientSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="BIOSDK_CLIENT_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request HTTP (segundos).",
    )
    api_version: str = Field(
        default="1.0",
        min_length=1,
        description="Versión escrita en el sobre de cada petición.",
    )
    default_service_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices(DEFAULT_SERVICE_ENV, "BIOSDK_CLIENT_DEFAULT_SERVICE_URL"),
        description="URL del servicio SDK por defecto si init no trae `format.url.default`.",
    )
    request_response_debug: bool = Field(
        default=False,
        validation_alias=AliasChoices(REQUEST_RESPONSE_DEBUG_ENV, "BIOSDK_CLIENT_REQUEST_RESPONSE_DEBUG"),
        description="Loguea cuerpos de petición/respuesta (solo 'y' lo activa).",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
    log_json: bool = Field(
        default=False,
        description="Salida de logs en JSON (producción) en vez de consola.",
    )
    log_file: Path | None = Field(
        default=None,
        description="Fichero de log opcional; si no, stderr.",
    )

    @field_validator("default_service_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("request_response_debug", mode="before")
    @classmethod
    def _debug_flag(cls, value: object) -> object:
        # Solo "y" activa el volcado, sin distinguir mayúsculas.
        if isinstance(value, str):
            return value.strip().lower() == "y"
        return value
