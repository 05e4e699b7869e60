"""Jerarquía de excepciones del cliente.

Por qué una base común:
- El llamador ve un único tipo (`BioSdkClientError`) con `code`, `message` y
  `cause`, sin importar si el fallo vino de HTTP, del sobre JSON o del backend.
- Las subclases permiten tratar casos concretos (p.ej. reintentar fuera de
  esta capa ante `TransportError`) sin parsear mensajes.
"""

from __future__ import annotations

from typing import Any

# Código genérico que usan los servicios SDK para "error desconocido".
UNKNOWN_ERROR_CODE = "500"


class BioSdkClientError(Exception):
    """Error terminal de una operación del cliente."""

    def __init__(
        self,
        message: str,
        code: str = UNKNOWN_ERROR_CODE,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Representación para logging estructurado."""

        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "cause": repr(self.cause) if self.cause is not None else None,
        }


class ConfigurationError(BioSdkClientError):
    """No hay ninguna URL de servicio SDK utilizable."""


class NotInitializedError(BioSdkClientError):
    """Se invocó una operación antes de `init`."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Client not initialized; call init() before {operation}()")
        self.operation = operation


class TransportError(BioSdkClientError):
    """Fallo de red/transporte antes de obtener una respuesta HTTP."""


class BackendHttpError(BioSdkClientError):
    """El backend respondió con un estado HTTP fuera de 2xx."""

    def __init__(self, status_code: int, url: str | None = None) -> None:
        super().__init__(f"HTTP status: {status_code}")
        self.status_code = status_code
        self.url = url


class MalformedResponseError(BioSdkClientError):
    """El cuerpo no es JSON válido o le faltan campos requeridos."""


class BackendReportedError(BioSdkClientError):
    """El sobre de respuesta trae una lista `errors` no vacía."""

    def __init__(self, message: str, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])
