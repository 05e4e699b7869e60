"""Cliente HTTP de servicios SDK biométricos (implementación de `BioApi`).

Responsabilidad:
- Elegir el backend de cada llamada (`ServiceRegistry`).
- Construir el sobre versionado y hacer el POST (`envelope`, `http_client`).
- Parsear la respuesta con el anidamiento propio de cada operación y
  convertir errores del backend en una única excepción.

Estado:
- `init` construye el registro de URLs y el `SdkInfo` agregado; ambos son de
  solo lectura hasta el siguiente `init`.
- Cualquier otra operación antes de `init` lanza `NotInitializedError`.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, TypeVar

import httpx

from adapters.envelope import DecodedResponse, ResponseShape, decode, encode
from adapters.http_client import build_client, post_json
from core.config import ClientSettings
from core.domain.models import (
    BiometricRecord,
    CheckQualityRequest,
    ConvertFormatRequest,
    ExtractTemplateRequest,
    InitRequest,
    MatchDecision,
    MatchRequest,
    Modality,
    QualityCheck,
    SdkInfo,
    SdkResponse,
    SegmentRequest,
)
from core.exceptions import (
    BackendHttpError,
    BioSdkClientError,
    NotInitializedError,
    TransportError,
)
from core.interfaces.bio_api import BioApi
from core.logging_config import get_logger
from core.services.capabilities import aggregate_sdk_info
from core.services.service_registry import ServiceRegistry

logger = get_logger(__name__)

R = TypeVar("R")

PATH_INIT = "/init"
PATH_CHECK_QUALITY = "/check-quality"
PATH_MATCH = "/match"
PATH_EXTRACT_TEMPLATE = "/extract-template"
PATH_SEGMENT = "/segment"
PATH_CONVERT_FORMAT = "/convert-format"

# `check-quality` no trae statusCode propio; se informa éxito.
_QUALITY_STATUS_CODE = 200


def _optional_dict(value: Mapping[str, str] | None) -> dict[str, str] | None:
    return dict(value) if value is not None else None


def _optional_list(value: Sequence[Any] | None) -> list[Any] | None:
    return list(value) if value is not None else None


class BioSdkClient(BioApi):
    """Dispatcher de operaciones biométricas hacia uno o varios servicios SDK."""

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._owns_client = http_client is None
        self._http = http_client or build_client(self._settings)
        self._registry: ServiceRegistry | None = None
        self._sdk_info: SdkInfo | None = None

    # -- ciclo de vida -----------------------------------------------------

    def __enter__(self) -> "BioSdkClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    @property
    def is_initialized(self) -> bool:
        return self._registry is not None

    @property
    def registry(self) -> ServiceRegistry:
        if self._registry is None:
            raise NotInitializedError("registry")
        return self._registry

    @property
    def sdk_info(self) -> SdkInfo | None:
        """Descriptor agregado devuelto por el último `init`."""

        return self._sdk_info

    def _require_registry(self, operation: str) -> ServiceRegistry:
        if self._registry is None:
            raise NotInitializedError(operation)
        return self._registry

    # -- transporte ----------------------------------------------------------

    def _call(
        self,
        url: str,
        payload: Any,
        result_type: Any,
        shape: ResponseShape,
    ) -> DecodedResponse[Any]:
        envelope = encode(payload, version=self._settings.api_version)
        logger.debug("sdk_request", url=url)
        try:
            response = post_json(
                self._http,
                url,
                envelope.model_dump(mode="json"),
                debug=self._settings.request_response_debug,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {url} failed: {exc}", cause=exc) from exc

        if not response.is_success:
            logger.debug("sdk_http_status", url=url, status_code=response.status_code)
            raise BackendHttpError(response.status_code, url=url)

        return decode(response.content, result_type, shape=shape)

    def _run(self, operation: str, fn: Callable[[], R]) -> R:
        """Ejecuta `fn` y normaliza cualquier fallo a `BioSdkClientError`."""

        try:
            return fn()
        except BioSdkClientError as exc:
            logger.error("sdk_operation_failed", operation=operation, **exc.to_dict())
            raise
        except Exception as exc:
            logger.error("sdk_operation_failed", operation=operation, error=repr(exc))
            raise BioSdkClientError(str(exc) or exc.__class__.__name__, cause=exc) from exc

    # -- operaciones -----------------------------------------------------------

    def init(self, init_params: Mapping[str, str]) -> SdkInfo | None:
        """Inicializa contra cada backend configurado y agrega sus capacidades.

        Todas las claves de `init_params` (incluidas las `format.url.*`) se
        reenvían tal cual a cada backend.
        """

        def _init() -> SdkInfo | None:
            registry = ServiceRegistry.from_init_params(
                init_params,
                env_default=self._settings.default_service_url,
            )
            request = InitRequest(init_params=dict(init_params or {}))
            infos: list[SdkInfo | None] = []
            for base_url in registry.urls():
                decoded = self._call(base_url + PATH_INIT, request, SdkInfo, ResponseShape.DIRECT)
                infos.append(decoded.result)
            aggregated = aggregate_sdk_info(infos)

            self._registry = registry
            self._sdk_info = aggregated
            logger.info("sdk_initialized", backends=len(registry.endpoints))
            return aggregated

        return self._run("init", _init)

    def check_quality(
        self,
        sample: BiometricRecord,
        modalities_to_check: Sequence[Modality],
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[QualityCheck]:
        def _check() -> SdkResponse[QualityCheck]:
            registry = self._require_registry("check_quality")
            request = CheckQualityRequest(
                sample=sample,
                modalities_to_check=_optional_list(modalities_to_check),
                flags=_optional_dict(flags),
            )
            url = registry.resolve_for(request.modalities_to_check, request.flags, sniff_flags=False)
            url += PATH_CHECK_QUALITY
            decoded = self._call(url, request, QualityCheck, ResponseShape.UNWRAP)
            return SdkResponse[QualityCheck](
                status_code=_QUALITY_STATUS_CODE,
                response=decoded.result,
            )

        return self._run("check_quality", _check)

    def match(
        self,
        sample: BiometricRecord,
        gallery: Sequence[BiometricRecord],
        modalities_to_match: Sequence[Modality],
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[list[MatchDecision]]:
        def _match() -> SdkResponse[list[MatchDecision]]:
            registry = self._require_registry("match")
            request = MatchRequest(
                sample=sample,
                gallery=_optional_list(gallery),
                modalities_to_match=_optional_list(modalities_to_match),
                flags=_optional_dict(flags),
            )
            url = registry.resolve_for(request.modalities_to_match, request.flags, sniff_flags=False)
            url += PATH_MATCH
            decoded = self._call(url, request, list[MatchDecision], ResponseShape.STATUS)
            return SdkResponse[list[MatchDecision]](
                status_code=decoded.status_code,
                status_message=decoded.status_message,
                response=decoded.result,
            )

        return self._run("match", _match)

    def extract_template(
        self,
        sample: BiometricRecord,
        modalities_to_extract: Sequence[Modality] | None,
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[BiometricRecord]:
        def _extract() -> SdkResponse[BiometricRecord]:
            registry = self._require_registry("extract_template")
            request = ExtractTemplateRequest(
                sample=sample,
                modalities_to_extract=_optional_list(modalities_to_extract),
                flags=_optional_dict(flags),
            )
            # Sin modalidades, el backend se deduce de las claves de flags.
            url = registry.resolve_for(request.modalities_to_extract, request.flags) + PATH_EXTRACT_TEMPLATE
            return self._record_response(url, request)

        return self._run("extract_template", _extract)

    def segment(
        self,
        sample: BiometricRecord,
        modalities_to_segment: Sequence[Modality],
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[BiometricRecord]:
        def _segment() -> SdkResponse[BiometricRecord]:
            registry = self._require_registry("segment")
            request = SegmentRequest(
                sample=sample,
                modalities_to_segment=_optional_list(modalities_to_segment),
                flags=_optional_dict(flags),
            )
            url = registry.resolve_for(request.modalities_to_segment, request.flags, sniff_flags=False)
            url += PATH_SEGMENT
            return self._record_response(url, request)

        return self._run("segment", _segment)

    def convert_format(
        self,
        sample: BiometricRecord,
        source_format: str,
        target_format: str,
        source_params: Mapping[str, str] | None = None,
        target_params: Mapping[str, str] | None = None,
        modalities_to_convert: Sequence[Modality] | None = None,
    ) -> BiometricRecord | None:
        """Conversión v1 (obsoleta): el registro llega sin envoltorio de estado."""

        def _convert() -> BiometricRecord | None:
            registry = self._require_registry("convert_format")
            request = self._convert_request(
                sample, source_format, target_format, source_params, target_params, modalities_to_convert
            )
            url = registry.default_url + PATH_CONVERT_FORMAT
            return self._call(url, request, BiometricRecord, ResponseShape.DIRECT).result

        return self._run("convert_format", _convert)

    def convert_format_v2(
        self,
        sample: BiometricRecord,
        source_format: str,
        target_format: str,
        source_params: Mapping[str, str] | None = None,
        target_params: Mapping[str, str] | None = None,
        modalities_to_convert: Sequence[Modality] | None = None,
    ) -> SdkResponse[BiometricRecord]:
        def _convert() -> SdkResponse[BiometricRecord]:
            registry = self._require_registry("convert_format_v2")
            request = self._convert_request(
                sample, source_format, target_format, source_params, target_params, modalities_to_convert
            )
            url = registry.default_url + PATH_CONVERT_FORMAT
            return self._record_response(url, request)

        return self._run("convert_format_v2", _convert)

    # -- helpers -------------------------------------------------------------

    def _record_response(self, url: str, request: Any) -> SdkResponse[BiometricRecord]:
        decoded = self._call(url, request, BiometricRecord, ResponseShape.STATUS)
        return SdkResponse[BiometricRecord](
            status_code=decoded.status_code,
            status_message=decoded.status_message,
            response=decoded.result,
        )

    @staticmethod
    def _convert_request(
        sample: BiometricRecord,
        source_format: str,
        target_format: str,
        source_params: Mapping[str, str] | None,
        target_params: Mapping[str, str] | None,
        modalities_to_convert: Sequence[Modality] | None,
    ) -> ConvertFormatRequest:
        return ConvertFormatRequest(
            sample=sample,
            source_format=source_format,
            target_format=target_format,
            source_params=_optional_dict(source_params),
            target_params=_optional_dict(target_params),
            modalities_to_convert=_optional_list(modalities_to_convert),
        )
