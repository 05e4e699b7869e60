"""Contrato de la API biométrica.

Por qué Protocol:
- Define el conjunto fijo de operaciones (init, calidad, matching, extracción,
  segmentación, conversión) sin herencia rígida.
- El dispatcher HTTP es la única implementación real; un doble de pruebas o un
  SDK local pueden cumplir el mismo contrato.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence, runtime_checkable

from core.domain.models import (
    BiometricRecord,
    MatchDecision,
    Modality,
    QualityCheck,
    SdkInfo,
    SdkResponse,
)


@runtime_checkable
class BioApi(Protocol):
    """Operaciones biométricas expuestas al llamador.

    Reglas de diseño:
    - `init` debe invocarse antes que cualquier otra operación.
    - Las operaciones son síncronas: una llamada remota por invocación.
    - Cualquier fallo se propaga como una única excepción; no hay éxito parcial.
    """

    def init(self, init_params: Mapping[str, str]) -> SdkInfo | None:
        ...

    def check_quality(
        self,
        sample: BiometricRecord,
        modalities_to_check: Sequence[Modality],
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[QualityCheck]:
        ...

    def match(
        self,
        sample: BiometricRecord,
        gallery: Sequence[BiometricRecord],
        modalities_to_match: Sequence[Modality],
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[list[MatchDecision]]:
        ...

    def extract_template(
        self,
        sample: BiometricRecord,
        modalities_to_extract: Sequence[Modality] | None,
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[BiometricRecord]:
        ...

    def segment(
        self,
        sample: BiometricRecord,
        modalities_to_segment: Sequence[Modality],
        flags: Mapping[str, str] | None = None,
    ) -> SdkResponse[BiometricRecord]:
        ...

    def convert_format(
        self,
        sample: BiometricRecord,
        source_format: str,
        target_format: str,
        source_params: Mapping[str, str] | None = None,
        target_params: Mapping[str, str] | None = None,
        modalities_to_convert: Sequence[Modality] | None = None,
    ) -> BiometricRecord | None:
        """Conversión v1: el backend devuelve el registro sin envoltorio de estado."""

        ...

    def convert_format_v2(
        self,
        sample: BiometricRecord,
        source_format: str,
        target_format: str,
        source_params: Mapping[str, str] | None = None,
        target_params: Mapping[str, str] | None = None,
        modalities_to_convert: Sequence[Modality] | None = None,
    ) -> SdkResponse[BiometricRecord]:
        ...
