"""Backend URL registry and routing policy.

Init params carry one URL per format under `format.url.<name>`. This module
turns them into a name -> URL mapping that always has a `default` entry and
decides which backend serves a given modality/flags combination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping, Sequence

from core.domain.models import Modality
from core.exceptions import ConfigurationError

FORMAT_URL_PREFIX = "format.url."
FORMAT_SUFFIX = ".format"
DEFAULT = "default"

# Priority order used when the modality has to be sniffed from flag keys.
_SNIFF_ORDER: tuple[Modality, ...] = (Modality.FINGER, Modality.IRIS, Modality.FACE)


def build_registry(
    init_params: Mapping[str, str] | None,
    env_default: str | None = None,
) -> dict[str, str]:
    """Collect `format.url.*` params into a name -> URL mapping.

    A missing `default` is taken from `env_default` or, failing that, from the
    first collected entry. Raises `ConfigurationError` if nothing is left.
    """

    urls: dict[str, str] = {}
    for key, value in (init_params or {}).items():
        idx = key.find(FORMAT_URL_PREFIX)
        if idx < 0:
            continue
        urls[key[idx + len(FORMAT_URL_PREFIX):]] = value

    if DEFAULT not in urls and env_default:
        urls[DEFAULT] = env_default

    if DEFAULT not in urls and urls:
        urls[DEFAULT] = next(iter(urls.values()))

    if not urls:
        raise ConfigurationError("No valid sdk service url configured")
    return urls


def _lookup_ci(mapping: Mapping[str, str], key: str) -> str | None:
    for k, v in mapping.items():
        if k.lower() == key.lower():
            return v
    return None


@dataclass(frozen=True)
class ServiceRegistry:
    """Read-only view over the backend URLs chosen at init time."""

    endpoints: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_init_params(
        cls,
        init_params: Mapping[str, str] | None,
        env_default: str | None = None,
    ) -> "ServiceRegistry":
        return cls(endpoints=build_registry(init_params, env_default))

    @property
    def default_url(self) -> str:
        try:
            return self.endpoints[DEFAULT]
        except KeyError as exc:
            raise ConfigurationError("No default sdk service url configured", cause=exc) from exc

    def urls(self) -> Iterator[str]:
        """Every configured URL in registry order, `default` included."""

        return iter(self.endpoints.values())

    def resolve(
        self,
        modality: Modality | None,
        flags: Mapping[str, str] | None = None,
    ) -> str:
        """URL for `modality`, honouring a `<MODALITY>.format` flag when present.

        Without a modality the flag keys are scanned for a modality name
        (finger, iris, face) and the first hit is used.
        """

        if modality is None:
            modality = _sniff_modality(flags)

        if modality is not None and flags:
            fmt = _lookup_ci(flags, f"{modality.value}{FORMAT_SUFFIX}")
            if fmt is not None:
                url = _lookup_ci(self.endpoints, fmt)
                if url is not None:
                    return url
        return self.default_url

    def resolve_for(
        self,
        modalities: Sequence[Modality] | None,
        flags: Mapping[str, str] | None = None,
        *,
        sniff_flags: bool = True,
    ) -> str:
        """Route on the first modality of an operation's input list.

        An empty list falls back to flag sniffing, or straight to `default`
        when `sniff_flags` is False.
        """

        if modalities:
            return self.resolve(modalities[0], flags)
        if not sniff_flags:
            return self.default_url
        return self.resolve(None, flags)


def _sniff_modality(flags: Mapping[str, str] | None) -> Modality | None:
    for key in (flags or {}):
        lowered = key.lower()
        for modality in _SNIFF_ORDER:
            if modality.value.lower() in lowered:
                return modality
    return None
