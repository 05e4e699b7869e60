"""Aggregation of per-backend capability descriptors.

Each backend answers `init` with its own `SdkInfo`. The client keeps a single
merged descriptor:

- identity fields (api/sdk version, product owner) come from the first
  descriptor; later values are ignored;
- `otherInfo` and `supportedMethods` are merged key by key, last one wins;
- `supportedModalities` is the union in first-seen order.

The first-wins / last-wins asymmetry is the contract existing deployments
rely on; keep it.
"""

from __future__ import annotations

import copy
from typing import Sequence

from core.domain.models import ProductOwner, SdkInfo


def aggregate_sdk_info(infos: Sequence[SdkInfo | None]) -> SdkInfo | None:
    """Merge descriptors in the given order. Empty input yields None."""

    present = [info for info in infos if info is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]

    first = present[0]
    owner = first.product_owner
    aggregated = SdkInfo(
        api_version=first.api_version,
        sdk_version=first.sdk_version,
        product_owner=ProductOwner(
            organization=owner.organization if owner else None,
            type=owner.type if owner else None,
        ),
    )
    for info in present:
        _merge_into(aggregated, info)
    return aggregated


def _merge_into(target: SdkInfo, info: SdkInfo) -> None:
    if info.other_info:
        target.other_info.update(info.other_info)
    if info.supported_methods:
        target.supported_methods.update(copy.deepcopy(info.supported_methods))
    for modality in info.supported_modalities or ():
        if modality not in target.supported_modalities:
            target.supported_modalities.append(modality)
