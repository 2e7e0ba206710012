# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Merge freshly extracted license data into the curated manifest.

Maintainers classify license links by hand in the persisted manifest.
Every rerun re-extracts licenses from POM files, so without a merge
step those classifications would be overwritten.  The merge is keyed
on the primary link alone::

    prior manifest                  fresh extraction
    ──────────────                  ────────────────
    apache.org/LICENSE-2.0          apache.org/LICENSE-2.0
      VALID_SCRAPABLE   ──wins──→     UNSPECIFIED
                                    opensource.org/MIT
                                      UNSPECIFIED  ──kept (new link)

A curated record applies to every dependency that declares the same
link, whichever dependency it was originally curated on.

Origin classification::

    ┌──────────────────────────────┬──────────────────────────┐
    │ Licenses (manual = NEEDS_    │ origin_of_license        │
    │ INTERVENTION / INVALID_LINK) │                          │
    ├──────────────────────────────┼──────────────────────────┤
    │ none                         │ UNKNOWN                  │
    │ all manual                   │ MANUAL                   │
    │ some manual                  │ PARTIALLY_FROM_SOURCE    │
    │ no manual                    │ ENTIRELY_FROM_SOURCE     │
    └──────────────────────────────┴──────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from licensegate._types import Dependency, License, Manifest, OriginOfLicense
from licensegate.classify import requires_manual_intervention
from licensegate.coordinates import coordinate_version
from licensegate.logging import get_logger

logger = get_logger(__name__)


def origin_of(licenses: Sequence[License]) -> OriginOfLicense:
    """Classify where a dependency's license data comes from."""
    if not licenses:
        return OriginOfLicense.UNKNOWN
    manual = sum(1 for lic in licenses if requires_manual_intervention(lic))
    if manual == 0:
        return OriginOfLicense.ENTIRELY_FROM_SOURCE
    if manual == len(licenses):
        return OriginOfLicense.MANUAL
    return OriginOfLicense.PARTIALLY_FROM_SOURCE


def merge_license_sets(
    new: Iterable[License],
    prior: Iterable[License],
) -> dict[str, License]:
    """Union two license collections keyed by primary link; prior wins.

    Among prior records sharing a link, the first one wins.  Among new
    records sharing a link (and absent from *prior*), the first one
    wins as well.

    Returns:
        Mapping of primary link → license record.
    """
    merged: dict[str, License] = {}
    for lic in prior:
        existing = merged.setdefault(lic.primary_link, lic)
        if existing != lic:
            logger.warning('conflicting_prior_license', primary_link=lic.primary_link)

    curated = frozenset(merged)
    for lic in new:
        if lic.primary_link in curated:
            kept = merged[lic.primary_link]
            # Curated name wins; upstream renames are only logged.
            if kept.name != lic.name:
                logger.info(
                    'license_name_drift',
                    primary_link=lic.primary_link,
                    curated_name=kept.name,
                    upstream_name=lic.name,
                )
            continue
        merged.setdefault(lic.primary_link, lic)
    return merged


def reconcile(
    candidates: Mapping[str, Sequence[License]],
    prior: Manifest,
) -> Manifest:
    """Build the new authoritative manifest.

    Args:
        candidates: Fresh licenses per dependency coordinate, as
            produced by extraction and classification.
        prior: The manifest loaded from disk (may be empty).

    Returns:
        One entry per coordinate in *candidates*, sorted by coordinate,
        with ``index`` set to the position in that order.
    """
    merged = merge_license_sets(
        (lic for licenses in candidates.values() for lic in licenses),
        prior.all_licenses(),
    )

    dependencies: list[Dependency] = []
    for index, coordinate in enumerate(sorted(candidates)):
        licenses = [merged[lic.primary_link] for lic in candidates[coordinate]]

        # A POM without licenses can only be fixed by hand in the manifest.
        if not licenses:
            previous = prior.get(coordinate)
            if previous is not None and previous.licenses:
                licenses = [merged.get(lic.primary_link, lic) for lic in previous.licenses]
                logger.info('curated_licenses_carried_forward', coordinate=coordinate, count=len(licenses))

        dependencies.append(
            Dependency(
                coordinate=coordinate,
                version=coordinate_version(coordinate),
                licenses=tuple(licenses),
                origin_of_license=origin_of(licenses),
                index=index,
            )
        )

    logger.debug('manifest_reconciled', dependencies=len(dependencies), licenses=len(merged))
    return Manifest(dependencies=dependencies)


__all__ = [
    'merge_license_sets',
    'origin_of',
    'reconcile',
]
