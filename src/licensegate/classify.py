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

"""License link classification.

A freshly extracted license always starts as
:attr:`~licensegate._types.PrimaryLinkType.UNSPECIFIED`.  Deciding
whether a link can be scraped, needs a local copy, or needs a human is
a judgment call made once by a maintainer and persisted in the
manifest; the reconciler then reuses that decision for every
dependency that declares the same link.

The predicates below are read-only views over a :class:`License` used
by the reconciler and the validation gates.
"""

from __future__ import annotations

from typing import Final

from licensegate._types import ExtractedLicense, License, PrimaryLinkType, SecondaryLinkType

#: Primary link types that only work together with a secondary link.
SECONDARY_LINK_REQUIRED: Final[frozenset[PrimaryLinkType]] = frozenset({
    PrimaryLinkType.LOCAL_COPY_REQUIRED,
    PrimaryLinkType.NEEDS_INTERVENTION,
})

#: Primary link types that mean nobody has classified the link yet.
UNCLASSIFIED: Final[frozenset[PrimaryLinkType]] = frozenset({
    PrimaryLinkType.UNSPECIFIED,
    PrimaryLinkType.UNRECOGNIZED,
})

#: Primary link types whose license text cannot come from the source POM.
MANUAL_TYPES: Final[frozenset[PrimaryLinkType]] = frozenset({
    PrimaryLinkType.NEEDS_INTERVENTION,
    PrimaryLinkType.INVALID_LINK,
})

_RESOLVED_SECONDARY: Final[frozenset[SecondaryLinkType]] = frozenset({SecondaryLinkType.VALID})


def classify_license(extracted: ExtractedLicense) -> License:
    """Turn an extracted ``(name, url)`` pair into an unclassified license."""
    return License(
        name=extracted.name,
        primary_link=extracted.url,
        primary_link_type=PrimaryLinkType.UNSPECIFIED,
    )


def needs_secondary_link(lic: License) -> bool:
    """Whether *lic* must carry secondary link details."""
    return lic.primary_link_type in SECONDARY_LINK_REQUIRED


def requires_manual_intervention(lic: License) -> bool:
    """Whether *lic* counts as manually provided for origin purposes."""
    return lic.primary_link_type in MANUAL_TYPES


def missing_details(lic: License) -> list[str]:
    """List the reasons *lic* is broken; empty if it is complete."""
    if lic.primary_link_type in UNCLASSIFIED:
        return [f'primary_link_type is {lic.primary_link_type.value}']
    if not needs_secondary_link(lic):
        return []
    problems: list[str] = []
    if not lic.secondary_link:
        problems.append('secondary_link is empty')
    if lic.secondary_link_type not in _RESOLVED_SECONDARY:
        problems.append(f'secondary_link_type is {lic.secondary_link_type.value}')
    if not lic.secondary_license_name:
        problems.append('secondary_license_name is empty')
    return problems


def is_broken(lic: License) -> bool:
    """Whether *lic* still needs manual completion."""
    return bool(missing_details(lic))


__all__ = [
    'MANUAL_TYPES',
    'SECONDARY_LINK_REQUIRED',
    'UNCLASSIFIED',
    'classify_license',
    'is_broken',
    'missing_details',
    'needs_secondary_link',
    'requires_manual_intervention',
]
