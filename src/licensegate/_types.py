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

"""Shared leaf-level types used across licensegate.

This module must have **zero** imports from other ``licensegate``
modules to avoid circular-import chains.  Everything here is a frozen
dataclass or an enum: no I/O, no logging, no side effects.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Coordinate          │ The "address" of a Maven artifact:             │
    │                     │ ``group:artifact:version``.                    │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Primary link        │ The license URL declared in the POM. It is     │
    │                     │ also the merge key for curated license data.   │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Secondary link      │ A replacement URL (local copy, mirror) used    │
    │                     │ when the primary link cannot be scraped.       │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Manifest            │ The curated, persisted list of dependencies    │
    │                     │ and their licenses.                            │
    └─────────────────────┴────────────────────────────────────────────────┘
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

__all__ = [
    'Dependency',
    'DependencyCoordinate',
    'ExtractedLicense',
    'License',
    'Manifest',
    'OriginOfLicense',
    'PrimaryLinkType',
    'RawDependency',
    'SecondaryLinkType',
]


class PrimaryLinkType(enum.Enum):
    """How the primary license link can be used."""

    UNSPECIFIED = 'UNSPECIFIED'
    VALID_SCRAPABLE = 'VALID_SCRAPABLE'
    LOCAL_COPY_REQUIRED = 'LOCAL_COPY_REQUIRED'
    NEEDS_INTERVENTION = 'NEEDS_INTERVENTION'
    INVALID_LINK = 'INVALID_LINK'
    UNRECOGNIZED = 'UNRECOGNIZED'

    @classmethod
    def parse(cls, value: str) -> PrimaryLinkType:
        """Map a persisted name to a member, ``UNRECOGNIZED`` if unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNRECOGNIZED


class SecondaryLinkType(enum.Enum):
    """Validity of the secondary license link."""

    UNSPECIFIED = 'UNSPECIFIED'
    VALID = 'VALID'
    UNRECOGNIZED = 'UNRECOGNIZED'

    @classmethod
    def parse(cls, value: str) -> SecondaryLinkType:
        """Map a persisted name to a member, ``UNRECOGNIZED`` if unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNRECOGNIZED


class OriginOfLicense(enum.Enum):
    """Where a dependency's license data ultimately came from."""

    UNKNOWN = 'UNKNOWN'
    MANUAL = 'MANUAL'
    PARTIALLY_FROM_SOURCE = 'PARTIALLY_FROM_SOURCE'
    ENTIRELY_FROM_SOURCE = 'ENTIRELY_FROM_SOURCE'

    @classmethod
    def parse(cls, value: str) -> OriginOfLicense:
        """Map a persisted name to a member, ``UNKNOWN`` if unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class DependencyCoordinate:
    """A parsed ``group:artifact:version`` coordinate.

    Attributes:
        group: Maven group ID (e.g. ``"androidx.databinding"``).
        artifact: Artifact ID (e.g. ``"databinding-adapters"``).
        version: Version string (e.g. ``"3.4.2"``).
    """

    group: str
    artifact: str
    version: str

    def __str__(self) -> str:
        return f'{self.group}:{self.artifact}:{self.version}'


@dataclass(frozen=True)
class RawDependency:
    """A single entry from the lock file.

    Attributes:
        coordinate: The coordinate string exactly as it appears in the
            lock file.
        url: Download URL of the artifact (``.jar`` / ``.aar``).
    """

    coordinate: str
    url: str


@dataclass(frozen=True)
class ExtractedLicense:
    """A ``(name, url)`` pair scanned out of a POM document."""

    name: str
    url: str


@dataclass(frozen=True)
class License:
    """A license record as stored in the manifest.

    Attributes:
        name: Display name of the license.
        primary_link: URL declared upstream. Identity for merges.
        primary_link_type: Curated category of the primary link.
        secondary_link: Replacement URL for licenses that need one.
        secondary_link_type: Curated category of the secondary link.
        secondary_license_name: Display name for the secondary link.
    """

    name: str
    primary_link: str
    primary_link_type: PrimaryLinkType = PrimaryLinkType.UNSPECIFIED
    secondary_link: str = ''
    secondary_link_type: SecondaryLinkType = SecondaryLinkType.UNSPECIFIED
    secondary_license_name: str = ''


@dataclass(frozen=True)
class Dependency:
    """A reconciled dependency entry.

    License order is kept for display, but two dependencies whose
    licenses differ only in order compare equal.

    Attributes:
        coordinate: Lock-file coordinate string (version included).
        version: Version segment of the coordinate.
        licenses: Licenses declared for the dependency.
        origin_of_license: Provenance classification.
        index: Stable position in the output manifest.
    """

    coordinate: str
    version: str
    licenses: tuple[License, ...] = ()
    origin_of_license: OriginOfLicense = OriginOfLicense.UNKNOWN
    index: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dependency):
            return NotImplemented
        return (
            self.coordinate == other.coordinate
            and self.version == other.version
            and self.origin_of_license == other.origin_of_license
            and self.index == other.index
            and sorted(self.licenses, key=repr) == sorted(other.licenses, key=repr)
        )

    def __hash__(self) -> int:
        return hash((self.coordinate, self.version, self.origin_of_license, self.index, frozenset(self.licenses)))


@dataclass
class Manifest:
    """The persisted set of dependencies, keyed by coordinate.

    Attributes:
        dependencies: Entries in manifest order.
    """

    dependencies: list[Dependency] = field(default_factory=list)

    @classmethod
    def of(cls, dependencies: Iterable[Dependency]) -> Manifest:
        """Build a manifest from any iterable of dependencies."""
        return cls(dependencies=list(dependencies))

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self.dependencies)

    def __len__(self) -> int:
        return len(self.dependencies)

    def get(self, coordinate: str) -> Dependency | None:
        """Return the dependency with this exact coordinate, if any."""
        for dep in self.dependencies:
            if dep.coordinate == coordinate:
                return dep
        return None

    def all_licenses(self) -> list[License]:
        """Return every license record in manifest order (duplicates kept)."""
        return [lic for dep in self.dependencies for lic in dep.licenses]
