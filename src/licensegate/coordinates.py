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

"""Maven coordinate parsing and build-graph name normalization.

Bazel's ``rules_jvm_external`` exposes every pinned artifact as a target
whose name is the version-less coordinate with ``.``, ``:`` and ``-``
replaced by ``_``::

    androidx.databinding:databinding-adapters:3.4.2
        → androidx_databinding_databinding_adapters

The mapping is lossy: ``com.example:foo-bar`` and ``com.example:foo_bar``
produce the same token.  :func:`find_collisions` reports such cases so
they can be fixed upstream; they are never resolved at runtime.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from licensegate._types import DependencyCoordinate
from licensegate.errors import MalformedCoordinate

_SEPARATORS: Final[frozenset[str]] = frozenset('.:-')
_REPLACEMENT: Final[str] = '_'


def parse_coordinate(coordinate: str) -> DependencyCoordinate:
    """Split a ``group:artifact:version`` string.

    The rightmost segment is the version and the leftmost the group;
    anything in between (e.g. a packaging or classifier segment) stays
    in the artifact.

    Raises:
        MalformedCoordinate: If *coordinate* has no ``:``.
    """
    if ':' not in coordinate:
        raise MalformedCoordinate(coordinate)
    head, version = coordinate.rsplit(':', 1)
    group, _, artifact = head.partition(':')
    return DependencyCoordinate(group=group, artifact=artifact, version=version)


def coordinate_version(coordinate: str) -> str:
    """Return the version segment of *coordinate*."""
    return parse_coordinate(coordinate).version


def strip_version(coordinate: str) -> str:
    """Return *coordinate* without its rightmost ``:version`` segment."""
    if ':' not in coordinate:
        raise MalformedCoordinate(coordinate)
    return coordinate.rsplit(':', 1)[0]


def normalize_coordinate(coordinate: str) -> str:
    """Convert a coordinate to its build-graph target name.

    >>> normalize_coordinate('com.example:foo-bar:1.0')
    'com_example_foo_bar'
    """
    return ''.join(_REPLACEMENT if ch in _SEPARATORS else ch for ch in strip_version(coordinate))


def find_collisions(coordinates: Iterable[str]) -> dict[str, list[str]]:
    """Find normalized names shared by distinct version-less coordinates.

    Versions of the same artifact are not collisions.

    Returns:
        Mapping of normalized name → sorted distinct version-less
        coordinates, for names produced by more than one of them.
    """
    by_name: dict[str, set[str]] = {}
    for coordinate in coordinates:
        by_name.setdefault(normalize_coordinate(coordinate), set()).add(strip_version(coordinate))
    return {name: sorted(sources) for name, sources in sorted(by_name.items()) if len(sources) > 1}


__all__ = [
    'coordinate_version',
    'find_collisions',
    'normalize_coordinate',
    'parse_coordinate',
    'strip_version',
]
