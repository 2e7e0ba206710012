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

"""Intersect lock-file dependencies with the build graph.

The lock file pins every artifact the Maven resolver saw, including
ones no shipped target actually depends on.  Only artifacts reachable
from the build graph need license data, so the lock-file list is
filtered down to those whose normalized name the graph query reported::

    lock file           build graph            result
    ─────────           ───────────            ──────
    a:lib:1.0    ──┐    a_lib          ──┐
    b:tool:2.0     ├──→ c_core           ├──→  a:lib:1.0
    c:core:3.0   ──┘                   ──┘     c:core:3.0
"""

from __future__ import annotations

from collections.abc import Iterable

from licensegate._types import RawDependency
from licensegate.coordinates import find_collisions, normalize_coordinate
from licensegate.logging import get_logger

logger = get_logger(__name__)

#: Prefix of targets reported by a ``@maven//...`` query.
DEFAULT_TARGET_PREFIX = '@maven//:'


def parse_query_output(lines: Iterable[str], prefix: str = DEFAULT_TARGET_PREFIX) -> set[str]:
    """Turn raw query output into a set of normalized target names.

    Lines that are blank or do not start with *prefix* are ignored.
    """
    names: set[str] = set()
    for line in lines:
        line = line.strip()
        if line.startswith(prefix) and len(line) > len(prefix):
            names.add(line[len(prefix) :])
    return names


def intersect_dependencies(
    dependencies: Iterable[RawDependency],
    reachable: Iterable[str],
) -> list[RawDependency]:
    """Keep the dependencies whose normalized coordinate is reachable.

    Args:
        dependencies: Lock-file entries, in any order.
        reachable: Normalized target names from the build graph.

    Returns:
        The reachable dependencies, sorted by coordinate.
    """
    reachable_names = frozenset(reachable)
    ordered = sorted(dependencies, key=lambda dep: dep.coordinate)

    for name, sources in find_collisions(dep.coordinate for dep in ordered).items():
        logger.warning('normalized_name_collision', name=name, coordinates=sources)

    kept: list[RawDependency] = []
    for dep in ordered:
        if normalize_coordinate(dep.coordinate) in reachable_names:
            kept.append(dep)
        else:
            logger.debug('dependency_dropped', coordinate=dep.coordinate)

    logger.debug('dependencies_intersected', declared=len(ordered), kept=len(kept))
    return kept


__all__ = [
    'DEFAULT_TARGET_PREFIX',
    'intersect_dependencies',
    'parse_query_output',
]
