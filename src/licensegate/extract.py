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

"""Tolerant license extraction from POM documents.

POM files found in the wild are not reliably well-formed: some are
truncated, some mix namespaces, some carry stray text.  Instead of
parsing XML, the scanner walks the raw text looking for a handful of
markers::

    SEEK_LICENSES ──<licenses>──→ SEEK_LICENSE ──</licenses> / EOF──→ DONE
          │                          │    ↑
          └── no marker ──→ DONE     │    └──────────────┐
                                 <license>               │
                                     ↓                   │
                SEEK_NAME ─<name>→ READ_NAME ─'<'→ SEEK_URL ─<url>→ READ_URL ─'<'┘

Every scan is bounded by the document length.  A marker or value
terminator that never shows up inside a ``<license>`` element raises
:class:`~licensegate.errors.TruncatedLicenseBlock`.

Usage::

    from licensegate.extract import extract_licenses

    pairs = extract_licenses(pom_text, 'androidx.foo:bar:1.0.0')
    # → [ExtractedLicense(name='Apache 2.0', url='https://...')]
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING, Final

from licensegate._types import ExtractedLicense, RawDependency
from licensegate.errors import TruncatedLicenseBlock, UnreachableManifest
from licensegate.logging import get_logger

if TYPE_CHECKING:
    from licensegate.net import DocumentFetcher

log = get_logger('licensegate.extract')

LICENSES_TAG: Final[str] = '<licenses>'
LICENSES_CLOSE_TAG: Final[str] = '</licenses>'
LICENSE_TAG: Final[str] = '<license>'
NAME_TAG: Final[str] = '<name>'
URL_TAG: Final[str] = '<url>'
VALUE_END: Final[str] = '<'


class _ScanState(enum.Enum):
    SEEK_LICENSES = enum.auto()
    SEEK_LICENSE = enum.auto()
    SEEK_NAME = enum.auto()
    READ_NAME = enum.auto()
    SEEK_URL = enum.auto()
    READ_URL = enum.auto()
    DONE = enum.auto()


def extract_licenses(document: str, dependency: str) -> list[ExtractedLicense]:
    """Scan *document* for ``(name, url)`` license pairs, in document order.

    Args:
        document: Raw POM text.
        dependency: Coordinate of the owning dependency, used in errors.

    Returns:
        The licenses found; empty if the document has no ``<licenses>``.

    Raises:
        TruncatedLicenseBlock: If a ``<license>`` element is missing its
            name or URL before the end of the document.
    """
    found: list[ExtractedLicense] = []
    state = _ScanState.SEEK_LICENSES
    cursor = 0
    name = ''

    while state is not _ScanState.DONE:
        if state is _ScanState.SEEK_LICENSES:
            start = document.find(LICENSES_TAG)
            if start == -1:
                log.debug('no_licenses_block', dependency=dependency)
                state = _ScanState.DONE
            else:
                cursor = start + len(LICENSES_TAG)
                state = _ScanState.SEEK_LICENSE

        elif state is _ScanState.SEEK_LICENSE:
            start = document.find(LICENSE_TAG, cursor)
            close = document.find(LICENSES_CLOSE_TAG, cursor)
            if start == -1 or (close != -1 and close < start):
                state = _ScanState.DONE
            else:
                cursor = start + len(LICENSE_TAG)
                state = _ScanState.SEEK_NAME

        elif state is _ScanState.SEEK_NAME:
            cursor = _skip_past(document, NAME_TAG, cursor, dependency)
            state = _ScanState.READ_NAME

        elif state is _ScanState.READ_NAME:
            name, cursor = _read_value(document, cursor, dependency, NAME_TAG)
            state = _ScanState.SEEK_URL

        elif state is _ScanState.SEEK_URL:
            cursor = _skip_past(document, URL_TAG, cursor, dependency)
            state = _ScanState.READ_URL

        elif state is _ScanState.READ_URL:
            url, cursor = _read_value(document, cursor, dependency, URL_TAG)
            found.append(ExtractedLicense(name=name, url=url))
            state = _ScanState.SEEK_LICENSE

    return found


def _skip_past(document: str, marker: str, cursor: int, dependency: str) -> int:
    """Return the index just after the next *marker* at or after *cursor*."""
    start = document.find(marker, cursor)
    if start == -1:
        raise TruncatedLicenseBlock(dependency, marker)
    return start + len(marker)


def _read_value(document: str, cursor: int, dependency: str, marker: str) -> tuple[str, int]:
    """Read the text between *cursor* and the next ``<``."""
    stop = document.find(VALUE_END, cursor)
    if stop == -1:
        raise TruncatedLicenseBlock(dependency, f'end of {marker} value')
    return document[cursor:stop].strip(), stop


def pom_url_for(artifact_url: str) -> str:
    """Return the POM URL that sits next to an artifact URL.

    >>> pom_url_for('https://maven.google.com/a/b/1.0/b-1.0.aar')
    'https://maven.google.com/a/b/1.0/b-1.0.pom'
    """
    base, dot, extension = artifact_url.rpartition('.')
    if not dot or '/' in extension:
        return f'{artifact_url}.pom'
    return f'{base}.pom'


async def fetch_license_candidates(
    dependencies: Iterable[RawDependency],
    fetcher: DocumentFetcher,
    *,
    concurrency: int = 1,
) -> dict[RawDependency, list[ExtractedLicense]]:
    """Fetch and scan the POM of every dependency.

    Dependencies are processed one at a time unless *concurrency* is
    greater than one.  Either way the result is ordered by coordinate,
    never by fetch completion.

    Args:
        dependencies: Dependencies to process.
        fetcher: Document fetcher capability.
        concurrency: Maximum number of in-flight fetches.

    Returns:
        Mapping of dependency → extracted licenses, in coordinate order.

    Raises:
        UnreachableManifest: On the first fetch failure.
        TruncatedLicenseBlock: On the first malformed license block.
    """
    ordered = sorted(dependencies, key=lambda dep: dep.coordinate)
    sem = asyncio.Semaphore(max(1, concurrency))

    async def _do_one(dep: RawDependency) -> list[ExtractedLicense]:
        if not dep.url:
            raise UnreachableManifest('(none)', dep.coordinate, reason='the lock file has no artifact URL')
        url = pom_url_for(dep.url)
        async with sem:
            try:
                document = await fetcher.fetch(url)
            except UnreachableManifest as exc:
                log.error('pom_unreachable', dependency=dep.coordinate, url=url)
                raise UnreachableManifest(url, dep.coordinate, reason=exc.reason) from exc
        licenses = extract_licenses(document, dep.coordinate)
        log.info('pom_scanned', dependency=dep.coordinate, licenses=len(licenses))
        return licenses

    if concurrency <= 1:
        results = [await _do_one(dep) for dep in ordered]
    else:
        results = await asyncio.gather(*[_do_one(dep) for dep in ordered])
    return dict(zip(ordered, results, strict=True))


__all__ = [
    'LICENSES_CLOSE_TAG',
    'LICENSES_TAG',
    'LICENSE_TAG',
    'NAME_TAG',
    'URL_TAG',
    'extract_licenses',
    'fetch_license_candidates',
    'pom_url_for',
]
