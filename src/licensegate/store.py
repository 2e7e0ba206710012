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

"""Persisted manifest in TOML.

The manifest is both machine output and a hand-edited file: maintainers
fill in link types and secondary links directly.  It is written with
``tomlkit`` so the layout stays stable and diff-friendly::

    [[dependency]]
    index = 0
    coordinate = "androidx.foo:bar:1.0.0"
    version = "1.0.0"
    origin_of_license = "ENTIRELY_FROM_SOURCE"

    [[dependency.license]]
    name = "Apache 2.0"
    primary_link = "https://apache.org/LICENSE-2.0"
    primary_link_type = "VALID_SCRAPABLE"
    secondary_link = ""
    secondary_link_type = "UNSPECIFIED"
    secondary_license_name = ""

Unknown enum names load as ``UNRECOGNIZED`` (or ``UNKNOWN`` for the
origin) so that a typo surfaces in Gate A instead of aborting the load.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import tomlkit
import tomlkit.exceptions

from licensegate._types import (
    Dependency,
    License,
    Manifest,
    OriginOfLicense,
    PrimaryLinkType,
    SecondaryLinkType,
)
from licensegate.errors import ManifestStoreError
from licensegate.logging import get_logger

logger = get_logger(__name__)

_HEADER = 'Generated by licensegate. Link types and secondary links are curated by hand and kept across runs.'


class ManifestStore(Protocol):
    """Load/save capability for the persisted manifest."""

    def load(self) -> Manifest:
        """Return the persisted manifest, empty if there is none."""
        ...

    def save(self, manifest: Manifest) -> None:
        """Replace the persisted manifest."""
        ...


class TomlManifestStore:
    """:class:`ManifestStore` backed by a TOML file.

    Args:
        path: Location of the manifest file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Manifest:
        """Read the manifest; a missing or blank file yields an empty one.

        Raises:
            ManifestStoreError: If the file is not valid TOML or an entry
                lacks a required field.
        """
        if not self.path.is_file():
            logger.debug('manifest_not_found', path=str(self.path))
            return Manifest()
        try:
            text = self.path.read_text(encoding='utf-8')
        except OSError as exc:
            raise ManifestStoreError(str(self.path), str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise ManifestStoreError(str(self.path), f'not valid UTF-8: {exc}') from exc
        if not text.strip():
            return Manifest()
        try:
            data = tomlkit.parse(text).unwrap()
        except tomlkit.exceptions.TOMLKitError as exc:
            raise ManifestStoreError(str(self.path), str(exc)) from exc

        raw_deps = data.get('dependency', [])
        if not isinstance(raw_deps, list):
            raise ManifestStoreError(str(self.path), '"dependency" must be an array of tables')
        manifest = Manifest(dependencies=[self._parse_dependency(raw, pos) for pos, raw in enumerate(raw_deps)])
        logger.debug('manifest_loaded', path=str(self.path), dependencies=len(manifest))
        return manifest

    def save(self, manifest: Manifest) -> None:
        """Write *manifest* atomically (temp file + rename)."""
        text = dump_manifest(manifest)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f'.{self.path.name}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                fh.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info('manifest_written', path=str(self.path), dependencies=len(manifest))

    def _parse_dependency(self, raw: Any, pos: int) -> Dependency:  # noqa: ANN401
        if not isinstance(raw, dict):
            raise ManifestStoreError(str(self.path), f'dependency[{pos}] must be a table')
        coordinate = _require_str(raw, 'coordinate', f'dependency[{pos}]', self.path)
        raw_licenses = raw.get('license', [])
        if not isinstance(raw_licenses, list):
            raise ManifestStoreError(str(self.path), f'dependency[{pos}].license must be an array of tables')
        licenses = tuple(
            self._parse_license(item, f'dependency[{pos}].license[{i}]') for i, item in enumerate(raw_licenses)
        )
        index = raw.get('index', pos)
        if not isinstance(index, int) or isinstance(index, bool):
            raise ManifestStoreError(str(self.path), f'dependency[{pos}].index must be an integer')
        return Dependency(
            coordinate=coordinate,
            version=str(raw.get('version', '')),
            licenses=licenses,
            origin_of_license=OriginOfLicense.parse(str(raw.get('origin_of_license', ''))),
            index=index,
        )

    def _parse_license(self, raw: Any, where: str) -> License:  # noqa: ANN401
        if not isinstance(raw, dict):
            raise ManifestStoreError(str(self.path), f'{where} must be a table')
        return License(
            name=str(raw.get('name', '')),
            primary_link=_require_str(raw, 'primary_link', where, self.path),
            primary_link_type=PrimaryLinkType.parse(str(raw.get('primary_link_type', 'UNSPECIFIED'))),
            secondary_link=str(raw.get('secondary_link', '')),
            secondary_link_type=SecondaryLinkType.parse(str(raw.get('secondary_link_type', 'UNSPECIFIED'))),
            secondary_license_name=str(raw.get('secondary_license_name', '')),
        )


def _require_str(raw: dict[str, Any], key: str, where: str, path: Path) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise ManifestStoreError(str(path), f'{where}.{key} must be a non-empty string')
    return value


def dump_manifest(manifest: Manifest) -> str:
    """Serialize *manifest* to TOML text."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment(_HEADER))
    if not manifest.dependencies:
        return tomlkit.dumps(doc)

    deps = tomlkit.aot()
    for dep in manifest:
        table = tomlkit.table()
        table.add('index', dep.index)
        table.add('coordinate', dep.coordinate)
        table.add('version', dep.version)
        table.add('origin_of_license', dep.origin_of_license.value)
        if dep.licenses:
            licenses = tomlkit.aot()
            for lic in dep.licenses:
                lic_table = tomlkit.table()
                lic_table.add('name', lic.name)
                lic_table.add('primary_link', lic.primary_link)
                lic_table.add('primary_link_type', lic.primary_link_type.value)
                lic_table.add('secondary_link', lic.secondary_link)
                lic_table.add('secondary_link_type', lic.secondary_link_type.value)
                lic_table.add('secondary_license_name', lic.secondary_license_name)
                licenses.append(lic_table)
            table.add('license', licenses)
        deps.append(table)
    doc.add(tomlkit.nl())
    doc.add('dependency', deps)
    return tomlkit.dumps(doc)


__all__ = [
    'ManifestStore',
    'TomlManifestStore',
    'dump_manifest',
]
