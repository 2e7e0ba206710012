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

"""Tests for the TOML manifest store."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit
from licensegate._types import (
    Dependency,
    License,
    Manifest,
    OriginOfLicense,
    PrimaryLinkType,
    SecondaryLinkType,
)
from licensegate.errors import ErrorCode, ManifestStoreError
from licensegate.store import TomlManifestStore, dump_manifest

_MANIFEST = Manifest.of([
    Dependency(
        coordinate='androidx.foo:bar:1.0.0',
        version='1.0.0',
        licenses=(
            License(
                name='Apache 2.0',
                primary_link='https://apache.org/LICENSE-2.0',
                primary_link_type=PrimaryLinkType.VALID_SCRAPABLE,
            ),
            License(
                name='Custom',
                primary_link='https://custom.example/license',
                primary_link_type=PrimaryLinkType.LOCAL_COPY_REQUIRED,
                secondary_link='https://mirror.example/custom.txt',
                secondary_link_type=SecondaryLinkType.VALID,
                secondary_license_name='Custom License',
            ),
        ),
        origin_of_license=OriginOfLicense.ENTIRELY_FROM_SOURCE,
        index=0,
    ),
    Dependency(coordinate='com.example:none:2.0', version='2.0', index=1),
])


class TestTomlManifestStore:
    """Tests for TomlManifestStore."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        """A missing file loads as an empty manifest."""
        assert len(TomlManifestStore(tmp_path / 'absent.toml').load()) == 0

    def test_blank_file_is_empty(self, tmp_path: Path) -> None:
        """A whitespace-only file loads as an empty manifest."""
        path = tmp_path / 'm.toml'
        path.write_text('\n  \n', encoding='utf-8')
        assert len(TomlManifestStore(path).load()) == 0

    def test_save_then_load(self, tmp_path: Path) -> None:
        """A saved manifest loads back equal."""
        store = TomlManifestStore(tmp_path / 'third_party' / 'maven_dependencies.toml')
        store.save(_MANIFEST)
        assert store.load() == _MANIFEST

    def test_save_replaces_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        """Saving twice replaces the file without leftovers."""
        path = tmp_path / 'm.toml'
        store = TomlManifestStore(path)
        store.save(_MANIFEST)
        store.save(Manifest())
        assert store.load() == Manifest()
        assert [p.name for p in tmp_path.iterdir()] == ['m.toml']

    def test_unknown_enum_names(self, tmp_path: Path) -> None:
        """Unknown enum names load as UNRECOGNIZED or UNKNOWN."""
        path = tmp_path / 'm.toml'
        path.write_text(
            '[[dependency]]\n'
            'coordinate = "a:b:1"\n'
            'version = "1"\n'
            'origin_of_license = "SOMETHING_ELSE"\n'
            '[[dependency.license]]\n'
            'name = "X"\n'
            'primary_link = "https://x.example"\n'
            'primary_link_type = "VALID_SCRAPEABLE"\n'
            'secondary_link_type = "BOGUS"\n',
            encoding='utf-8',
        )
        dep = TomlManifestStore(path).load().dependencies[0]
        assert dep.origin_of_license is OriginOfLicense.UNKNOWN
        assert dep.licenses[0].primary_link_type is PrimaryLinkType.UNRECOGNIZED
        assert dep.licenses[0].secondary_link_type is SecondaryLinkType.UNRECOGNIZED

    def test_defaults_for_optional_fields(self, tmp_path: Path) -> None:
        """Omitted optional fields take their defaults."""
        path = tmp_path / 'm.toml'
        path.write_text(
            '[[dependency]]\ncoordinate = "a:b:1"\n[[dependency.license]]\nprimary_link = "https://x.example"\n',
            encoding='utf-8',
        )
        dep = TomlManifestStore(path).load().dependencies[0]
        assert dep.index == 0
        assert dep.licenses == (License(name='', primary_link='https://x.example'),)

    def test_non_utf8_bytes(self, tmp_path: Path) -> None:
        """A manifest saved in another encoding raises ManifestStoreError."""
        path = tmp_path / 'm.toml'
        path.write_bytes(b'[[dependency]]\ncoordinate = "a:b:\xff"\n')
        with pytest.raises(ManifestStoreError, match='not valid UTF-8') as excinfo:
            TomlManifestStore(path).load()
        assert excinfo.value.code is ErrorCode.STORE
        assert excinfo.value.hint

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Unparseable TOML raises ManifestStoreError."""
        path = tmp_path / 'm.toml'
        path.write_text('[[dependency]\ncoordinate = ', encoding='utf-8')
        with pytest.raises(ManifestStoreError) as excinfo:
            TomlManifestStore(path).load()
        assert excinfo.value.code is ErrorCode.STORE

    def test_missing_primary_link(self, tmp_path: Path) -> None:
        """A license without primary_link is rejected."""
        path = tmp_path / 'm.toml'
        path.write_text('[[dependency]]\ncoordinate = "a:b:1"\n[[dependency.license]]\nname = "X"\n', encoding='utf-8')
        with pytest.raises(ManifestStoreError, match='primary_link'):
            TomlManifestStore(path).load()

    def test_non_integer_index(self, tmp_path: Path) -> None:
        """A non-integer index is rejected."""
        path = tmp_path / 'm.toml'
        path.write_text('[[dependency]]\ncoordinate = "a:b:1"\nindex = "0"\n', encoding='utf-8')
        with pytest.raises(ManifestStoreError, match='index'):
            TomlManifestStore(path).load()


class TestDumpManifest:
    """Tests for dump_manifest()."""

    def test_empty_manifest_is_header_only(self) -> None:
        """An empty manifest renders only the header comment."""
        text = dump_manifest(Manifest())
        assert text.startswith('# Generated by licensegate.')
        assert tomlkit.parse(text).unwrap() == {}

    def test_layout(self) -> None:
        """Dependencies and licenses are arrays of tables."""
        data = tomlkit.parse(dump_manifest(_MANIFEST)).unwrap()
        first = data['dependency'][0]
        assert first['coordinate'] == 'androidx.foo:bar:1.0.0'
        assert first['origin_of_license'] == 'ENTIRELY_FROM_SOURCE'
        assert first['license'][1]['secondary_link_type'] == 'VALID'
        assert 'license' not in data['dependency'][1]
