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

"""End-to-end tests for the run pipeline with in-memory collaborators."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from pathlib import Path
from typing import TypeVar

import httpx
import pytest
from licensegate._types import (
    Dependency,
    License,
    Manifest,
    OriginOfLicense,
    PrimaryLinkType,
)
from licensegate.config import LicenseGateConfig
from licensegate.errors import MalformedLockFile, UnreachableManifest
from licensegate.gates import Gate
from licensegate.pipeline import generate_manifest, run_pipeline
from licensegate.store import TomlManifestStore

_T = TypeVar('_T')

_COORD = 'androidx.foo:bar:1.0.0'
_ARTIFACT_URL = 'https://maven.google.com/androidx/foo/bar/1.0.0/bar-1.0.0.aar'
_POM_URL = 'https://maven.google.com/androidx/foo/bar/1.0.0/bar-1.0.0.pom'
_APACHE = 'https://apache.org/LICENSE-2.0'
_POM = f"""<project>
  <licenses>
    <license>
      <name>Apache 2.0</name>
      <url>{_APACHE}</url>
    </license>
  </licenses>
</project>
"""


def _run(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


class _FakeBuildTool:
    """In-memory BuildTool."""

    def __init__(self, targets: list[str]) -> None:
        self.targets = targets
        self.calls: list[str] = []

    def run_query(self, expression: str) -> list[str]:
        self.calls.append('query')
        return self.targets

    def run_repin(self) -> list[str]:
        self.calls.append('repin')
        return []


class _FakeFetcher:
    """In-memory DocumentFetcher."""

    def __init__(self, documents: dict[str, str]) -> None:
        self.documents = documents

    async def fetch(self, url: str) -> str:
        if url not in self.documents:
            raise UnreachableManifest(url, '', reason='404 Not Found')
        return self.documents[url]


class _MemoryStore:
    """In-memory ManifestStore that records saves."""

    def __init__(self, prior: Manifest | None = None) -> None:
        self.prior = prior or Manifest()
        self.saved: list[Manifest] = []

    def load(self) -> Manifest:
        return self.prior

    def save(self, manifest: Manifest) -> None:
        self.saved.append(manifest)


def _workspace(tmp_path: Path, entries: list[dict[str, str]]) -> LicenseGateConfig:
    lock = tmp_path / 'third_party' / 'maven_install.json'
    lock.parent.mkdir(parents=True)
    lock.write_text(json.dumps({'dependency_tree': {'dependencies': entries}}), encoding='utf-8')
    return LicenseGateConfig(root=tmp_path)


def _curated(kind: PrimaryLinkType) -> Manifest:
    lic = License(name='Apache 2.0', primary_link=_APACHE, primary_link_type=kind)
    return Manifest.of([Dependency(_COORD, '1.0.0', (lic,), OriginOfLicense.ENTIRELY_FROM_SOURCE)])


class TestRunPipeline:
    """Tests for run_pipeline()."""

    def test_fresh_run_fails_gate_a(self, tmp_path: Path) -> None:
        """A new dependency gets an UNSPECIFIED license and fails Gate A."""
        config = _workspace(tmp_path, [{'coord': _COORD, 'url': _ARTIFACT_URL}])
        store = _MemoryStore()
        result = _run(run_pipeline(config, _FakeBuildTool(['@maven//:androidx_foo_bar']), _FakeFetcher({_POM_URL: _POM}), store))

        assert result.manifest.dependencies == [
            Dependency(
                _COORD,
                '1.0.0',
                (License(name='Apache 2.0', primary_link=_APACHE),),
                OriginOfLicense.ENTIRELY_FROM_SOURCE,
                0,
            ),
        ]
        assert not result.report.ok
        assert result.report.failed_gate is Gate.BROKEN_LICENSE_DETAILS
        assert store.saved == [result.manifest]

    def test_curated_run_passes(self, tmp_path: Path) -> None:
        """A prior VALID_SCRAPABLE classification makes every gate pass."""
        config = _workspace(tmp_path, [{'coord': _COORD, 'url': _ARTIFACT_URL}])
        store = _MemoryStore(_curated(PrimaryLinkType.VALID_SCRAPABLE))
        result = _run(run_pipeline(config, _FakeBuildTool(['@maven//:androidx_foo_bar']), _FakeFetcher({_POM_URL: _POM}), store))

        assert result.report.ok
        assert result.manifest.dependencies[0].licenses[0].primary_link_type is PrimaryLinkType.VALID_SCRAPABLE

    def test_repin_before_query(self, tmp_path: Path) -> None:
        """Re-pinning runs first unless disabled."""
        config = _workspace(tmp_path, [])
        tool = _FakeBuildTool([])
        _run(run_pipeline(config, tool, _FakeFetcher({}), _MemoryStore()))
        assert tool.calls == ['repin', 'query']

        tool = _FakeBuildTool([])
        _run(run_pipeline(config.with_overrides(repin=False), tool, _FakeFetcher({}), _MemoryStore()))
        assert tool.calls == ['query']

    def test_unreachable_dependencies_skipped(self, tmp_path: Path) -> None:
        """Only dependencies in the build graph are fetched."""
        config = _workspace(
            tmp_path,
            [
                {'coord': _COORD, 'url': _ARTIFACT_URL},
                {'coord': 'com.unused:thing:2.0', 'url': 'https://repo.example/thing-2.0.jar'},
            ],
        )
        result = _run(
            run_pipeline(config, _FakeBuildTool(['@maven//:androidx_foo_bar']), _FakeFetcher({_POM_URL: _POM}), _MemoryStore())
        )
        assert [d.coordinate for d in result.manifest] == [_COORD]

    def test_gate_failure_still_persists(self, tmp_path: Path) -> None:
        """The manifest is saved even when a gate fails."""
        config = _workspace(tmp_path, [{'coord': _COORD, 'url': _ARTIFACT_URL}])
        store = _MemoryStore(_curated(PrimaryLinkType.INVALID_LINK))
        result = _run(run_pipeline(config, _FakeBuildTool(['@maven//:androidx_foo_bar']), _FakeFetcher({_POM_URL: _POM}), store))
        assert result.report.failed_gate is Gate.MISSING_OR_INVALID_LINKS
        assert len(store.saved) == 1

    def test_fetch_failure_aborts_without_saving(self, tmp_path: Path) -> None:
        """A fetch failure is fatal and nothing is persisted."""
        config = _workspace(tmp_path, [{'coord': _COORD, 'url': _ARTIFACT_URL}])
        store = _MemoryStore()
        with pytest.raises(UnreachableManifest):
            _run(run_pipeline(config, _FakeBuildTool(['@maven//:androidx_foo_bar']), _FakeFetcher({}), store))
        assert store.saved == []

    def test_missing_lock_file(self, tmp_path: Path) -> None:
        """A missing lock file aborts the run."""
        with pytest.raises(MalformedLockFile):
            _run(run_pipeline(LicenseGateConfig(root=tmp_path), _FakeBuildTool([]), _FakeFetcher({}), _MemoryStore()))


class TestGenerateManifest:
    """Tests for generate_manifest() with the production fetcher and store."""

    def test_writes_toml_manifest(self, tmp_path: Path) -> None:
        """The HTTP fetcher and TOML store are wired together."""
        config = _workspace(tmp_path, [{'coord': _COORD, 'url': _ARTIFACT_URL}])

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == _POM_URL:
                return httpx.Response(200, text=_POM)
            return httpx.Response(404)

        result = _run(
            generate_manifest(
                config,
                build_tool=_FakeBuildTool(['@maven//:androidx_foo_bar']),
                transport=httpx.MockTransport(handler),
            )
        )
        assert not result.report.ok
        assert TomlManifestStore(config.manifest_path).load() == result.manifest

    def test_second_run_keeps_curation(self, tmp_path: Path) -> None:
        """A hand-edited classification survives the next run."""
        config = _workspace(tmp_path, [{'coord': _COORD, 'url': _ARTIFACT_URL}])
        store = TomlManifestStore(config.manifest_path)
        store.save(_curated(PrimaryLinkType.VALID_SCRAPABLE))
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text=_POM))

        result = _run(
            generate_manifest(config, build_tool=_FakeBuildTool(['@maven//:androidx_foo_bar']), transport=transport)
        )
        assert result.report.ok
        assert store.load() == result.manifest
