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

"""Run orchestration: from the build graph to a validated manifest.

Order of operations::

    ┌────────────┐   ┌────────────┐   ┌──────────────┐   ┌───────────┐
    │ re-pin     │──→│ query      │──→│ lock file    │──→│ intersect │
    │ (optional) │   │ build graph│   │ parse        │   │           │
    └────────────┘   └────────────┘   └──────────────┘   └─────┬─────┘
                                                               ↓
    ┌────────────┐   ┌────────────┐   ┌──────────────┐   ┌───────────┐
    │ gates      │←──│ persist    │←──│ reconcile vs │←──│ fetch POM │
    │ A → B → C  │   │ manifest   │   │ prior        │   │ + extract │
    └────────────┘   └────────────┘   └──────────────┘   └───────────┘

The manifest is saved before the gates run, so a failing run still
leaves a file the maintainer can edit and rerun against.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from licensegate._types import Manifest
from licensegate.bazel import BazelClient, BuildTool
from licensegate.classify import classify_license, requires_manual_intervention
from licensegate.config import LicenseGateConfig
from licensegate.extract import fetch_license_candidates
from licensegate.gates import GateReport, run_gates
from licensegate.intersect import intersect_dependencies, parse_query_output
from licensegate.lockfile import parse_maven_install
from licensegate.logging import get_logger
from licensegate.net import DocumentFetcher, HttpDocumentFetcher, http_client
from licensegate.reconcile import reconcile
from licensegate.store import ManifestStore, TomlManifestStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Outcome of one pipeline run.

    Attributes:
        manifest: The reconciled manifest, as persisted.
        report: Gate results for *manifest*.
    """

    manifest: Manifest
    report: GateReport


async def run_pipeline(
    config: LicenseGateConfig,
    build_tool: BuildTool,
    fetcher: DocumentFetcher,
    store: ManifestStore,
) -> RunResult:
    """Run every step against the given collaborators.

    Raises:
        LicenseGateError: On any fatal error before the gates run.
            Gate failures are reported in :attr:`RunResult.report`,
            not raised.
    """
    if config.repin:
        logger.info('repinning_dependencies', target=config.repin_target)
        build_tool.run_repin()

    reachable = parse_query_output(build_tool.run_query(config.query), config.target_prefix)
    logger.info('build_graph_queried', targets=len(reachable))

    locked = parse_maven_install(config.lock_path)
    selected = intersect_dependencies(locked, reachable)
    logger.info('dependencies_selected', locked=len(locked), selected=len(selected))

    extracted = await fetch_license_candidates(selected, fetcher, concurrency=config.fetch_concurrency)
    candidates = {dep.coordinate: [classify_license(pair) for pair in pairs] for dep, pairs in extracted.items()}

    manifest = reconcile(candidates, store.load())
    store.save(manifest)
    logger.info(
        'manifest_summary',
        dependencies=len(manifest),
        licenses=len(manifest.all_licenses()),
        manual_licenses=sum(1 for lic in manifest.all_licenses() if requires_manual_intervention(lic)),
    )

    return RunResult(manifest=manifest, report=run_gates(manifest))


async def generate_manifest(
    config: LicenseGateConfig,
    *,
    build_tool: BuildTool | None = None,
    store: ManifestStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunResult:
    """Run the pipeline with the production adapters.

    Bazel, HTTP and the TOML store are used unless a replacement is
    passed in.

    Args:
        config: Resolved configuration.
        build_tool: Override for the Bazel client.
        store: Override for the TOML manifest store.
        transport: Optional httpx transport for the document fetcher.
    """
    if build_tool is None:
        build_tool = BazelClient(
            config.root,
            bazel=config.bazel,
            repin_target=config.repin_target,
            timeout=config.command_timeout,
        )
    if store is None:
        store = TomlManifestStore(config.manifest_path)

    async with http_client(
        pool_size=max(1, config.fetch_concurrency),
        timeout=config.fetch_timeout,
        transport=transport,
    ) as client:
        return await run_pipeline(config, build_tool, HttpDocumentFetcher(client), store)


__all__ = [
    'RunResult',
    'generate_manifest',
    'run_pipeline',
]
