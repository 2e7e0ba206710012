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

"""Completeness gates over a reconciled manifest.

Three gates run in a fixed order.  Each gate collects *all* of its
violations, but the first gate that reports anything stops the run:
later gates assume the earlier ones passed (e.g. Gate C is meaningless
while licenses are still unclassified).

┌──────┬──────────────────────────────┬─────────────────────────────────────┐
│ Gate │ Name                         │ Fails on                            │
├──────┼──────────────────────────────┼─────────────────────────────────────┤
│ A    │ broken_license_details       │ unclassified licenses, or licenses  │
│      │                              │ missing required secondary details  │
│ B    │ missing_or_invalid_links     │ dependencies with no license or an  │
│      │                              │ INVALID_LINK license                │
│ C    │ needs_intervention           │ dependencies with a                 │
│      │                              │ NEEDS_INTERVENTION license          │
└──────┴──────────────────────────────┴─────────────────────────────────────┘

Gates only read the manifest.  The pipeline persists the manifest
before running them so that a failing run leaves a file the operator
can edit and rerun against.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from licensegate._types import Dependency, License, Manifest, PrimaryLinkType
from licensegate.classify import is_broken
from licensegate.errors import ValidationFailure
from licensegate.logging import get_logger

logger = get_logger(__name__)


class Gate(enum.Enum):
    """The validation gates, in execution order."""

    BROKEN_LICENSE_DETAILS = 'broken_license_details'
    MISSING_OR_INVALID_LINKS = 'missing_or_invalid_links'
    NEEDS_INTERVENTION = 'needs_intervention'


_MESSAGES: dict[Gate, tuple[str, str]] = {
    Gate.BROKEN_LICENSE_DETAILS: (
        'License details are not complete.',
        'Provide all the details of the listed licenses manually in the manifest, then rerun.',
    ),
    Gate.MISSING_OR_INVALID_LINKS: (
        'No license links exist (or the extracted links are invalid) for some dependencies.',
        'Provide the license links for the listed dependencies manually in the manifest, then rerun.',
    ),
    Gate.NEEDS_INTERVENTION: (
        'Human intervention needed.',
        'Find the license links for the listed dependencies and coordinate with the maintainers to fix them.',
    ),
}


@dataclass(frozen=True)
class GateResult:
    """Outcome of a single gate.

    Attributes:
        gate: Which gate ran.
        violations: Offending licenses (Gate A) or dependencies (B, C),
            deduplicated, in manifest order.
    """

    gate: Gate
    violations: tuple[License, ...] | tuple[Dependency, ...] = ()

    @property
    def passed(self) -> bool:
        """``True`` if the gate found nothing."""
        return not self.violations

    @property
    def message(self) -> str:
        """Operator-facing summary of the failure."""
        return _MESSAGES[self.gate][0]

    @property
    def hint(self) -> str:
        """Operator-facing remediation."""
        return _MESSAGES[self.gate][1]


@dataclass
class GateReport:
    """Results of :func:`run_gates`, in execution order.

    Gates after the first failure are absent from :attr:`results`.
    """

    results: list[GateResult] = field(default_factory=list)

    @property
    def failed(self) -> GateResult | None:
        """The gate that stopped the run, if any."""
        for result in self.results:
            if not result.passed:
                return result
        return None

    @property
    def failed_gate(self) -> Gate | None:
        """The :class:`Gate` that stopped the run, if any."""
        failed = self.failed
        return failed.gate if failed is not None else None

    @property
    def ok(self) -> bool:
        """``True`` if every gate ran and passed."""
        return self.failed is None and len(self.results) == len(Gate)

    def raise_for_failure(self) -> None:
        """Raise :class:`ValidationFailure` for the failing gate, if any."""
        failed = self.failed
        if failed is None:
            return
        raise ValidationFailure(
            failed.gate.value,
            failed.message,
            list(failed.violations),
            hint=failed.hint,
        )


def broken_licenses(manifest: Manifest) -> list[License]:
    """Gate A: licenses that still need manual completion."""
    return list(dict.fromkeys(lic for lic in manifest.all_licenses() if is_broken(lic)))


def dependencies_without_valid_links(manifest: Manifest) -> list[Dependency]:
    """Gate B: dependencies with no license or an invalid license link."""
    return [
        dep
        for dep in manifest
        if not dep.licenses or any(lic.primary_link_type is PrimaryLinkType.INVALID_LINK for lic in dep.licenses)
    ]


def dependencies_needing_intervention(manifest: Manifest) -> list[Dependency]:
    """Gate C: dependencies with a license that needs a human."""
    return [
        dep for dep in manifest if any(lic.primary_link_type is PrimaryLinkType.NEEDS_INTERVENTION for lic in dep.licenses)
    ]


_CHECKS: tuple[tuple[Gate, Callable[[Manifest], Sequence[License] | Sequence[Dependency]]], ...] = (
    (Gate.BROKEN_LICENSE_DETAILS, broken_licenses),
    (Gate.MISSING_OR_INVALID_LINKS, dependencies_without_valid_links),
    (Gate.NEEDS_INTERVENTION, dependencies_needing_intervention),
)


def run_gates(manifest: Manifest) -> GateReport:
    """Run the gates in order, stopping after the first failing one."""
    report = GateReport()
    for gate, check in _CHECKS:
        result = GateResult(gate=gate, violations=tuple(check(manifest)))  # type: ignore[arg-type]
        report.results.append(result)
        if not result.passed:
            logger.error('gate_failed', gate=gate.value, violations=len(result.violations))
            break
        logger.info('gate_passed', gate=gate.value)
    return report


__all__ = [
    'Gate',
    'GateReport',
    'GateResult',
    'broken_licenses',
    'dependencies_needing_intervention',
    'dependencies_without_valid_links',
    'run_gates',
]
