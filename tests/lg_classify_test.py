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

"""Tests for license classification predicates."""

from __future__ import annotations

from licensegate._types import ExtractedLicense, License, PrimaryLinkType, SecondaryLinkType
from licensegate.classify import (
    classify_license,
    is_broken,
    missing_details,
    needs_secondary_link,
    requires_manual_intervention,
)

_LINK = 'https://apache.org/LICENSE-2.0'


def _lic(kind: PrimaryLinkType, **kwargs: object) -> License:
    return License(name='Apache 2.0', primary_link=_LINK, primary_link_type=kind, **kwargs)  # type: ignore[arg-type]


def _complete_secondary() -> dict[str, object]:
    return {
        'secondary_link': 'https://mirror.example/LICENSE',
        'secondary_link_type': SecondaryLinkType.VALID,
        'secondary_license_name': 'Apache 2.0 (mirror)',
    }


class TestClassifyLicense:
    """Tests for classify_license()."""

    def test_starts_unspecified(self) -> None:
        """Extracted licenses are never auto-approved."""
        lic = classify_license(ExtractedLicense(name='Apache 2.0', url=_LINK))
        assert lic == License(name='Apache 2.0', primary_link=_LINK)
        assert lic.primary_link_type is PrimaryLinkType.UNSPECIFIED
        assert lic.secondary_link == ''


class TestIsBroken:
    """Tests for is_broken() and missing_details()."""

    def test_unspecified_is_broken(self) -> None:
        """An unclassified license is broken."""
        lic = _lic(PrimaryLinkType.UNSPECIFIED)
        assert is_broken(lic)
        assert missing_details(lic) == ['primary_link_type is UNSPECIFIED']

    def test_unrecognized_is_broken(self) -> None:
        """An unrecognized link type is broken."""
        assert is_broken(_lic(PrimaryLinkType.UNRECOGNIZED))

    def test_valid_scrapable_is_complete(self) -> None:
        """A scrapable license needs nothing else."""
        assert not is_broken(_lic(PrimaryLinkType.VALID_SCRAPABLE))

    def test_invalid_link_is_not_broken(self) -> None:
        """INVALID_LINK is reported by the link gate, not the details gate."""
        assert not is_broken(_lic(PrimaryLinkType.INVALID_LINK))

    def test_local_copy_without_secondary(self) -> None:
        """LOCAL_COPY_REQUIRED lists every missing secondary field."""
        lic = _lic(PrimaryLinkType.LOCAL_COPY_REQUIRED)
        assert missing_details(lic) == [
            'secondary_link is empty',
            'secondary_link_type is UNSPECIFIED',
            'secondary_license_name is empty',
        ]

    def test_local_copy_complete(self) -> None:
        """LOCAL_COPY_REQUIRED with all secondary fields is complete."""
        assert not is_broken(_lic(PrimaryLinkType.LOCAL_COPY_REQUIRED, **_complete_secondary()))

    def test_needs_intervention_unrecognized_secondary(self) -> None:
        """An unrecognized secondary link type is not resolved."""
        fields = {**_complete_secondary(), 'secondary_link_type': SecondaryLinkType.UNRECOGNIZED}
        lic = _lic(PrimaryLinkType.NEEDS_INTERVENTION, **fields)
        assert missing_details(lic) == ['secondary_link_type is UNRECOGNIZED']


class TestPredicates:
    """Tests for needs_secondary_link() and requires_manual_intervention()."""

    def test_needs_secondary_link(self) -> None:
        """Only LOCAL_COPY_REQUIRED and NEEDS_INTERVENTION need one."""
        needing = {t for t in PrimaryLinkType if needs_secondary_link(_lic(t))}
        assert needing == {PrimaryLinkType.LOCAL_COPY_REQUIRED, PrimaryLinkType.NEEDS_INTERVENTION}

    def test_requires_manual_intervention(self) -> None:
        """NEEDS_INTERVENTION and INVALID_LINK count as manual."""
        manual = {t for t in PrimaryLinkType if requires_manual_intervention(_lic(t))}
        assert manual == {PrimaryLinkType.NEEDS_INTERVENTION, PrimaryLinkType.INVALID_LINK}
