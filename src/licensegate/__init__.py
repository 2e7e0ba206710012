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

"""Maven dependency license reconciliation and validation.

licensegate intersects the dependencies pinned in ``maven_install.json``
with the ones the build graph actually reaches, scrapes their licenses
from the published POM files, merges them into a hand-curated TOML
manifest, and refuses to pass until every license is fully described.

Usage::

    from licensegate.config import load_config
    from licensegate.pipeline import generate_manifest

    result = asyncio.run(generate_manifest(load_config(Path('.'))))
    result.report.raise_for_failure()
"""

__version__ = '0.1.0'

__all__ = ['__version__']
