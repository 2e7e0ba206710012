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

"""Parse ``maven_install.json`` lock files.

``rules_jvm_external`` pins every resolved artifact into a JSON lock
file.  Only the coordinate and the artifact URL of each entry matter
here::

    {
      "dependency_tree": {
        "dependencies": [
          {
            "coord": "androidx.databinding:databinding-adapters:3.4.2",
            "url": "https://maven.google.com/.../databinding-adapters-3.4.2.aar"
          }
        ]
      }
    }

The document is validated with ``jsonschema`` before use; any mismatch
is fatal because a half-read lock file would silently drop
dependencies from the manifest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Final

import jsonschema

from licensegate._types import RawDependency
from licensegate.errors import MalformedLockFile
from licensegate.logging import get_logger

logger = get_logger(__name__)

MAVEN_INSTALL_SCHEMA: Final[dict[str, Any]] = {
    '$schema': 'https://json-schema.org/draft/2020-12/schema',
    'type': 'object',
    'required': ['dependency_tree'],
    'properties': {
        'dependency_tree': {
            'type': 'object',
            'required': ['dependencies'],
            'properties': {
                'dependencies': {
                    'type': 'array',
                    'items': {
                        'type': 'object',
                        'required': ['coord'],
                        'properties': {
                            'coord': {'type': 'string', 'minLength': 1},
                            'url': {'type': ['string', 'null']},
                        },
                    },
                },
            },
        },
    },
}


def schema_errors(data: Any) -> list[str]:  # noqa: ANN401
    """Validate *data* against :data:`MAVEN_INSTALL_SCHEMA`.

    Returns:
        Human-readable violations, sorted by location; empty if valid.
    """
    validator = jsonschema.Draft202012Validator(MAVEN_INSTALL_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    return [f'{".".join(str(p) for p in e.absolute_path) or "(root)"}: {e.message}' for e in errors]


def parse_maven_install(lock_path: Path) -> list[RawDependency]:
    """Read the lock file at *lock_path*.

    Returns:
        One :class:`RawDependency` per entry, sorted by coordinate.
        Entries without a URL get an empty ``url``.

    Raises:
        MalformedLockFile: If the file is missing, is not JSON, or does
            not match the expected shape.
    """
    try:
        data = json.loads(lock_path.read_text(encoding='utf-8'))
    except OSError as exc:
        raise MalformedLockFile(str(lock_path), exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise MalformedLockFile(str(lock_path), f'not valid UTF-8: {exc}') from exc
    except json.JSONDecodeError as exc:
        raise MalformedLockFile(str(lock_path), f'invalid JSON: {exc}') from exc

    problems = schema_errors(data)
    if problems:
        raise MalformedLockFile(str(lock_path), '; '.join(problems))

    entries: list[dict[str, Any]] = data['dependency_tree']['dependencies']
    deps = sorted(
        (RawDependency(coordinate=entry['coord'], url=entry.get('url') or '') for entry in entries),
        key=lambda dep: dep.coordinate,
    )
    logger.debug('parsed_lock_file', path=str(lock_path), dependencies=len(deps))
    return deps


__all__ = [
    'MAVEN_INSTALL_SCHEMA',
    'parse_maven_install',
    'schema_errors',
]
