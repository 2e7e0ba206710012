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

"""Configuration loading for ``licensegate.toml``.

The file is optional and lives in the workspace root.  Every key has a
default, and paths are resolved relative to the workspace root::

    lock_file = "third_party/maven_install.json"
    manifest = "third_party/maven_dependencies.toml"
    query = "deps(deps(//:app) intersect //third_party/...) intersect @maven//..."
    repin = false
    fetch_concurrency = 4

Unknown keys and wrongly typed values are rejected with a
:class:`~licensegate.errors.ConfigError` rather than ignored.
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from licensegate.errors import ConfigError
from licensegate.logging import get_logger

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = get_logger(__name__)

CONFIG_FILENAME: Final[str] = 'licensegate.toml'

DEFAULT_QUERY: Final[str] = 'deps(deps(//:app) intersect //third_party/...) intersect @maven//...'


@dataclass(frozen=True)
class LicenseGateConfig:
    """Resolved settings for one run.

    Attributes:
        root: Workspace root.
        lock_file: Lock file path, relative to *root*.
        manifest: Manifest path, relative to *root*.
        query: Build-graph query expression.
        target_prefix: Prefix stripped from query output lines.
        repin: Whether to re-pin dependencies before reading the lock file.
        repin_target: Bazel target run with ``REPIN=1``.
        bazel: Bazel executable.
        command_timeout: Timeout for build tool commands, in seconds.
        fetch_timeout: Timeout for each POM fetch, in seconds.
        fetch_concurrency: Maximum number of concurrent POM fetches.
    """

    root: Path = Path('.')
    lock_file: str = 'third_party/maven_install.json'
    manifest: str = 'third_party/maven_dependencies.toml'
    query: str = DEFAULT_QUERY
    target_prefix: str = '@maven//:'
    repin: bool = True
    repin_target: str = '@unpinned_maven//:pin'
    bazel: str = 'bazel'
    command_timeout: float = 600.0
    fetch_timeout: float = 30.0
    fetch_concurrency: int = 1

    @property
    def lock_path(self) -> Path:
        """Absolute-or-root-relative path of the lock file."""
        return self.root / self.lock_file

    @property
    def manifest_path(self) -> Path:
        """Absolute-or-root-relative path of the manifest."""
        return self.root / self.manifest

    def with_overrides(self, **overrides: Any) -> LicenseGateConfig:  # noqa: ANN401
        """Return a copy with every non-``None`` override applied."""
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})


_STR_KEYS: Final[frozenset[str]] = frozenset({
    'lock_file',
    'manifest',
    'query',
    'target_prefix',
    'repin_target',
    'bazel',
})
_BOOL_KEYS: Final[frozenset[str]] = frozenset({'repin'})
_POSITIVE_NUMBER_KEYS: Final[frozenset[str]] = frozenset({'command_timeout', 'fetch_timeout'})
_POSITIVE_INT_KEYS: Final[frozenset[str]] = frozenset({'fetch_concurrency'})
_VALID_KEYS: Final[frozenset[str]] = _STR_KEYS | _BOOL_KEYS | _POSITIVE_NUMBER_KEYS | _POSITIVE_INT_KEYS


def _parse_config(raw: dict[str, Any], root: Path) -> LicenseGateConfig:
    """Validate a parsed TOML table and build a config."""
    unknown = sorted(set(raw) - _VALID_KEYS)
    if unknown:
        raise ConfigError(
            f'Unknown key(s) in {CONFIG_FILENAME}: {", ".join(unknown)}',
            hint=f'Valid keys: {", ".join(sorted(_VALID_KEYS))}',
        )

    values: dict[str, Any] = {}
    for key, value in raw.items():
        if key in _STR_KEYS:
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f'{key} must be a non-empty string')
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigError(f'{key} must be a boolean')
        elif key in _POSITIVE_NUMBER_KEYS:
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise ConfigError(f'{key} must be a number')
            if value <= 0:
                raise ConfigError(f'{key} must be greater than 0')
            value = float(value)
        elif key in _POSITIVE_INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f'{key} must be a positive integer')
        values[key] = value
    return LicenseGateConfig(root=root, **values)


def load_config(root: Path, config_path: Path | None = None) -> LicenseGateConfig:
    """Load settings for the workspace at *root*.

    Args:
        root: Workspace root.
        config_path: Explicit config file.  When ``None``,
            ``<root>/licensegate.toml`` is used if it exists.

    Raises:
        ConfigError: If an explicit file is missing, the TOML is
            invalid, or a key is unknown or mistyped.
    """
    path = config_path if config_path is not None else root / CONFIG_FILENAME
    if not path.is_file():
        if config_path is not None:
            raise ConfigError(f'Config file not found: {path}')
        logger.debug('config_not_found', path=str(path))
        return LicenseGateConfig(root=root)

    try:
        raw = tomllib.loads(path.read_text(encoding='utf-8'))
    except OSError as exc:
        raise ConfigError(f'Cannot read {path}: {exc.strerror or exc}') from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f'{path} is not valid UTF-8: {exc}', hint='Re-save the file with UTF-8 encoding.') from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'Invalid TOML in {path}: {exc}') from exc

    config = _parse_config(raw, root)
    logger.debug('config_loaded', path=str(path))
    return config


__all__ = [
    'CONFIG_FILENAME',
    'DEFAULT_QUERY',
    'LicenseGateConfig',
    'load_config',
]
