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

"""Error taxonomy for licensegate.

Every failure licensegate can detect is fatal: there is no local or
recoverable category.  Each error carries a stable :class:`ErrorCode`,
a human-readable message, and an optional remediation hint that the
CLI prints underneath the message.

Usage::

    from licensegate.errors import ErrorCode, LicenseGateError

    raise LicenseGateError(
        ErrorCode.CONFIG,
        'Unknown key in licensegate.toml: "bogus"',
        hint='Remove the key or check its spelling.',
    )
"""

from __future__ import annotations

import enum

__all__ = [
    'BuildToolError',
    'ConfigError',
    'ErrorCode',
    'LicenseGateError',
    'MalformedCoordinate',
    'MalformedLockFile',
    'ManifestStoreError',
    'TruncatedLicenseBlock',
    'UnreachableManifest',
    'ValidationFailure',
]


class ErrorCode(enum.Enum):
    """Stable identifiers for each error category."""

    COORDINATE = 'LG-COORD'
    FETCH = 'LG-FETCH'
    POM = 'LG-POM'
    GATE = 'LG-GATE'
    LOCK_FILE = 'LG-LOCK'
    BUILD_TOOL = 'LG-BUILD'
    CONFIG = 'LG-CONFIG'
    STORE = 'LG-STORE'


class LicenseGateError(Exception):
    """Base class for all licensegate errors.

    Args:
        code: The error category.
        message: What went wrong.
        hint: How the operator can fix it.
    """

    def __init__(self, code: ErrorCode, message: str, *, hint: str = '') -> None:
        super().__init__(f'[{code.value}] {message}')
        self.code = code
        self.message = message
        self.hint = hint


class MalformedCoordinate(LicenseGateError):
    """A coordinate string has no ``:`` separator."""

    def __init__(self, coordinate: str) -> None:
        super().__init__(
            ErrorCode.COORDINATE,
            f'Malformed coordinate {coordinate!r}: expected group:artifact:version',
            hint='Check the "coord" entries of the lock file.',
        )
        self.coordinate = coordinate


class UnreachableManifest(LicenseGateError):
    """A POM document could not be fetched."""

    def __init__(self, url: str, dependency: str, reason: str = '') -> None:
        detail = f': {reason}' if reason else ''
        super().__init__(
            ErrorCode.FETCH,
            f'There was a problem while opening {url} for {dependency}{detail}',
            hint='Check network access and the artifact URL in the lock file, then rerun.',
        )
        self.url = url
        self.dependency = dependency
        self.reason = reason


class TruncatedLicenseBlock(LicenseGateError):
    """A ``<license>`` element ended before its name or URL was complete."""

    def __init__(self, dependency: str, missing: str) -> None:
        super().__init__(
            ErrorCode.POM,
            f'License block for {dependency} is truncated: {missing} never found',
            hint='Inspect the POM file; add the license to the manifest by hand if the POM is broken.',
        )
        self.dependency = dependency
        self.missing = missing


class ValidationFailure(LicenseGateError):
    """A validation gate reported violations.

    Attributes:
        gate: Name of the failing gate.
        violations: The offending licenses or dependencies.
    """

    def __init__(self, gate: str, message: str, violations: list[object], *, hint: str = '') -> None:
        super().__init__(ErrorCode.GATE, message, hint=hint)
        self.gate = gate
        self.violations = violations


class MalformedLockFile(LicenseGateError):
    """The lock file is missing, unreadable, or does not match its schema."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            ErrorCode.LOCK_FILE,
            f'Cannot read lock file {path}: {reason}',
            hint='Re-pin the dependencies to regenerate the lock file.',
        )
        self.path = path


class BuildToolError(LicenseGateError):
    """A build tool command exited with an unexpected code."""

    def __init__(self, command: list[str], exit_code: int, output: str = '') -> None:
        cmd = ' '.join(command)
        detail = f'\n{output}' if output else ''
        super().__init__(
            ErrorCode.BUILD_TOOL,
            f'Unexpected exit code {exit_code} for command: {cmd}{detail}',
            hint='Run the command by hand from the workspace root to see the full output.',
        )
        self.command = command
        self.exit_code = exit_code


class ConfigError(LicenseGateError):
    """Invalid ``licensegate.toml`` content."""

    def __init__(self, message: str, *, hint: str = '') -> None:
        super().__init__(ErrorCode.CONFIG, message, hint=hint)


class ManifestStoreError(LicenseGateError):
    """The persisted manifest cannot be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            ErrorCode.STORE,
            f'Cannot load manifest {path}: {reason}',
            hint='Fix the TOML syntax by hand or delete the file to start from an empty manifest.',
        )
        self.path = path
