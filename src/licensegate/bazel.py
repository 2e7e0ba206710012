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

"""Build tool capability: build-graph queries and dependency re-pinning.

The pipeline talks to the build tool only through the :class:`BuildTool`
protocol, so tests substitute an in-memory fake and never spawn Bazel.

Exit codes accepted::

    ┌──────────────┬────────────┬───────────────────────────────────────┐
    │ Command      │ Accepted   │ Meaning                               │
    ├──────────────┼────────────┼───────────────────────────────────────┤
    │ bazel query  │ 0, 3       │ 3 = some targets in the expression    │
    │              │            │ do not exist (partial success)        │
    │ bazel run    │ 0          │ re-pin must fully succeed             │
    │ (REPIN=1)    │            │                                       │
    └──────────────┴────────────┴───────────────────────────────────────┘
"""

from __future__ import annotations

import os
import subprocess  # noqa: S404 - intentional use for bazel commands
from collections.abc import Collection
from pathlib import Path
from typing import Final, Protocol

from licensegate.errors import BuildToolError
from licensegate.logging import get_logger

logger = get_logger(__name__)

#: Exit codes accepted for ``bazel query``.
QUERY_EXIT_CODES: Final[frozenset[int]] = frozenset({0, 3})

#: Default timeout for a single build tool command, in seconds.
DEFAULT_COMMAND_TIMEOUT: Final[float] = 600.0

#: Default target that re-pins ``maven_install.json``.
DEFAULT_REPIN_TARGET: Final[str] = '@unpinned_maven//:pin'


class BuildTool(Protocol):
    """Narrow capability over the build tool."""

    def run_query(self, expression: str) -> list[str]:
        """Return the target names reachable for *expression*."""
        ...

    def run_repin(self) -> list[str]:
        """Re-pin third-party dependencies; return the command output."""
        ...


class BazelClient:
    """:class:`BuildTool` that shells out to Bazel.

    Args:
        root: Workspace root; every command runs from here.
        bazel: Bazel executable name or path.
        repin_target: Target run (with ``REPIN=1``) to re-pin.
        timeout: Per-command timeout in seconds.
    """

    def __init__(
        self,
        root: Path,
        *,
        bazel: str = 'bazel',
        repin_target: str = DEFAULT_REPIN_TARGET,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
    ) -> None:
        self.root = root
        self.bazel = bazel
        self.repin_target = repin_target
        self.timeout = timeout

    def run_query(self, expression: str) -> list[str]:
        """Run ``bazel query`` and return its non-empty output lines."""
        return self._execute(['query', expression], allowed=QUERY_EXIT_CODES)

    def run_repin(self) -> list[str]:
        """Run the re-pin target with ``REPIN=1``."""
        return self._execute(['run', self.repin_target], allowed=frozenset({0}), env={'REPIN': '1'})

    def _execute(
        self,
        args: list[str],
        *,
        allowed: Collection[int],
        env: dict[str, str] | None = None,
    ) -> list[str]:
        command = [self.bazel, *args]
        if not self.root.is_dir():
            raise BuildToolError(command, -1, f'working directory {self.root} is not a directory')

        logger.info('running_command', command=' '.join(command), cwd=str(self.root))
        try:
            proc = subprocess.run(  # noqa: S603 - intentional subprocess call
                command,
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env={**os.environ, **env} if env else None,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise BuildToolError(command, -1, f'timed out after {self.timeout:g} seconds') from exc
        except FileNotFoundError as exc:
            raise BuildToolError(command, 127, f'{self.bazel} is not installed or not on PATH') from exc

        if proc.returncode not in allowed:
            raise BuildToolError(command, proc.returncode, (proc.stderr or '').strip())
        if proc.returncode != 0:
            logger.warning('partial_command_failure', command=' '.join(command), exit_code=proc.returncode)
        return [line for line in (proc.stdout or '').splitlines() if line.strip()]


__all__ = [
    'DEFAULT_COMMAND_TIMEOUT',
    'DEFAULT_REPIN_TARGET',
    'QUERY_EXIT_CODES',
    'BazelClient',
    'BuildTool',
]
