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

"""Structured logging for licensegate.

Configures `structlog <https://www.structlog.org/>`_ with two output modes:

- **Console** (default): human-readable output, colored on a TTY.
- **JSON** (``--json-log``): one JSON object per line, for CI log
  collectors.

Both modes write to stderr so stdout stays reserved for the gate
report.

Usage::

    from licensegate.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger(__name__)
    log.info('pom_fetched', dependency='androidx.foo:bar:1.0.0')
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
    redact_secrets: bool = True,
) -> None:
    """Configure structlog for licensegate.

    Should be called once at startup, before any logging calls.

    Args:
        verbose: Enable debug-level output.
        quiet: Suppress info-level output (only warnings and errors).
        json_log: Use JSON output instead of console output.
        redact_secrets: Scrub sensitive env var values from log output.
            Can also be disabled via ``LICENSEGATE_REDACT_SECRETS=0``.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )
    # httpx logs every request at INFO; those lines only belong in --verbose.
    logging.getLogger('httpx').setLevel(logging.NOTSET if verbose else logging.WARNING)

    global _secret_values  # noqa: PLW0603
    enabled = redact_secrets and os.environ.get('LICENSEGATE_REDACT_SECRETS', '1') != '0'
    _secret_values = _build_secret_values() if enabled else frozenset()

    shared_processors: list[structlog.types.Processor] = [  # type: ignore[assignment]
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_sensitive_values,
    ]

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'licensegate') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, used for filtering and identification.
    """
    return structlog.get_logger(name)


# Env var names whose runtime values must never appear in logs.  Maven
# repository credentials end up in artifact URLs on some setups.
_SENSITIVE_ENV_VARS: tuple[str, ...] = (
    'MAVEN_USERNAME',
    'MAVEN_PASSWORD',
    'MAVEN_REPO_TOKEN',
    'ARTIFACTORY_API_KEY',
    'GITHUB_TOKEN',
    'GH_TOKEN',
)

_REDACTED = '[REDACTED]'

# Populated by configure_logging(); used by the processor.
_secret_values: frozenset[str] = frozenset()


def _build_secret_values() -> frozenset[str]:
    """Collect current non-empty values of sensitive env vars."""
    return frozenset(v for v in (os.environ.get(name, '') for name in _SENSITIVE_ENV_VARS) if v)


def _scrub(value: object) -> object:
    """Replace any secret substring in a string value with ``[REDACTED]``.

    Lists and tuples are scrubbed element-wise.
    """
    if isinstance(value, list | tuple):
        return type(value)(_scrub(v) for v in value)
    if not isinstance(value, str) or not _secret_values:
        return value
    result = value
    for secret in _secret_values:
        if len(secret) >= 8 and secret in result:
            result = result.replace(secret, _REDACTED)
    return result


def redact_sensitive_values(
    logger: Any,  # noqa: ANN401
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor: scrub secret values from all event fields."""
    if not _secret_values:
        return event_dict
    return {k: _scrub(v) for k, v in event_dict.items()}


__all__ = [
    'configure_logging',
    'get_logger',
    'redact_sensitive_values',
]
