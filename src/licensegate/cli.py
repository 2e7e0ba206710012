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

"""Command-line entry point.

Usage::

    licensegate [ROOT] [--config PATH] [--lock-file PATH] [--manifest PATH]
                [--no-repin] [--concurrency N] [--verbose | --quiet] [--json-log]

Exit codes: ``0`` when every gate passes, ``1`` on any error or gate
failure, ``2`` on invalid arguments.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from licensegate import __version__
from licensegate.config import load_config
from licensegate.errors import LicenseGateError
from licensegate.logging import configure_logging, get_logger
from licensegate.pipeline import generate_manifest
from licensegate.report import print_gate_report

logger = get_logger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{value!r} is not an integer') from None
    if number < 1:
        raise argparse.ArgumentTypeError(f'{value!r} must be at least 1')
    return number


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``licensegate``."""
    parser = argparse.ArgumentParser(
        prog='licensegate',
        description='Reconcile Maven dependencies with their licenses and validate the manifest.',
    )
    parser.add_argument(
        'root',
        nargs='?',
        type=Path,
        default=Path('.'),
        help='Workspace root (default: current directory).',
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Config file (default: ROOT/licensegate.toml if present).',
    )
    parser.add_argument(
        '--lock-file',
        default=None,
        help='Lock file path, relative to ROOT.',
    )
    parser.add_argument(
        '--manifest',
        default=None,
        help='Manifest path, relative to ROOT.',
    )
    parser.add_argument(
        '--no-repin',
        action='store_true',
        help='Skip re-pinning and use the lock file as it is.',
    )
    parser.add_argument(
        '--concurrency',
        type=_positive_int,
        default=None,
        help='Maximum number of concurrent POM fetches.',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='Enable debug logging.',
    )
    verbosity.add_argument(
        '-q',
        '--quiet',
        action='store_true',
        help='Only log warnings and errors.',
    )
    parser.add_argument(
        '--json-log',
        action='store_true',
        help='Emit logs as JSON.',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run licensegate and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    console = Console()

    try:
        config = load_config(args.root, args.config).with_overrides(
            lock_file=args.lock_file,
            manifest=args.manifest,
            repin=False if args.no_repin else None,
            fetch_concurrency=args.concurrency,
        )
        result = asyncio.run(generate_manifest(config))
    except LicenseGateError as exc:
        logger.error('run_failed', code=exc.code.value, error=exc.message)
        if exc.hint:
            console.print(f'   [cyan]=[/] [green]help[/]: {exc.hint}')
        return 1

    print_gate_report(result.report, console=console)
    return 0 if result.report.ok else 1


__all__ = [
    'build_parser',
    'main',
]
